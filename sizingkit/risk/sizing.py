"""Position sizing algorithms for sizingkit.

Implements three position sizing methods:
1. Fixed-risk sizing: lose a fixed fraction of the portfolio if stopped out
2. Kelly sizing: half-Kelly fraction of the portfolio, capped at 25%
3. ATR sizing: stop distance and size both derived from volatility

Every strategy is a pure function from a PositionSizeRequest to a
SizingResult. Degenerate inputs produce a zero result instead of an error.
"""

import math

from ..core.exceptions import (
    DataValidationError,
    InvalidKellyInputError,
    UnknownSizingMethodError
)
from ..core.logging_config import get_logger
from ..core.models import PositionSizeRequest, SizingMethod, SizingResult

logger = get_logger(__name__)

KELLY_DAMPING = 0.5
KELLY_CAP = 0.25


def _zero_result(
    method: SizingMethod,
    stop_loss: float,
    target_price: float | None
) -> SizingResult:
    return SizingResult(
        method=method,
        shares=0,
        position_size=0.0,
        portfolio_weight=0.0,
        risk_amount=0.0,
        risk_reward_ratio=None,
        stop_loss=stop_loss,
        target_price=target_price,
    )


def _reward_ratio(request: PositionSizeRequest, risk_per_share: float) -> float | None:
    if not request.has_target or risk_per_share <= 0:
        return None
    reward = abs(request.target_price - request.entry_price)
    return reward / risk_per_share


def calculate_fixed_risk_size(request: PositionSizeRequest) -> SizingResult:
    """Size a position so a stop-out loses ``risk_percent`` of the portfolio.

    Args:
        request: Trade parameters; uses portfolio_value, entry_price,
            stop_loss, target_price and risk_percent

    Returns:
        SizingResult tagged ``fixed_risk``. The reported risk_amount is the
        risk of the floored share count, which can be slightly below the
        requested amount.

    Examples:
        >>> calculate_fixed_risk_size(PositionSizeRequest(
        ...     portfolio_value=100000, entry_price=50, stop_loss=48,
        ...     risk_percent=0.02)).shares
        1000  # $100k * 2% / $2 per share
    """
    target = request.target_price or None
    risk_per_share = abs(request.entry_price - request.stop_loss)

    if risk_per_share == 0:
        logger.debug("fixed_risk_stop_at_entry", entry_price=request.entry_price)
        return _zero_result(SizingMethod.FIXED_RISK, request.stop_loss, target)

    risk_budget = request.portfolio_value * request.risk_percent
    shares = math.floor(risk_budget / risk_per_share)
    position_size = shares * request.entry_price

    logger.debug(
        "fixed_risk_sized",
        risk_budget=risk_budget,
        risk_per_share=risk_per_share,
        shares=shares,
    )

    return SizingResult(
        method=SizingMethod.FIXED_RISK,
        shares=shares,
        position_size=position_size,
        portfolio_weight=position_size / request.portfolio_value,
        risk_amount=shares * risk_per_share,
        risk_reward_ratio=_reward_ratio(request, risk_per_share),
        stop_loss=request.stop_loss,
        target_price=target,
    )


def kelly_fraction(win_rate: float, avg_win: float, avg_loss: float) -> float:
    """Half-Kelly fraction of the portfolio, clamped to [0, 0.25].

    f* = (b*p - q) / b, where b = avg_win / avg_loss, p = win_rate and
    q = 1 - p. A negative edge, or no average win at all, sizes to zero.

    Raises:
        InvalidKellyInputError: avg_loss is zero, so b is undefined
    """
    if avg_loss == 0:
        raise InvalidKellyInputError(avg_win, avg_loss)
    if avg_win == 0:
        return 0.0

    p = win_rate
    q = 1 - p
    b = avg_win / avg_loss

    fraction = (b * p - q) / b
    fraction = max(0.0, fraction * KELLY_DAMPING)
    return min(fraction, KELLY_CAP)


def calculate_kelly_size(request: PositionSizeRequest) -> SizingResult:
    """Size a position with the half-Kelly criterion.

    Args:
        request: Trade parameters; uses portfolio_value, entry_price,
            stop_loss, target_price, win_rate, avg_win and avg_loss

    Returns:
        SizingResult tagged ``kelly``

    Raises:
        InvalidKellyInputError: avg_loss is zero

    Examples:
        >>> calculate_kelly_size(PositionSizeRequest(
        ...     portfolio_value=100000, entry_price=20, stop_loss=19,
        ...     win_rate=0.6, avg_win=0.1, avg_loss=0.05)).shares
        1000  # b=2, f=0.4, half-Kelly 0.2 -> $20k / $20
    """
    fraction = kelly_fraction(request.win_rate, request.avg_win, request.avg_loss)

    shares = math.floor(request.portfolio_value * fraction / request.entry_price)
    position_size = shares * request.entry_price
    risk_per_share = abs(request.entry_price - request.stop_loss)

    logger.debug("kelly_sized", kelly_fraction=fraction, shares=shares)

    return SizingResult(
        method=SizingMethod.KELLY,
        shares=shares,
        position_size=position_size,
        portfolio_weight=position_size / request.portfolio_value,
        risk_amount=shares * risk_per_share,
        risk_reward_ratio=_reward_ratio(request, risk_per_share),
        stop_loss=request.stop_loss,
        target_price=request.target_price or None,
    )


def calculate_atr_size(request: PositionSizeRequest) -> SizingResult:
    """Derive the stop and the position size from a precomputed ATR.

    Risk per share = atr_value * atr_multiplier (stop distance)
    Stop loss = entry_price - stop distance (long positions only)
    Shares = portfolio_value * risk_percent / stop distance

    Args:
        request: Trade parameters; uses portfolio_value, entry_price,
            target_price, risk_percent, atr_value and atr_multiplier.
            The request's stop_loss is ignored.

    Returns:
        SizingResult tagged ``atr``. With a non-positive ATR the result is
        zero-sized and its stop_loss equals entry_price.

    Examples:
        >>> calculate_atr_size(PositionSizeRequest(
        ...     portfolio_value=100000, entry_price=50, stop_loss=50,
        ...     risk_percent=0.01, atr_value=2.0, atr_multiplier=2.0)).stop_loss
        46.0
    """
    target = request.target_price or None
    stop_distance = request.atr_value * request.atr_multiplier

    if request.atr_value <= 0 or stop_distance <= 0:
        logger.debug("atr_size_without_volatility", atr_value=request.atr_value)
        return _zero_result(SizingMethod.ATR, request.entry_price, target)

    stop_loss = request.entry_price - stop_distance
    risk_budget = request.portfolio_value * request.risk_percent
    shares = math.floor(risk_budget / stop_distance)
    position_size = shares * request.entry_price

    logger.debug(
        "atr_sized",
        stop_distance=stop_distance,
        risk_budget=risk_budget,
        shares=shares,
    )

    return SizingResult(
        method=SizingMethod.ATR,
        shares=shares,
        position_size=position_size,
        portfolio_weight=position_size / request.portfolio_value,
        risk_amount=shares * stop_distance,
        risk_reward_ratio=_reward_ratio(request, stop_distance),
        stop_loss=stop_loss,
        target_price=target,
    )


_STRATEGIES = {
    SizingMethod.FIXED_RISK: calculate_fixed_risk_size,
    SizingMethod.KELLY: calculate_kelly_size,
    SizingMethod.ATR: calculate_atr_size,
}


def calculate_position_size(
    request: PositionSizeRequest,
    method: SizingMethod | str = SizingMethod.FIXED_RISK
) -> SizingResult:
    """Run the sizing strategy named by ``method``.

    Raises:
        UnknownSizingMethodError: method is not one of fixed_risk, kelly, atr
    """
    try:
        strategy = _STRATEGIES[SizingMethod(method)]
    except ValueError:
        raise UnknownSizingMethodError(str(method)) from None
    return strategy(request)


def round_to_lot(shares: int, lot_size: int = 1) -> int:
    """Round a share count down to a whole number of lots.

    Examples:
        >>> round_to_lot(107, 10)
        100
    """
    if lot_size <= 0:
        raise DataValidationError("lot_size", lot_size, "must be positive")
    return math.floor(shares / lot_size) * lot_size
