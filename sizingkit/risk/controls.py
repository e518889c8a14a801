"""Risk limit checks for sized positions.

Checks a SizingResult against portfolio-level limits:
1. Position weight against the maximum position weight
2. Actual capital at risk against the maximum risk percentage
3. Zero-share results, which are never actionable

Violations are reported as warnings, never raised.
"""

from ..core.exceptions import DataValidationError
from ..core.logging_config import get_logger
from ..core.models import SizingResult, ValidationReport

logger = get_logger(__name__)


def validate_position_size(
    result: SizingResult,
    portfolio_value: float,
    max_position_weight: float = 0.10,
    max_risk_percent: float = 0.05
) -> ValidationReport:
    """Check a sizing result against position and risk limits.

    Args:
        result: Output of one of the sizing strategies
        portfolio_value: Total portfolio value
        max_position_weight: Maximum position weight (default 0.10 = 10%)
        max_risk_percent: Maximum capital at risk (default 0.05 = 5%)

    Returns:
        ValidationReport whose is_valid is False if any limit is broken or
        the result holds zero shares. A risk/reward ratio below 1:1 adds a
        warning without affecting validity.

    Raises:
        DataValidationError: portfolio_value is not positive
    """
    if portfolio_value <= 0:
        raise DataValidationError("portfolio_value", portfolio_value, "must be positive")

    warnings: list[str] = []
    is_valid = True

    if result.portfolio_weight > max_position_weight:
        warnings.append(
            f"Position size ({result.portfolio_weight * 100:.1f}%) exceeds "
            f"maximum allowed ({max_position_weight * 100:.0f}%)"
        )
        is_valid = False

    actual_risk_percent = result.risk_amount / portfolio_value
    if actual_risk_percent > max_risk_percent:
        warnings.append(
            f"Risk amount ({actual_risk_percent * 100:.2f}%) exceeds "
            f"maximum allowed ({max_risk_percent * 100:.0f}%)"
        )
        is_valid = False

    if result.shares == 0:
        warnings.append("Calculated position size is zero")
        is_valid = False

    if result.risk_reward_ratio is not None and result.risk_reward_ratio < 1:
        warnings.append(
            f"Risk/reward ratio ({result.risk_reward_ratio:.2f}) is less than 1:1"
        )

    if not is_valid:
        logger.info("position_size_rejected", method=result.method.value, warnings=warnings)

    return ValidationReport(is_valid=is_valid, warnings=warnings)
