"""Command-line position sizing.

Sizes a single trade with one of the sizing strategies, rounds it to the
instrument's lot size, checks it against the portfolio limits and prints
the result.

Usage:
    python -m sizingkit.jobs.size_position --entry 50 --stop 48 --risk-pct 2
    python -m sizingkit.jobs.size_position --method atr --entry 50 --bars spy.csv
"""

import argparse
import json
import sys

from pydantic import ValidationError

from ..core.config import settings
from ..core.exceptions import InsufficientDataError, SizingKitError
from ..core.logging_config import LOG_LEVELS, get_logger, setup_logging
from ..core.models import PositionSizeRequest, SizingMethod, SizingResult, ValidationReport
from ..data.bars import load_bars
from ..indicators.core import atr_from_bars
from ..risk.controls import validate_position_size
from ..risk.sizing import calculate_position_size, round_to_lot

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="sizingkit Position Sizing"
    )
    parser.add_argument(
        "--method",
        choices=[m.value for m in SizingMethod],
        default=SizingMethod.FIXED_RISK.value,
        help="Sizing strategy (default fixed_risk)"
    )
    parser.add_argument("--portfolio", type=float, default=settings.SK_PORTFOLIO_VALUE,
                        help="Total portfolio value")
    parser.add_argument("--entry", type=float, required=True, help="Entry price per share")
    parser.add_argument("--stop", type=float, default=None,
                        help="Stop-loss price (required unless --method atr)")
    parser.add_argument("--target", type=float, default=None, help="Take-profit price")
    parser.add_argument("--risk-pct", type=float, default=settings.SK_RISK_PERCENT * 100,
                        help="Percent of portfolio to risk per trade")

    kelly = parser.add_argument_group("kelly")
    kelly.add_argument("--win-rate", type=float, default=settings.SK_KELLY_WIN_RATE * 100,
                       help="Winning trade percentage")
    kelly.add_argument("--avg-win", type=float, default=settings.SK_KELLY_AVG_WIN * 100,
                       help="Average win in percent")
    kelly.add_argument("--avg-loss", type=float, default=settings.SK_KELLY_AVG_LOSS * 100,
                       help="Average loss in percent")

    atr = parser.add_argument_group("atr")
    atr.add_argument("--atr", type=float, default=None, help="Precomputed ATR in price points")
    atr.add_argument("--bars", type=str, default=None,
                     help="CSV price history (high, low, close) to compute ATR from")
    atr.add_argument("--atr-period", type=int, default=settings.SK_ATR_PERIOD,
                     help="ATR lookback period")
    atr.add_argument("--atr-mult", type=float, default=settings.SK_ATR_MULTIPLIER,
                     help="Stop distance in ATR units")

    limits = parser.add_argument_group("limits")
    limits.add_argument("--lot-size", type=int, default=settings.SK_LOT_SIZE,
                        help="Round shares down to this lot size")
    limits.add_argument("--max-weight", type=float,
                        default=settings.SK_MAX_POSITION_WEIGHT * 100,
                        help="Maximum position weight in percent")
    limits.add_argument("--max-risk", type=float,
                        default=settings.SK_MAX_RISK_PERCENT * 100,
                        help="Maximum capital at risk in percent")

    parser.add_argument("--json", action="store_true", help="Print JSON instead of a report")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS,
                        default=settings.SK_LOG_LEVEL.upper(), help="Logging level")
    parser.add_argument("--log-file", default=settings.SK_LOG_FILE or None,
                        help="Also write JSON log records to this file")
    return parser


def resolve_atr(args: argparse.Namespace) -> float:
    """ATR from --atr, or computed from --bars; 0.0 when neither is given."""
    if args.atr is not None:
        return args.atr
    if args.bars is None:
        return 0.0

    bars = load_bars(args.bars)
    if len(bars) < args.atr_period + 1:
        raise InsufficientDataError(
            required=args.atr_period + 1,
            available=len(bars),
            context=f"ATR from {args.bars}"
        )

    value = atr_from_bars(bars, args.atr_period)
    if value == 0:
        # Flat history: sized as zero, reported by validation.
        logger.warning("atr_is_zero", source=args.bars, period=args.atr_period)
        return value
    logger.info("atr_computed", source=args.bars, period=args.atr_period, atr=value)
    return value


def apply_lot_size(
    result: SizingResult,
    entry_price: float,
    portfolio_value: float,
    lot_size: int
) -> SizingResult:
    """Round a result's shares to the lot size and recompute dependent fields."""
    shares = round_to_lot(result.shares, lot_size)
    if shares == result.shares:
        return result

    risk_per_share = abs(entry_price - result.stop_loss)
    position_size = shares * entry_price
    return result.model_copy(update={
        "shares": shares,
        "position_size": position_size,
        "portfolio_weight": position_size / portfolio_value,
        "risk_amount": shares * risk_per_share,
    })


def print_report(result: SizingResult, report: ValidationReport, portfolio_value: float):
    print("=" * 50)
    print(f"POSITION SIZE ({result.method.value})")
    print("=" * 50)
    print(f"  Shares:          {result.shares:,}")
    print(f"  Position size:   ${result.position_size:,.2f}")
    print(f"  Portfolio weight: {result.portfolio_weight:.2%}")
    print(f"  Stop loss:       ${result.stop_loss:,.2f}")
    if result.target_price is not None:
        print(f"  Target:          ${result.target_price:,.2f}")
    print(f"  Risk amount:     ${result.risk_amount:,.2f} "
          f"({result.risk_amount / portfolio_value:.2%} of portfolio)")
    if result.risk_reward_ratio is not None:
        print(f"  Risk/reward:     1:{result.risk_reward_ratio:.2f}")
    print()
    print(f"VALIDATION: {'OK' if report.is_valid else 'FAILED'}")
    for warning in report.warnings:
        print(f"  - {warning}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        setup_logging(
            log_level=args.log_level,
            json_logs=settings.SK_JSON_LOGS,
            log_file=args.log_file
        )
    except SizingKitError as e:
        print(f"ERROR: {e.message}", file=sys.stderr)
        return EXIT_ERROR

    if args.method != SizingMethod.ATR.value and args.stop is None:
        parser.error(f"--stop is required for --method {args.method}")

    try:
        atr_value = resolve_atr(args) if args.method == SizingMethod.ATR.value else 0.0

        request = PositionSizeRequest(
            portfolio_value=args.portfolio,
            entry_price=args.entry,
            stop_loss=args.entry if args.stop is None else args.stop,
            target_price=args.target,
            risk_percent=args.risk_pct / 100,
            win_rate=args.win_rate / 100,
            avg_win=args.avg_win / 100,
            avg_loss=args.avg_loss / 100,
            atr_value=atr_value,
            atr_multiplier=args.atr_mult,
        )

        result = calculate_position_size(request, args.method)
        result = apply_lot_size(result, request.entry_price, request.portfolio_value, args.lot_size)
        report = validate_position_size(
            result,
            request.portfolio_value,
            max_position_weight=args.max_weight / 100,
            max_risk_percent=args.max_risk / 100,
        )

    except SizingKitError as e:
        logger.error("sizing_failed", error=e.message, **e.details)
        print(f"ERROR: {e.message}", file=sys.stderr)
        return EXIT_ERROR

    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"])
            print(f"ERROR: invalid {field}: {err['msg']}", file=sys.stderr)
        return EXIT_ERROR

    if args.json:
        print(json.dumps({
            "result": result.model_dump(mode="json"),
            "validation": report.model_dump(mode="json"),
        }, indent=2))
    else:
        print_report(result, report, request.portfolio_value)

    return EXIT_OK if report.is_valid else EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
