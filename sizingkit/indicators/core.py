"""Volatility indicators for sizingkit.

ATR here is a simple moving average of true range, not Wilder's
exponential smoothing.
"""
from typing import Sequence

import numpy as np
import pandas as pd

from ..core.exceptions import DataValidationError


def true_range(high: pd.Series, low: pd.Series, close: pd.Series) -> pd.Series:
    """True Range per bar; the first bar has no prior close and is NaN."""
    prev_close = close.shift(1)
    tr = pd.concat([
        (high - low),
        (high - prev_close).abs(),
        (low - prev_close).abs()
    ], axis=1).max(axis=1, skipna=False)
    return tr


def atr_series(high: pd.Series, low: pd.Series, close: pd.Series, n: int = 14) -> pd.Series:
    """Average True Range as a rolling simple mean of the last n true ranges"""
    return true_range(high, low, close).rolling(n, min_periods=n).mean()


def calculate_atr(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14
) -> float:
    """Average True Range over the most recent ``period`` bars.

    Args:
        highs: Per-bar high prices, oldest first
        lows: Per-bar low prices, oldest first
        closes: Per-bar close prices, oldest first
        period: Lookback window (default 14)

    Returns:
        ATR in price points, or 0.0 when any sequence has fewer than
        ``period + 1`` entries. Callers must read 0.0 as "insufficient
        data", not as zero volatility.

    Examples:
        >>> calculate_atr([10, 11, 12], [9, 10, 11], [9.5, 10.5, 11.5], period=2)
        1.5
    """
    if period < 1:
        raise DataValidationError("period", period, "must be at least 1")

    if min(len(highs), len(lows), len(closes)) < period + 1:
        return 0.0

    # Unequal inputs are aligned on the shortest one.
    n = min(len(highs), len(lows), len(closes))
    high = pd.Series(np.asarray(highs, dtype=float)[:n])
    low = pd.Series(np.asarray(lows, dtype=float)[:n])
    close = pd.Series(np.asarray(closes, dtype=float)[:n])

    recent = true_range(high, low, close).iloc[1:].iloc[-period:]
    return float(recent.sum() / len(recent))


def atr_from_bars(bars: pd.DataFrame, period: int = 14) -> float:
    """ATR from a frame with ``high``, ``low`` and ``close`` columns."""
    missing = {"high", "low", "close"} - set(bars.columns)
    if missing:
        raise DataValidationError("bars", sorted(missing), "missing price columns")
    return calculate_atr(
        bars["high"].to_numpy(),
        bars["low"].to_numpy(),
        bars["close"].to_numpy(),
        period
    )
