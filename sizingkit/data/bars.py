"""Price history loading for ATR calculations.

Reads OHLC bars from CSV files and validates every row before the bars
reach the indicators. Loaded frames are cached per file.
"""

from pathlib import Path

import pandas as pd
from pydantic import ValidationError

from ..core.cache import TTLCache
from ..core.config import settings
from ..core.exceptions import DataFetchError, DataValidationError
from ..core.logging_config import get_logger
from ..core.models import OHLCBar

logger = get_logger(__name__)

REQUIRED_COLUMNS = ("high", "low", "close")

_bar_cache: TTLCache[pd.DataFrame] = TTLCache(
    max_size=settings.SK_CACHE_MAX_SIZE,
    ttl_seconds=settings.SK_CACHE_TTL_SECONDS
)


def parse_bars(df: pd.DataFrame, source: str = "<frame>") -> pd.DataFrame:
    """Normalize and validate a raw OHLC frame.

    Args:
        df: Frame with at least high, low and close columns (any case)
        source: Name used in error messages

    Returns:
        Frame with lower-case columns, sorted oldest first when a date
        column is present

    Raises:
        DataValidationError: Required columns are missing or a row fails
            price validation
    """
    df = df.rename(columns=lambda c: str(c).strip().lower())

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise DataValidationError("columns", missing, f"missing from {source}")

    if "date" in df.columns:
        try:
            df["date"] = pd.to_datetime(df["date"]).dt.date
        except (ValueError, TypeError) as e:
            raise DataValidationError(f"{source} date", "date", str(e)) from e
        df = df.sort_values("date").reset_index(drop=True)

    fields = [c for c in ("date", "open", "high", "low", "close", "volume") if c in df.columns]
    for row_num, row in enumerate(df[fields].to_dict("records")):
        try:
            OHLCBar(**{k: v for k, v in row.items() if not pd.isna(v)})
        except ValidationError as e:
            raise DataValidationError(
                f"{source} row {row_num}", row, e.errors()[0]["msg"]
            ) from e

    return df


def load_bars(path: str | Path, use_cache: bool = True) -> pd.DataFrame:
    """Load validated OHLC bars from a CSV file.

    Args:
        path: CSV file with high, low, close and optionally date, open, volume
        use_cache: Reuse a recently loaded frame for the same file

    Returns:
        Validated frame, oldest bar first

    Raises:
        DataFetchError: File cannot be read
        DataValidationError: File contents fail validation
    """
    path = Path(path)
    key = str(path.resolve())

    if use_cache:
        cached = _bar_cache.get(key)
        if cached is not None:
            logger.debug("bars_cache_hit", path=key)
            return cached.copy()

    try:
        raw = pd.read_csv(path)
    except (FileNotFoundError, pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise DataFetchError(key, f"Could not read price history from {key}: {e}") from e

    bars = parse_bars(raw, source=path.name)
    logger.info("bars_loaded", path=key, rows=len(bars))

    if use_cache:
        _bar_cache.set(key, bars)
    return bars.copy()


def clear_bar_cache() -> None:
    _bar_cache.clear()
