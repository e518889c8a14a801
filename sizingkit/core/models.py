"""Domain models with validation for sizingkit."""
from datetime import date as Date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SizingMethod(str, Enum):
    """Tag identifying which strategy produced a sizing result."""

    FIXED_RISK = "fixed_risk"
    KELLY = "kelly"
    ATR = "atr"


class PositionSizeRequest(BaseModel):
    """Trade parameters for a single sizing calculation.

    Fractions (risk_percent, win_rate, avg_win, avg_loss) are decimals,
    e.g. 0.02 for 2%. Kelly-only and ATR-only fields are ignored by the
    other strategies. NaN and infinity are rejected for every field.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    portfolio_value: float = Field(..., gt=0, description="Total capital available")
    entry_price: float = Field(..., gt=0, description="Intended entry price per unit")
    stop_loss: float = Field(..., description="Stop price per unit; ignored by ATR sizing")
    target_price: float | None = Field(None, description="Optional take-profit price")
    risk_percent: float = Field(0.0, ge=0, le=1, description="Fraction of portfolio to risk")

    # Kelly
    win_rate: float = Field(0.5, ge=0, le=1)
    avg_win: float = Field(0.10, ge=0)
    avg_loss: float = Field(0.05, ge=0)

    # ATR
    atr_value: float = Field(0.0, description="Precomputed Average True Range")
    atr_multiplier: float = Field(2.0, description="Stop distance in ATR units")

    @property
    def has_target(self) -> bool:
        # A zero target is treated the same as no target.
        return bool(self.target_price)


class SizingResult(BaseModel):
    """Standardized output shared by every sizing strategy."""

    model_config = ConfigDict(frozen=True)

    method: SizingMethod
    shares: int = Field(..., ge=0)
    position_size: float
    portfolio_weight: float
    risk_amount: float
    risk_reward_ratio: float | None = None
    stop_loss: float
    target_price: float | None = None


class ValidationReport(BaseModel):
    """Outcome of checking a sizing result against portfolio limits."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    warnings: list[str] = Field(default_factory=list)


class OHLCBar(BaseModel):
    """Validated price bar from a price history file."""

    model_config = ConfigDict(frozen=True)

    date: Date | None = None
    open: float | None = Field(None, gt=0)
    high: float = Field(..., gt=0)
    low: float = Field(..., gt=0)
    close: float = Field(..., gt=0)
    volume: float | None = Field(None, ge=0)

    @model_validator(mode='after')
    def validate_prices(self):
        """Validate price relationships."""
        if self.high < self.low:
            raise ValueError(f"High ({self.high}) cannot be less than low ({self.low})")

        if self.close > self.high:
            raise ValueError(f"Close ({self.close}) cannot exceed high ({self.high})")

        if self.close < self.low:
            raise ValueError(f"Close ({self.close}) cannot be below low ({self.low})")

        return self
