"""Custom exception classes for sizingkit.

Degenerate sizing inputs (stop equal to entry, non-positive ATR) are not
errors; strategies return zero-valued results for them. These exceptions
cover inputs no formula can give a number for, bad price history and bad
configuration.
"""


class SizingKitError(Exception):
    """Base exception for all sizingkit errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# Data Errors
class DataError(SizingKitError):
    """Base class for price-history errors."""
    pass


class DataFetchError(DataError):
    """Error reading price history from a source."""

    def __init__(self, source: str, message: str = ""):
        super().__init__(
            message=message or f"Failed to read data from {source}",
            details={"source": source}
        )


class DataValidationError(DataError):
    """Error validating an input value or data row."""

    def __init__(self, field: str, value: object, reason: str):
        super().__init__(
            message=f"Validation failed for {field}: {reason}",
            details={"field": field, "value": str(value), "reason": reason}
        )


class InsufficientDataError(DataError):
    """Not enough data points for calculation."""

    def __init__(self, required: int, available: int, context: str = ""):
        super().__init__(
            message=f"Insufficient data: need {required}, have {available}",
            details={"required": required, "available": available, "context": context}
        )


# Sizing Errors
class SizingError(SizingKitError):
    """Base class for position sizing errors."""
    pass


class InvalidKellyInputError(SizingError):
    """Kelly inputs leave the win/loss payoff ratio undefined."""

    def __init__(self, avg_win: float, avg_loss: float):
        super().__init__(
            message=(
                f"Kelly sizing needs a non-zero average loss "
                f"(avg_win={avg_win}, avg_loss={avg_loss})"
            ),
            details={"avg_win": avg_win, "avg_loss": avg_loss}
        )


class UnknownSizingMethodError(SizingError):
    """Requested sizing method does not exist."""

    def __init__(self, method: str):
        super().__init__(
            message=f"Unknown sizing method: {method}",
            details={"method": method}
        )


# Configuration Errors
class ConfigurationError(SizingKitError):
    """Configuration error."""

    def __init__(self, setting: str, message: str):
        super().__init__(
            message=f"Configuration error for {setting}: {message}",
            details={"setting": setting}
        )
