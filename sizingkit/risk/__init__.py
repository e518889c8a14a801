# Position sizing and risk limit checks

from .sizing import (
    calculate_fixed_risk_size,
    calculate_kelly_size,
    calculate_atr_size,
    calculate_position_size,
    kelly_fraction,
    round_to_lot
)

from .controls import validate_position_size

__all__ = [
    # Sizing strategies
    'calculate_fixed_risk_size',
    'calculate_kelly_size',
    'calculate_atr_size',
    'calculate_position_size',
    'kelly_fraction',
    'round_to_lot',

    # Limit checks
    'validate_position_size'
]
