# Price history loading

from .bars import (
    load_bars,
    parse_bars,
    clear_bar_cache
)

__all__ = [
    'load_bars',
    'parse_bars',
    'clear_bar_cache'
]
