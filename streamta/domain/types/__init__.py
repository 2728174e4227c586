from .tvalue import TValue, EMPTY_TVALUE, utc_now
from .tbar import TBar, EMPTY_TBAR

__all__ = ['TValue', 'TBar', 'EMPTY_TVALUE', 'EMPTY_TBAR', 'utc_now']
