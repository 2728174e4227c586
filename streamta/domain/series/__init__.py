from .publisher import Publisher, get_publisher
from .circular_buffer import CircularBuffer
from .tseries import TSeries
from .tbar_series import TBarSeries

__all__ = ['Publisher', 'get_publisher', 'CircularBuffer', 'TSeries', 'TBarSeries']
