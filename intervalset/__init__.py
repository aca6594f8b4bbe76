import logging

from .core import IntervalSet, interval_set
from .errors import IntervalSetError, InvalidArgument, InvalidOperand
from .interval import Interval
from .ordered_map import Entry, OrderedMap

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Interval",
    "IntervalSet",
    "interval_set",
    "IntervalSetError",
    "InvalidOperand",
    "InvalidArgument",
    "OrderedMap",
    "Entry",
]
