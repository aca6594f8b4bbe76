"""Exceptions raised by intervalset.

All of them are programming errors: operations are pure in-memory
computations, so nothing here is transient or worth retrying.
"""

from typing import Any


class IntervalSetError(Exception):
    """Base class for every error raised by intervalset."""


class InvalidOperand(IntervalSetError, TypeError):
    """An operand is neither an Interval nor an IntervalSet where one is required."""

    @classmethod
    def unexpected(cls, operand: Any, operation: str) -> "InvalidOperand":
        return cls(
            f"{operation}() expects an Interval or an IntervalSet.\n"
            f"Got {type(operand).__name__!r}: {operand!r}\n"
            f"Hint: Wrap bounds in an Interval: Interval(start=0, end=10)\n"
            f"      Or build a set first: interval_set((0, 10), (20, 30))"
        )


class InvalidArgument(IntervalSetError, ValueError):
    """A restricted view was built from something other than an OrderedMap."""
