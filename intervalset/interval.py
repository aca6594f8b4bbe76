from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

from intervalset.errors import InvalidOperand


class Comparable(Protocol):
    def __lt__(self, other: Any, /) -> bool: ...


class Translatable(Comparable, Protocol):
    """Element that can be moved by an offset (needed by the affine transforms)."""

    def __add__(self, offset: Any, /) -> Any: ...

    def __sub__(self, offset: Any, /) -> Any: ...


T = TypeVar("T", bound=Comparable)


@dataclass(frozen=True, kw_only=True)
class Interval(Generic[T]):
    """Half-open interval ``[start, end)``.

    Reversed and zero-width intervals are valid values and denote the empty
    set. They are accepted as operands but never stored in an IntervalSet.
    """

    start: T
    end: T

    @property
    def is_empty(self) -> bool:
        return not self.start < self.end

    def __contains__(self, element: Any) -> bool:
        return self.start <= element < self.end

    def overlaps(self, other: "Interval[T]") -> bool:
        """True if both intervals share at least one element."""
        if self.is_empty or other.is_empty:
            return False
        return self.start < other.end and other.start < self.end

    def touches(self, other: "Interval[T]") -> bool:
        """True if one interval ends exactly where the other starts."""
        if self.is_empty or other.is_empty:
            return False
        return self.end == other.start or other.end == self.start

    @classmethod
    def coerce(cls, obj: Any) -> "Interval[Any]":
        """Normalize construction input to a half-open Interval.

        Accepts:
        - Interval: returned as-is
        - (start, end) tuple or list: end is treated as exclusive
        - range with step 1: ``range(a, b)`` covers ``[a, b)``

        Raises:
            InvalidOperand: for anything else
        """
        if isinstance(obj, Interval):
            return obj
        if isinstance(obj, range):
            if obj.step != 1:
                raise InvalidOperand(
                    f"Only ranges with step 1 describe an interval.\n"
                    f"Got {obj!r}\n"
                    f"Hint: Use range({obj.start}, {obj.stop})"
                )
            return cls(start=obj.start, end=obj.stop)
        if isinstance(obj, (tuple, list)) and len(obj) == 2:
            return cls(start=obj[0], end=obj[1])
        raise InvalidOperand(
            f"Cannot build an Interval from {type(obj).__name__!r}: {obj!r}\n"
            f"Hint: Pass Interval(start=..., end=...), a (start, end) tuple "
            f"or a range"
        )

    def __str__(self) -> str:
        return f"[{self.start}, {self.end})"
