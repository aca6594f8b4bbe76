import logging
from collections.abc import Iterable, Iterator
from typing import Any, Generic, overload

from typing_extensions import override

from intervalset.errors import InvalidArgument, InvalidOperand
from intervalset.interval import Interval, T
from intervalset.ordered_map import OrderedMap

logger = logging.getLogger(__name__)


class IntervalSet(Generic[T]):
    """A set of sorted, disjoint, half-open intervals.

    Intervals are stored in an ordered map keyed by their start. Two stored
    intervals never overlap and never touch: adding ``[1, 2)`` and ``[2, 3)``
    leaves a single ``[1, 3)``. The lower and upper bounds of the whole set
    are cached and kept up to date by every mutation.

    ``add``, ``remove`` and ``intersect`` (and the ``*_update`` transforms)
    mutate the set and return it; ``union``, ``difference``, ``intersection``,
    ``symmetric_difference``, ``shift``, ``buffer`` and ``convolve`` return a
    new set and leave both operands alone.

    Example:
        >>> s = interval_set((0, 1), (2, 3))
        >>> s.add(Interval(start=1, end=2))
        IntervalSet([0, 3))
    """

    def __init__(self, intervals: Iterable[Any] = ()) -> None:
        """Create an empty set, or the union of the given intervals.

        Args:
            intervals: Interval objects, (start, end) tuples or ranges
        """
        self._range_map: OrderedMap[T, Interval[T]] = OrderedMap()
        self._min: T | None = None
        self._max: T | None = None

        for item in intervals:
            self._add_interval(Interval.coerce(item))

    @classmethod
    def _from_map(cls, range_map: OrderedMap[T, Interval[T]]) -> "IntervalSet[T]":
        """Wrap an existing map (restricted views only)."""
        if not isinstance(range_map, OrderedMap):
            raise InvalidArgument(
                f"IntervalSet can only wrap an OrderedMap.\n"
                f"Got {type(range_map).__name__!r}: {range_map!r}"
            )
        interval_set = cls.__new__(cls)
        interval_set._range_map = range_map
        interval_set._update_bounds()
        return interval_set

    # -- basic accessors -------------------------------------------------

    @property
    def min(self) -> T | None:
        """Lower bound of the set, None if empty."""
        return self._min

    @property
    def max(self) -> T | None:
        """Upper bound (exclusive) of the set, None if empty."""
        return self._max

    @property
    def bounds(self) -> Interval[T] | None:
        """Interval spanning every stored interval, None if empty."""
        if self.is_empty:
            return None
        return Interval(start=self._min, end=self._max)

    @property
    def is_empty(self) -> bool:
        return self._range_map.is_empty()

    @property
    def count(self) -> int:
        """Number of stored (maximal) intervals."""
        return len(self._range_map)

    def __len__(self) -> int:
        return len(self._range_map)

    def __iter__(self) -> Iterator[Interval[T]]:
        return self._range_map.values()

    def clear(self) -> "IntervalSet[T]":
        self._range_map.clear()
        self._min = None
        self._max = None
        return self

    def clone(self) -> "IntervalSet[T]":
        """Return an independent set with the same intervals."""
        return type(self)().copy_from(self)

    def __copy__(self) -> "IntervalSet[T]":
        return self.clone()

    def copy_from(self, other: "IntervalSet[T]") -> "IntervalSet[T]":
        """Replace the content of this set by the content of ``other``."""
        if not isinstance(other, IntervalSet):
            raise InvalidOperand.unexpected(other, "copy_from")
        if other is self:
            return self
        self._range_map.clear()
        for interval in other:
            self._put(interval)
        self._min = other._min
        self._max = other._max
        return self

    # -- equality and rendering -----------------------------------------

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IntervalSet):
            return NotImplemented
        if self is other:
            return True
        if self.count != other.count or self.bounds != other.bounds:
            return False
        return all(lhs == rhs for lhs, rhs in zip(self, other))

    __hash__ = None  # type: ignore[assignment]

    def equals_set(self, other: "Interval[T] | IntervalSet[T]") -> bool:
        """True if ``other`` covers exactly the same elements.

        Unlike ``==`` this also compares against a single interval:

            >>> interval_set((1, 2)).equals_set(Interval(start=1, end=2))
            True
            >>> IntervalSet().equals_set(Interval(start=1, end=0))
            True
        """
        if isinstance(other, Interval):
            if self.is_empty and other.is_empty:
                return True
            return self.count == 1 and self.bounds == other
        if isinstance(other, IntervalSet):
            return self == other
        raise InvalidOperand.unexpected(other, "equals_set")

    @override
    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(str(interval) for interval in self)})"

    @override
    def __str__(self) -> str:
        return f"[{', '.join(str(interval) for interval in self)}]"

    # -- queries and relations ------------------------------------------

    def bounds_overlap(self, interval: Interval[T]) -> bool:
        """True if ``interval`` shares elements with the bounds of this set.

        Only the cached bounds are compared, no tree lookup is made.
        """
        if interval.is_empty or self.is_empty:
            return False
        return interval.start < self._max and interval.end > self._min

    def bounds_overlap_or_touch(self, interval: Interval[T]) -> bool:
        """Like ``bounds_overlap`` but also true when ``interval`` only touches."""
        if interval.is_empty or self.is_empty:
            return False
        return interval.start <= self._max and interval.end >= self._min

    def contains(self, item: Any) -> bool:
        """True if the element, interval or set is entirely part of this set.

        Elements must be comparable to the elements already stored.
        """
        if isinstance(item, Interval):
            return self._superset_interval(item)
        if isinstance(item, IntervalSet):
            return self._superset_interval_set(item)
        if item is None:
            return False
        floor = self._range_map.floor_entry(item)
        return floor is not None and floor.value.end > item

    def __contains__(self, item: Any) -> bool:
        return self.contains(item)

    def is_superset_of(self, other: "Interval[T] | IntervalSet[T]") -> bool:
        if isinstance(other, Interval):
            return self._superset_interval(other)
        if isinstance(other, IntervalSet):
            return self._superset_interval_set(other)
        raise InvalidOperand.unexpected(other, "is_superset_of")

    def is_subset_of(self, other: "Interval[T] | IntervalSet[T]") -> bool:
        if isinstance(other, Interval):
            return self._covered_by(other)
        if isinstance(other, IntervalSet):
            return other._superset_interval_set(self)
        raise InvalidOperand.unexpected(other, "is_subset_of")

    def is_proper_superset_of(self, other: "Interval[T] | IntervalSet[T]") -> bool:
        return not self.equals_set(other) and self.is_superset_of(other)

    def is_proper_subset_of(self, other: "Interval[T] | IntervalSet[T]") -> bool:
        return not self.equals_set(other) and self.is_subset_of(other)

    def intersects(self, other: "Interval[T] | IntervalSet[T]") -> bool:
        """True if this set and ``other`` have at least one element in common."""
        if isinstance(other, Interval):
            return self._intersects_interval(other)
        if isinstance(other, IntervalSet):
            if self.is_empty or other.is_empty:
                return False
            if not self.bounds_overlap(other.bounds):
                return False
            return any(
                other._intersects_interval(interval)
                for interval in self._sub_set(other.bounds)
            )
        raise InvalidOperand.unexpected(other, "intersects")

    def _superset_interval(self, interval: Interval[T]) -> bool:
        if interval.is_empty:
            return True
        if not self.bounds_overlap(interval):
            return False
        floor = self._range_map.floor_entry(interval.start)
        return floor is not None and floor.value.end >= interval.end

    def _superset_interval_set(self, other: "IntervalSet[T]") -> bool:
        if other is self or other.is_empty:
            return True
        if self.is_empty or not other.bounds_overlap(self.bounds):
            return False
        return all(self._superset_interval(interval) for interval in other)

    def _covered_by(self, interval: Interval[T]) -> bool:
        """True if ``interval`` spans the whole set (always true when empty)."""
        if self.is_empty:
            return True
        if interval.is_empty:
            return False
        return interval.start <= self._min and interval.end >= self._max

    def _intersects_interval(self, interval: Interval[T]) -> bool:
        if not self.bounds_overlap(interval):
            return False
        lower = self._range_map.lower_entry(interval.end)
        return lower is not None and lower.value.end > interval.start

    # -- restricted views -------------------------------------------------

    def _sub_set(self, interval: Interval[T]) -> "IntervalSet[T]":
        """Stored intervals overlapping ``interval``, untrimmed."""
        left = self._range_map.lower_entry(interval.start)
        include_left = left is not None and left.value.end > interval.start
        low = left.key if include_left else interval.start
        return type(self)._from_map(
            self._range_map.sub_map(low, True, interval.end, False)
        )

    def _head_set(self, value: T) -> "IntervalSet[T]":
        """Stored intervals starting before ``value``."""
        return type(self)._from_map(self._range_map.head_map(value, False))

    def _tail_set(self, value: T) -> "IntervalSet[T]":
        """Stored intervals reaching past ``value``, untrimmed."""
        left = self._range_map.lower_entry(value)
        include_left = left is not None and left.value.end > value
        low = left.key if include_left else value
        return type(self)._from_map(self._range_map.tail_map(low, True))

    # -- mutation core ----------------------------------------------------

    @overload
    def add(self, other: Interval[T]) -> "IntervalSet[T]": ...

    @overload
    def add(self, other: "IntervalSet[T]") -> "IntervalSet[T]": ...

    def add(self, other: "Interval[T] | IntervalSet[T]") -> "IntervalSet[T]":
        """Add the elements of ``other`` to this set, merging where needed.

        Args:
            other: Interval or IntervalSet to add

        Returns:
            self

        Raises:
            InvalidOperand: if ``other`` is neither an Interval nor an IntervalSet
        """
        if isinstance(other, Interval):
            return self._add_interval(other)
        if isinstance(other, IntervalSet):
            return self._add_interval_set(other)
        raise InvalidOperand.unexpected(other, "add")

    update = add

    def remove(self, other: "Interval[T] | IntervalSet[T]") -> "IntervalSet[T]":
        """Remove the elements of ``other`` from this set, splitting where needed.

        Returns:
            self

        Raises:
            InvalidOperand: if ``other`` is neither an Interval nor an IntervalSet
        """
        if isinstance(other, Interval):
            return self._remove_interval(other)
        if isinstance(other, IntervalSet):
            return self._remove_interval_set(other)
        raise InvalidOperand.unexpected(other, "remove")

    difference_update = remove

    def intersect(self, other: "Interval[T] | IntervalSet[T]") -> "IntervalSet[T]":
        """Keep only the elements this set shares with ``other``.

        Returns:
            self

        Raises:
            InvalidOperand: if ``other`` is neither an Interval nor an IntervalSet
        """
        if isinstance(other, Interval):
            return self._intersect_interval(other)
        if isinstance(other, IntervalSet):
            return self._intersect_interval_set(other)
        raise InvalidOperand.unexpected(other, "intersect")

    intersection_update = intersect

    def _put(self, interval: Interval[T]) -> None:
        self._range_map.put(interval.start, interval)

    def _put_and_update_bounds(self, interval: Interval[T]) -> None:
        self._put(interval)
        if self._min is None or self._max is None:
            self._min = interval.start
            self._max = interval.end
        else:
            self._min = min(interval.start, self._min)
            self._max = max(interval.end, self._max)

    def _update_bounds(self) -> None:
        first = self._range_map.first_entry()
        last = self._range_map.last_entry()
        if first is None or last is None:
            self._min = None
            self._max = None
        else:
            self._min = first.value.start
            self._max = last.value.end

    def _add_interval(self, interval: Interval[T]) -> "IntervalSet[T]":
        if interval.is_empty:
            return self

        if not self.bounds_overlap_or_touch(interval):
            self._put_and_update_bounds(interval)
            return self

        if self._covered_by(interval):
            self.clear()
            self._put_and_update_bounds(interval)
            return self

        # interval.start <= core keys <= interval.end
        core = self._range_map.sub_map(interval.start, True, interval.end, True)

        if len(core) == 1 and core.first_entry().value == interval:
            return self

        left = self._range_map.lower_entry(interval.start)
        right = left if core.is_empty() else core.last_entry()

        include_left = left is not None and left.value.end >= interval.start
        include_right = right is not None and right.value.end > interval.end

        start = left.key if include_left else interval.start
        end = right.value.end if include_right else interval.end

        if include_left:
            self._range_map.remove(left.key)
        for key in core.keys():
            self._range_map.remove(key)

        if include_left or include_right:
            interval = Interval(start=start, end=end)
        self._put_and_update_bounds(interval)
        return self

    def _add_interval_set(self, other: "IntervalSet[T]") -> "IntervalSet[T]":
        if other is self:
            logger.debug("Adding an interval set to itself, nothing to do")
            return self
        for interval in other:
            self._add_interval(interval)
        return self

    def _remove_interval(self, interval: Interval[T]) -> "IntervalSet[T]":
        if not self.bounds_overlap(interval):
            return self

        # interval.start <= core keys < interval.end
        core = self._range_map.sub_map(interval.start, True, interval.end, False)

        left = self._range_map.lower_entry(interval.start)
        right = left if core.is_empty() else core.last_entry()

        include_left = left is not None and left.value.end > interval.start
        include_right = right is not None and right.value.end > interval.end

        for key in core.keys():
            self._range_map.remove(key)

        # right first, left and right may be the same stored interval
        if include_right:
            self._put(Interval(start=interval.end, end=right.value.end))
        if include_left:
            self._put(Interval(start=left.key, end=interval.start))

        self._update_bounds()
        return self

    def _remove_interval_set(self, other: "IntervalSet[T]") -> "IntervalSet[T]":
        if other is self:
            logger.debug("Removing an interval set from itself, clearing")
            return self.clear()
        for interval in other:
            self._remove_interval(interval)
        return self

    def _intersect_interval(self, interval: Interval[T]) -> "IntervalSet[T]":
        if not self.bounds_overlap(interval):
            return self.clear()

        if self._covered_by(interval):
            return self

        # keys < interval.start and keys >= interval.end
        left_map = self._range_map.head_map(interval.start, False)
        right_map = self._range_map.tail_map(interval.end, True)

        left = left_map.last_entry()
        right = self._range_map.lower_entry(interval.end)

        include_left = left is not None and left.value.end > interval.start
        include_right = right is not None and right.value.end > interval.end

        for key in left_map.keys():
            self._range_map.remove(key)
        for key in right_map.keys():
            self._range_map.remove(key)

        if include_left:
            self._put(
                Interval(start=interval.start, end=min(left.value.end, interval.end))
            )
        if include_right:
            self._put(
                Interval(start=max(right.key, interval.start), end=interval.end)
            )

        self._update_bounds()
        return self

    def _intersect_interval_set(self, other: "IntervalSet[T]") -> "IntervalSet[T]":
        if other is self:
            logger.debug("Intersecting an interval set with itself, nothing to do")
            return self

        if other.is_empty or not self.bounds_overlap(other.bounds):
            return self.clear()

        result: IntervalSet[T] = type(self)()
        for interval in other._sub_set(self.bounds):
            part = self._sub_set(interval)._intersect_interval(interval)
            result._add_interval_set(part)

        logger.debug(
            "Replacing %d intervals with %d intersected intervals",
            self.count,
            result.count,
        )
        self._range_map = result._range_map
        self._min = result._min
        self._max = result._max
        return self

    # -- derived combinators ---------------------------------------------

    def union(self, other: "Interval[T] | IntervalSet[T]") -> "IntervalSet[T]":
        """Return a new set with the elements of both this set and ``other``."""
        if isinstance(other, Interval):
            result: IntervalSet[T] = type(self)()
            if not self._covered_by(other):
                result._add_interval_set(self)
            return result._add_interval(other)
        if isinstance(other, IntervalSet):
            return self.clone()._add_interval_set(other)
        raise InvalidOperand.unexpected(other, "union")

    def difference(self, other: "Interval[T] | IntervalSet[T]") -> "IntervalSet[T]":
        """Return a new set with the elements of this set that are not in ``other``."""
        if isinstance(other, Interval):
            return self._difference_interval(other)
        if isinstance(other, IntervalSet):
            return self._difference_interval_set(other)
        raise InvalidOperand.unexpected(other, "difference")

    def intersection(
        self, other: "Interval[T] | IntervalSet[T]"
    ) -> "IntervalSet[T]":
        """Return a new set with the elements common to this set and ``other``."""
        if isinstance(other, Interval):
            return self._intersection_interval(other)
        if isinstance(other, IntervalSet):
            return self._intersection_interval_set(other)
        raise InvalidOperand.unexpected(other, "intersection")

    def symmetric_difference(
        self, other: "Interval[T] | IntervalSet[T]"
    ) -> "IntervalSet[T]":
        """Return a new set with the elements in exactly one of this set and ``other``.

        Equivalent to ``(self | other) - (self & other)``.
        """
        return self.clone().symmetric_difference_update(other)

    def symmetric_difference_update(
        self, other: "Interval[T] | IntervalSet[T]"
    ) -> "IntervalSet[T]":
        common = self.intersection(other)
        return self.add(other).remove(common)

    def _difference_interval(self, interval: Interval[T]) -> "IntervalSet[T]":
        result: IntervalSet[T] = type(self)()
        if self._covered_by(interval):
            return result
        if not self.bounds_overlap(interval):
            return result.copy_from(self)

        result._add_interval_set(self._head_set(interval.start))
        result._add_interval_set(self._tail_set(interval.end))
        return result._remove_interval(interval)

    def _difference_interval_set(self, other: "IntervalSet[T]") -> "IntervalSet[T]":
        result: IntervalSet[T] = type(self)()
        if other is self or self.is_empty:
            return result

        result.copy_from(self)
        if not other.is_empty and self.bounds_overlap(other.bounds):
            result._remove_interval_set(other)
        return result

    def _intersection_interval(self, interval: Interval[T]) -> "IntervalSet[T]":
        result: IntervalSet[T] = type(self)()
        if not self.bounds_overlap(interval):
            return result
        if self._covered_by(interval):
            return result.copy_from(self)

        result._add_interval_set(self._sub_set(interval))
        return result._intersect_interval(interval)

    def _intersection_interval_set(self, other: "IntervalSet[T]") -> "IntervalSet[T]":
        result: IntervalSet[T] = type(self)()
        if other.is_empty or not self.bounds_overlap(other.bounds):
            return result

        result.copy_from(self)
        return result._intersect_interval_set(other._sub_set(self.bounds))

    # -- affine transforms ------------------------------------------------

    def shift(self, amount: Any) -> "IntervalSet[T]":
        """Return a new set with every interval moved by ``amount``."""
        return self.clone().shift_update(amount)

    def shift_update(self, amount: Any) -> "IntervalSet[T]":
        """Move every interval by ``amount`` in place.

        A translation keeps gaps and order, so intervals are reinserted
        without merging. Offsets that are not translations (month arithmetic
        clamps to the end of the month) can empty or join intervals; those
        results go through ``add``. ``shift_update(0)`` is not short-cut:
        elements are not assumed to be numbers.
        """
        shifted = [
            Interval(start=interval.start + amount, end=interval.end + amount)
            for interval in self
        ]
        translated = all(not interval.is_empty for interval in shifted) and all(
            left.end < right.start for left, right in zip(shifted, shifted[1:])
        )
        if not translated:
            logger.debug("Shift by %r collapsed intervals, merging", amount)
            return self._rebuild(shifted)

        self._range_map.clear()
        for interval in shifted:
            self._put(interval)
        self._update_bounds()
        return self

    def buffer(self, left: Any, right: Any) -> "IntervalSet[T]":
        """Return a new set with ``left`` and ``right`` margins added to each interval.

        Negative margins shrink intervals; intervals shrunk to nothing are
        dropped.

            >>> interval_set((1, 2)).buffer(1, 2)
            IntervalSet([0, 4))
            >>> interval_set((1, 2)).buffer(-0.5, -0.5)
            IntervalSet()
        """
        return self.clone().buffer_update(left, right)

    def buffer_update(self, left: Any, right: Any) -> "IntervalSet[T]":
        """In-place form of ``buffer``."""
        return self._rebuild(
            Interval(start=interval.start - left, end=interval.end + right)
            for interval in self
        )

    def convolve(self, other: Any) -> "IntervalSet[T]":
        """Return the Minkowski sum ``{a + b | a in self, b in other}``.

        ``other`` may be a single element (a shift), an Interval (a buffer;
        empty or reversed intervals give the empty set) or an IntervalSet.

            >>> interval_set((0, 4)).convolve(Interval(start=-1, end=2))
            IntervalSet([-1, 6))
            >>> interval_set((0, 1), (10, 12)).convolve(interval_set((-2, 1), (1, 2)))
            IntervalSet([-2, 3), [8, 14))
        """
        return self.clone().convolve_update(other)

    def convolve_update(self, other: Any) -> "IntervalSet[T]":
        """In-place form of ``convolve``."""
        if isinstance(other, Interval):
            return self._convolve_interval(other)
        if isinstance(other, IntervalSet):
            return self._convolve_interval_set(other)
        return self.shift_update(other)

    def _convolve_interval(self, offset: Interval[Any]) -> "IntervalSet[T]":
        if offset.is_empty:
            return self.clear()
        return self._rebuild(
            Interval(start=interval.start + offset.start, end=interval.end + offset.end)
            for interval in self
        )

    def _convolve_interval_set(self, other: "IntervalSet[Any]") -> "IntervalSet[T]":
        # build every partial result before clearing, other may be self
        parts = [self.clone()._convolve_interval(offset) for offset in other]
        logger.debug("Convolving %d intervals with %d offsets", self.count, len(parts))
        self.clear()
        for part in parts:
            self._add_interval_set(part)
        return self

    def _rebuild(self, intervals: Iterable[Interval[T]]) -> "IntervalSet[T]":
        """Replace the content with ``intervals``, merging and dropping empties."""
        candidates = [interval for interval in intervals if not interval.is_empty]
        self.clear()
        for interval in candidates:
            self._add_interval(interval)
        return self

    # -- operators --------------------------------------------------------

    def __or__(self, other: object) -> "IntervalSet[T]":
        if not isinstance(other, (Interval, IntervalSet)):
            return NotImplemented
        return self.union(other)

    def __and__(self, other: object) -> "IntervalSet[T]":
        if not isinstance(other, (Interval, IntervalSet)):
            return NotImplemented
        return self.intersection(other)

    def __sub__(self, other: object) -> "IntervalSet[T]":
        if not isinstance(other, (Interval, IntervalSet)):
            return NotImplemented
        return self.difference(other)

    def __xor__(self, other: object) -> "IntervalSet[T]":
        if not isinstance(other, (Interval, IntervalSet)):
            return NotImplemented
        return self.symmetric_difference(other)

    def __mul__(self, other: Any) -> "IntervalSet[T]":
        return self.convolve(other)

    def __ior__(self, other: object) -> "IntervalSet[T]":
        if not isinstance(other, (Interval, IntervalSet)):
            return NotImplemented
        return self.add(other)

    def __iand__(self, other: object) -> "IntervalSet[T]":
        if not isinstance(other, (Interval, IntervalSet)):
            return NotImplemented
        return self.intersect(other)

    def __isub__(self, other: object) -> "IntervalSet[T]":
        if not isinstance(other, (Interval, IntervalSet)):
            return NotImplemented
        return self.remove(other)

    def __ixor__(self, other: object) -> "IntervalSet[T]":
        if not isinstance(other, (Interval, IntervalSet)):
            return NotImplemented
        return self.symmetric_difference_update(other)


def interval_set(*intervals: Any) -> IntervalSet[Any]:
    """Create an interval set from a collection of intervals.

    Overlapping and touching intervals are merged.

    Args:
        *intervals: Interval objects, (start, end) tuples or ranges

    Example:
        >>> interval_set((0, 1), (1, 2), Interval(start=5, end=6))
        IntervalSet([0, 2), [5, 6))
    """
    return IntervalSet(intervals)
