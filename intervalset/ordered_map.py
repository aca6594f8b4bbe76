"""Sorted key/value storage with navigable-map style queries.

SortedDict keeps keys ordered; the helpers below add the floor/lower and
sub-range lookups interval sets are built on. Range queries return new,
independent maps so callers can keep mutating the source.
"""

from collections.abc import Iterable, Iterator
from typing import Any, Generic, NamedTuple, TypeVar

from sortedcontainers import SortedDict

K = TypeVar("K")
V = TypeVar("V")


class Entry(NamedTuple):
    key: Any
    value: Any


class OrderedMap(Generic[K, V]):
    """Map kept sorted by key, with floor/lower lookups and sub-range snapshots."""

    def __init__(self, items: Iterable[tuple[K, V]] = ()) -> None:
        self._sorted: SortedDict = SortedDict(items)

    def put(self, key: K, value: V) -> None:
        self._sorted[key] = value

    def remove(self, key: K) -> None:
        self._sorted.pop(key, None)

    def clear(self) -> None:
        self._sorted.clear()

    def is_empty(self) -> bool:
        return not self._sorted

    def __len__(self) -> int:
        return len(self._sorted)

    def __bool__(self) -> bool:
        return bool(self._sorted)

    def __iter__(self) -> Iterator[Entry]:
        return self.entries()

    def _entry_at(self, index: int) -> Entry | None:
        if index < 0 or index >= len(self._sorted):
            return None
        key, value = self._sorted.peekitem(index)
        return Entry(key, value)

    def floor_entry(self, key: K) -> Entry | None:
        """Entry with the greatest key less than or equal to ``key``."""
        return self._entry_at(self._sorted.bisect_right(key) - 1)

    def lower_entry(self, key: K) -> Entry | None:
        """Entry with the greatest key strictly less than ``key``."""
        return self._entry_at(self._sorted.bisect_left(key) - 1)

    def first_entry(self) -> Entry | None:
        return self._entry_at(0)

    def last_entry(self) -> Entry | None:
        return self._entry_at(len(self._sorted) - 1)

    def _select(
        self,
        minimum: Any,
        maximum: Any,
        inclusive: tuple[bool, bool],
    ) -> "OrderedMap[K, V]":
        keys = self._sorted.irange(minimum, maximum, inclusive=inclusive)
        return OrderedMap((key, self._sorted[key]) for key in keys)

    def sub_map(
        self,
        low: K,
        low_inclusive: bool,
        high: K,
        high_inclusive: bool,
    ) -> "OrderedMap[K, V]":
        return self._select(low, high, (low_inclusive, high_inclusive))

    def head_map(self, key: K, inclusive: bool = False) -> "OrderedMap[K, V]":
        return self._select(None, key, (True, inclusive))

    def tail_map(self, key: K, inclusive: bool = True) -> "OrderedMap[K, V]":
        return self._select(key, None, (inclusive, True))

    def keys(self) -> list[K]:
        # snapshot, callers delete while walking it
        return list(self._sorted.keys())

    def values(self) -> Iterator[V]:
        return iter(self._sorted.values())

    def entries(self) -> Iterator[Entry]:
        return (Entry(key, value) for key, value in self._sorted.items())

    def __repr__(self) -> str:
        return f"OrderedMap({list(self._sorted.items())!r})"
