"""Sorted, duplicate-free container shared by the plate models."""
from bisect import bisect_left, bisect_right
from typing import Generic, Iterable, Iterator, List, Optional, TypeVar

T = TypeVar("T")


class OrderedSet(Generic[T]):
    """Ordered set over any totally ordered element type.

    Elements are kept in a list sorted by their natural ordering. Two
    elements are duplicates when neither sorts before the other, so the
    element's ordering (not ``__hash__``) decides membership.
    """

    def __init__(self, items: Optional[Iterable[T]] = None):
        self._items: List[T] = []
        if items is not None:
            for item in items:
                self.add(item)

    def _locate(self, item: T) -> int:
        """Position of an element equal to ``item`` or -1."""
        i = bisect_left(self._items, item)
        if i < len(self._items) and not item < self._items[i]:
            return i
        return -1

    def add(self, item: T) -> bool:
        """Insert ``item``; False if an equal element is already present."""
        i = bisect_left(self._items, item)
        if i < len(self._items) and not item < self._items[i]:
            return False
        self._items.insert(i, item)
        return True

    def discard(self, item: T) -> bool:
        """Remove the element equal to ``item``; False if absent."""
        i = self._locate(item)
        if i < 0:
            return False
        del self._items[i]
        return True

    def get(self, item: T) -> Optional[T]:
        """Return the stored element equal to ``item``."""
        i = self._locate(item)
        return self._items[i] if i >= 0 else None

    def clear(self) -> None:
        self._items.clear()

    def __contains__(self, item) -> bool:
        try:
            return self._locate(item) >= 0
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __reversed__(self) -> Iterator[T]:
        return reversed(list(self._items))

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, OrderedSet):
            return NotImplemented
        if len(self._items) != len(other._items):
            return False
        return all(a == b for a, b in zip(self._items, other._items))

    def __repr__(self) -> str:
        return f"OrderedSet({self._items!r})"

    # Navigation

    def first(self) -> T:
        if not self._items:
            raise KeyError("The set is empty.")
        return self._items[0]

    def last(self) -> T:
        if not self._items:
            raise KeyError("The set is empty.")
        return self._items[-1]

    def higher(self, item: T) -> Optional[T]:
        """Least element strictly greater than ``item``."""
        i = bisect_right(self._items, item)
        return self._items[i] if i < len(self._items) else None

    def lower(self, item: T) -> Optional[T]:
        """Greatest element strictly less than ``item``."""
        i = bisect_left(self._items, item)
        return self._items[i - 1] if i > 0 else None

    def ceiling(self, item: T) -> Optional[T]:
        """Least element greater than or equal to ``item``."""
        i = bisect_left(self._items, item)
        return self._items[i] if i < len(self._items) else None

    def floor(self, item: T) -> Optional[T]:
        """Greatest element less than or equal to ``item``."""
        i = bisect_right(self._items, item)
        return self._items[i - 1] if i > 0 else None

    def poll_first(self) -> Optional[T]:
        return self._items.pop(0) if self._items else None

    def poll_last(self) -> Optional[T]:
        return self._items.pop() if self._items else None

    def head(self, item: T, inclusive: bool = False) -> List[T]:
        end = bisect_right(self._items, item) if inclusive else bisect_left(self._items, item)
        return self._items[:end]

    def tail(self, item: T, inclusive: bool = True) -> List[T]:
        start = bisect_left(self._items, item) if inclusive else bisect_right(self._items, item)
        return self._items[start:]

    def between(
        self,
        low: T,
        high: T,
        low_inclusive: bool = True,
        high_inclusive: bool = False
    ) -> List[T]:
        if high < low:
            raise ValueError("The lower bound must not exceed the upper bound.")
        start = bisect_left(self._items, low) if low_inclusive else bisect_right(self._items, low)
        end = bisect_right(self._items, high) if high_inclusive else bisect_left(self._items, high)
        return self._items[start:end]

    def to_list(self) -> List[T]:
        return list(self._items)
