"""Named lists of well positions."""
from functools import total_ordering
from typing import Iterable, Iterator, List, Optional, Union

from plateset.models.ordered_set import OrderedSet
from plateset.models.well import parse_well_id
from plateset.models.well_index import WellIndex


def _as_index(index: Union[WellIndex, str]) -> WellIndex:
    if isinstance(index, WellIndex):
        return index
    if isinstance(index, str):
        return WellIndex(*parse_well_id(index))
    raise TypeError(f"Expected a WellIndex or well ID, got {type(index).__name__}")


@total_ordering
class WellList:
    """
    An ordered, duplicate-free list of well positions with an optional label.

    Used to name a subset of plate positions (a group) without storing any
    measurement data. Equality and hashing ignore the label.
    """

    def __init__(
        self,
        indices: Optional[Iterable[Union[WellIndex, str]]] = None,
        label: Optional[str] = None
    ):
        self._indices: OrderedSet[WellIndex] = OrderedSet()
        self.label = label
        if indices is not None:
            for index in indices:
                self.add(index)

    def add(self, index: Union[WellIndex, str]) -> bool:
        return self._indices.add(_as_index(index))

    def remove(self, index: Union[WellIndex, str]) -> bool:
        return self._indices.discard(_as_index(index))

    @property
    def indices(self) -> List[WellIndex]:
        return self._indices.to_list()

    def size(self) -> int:
        return len(self._indices)

    def copy(self) -> "WellList":
        return WellList(
            (WellIndex(index.row, index.column) for index in self._indices),
            self.label
        )

    def equals_set(self, well_set) -> bool:
        """True if ``well_set`` holds exactly these positions under the same label."""
        if well_set.size() != self.size():
            return False
        if well_set.label != self.label:
            return False
        return all(well.well_index() in self._indices for well in well_set)

    def compare_to(self, other: "WellList") -> int:
        """
        Order by size, then by walking both lists from the last position
        backwards; the first differing row (then column) decides.
        """
        if not isinstance(other, WellList):
            raise TypeError(f"Cannot compare WellList with {type(other).__name__}")
        if self == other:
            return 0
        if self.size() != other.size():
            return 1 if self.size() > other.size() else -1
        for mine, theirs in zip(reversed(self._indices), reversed(other._indices)):
            if mine.row != theirs.row:
                return 1 if mine.row > theirs.row else -1
            if mine.column != theirs.column:
                return 1 if mine.column > theirs.column else -1
        return 0

    def __eq__(self, other) -> bool:
        if not isinstance(other, WellList):
            return NotImplemented
        if self.size() != other.size():
            return False
        return all(index in self._indices for index in other._indices)

    def __lt__(self, other) -> bool:
        if not isinstance(other, WellList):
            return NotImplemented
        return self.compare_to(other) < 0

    def __hash__(self) -> int:
        return hash(frozenset(self._indices))

    def __len__(self) -> int:
        return len(self._indices)

    def __iter__(self) -> Iterator[WellIndex]:
        return iter(self._indices)

    def __contains__(self, index) -> bool:
        try:
            return _as_index(index) in self._indices
        except (TypeError, ValueError):
            return False

    def __str__(self) -> str:
        return f"{self.label} [{', '.join(str(index) for index in self._indices)}]"

    def __repr__(self) -> str:
        return f"WellList({[str(index) for index in self._indices]!r}, label={self.label!r})"
