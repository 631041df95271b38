"""Ordered, duplicate-free collections of wells."""
import logging
from collections import abc
from functools import total_ordering
from typing import Iterator, List, Optional, Union

from plateset.models.batch import DEFAULT_DELIMITER, apply_all, read_source, split_ids
from plateset.models.ordered_set import OrderedSet
from plateset.models.well import Well
from plateset.models.well_index import WellIndex
from plateset.models.well_list import WellList

logger = logging.getLogger(__name__)

WellLike = Union[Well, WellIndex, str]


def as_well(item: WellLike) -> Well:
    """Build a lookup well from a well, an index or a well ID."""
    if isinstance(item, Well):
        return item
    if isinstance(item, WellIndex):
        return Well(item.row, item.column)
    if isinstance(item, str):
        return Well(item)
    raise TypeError(f"Expected a well, well index or well ID, got {type(item).__name__}")


def expand(source, delimiter: str = DEFAULT_DELIMITER) -> List[WellLike]:
    """Flatten any accepted input shape into a list of single well references."""
    if isinstance(source, (Well, WellIndex)):
        return [source]
    if isinstance(source, str):
        return split_ids(source, delimiter)
    if isinstance(source, abc.Iterable):
        return list(source)
    raise TypeError(f"Unsupported well source: {type(source).__name__}")


@total_ordering
class WellSet:
    """
    An ordered set of wells with unique positions and a label.

    Wells are ordered by row then column. Adding a well whose position is
    already taken fails; use ``replace`` to overwrite. Every mutator accepts
    a single well, a well set, an iterable of wells, a delimiter-separated ID
    string, a ``WellIndex`` or a ``WellList`` and reports aggregate success:
    a failing element is logged and skipped, the remaining elements are still
    applied.

    Not thread-safe.
    """

    logger = logger

    def __init__(self, wells=None, label: Optional[str] = None):
        self._wells: OrderedSet[Well] = OrderedSet()
        self._label = label
        if isinstance(wells, WellSet):
            for well in wells:
                self._wells.add(well.copy())
            if label is None:
                self._label = wells._label
        elif wells is not None:
            self.add(wells)

    def copy(self) -> "WellSet":
        """Independent copy; contained wells are duplicated."""
        return WellSet(self)

    # Label

    @property
    def label(self) -> str:
        if self._label is not None:
            return self._label
        if not self._wells:
            return "WellSet"
        return "WellSet " + ", ".join(well.index for well in self._wells)

    @label.setter
    def label(self, value: Optional[str]) -> None:
        self._label = value

    # Primitives

    def insert(self, well: Well) -> bool:
        """Store ``well`` itself; False if its position is taken."""
        return self._wells.add(well)

    def discard(self, well: WellLike) -> bool:
        """Drop the well at a position; False if there is none."""
        return self._wells.discard(as_well(well))

    def _add_one(self, item: WellLike) -> bool:
        well = as_well(item)
        if not self.insert(well):
            raise ValueError(
                f"Failed to add well {well}. This well already exists in the set."
            )
        return True

    def _remove_one(self, item: WellLike) -> bool:
        well = as_well(item)
        if not self.discard(well):
            raise ValueError(
                f"Failed to remove well {well.index}. This well does not exist in the set."
            )
        return True

    def _replace_one(self, item: WellLike) -> bool:
        well = as_well(item)
        self.discard(well)
        self.insert(well)
        return True

    # Mutators

    def add(self, source, delimiter: str = DEFAULT_DELIMITER) -> bool:
        """Add wells; positions already present are rejected."""
        items = read_source(expand, source, self.logger, delimiter)
        return items is not None and apply_all(items, self._add_one, self.logger)

    def remove(self, source, delimiter: str = DEFAULT_DELIMITER) -> bool:
        """Remove wells by position; missing positions are reported as failures."""
        items = read_source(expand, source, self.logger, delimiter)
        return items is not None and apply_all(items, self._remove_one, self.logger)

    def replace(self, source, delimiter: str = DEFAULT_DELIMITER) -> bool:
        """Add wells, overwriting any well stored at the same position."""
        items = read_source(expand, source, self.logger, delimiter)
        return items is not None and apply_all(items, self._replace_one, self.logger)

    def retain(self, source, delimiter: str = DEFAULT_DELIMITER) -> bool:
        """
        Keep only the given positions.

        Returns False if an input could not be parsed or a requested position
        was not present. The set is reduced to the requested positions it
        holds; when it holds none of them after a failure, it is left
        unchanged.
        """
        items = read_source(expand, source, self.logger, delimiter)
        if items is None:
            return False
        wanted: OrderedSet[Well] = OrderedSet()

        def collect(item: WellLike) -> bool:
            wanted.add(as_well(item))
            return True

        success = apply_all(items, collect, self.logger)
        found = False
        for well in wanted:
            if well in self._wells:
                found = True
            else:
                self.logger.error(
                    f"Failed to retain well {well.index}. This well does not exist in the set."
                )
                success = False
        if not success and not found:
            return False
        for well in self._wells:
            if well not in wanted:
                self._wells.discard(well)
        return success

    def clear(self) -> None:
        self._wells.clear()

    # Lookup

    def contains(self, source, delimiter: str = DEFAULT_DELIMITER) -> bool:
        """True if every referenced position is present."""
        if source is None:
            return False
        try:
            items = expand(source, delimiter)
            return all(as_well(item) in self._wells for item in items)
        except (TypeError, ValueError):
            return False

    def get_well(self, item: WellLike) -> Optional[Well]:
        """The stored well at a position (not a copy) or None."""
        if item is None:
            return None
        return self._wells.get(as_well(item))

    def get_wells(self, source, delimiter: str = DEFAULT_DELIMITER) -> Optional["WellSet"]:
        """
        Stored wells for several positions.

        The returned set holds the same instances as this set, so editing
        their data edits this set. Returns None when nothing matches.
        """
        if source is None:
            return None
        found = WellSet()
        for item in expand(source, delimiter):
            well = self._wells.get(as_well(item))
            if well is not None:
                found.insert(well)
        return found if found.size() > 0 else None

    def get_row(self, row: int) -> Optional["WellSet"]:
        wells = [well for well in self._wells if well.row == row]
        return WellSet(wells) if wells else None

    def get_column(self, column: int) -> Optional["WellSet"]:
        wells = [well for well in self._wells if well.column == column]
        return WellSet(wells) if wells else None

    def all_wells(self) -> List[Well]:
        return self._wells.to_list()

    def to_list(self) -> List[Well]:
        return self._wells.to_list()

    def to_string_list(self) -> List[str]:
        return [str(well) for well in self._wells]

    def well_list(self) -> WellList:
        """Positions of this set as a ``WellList`` under the same label."""
        return WellList((well.well_index() for well in self._wells), self.label)

    def size(self) -> int:
        return len(self._wells)

    def is_empty(self) -> bool:
        return not self._wells

    # Navigation by value

    def first(self) -> Well:
        return self._wells.first()

    def last(self) -> Well:
        return self._wells.last()

    def higher(self, well: WellLike) -> Optional[Well]:
        return self._wells.higher(as_well(well))

    def lower(self, well: WellLike) -> Optional[Well]:
        return self._wells.lower(as_well(well))

    def ceiling(self, well: WellLike) -> Optional[Well]:
        return self._wells.ceiling(as_well(well))

    def floor(self, well: WellLike) -> Optional[Well]:
        return self._wells.floor(as_well(well))

    def poll_first(self) -> Optional[Well]:
        return self._wells.poll_first()

    def poll_last(self) -> Optional[Well]:
        return self._wells.poll_last()

    def descending_set(self) -> List[Well]:
        return list(reversed(self._wells))

    def head_set(self, well: WellLike, inclusive: bool = False) -> "WellSet":
        return WellSet(self._wells.head(as_well(well), inclusive))

    def tail_set(self, well: WellLike, inclusive: bool = True) -> "WellSet":
        return WellSet(self._wells.tail(as_well(well), inclusive))

    def sub_set(
        self,
        well1: WellLike,
        well2: WellLike,
        inclusive1: bool = True,
        inclusive2: bool = False
    ) -> "WellSet":
        return WellSet(self._wells.between(as_well(well1), as_well(well2), inclusive1, inclusive2))

    # Navigation by position

    def sub_set_index(
        self,
        index1: int,
        index2: int,
        inclusive1: bool = True,
        inclusive2: bool = False
    ) -> "WellSet":
        """Wells between two ordinal positions in iteration order."""
        last = self.size() - 1
        if index1 < 0 or index2 < 0 or index1 > last or index2 > last or index1 > index2:
            raise IndexError(f"Index is outside of valid range: {index1} {index2}")
        start = index1 if inclusive1 else index1 + 1
        end = index2 + 1 if inclusive2 else index2
        return WellSet([self._wells[i] for i in range(start, end)])

    def head_set_index(self, index: int, inclusive: bool = False) -> "WellSet":
        return self.sub_set_index(0, index, True, inclusive)

    def tail_set_index(self, index: int, inclusive: bool = True) -> "WellSet":
        return self.sub_set_index(index, self.size() - 1, inclusive, True)

    # Comparison

    def compare_to(self, other: "WellSet") -> int:
        if not isinstance(other, WellSet):
            raise TypeError(f"Cannot compare WellSet with {type(other).__name__}")
        if self == other:
            return 0
        if self.label != other.label:
            return 1 if self.label > other.label else -1
        if self.size() != other.size():
            return 1 if self.size() > other.size() else -1
        for mine, theirs in zip(self._wells, other._wells):
            comparison = mine.compare_to(theirs)
            if comparison != 0:
                return comparison
        return 0

    def __eq__(self, other) -> bool:
        if not isinstance(other, WellSet):
            return NotImplemented
        return self._wells == other._wells and self.label == other.label

    def __lt__(self, other) -> bool:
        if not isinstance(other, WellSet):
            return NotImplemented
        return self.compare_to(other) < 0

    def __hash__(self) -> int:
        return hash((self.label, tuple(self._wells)))

    def __len__(self) -> int:
        return len(self._wells)

    def __iter__(self) -> Iterator[Well]:
        return iter(self._wells)

    def __contains__(self, item) -> bool:
        return self.contains(item)

    def __str__(self) -> str:
        lines = [self.label] + [str(well) for well in self._wells]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"WellSet({[well.index for well in self._wells]!r}, label={self._label!r})"
