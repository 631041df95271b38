"""Plate data model."""
import logging
from collections import abc
from enum import Enum
from functools import total_ordering
from typing import Dict, Iterator, List, Optional, Tuple, Union

from plateset.models.batch import DEFAULT_DELIMITER, apply_all, read_source
from plateset.models.ordered_set import OrderedSet
from plateset.models.well import DATA_TYPE, Well
from plateset.models.well_list import WellList
from plateset.models.well_set import WellLike, WellSet, as_well, expand

logger = logging.getLogger(__name__)


class PlateType(int, Enum):
    """Plate type enumeration."""
    CUSTOM = -1
    PLATE_6 = 6
    PLATE_12 = 12
    PLATE_24 = 24
    PLATE_48 = 48
    PLATE_96 = 96
    PLATE_384 = 384
    PLATE_1536 = 1536


# Plate dimensions (rows, columns) for each preset
PLATE_DIMENSIONS: Dict[PlateType, Tuple[int, int]] = {
    PlateType.PLATE_6: (2, 3),
    PlateType.PLATE_12: (3, 4),
    PlateType.PLATE_24: (4, 6),
    PlateType.PLATE_48: (6, 8),
    PlateType.PLATE_96: (8, 12),
    PlateType.PLATE_384: (16, 24),
    PlateType.PLATE_1536: (32, 48),
}


def plate_type_for(rows: int, columns: int, custom_prefix: str = "Custom Plate") -> Tuple[PlateType, str]:
    """Classify plate dimensions as a preset or a custom plate."""
    for plate_type, dimensions in PLATE_DIMENSIONS.items():
        if dimensions == (rows, columns):
            return plate_type, f"{plate_type.value}-Well"
    return PlateType.CUSTOM, f"{custom_prefix}: {rows}x{columns}"


def dimensions_for(plate_type: Union[PlateType, int]) -> Tuple[int, int]:
    """Rows and columns of a preset plate type."""
    try:
        plate_type = PlateType(plate_type)
    except ValueError:
        raise ValueError(f"Invalid plate type: {plate_type}.")
    if plate_type not in PLATE_DIMENSIONS:
        raise ValueError(f"Invalid plate type: {plate_type.value}.")
    return PLATE_DIMENSIONS[plate_type]


def check_dimensions(rows: int, columns: int) -> None:
    if rows <= 0 or columns <= 0:
        raise ValueError(f"Invalid plate dimensions: {rows}x{columns}.")


def _group_items(source, single) -> list:
    if isinstance(source, single):
        return [source]
    if isinstance(source, abc.Iterable):
        return list(source)
    raise TypeError(f"Unsupported group source: {type(source).__name__}")


@total_ordering
class Plate:
    """
    A well set bounded by plate dimensions, plus named groups of positions.

    Rows are zero-based (``0 <= row < rows``) and columns one-based
    (``1 <= column <= columns``), so a 96-well plate spans A1 to H12. Wells
    outside the bounds are rejected. Added wells are copied into the plate;
    lookups return the stored instances.

    Groups are ``WellList`` objects resolved against the live plate data each
    time they are read, so data edited after a group was defined shows up in
    the group.

    Not thread-safe.
    """

    def __init__(
        self,
        rows: int,
        columns: int,
        label: Optional[str] = None,
        data=None
    ):
        check_dimensions(rows, columns)
        self._rows = rows
        self._columns = columns
        self._label = label
        self._type, self._descriptor = plate_type_for(rows, columns)
        self._groups: OrderedSet[WellList] = OrderedSet()
        self._data = WellSet()
        self._logger = logger
        self._data.logger = logger
        if data is not None:
            seed = expand(data)
            for item in seed:
                self._validate_well(as_well(item))
            self.add_wells(seed)

    @classmethod
    def of_type(
        cls,
        plate_type: Union[PlateType, int],
        label: Optional[str] = None,
        data=None
    ) -> "Plate":
        rows, columns = dimensions_for(plate_type)
        return cls(rows, columns, label, data)

    def copy(self) -> "Plate":
        """Independent copy of the plate, its wells and its groups."""
        plate = Plate(self._rows, self._columns, self.label)
        plate.add_wells(self._data)
        for group in self._groups:
            plate.add_groups(group.copy())
        return plate

    # Descriptors

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @logger.setter
    def logger(self, value: logging.Logger) -> None:
        self._logger = value
        self._data.logger = value

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def type(self) -> PlateType:
        return self._type

    @property
    def descriptor(self) -> str:
        return self._descriptor

    @property
    def data_type(self) -> str:
        return DATA_TYPE

    @property
    def label(self) -> str:
        return self._label if self._label is not None else f"Plate{id(self)}"

    @label.setter
    def label(self, value: Optional[str]) -> None:
        self._label = value

    def size(self) -> int:
        return self._data.size()

    def is_empty(self) -> bool:
        return self._data.is_empty()

    # Validation

    def in_bounds(self, row: int, column: int) -> bool:
        return 0 <= row < self._rows and 1 <= column <= self._columns

    def _validate_well(self, well: Well) -> None:
        if not self.in_bounds(well.row, well.column):
            raise ValueError(
                f"Invalid well indices for well: {well.index}. "
                f"Plate bounds are {self._rows} rows x {self._columns} columns."
            )

    def _validate_group(self, group: WellList) -> None:
        for index in group:
            if not self.in_bounds(index.row, index.column):
                raise ValueError(
                    f"Invalid well indices for well: {index} in well group: {group}"
                )

    # Well primitives

    def _add_one(self, item: WellLike) -> bool:
        well = as_well(item)
        self._validate_well(well)
        if well in self._data:
            raise ValueError(
                f"Failed to add well {well}. This well already exists in the data set."
            )
        self._data.insert(Well(well.row, well.column, well.data))
        return True

    def _remove_one(self, item: WellLike) -> bool:
        well = as_well(item)
        self._validate_well(well)
        if not self._data.discard(well):
            raise ValueError(
                f"Failed to remove well {well.index}. This well does not exist in the data set."
            )
        return True

    def _replace_one(self, item: WellLike) -> bool:
        well = as_well(item)
        self._validate_well(well)
        self._data.discard(well)
        self._data.insert(Well(well.row, well.column, well.data))
        return True

    # Well mutators

    def add_wells(self, source, delimiter: str = DEFAULT_DELIMITER) -> bool:
        """Copy wells into the plate; out-of-bounds or occupied positions fail."""
        items = read_source(expand, source, self._logger, delimiter)
        return items is not None and apply_all(items, self._add_one, self._logger)

    def remove_wells(self, source, delimiter: str = DEFAULT_DELIMITER) -> bool:
        items = read_source(expand, source, self._logger, delimiter)
        return items is not None and apply_all(items, self._remove_one, self._logger)

    def replace_wells(self, source, delimiter: str = DEFAULT_DELIMITER) -> bool:
        """Copy wells into the plate, overwriting stored wells at the same positions."""
        items = read_source(expand, source, self._logger, delimiter)
        return items is not None and apply_all(items, self._replace_one, self._logger)

    def retain_wells(self, source, delimiter: str = DEFAULT_DELIMITER) -> bool:
        """
        Keep only the given in-bounds positions.

        Out-of-bounds or unreadable inputs are logged and skipped; when every
        input is rejected the plate is left unchanged.
        """
        items = read_source(expand, source, self._logger, delimiter)
        if items is None:
            return False
        wanted: List[Well] = []

        def collect(item: WellLike) -> bool:
            well = as_well(item)
            self._validate_well(well)
            wanted.append(well)
            return True

        success = apply_all(items, collect, self._logger)
        if not success and not wanted:
            return False
        return self._data.retain(wanted) and success

    def clear_wells(self) -> bool:
        self._data.clear()
        return True

    # Well lookup

    def contains(self, source, delimiter: str = DEFAULT_DELIMITER) -> bool:
        return self._data.contains(source, delimiter)

    def get_well(self, item: WellLike) -> Optional[Well]:
        """The stored well at a position (not a copy) or None."""
        return self._data.get_well(item)

    def get_wells(self, source, delimiter: str = DEFAULT_DELIMITER) -> Optional[WellSet]:
        """Stored wells for several positions; editing them edits the plate."""
        return self._data.get_wells(source, delimiter)

    def get_row(self, row: int) -> Optional[WellSet]:
        if row < 0 or row >= self._rows:
            return None
        return self._data.get_row(row)

    def get_column(self, column: int) -> Optional[WellSet]:
        if column < 1 or column > self._columns:
            return None
        return self._data.get_column(column)

    def data_set(self) -> WellSet:
        """Independent snapshot of the plate data."""
        return WellSet(self._data)

    def to_list(self) -> List[Well]:
        return self._data.to_list()

    # Navigation

    def first(self) -> Well:
        return self._data.first()

    def last(self) -> Well:
        return self._data.last()

    def higher(self, well: WellLike) -> Optional[Well]:
        return self._data.higher(well)

    def lower(self, well: WellLike) -> Optional[Well]:
        return self._data.lower(well)

    def ceiling(self, well: WellLike) -> Optional[Well]:
        return self._data.ceiling(well)

    def floor(self, well: WellLike) -> Optional[Well]:
        return self._data.floor(well)

    def poll_first(self) -> Optional[Well]:
        return self._data.poll_first()

    def poll_last(self) -> Optional[Well]:
        return self._data.poll_last()

    def descending_set(self) -> List[Well]:
        return self._data.descending_set()

    def head_set(self, well: WellLike, inclusive: bool = False) -> WellSet:
        return self._data.head_set(well, inclusive)

    def tail_set(self, well: WellLike, inclusive: bool = True) -> WellSet:
        return self._data.tail_set(well, inclusive)

    def sub_set(
        self,
        well1: WellLike,
        well2: WellLike,
        inclusive1: bool = True,
        inclusive2: bool = False
    ) -> WellSet:
        return self._data.sub_set(well1, well2, inclusive1, inclusive2)

    # Groups

    def _add_group(self, group: WellList) -> bool:
        if not isinstance(group, WellList):
            raise TypeError(f"Expected a WellList, got {type(group).__name__}")
        self._validate_group(group)
        if group in self._groups:
            raise ValueError(f"The group {group} already exists in the group list.")
        self._groups.add(group.copy())
        return True

    def _remove_group(self, item: Union[WellList, str]) -> bool:
        if isinstance(item, str):
            matches = [group for group in self._groups if group.label == item]
            if not matches:
                raise ValueError(f"The group {item} does not exist.")
            for group in matches:
                self._groups.discard(group)
            return True
        if not isinstance(item, WellList):
            raise TypeError(f"Expected a WellList or label, got {type(item).__name__}")
        self._validate_group(item)
        if not self._groups.discard(item):
            raise ValueError(f"The group {item} does not exist.")
        return True

    def add_groups(self, source) -> bool:
        """Register one or more groups; duplicates and out-of-bounds groups fail."""
        items = read_source(_group_items, source, self._logger, WellList)
        return items is not None and apply_all(items, self._add_group, self._logger)

    def remove_groups(self, source) -> bool:
        """Remove groups given as well lists, labels, or an iterable of either."""
        items = read_source(_group_items, source, self._logger, (WellList, str))
        return items is not None and apply_all(items, self._remove_group, self._logger)

    def clear_groups(self) -> None:
        self._groups.clear()

    def groups(self) -> List[WellList]:
        return self._groups.to_list()

    def _resolve(self, group: WellList) -> WellSet:
        wells = []
        for index in group:
            well = self._data.get_well(index)
            wells.append(well if well is not None else Well(index.row, index.column))
        return WellSet(wells, group.label)

    def all_groups(self) -> List[WellSet]:
        """Every group resolved against the current plate data."""
        return sorted(self._resolve(group) for group in self._groups)

    def get_groups(self, source):
        """
        Resolve groups.

        A label or a ``WellList`` returns a single ``WellSet`` (or None);
        an iterable of labels or well lists returns a sorted list of sets.
        """
        if isinstance(source, str):
            for group in self._groups:
                if group.label == source:
                    return self._resolve(group)
            return None
        if isinstance(source, WellList):
            group = self._groups.get(source)
            return self._resolve(group) if group is not None else None
        if isinstance(source, abc.Iterable):
            found = [self.get_groups(item) for item in source]
            return sorted(group for group in found if group is not None)
        raise TypeError(f"Unsupported group source: {type(source).__name__}")

    def contains_group(self, source) -> bool:
        if isinstance(source, str):
            return any(group.label == source for group in self._groups)
        if isinstance(source, WellList):
            return source in self._groups
        if isinstance(source, abc.Iterable):
            return all(self.contains_group(item) for item in source)
        return False

    # Output

    def print_all_data(self) -> str:
        lines = [f"{self.label} {self._descriptor}"]
        lines.extend(str(well) for well in self._data)
        return "\n".join(lines) + "\n"

    # Comparison

    def compare_to(self, other: "Plate") -> int:
        """Order by well count, rows, columns, label, data type, then data."""
        if not isinstance(other, Plate):
            raise TypeError(f"Cannot compare Plate with {type(other).__name__}")
        if self == other:
            return 0
        mine = (self._rows * self._columns, self._rows, self._columns, self.label, self.data_type)
        theirs = (other._rows * other._columns, other._rows, other._columns, other.label, other.data_type)
        for a, b in zip(mine, theirs):
            if a != b:
                return 1 if a > b else -1
        return self._data.compare_to(other._data)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Plate):
            return NotImplemented
        if self is other:
            return True
        return (
            self._rows == other._rows
            and self._columns == other._columns
            and self.label == other.label
            and self._type == other._type
            and self._descriptor == other._descriptor
            and self.all_groups() == other.all_groups()
            and self._data == other._data
            and self.size() == other.size()
            and self.data_type == other.data_type
        )

    def __lt__(self, other) -> bool:
        if not isinstance(other, Plate):
            return NotImplemented
        return self.compare_to(other) < 0

    def __hash__(self) -> int:
        return hash((self._rows, self._columns, self.label, self._type, self._descriptor, self.size()))

    def __len__(self) -> int:
        return self._data.size()

    def __iter__(self) -> Iterator[Well]:
        return iter(self._data)

    def __contains__(self, item) -> bool:
        return self.contains(item)

    def __str__(self) -> str:
        return f"Type: {self._descriptor} Label: {self.label}"

    def __repr__(self) -> str:
        return f"Plate({self._rows}, {self._columns}, label={self._label!r}, size={self.size()})"
