"""Stacks of same-sized plates."""
import logging
from collections import abc
from typing import Iterator, List, Optional, Union

from plateset.models.batch import apply_all, read_source
from plateset.models.ordered_set import OrderedSet
from plateset.models.plate import (
    Plate, PlateType, check_dimensions, dimensions_for, plate_type_for
)
from plateset.models.well import DATA_TYPE

logger = logging.getLogger(__name__)


class Stack:
    """
    An ordered, duplicate-free collection of plates sharing one size.

    Plates are ordered by ``Plate.compare_to``; every plate must match the
    stack's rows and columns. Plates are stored as given, not copied.

    Not thread-safe.
    """

    logger = logger

    def __init__(
        self,
        rows: int,
        columns: int,
        label: Optional[str] = None,
        plates=None
    ):
        check_dimensions(rows, columns)
        self._rows = rows
        self._columns = columns
        self.label = label if label is not None else "Stack"
        self._type, self._descriptor = plate_type_for(rows, columns, "Custom Stack")
        self._plates: OrderedSet[Plate] = OrderedSet()
        if plates is not None:
            seed = self._expand(plates)
            for plate in seed:
                self._validate_plate(plate)
            self.add(seed)

    @classmethod
    def of_type(
        cls,
        plate_type: Union[PlateType, int],
        label: Optional[str] = None,
        plates=None
    ) -> "Stack":
        rows, columns = dimensions_for(plate_type)
        return cls(rows, columns, label, plates)

    @classmethod
    def from_plates(cls, plates, label: Optional[str] = None) -> "Stack":
        """Build a stack sized after the first plate."""
        plates = [plates] if isinstance(plates, Plate) else list(plates)
        if not plates:
            raise ValueError("Cannot size a stack from an empty plate collection.")
        return cls(plates[0].rows, plates[0].columns, label, plates)

    def copy(self) -> "Stack":
        """Copy of the stack holding copies of its plates."""
        return Stack(self._rows, self._columns, self.label, [plate.copy() for plate in self._plates])

    # Descriptors

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

    def size(self) -> int:
        return len(self._plates)

    def is_empty(self) -> bool:
        return not self._plates

    # Primitives

    @staticmethod
    def _expand(source) -> list:
        if isinstance(source, (Plate, str)):
            return [source]
        if isinstance(source, abc.Iterable):
            return list(source)
        raise TypeError(f"Unsupported plate source: {type(source).__name__}")

    def _validate_plate(self, plate: Plate) -> None:
        if not isinstance(plate, Plate):
            raise TypeError(f"Expected a Plate, got {type(plate).__name__}")
        if plate.rows != self._rows or plate.columns != self._columns:
            raise ValueError(
                f"Invalid plate dimensions for plate {plate.label}: "
                f"{plate.rows}x{plate.columns}, expected {self._rows}x{self._columns}."
            )

    def _by_label(self, label: str) -> Optional[Plate]:
        for plate in self._plates:
            if plate.label == label:
                return plate
        return None

    def _add_one(self, plate: Plate) -> bool:
        self._validate_plate(plate)
        if not self._plates.add(plate):
            raise ValueError(f"Failed to add plate {plate}. This plate already exists in the stack.")
        return True

    def _remove_one(self, item: Union[Plate, str]) -> bool:
        if isinstance(item, str):
            plate = self._by_label(item)
            if plate is None:
                raise ValueError(f"Failed to remove plate {item}. No plate has this label.")
        else:
            self._validate_plate(item)
            plate = item
        if not self._plates.discard(plate):
            raise ValueError(f"Failed to remove plate {plate}. This plate does not exist in the stack.")
        return True

    def _replace_one(self, plate: Plate) -> bool:
        self._validate_plate(plate)
        self._plates.discard(plate)
        self._plates.add(plate)
        return True

    # Mutators

    def add(self, source) -> bool:
        """Add plates; mismatched dimensions or duplicates fail."""
        items = read_source(self._expand, source, self.logger)
        return items is not None and apply_all(items, self._add_one, self.logger)

    def remove(self, source) -> bool:
        """Remove plates given as plates, labels, or an iterable of either."""
        items = read_source(self._expand, source, self.logger)
        return items is not None and apply_all(items, self._remove_one, self.logger)

    def replace(self, source) -> bool:
        items = read_source(self._expand, source, self.logger)
        return items is not None and apply_all(items, self._replace_one, self.logger)

    def retain(self, source) -> bool:
        """
        Keep only the given plates (or plates with the given labels).

        Unknown plates and labels are logged and skipped; when none of the
        requested plates is in the stack the stack is left unchanged.
        """
        items = read_source(self._expand, source, self.logger)
        if items is None:
            return False
        wanted: List[Plate] = []

        def collect(item: Union[Plate, str]) -> bool:
            if isinstance(item, str):
                plate = self._by_label(item)
                if plate is None:
                    raise ValueError(f"Failed to retain plate {item}. No plate has this label.")
            else:
                self._validate_plate(item)
                plate = item
                if plate not in self._plates:
                    raise ValueError(f"Failed to retain plate {plate}. This plate does not exist in the stack.")
            wanted.append(plate)
            return True

        success = apply_all(items, collect, self.logger)
        if not success and not wanted:
            return False
        for plate in self._plates:
            if not any(plate == kept for kept in wanted):
                self._plates.discard(plate)
        return success

    def clear(self) -> None:
        self._plates.clear()

    # Lookup

    def get(self, source):
        """
        Look up plates.

        A label or a plate returns the first stored match (or None); an
        iterable of labels or plates returns the sorted matches (or None
        when nothing matches).
        """
        if isinstance(source, str):
            return self._by_label(source)
        if isinstance(source, Plate):
            return self._plates.get(source)
        if isinstance(source, abc.Iterable):
            found = OrderedSet()
            for item in source:
                plate = self.get(item)
                if plate is not None:
                    found.add(plate)
            return found.to_list() if found else None
        raise TypeError(f"Unsupported plate source: {type(source).__name__}")

    def get_all(self) -> List[Plate]:
        return self._plates.to_list()

    def contains(self, source) -> bool:
        if isinstance(source, str):
            return self._by_label(source) is not None
        if isinstance(source, Plate):
            return source in self._plates
        if isinstance(source, abc.Iterable):
            return all(self.contains(item) for item in source)
        return False

    # Navigation

    def first(self) -> Plate:
        return self._plates.first()

    def last(self) -> Plate:
        return self._plates.last()

    def higher(self, plate: Plate) -> Optional[Plate]:
        return self._plates.higher(plate)

    def lower(self, plate: Plate) -> Optional[Plate]:
        return self._plates.lower(plate)

    def ceiling(self, plate: Plate) -> Optional[Plate]:
        return self._plates.ceiling(plate)

    def floor(self, plate: Plate) -> Optional[Plate]:
        return self._plates.floor(plate)

    def poll_first(self) -> Optional[Plate]:
        return self._plates.poll_first()

    def poll_last(self) -> Optional[Plate]:
        return self._plates.poll_last()

    def descending_set(self) -> List[Plate]:
        return list(reversed(self._plates))

    def head_set(self, plate: Plate, inclusive: bool = False) -> List[Plate]:
        return self._plates.head(plate, inclusive)

    def tail_set(self, plate: Plate, inclusive: bool = True) -> List[Plate]:
        return self._plates.tail(plate, inclusive)

    def sub_set(
        self,
        plate1: Plate,
        plate2: Plate,
        inclusive1: bool = True,
        inclusive2: bool = False
    ) -> List[Plate]:
        return self._plates.between(plate1, plate2, inclusive1, inclusive2)

    # Comparison

    def __eq__(self, other) -> bool:
        if not isinstance(other, Stack):
            return NotImplemented
        if self is other:
            return True
        if (self.size() != other.size() or self._rows != other._rows
                or self._columns != other._columns or self.label != other.label):
            return False
        return all(a == b for a, b in zip(self._plates, other._plates))

    def __hash__(self) -> int:
        return hash((self._rows, self._columns, self.label, self.size()))

    def __len__(self) -> int:
        return len(self._plates)

    def __iter__(self) -> Iterator[Plate]:
        return iter(self._plates)

    def __contains__(self, item) -> bool:
        return self.contains(item)

    def __str__(self) -> str:
        return f"Type: {self._descriptor} Label: {self.label}"

    def __repr__(self) -> str:
        return f"Stack({self._rows}, {self._columns}, label={self.label!r}, size={self.size()})"
