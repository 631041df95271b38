"""Well data model."""
import logging
import math
import numbers
import re
from collections import abc
from decimal import Decimal
from functools import total_ordering
from typing import Iterable, Iterator, List, Optional, Tuple, Union

import numpy as np

from plateset.models.batch import apply_all, read_source
from plateset.models.well_index import WellIndex, decode_row, encode_row

logger = logging.getLogger(__name__)

WELL_ID_PATTERN = re.compile(r"^[A-Za-z]+[0-9]+$")
_ROW_LETTERS = re.compile(r"^[A-Z]+")
_COLUMN_DIGITS = re.compile(r"\d+$")

DATA_TYPE = "Integer"

# Bounds for the fixed width conversions
INTEGER_WIDTHS = {
    "byte": np.int8,
    "short": np.int16,
    "int": np.int32,
    "long": np.int64,
}

Row = Union[int, str]
Column = Union[int, str]


def to_integer(value) -> int:
    """Coerce a single measurement to ``int``."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid integer value: {value!r}")
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    if isinstance(value, Decimal) and value.is_finite() and value == value.to_integral_value():
        return int(value)
    raise ValueError(f"Invalid integer value: {value!r}")


def parse_row(row: Row) -> int:
    """Parse a row given as a number, a numeric string or row letters."""
    if isinstance(row, str):
        try:
            return int(row.strip())
        except ValueError:
            return decode_row(row)
    return to_integer(row)


def parse_column(column: Column) -> int:
    """Parse a column given as a number or a numeric string."""
    if isinstance(column, str):
        try:
            return int(column.strip())
        except ValueError:
            raise ValueError(f"Illegal column value: {column}")
    return to_integer(column)


def parse_well_id(well_id: str):
    """Split a combined well ID such as ``AA12`` into (row, column)."""
    upper = well_id.strip().upper()
    if not WELL_ID_PATTERN.match(upper):
        raise ValueError(f"Invalid well index: {well_id}")
    row = decode_row(_ROW_LETTERS.match(upper).group(0))
    column = int(_COLUMN_DIGITS.search(upper).group(0))
    return row, column


def check_width(values: List[int], width: str) -> List[int]:
    """Return ``values`` as a list, or raise OverflowError if one exceeds ``width``."""
    info = np.iinfo(INTEGER_WIDTHS[width])
    for value in values:
        if value < info.min or value > info.max:
            raise OverflowError(
                f"Value {value} overflows {width} range [{info.min}, {info.max}]"
            )
    return list(values)


@total_ordering
class Well:
    """
    A plate position holding an ordered list of integer measurements.

    Wells are identified by their coordinates only: two wells at the same
    row and column compare and hash equal whatever data they hold, so a
    well can be used to look up and replace the data stored at a position.

    The constructor rejects invalid data with ``ValueError``; the data
    mutators skip and log invalid values and return False.
    """

    logger = logger

    def __init__(
        self,
        row: Row,
        column: Optional[Column] = None,
        data: Optional[Iterable] = None
    ):
        if column is None:
            if not isinstance(row, str):
                raise ValueError(f"Invalid well index: {row}")
            self._row, self._column = parse_well_id(row)
        else:
            self._row = parse_row(row)
            self._column = parse_column(column)
        self._validate_indices(self._row, self._column)
        self._data: List[int] = []
        if data is not None:
            self._data = [to_integer(value) for value in self._items(data)]

    @staticmethod
    def _validate_indices(row: int, column: int) -> None:
        if row < 0:
            raise ValueError(f"Invalid row index: {row}. Row value must be a positive value.")
        if column <= 0:
            raise ValueError(
                f"Invalid column index: {column}. Column value must be greater than zero."
            )

    @classmethod
    def from_index(cls, index: WellIndex, data: Optional[Iterable] = None) -> "Well":
        return cls(index.row, index.column, data)

    # Coordinates

    @property
    def row(self) -> int:
        return self._row

    @property
    def column(self) -> int:
        return self._column

    @property
    def row_string(self) -> str:
        return encode_row(self._row)

    @property
    def index(self) -> str:
        """Well ID such as ``B12``."""
        return f"{self.row_string}{self._column}"

    @property
    def type_string(self) -> str:
        return DATA_TYPE

    def well_index(self) -> WellIndex:
        return WellIndex(self._row, self._column)

    # Data access

    @property
    def data(self) -> List[int]:
        """The live measurement list; mutations are reflected in the well."""
        return self._data

    def size(self) -> int:
        return len(self._data)

    def is_empty(self) -> bool:
        return not self._data

    def clear(self) -> None:
        self._data.clear()

    def get(self, index: int) -> int:
        return self._data[index]

    def contains(self, value) -> bool:
        return to_integer(value) in self._data

    def index_of(self, value) -> int:
        """First position of ``value`` or -1."""
        value = to_integer(value)
        return self._data.index(value) if value in self._data else -1

    def last_index_of(self, value) -> int:
        """Last position of ``value`` or -1."""
        value = to_integer(value)
        for i in range(len(self._data) - 1, -1, -1):
            if self._data[i] == value:
                return i
        return -1

    def copy(self) -> "Well":
        return Well(self._row, self._column, self._data)

    def sub_list(self, begin: int, length: int) -> "Well":
        """New well at the same position holding ``length`` values from ``begin``."""
        self._check_range(begin, begin + length)
        return Well(self._row, self._column, self._data[begin:begin + length])

    # Adding, replacing and removing data

    @staticmethod
    def _items(source) -> list:
        from plateset.models.well_set import WellSet

        if isinstance(source, Well):
            return list(source.data)
        if isinstance(source, WellSet):
            return [value for well in source for value in well.data]
        if isinstance(source, abc.Iterable) and not isinstance(source, (str, bytes)):
            return list(source)
        return [source]

    def _collect(self, source) -> Tuple[List[int], bool]:
        """Convert every value that can be converted; failures are logged."""
        values: List[int] = []

        def convert(value) -> bool:
            values.append(to_integer(value))
            return True

        items = read_source(self._items, source, self.logger)
        if items is None:
            return values, False
        return values, apply_all(items, convert, self.logger)

    def add(self, source) -> bool:
        """Append a value, an iterable of values, a well's data or a set's data.

        Values that are not integers are logged and skipped.
        """
        values, success = self._collect(source)
        self._data.extend(values)
        return success

    def replace_data(self, source) -> bool:
        """Replace the data with the given values; unchanged if none are valid."""
        values, success = self._collect(source)
        if not success and not values:
            return False
        self._data[:] = values
        return success

    def remove(self, source) -> bool:
        """Remove every occurrence of the given values."""
        from plateset.models.well_set import WellSet

        if isinstance(source, WellSet):
            for well in source:
                self._remove_all(well.data)
            return True
        values, success = self._collect(source)
        self._remove_all(values)
        return success

    def _remove_all(self, values: Iterable[int]) -> None:
        doomed = set(values)
        self._data[:] = [value for value in self._data if value not in doomed]

    def retain(self, source) -> bool:
        """Keep only the given values.

        A single value must already be present; the well then holds exactly
        that value. Returns False, leaving the data unchanged, when nothing
        valid was given.
        """
        from plateset.models.well_set import WellSet

        if isinstance(source, WellSet):
            for well in source:
                self._retain_all(well.data)
            return True
        values, success = self._collect(source)
        if not success and not values:
            return False
        if not isinstance(source, (Well, abc.Iterable)) or isinstance(source, (str, bytes)):
            if values[0] not in self._data:
                self.logger.error(f"{values[0]} does not exist in the well data set.")
                return False
            self._data[:] = values
            return True
        self._retain_all(values)
        return success

    def _retain_all(self, values: Iterable[int]) -> None:
        kept = set(values)
        self._data[:] = [value for value in self._data if value in kept]

    def _check_range(self, begin: int, end: int) -> None:
        if begin > end:
            raise IndexError("The starting index must be less than the ending index.")
        if begin < 0:
            raise IndexError("Indices must be positive values.")
        if end > len(self._data):
            raise IndexError("Ending index does not exist.")

    def remove_range(self, begin: int, end: int) -> None:
        """Delete values in ``[begin, end)``."""
        self._check_range(begin, end)
        del self._data[begin:end]

    def retain_range(self, begin: int, end: int) -> None:
        """Keep only values in ``[begin, end)``."""
        self._check_range(begin, end)
        self._data[:] = self._data[begin:end]

    # Conversions

    def to_double(self) -> List[float]:
        return [float(value) for value in self._data]

    def to_double_array(self) -> np.ndarray:
        return np.array(self.to_double(), dtype=np.float64)

    def to_float(self) -> List[float]:
        limit = float(np.finfo(np.float32).max)
        for value in self._data:
            if abs(value) > limit:
                raise OverflowError(f"Value {value} overflows float range")
        return [float(np.float32(value)) for value in self._data]

    def to_float_array(self) -> np.ndarray:
        return np.array(self.to_float(), dtype=np.float32)

    def to_byte(self) -> List[int]:
        return check_width(self._data, "byte")

    def to_byte_array(self) -> np.ndarray:
        return np.array(self.to_byte(), dtype=np.int8)

    def to_short(self) -> List[int]:
        return check_width(self._data, "short")

    def to_short_array(self) -> np.ndarray:
        return np.array(self.to_short(), dtype=np.int16)

    def to_int(self) -> List[int]:
        return check_width(self._data, "int")

    def to_int_array(self) -> np.ndarray:
        return np.array(self.to_int(), dtype=np.int32)

    def to_long(self) -> List[int]:
        return check_width(self._data, "long")

    def to_long_array(self) -> np.ndarray:
        return np.array(self.to_long(), dtype=np.int64)

    def to_decimal(self) -> List[Decimal]:
        return [Decimal(value) for value in self._data]

    def to_big_integer(self) -> List[int]:
        return list(self._data)

    # Identity

    def compare_to(self, other: "Well") -> int:
        if not isinstance(other, Well):
            raise TypeError(f"Cannot compare Well with {type(other).__name__}")
        if self == other:
            return 0
        if self._row != other._row:
            return 1 if self._row > other._row else -1
        return 1 if self._column > other._column else -1

    def __eq__(self, other) -> bool:
        if not isinstance(other, Well):
            return NotImplemented
        return self._row == other._row and self._column == other._column

    def __lt__(self, other) -> bool:
        if not isinstance(other, Well):
            return NotImplemented
        return (self._row, self._column) < (other._row, other._column)

    def __hash__(self) -> int:
        return hash((self._row, self._column))

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[int]:
        return iter(self._data)

    def __getitem__(self, index):
        return self._data[index]

    def __str__(self) -> str:
        return f"{self.index} [{', '.join(str(value) for value in self._data)}]"

    def __repr__(self) -> str:
        return f"Well({self.index!r}, data={self._data!r})"
