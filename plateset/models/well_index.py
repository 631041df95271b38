"""Well coordinates and the row letter encoding."""
import re
from functools import total_ordering

ALPHA_BASE = 26

_LETTERS = re.compile(r"^[A-Z]+$")


def encode_row(row: int) -> str:
    """Encode a zero-based row number as letters (0 -> A, 26 -> AA)."""
    if row < 0:
        raise ValueError(f"Invalid row index: {row}. Row value must be a positive value.")
    letters = ""
    while row >= 0:
        letters = chr(row % ALPHA_BASE + ord("A")) + letters
        row = row // ALPHA_BASE - 1
    return letters


def decode_row(letters: str) -> int:
    """Decode row letters back to a zero-based row number (AB -> 27)."""
    upper = letters.strip().upper()
    if not _LETTERS.match(upper):
        raise ValueError(f"Invalid row ID: {letters}")
    row = ord(upper[-1]) - ord("A")
    for position, char in enumerate(reversed(upper[:-1]), start=1):
        row += (ord(char) - ord("A") + 1) * ALPHA_BASE ** position
    return row


@total_ordering
class WellIndex:
    """Immutable (row, column) coordinate without data."""

    __slots__ = ("_row", "_column")

    def __init__(self, row: int, column: int):
        self._row = row
        self._column = column

    @property
    def row(self) -> int:
        return self._row

    @property
    def column(self) -> int:
        return self._column

    @property
    def row_string(self) -> str:
        return encode_row(self._row)

    def compare_to(self, other: "WellIndex") -> int:
        if not isinstance(other, WellIndex):
            raise TypeError(f"Cannot compare WellIndex with {type(other).__name__}")
        if self == other:
            return 0
        if self._row != other._row:
            return 1 if self._row > other._row else -1
        return 1 if self._column > other._column else -1

    def __eq__(self, other) -> bool:
        if not isinstance(other, WellIndex):
            return NotImplemented
        return self._row == other._row and self._column == other._column

    def __lt__(self, other) -> bool:
        if not isinstance(other, WellIndex):
            return NotImplemented
        return (self._row, self._column) < (other._row, other._column)

    def __hash__(self) -> int:
        return hash((self._row, self._column))

    def __str__(self) -> str:
        return f"{self.row_string}{self._column}"

    def __repr__(self) -> str:
        return f"WellIndex({self._row}, {self._column})"
