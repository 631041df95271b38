"""Integer arithmetic over wells, sets, plates and stacks."""
import logging
import operator
from collections import abc
from typing import Callable, Dict, List, Optional

import numpy as np

from plateset.models import Plate, Stack, Well, WellSet
from plateset.models.well import INTEGER_WIDTHS, check_width, to_integer

logger = logging.getLogger(__name__)


def _divide(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    if b == 0:
        raise ZeroDivisionError(f"Cannot divide {a} by zero.")
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def _modulus(a: int, b: int) -> int:
    """Remainder with the sign of the dividend, so ``a == b * (a / b) + a % b``."""
    return a - b * _divide(a, b)


# Operation name -> f(value, operand)
BINARY: Dict[str, Callable[[int, int], int]] = {
    "add": operator.add,
    "subtract": operator.sub,
    "multiply": operator.mul,
    "divide": _divide,
    "modulus": _modulus,
}

# Operation name -> f(value, distance)
SHIFTS: Dict[str, Callable[[int, int], int]] = {
    "left_shift": operator.lshift,
    "right_shift": operator.rshift,
}

UNARY: Dict[str, Callable[[int], int]] = {
    "increment": lambda value: value + 1,
    "decrement": lambda value: value - 1,
}


class MathService:
    """
    Apply a named integer operation to plate data.

    Binary operations (``add``, ``subtract``, ``multiply``, ``divide``,
    ``modulus``) take a constant, a sequence of values, or a second well,
    set, plate or stack of the same kind. Shifts take a distance; ``increment``
    and ``decrement`` take no operand.

    Data sets of unequal length are combined position by position. In the
    default mode values without a partner are carried over unchanged, as are
    wells, plates or stack members present in only one input; in strict mode
    they are dropped.

    Every result is checked against ``width`` and an ``OverflowError`` is
    raised instead of wrapping around. ``begin`` and ``length`` restrict the
    operation to a slice of each well; the result holds only that slice.
    """

    def __init__(self, operation: str = "add", strict: bool = False, width: str = "long"):
        if operation not in self.available():
            raise ValueError(f"Unknown operation: {operation}")
        if width not in INTEGER_WIDTHS:
            raise ValueError(f"Unknown integer width: {width}")
        self.operation = operation
        self.strict = strict
        self.width = width

    @staticmethod
    def available() -> List[str]:
        return sorted(list(BINARY) + list(SHIFTS) + list(UNARY))

    # Values

    @staticmethod
    def _slice(values: List[int], begin: Optional[int], length: Optional[int]) -> List[int]:
        if begin is None:
            return list(values)
        length = len(values) - begin if length is None else length
        if begin < 0 or length < 0:
            raise IndexError("Indices must be positive values.")
        if begin + length > len(values):
            raise IndexError("Ending index does not exist.")
        return values[begin:begin + length]

    def _combine(self, first: List[int], second: List[int]) -> List[int]:
        function = BINARY[self.operation]
        result = [function(a, b) for a, b in zip(first, second)]
        if not self.strict:
            longer = first if len(first) > len(second) else second
            result.extend(longer[len(result):])
        return result

    def _shift(self, values: List[int], distance) -> List[int]:
        distance = to_integer(distance)
        if distance < 0:
            raise ValueError(f"Shift distance must be positive, got {distance}")
        # Shifting by the full width already moves every bit out
        distance = min(distance, np.iinfo(INTEGER_WIDTHS[self.width]).bits)
        return [SHIFTS[self.operation](value, distance) for value in values]

    def calculate(self, values: List[int], operand=None) -> List[int]:
        """
        Apply the operation to a list of values.

        Raises:
            OverflowError: If a result does not fit the configured width
            ZeroDivisionError: If dividing by zero
            ValueError: If the operand is missing or not an integer
        """
        if self.operation in UNARY:
            result = [UNARY[self.operation](value) for value in values]
        elif self.operation in SHIFTS:
            result = self._shift(values, operand)
        elif isinstance(operand, Well):
            result = self._combine(values, operand.data)
        elif isinstance(operand, abc.Iterable) and not isinstance(operand, (str, bytes)):
            result = self._combine(values, [to_integer(value) for value in operand])
        else:
            constant = to_integer(operand)
            result = [BINARY[self.operation](value, constant) for value in values]
        return check_width(result, self.width)

    # Containers

    def well(
        self,
        well: Well,
        operand=None,
        begin: Optional[int] = None,
        length: Optional[int] = None
    ) -> Well:
        """Result of the operation as a new well at the same position."""
        values = self._slice(well.data, begin, length)
        if isinstance(operand, Well) and begin is not None:
            end = len(operand.data) if length is None else begin + length
            operand = operand.data[begin:end]
        return Well(well.row, well.column, self.calculate(values, operand))

    def _carry(self, well: Well, begin: Optional[int], length: Optional[int]) -> Well:
        return Well(well.row, well.column, self._slice(well.data, begin, length))

    def set(
        self,
        well_set: WellSet,
        operand=None,
        begin: Optional[int] = None,
        length: Optional[int] = None
    ) -> WellSet:
        """
        Apply the operation to every well of the set.

        With a second set as operand, wells at the same position are combined.
        """
        result = WellSet()
        if not isinstance(operand, WellSet):
            for well in well_set:
                result.insert(self.well(well, operand, begin, length))
            return result

        for well in well_set:
            match = operand.get_well(well)
            if match is not None:
                result.insert(self.well(well, match, begin, length))
            elif not self.strict:
                result.insert(self._carry(well, begin, length))
        if not self.strict:
            for well in operand:
                if well_set.get_well(well) is None:
                    result.insert(self._carry(well, begin, length))
        return result

    def plate(
        self,
        plate: Plate,
        operand=None,
        begin: Optional[int] = None,
        length: Optional[int] = None
    ) -> Plate:
        """
        Apply the operation to every well of the plate.

        The result keeps the plate's label and groups; with a second plate as
        operand its groups are added too.

        Raises:
            ValueError: If two plates differ in dimensions
        """
        result = Plate(plate.rows, plate.columns, plate.label)
        result.logger = plate.logger
        if isinstance(operand, Plate):
            self._check_dimensions(plate, operand)
            result.add_wells(self.set(plate.data_set(), operand.data_set(), begin, length))
        else:
            result.add_wells(self.set(plate.data_set(), operand, begin, length))
        result.add_groups(plate.groups())
        if isinstance(operand, Plate):
            for group in operand.groups():
                if not result.contains_group(group):
                    result.add_groups(group)
        return result

    def _carry_plate(self, plate: Plate, begin: Optional[int], length: Optional[int]) -> Plate:
        result = Plate(plate.rows, plate.columns, plate.label)
        result.add_wells([self._carry(well, begin, length) for well in plate])
        result.add_groups(plate.groups())
        return result

    def stack(
        self,
        stack: Stack,
        operand=None,
        begin: Optional[int] = None,
        length: Optional[int] = None
    ) -> Stack:
        """
        Apply the operation to every plate of the stack.

        With a second stack as operand, plates are paired in stack order.

        Raises:
            ValueError: If two stacks differ in dimensions
        """
        if isinstance(operand, Stack):
            self._check_dimensions(stack, operand)
            first, second = list(stack), list(operand)
            plates = [self.plate(a, b, begin, length) for a, b in zip(first, second)]
            if not self.strict:
                longer = first if len(first) > len(second) else second
                plates.extend(self._carry_plate(plate, begin, length) for plate in longer[len(plates):])
        else:
            plates = [self.plate(plate, operand, begin, length) for plate in stack]

        result = Stack(stack.rows, stack.columns, stack.label)
        if not result.add(plates):
            logger.warning(f"Some results could not be added to stack {result.label}")
        return result

    @staticmethod
    def _check_dimensions(first, second) -> None:
        if (first.rows, first.columns) != (second.rows, second.columns):
            raise ValueError(
                f"Dimensions differ: {first.rows}x{first.columns} "
                f"and {second.rows}x{second.columns}."
            )
