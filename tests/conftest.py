"""Shared fixtures."""
import random

import pytest

from plateset.models import Plate, PlateType, Well, WellList


def random_wells(count: int, rows: int, columns: int, seed: int = 7, values: int = 5):
    """Wells at distinct random positions holding random integers."""
    rng = random.Random(seed)
    positions = rng.sample([(r, c) for r in range(rows) for c in range(1, columns + 1)], count)
    return [
        Well(row, column, [rng.randint(-10000, 10000) for _ in range(values)])
        for row, column in positions
    ]


@pytest.fixture
def make_wells():
    """Factory for random wells."""
    return random_wells


@pytest.fixture
def sample_wells():
    """Three wells on the first two rows."""
    return [
        Well("A1", data=[1, 2, 3]),
        Well("A2", data=[4, 5, 6]),
        Well("B1", data=[7, 8, 9]),
    ]


@pytest.fixture
def plate_96(sample_wells):
    """96-well plate with three wells and one group."""
    plate = Plate.of_type(PlateType.PLATE_96, "Plate 1", sample_wells)
    plate.add_groups(WellList(["A1", "A2"], "Row A"))
    return plate
