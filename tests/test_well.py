"""Tests for the Well model."""
import logging
from decimal import Decimal

import numpy as np
import pytest

from plateset.models import Well, WellIndex, WellSet


class TestWellConstruction:
    """Test cases for well coordinates."""

    def test_from_well_id(self):
        well = Well("B12")
        assert well.row == 1
        assert well.column == 12
        assert well.index == "B12"
        assert well.row_string == "B"

    def test_from_parts(self):
        assert Well("AB", 3).row == 27
        assert Well("ab", "3").row == 27
        assert Well("1", 2).row == 1
        assert Well(np.int64(2), 3).row == 2
        assert Well(1.0, 2).row == 1

    def test_from_index(self):
        well = Well.from_index(WellIndex(2, 4), [1])
        assert well.index == "C4"
        assert well.data == [1]
        assert well.well_index() == WellIndex(2, 4)

    @pytest.mark.parametrize("row, column", [(-1, 1), (0, 0), (0, -3)])
    def test_invalid_indices(self, row, column):
        with pytest.raises(ValueError):
            Well(row, column)

    @pytest.mark.parametrize("well_id", ["1A", "A", "12", "A1B", ""])
    def test_invalid_well_id(self, well_id):
        with pytest.raises(ValueError, match="Invalid well index"):
            Well(well_id)

    def test_invalid_column(self):
        with pytest.raises(ValueError, match="Illegal column value"):
            Well("A", "x")

    def test_single_integer_is_not_an_id(self):
        with pytest.raises(ValueError):
            Well(5)

    def test_type_string(self):
        assert Well("A1").type_string == "Integer"


class TestWellIdentity:
    """Wells are identified by position only."""

    def test_equality_ignores_data(self):
        first = Well(1, 1, [5])
        second = Well(1, 1, [9])
        assert first == second
        assert hash(first) == hash(second)
        assert first.data != second.data

    def test_ordering(self):
        assert Well("A2") < Well("B1")
        assert Well("A1") < Well("A2")
        assert Well("B1").compare_to(Well("A9")) == 1
        assert Well("A1").compare_to(Well("A1", data=[3])) == 0

    def test_compare_to_other_type(self):
        with pytest.raises(TypeError):
            Well("A1").compare_to(WellIndex(0, 1))

    def test_str(self):
        assert str(Well("A1", data=[1, 2])) == "A1 [1, 2]"
        assert str(Well("C3")) == "C3 []"


class TestWellData:
    """Test cases for well data operations."""

    def test_add_values(self):
        well = Well("A1")
        well.add(1)
        well.add([2, 3])
        well.add(np.array([4, 5]))
        well.add(Decimal(6))
        well.add(7.0)
        assert well.data == [1, 2, 3, 4, 5, 6, 7]
        assert well.size() == 7

    def test_add_well_and_set(self):
        well = Well("A1", data=[1])
        well.add(Well("B2", data=[2, 3]))
        well.add(WellSet([Well("C1", data=[4]), Well("C2", data=[5])]))
        assert well.data == [1, 2, 3, 4, 5]

    @pytest.mark.parametrize("value", [1.5, True, "3", float("nan"), None])
    def test_add_invalid(self, value, caplog):
        well = Well("A1", data=[1])
        with caplog.at_level(logging.ERROR):
            assert well.add(value) is False
        assert well.data == [1]
        assert "Invalid integer value" in caplog.text

    def test_add_mixed_values_keeps_valid(self, caplog):
        well = Well("A1")
        with caplog.at_level(logging.ERROR):
            assert well.add([1, "x", 3]) is False
        assert well.data == [1, 3]
        assert "'x'" in caplog.text

    def test_add_reports_success(self):
        assert Well("A1").add([1, 2]) is True

    @pytest.mark.parametrize("data", [[1, 2.5], "12", [None]])
    def test_constructor_rejects_invalid_data(self, data):
        with pytest.raises(ValueError):
            Well("A1", data=data)

    def test_data_is_live(self):
        well = Well("A1", data=[1])
        well.data.append(2)
        assert well.data == [1, 2]

    def test_replace_data(self):
        well = Well("A1", data=[1, 2])
        assert well.replace_data([3]) is True
        assert well.data == [3]

    def test_replace_data_partial(self):
        well = Well("A1", data=[1, 2])
        assert well.replace_data([3, "x", 4]) is False
        assert well.data == [3, 4]

    def test_replace_data_all_invalid_keeps_data(self):
        well = Well("A1", data=[1, 2])
        assert well.replace_data(["x", 0.5]) is False
        assert well.data == [1, 2]

    def test_remove_every_occurrence(self):
        well = Well("A1", data=[1, 2, 1, 3])
        assert well.remove(1) is True
        assert well.data == [2, 3]
        well.remove(WellSet([Well("B1", data=[3])]))
        assert well.data == [2]

    def test_remove_skips_invalid(self):
        well = Well("A1", data=[1, 2, 3])
        assert well.remove([1, None, 3]) is False
        assert well.data == [2]

    def test_retain(self):
        well = Well("A1", data=[1, 2, 3, 2])
        well.retain([2, 3])
        assert well.data == [2, 3, 2]
        well.retain(Well("B1", data=[2]))
        assert well.data == [2, 2]

    def test_retain_single_value(self):
        well = Well("A1", data=[1, 2, 2])
        assert well.retain(2) is True
        assert well.data == [2]

    def test_retain_absent_value(self, caplog):
        well = Well("A1", data=[1, 2])
        with caplog.at_level(logging.ERROR):
            assert well.retain(9) is False
        assert well.data == [1, 2]
        assert "9 does not exist" in caplog.text

    def test_retain_invalid_keeps_data(self):
        well = Well("A1", data=[1, 2])
        assert well.retain("two") is False
        assert well.retain([None]) is False
        assert well.data == [1, 2]
        assert well.retain([2, "x"]) is False
        assert well.data == [2]

    def test_ranges(self):
        well = Well("A1", data=[0, 1, 2, 3, 4])
        well.remove_range(1, 3)
        assert well.data == [0, 3, 4]
        well.retain_range(1, 3)
        assert well.data == [3, 4]

    @pytest.mark.parametrize("begin, end", [(3, 1), (-1, 2), (0, 9)])
    def test_invalid_ranges(self, begin, end):
        well = Well("A1", data=[0, 1, 2, 3, 4])
        with pytest.raises(IndexError):
            well.remove_range(begin, end)
        with pytest.raises(IndexError):
            well.retain_range(begin, end)
        assert well.data == [0, 1, 2, 3, 4]

    def test_sub_list(self):
        well = Well("A1", data=[0, 1, 2, 3])
        part = well.sub_list(1, 2)
        assert part == well
        assert part.data == [1, 2]
        with pytest.raises(IndexError):
            well.sub_list(3, 5)

    def test_lookup(self):
        well = Well("A1", data=[4, 5, 4])
        assert well.get(1) == 5
        assert well[2] == 4
        assert well.contains(5)
        assert well.index_of(4) == 0
        assert well.last_index_of(4) == 2
        assert well.index_of(7) == -1
        assert well.last_index_of(7) == -1

    def test_copy_is_independent(self):
        well = Well("A1", data=[1])
        copy = well.copy()
        copy.add(2)
        assert well.data == [1]
        assert copy == well

    def test_clear(self):
        well = Well("A1", data=[1])
        well.clear()
        assert well.is_empty()


class TestWellConversions:
    """Test cases for numeric conversions."""

    def test_widths(self):
        well = Well("A1", data=[1, -2, 127])
        assert well.to_byte() == [1, -2, 127]
        assert well.to_byte_array().dtype == np.int8
        assert well.to_int_array().dtype == np.int32
        assert well.to_long_array().dtype == np.int64

    def test_overflow(self):
        with pytest.raises(OverflowError):
            Well("A1", data=[200]).to_byte()
        with pytest.raises(OverflowError):
            Well("A1", data=[40000]).to_short()
        with pytest.raises(OverflowError):
            Well("A1", data=[2 ** 31]).to_int()
        with pytest.raises(OverflowError):
            Well("A1", data=[2 ** 63]).to_long()
        with pytest.raises(OverflowError):
            Well("A1", data=[10 ** 40]).to_float()
        assert Well("A1", data=[40000]).to_int() == [40000]

    def test_floating(self):
        well = Well("A1", data=[1, 2])
        assert well.to_double() == [1.0, 2.0]
        assert well.to_float() == [1.0, 2.0]
        assert well.to_double_array().dtype == np.float64
        assert well.to_float_array().dtype == np.float32

    def test_arbitrary_precision(self):
        well = Well("A1", data=[2 ** 70])
        assert well.to_big_integer() == [2 ** 70]
        assert well.to_decimal() == [Decimal(2 ** 70)]
