"""Tests for Plate."""
import logging

import pytest

from plateset.models import Plate, PlateType, Well, WellList, WellSet, plate_type_for


class TestPlateDescriptors:
    """Test cases for plate types and dimensions."""

    @pytest.mark.parametrize("plate_type, rows, columns", [
        (PlateType.PLATE_6, 2, 3),
        (PlateType.PLATE_12, 3, 4),
        (PlateType.PLATE_24, 4, 6),
        (PlateType.PLATE_48, 6, 8),
        (PlateType.PLATE_96, 8, 12),
        (PlateType.PLATE_384, 16, 24),
        (PlateType.PLATE_1536, 32, 48),
    ])
    def test_presets(self, plate_type, rows, columns):
        plate = Plate.of_type(plate_type)
        assert (plate.rows, plate.columns) == (rows, columns)
        assert plate.type == plate_type
        assert plate.descriptor == f"{plate_type.value}-Well"
        assert Plate(rows, columns).type == plate_type

    def test_custom(self):
        plate = Plate(5, 7, "Odd")
        assert plate.type == PlateType.CUSTOM
        assert plate.descriptor == "Custom Plate: 5x7"
        assert plate_type_for(5, 7, "Custom Stack")[1] == "Custom Stack: 5x7"

    @pytest.mark.parametrize("plate_type", [7, PlateType.CUSTOM])
    def test_invalid_type(self, plate_type):
        with pytest.raises(ValueError):
            Plate.of_type(plate_type)

    @pytest.mark.parametrize("rows, columns", [(0, 12), (8, 0), (-1, 5)])
    def test_invalid_dimensions(self, rows, columns):
        with pytest.raises(ValueError):
            Plate(rows, columns)

    def test_label(self):
        assert Plate(8, 12, "P").label == "P"
        assert Plate(8, 12).label.startswith("Plate")
        assert str(Plate(8, 12, "P")) == "Type: 96-Well Label: P"
        assert Plate(8, 12).data_type == "Integer"


class TestPlateWells:
    """Test cases for well storage."""

    def test_bounds_enforcement(self):
        plate = Plate(8, 12, "P")
        assert plate.add_wells(Well(8, 1)) is False
        assert plate.add_wells(Well(0, 13)) is False
        assert plate.size() == 0
        assert plate.add_wells(Well(7, 12)) is True
        assert plate.size() == 1

    def test_seed_out_of_bounds(self):
        with pytest.raises(ValueError, match="Invalid well indices"):
            Plate(8, 12, "P", [Well("A1"), Well("I1")])

    def test_batch_partial_failure(self, caplog):
        plate = Plate(8, 12, "P")
        wells = [Well("A1", data=[1]), Well("Z1", data=[2]), Well("B2", data=[3])]
        with caplog.at_level(logging.ERROR):
            assert plate.add_wells(wells) is False
        assert plate.contains("A1")
        assert plate.contains("B2")
        assert plate.size() == 2
        assert "Z1" in caplog.text

    def test_duplicate_add_fails(self, plate_96):
        assert plate_96.add_wells(Well("A1", data=[100])) is False
        assert plate_96.get_well("A1").data == [1, 2, 3]

    def test_replace(self, plate_96):
        assert plate_96.replace_wells(Well("A1", data=[100])) is True
        assert plate_96.get_well("A1").data == [100]

    def test_added_wells_are_copied(self):
        well = Well("A1", data=[1])
        plate = Plate(8, 12, "P", [well])
        well.add(2)
        assert plate.get_well("A1").data == [1]

    def test_lookup_aliases(self, plate_96):
        plate_96.get_well("A1").add(4)
        assert plate_96.get_well("A1").data == [1, 2, 3, 4]
        plate_96.get_wells("A1,A2").get_well("A2").clear()
        assert plate_96.get_well("A2").is_empty()

    def test_data_set_is_a_snapshot(self, plate_96):
        snapshot = plate_96.data_set()
        snapshot.get_well("A1").clear()
        assert plate_96.get_well("A1").data == [1, 2, 3]

    def test_remove(self, plate_96):
        assert plate_96.remove_wells("A1") is True
        assert plate_96.remove_wells("A1") is False
        assert plate_96.remove_wells(Well(20, 1)) is False
        assert plate_96.size() == 2

    def test_retain_is_idempotent(self, plate_96):
        wanted = WellSet([Well("A1"), Well("B1")])
        plate_96.retain_wells(wanted)
        once = plate_96.data_set()
        plate_96.retain_wells(wanted)
        assert plate_96.data_set() == once
        assert [well.index for well in plate_96] == ["A1", "B1"]

    def test_retain_out_of_bounds(self, plate_96):
        assert plate_96.retain_wells("A1, Z9") is False
        assert [well.index for well in plate_96] == ["A1"]

    def test_retain_rejected_well_keeps_plate(self, caplog):
        plate = Plate(8, 12, "P", [Well("A1"), Well("B2")])
        with caplog.at_level(logging.ERROR):
            assert plate.retain_wells(Well(20, 1)) is False
        assert plate.size() == 2
        assert "Invalid well indices" in caplog.text

    def test_retain_absent_well_keeps_plate(self):
        plate = Plate(8, 12, "P", [Well("A1"), Well("B2")])
        assert plate.retain_wells("C3") is False
        assert plate.size() == 2

    @pytest.mark.parametrize("method", ["add_wells", "remove_wells", "replace_wells", "retain_wells"])
    def test_unsupported_source_is_logged(self, plate_96, method, caplog):
        with caplog.at_level(logging.ERROR):
            assert getattr(plate_96, method)(None) is False
            assert getattr(plate_96, method)("A1", delimiter="") is False
        assert plate_96.size() == 3
        assert "Unsupported well source" in caplog.text

    def test_rows_and_columns(self, plate_96):
        assert plate_96.get_row(0).size() == 2
        assert plate_96.get_column(1).size() == 2
        assert plate_96.get_row(8) is None
        assert plate_96.get_column(13) is None

    def test_navigation(self, plate_96):
        assert plate_96.first().index == "A1"
        assert plate_96.last().index == "B1"
        assert plate_96.higher("A1").index == "A2"
        assert [w.index for w in plate_96.head_set("B1")] == ["A1", "A2"]

    def test_clear(self, plate_96):
        assert plate_96.clear_wells()
        assert plate_96.is_empty()

    def test_injected_logger(self, caplog):
        plate = Plate(8, 12, "P")
        plate.logger = logging.getLogger("custom.plate")
        with caplog.at_level(logging.ERROR, logger="custom.plate"):
            plate.add_wells(Well(20, 1))
        assert caplog.records[0].name == "custom.plate"

    def test_print_all_data(self, plate_96):
        lines = plate_96.print_all_data().splitlines()
        assert lines[0] == "Plate 1 96-Well"
        assert lines[1] == "A1 [1, 2, 3]"


class TestPlateGroups:
    """Test cases for well groups."""

    def test_groups_resolve_live_data(self):
        plate = Plate(8, 12, "P")
        plate.add_groups(WellList(["A1", "A2"], "Pair"))
        plate.add_wells(Well("A1", data=[5]))
        groups = plate.all_groups()
        assert len(groups) == 1
        assert groups[0].label == "Pair"
        assert groups[0].get_well("A1").data == [5]
        assert groups[0].get_well("A2").is_empty()

    def test_group_reflects_later_edits(self, plate_96):
        plate_96.get_well("A1").add(4)
        assert plate_96.get_groups("Row A").get_well("A1").data == [1, 2, 3, 4]

    def test_duplicate_index_set_rejected(self, plate_96, caplog):
        with caplog.at_level(logging.ERROR):
            assert plate_96.add_groups(WellList(["A2", "A1"], "Other")) is False
        assert len(plate_96.groups()) == 1

    def test_out_of_bounds_group(self, plate_96):
        assert plate_96.add_groups(WellList(["A1", "M1"], "Far")) is False
        assert not plate_96.contains_group("Far")

    def test_get_groups(self, plate_96):
        plate_96.add_groups(WellList(["B1"], "Row B"))
        assert plate_96.get_groups("Row B").label == "Row B"
        assert plate_96.get_groups(WellList(["B1"])).label == "Row B"
        assert plate_96.get_groups("Missing") is None
        found = plate_96.get_groups(["Row A", "Row B", "Missing"])
        assert [group.label for group in found] == ["Row A", "Row B"]

    def test_contains_and_remove(self, plate_96):
        assert plate_96.contains_group("Row A")
        assert plate_96.contains_group(WellList(["A1", "A2"]))
        assert plate_96.remove_groups("Row A") is True
        assert plate_96.remove_groups("Row A") is False
        assert plate_96.groups() == []

    @pytest.mark.parametrize("source", [None, 7])
    def test_unsupported_group_source_is_logged(self, plate_96, source, caplog):
        with caplog.at_level(logging.ERROR):
            assert plate_96.add_groups(source) is False
            assert plate_96.remove_groups(source) is False
        assert len(plate_96.groups()) == 1
        assert "Unsupported group source" in caplog.text

    def test_groups_are_copied(self):
        group = WellList(["A1"], "g")
        plate = Plate(8, 12, "P")
        plate.add_groups(group)
        group.add("A2")
        assert plate.groups()[0].size() == 1

    def test_clear_groups(self, plate_96):
        plate_96.clear_groups()
        assert plate_96.all_groups() == []


class TestPlateEquality:
    """Plates compare by content, not construction path."""

    def test_bulk_and_incremental_construction(self, make_wells):
        wells = make_wells(24, 8, 12)
        bulk = Plate(8, 12, "Same", wells)
        incremental = Plate(8, 12, "Same")
        for well in wells:
            incremental.add_wells(well)
        assert bulk == incremental
        assert bulk.compare_to(incremental) == 0
        assert hash(bulk) == hash(incremental)

    def test_copy(self, plate_96):
        copy = plate_96.copy()
        assert copy == plate_96
        assert copy.groups() == plate_96.groups()
        copy.get_well("A1").clear()
        assert plate_96.get_well("A1").data == [1, 2, 3]

    def test_ordering(self):
        assert Plate(2, 3, "z") < Plate(8, 12, "a")
        assert Plate(8, 12, "a") < Plate(8, 12, "b")
        small = Plate(8, 12, "a", [Well("A1")])
        large = Plate(8, 12, "a", [Well("A1"), Well("A2")])
        assert small < large
        with pytest.raises(TypeError):
            small.compare_to("plate")

    def test_labels_matter(self):
        assert Plate(8, 12, "a") != Plate(8, 12, "b")
