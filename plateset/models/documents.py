"""Serializable documents for wells, sets, plates and stacks."""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from plateset.models.plate import Plate
from plateset.models.stack import Stack
from plateset.models.well import DATA_TYPE, Well
from plateset.models.well_list import WellList
from plateset.models.well_set import WellSet


class WellDocument(BaseModel):
    """Well with explicit coordinates."""
    row: int  # 0-based
    column: int  # 1-based
    data: List[int] = []

    @classmethod
    def from_well(cls, well: Well) -> "WellDocument":
        return cls(row=well.row, column=well.column, data=list(well.data))

    def to_well(self) -> Well:
        return Well(self.row, self.column, self.data)


class SimpleWellDocument(BaseModel):
    """Well addressed by its ID, e.g. ``B12``."""
    index: str
    data: List[int] = []

    @classmethod
    def from_well(cls, well: Well) -> "SimpleWellDocument":
        return cls(index=well.index, data=list(well.data))

    def to_well(self) -> Well:
        return Well(self.index, data=self.data)


class WellSetDocument(BaseModel):
    """Labeled well set."""
    label: Optional[str] = None
    wells: List[WellDocument] = []

    @classmethod
    def from_well_set(cls, well_set: WellSet) -> "WellSetDocument":
        return cls(
            label=well_set.label,
            wells=[WellDocument.from_well(well) for well in well_set]
        )

    def to_well_set(self) -> WellSet:
        return WellSet([well.to_well() for well in self.wells], self.label)


class SimpleWellSetDocument(BaseModel):
    """Labeled well set with wells addressed by ID."""
    label: Optional[str] = None
    wells: List[SimpleWellDocument] = []

    @classmethod
    def from_well_set(cls, well_set: WellSet) -> "SimpleWellSetDocument":
        return cls(
            label=well_set.label,
            wells=[SimpleWellDocument.from_well(well) for well in well_set]
        )

    def to_well_set(self) -> WellSet:
        return WellSet([well.to_well() for well in self.wells], self.label)


class WellListDocument(BaseModel):
    """Named group of well IDs."""
    label: Optional[str] = None
    wells: List[str] = []

    @classmethod
    def from_well_list(cls, well_list: WellList) -> "WellListDocument":
        return cls(label=well_list.label, wells=[str(index) for index in well_list])

    def to_well_list(self) -> WellList:
        return WellList(self.wells, self.label)


class PlateDocument(BaseModel):
    """Plate dimensions, data and groups."""
    label: Optional[str] = None
    rows: int = Field(gt=0)
    columns: int = Field(gt=0)
    descriptor: Optional[str] = None
    data_type: str = DATA_TYPE
    wells: List[WellDocument] = []
    groups: List[WellListDocument] = []

    @classmethod
    def from_plate(cls, plate: Plate) -> "PlateDocument":
        return cls(
            label=plate.label,
            rows=plate.rows,
            columns=plate.columns,
            descriptor=plate.descriptor,
            data_type=plate.data_type,
            wells=[WellDocument.from_well(well) for well in plate],
            groups=[WellListDocument.from_well_list(group) for group in plate.groups()]
        )

    def to_plate(self) -> Plate:
        """
        Build a plate from the document.

        Raises:
            ValueError: If a well or group lies outside the plate bounds
        """
        plate = Plate(self.rows, self.columns, self.label, [well.to_well() for well in self.wells])
        groups = [group.to_well_list() for group in self.groups]
        for group in groups:
            for index in group:
                if not plate.in_bounds(index.row, index.column):
                    raise ValueError(f"Invalid well indices for well: {index} in well group: {group}")
        plate.add_groups(groups)
        return plate


class StackDocument(BaseModel):
    """Stack of same-sized plates."""
    label: Optional[str] = None
    rows: int = Field(gt=0)
    columns: int = Field(gt=0)
    descriptor: Optional[str] = None
    plates: List[PlateDocument] = []

    @classmethod
    def from_stack(cls, stack: Stack) -> "StackDocument":
        return cls(
            label=stack.label,
            rows=stack.rows,
            columns=stack.columns,
            descriptor=stack.descriptor,
            plates=[PlateDocument.from_plate(plate) for plate in stack]
        )

    def to_stack(self) -> Stack:
        return Stack(self.rows, self.columns, self.label, [plate.to_plate() for plate in self.plates])


class ResultEntry(BaseModel):
    """Computed value at one well."""
    index: str
    value: float


class ResultDocument(BaseModel):
    """One computed value per well, e.g. the output of a statistic."""
    label: Optional[str] = None
    wells: List[ResultEntry] = []

    @classmethod
    def from_results(cls, results: Dict[Well, float], label: Optional[str] = None) -> "ResultDocument":
        return cls(
            label=label,
            wells=[ResultEntry(index=well.index, value=float(value)) for well, value in results.items()]
        )

    def to_results(self) -> Dict[Well, float]:
        return {Well(entry.index): entry.value for entry in self.wells}
