"""Data models for plate data."""
from plateset.models.well_index import WellIndex, encode_row, decode_row
from plateset.models.well import Well
from plateset.models.well_list import WellList
from plateset.models.well_set import WellSet
from plateset.models.plate import (
    Plate,
    PlateType,
    PLATE_DIMENSIONS,
    plate_type_for,
    dimensions_for
)
from plateset.models.stack import Stack
from plateset.models.documents import (
    WellDocument,
    SimpleWellDocument,
    WellSetDocument,
    SimpleWellSetDocument,
    WellListDocument,
    PlateDocument,
    StackDocument,
    ResultEntry,
    ResultDocument
)

__all__ = [
    "WellIndex", "encode_row", "decode_row",
    "Well", "WellList", "WellSet",
    "Plate", "PlateType", "PLATE_DIMENSIONS", "plate_type_for", "dimensions_for",
    "Stack",
    "WellDocument", "SimpleWellDocument", "WellSetDocument", "SimpleWellSetDocument",
    "WellListDocument", "PlateDocument", "StackDocument", "ResultEntry", "ResultDocument"
]
