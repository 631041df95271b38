"""Plate analysis and export API."""
import logging
from typing import List, Optional, Union

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse, Response
from pydantic import BaseModel

from plateset.config import settings
from plateset.models import PlateDocument, ResultDocument, WellSet
from plateset.services import FileService, MathService, SerializationService, StatisticsService

logger = logging.getLogger(__name__)

router = APIRouter()
file_service = FileService()
serialization_service = SerializationService()


class StatisticsRequest(BaseModel):
    """Request for a per-well statistic."""
    plate: PlateDocument
    statistic: str = "mean"
    q: Optional[float] = None  # percentile and quantile only
    weights: Optional[List[float]] = None
    begin: Optional[int] = None
    length: Optional[int] = None
    group: Optional[str] = None
    wells: Optional[str] = None  # delimited well IDs


class MapRequest(StatisticsRequest):
    """Request for a plate map of a statistic."""
    delimiter: Optional[str] = None


class MathRequest(BaseModel):
    """Request for an integer operation over every well of a plate."""
    plate: PlateDocument
    operation: str = "add"
    operand: Optional[Union[int, List[int], PlateDocument]] = None
    strict: bool = False
    begin: Optional[int] = None
    length: Optional[int] = None


def _compute(request: StatisticsRequest):
    plate = request.plate.to_plate()
    service = StatisticsService(request.statistic, request.q, request.weights)
    if request.group is not None:
        group: Optional[WellSet] = plate.get_groups(request.group)
        if group is None:
            raise ValueError(f"The group {request.group} does not exist.")
        return plate, service.set(group, request.begin, request.length)
    if request.wells is not None:
        wells = plate.get_wells(request.wells, settings.list_delimiter)
        if wells is None:
            raise ValueError(f"None of the wells {request.wells} exist on the plate.")
        return plate, service.set(wells, request.begin, request.length)
    return plate, service.plate(plate, request.begin, request.length)


@router.post("/statistics", response_model=ResultDocument)
async def statistics(request: StatisticsRequest):
    """
    Compute a descriptive statistic for every well of a plate or group.
    """
    try:
        plate, results = _compute(request)
        return ResultDocument.from_results(results, f"{plate.label} {request.statistic}")
    except (ValueError, IndexError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.exception("Statistic computation failed")
        raise HTTPException(status_code=500, detail=f"Statistic computation failed: {str(e)}")


@router.post("/map", response_class=PlainTextResponse)
async def plate_map(request: MapRequest):
    """
    Render a statistic as a delimited plate map.
    """
    try:
        plate, results = _compute(request)
        return file_service.plate_map(
            results, plate.rows, plate.columns,
            label=f"{plate.label} {request.statistic}",
            delimiter=request.delimiter
        )
    except (ValueError, IndexError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.exception("Plate map generation failed")
        raise HTTPException(status_code=500, detail=f"Plate map generation failed: {str(e)}")


@router.post("/math", response_model=PlateDocument)
async def plate_math(request: MathRequest):
    """
    Apply an integer operation to every well of a plate.

    The operand is a constant, a list of values, or a second plate.
    """
    try:
        service = MathService(request.operation, request.strict)
        operand = request.operand
        if isinstance(operand, PlateDocument):
            operand = operand.to_plate()
        result = service.plate(request.plate.to_plate(), operand, request.begin, request.length)
        return PlateDocument.from_plate(result)
    except (ValueError, IndexError, OverflowError, ZeroDivisionError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.exception("Plate operation failed")
        raise HTTPException(status_code=500, detail=f"Plate operation failed: {str(e)}")


@router.post("/xml")
async def export_xml(document: PlateDocument):
    """
    Export a plate as XML.
    """
    try:
        content = serialization_service.to_xml(document.to_plate())
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return Response(content=content, media_type="application/xml")


@router.post("/validate")
async def validate_plate(document: PlateDocument):
    """
    Check that every well and group of a plate lies within its bounds.
    """
    issues: List[str] = []
    seen = set()
    for well in document.wells:
        if not (0 <= well.row < document.rows and 1 <= well.column <= document.columns):
            issues.append(f"Well at row {well.row}, column {well.column} is outside the plate.")
        if (well.row, well.column) in seen:
            issues.append(f"Well at row {well.row}, column {well.column} is listed more than once.")
        seen.add((well.row, well.column))
    for group in document.groups:
        try:
            group.to_well_list()
        except ValueError as e:
            issues.append(f"Group {group.label}: {e}")
    if not issues:
        try:
            document.to_plate()
        except ValueError as e:
            issues.append(str(e))

    return {
        "valid": not issues,
        "issues": issues,
        "message": "Plate is valid" if not issues else f"Found {len(issues)} issue(s)"
    }
