"""File upload and parsing API."""
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile

from plateset.config import settings
from plateset.models import PlateDocument
from plateset.services import FileService

router = APIRouter()
file_service = FileService()

ALLOWED_EXTENSIONS = ['.xlsx', '.xls', '.csv']


@router.post("/parse", response_model=PlateDocument)
async def parse_file(
    file: UploadFile = File(...),
    rows: Optional[int] = Form(None),
    columns: Optional[int] = Form(None),
    label: Optional[str] = Form(None)
):
    """
    Parse uploaded well table into a plate.

    Supports Excel (.xlsx, .xls) and CSV (.csv) formats.
    """
    # Validate file type
    if not file.filename:
        raise HTTPException(status_code=400, detail="Filename cannot be empty")

    if not any(file.filename.lower().endswith(ext) for ext in ALLOWED_EXTENSIONS):
        raise HTTPException(
            status_code=400,
            detail="Unsupported file format, upload an Excel or CSV file"
        )

    # Check file size
    content = await file.read()
    if len(content) > settings.max_file_size_mb * 1024 * 1024:
        raise HTTPException(
            status_code=400,
            detail=f"File too large, upload a file smaller than {settings.max_file_size_mb}MB"
        )

    # Parse file
    try:
        plate = file_service.parse_file(content, file.filename, rows, columns, label)
        return PlateDocument.from_plate(plate)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"File parsing failed: {str(e)}")


@router.post("/validate")
async def validate_file(file: UploadFile = File(...)):
    """
    Validate file format without full parsing.
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="Filename cannot be empty")

    is_valid = any(file.filename.lower().endswith(ext) for ext in ALLOWED_EXTENSIONS)

    return {
        "valid": is_valid,
        "filename": file.filename,
        "message": "File format is valid" if is_valid else "Unsupported file format"
    }
