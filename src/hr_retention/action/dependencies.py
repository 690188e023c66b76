"""Shared helpers for API routers — upload parsing and as-of resolution."""

import gzip
import logging
import zlib
from datetime import date
from typing import Optional

from fastapi import HTTPException, UploadFile

from config.settings import settings
from hr_retention.discovery.records import Employee
from hr_retention.ingestion.employee_loader import MissingColumnsError, load_employees_text

logger = logging.getLogger(__name__)


async def read_employee_upload(file: UploadFile) -> list[Employee]:
    """Parse an uploaded HR export (plain or gzipped CSV) into employees.

    Raises:
        HTTPException: 400 when the file is not a readable HR export.
    """
    contents = await file.read()
    file_name = file.filename or "upload.csv"

    try:
        if file_name.endswith(".gz"):
            contents = gzip.decompress(contents)
        employees = load_employees_text(contents.decode("utf-8"))
    except MissingColumnsError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except (OSError, EOFError, zlib.error, ValueError) as exc:
        logger.warning("Rejected upload %s: %s", file_name, exc)
        raise HTTPException(status_code=400, detail=f"Could not parse {file_name}: {exc}")

    if not employees:
        raise HTTPException(status_code=400, detail="No employee rows found in upload")
    return employees


def resolve_as_of(as_of: Optional[date]) -> date:
    """The request's as-of date, falling back to settings then today."""
    return settings.resolve_as_of(as_of)
