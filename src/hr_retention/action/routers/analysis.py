"""Analysis routes — full retention analysis over an uploaded export."""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, File, UploadFile

from hr_retention.action.dependencies import read_employee_upload, resolve_as_of
from hr_retention.discovery.engine import run_analysis
from hr_retention.discovery.report_formatter import result_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analysis"])


@router.post("/analyze")
async def analyze_upload(
    file: UploadFile = File(...),
    as_of: Optional[date] = None,
    include_events: bool = False,
) -> dict:
    """Run the retention analysis on an uploaded HR export."""
    employees = await read_employee_upload(file)
    result = run_analysis(employees, as_of=resolve_as_of(as_of))

    payload = result_to_dict(result)
    if not include_events:
        payload["event_count"] = len(payload.pop("events"))
    return payload
