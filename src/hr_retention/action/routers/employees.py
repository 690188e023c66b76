"""Staging routes — persist an export into the star schema and analyse it from there."""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from hr_retention.action.dependencies import read_employee_upload, resolve_as_of
from hr_retention.db.connection import get_session
from hr_retention.discovery.engine import run_analysis
from hr_retention.discovery.event_deriver import (
    derive_events,
    derive_performance_records,
    fill_hire_dates,
)
from hr_retention.discovery.report_formatter import result_to_dict
from hr_retention.ingestion.staging import (
    fetch_employees,
    fetch_performance_records,
    stage_employees,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])


@router.post("/stage")
async def stage_upload(
    file: UploadFile = File(...),
    as_of: Optional[date] = None,
    session: AsyncSession = Depends(get_session),
) -> dict:
    """Load an HR export into dim_employee, dim_time and the fact tables."""
    employees = await read_employee_upload(file)
    as_of_date = resolve_as_of(as_of)
    employees = fill_hire_dates(employees, as_of_date)

    counts = await stage_employees(
        session,
        employees,
        derive_events(employees, as_of_date),
        derive_performance_records(employees, as_of_date),
    )
    return {"status": "staged", "as_of": as_of_date.isoformat(), "rows": counts}


@router.get("/analysis")
async def analyze_staged(
    as_of: Optional[date] = None,
    session: AsyncSession = Depends(get_session),
) -> dict:
    """Run the retention analysis over staged employees and their score history."""
    records = await fetch_performance_records(session)
    employees = await fetch_employees(session, records)
    if not employees:
        raise HTTPException(status_code=404, detail="No staged employees")

    result = run_analysis(employees, as_of=resolve_as_of(as_of), performance_records=records)
    payload = result_to_dict(result)
    payload["event_count"] = len(payload.pop("events"))
    return payload
