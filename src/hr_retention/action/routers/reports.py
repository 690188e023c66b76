"""Workforce report catalog routes."""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, File, HTTPException, UploadFile
from pydantic import BaseModel

from hr_retention.action.dependencies import read_employee_upload, resolve_as_of
from hr_retention.discovery.event_deriver import fill_hire_dates
from hr_retention.discovery.report_catalog import REPORTS, list_reports, run_report
from hr_retention.discovery.report_formatter import breakdown_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reports"])


class ReportInfo(BaseModel):
    key: str
    title: str
    insight: str


@router.get("/reports", response_model=list[ReportInfo])
async def list_catalog() -> list[ReportInfo]:
    """List all catalog reports."""
    return [ReportInfo(key=r.key, title=r.title, insight=r.insight) for r in list_reports()]


@router.post("/reports/{report_key}")
async def build_report(
    report_key: str,
    file: UploadFile = File(...),
    as_of: Optional[date] = None,
) -> dict:
    """Build one catalog report from an uploaded HR export."""
    if report_key.lower() not in REPORTS:
        raise HTTPException(status_code=404, detail=f"Unknown report: {report_key}")

    employees = await read_employee_upload(file)
    as_of_date = resolve_as_of(as_of)
    table = run_report(report_key, fill_hire_dates(employees, as_of_date), as_of_date)
    return {"key": report_key.lower(), **breakdown_to_dict(table)}
