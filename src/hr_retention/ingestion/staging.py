"""Employee records → PostgreSQL star schema, and back.

Dimension rows that already exist are left alone
(``ON CONFLICT DO NOTHING``), so re-staging the same export is a no-op for
dimensions. Fact rows are appended.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from datetime import date

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from hr_retention.db.models import DimEmployee, PerformanceFact
from hr_retention.discovery.records import Employee, Event, PerformanceRecord

logger = logging.getLogger(__name__)

_BATCH_SIZE = 200

# Employee fields stored as dim_employee columns; the rest go to ``attributes``
_CORE_FIELDS = (
    "employee_id", "gender", "department", "role", "hire_date",
    "tenure_years", "attrition", "distance_from_home",
)
_ATTRIBUTE_FIELDS = tuple(
    f.name for f in dataclasses.fields(Employee)
    if f.name not in _CORE_FIELDS and f.name != "performance_score"
)

_INSERT_EMPLOYEE = text(
    "INSERT INTO dim_employee "
    "(employee_id, gender, department, role, hire_date, tenure_years, attrition, "
    "distance_from_home, attributes) "
    "VALUES (:employee_id, :gender, :department, :role, :hire_date, :tenure_years, "
    ":attrition, :distance_from_home, CAST(:attributes AS JSON)) "
    "ON CONFLICT (employee_id) DO NOTHING"
)

_INSERT_TIME = text(
    "INSERT INTO dim_time (date_key, year, quarter, month, day, day_of_week) "
    "VALUES (:date_key, :year, :quarter, :month, :day, :day_of_week) "
    "ON CONFLICT (date_key) DO NOTHING"
)

_INSERT_PERFORMANCE = text(
    "INSERT INTO performance_fact (employee_id, date_key, performance_score) "
    "VALUES (:employee_id, :date_key, :performance_score)"
)

_INSERT_EVENT = text(
    "INSERT INTO retention_fact (employee_id, event_date, event_type) "
    "VALUES (:employee_id, :event_date, :event_type)"
)


# ---------------------------------------------------------------------------
# Row builders
# ---------------------------------------------------------------------------


def employee_row(emp: Employee) -> dict:
    """Bind parameters for one dim_employee insert."""
    row = {name: getattr(emp, name) for name in _CORE_FIELDS}
    row["attributes"] = json.dumps({name: getattr(emp, name) for name in _ATTRIBUTE_FIELDS})
    return row


def time_row(d: date) -> dict:
    """Calendar attributes for *d*; day_of_week counts from Sunday = 0."""
    return {
        "date_key": d,
        "year": d.year,
        "quarter": (d.month - 1) // 3 + 1,
        "month": d.month,
        "day": d.day,
        "day_of_week": d.isoweekday() % 7,
    }


async def _execute_batches(session: AsyncSession, stmt, rows: list[dict]) -> None:
    for start in range(0, len(rows), _BATCH_SIZE):
        await session.execute(stmt, rows[start:start + _BATCH_SIZE])


# ---------------------------------------------------------------------------
# Write
# ---------------------------------------------------------------------------


async def stage_employees(
    session: AsyncSession,
    employees: list[Employee],
    events: list[Event],
    records: list[PerformanceRecord],
) -> dict[str, int]:
    """Insert employees, calendar dates, performance and retention facts.

    Returns:
        Row counts submitted per table.
    """
    if not employees:
        return {"dim_employee": 0, "dim_time": 0, "performance_fact": 0, "retention_fact": 0}

    dates = sorted({ev.event_date for ev in events} | {r.record_date for r in records})

    employee_rows = [employee_row(e) for e in employees]
    time_rows = [time_row(d) for d in dates]
    perf_rows = [
        {"employee_id": r.employee_id, "date_key": r.record_date, "performance_score": r.performance_score}
        for r in records
    ]
    event_rows = [
        {"employee_id": ev.employee_id, "event_date": ev.event_date, "event_type": ev.kind.value}
        for ev in events
    ]

    await _execute_batches(session, _INSERT_EMPLOYEE, employee_rows)
    if time_rows:
        await _execute_batches(session, _INSERT_TIME, time_rows)
    if perf_rows:
        await _execute_batches(session, _INSERT_PERFORMANCE, perf_rows)
    if event_rows:
        await _execute_batches(session, _INSERT_EVENT, event_rows)
    await session.commit()

    counts = {
        "dim_employee": len(employee_rows),
        "dim_time": len(time_rows),
        "performance_fact": len(perf_rows),
        "retention_fact": len(event_rows),
    }
    logger.info("Staged %s", counts)
    return counts


# ---------------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------------


def employee_from_row(row: DimEmployee, performance_score: int | None = None) -> Employee:
    """Rebuild an Employee from a dim_employee row."""
    extra = {k: v for k, v in (row.attributes or {}).items() if k in _ATTRIBUTE_FIELDS}
    return Employee(
        employee_id=row.employee_id,
        gender=row.gender,
        department=row.department,
        role=row.role,
        hire_date=row.hire_date,
        tenure_years=row.tenure_years,
        performance_score=performance_score,
        attrition=bool(row.attrition),
        distance_from_home=row.distance_from_home,
        **extra,
    )


async def fetch_performance_records(session: AsyncSession) -> list[PerformanceRecord]:
    """All performance facts, oldest first."""
    result = await session.execute(
        select(PerformanceFact).order_by(PerformanceFact.employee_id, PerformanceFact.date_key)
    )
    return [
        PerformanceRecord(
            employee_id=p.employee_id,
            record_date=p.date_key,
            performance_score=p.performance_score,
        )
        for p in result.scalars().all()
    ]


async def fetch_employees(
    session: AsyncSession,
    records: list[PerformanceRecord] | None = None,
) -> list[Employee]:
    """All staged employees, each with their latest performance score."""
    if records is None:
        records = await fetch_performance_records(session)

    latest: dict[int, PerformanceRecord] = {}
    for rec in records:
        current = latest.get(rec.employee_id)
        if current is None or rec.record_date >= current.record_date:
            latest[rec.employee_id] = rec

    result = await session.execute(select(DimEmployee).order_by(DimEmployee.employee_id))
    employees = []
    for row in result.scalars().all():
        rec = latest.get(row.employee_id)
        employees.append(employee_from_row(row, rec.performance_score if rec else None))

    logger.info("Fetched %d staged employees", len(employees))
    return employees
