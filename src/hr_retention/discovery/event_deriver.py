"""Hire/exit event derivation from the employee snapshot.

The HR export has no event history, only an attrition flag and the years an
employee has spent at the company. Each employee therefore yields exactly one
event: an ``exit`` when the attrition flag is set, a ``hire`` otherwise, dated
at the hire date estimated from tenure.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from datetime import date

from hr_retention.discovery.records import Employee, Event, EventKind, PerformanceRecord

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Date arithmetic
# ---------------------------------------------------------------------------


def _clamp_day(year: int, month: int, day: int) -> date:
    """Build a date, pulling the day back to the last valid day of the month."""
    while day > 28:
        try:
            return date(year, month, day)
        except ValueError:
            day -= 1
    return date(year, month, day)


def subtract_months(d: date, months: int) -> date:
    """Return *d* moved back by *months* calendar months."""
    total = d.year * 12 + (d.month - 1) - months
    year, month_index = divmod(total, 12)
    return _clamp_day(year, month_index + 1, d.day)


def estimate_hire_date(tenure_years: float | None, as_of: date) -> date | None:
    """Estimate a hire date as *as_of* minus *tenure_years* years.

    Whole years keep the month and day (29 Feb becomes 28 Feb). Fractional
    tenure is converted to the nearest whole number of months. Tenure that is
    not finite, or lands outside the calendar, gives None.
    """
    if tenure_years is None:
        return None
    if not math.isfinite(tenure_years):
        logger.warning("Ignoring non-finite tenure %s", tenure_years)
        return None
    try:
        if float(tenure_years).is_integer():
            return _clamp_day(as_of.year - int(tenure_years), as_of.month, as_of.day)
        return subtract_months(as_of, round(tenure_years * 12))
    except (ValueError, OverflowError):
        logger.warning("Tenure of %s years is outside the calendar range", tenure_years)
        return None


# ---------------------------------------------------------------------------
# Derivation
# ---------------------------------------------------------------------------


def fill_hire_dates(employees: list[Employee], as_of: date) -> list[Employee]:
    """Fill missing hire dates from tenure.

    Employees that already carry a hire date, or have no tenure, are returned
    unchanged.
    """
    filled: list[Employee] = []
    estimated = 0
    for emp in employees:
        if emp.hire_date is None and emp.tenure_years is not None:
            hired = estimate_hire_date(emp.tenure_years, as_of)
            if hired is not None:
                emp = replace(emp, hire_date=hired)
                estimated += 1
        filled.append(emp)

    logger.info("Estimated hire dates for %d of %d employees", estimated, len(employees))
    return filled


def derive_events(employees: list[Employee], as_of: date) -> list[Event]:
    """Derive one hire or exit event per employee.

    Employees without tenure contribute no event.
    """
    events: list[Event] = []
    for emp in employees:
        event_date = estimate_hire_date(emp.tenure_years, as_of)
        if event_date is None:
            continue
        kind = EventKind.EXIT if emp.attrition else EventKind.HIRE
        events.append(Event(employee_id=emp.employee_id, event_date=event_date, kind=kind))

    skipped = len(employees) - len(events)
    if skipped:
        logger.info("Skipped %d employees without tenure during event derivation", skipped)
    return events


def derive_performance_records(employees: list[Employee], as_of: date) -> list[PerformanceRecord]:
    """Record each employee's snapshot performance score on the as-of date."""
    return [
        PerformanceRecord(
            employee_id=emp.employee_id,
            record_date=as_of,
            performance_score=emp.performance_score,
        )
        for emp in employees
        if emp.performance_score is not None
    ]
