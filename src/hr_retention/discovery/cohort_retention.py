"""Cohort retention by hire year.

A cohort is every employee hired in the same calendar year. An employee only
counts as an exit for the cohort when the exit event falls in that same year;
later exits leave the cohort's retention untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from hr_retention.discovery.records import Employee, Event, EventKind


@dataclass(frozen=True)
class CohortRow:
    """Retention for one hire-year cohort."""
    hire_year: int
    total_hired: int
    exited_same_year: int
    retention_rate_percent: float | None


@dataclass
class CohortRetentionResult:
    """Complete cohort retention table."""
    cohorts: list[CohortRow]
    best_cohort: int | None
    worst_cohort: int | None
    summary: str


def retention_rate(total_hired: int, exited: int) -> float | None:
    """Percentage of a cohort still present, or None for an empty cohort."""
    if total_hired == 0:
        return None
    return round(100.0 * (total_hired - exited) / total_hired, 2)


def compute_cohort_retention(
    employees: list[Employee],
    events: list[Event],
    as_of: date,
) -> CohortRetentionResult | None:
    """Group employees by hire year and compute same-year retention.

    Employees without a hire date are placed in the as-of year.

    Args:
        employees: Employees, ideally with hire dates filled.
        events: Derived hire/exit events.
        as_of: Reference date standing in for "today".

    Returns:
        CohortRetentionResult or None if there are no employees.
    """
    if not employees:
        return None

    exit_years: dict[int, set[int]] = {}
    for ev in events:
        if ev.kind == EventKind.EXIT:
            exit_years.setdefault(ev.employee_id, set()).add(ev.event_date.year)

    hired: dict[int, set[int]] = {}
    exited: dict[int, set[int]] = {}
    for emp in employees:
        year = (emp.hire_date or as_of).year
        hired.setdefault(year, set()).add(emp.employee_id)
        if year in exit_years.get(emp.employee_id, ()):
            exited.setdefault(year, set()).add(emp.employee_id)

    cohorts: list[CohortRow] = []
    for year in sorted(hired):
        total = len(hired[year])
        left = len(exited.get(year, ()))
        cohorts.append(CohortRow(
            hire_year=year,
            total_hired=total,
            exited_same_year=left,
            retention_rate_percent=retention_rate(total, left),
        ))

    rated = [c for c in cohorts if c.retention_rate_percent is not None]
    best = max(rated, key=lambda c: c.retention_rate_percent) if rated else None
    worst = min(rated, key=lambda c: c.retention_rate_percent) if rated else None

    summary = f"Cohort retention: {len(cohorts)} hire-year cohorts, {len(employees)} employees."
    if best is not None and worst is not None:
        summary += (
            f" Best: {best.hire_year} ({best.retention_rate_percent:.2f}%)."
            f" Worst: {worst.hire_year} ({worst.retention_rate_percent:.2f}%)."
        )

    return CohortRetentionResult(
        cohorts=cohorts,
        best_cohort=best.hire_year if best else None,
        worst_cohort=worst.hire_year if worst else None,
        summary=summary,
    )
