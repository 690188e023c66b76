"""Workforce breakdowns — grouped counts, averages, totals and attrition rates.

Pure functions that group employees by one or more attributes and aggregate
each group. Groups are keyed by attribute name or by a ``(label, function)``
pair for derived keys such as tenure buckets. ``None`` is a regular group key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from hr_retention.discovery.records import Employee, employee_value

GroupKey = str | tuple[str, Callable[[Employee], Any]]


@dataclass
class BreakdownTable:
    """A small result table: column headers plus row tuples."""
    title: str
    columns: list[str]
    rows: list[tuple] = field(default_factory=list)
    summary: str = ""

    def as_records(self) -> list[dict]:
        """Rows as dicts keyed by column name."""
        return [dict(zip(self.columns, row)) for row in self.rows]


# ---------------------------------------------------------------------------
# Buckets
# ---------------------------------------------------------------------------


def tenure_bucket(years: float | None) -> str | None:
    """Bucket years at the company for performance-by-tenure reporting."""
    if years is None:
        return None
    if years < 1:
        return "< 1 year"
    if years < 4:
        return "1-3 years"
    if years < 7:
        return "4-6 years"
    if years < 11:
        return "7-10 years"
    return "10+ years"


def role_tenure_bucket(years: float | None) -> str | None:
    """Bucket years in the current role for attrition-by-role-tenure reporting."""
    if years is None:
        return None
    if years < 1:
        return "< 1 year"
    if years < 4:
        return "1-3 years"
    if years < 7:
        return "4-6 years"
    return "7+ years"


TENURE_BUCKET_ORDER = ["< 1 year", "1-3 years", "4-6 years", "7-10 years", "10+ years", "7+ years"]


# ---------------------------------------------------------------------------
# Grouping helpers
# ---------------------------------------------------------------------------


def _key_parts(keys: list[GroupKey]) -> tuple[list[str], list[Callable[[Employee], Any]]]:
    names: list[str] = []
    funcs: list[Callable[[Employee], Any]] = []
    for key in keys:
        if isinstance(key, str):
            names.append(key)
            funcs.append(lambda e, k=key: employee_value(e, k))
        else:
            label, func = key
            names.append(label)
            funcs.append(func)
    return names, funcs


def _group(employees: list[Employee], keys: list[GroupKey]) -> tuple[list[str], dict[tuple, list[Employee]]]:
    names, funcs = _key_parts(keys)
    groups: dict[tuple, list[Employee]] = {}
    for emp in employees:
        group_key = tuple(f(emp) for f in funcs)
        groups.setdefault(group_key, []).append(emp)
    return names, groups


def _sort_key_value(value: Any) -> tuple:
    """Order None last, bucket labels by bucket order, everything else naturally."""
    if value is None:
        return (2, "")
    if isinstance(value, str) and value in TENURE_BUCKET_ORDER:
        return (0, TENURE_BUCKET_ORDER.index(value))
    if isinstance(value, (int, float)):
        return (0, value)
    return (1, str(value))


def _sorted_rows(rows: list[tuple], key_count: int, by_value: bool, descending: bool) -> list[tuple]:
    """Sort rows by their keys, or by their first aggregate then keys."""
    key_order = sorted(rows, key=lambda r: tuple(_sort_key_value(v) for v in r[:key_count]))
    if not by_value:
        return list(reversed(key_order)) if descending else key_order

    with_value = [r for r in key_order if r[key_count] is not None]
    without_value = [r for r in key_order if r[key_count] is None]
    with_value.sort(key=lambda r: r[key_count], reverse=descending)
    return with_value + without_value


def _limited(rows: list[tuple], limit: int | None) -> list[tuple]:
    return rows[:limit] if limit is not None else rows


def _numbers(employees: list[Employee], metric: str) -> list[float]:
    values = []
    for emp in employees:
        v = employee_value(emp, metric)
        if v is not None:
            values.append(float(v))
    return values


# ---------------------------------------------------------------------------
# Aggregations
# ---------------------------------------------------------------------------


def count_by(
    employees: list[Employee],
    keys: list[GroupKey],
    title: str = "",
    by_count: bool = False,
    descending: bool = False,
    limit: int | None = None,
) -> BreakdownTable:
    """Count employees per group.

    Args:
        employees: Employees to group.
        keys: Attribute names or ``(label, function)`` pairs.
        title: Table title.
        by_count: Order by count instead of by group keys.
        descending: Reverse the ordering.
        limit: Keep only the first *limit* rows.
    """
    names, groups = _group(employees, keys)
    rows = [(*k, len(members)) for k, members in groups.items()]
    rows = _limited(_sorted_rows(rows, len(names), by_count, descending), limit)
    return BreakdownTable(
        title=title,
        columns=[*names, "employee_count"],
        rows=rows,
        summary=f"{len(rows)} groups over {len(employees)} employees.",
    )


def average_by(
    employees: list[Employee],
    metric: str,
    keys: list[GroupKey],
    title: str = "",
    with_count: bool = False,
    limit: int | None = None,
) -> BreakdownTable:
    """Average *metric* per group, highest average first, rounded to 2 decimals.

    Missing metric values are ignored; a group with none has a None average.
    """
    names, groups = _group(employees, keys)
    rows: list[tuple] = []
    for k, members in groups.items():
        values = _numbers(members, metric)
        avg = round(sum(values) / len(values), 2) if values else None
        row = (*k, avg, len(members)) if with_count else (*k, avg)
        rows.append(row)

    rows = _sorted_rows(rows, len(names), by_value=True, descending=True)
    if with_count:
        # Equal averages: larger groups first
        rows.sort(key=lambda r: (r[len(names)] is None, -(r[len(names)] or 0), -r[len(names) + 1]))
    rows = _limited(rows, limit)

    columns = [*names, f"avg_{metric}"]
    if with_count:
        columns.append("employee_count")

    top = rows[0] if rows else None
    summary = f"{len(rows)} groups by average {metric}."
    if top is not None and top[len(names)] is not None:
        summary += f" Highest: {', '.join(str(v) for v in top[:len(names)])} ({top[len(names)]:.2f})."

    return BreakdownTable(title=title, columns=columns, rows=rows, summary=summary)


def sum_by(
    employees: list[Employee],
    metric: str,
    keys: list[GroupKey],
    title: str = "",
) -> BreakdownTable:
    """Total *metric* per group, highest total first."""
    names, groups = _group(employees, keys)
    rows: list[tuple] = []
    for k, members in groups.items():
        values = _numbers(members, metric)
        total = sum(values) if values else None
        if total is not None and float(total).is_integer():
            total = int(total)
        rows.append((*k, total))

    rows = _sorted_rows(rows, len(names), by_value=True, descending=True)
    return BreakdownTable(
        title=title,
        columns=[*names, f"total_{metric}"],
        rows=rows,
        summary=f"{len(rows)} groups by total {metric}.",
    )


def attrition_by(
    employees: list[Employee],
    keys: list[GroupKey],
    title: str = "",
    by_rate: bool = False,
) -> BreakdownTable:
    """Employees, exits and attrition rate (%) per group.

    Rows are ordered by group keys, or by rate (highest first) when *by_rate*.
    """
    names, groups = _group(employees, keys)
    rows: list[tuple] = []
    for k, members in groups.items():
        total = len(members)
        exits = sum(1 for m in members if m.attrition)
        rate = round(100.0 * exits / total, 2) if total else None
        rows.append((*k, total, exits, rate))

    if by_rate:
        rows.sort(key=lambda r: tuple(_sort_key_value(v) for v in r[:len(names)]))
        rows.sort(key=lambda r: (r[-1] is None, -(r[-1] or 0.0)))
    else:
        rows = _sorted_rows(rows, len(names), by_value=False, descending=False)

    total_exits = sum(r[len(names) + 1] for r in rows)
    summary = f"{total_exits} exits across {len(rows)} groups."
    rated = [r for r in rows if r[-1] is not None]
    if rated:
        worst = max(rated, key=lambda r: r[-1])
        summary += f" Highest attrition: {', '.join(str(v) for v in worst[:len(names)])} ({worst[-1]:.2f}%)."

    return BreakdownTable(
        title=title,
        columns=[*names, "total_employees", "total_exits", "attrition_rate_percent"],
        rows=rows,
        summary=summary,
    )


def longest_tenure(employees: list[Employee], limit: int = 10, title: str = "") -> BreakdownTable:
    """Employees with the most years at the company; unknown tenure is excluded."""
    known = [e for e in employees if e.tenure_years is not None]
    known.sort(key=lambda e: (-e.tenure_years, e.employee_id))
    rows = [(e.employee_id, e.department, e.role, e.tenure_years) for e in known[:limit]]
    return BreakdownTable(
        title=title,
        columns=["employee_id", "department", "role", "tenure_years"],
        rows=rows,
        summary=f"Top {len(rows)} employees by tenure.",
    )
