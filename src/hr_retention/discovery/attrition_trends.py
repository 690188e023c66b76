"""Monthly attrition trends with rolling windows.

Windows are positional: a window of 12 covers the current month bucket and
the 11 buckets before it *in the list*, not the 11 preceding calendar months.
A month with no exits has no bucket and is skipped, never counted as zero.
Use :func:`backfill_months` first to get calendar-complete windows instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from hr_retention.discovery.event_deriver import estimate_hire_date
from hr_retention.discovery.records import Employee, Event, EventKind


@dataclass(frozen=True)
class MonthlyBucket:
    """Event count for one calendar month (first day of month)."""
    month: date
    count: int


@dataclass
class RollingPoint:
    """A month bucket with its rolling aggregate."""
    month: date
    count: int
    rolling_value: float


@dataclass
class RollingAttritionResult:
    """Rolling exit counts by month."""
    points: list[RollingPoint]
    window: int
    aggregate: str  # "sum" or "avg"
    total_exits: int
    peak_month: date
    summary: str


def _month_start(d: date) -> date:
    return d.replace(day=1)


def monthly_event_counts(events: list[Event], kind: EventKind = EventKind.EXIT) -> list[MonthlyBucket]:
    """Count events of *kind* per calendar month, in month order.

    Months without events are absent.
    """
    counts: dict[date, int] = {}
    for ev in events:
        if ev.kind != kind:
            continue
        month = _month_start(ev.event_date)
        counts[month] = counts.get(month, 0) + 1

    return [MonthlyBucket(month=m, count=counts[m]) for m in sorted(counts)]


def monthly_new_hires(employees: list[Employee], as_of: date) -> list[MonthlyBucket]:
    """Count estimated hires per month across all employees, leavers included."""
    counts: dict[date, int] = {}
    for emp in employees:
        hired = estimate_hire_date(emp.tenure_years, as_of)
        if hired is None:
            continue
        month = _month_start(hired)
        counts[month] = counts.get(month, 0) + 1

    return [MonthlyBucket(month=m, count=counts[m]) for m in sorted(counts)]


def backfill_months(buckets: list[MonthlyBucket]) -> list[MonthlyBucket]:
    """Insert zero-count buckets for months missing between the first and last bucket."""
    if not buckets:
        return []

    ordered = sorted(buckets, key=lambda b: b.month)
    by_month = {b.month: b.count for b in ordered}
    filled: list[MonthlyBucket] = []
    current = ordered[0].month
    last = ordered[-1].month
    while current <= last:
        filled.append(MonthlyBucket(month=current, count=by_month.get(current, 0)))
        if current.month == 12:
            current = date(current.year + 1, 1, 1)
        else:
            current = date(current.year, current.month + 1, 1)
    return filled


def rolling_window(counts: list[int], window: int, aggregate: str = "sum") -> list[float]:
    """Aggregate each position with up to ``window - 1`` preceding positions.

    Args:
        counts: Values in order.
        window: Number of rows in each window, current row included.
        aggregate: "sum" or "avg" (average rounded to 2 decimals).

    Raises:
        ValueError: on a non-positive window or unknown aggregate.
    """
    if window < 1:
        raise ValueError(f"Window must be at least 1, got {window}")
    if aggregate not in ("sum", "avg"):
        raise ValueError(f"Unknown aggregate: {aggregate}")

    values: list[float] = []
    for i in range(len(counts)):
        w = counts[max(0, i - window + 1): i + 1]
        if aggregate == "sum":
            values.append(sum(w))
        else:
            values.append(round(sum(w) / len(w), 2))
    return values


def _rolling_result(buckets: list[MonthlyBucket], window: int, aggregate: str) -> RollingAttritionResult | None:
    if not buckets:
        return None

    rolled = rolling_window([b.count for b in buckets], window, aggregate)
    points = [
        RollingPoint(month=b.month, count=b.count, rolling_value=v)
        for b, v in zip(buckets, rolled)
    ]
    total = sum(b.count for b in buckets)
    peak = max(buckets, key=lambda b: b.count)

    label = f"rolling {window}-month {'sum' if aggregate == 'sum' else 'average'}"
    summary = (
        f"{total} exits across {len(buckets)} months. "
        f"Peak month: {peak.month:%Y-%m} ({peak.count} exits). "
        f"Latest {label}: {points[-1].rolling_value}."
    )

    return RollingAttritionResult(
        points=points,
        window=window,
        aggregate=aggregate,
        total_exits=total,
        peak_month=peak.month,
        summary=summary,
    )


def compute_rolling_attrition(
    events: list[Event],
    window: int = 12,
    backfill: bool = False,
) -> RollingAttritionResult | None:
    """Monthly exit counts with a rolling sum over *window* buckets.

    Returns:
        RollingAttritionResult or None if there are no exit events.
    """
    buckets = monthly_event_counts(events, EventKind.EXIT)
    if backfill:
        buckets = backfill_months(buckets)
    return _rolling_result(buckets, window, "sum")


def compute_rolling_average(
    events: list[Event],
    window: int = 3,
    backfill: bool = False,
) -> RollingAttritionResult | None:
    """Monthly exit counts with a rolling average over *window* buckets.

    Returns:
        RollingAttritionResult or None if there are no exit events.
    """
    buckets = monthly_event_counts(events, EventKind.EXIT)
    if backfill:
        buckets = backfill_months(buckets)
    return _rolling_result(buckets, window, "avg")
