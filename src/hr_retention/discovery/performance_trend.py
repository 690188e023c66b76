"""Performance score trends, rankings and attrition risk scoring.

Pure functions over dated performance records. Deltas are computed per
employee, never across employees.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from hr_retention.discovery.event_deriver import subtract_months
from hr_retention.discovery.records import Employee, PerformanceRecord


# ---------------------------------------------------------------------------
# 1. Month-over-month score delta
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScoreDelta:
    """One performance record with its change since the previous one."""
    employee_id: int
    record_date: date
    performance_score: int
    previous_score: int | None
    delta: int | None


@dataclass
class ScoreDeltaResult:
    """Per-employee score deltas over the lookback window."""
    rows: list[ScoreDelta]
    window_start: date
    improving: int
    declining: int
    summary: str


def compute_score_deltas(
    records: list[PerformanceRecord],
    as_of: date,
    months: int = 6,
) -> ScoreDeltaResult | None:
    """Compute score changes between consecutive records of each employee.

    Only records dated on or after ``as_of - months`` are considered. The
    first record of each employee in the window has no previous score.

    Returns:
        ScoreDeltaResult or None if no record falls in the window.
    """
    window_start = subtract_months(as_of, months)
    recent = [r for r in records if r.record_date >= window_start]
    if not recent:
        return None

    recent.sort(key=lambda r: (r.employee_id, r.record_date))

    rows: list[ScoreDelta] = []
    previous: PerformanceRecord | None = None
    for rec in recent:
        if previous is not None and previous.employee_id == rec.employee_id:
            prev_score = previous.performance_score
            rows.append(ScoreDelta(
                employee_id=rec.employee_id,
                record_date=rec.record_date,
                performance_score=rec.performance_score,
                previous_score=prev_score,
                delta=rec.performance_score - prev_score,
            ))
        else:
            rows.append(ScoreDelta(
                employee_id=rec.employee_id,
                record_date=rec.record_date,
                performance_score=rec.performance_score,
                previous_score=None,
                delta=None,
            ))
        previous = rec

    improving = sum(1 for r in rows if r.delta is not None and r.delta > 0)
    declining = sum(1 for r in rows if r.delta is not None and r.delta < 0)
    employees = len({r.employee_id for r in rows})

    summary = (
        f"Score deltas since {window_start.isoformat()}: {len(rows)} records "
        f"for {employees} employees, {improving} improvements, {declining} declines."
    )

    return ScoreDeltaResult(
        rows=rows,
        window_start=window_start,
        improving=improving,
        declining=declining,
        summary=summary,
    )


# ---------------------------------------------------------------------------
# 2. Ranking within roles
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RoleRank:
    """An employee's performance rank within their role."""
    employee_id: int
    role: str
    performance_score: int
    rank: int


def _scores_on(records: list[PerformanceRecord], as_of: date) -> dict[int, int]:
    return {r.employee_id: r.performance_score for r in records if r.record_date == as_of}


def rank_within_roles(
    employees: list[Employee],
    records: list[PerformanceRecord],
    as_of: date,
) -> list[RoleRank]:
    """Rank employees by their as-of score within each role.

    Ties share a rank and leave a gap after them (1, 1, 3).
    """
    scores = _scores_on(records, as_of)

    by_role: dict[str, list[tuple[int, int]]] = {}
    for emp in employees:
        if emp.role is None or emp.employee_id not in scores:
            continue
        by_role.setdefault(emp.role, []).append((emp.employee_id, scores[emp.employee_id]))

    ranks: list[RoleRank] = []
    for role in sorted(by_role):
        members = sorted(by_role[role], key=lambda m: (-m[1], m[0]))
        rank = 0
        last_score = None
        for position, (emp_id, score) in enumerate(members, start=1):
            if score != last_score:
                rank = position
                last_score = score
            ranks.append(RoleRank(employee_id=emp_id, role=role, performance_score=score, rank=rank))
    return ranks


# ---------------------------------------------------------------------------
# 3. Attrition risk score
# ---------------------------------------------------------------------------

LOW_SCORE_WEIGHT = 50
SHORT_TENURE_WEIGHT = 30
ATTRITED_WEIGHT = 20


@dataclass(frozen=True)
class RiskScore:
    """Weighted attrition risk for one employee."""
    employee_id: int
    performance_score: int
    tenure_years: float | None
    risk_score: int


def attrition_risk_scores(
    employees: list[Employee],
    records: list[PerformanceRecord],
    as_of: date,
) -> list[RiskScore]:
    """Score employees with an as-of performance record by attrition risk.

    +50 for a score below 3, +30 for under two years of tenure, +20 when the
    employee has already left. Unknown tenure adds nothing.
    """
    scores = _scores_on(records, as_of)

    results: list[RiskScore] = []
    for emp in employees:
        score = scores.get(emp.employee_id)
        if score is None:
            continue
        risk = 0
        if score < 3:
            risk += LOW_SCORE_WEIGHT
        if emp.tenure_years is not None and emp.tenure_years < 2:
            risk += SHORT_TENURE_WEIGHT
        if emp.attrition:
            risk += ATTRITED_WEIGHT
        results.append(RiskScore(
            employee_id=emp.employee_id,
            performance_score=score,
            tenure_years=emp.tenure_years,
            risk_score=risk,
        ))
    return results
