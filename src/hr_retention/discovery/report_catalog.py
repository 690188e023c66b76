"""Catalog of standard workforce reports.

Each entry pairs a stable key with a title, the business question it answers
and a builder turning employees into a :class:`BreakdownTable`. The trend,
cohort, score-delta and correlation analyses live in their own modules and
are run by the engine rather than listed here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable

from hr_retention.discovery.attrition_trends import monthly_new_hires
from hr_retention.discovery.event_deriver import derive_performance_records
from hr_retention.discovery.performance_trend import attrition_risk_scores, rank_within_roles
from hr_retention.discovery.records import Employee
from hr_retention.discovery.workforce_breakdowns import (
    BreakdownTable,
    attrition_by,
    average_by,
    count_by,
    longest_tenure,
    role_tenure_bucket,
    sum_by,
    tenure_bucket,
)

logger = logging.getLogger(__name__)

Builder = Callable[[list[Employee], date], BreakdownTable]


@dataclass(frozen=True)
class ReportDefinition:
    """A named, runnable workforce report."""
    key: str
    title: str
    insight: str
    build: Builder


# ---------------------------------------------------------------------------
# Builders needing performance records or the as-of date
# ---------------------------------------------------------------------------


def _role_ranking(employees: list[Employee], as_of: date) -> BreakdownTable:
    records = derive_performance_records(employees, as_of)
    ranks = rank_within_roles(employees, records, as_of)
    return BreakdownTable(
        title="",
        columns=["employee_id", "role", "performance_score", "role_performance_rank"],
        rows=[(r.employee_id, r.role, r.performance_score, r.rank) for r in ranks],
        summary=f"{len(ranks)} employees ranked across {len({r.role for r in ranks})} roles.",
    )


def _risk_scores(employees: list[Employee], as_of: date) -> BreakdownTable:
    records = derive_performance_records(employees, as_of)
    scores = attrition_risk_scores(employees, records, as_of)
    high = sum(1 for s in scores if s.risk_score >= 50)
    return BreakdownTable(
        title="",
        columns=["employee_id", "churn_risk_score"],
        rows=[(s.employee_id, s.risk_score) for s in scores],
        summary=f"{len(scores)} employees scored, {high} at 50 or above.",
    )


def _new_hires(employees: list[Employee], as_of: date) -> BreakdownTable:
    buckets = monthly_new_hires(employees, as_of)
    return BreakdownTable(
        title="",
        columns=["month", "new_hires"],
        rows=[(b.month, b.count) for b in buckets],
        summary=f"{sum(b.count for b in buckets)} estimated hires over {len(buckets)} months.",
    )


_TENURE = ("tenure_bucket", lambda e: tenure_bucket(e.tenure_years))
_ROLE_TENURE = ("role_tenure_bucket", lambda e: role_tenure_bucket(e.years_in_current_role))


def _scored(employees: list[Employee]) -> list[Employee]:
    """Employees with a performance score on record."""
    return [e for e in employees if e.performance_score is not None]


def _avg(metric: str, *keys, with_count: bool = False, limit: int | None = None) -> Builder:
    def build(employees: list[Employee], as_of: date) -> BreakdownTable:
        if metric == "performance_score":
            employees = _scored(employees)
        return average_by(employees, metric, list(keys), with_count=with_count, limit=limit)
    return build


def _count(*keys, by_count: bool = False, descending: bool = False, scored_only: bool = False) -> Builder:
    def build(employees: list[Employee], as_of: date) -> BreakdownTable:
        if scored_only:
            employees = _scored(employees)
        return count_by(employees, list(keys), by_count=by_count, descending=descending)
    return build


def _attrition(*keys, by_rate: bool = False) -> Builder:
    return lambda employees, as_of: attrition_by(employees, list(keys), by_rate=by_rate)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

_DEFINITIONS = [
    ReportDefinition("q02", "Performance ranking within roles",
                     "Identify performance leaders and laggers within roles.", _role_ranking),
    ReportDefinition("q04", "Attrition risk score",
                     "Prioritise retention interventions by weighted risk.", _risk_scores),
    ReportDefinition("q06", "Average performance by department and role",
                     "Assess performance across departments and roles.",
                     _avg("performance_score", "department", "role", with_count=True)),
    ReportDefinition("q07", "Attrition rate by department and gender",
                     "Detect demographic or departmental attrition issues.",
                     _attrition("department", "gender")),
    ReportDefinition("q08", "Top 5 departments by average performance",
                     "Highlight high-performing departments.",
                     _avg("performance_score", "department", limit=5)),
    ReportDefinition("q09", "Employees with longest tenure",
                     "Find veterans for mentoring and knowledge retention.",
                     lambda employees, as_of: longest_tenure(employees, limit=10)),
    ReportDefinition("q10", "Monthly new hires",
                     "Understand hiring trends and workforce growth.", _new_hires),
    ReportDefinition("q11", "Average performance by tenure bucket",
                     "Analyse how tenure relates to performance.",
                     lambda employees, as_of: average_by(_scored(employees), "performance_score", [_TENURE])),
    ReportDefinition("q12", "Attrition by overtime",
                     "Check whether overtime work drives attrition.",
                     _attrition("over_time", by_rate=True)),
    ReportDefinition("q13", "Top 15 average monthly income by department and role",
                     "Identify compensation differences for pay equity.",
                     _avg("monthly_income", "department", "role", limit=15)),
    ReportDefinition("q14", "Performance score distribution",
                     "See the spread of performance ratings.",
                     _count("performance_score", descending=True, scored_only=True)),
    ReportDefinition("q15", "Attrition by marital status",
                     "Explore attrition risk by marital status.",
                     _attrition("marital_status", by_rate=True)),
    ReportDefinition("q16", "Average work-life balance by department",
                     "Relate work-life balance to department retention.",
                     _avg("work_life_balance", "department")),
    ReportDefinition("q17", "Employees by education field",
                     "Align training with education backgrounds.",
                     _count("education_field", by_count=True, descending=True)),
    ReportDefinition("q18", "Average distance from home by department",
                     "Measure commute impact per department.",
                     _avg("distance_from_home", "department")),
    ReportDefinition("q19", "Job satisfaction distribution",
                     "Spot groups needing attention.",
                     _count("job_satisfaction", descending=True)),
    ReportDefinition("q20", "Average monthly income by marital status",
                     "Assess compensation equity by marital status.",
                     _avg("monthly_income", "marital_status")),
    ReportDefinition("q21", "Employees by department and job level",
                     "Plan succession by seniority within departments.",
                     _count("department", "job_level")),
    ReportDefinition("q22", "Average job involvement by department",
                     "Find departments with high engagement.",
                     _avg("job_involvement", "department")),
    ReportDefinition("q23", "Attrition by education field",
                     "Target retention at high-attrition education fields.",
                     _attrition("education_field", by_rate=True)),
    ReportDefinition("q24", "Top 15 average hourly rate by role",
                     "Benchmark wages by role.",
                     _avg("hourly_rate", "role", limit=15)),
    ReportDefinition("q25", "Total stock option levels by department",
                     "Evaluate the distribution of incentives.",
                     lambda employees, as_of: sum_by(employees, "stock_option_level", ["department"])),
    ReportDefinition("q26", "Average training times by department",
                     "See which departments invest in training.",
                     _avg("training_times_last_year", "department")),
    ReportDefinition("q27", "Average salary hike by department",
                     "Identify salary adjustment trends.",
                     _avg("percent_salary_hike", "department")),
    ReportDefinition("q28", "Employees by business travel",
                     "Understand travel patterns.",
                     _count("business_travel", by_count=True, descending=True)),
    ReportDefinition("q29", "Average relationship satisfaction by department",
                     "Improve manager-employee dynamics.",
                     _avg("relationship_satisfaction", "department")),
    ReportDefinition("q30", "Employees by environment satisfaction",
                     "Improve workplace conditions.",
                     _count("environment_satisfaction", descending=True)),
    ReportDefinition("q31", "Average distance from home by overtime",
                     "Relate commute distance to overtime.",
                     _avg("distance_from_home", "over_time")),
    ReportDefinition("q32", "Average years since last promotion by department",
                     "Review promotion frequency.",
                     _avg("years_since_last_promotion", "department")),
    ReportDefinition("q33", "Employees by marital status and attrition",
                     "Compare attrition across marital statuses.",
                     _count("marital_status", "attrition")),
    ReportDefinition("q34", "Average total working years by department",
                     "Identify experienced departments.",
                     _avg("total_working_years", "department")),
    ReportDefinition("q35", "Average years in current role by department",
                     "Assess time in role for succession planning.",
                     _avg("years_in_current_role", "department")),
    ReportDefinition("q36", "Employees by stock option level",
                     "Explore the distribution of stock incentives.",
                     _count("stock_option_level", descending=True)),
    ReportDefinition("q37", "Average years with current manager by department",
                     "Understand manager tenure across teams.",
                     _avg("years_with_curr_manager", "department")),
    ReportDefinition("q38", "Average training times by attrition",
                     "Compare training between leavers and stayers.",
                     _avg("training_times_last_year", "attrition")),
    ReportDefinition("q39", "Employees by gender and role",
                     "Analyse gender distribution across roles.",
                     lambda employees, as_of: _gender_role(employees)),
    ReportDefinition("q40", "Average daily rate by department",
                     "Review daily pay rates for budgeting.",
                     _avg("daily_rate", "department")),
    ReportDefinition("q41", "Average hourly rate by marital status",
                     "Analyse hourly pay by marital status.",
                     _avg("hourly_rate", "marital_status")),
    ReportDefinition("q42", "Employees by education level and attrition",
                     "Identify attrition patterns by education level.",
                     _count("education", "attrition")),
    ReportDefinition("q43", "Average job satisfaction by department",
                     "Pinpoint departments for HR focus.",
                     _avg("job_satisfaction", "department")),
    ReportDefinition("q44", "Employees by stock option level and attrition",
                     "Relate attrition to stock incentives.",
                     _count("stock_option_level", "attrition")),
    ReportDefinition("q45", "Average salary hike by education field",
                     "Assess salary hike equity by education.",
                     _avg("percent_salary_hike", "education_field")),
    ReportDefinition("q46", "Employees by business travel and attrition",
                     "Understand attrition among travel groups.",
                     _count("business_travel", "attrition")),
    ReportDefinition("q47", "Average performance rating by department",
                     "Department-level performance for leadership focus.",
                     _avg("performance_score", "department")),
    ReportDefinition("q48", "Attrition by years in current role",
                     "Determine whether role tenure affects attrition.",
                     _attrition(_ROLE_TENURE)),
]


def _gender_role(employees: list[Employee]) -> BreakdownTable:
    """Count by gender, then by count descending within each gender."""
    table = count_by(employees, ["gender", "role"])
    table.rows.sort(key=lambda r: (r[0] is None, r[0] or "", -r[2]))
    return table


REPORTS: dict[str, ReportDefinition] = {d.key: d for d in _DEFINITIONS}


def list_reports() -> list[ReportDefinition]:
    """All catalog entries in key order."""
    return [REPORTS[k] for k in sorted(REPORTS)]


def run_report(key: str, employees: list[Employee], as_of: date) -> BreakdownTable:
    """Build one catalog report.

    Raises:
        KeyError: if *key* is not in the catalog.
    """
    definition = REPORTS.get(key.lower())
    if definition is None:
        raise KeyError(f"Unknown report: {key}")

    table = definition.build(employees, as_of)
    table.title = definition.title
    logger.info("Built report %s with %d rows", definition.key, len(table.rows))
    return table
