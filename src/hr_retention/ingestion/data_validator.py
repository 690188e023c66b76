"""Data-quality checks for loaded employee records.

Checks never reject the batch; they count problems so they can be reported
next to the analysis:
    - Missing hire dates (counted after estimation from tenure)
    - Missing gender
    - Missing or blank departments
    - Performance scores outside 1-5
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from hr_retention.discovery.records import Employee

logger = logging.getLogger(__name__)

MIN_PERFORMANCE_SCORE = 1
MAX_PERFORMANCE_SCORE = 5


@dataclass
class DataQualityReport:
    """Counts of data-quality problems in an employee batch."""
    total_employees: int
    missing_hire_dates: int
    missing_gender: int
    missing_department: int
    invalid_performance_scores: list[int] = field(default_factory=list)  # employee ids

    @property
    def is_clean(self) -> bool:
        return not (
            self.missing_hire_dates
            or self.missing_gender
            or self.missing_department
            or self.invalid_performance_scores
        )


def _blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


def valid_performance_score(score: int | None) -> bool:
    return score is not None and MIN_PERFORMANCE_SCORE <= score <= MAX_PERFORMANCE_SCORE


def check_employees(employees: list[Employee]) -> DataQualityReport:
    """Count data-quality problems across *employees*."""
    report = DataQualityReport(
        total_employees=len(employees),
        missing_hire_dates=sum(1 for e in employees if e.hire_date is None),
        missing_gender=sum(1 for e in employees if _blank(e.gender)),
        missing_department=sum(1 for e in employees if _blank(e.department)),
        invalid_performance_scores=[
            e.employee_id for e in employees
            if e.performance_score is not None and not valid_performance_score(e.performance_score)
        ],
    )

    if not report.is_clean:
        logger.warning(
            "Data quality: %d missing hire dates, %d missing gender, %d missing department, "
            "%d invalid performance scores",
            report.missing_hire_dates,
            report.missing_gender,
            report.missing_department,
            len(report.invalid_performance_scores),
        )
    return report
