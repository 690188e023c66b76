"""Typed employee, event and performance records.

Every analysis in this package consumes these immutable records instead of
raw staging rows, so optional attributes are explicit ``None`` values rather
than missing keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class EventKind(str, Enum):
    """Kind of a retention event."""
    HIRE = "hire"
    EXIT = "exit"


@dataclass(frozen=True)
class Employee:
    """One employee row of the HR snapshot."""
    employee_id: int
    gender: str | None = None
    department: str | None = None
    role: str | None = None
    hire_date: date | None = None  # may be estimated from tenure
    tenure_years: float | None = None
    performance_score: int | None = None  # 1-5
    attrition: bool = False
    distance_from_home: float | None = None

    # Descriptive attributes carried through unchanged
    age: int | None = None
    business_travel: str | None = None
    daily_rate: float | None = None
    education: int | None = None
    education_field: str | None = None
    environment_satisfaction: int | None = None
    hourly_rate: float | None = None
    job_involvement: int | None = None
    job_level: int | None = None
    job_satisfaction: int | None = None
    marital_status: str | None = None
    monthly_income: float | None = None
    monthly_rate: float | None = None
    num_companies_worked: int | None = None
    over_time: str | None = None
    percent_salary_hike: float | None = None
    relationship_satisfaction: int | None = None
    stock_option_level: int | None = None
    total_working_years: float | None = None
    training_times_last_year: int | None = None
    work_life_balance: int | None = None
    years_in_current_role: float | None = None
    years_since_last_promotion: float | None = None
    years_with_curr_manager: float | None = None

    @property
    def attrition_label(self) -> str:
        """Source-style Yes/No label for the attrition flag."""
        return "Yes" if self.attrition else "No"


@dataclass(frozen=True)
class Event:
    """A hire or exit event for one employee."""
    employee_id: int
    event_date: date
    kind: EventKind


@dataclass(frozen=True)
class PerformanceRecord:
    """A dated performance score for one employee."""
    employee_id: int
    record_date: date
    performance_score: int


# Attributes that hold numbers, used by breakdowns and correlations
NUMERIC_FIELDS = frozenset([
    "tenure_years", "performance_score", "distance_from_home", "age",
    "daily_rate", "education", "environment_satisfaction", "hourly_rate",
    "job_involvement", "job_level", "job_satisfaction", "monthly_income",
    "monthly_rate", "num_companies_worked", "percent_salary_hike",
    "relationship_satisfaction", "stock_option_level", "total_working_years",
    "training_times_last_year", "work_life_balance", "years_in_current_role",
    "years_since_last_promotion", "years_with_curr_manager",
])


def employee_value(employee: Employee, field_name: str):
    """Read an attribute of *employee* by name.

    ``"attrition"`` resolves to the Yes/No label so that it groups the same way
    the source export does.

    Raises:
        AttributeError: if *field_name* is not an employee attribute.
    """
    if field_name == "attrition":
        return employee.attrition_label
    if field_name not in Employee.__dataclass_fields__:
        raise AttributeError(f"Employee has no attribute '{field_name}'")
    return getattr(employee, field_name)
