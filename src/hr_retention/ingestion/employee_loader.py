"""HR export CSV → typed :class:`Employee` records.

Reads the raw HR attrition export (CamelCase headers such as
``EmployeeNumber``, ``Attrition``, ``YearsAtCompany``) with pandas and maps
each row to an immutable record. Unparseable cells become ``None``; duplicate
employee numbers keep the first row.
"""

from __future__ import annotations

import logging
import math
from datetime import date
from io import StringIO
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from hr_retention.discovery.records import Employee
from hr_retention.ingestion.data_validator import valid_performance_score

logger = logging.getLogger(__name__)


class MissingColumnsError(ValueError):
    """Raised when the export lacks columns every record needs."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Missing required columns: {', '.join(missing)}")


REQUIRED_COLUMNS = ["EmployeeNumber", "Attrition"]

# source header -> (Employee field, converter name)
COLUMN_MAP: dict[str, tuple[str, str]] = {
    "Gender": ("gender", "str"),
    "Department": ("department", "str"),
    "JobRole": ("role", "str"),
    "HireDate": ("hire_date", "date"),
    "YearsAtCompany": ("tenure_years", "float"),
    "PerformanceRating": ("performance_score", "int"),
    "DistanceFromHome": ("distance_from_home", "float"),
    "Age": ("age", "int"),
    "BusinessTravel": ("business_travel", "str"),
    "DailyRate": ("daily_rate", "float"),
    "Education": ("education", "int"),
    "EducationField": ("education_field", "str"),
    "EnvironmentSatisfaction": ("environment_satisfaction", "int"),
    "HourlyRate": ("hourly_rate", "float"),
    "JobInvolvement": ("job_involvement", "int"),
    "JobLevel": ("job_level", "int"),
    "JobSatisfaction": ("job_satisfaction", "int"),
    "MaritalStatus": ("marital_status", "str"),
    "MonthlyIncome": ("monthly_income", "float"),
    "MonthlyRate": ("monthly_rate", "float"),
    "NumCompaniesWorked": ("num_companies_worked", "int"),
    "OverTime": ("over_time", "str"),
    "PercentSalaryHike": ("percent_salary_hike", "float"),
    "RelationshipSatisfaction": ("relationship_satisfaction", "int"),
    "StockOptionLevel": ("stock_option_level", "int"),
    "TotalWorkingYears": ("total_working_years", "float"),
    "TrainingTimesLastYear": ("training_times_last_year", "int"),
    "WorkLifeBalance": ("work_life_balance", "int"),
    "YearsInCurrentRole": ("years_in_current_role", "float"),
    "YearsSinceLastPromotion": ("years_since_last_promotion", "float"),
    "YearsWithCurrManager": ("years_with_curr_manager", "float"),
}

_TRUE_VALUES = frozenset(["yes", "y", "true", "1", "left", "exit"])


# ---------------------------------------------------------------------------
# Cell converters
# ---------------------------------------------------------------------------


def _is_missing(val: Any) -> bool:
    if val is None or val is pd.NaT:
        return True
    if isinstance(val, float) and math.isnan(val):
        return True
    return isinstance(val, str) and not val.strip()


def _to_str(val: Any) -> str | None:
    if _is_missing(val):
        return None
    return str(val).strip()


def _to_float(val: Any) -> float | None:
    if _is_missing(val):
        return None
    try:
        f = float(val)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


def _to_int(val: Any) -> int | None:
    f = _to_float(val)
    if f is None or not f.is_integer():
        return None
    return int(f)


def _to_date(val: Any) -> date | None:
    if _is_missing(val):
        return None
    ts = pd.to_datetime(val, errors="coerce")
    if pd.isna(ts):
        return None
    return ts.date()


def parse_attrition(val: Any) -> bool:
    """Yes/No attrition flag; anything unrecognised counts as staying."""
    if isinstance(val, (bool, np.bool_)):
        return bool(val)
    s = _to_str(val)
    return s is not None and s.lower() in _TRUE_VALUES


_CONVERTERS = {
    "str": _to_str,
    "float": _to_float,
    "int": _to_int,
    "date": _to_date,
}


# ---------------------------------------------------------------------------
# DataFrame → records
# ---------------------------------------------------------------------------


def employees_from_dataframe(df: pd.DataFrame) -> list[Employee]:
    """Map an HR export DataFrame to employee records.

    Raises:
        MissingColumnsError: if a required column is absent.
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise MissingColumnsError(missing)

    present = {col: spec for col, spec in COLUMN_MAP.items() if col in df.columns}
    employees: list[Employee] = []
    seen: set[int] = set()
    skipped = 0

    for row in df.replace({np.nan: None}).to_dict(orient="records"):
        emp_id = _to_int(row.get("EmployeeNumber"))
        if emp_id is None:
            skipped += 1
            continue
        if emp_id in seen:
            logger.warning("Duplicate EmployeeNumber %d, keeping the first row", emp_id)
            continue
        seen.add(emp_id)

        values: dict[str, Any] = {}
        for col, (field_name, kind) in present.items():
            values[field_name] = _CONVERTERS[kind](row.get(col))

        score = values.get("performance_score")
        if score is not None and not valid_performance_score(score):
            logger.warning("Employee %d has out-of-range performance score %s", emp_id, score)
            values["performance_score"] = None

        employees.append(Employee(
            employee_id=emp_id,
            attrition=parse_attrition(row.get("Attrition")),
            **values,
        ))

    if skipped:
        logger.warning("Skipped %d rows without a usable EmployeeNumber", skipped)
    logger.info("Loaded %d employees from %d rows", len(employees), len(df))
    return employees


def load_employees_csv(path: Path) -> list[Employee]:
    """Read an HR export CSV file into employee records."""
    df = pd.read_csv(path)
    return employees_from_dataframe(df)


def load_employees_text(contents: str) -> list[Employee]:
    """Parse HR export CSV text (e.g. an uploaded file) into employee records."""
    df = pd.read_csv(StringIO(contents))
    return employees_from_dataframe(df)
