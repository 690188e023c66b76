"""Unit tests for employee_loader — HR export CSV → Employee records."""

from datetime import date

import pandas as pd
import pytest

from hr_retention.ingestion.employee_loader import (
    MissingColumnsError,
    employees_from_dataframe,
    load_employees_csv,
    load_employees_text,
    parse_attrition,
)

CSV = (
    "EmployeeNumber,Attrition,Gender,Department,JobRole,YearsAtCompany,PerformanceRating,"
    "DistanceFromHome,OverTime,MonthlyIncome\n"
    "1,Yes,Female,Sales,Sales Executive,2,3,10,Yes,5993\n"
    "2,No,Male,Research & Development,Research Scientist,10,4,1,No,5130\n"
    "4,Yes,Male,Research & Development,Laboratory Technician,0,3,2,Yes,2090\n"
)


# ── parse_attrition ─────────────────────────────────────────────────────────


class TestParseAttrition:
    @pytest.mark.parametrize("value", ["Yes", "yes", " Y ", "true", "1", "Left", True])
    def test_truthy(self, value):
        assert parse_attrition(value) is True

    @pytest.mark.parametrize("value", ["No", "", None, "maybe", 0, False])
    def test_falsy(self, value):
        assert parse_attrition(value) is False


# ── employees_from_dataframe ────────────────────────────────────────────────


class TestEmployeesFromDataframe:
    def test_maps_columns(self):
        employees = load_employees_text(CSV)
        assert [e.employee_id for e in employees] == [1, 2, 4]
        first = employees[0]
        assert first.attrition is True
        assert first.gender == "Female"
        assert first.role == "Sales Executive"
        assert first.tenure_years == 2.0
        assert first.performance_score == 3
        assert first.distance_from_home == 10.0
        assert first.over_time == "Yes"
        assert first.monthly_income == 5993.0

    def test_missing_required_column(self):
        df = pd.DataFrame({"EmployeeNumber": [1]})
        with pytest.raises(MissingColumnsError) as excinfo:
            employees_from_dataframe(df)
        assert excinfo.value.missing == ["Attrition"]
        assert "Attrition" in str(excinfo.value)

    def test_optional_columns_absent(self):
        df = pd.DataFrame({"EmployeeNumber": [5], "Attrition": ["No"]})
        [emp] = employees_from_dataframe(df)
        assert emp.department is None
        assert emp.tenure_years is None
        assert emp.attrition is False

    def test_blank_cells_become_none(self):
        df = pd.DataFrame({
            "EmployeeNumber": [1, 2],
            "Attrition": ["No", "Yes"],
            "Gender": ["  ", "Male"],
            "YearsAtCompany": [None, 3],
        })
        first, second = employees_from_dataframe(df)
        assert first.gender is None
        assert first.tenure_years is None
        assert second.tenure_years == 3.0

    def test_rows_without_id_skipped(self):
        df = pd.DataFrame({"EmployeeNumber": [1, None, "abc"], "Attrition": ["No", "No", "No"]})
        assert [e.employee_id for e in employees_from_dataframe(df)] == [1]

    def test_duplicate_ids_keep_first(self):
        df = pd.DataFrame({
            "EmployeeNumber": [7, 7],
            "Attrition": ["Yes", "No"],
            "Department": ["Sales", "HR"],
        })
        [emp] = employees_from_dataframe(df)
        assert emp.department == "Sales"
        assert emp.attrition is True

    def test_out_of_range_score_nulled(self):
        df = pd.DataFrame({
            "EmployeeNumber": [1, 2],
            "Attrition": ["No", "No"],
            "PerformanceRating": [9, 4],
        })
        first, second = employees_from_dataframe(df)
        assert first.performance_score is None
        assert second.performance_score == 4

    def test_non_integer_score_nulled(self):
        df = pd.DataFrame({
            "EmployeeNumber": [1],
            "Attrition": ["No"],
            "PerformanceRating": [3.5],
        })
        [emp] = employees_from_dataframe(df)
        assert emp.performance_score is None

    def test_infinite_tenure_nulled(self):
        employees = load_employees_text("EmployeeNumber,Attrition,YearsAtCompany\n1,Yes,inf\n2,No,3\n")
        assert [e.tenure_years for e in employees] == [None, 3.0]

    def test_hire_date_parsed(self):
        df = pd.DataFrame({
            "EmployeeNumber": [1, 2],
            "Attrition": ["No", "No"],
            "HireDate": ["2019-04-01", "not a date"],
        })
        first, second = employees_from_dataframe(df)
        assert first.hire_date == date(2019, 4, 1)
        assert second.hire_date is None


# ── load_employees_csv ──────────────────────────────────────────────────────


class TestLoadEmployeesCsv:
    def test_reads_file(self, tmp_path):
        path = tmp_path / "hr.csv"
        path.write_text(CSV)
        employees = load_employees_csv(path)
        assert len(employees) == 3
        assert employees[2].department == "Research & Development"
