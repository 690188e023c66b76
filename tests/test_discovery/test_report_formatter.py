"""Tests for the report formatter."""

from datetime import date

from hr_retention.discovery.engine import run_analysis
from hr_retention.discovery.records import Employee, EventKind
from hr_retention.discovery.report_formatter import (
    breakdown_to_dict,
    format_cell,
    format_retention_report,
    render_breakdown,
    render_table,
    to_jsonable,
)
from hr_retention.discovery.workforce_breakdowns import BreakdownTable


class TestFormatCell:
    def test_none(self):
        assert format_cell(None) == "-"

    def test_float_two_places(self):
        assert format_cell(66.666) == "66.67"

    def test_date(self):
        assert format_cell(date(2024, 3, 1)) == "2024-03-01"

    def test_enum(self):
        assert format_cell(EventKind.EXIT) == "exit"

    def test_bool(self):
        assert format_cell(True) == "Yes"


class TestRenderTable:
    def test_header_and_rows(self):
        text = render_table(["department", "count"], [("Sales", 3), ("HR", 12)])
        lines = text.splitlines()
        assert lines[0].startswith("department")
        assert set(lines[1].replace(" ", "")) == {"-"}
        assert len(lines) == 4

    def test_numbers_right_aligned(self):
        text = render_table(["name", "n"], [("a", 5), ("b", 123)])
        lines = text.splitlines()
        assert lines[2].endswith("  5")
        assert lines[3].endswith("123")


class TestRenderBreakdown:
    def test_empty_table(self):
        table = BreakdownTable(title="Nothing", columns=["a"], rows=[])
        assert "(no rows)" in render_breakdown(table)

    def test_title_and_summary(self):
        table = BreakdownTable(title="Heads", columns=["a", "n"], rows=[("x", 1)], summary="one row")
        text = render_breakdown(table)
        assert text.startswith("Heads")
        assert text.endswith("one row")


class TestSerialisation:
    def test_breakdown_to_dict(self):
        table = BreakdownTable(
            title="T", columns=["month", "n"], rows=[(date(2024, 1, 1), 2)], summary="s",
        )
        payload = breakdown_to_dict(table)
        assert payload["rows"] == [{"month": "2024-01-01", "n": 2}]
        assert payload["title"] == "T"

    def test_nested_dataclass(self):
        employee = Employee(employee_id=7, hire_date=date(2020, 2, 2))
        payload = to_jsonable({"emp": employee, "tags": ("a", "b")})
        assert payload["emp"]["hire_date"] == "2020-02-02"
        assert payload["tags"] == ["a", "b"]


class TestFormatRetentionReport:
    def test_sections_present(self):
        employees = [
            Employee(employee_id=1, tenure_years=1, attrition=True, distance_from_home=20,
                     performance_score=3),
            Employee(employee_id=2, tenure_years=3, attrition=False, distance_from_home=2,
                     performance_score=4),
        ]
        result = run_analysis(employees, as_of=date(2025, 1, 31))
        text = format_retention_report(result)
        assert "Employee Retention Report (as of 2025-01-31)" in text
        assert "Data Quality" in text
        assert "Monthly Attrition (rolling sum)" in text
        assert "Cohort Retention" in text
        assert "Distance vs Attrition" in text
        assert "Failed Stages" not in text
