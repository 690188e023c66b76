"""Tests for hire-year cohort retention."""

from datetime import date

from hr_retention.discovery.cohort_retention import (
    CohortRow,
    compute_cohort_retention,
    retention_rate,
)
from hr_retention.discovery.records import Employee, Event, EventKind

AS_OF = date(2025, 6, 30)


def _exit(emp_id: int, d: date) -> Event:
    return Event(emp_id, d, EventKind.EXIT)


def _hire(emp_id: int, d: date) -> Event:
    return Event(emp_id, d, EventKind.HIRE)


class TestRetentionRate:
    def test_empty_cohort_is_none(self):
        assert retention_rate(0, 0) is None

    def test_all_retained(self):
        assert retention_rate(4, 0) == 100.0

    def test_none_retained(self):
        assert retention_rate(3, 3) == 0.0

    def test_rounded_two_places(self):
        assert retention_rate(3, 1) == 66.67


class TestComputeCohortRetention:
    def test_empty_returns_none(self):
        assert compute_cohort_retention([], [], AS_OF) is None

    def test_two_hires_one_same_year_exit(self):
        employees = [
            Employee(employee_id=1, hire_date=date(2023, 1, 15), attrition=False),
            Employee(employee_id=2, hire_date=date(2023, 6, 1), attrition=True),
        ]
        events = [_hire(1, date(2023, 1, 15)), _exit(2, date(2023, 6, 1))]
        result = compute_cohort_retention(employees, events, AS_OF)
        assert result is not None
        assert result.cohorts == [
            CohortRow(hire_year=2023, total_hired=2, exited_same_year=1, retention_rate_percent=50.0),
        ]

    def test_exit_in_later_year_not_counted(self):
        employees = [Employee(employee_id=1, hire_date=date(2021, 3, 1), attrition=True)]
        events = [_exit(1, date(2022, 7, 1))]
        result = compute_cohort_retention(employees, events, AS_OF)
        row = result.cohorts[0]
        assert row.exited_same_year == 0
        assert row.retention_rate_percent == 100.0

    def test_cohorts_sorted_by_year(self):
        employees = [
            Employee(employee_id=1, hire_date=date(2024, 1, 1)),
            Employee(employee_id=2, hire_date=date(2019, 1, 1)),
            Employee(employee_id=3, hire_date=date(2021, 1, 1)),
        ]
        result = compute_cohort_retention(employees, [], AS_OF)
        assert [c.hire_year for c in result.cohorts] == [2019, 2021, 2024]

    def test_missing_hire_date_uses_as_of_year(self):
        result = compute_cohort_retention([Employee(employee_id=1)], [], AS_OF)
        assert result.cohorts[0].hire_year == 2025

    def test_duplicate_exit_events_count_once(self):
        employees = [Employee(employee_id=1, hire_date=date(2023, 2, 1), attrition=True)]
        events = [_exit(1, date(2023, 2, 1)), _exit(1, date(2023, 9, 1))]
        result = compute_cohort_retention(employees, events, AS_OF)
        assert result.cohorts[0].exited_same_year == 1

    def test_rates_within_bounds(self):
        employees = [
            Employee(employee_id=i, hire_date=date(2018 + i % 5, 1, 1), attrition=i % 3 == 0)
            for i in range(1, 40)
        ]
        events = [_exit(e.employee_id, e.hire_date) for e in employees if e.attrition]
        result = compute_cohort_retention(employees, events, AS_OF)
        for row in result.cohorts:
            assert row.total_hired > 0
            assert 0.0 <= row.retention_rate_percent <= 100.0

    def test_best_and_worst(self):
        employees = [
            Employee(employee_id=1, hire_date=date(2022, 1, 1)),
            Employee(employee_id=2, hire_date=date(2023, 1, 1), attrition=True),
        ]
        events = [_exit(2, date(2023, 1, 1))]
        result = compute_cohort_retention(employees, events, AS_OF)
        assert result.best_cohort == 2022
        assert result.worst_cohort == 2023
        assert "2022" in result.summary
