"""Tests for hire/exit event derivation."""

from datetime import date

import pytest

from hr_retention.discovery.event_deriver import (
    derive_events,
    derive_performance_records,
    estimate_hire_date,
    fill_hire_dates,
    subtract_months,
)
from hr_retention.discovery.records import Employee, EventKind

AS_OF = date(2025, 8, 15)


# ===================================================================
# Date arithmetic
# ===================================================================


class TestSubtractMonths:
    def test_same_year(self):
        assert subtract_months(date(2025, 8, 15), 6) == date(2025, 2, 15)

    def test_crosses_year(self):
        assert subtract_months(date(2025, 3, 10), 6) == date(2024, 9, 10)

    def test_clamps_to_month_end(self):
        assert subtract_months(date(2025, 8, 31), 6) == date(2025, 2, 28)

    def test_leap_february(self):
        assert subtract_months(date(2024, 8, 31), 6) == date(2024, 2, 29)

    def test_zero_months(self):
        assert subtract_months(date(2025, 1, 31), 0) == date(2025, 1, 31)


class TestEstimateHireDate:
    def test_none_tenure(self):
        assert estimate_hire_date(None, AS_OF) is None

    def test_whole_years_keep_month_and_day(self):
        assert estimate_hire_date(3, AS_OF) == date(2022, 8, 15)

    def test_zero_years_is_as_of(self):
        assert estimate_hire_date(0, AS_OF) == AS_OF

    def test_float_whole_years(self):
        assert estimate_hire_date(2.0, AS_OF) == date(2023, 8, 15)

    def test_leap_day_clamps(self):
        assert estimate_hire_date(1, date(2024, 2, 29)) == date(2023, 2, 28)

    def test_fractional_years_use_months(self):
        assert estimate_hire_date(1.5, AS_OF) == date(2024, 2, 15)

    @pytest.mark.parametrize("tenure", [5000, 12000.5, float("inf"), float("-inf"), float("nan")])
    def test_out_of_range_tenure_is_none(self, tenure):
        assert estimate_hire_date(tenure, AS_OF) is None


# ===================================================================
# Derivation
# ===================================================================


class TestDeriveEvents:
    def test_one_event_per_employee(self):
        employees = [
            Employee(employee_id=1, tenure_years=2, attrition=False),
            Employee(employee_id=2, tenure_years=5, attrition=True),
        ]
        events = derive_events(employees, AS_OF)
        assert len(events) == 2
        assert [e.employee_id for e in events] == [1, 2]

    def test_kind_follows_attrition(self):
        employees = [
            Employee(employee_id=1, tenure_years=2, attrition=False),
            Employee(employee_id=2, tenure_years=5, attrition=True),
        ]
        events = derive_events(employees, AS_OF)
        assert events[0].kind == EventKind.HIRE
        assert events[1].kind == EventKind.EXIT

    def test_event_dated_at_estimated_hire(self):
        events = derive_events([Employee(employee_id=7, tenure_years=4, attrition=True)], AS_OF)
        assert events[0].event_date == date(2021, 8, 15)

    def test_out_of_range_tenure_dropped(self):
        employees = [
            Employee(employee_id=1, tenure_years=2),
            Employee(employee_id=2, tenure_years=float("inf"), attrition=True),
        ]
        assert [e.employee_id for e in derive_events(employees, AS_OF)] == [1]

    def test_missing_tenure_dropped(self):
        employees = [
            Employee(employee_id=1, tenure_years=None, attrition=True),
            Employee(employee_id=2, tenure_years=1),
        ]
        events = derive_events(employees, AS_OF)
        assert [e.employee_id for e in events] == [2]

    def test_empty(self):
        assert derive_events([], AS_OF) == []

    def test_deterministic(self):
        employees = [Employee(employee_id=i, tenure_years=i % 4, attrition=i % 2 == 0) for i in range(20)]
        assert derive_events(employees, AS_OF) == derive_events(employees, AS_OF)


class TestFillHireDates:
    def test_fills_missing(self):
        filled = fill_hire_dates([Employee(employee_id=1, tenure_years=3)], AS_OF)
        assert filled[0].hire_date == date(2022, 8, 15)

    def test_keeps_existing(self):
        emp = Employee(employee_id=1, tenure_years=3, hire_date=date(2020, 1, 1))
        assert fill_hire_dates([emp], AS_OF)[0].hire_date == date(2020, 1, 1)

    def test_no_tenure_stays_none(self):
        assert fill_hire_dates([Employee(employee_id=1)], AS_OF)[0].hire_date is None

    def test_out_of_range_tenure_stays_none(self):
        filled = fill_hire_dates([Employee(employee_id=1, tenure_years=5000)], AS_OF)
        assert filled[0].hire_date is None

    def test_input_not_mutated(self):
        emp = Employee(employee_id=1, tenure_years=3)
        fill_hire_dates([emp], AS_OF)
        assert emp.hire_date is None


class TestDerivePerformanceRecords:
    def test_snapshot_on_as_of(self):
        records = derive_performance_records(
            [Employee(employee_id=1, performance_score=3), Employee(employee_id=2, performance_score=4)],
            AS_OF,
        )
        assert [(r.employee_id, r.record_date, r.performance_score) for r in records] == [
            (1, AS_OF, 3),
            (2, AS_OF, 4),
        ]

    def test_missing_score_skipped(self):
        assert derive_performance_records([Employee(employee_id=1)], AS_OF) == []
