"""Tests for monthly attrition trends and rolling windows."""

from datetime import date

import pytest

from hr_retention.discovery.attrition_trends import (
    MonthlyBucket,
    backfill_months,
    compute_rolling_attrition,
    compute_rolling_average,
    monthly_event_counts,
    monthly_new_hires,
    rolling_window,
)
from hr_retention.discovery.records import Employee, Event, EventKind


def _exits(month_counts: dict[tuple[int, int], int]) -> list[Event]:
    """Build exit events: {(year, month): count}."""
    events = []
    emp_id = 0
    for (year, month), count in month_counts.items():
        for day in range(count):
            emp_id += 1
            events.append(Event(emp_id, date(year, month, day + 1), EventKind.EXIT))
    return events


# ===================================================================
# Monthly buckets
# ===================================================================


class TestMonthlyEventCounts:
    def test_groups_by_month(self):
        buckets = monthly_event_counts(_exits({(2024, 1): 2, (2024, 2): 3}))
        assert buckets == [
            MonthlyBucket(date(2024, 1, 1), 2),
            MonthlyBucket(date(2024, 2, 1), 3),
        ]

    def test_only_requested_kind(self):
        events = _exits({(2024, 1): 1}) + [Event(99, date(2024, 1, 5), EventKind.HIRE)]
        assert monthly_event_counts(events, EventKind.EXIT)[0].count == 1
        assert monthly_event_counts(events, EventKind.HIRE)[0].count == 1

    def test_gaps_not_filled(self):
        buckets = monthly_event_counts(_exits({(2024, 1): 1, (2024, 4): 1}))
        assert [b.month for b in buckets] == [date(2024, 1, 1), date(2024, 4, 1)]

    def test_sorted_regardless_of_input_order(self):
        buckets = monthly_event_counts(_exits({(2024, 5): 1, (2023, 2): 1}))
        assert [b.month for b in buckets] == [date(2023, 2, 1), date(2024, 5, 1)]

    def test_empty(self):
        assert monthly_event_counts([]) == []


class TestMonthlyNewHires:
    def test_counts_leavers_and_stayers(self):
        employees = [
            Employee(employee_id=1, tenure_years=1, attrition=True),
            Employee(employee_id=2, tenure_years=1),
            Employee(employee_id=3, tenure_years=None),
        ]
        buckets = monthly_new_hires(employees, date(2025, 6, 10))
        assert buckets == [MonthlyBucket(date(2024, 6, 1), 2)]


class TestBackfillMonths:
    def test_inserts_zero_months(self):
        filled = backfill_months([
            MonthlyBucket(date(2024, 11, 1), 2),
            MonthlyBucket(date(2025, 2, 1), 1),
        ])
        assert [(b.month, b.count) for b in filled] == [
            (date(2024, 11, 1), 2),
            (date(2024, 12, 1), 0),
            (date(2025, 1, 1), 0),
            (date(2025, 2, 1), 1),
        ]

    def test_empty(self):
        assert backfill_months([]) == []


# ===================================================================
# Rolling windows
# ===================================================================


class TestRollingWindow:
    def test_sum_partial_then_full(self):
        assert rolling_window([1, 2, 3, 4], 3, "sum") == [1, 3, 6, 9]

    def test_average_rounded(self):
        assert rolling_window([2, 3, 5], 3, "avg") == [2.0, 2.5, 3.33]

    def test_window_one_is_identity(self):
        assert rolling_window([4, 0, 7], 1, "sum") == [4, 0, 7]

    def test_invalid_window(self):
        with pytest.raises(ValueError):
            rolling_window([1], 0)

    def test_invalid_aggregate(self):
        with pytest.raises(ValueError):
            rolling_window([1], 2, "median")

    def test_sum_matches_positional_slice(self):
        counts = [3, 1, 4, 1, 5, 9, 2, 6, 5, 3, 5, 8, 9, 7, 9]
        rolled = rolling_window(counts, 12, "sum")
        for i, value in enumerate(rolled):
            assert value == sum(counts[max(0, i - 11): i + 1])


class TestComputeRollingAttrition:
    def test_no_exits_returns_none(self):
        assert compute_rolling_attrition([Event(1, date(2024, 1, 1), EventKind.HIRE)]) is None

    def test_empty_returns_none(self):
        assert compute_rolling_attrition([]) is None

    def test_rolling_twelve_sum(self):
        result = compute_rolling_attrition(_exits({(2024, m): m for m in range(1, 4)}))
        assert result is not None
        assert [p.rolling_value for p in result.points] == [1, 3, 6]
        assert result.total_exits == 6
        assert result.peak_month == date(2024, 3, 1)
        assert result.aggregate == "sum"

    def test_window_is_positional_not_calendar(self):
        # Jan 2023 and Jan 2024 are 12 calendar months apart but adjacent buckets
        result = compute_rolling_attrition(_exits({(2023, 1): 2, (2024, 1): 3}), window=2)
        assert [p.rolling_value for p in result.points] == [2, 5]

    def test_backfill_changes_window_reach(self):
        events = _exits({(2024, 1): 2, (2024, 4): 3})
        positional = compute_rolling_attrition(events, window=2)
        calendar = compute_rolling_attrition(events, window=2, backfill=True)
        assert positional.points[-1].rolling_value == 5
        assert calendar.points[-1].rolling_value == 3
        assert len(calendar.points) == 4

    def test_thirteen_months_drops_first(self):
        counts = {(2024, m): 1 for m in range(1, 13)}
        counts[(2025, 1)] = 1
        result = compute_rolling_attrition(_exits(counts))
        assert result.points[-1].rolling_value == 12
        assert result.points[-2].rolling_value == 12


class TestComputeRollingAverage:
    def test_three_month_average(self):
        result = compute_rolling_average(_exits({(2024, 1): 2, (2024, 2): 3, (2024, 3): 5}))
        assert result is not None
        march = result.points[-1]
        assert march.month == date(2024, 3, 1)
        assert march.rolling_value == 3.33

    def test_first_month_average_is_itself(self):
        result = compute_rolling_average(_exits({(2024, 1): 4}))
        assert result.points[0].rolling_value == 4.0

    def test_summary_mentions_average(self):
        result = compute_rolling_average(_exits({(2024, 1): 1}))
        assert "average" in result.summary
