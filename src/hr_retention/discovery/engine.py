"""Retention analysis orchestrator — runs every stage for one as-of date.

Stages are isolated: an exception in one stage is logged and recorded, and
the remaining stages still run.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable

from config.settings import Settings, settings as default_settings
from hr_retention.discovery.attrition_correlation import (
    AttritionCorrelation,
    distance_attrition_correlation,
)
from hr_retention.discovery.attrition_trends import (
    RollingAttritionResult,
    compute_rolling_attrition,
    compute_rolling_average,
)
from hr_retention.discovery.cohort_retention import CohortRetentionResult, compute_cohort_retention
from hr_retention.discovery.event_deriver import (
    derive_events,
    derive_performance_records,
    fill_hire_dates,
)
from hr_retention.discovery.performance_trend import ScoreDeltaResult, compute_score_deltas
from hr_retention.discovery.records import Employee, Event, PerformanceRecord
from hr_retention.ingestion.data_validator import DataQualityReport, check_employees

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Everything one analysis run produces."""
    as_of: date
    data_quality: DataQualityReport
    events: list[Event] = field(default_factory=list)
    rolling_attrition: RollingAttritionResult | None = None
    rolling_average: RollingAttritionResult | None = None
    cohorts: CohortRetentionResult | None = None
    score_deltas: ScoreDeltaResult | None = None
    correlation: AttritionCorrelation | None = None
    stages: list[dict] = field(default_factory=list)
    failed_stages: dict[str, str] = field(default_factory=dict)
    summary: str = ""


class _StageTracker:
    """Runs stages and records per-stage outcomes."""

    def __init__(self) -> None:
        self.stages: list[dict] = []
        self.failed: dict[str, str] = {}

    def run(self, name: str, func: Callable[[], Any]) -> Any:
        started = time.monotonic()
        try:
            value = func()
        except Exception as exc:
            logger.exception("Analysis stage %s failed", name)
            self.failed[name] = f"{type(exc).__name__}: {exc}"
            self.stages.append({"stage": name, "status": "failed", "error": str(exc)[:500]})
            return None

        entry: dict = {
            "stage": name,
            "status": "ok" if value is not None else "empty",
            "duration_ms": int((time.monotonic() - started) * 1000),
        }
        if isinstance(value, list):
            entry["count"] = len(value)
        self.stages.append(entry)
        return value


def run_analysis(
    employees: list[Employee],
    as_of: date | None = None,
    performance_records: list[PerformanceRecord] | None = None,
    config: Settings | None = None,
) -> AnalysisResult:
    """Run the full retention analysis over an employee snapshot.

    Args:
        employees: Loaded employee records.
        as_of: Reference date; defaults to the configured as-of date or today.
        performance_records: Dated score history. Defaults to each employee's
            snapshot score recorded on the as-of date.
        config: Settings providing window sizes.
    """
    config = config or default_settings
    as_of = config.resolve_as_of(as_of)
    tracker = _StageTracker()
    started = time.monotonic()

    employees = fill_hire_dates(employees, as_of)
    quality = check_employees(employees)

    events = tracker.run("events", lambda: derive_events(employees, as_of)) or []
    if performance_records is None:
        performance_records = derive_performance_records(employees, as_of)

    rolling = tracker.run(
        "rolling_attrition",
        lambda: compute_rolling_attrition(events, window=config.rolling_attrition_window),
    )
    average = tracker.run(
        "rolling_average",
        lambda: compute_rolling_average(events, window=config.rolling_average_window),
    )
    cohorts = tracker.run(
        "cohort_retention",
        lambda: compute_cohort_retention(employees, events, as_of),
    )
    deltas = tracker.run(
        "score_deltas",
        lambda: compute_score_deltas(
            performance_records, as_of, months=config.performance_lookback_months,
        ),
    )
    correlation = tracker.run(
        "distance_correlation",
        lambda: distance_attrition_correlation(employees),
    )

    exits = sum(1 for e in employees if e.attrition)
    summary = (
        f"{len(employees)} employees, {exits} exits, {len(events)} derived events "
        f"as of {as_of.isoformat()}."
    )
    if tracker.failed:
        summary += f" {len(tracker.failed)} stage(s) failed: {', '.join(sorted(tracker.failed))}."

    logger.info(
        "Analysis complete in %dms: %d employees, %d stages failed",
        int((time.monotonic() - started) * 1000), len(employees), len(tracker.failed),
    )

    return AnalysisResult(
        as_of=as_of,
        data_quality=quality,
        events=events,
        rolling_attrition=rolling,
        rolling_average=average,
        cohorts=cohorts,
        score_deltas=deltas,
        correlation=correlation,
        stages=tracker.stages,
        failed_stages=tracker.failed,
        summary=summary,
    )
