"""Report formatter — renders analysis results as text tables or plain dicts.

Pure functions; nothing here computes metrics.
"""

from __future__ import annotations

import dataclasses
from datetime import date, datetime
from enum import Enum
from typing import Any

from hr_retention.discovery.workforce_breakdowns import BreakdownTable


# ---------------------------------------------------------------------------
# Cell formatting
# ---------------------------------------------------------------------------


def format_cell(value: Any) -> str:
    """Format one table cell. None renders as an empty-looking dash."""
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, float):
        return f"{value:.2f}"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def render_table(headers: list[str], rows: list[tuple | list]) -> str:
    """Render a fixed-width text table with a header underline.

    Numbers are right-aligned, everything else left-aligned.
    """
    cells = [[format_cell(v) for v in row] for row in rows]
    widths = [len(h) for h in headers]
    for row in cells:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    numeric = [
        bool(rows) and all(isinstance(r[i], (int, float)) or r[i] is None for r in rows)
        for i in range(len(headers))
    ]

    def _line(values: list[str]) -> str:
        parts = []
        for i, v in enumerate(values):
            parts.append(v.rjust(widths[i]) if numeric[i] else v.ljust(widths[i]))
        return "  ".join(parts).rstrip()

    lines = [_line(list(headers)), "  ".join("-" * w for w in widths)]
    lines.extend(_line(row) for row in cells)
    return "\n".join(lines)


def render_breakdown(table: BreakdownTable) -> str:
    """Render a breakdown table with its title and summary."""
    lines = []
    if table.title:
        lines.extend([table.title, "-" * len(table.title)])
    if table.rows:
        lines.append(render_table(table.columns, table.rows))
    else:
        lines.append("(no rows)")
    if table.summary:
        lines.append(table.summary)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------


def to_jsonable(value: Any) -> Any:
    """Convert dataclasses, dates and enums into JSON-ready structures."""
    if isinstance(value, BreakdownTable):
        return breakdown_to_dict(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(v) for v in value]
    return value


def breakdown_to_dict(table: BreakdownTable) -> dict:
    """A breakdown table as ``{title, columns, rows, summary}`` with records for rows."""
    return {
        "title": table.title,
        "columns": table.columns,
        "rows": to_jsonable(table.as_records()),
        "summary": table.summary,
    }


def result_to_dict(result: Any) -> dict:
    """Serialise any analysis result dataclass."""
    return to_jsonable(result)


# ---------------------------------------------------------------------------
# Combined text report
# ---------------------------------------------------------------------------


def _section(title: str, body: str) -> str:
    return "\n".join(["", title, "-" * 38, body])


def format_retention_report(result) -> str:
    """Generate the multi-section text report for an ``AnalysisResult``."""
    sections: list[str] = []
    sections.append(f"Employee Retention Report (as of {result.as_of.isoformat()})")
    sections.append("=" * 40)
    sections.append(result.summary)

    quality = result.data_quality
    sections.append(_section(
        "Data Quality",
        "\n".join([
            f"  Employees: {quality.total_employees}",
            f"  Missing hire dates: {quality.missing_hire_dates}",
            f"  Missing gender: {quality.missing_gender}",
            f"  Missing department: {quality.missing_department}",
        ]),
    ))

    if result.rolling_attrition is not None:
        ra = result.rolling_attrition
        body = render_table(
            ["month", "exits", f"rolling_{ra.window}_sum"],
            [(p.month, p.count, p.rolling_value) for p in ra.points],
        )
        sections.append(_section("Monthly Attrition (rolling sum)", body))

    if result.rolling_average is not None:
        rv = result.rolling_average
        body = render_table(
            ["month", "exits", f"rolling_{rv.window}_avg"],
            [(p.month, p.count, p.rolling_value) for p in rv.points],
        )
        sections.append(_section("Monthly Attrition (rolling average)", body))

    if result.cohorts is not None:
        body = render_table(
            ["hire_year", "total_hired", "exited_same_year", "retention_rate_percent"],
            [
                (c.hire_year, c.total_hired, c.exited_same_year, c.retention_rate_percent)
                for c in result.cohorts.cohorts
            ],
        )
        sections.append(_section("Cohort Retention", body + "\n" + result.cohorts.summary))

    if result.score_deltas is not None:
        body = render_table(
            ["employee_id", "date", "score", "prev_score", "delta"],
            [
                (r.employee_id, r.record_date, r.performance_score, r.previous_score, r.delta)
                for r in result.score_deltas.rows
            ],
        )
        sections.append(_section("Performance Trend", body + "\n" + result.score_deltas.summary))

    if result.correlation is not None:
        sections.append(_section("Distance vs Attrition", f"  {result.correlation.summary}"))

    if result.failed_stages:
        sections.append(_section(
            "Failed Stages",
            "\n".join(f"  {name}: {error}" for name, error in result.failed_stages.items()),
        ))

    return "\n".join(sections)
