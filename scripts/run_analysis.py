"""Run the retention analysis on an HR export CSV and print the report."""

import argparse
import asyncio
import json
import logging
import sys
from datetime import date
from pathlib import Path

from config.settings import settings
from hr_retention.discovery.engine import run_analysis
from hr_retention.discovery.event_deriver import (
    derive_events,
    derive_performance_records,
    fill_hire_dates,
)
from hr_retention.discovery.report_catalog import REPORTS, list_reports, run_report
from hr_retention.discovery.report_formatter import (
    breakdown_to_dict,
    format_retention_report,
    render_breakdown,
    result_to_dict,
)
from hr_retention.ingestion.employee_loader import MissingColumnsError, load_employees_csv


async def _stage(employees, as_of: date) -> dict:
    from hr_retention.db.connection import async_session, engine
    from hr_retention.ingestion.staging import stage_employees

    async with async_session() as session:
        counts = await stage_employees(
            session,
            employees,
            derive_events(employees, as_of),
            derive_performance_records(employees, as_of),
        )
    await engine.dispose()
    return counts


def main() -> int:
    parser = argparse.ArgumentParser(description="HR retention analysis")
    parser.add_argument("csv", type=Path, nargs="?", help="HR export CSV")
    parser.add_argument("--as-of", type=date.fromisoformat, help="Reference date (YYYY-MM-DD)")
    parser.add_argument("--report", help="Run one catalog report, e.g. q12")
    parser.add_argument("--all-reports", action="store_true", help="Run every catalog report")
    parser.add_argument("--list-reports", action="store_true", help="List catalog reports")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    parser.add_argument("--stage", action="store_true", help="Also stage the export in the database")
    args = parser.parse_args()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_reports:
        for r in list_reports():
            print(f"{r.key}  {r.title}")
        return 0

    if args.csv is None:
        parser.error("the csv argument is required")

    try:
        employees = load_employees_csv(args.csv)
    except (FileNotFoundError, MissingColumnsError) as exc:
        print(f"[run_analysis] {exc}", file=sys.stderr)
        return 1

    as_of = settings.resolve_as_of(args.as_of)

    if args.report or args.all_reports:
        if args.report and args.report.lower() not in REPORTS:
            print(f"[run_analysis] Unknown report: {args.report}", file=sys.stderr)
            return 1
        keys = [args.report] if args.report else [r.key for r in list_reports()]
        filled = fill_hire_dates(employees, as_of)
        tables = [run_report(k, filled, as_of) for k in keys]
        if args.json:
            print(json.dumps([breakdown_to_dict(t) for t in tables], indent=2))
        else:
            print("\n\n".join(render_breakdown(t) for t in tables))
        return 0

    result = run_analysis(employees, as_of=as_of)
    if args.json:
        print(json.dumps(result_to_dict(result), indent=2))
    else:
        print(format_retention_report(result))

    if args.stage:
        counts = asyncio.run(_stage(fill_hire_dates(employees, as_of), as_of))
        print(f"[run_analysis] Staged {counts}")

    return 0 if not result.failed_stages else 2


if __name__ == "__main__":
    sys.exit(main())
