"""
Main entry point for the shift rotation command line.
"""

import sys
import argparse
import logging
import traceback
from datetime import date, datetime

from .engine import ShiftEngine
from .errors import (
    ConfigurationError,
    InvalidDateFormatError,
    InvalidDateRangeError,
    InvalidTeamError,
)
from .exporters import MatrixCSVExporter, TeamCSVExporter
from .reporter import ScheduleReporter, print_team_statistics


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shift-rotation",
        description="Five-team, three-shift rotation schedules from a fixed 35-day cycle",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Who works on a given day
  shift-rotation day 2025-03-14

  # Roster for a month with coverage check and team summary
  shift-rotation schedule --month 2025-03

  # Next shift for team 33
  shift-rotation next 33

  # Export team 31's schedule to CSV
  shift-rotation export 31 --start 2025-01-01 --end 2025-12-31 -o team31.csv
        """,
    )

    parser.add_argument("--config", type=str, help="YAML file overriding the built-in cycle")
    parser.add_argument("--verbose", action="store_true", help="Enable info logging")

    sub = parser.add_subparsers(dest="command", required=True)

    day = sub.add_parser("day", help="Show every team's shift on one date")
    day.add_argument("date", type=str, help="Date (YYYY-MM-DD)")

    schedule = sub.add_parser("schedule", help="Print a roster for a period")
    _add_period_arguments(schedule)
    schedule.add_argument("--team", action="append", help="Limit to a team (repeatable)")
    schedule.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress coverage check and team summary",
    )

    validate = sub.add_parser("validate", help="Check daily coverage for a period")
    _add_period_arguments(validate)

    stats = sub.add_parser("stats", help="Statistics for a team and month")
    stats.add_argument("team", type=str, help="Team identifier, e.g. 31")
    stats.add_argument("--month", type=str, help="Month (YYYY-MM), defaults to this month")

    next_shift = sub.add_parser("next", help="Next shift and countdown for a team")
    next_shift.add_argument("team", type=str, help="Team identifier, e.g. 31")
    next_shift.add_argument("--now", type=str, help="Reference time (ISO 8601), defaults to now")

    export = sub.add_parser("export", help="Export a schedule to CSV")
    export.add_argument("team", type=str, nargs="?", help="Team to export; omit for a roster grid")
    _add_period_arguments(export)
    export.add_argument("-o", "--output", type=str, help="Output file (default: stdout)")
    export.add_argument("--delimiter", type=str, default=",", help="Field separator")

    return parser


def _add_period_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--month", type=str, help="Month (YYYY-MM)")
    parser.add_argument("--start", type=str, help="Start date (YYYY-MM-DD)")
    parser.add_argument("--end", type=str, help="End date (YYYY-MM-DD)")


def _parse_month(value: str) -> tuple[int, int]:
    try:
        year, month = value.split("-")
        return int(year), int(month)
    except ValueError as e:
        raise InvalidDateRangeError(f"Month must look like YYYY-MM, got: {value!r}") from e


def _period(engine: ShiftEngine, args, today: date, teams=None):
    """Shifts for --month, --start/--end, or the current month."""
    if args.start or args.end:
        if not (args.start and args.end):
            raise InvalidDateRangeError("--start and --end must be given together")
        return engine.schedule(args.start, args.end, teams)
    if args.month:
        year, month = _parse_month(args.month)
        return engine.month_schedule(year, month, teams)
    return engine.month_schedule(today.year, today.month, teams)


def _write(text: str, output: str | None) -> None:
    if output:
        with open(output, "w", encoding="utf-8", newline="") as f:
            f.write(text + "\n")
        print(f"\n✓ Schedule exported to {output}")
    else:
        print(text)


def _build_engine(args) -> ShiftEngine:
    # validate reports coverage problems itself instead of failing at startup
    verify = args.command != "validate"
    if args.config:
        return ShiftEngine.from_yaml(args.config, verify=verify)
    return ShiftEngine(verify=verify)


def run(args, now: datetime) -> int:
    """Execute a parsed command; returns the process exit code."""
    engine = _build_engine(args)
    today = engine.lookahead.local_now(now).date()

    if args.command == "day":
        for shift in engine.day_shifts(args.date):
            times = (
                f"{shift.start_time:%H:%M}-{shift.end_time:%H:%M}" if shift.is_working else ""
            )
            print(f"Team {shift.team}: {shift.code} {shift.shift_name:12s} {times}")
        return 0

    if args.command == "schedule":
        shifts = _period(engine, args, today, args.team)
        reporter = ScheduleReporter(
            shifts,
            validation=engine.validate(shifts),
            statistics=engine.statistics.schedule_summary(shifts),
        )
        reporter.print_report(args.quiet)
        return 0

    if args.command == "validate":
        result = engine.validate(_period(engine, args, today))
        print(f"Days checked: {result.days_checked}")
        if result.is_valid:
            print("✓ Coverage valid")
            return 0
        for message in result.errors:
            print(f"  • {message}")
        return 1

    if args.command == "stats":
        year, month = _parse_month(args.month) if args.month else (today.year, today.month)
        print_team_statistics(engine.team_statistics(args.team, year, month))
        return 0

    if args.command == "next":
        reference = datetime.fromisoformat(args.now) if args.now else now
        shift = engine.next_shift(args.team, reference)
        if shift is None:
            print(f"No upcoming shift for team {args.team}")
            return 1
        print(
            f"Team {shift.team}: {shift.shift_name} ({shift.code}) "
            f"{shift.weekday} {shift.localized_date} {shift.start_time:%H:%M}"
        )
        countdown = engine.countdown(shift, reference)
        if countdown is not None:
            print(f"Starts in {countdown.formatted}")
        return 0

    if args.command == "export":
        if args.team:
            shifts = _period(engine, args, today, [args.team])
            exporter = TeamCSVExporter(shifts, delimiter=args.delimiter)
        else:
            exporter = MatrixCSVExporter(_period(engine, args, today), delimiter=args.delimiter)
        _write(exporter.to_delimited_text(), args.output)
        return 0

    return 1


def main():
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        sys.exit(run(args, datetime.now().astimezone()))

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    except InvalidDateFormatError as e:
        print(f"Date Format Error: {e}", file=sys.stderr)
        print(
            "\n Tip: Use ISO 8601 format (YYYY-MM-DD) for all dates.", file=sys.stderr
        )
        sys.exit(1)

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        sys.exit(1)

    except InvalidTeamError as e:
        print(f"Team Error: {e}", file=sys.stderr)
        sys.exit(1)

    except (InvalidDateRangeError, ValueError) as e:
        print(f"Validation Error: {e}", file=sys.stderr)
        sys.exit(1)

    except Exception as e:
        print(f"Unexpected Error: {e}", file=sys.stderr)
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
