"""
Console reporting for generated schedules.
"""

from typing import List, Optional

import pandas as pd

from .config import team_sort_key
from .models import ScheduleStatistics, Shift, TeamStatistics, ValidationResult


class ScheduleReporter:
    """Formats and displays schedules, coverage results and statistics."""

    def __init__(
        self,
        shifts: List[Shift],
        validation: Optional[ValidationResult] = None,
        statistics: Optional[ScheduleStatistics] = None,
    ):
        self.shifts = shifts
        self.validation = validation
        self.statistics = statistics

    def print_report(self, quiet: bool) -> None:
        """Print complete schedule report."""
        self._print_header()
        self._print_roster()

        if not quiet:
            if self.validation is not None:
                self._print_validation()
            if self.statistics is not None:
                self._print_team_summary()

    def _print_title(self, title: str) -> None:
        print("=" * 80)
        print(title)
        print("=" * 80)

    def _print_header(self) -> None:
        """Print report header."""
        self._print_title("SHIFT ROTATION SCHEDULE")

        if not self.shifts:
            print("\nNo shifts in the requested period")
            print()
            return

        first = min(s.date for s in self.shifts)
        last = max(s.date for s in self.shifts)
        teams = sorted({s.team for s in self.shifts}, key=team_sort_key)
        print(f"\nPeriod: {first} to {last}")
        print(f"Teams: {', '.join(teams)}")
        print(f"Shift records: {len(self.shifts)}")
        print()

    def roster_frame(self) -> pd.DataFrame:
        """Date x team grid of shift codes."""
        if not self.shifts:
            return pd.DataFrame()

        df = pd.DataFrame(
            [
                {
                    "Date": s.date.isoformat(),
                    "Weekday": s.weekday,
                    "Team": s.team,
                    "Code": s.code,
                }
                for s in self.shifts
            ]
        )
        grid = df.pivot_table(
            index=["Date", "Weekday"], columns="Team", values="Code", aggfunc="first"
        )
        grid.columns.name = None
        return grid.fillna("")

    def _print_roster(self) -> None:
        """Print day-by-day roster."""
        self._print_title("DAILY ROSTER")

        grid = self.roster_frame()
        if grid.empty:
            print("\n  Nothing to show")
            print()
            return

        print(grid.to_string())
        print()

    def _print_validation(self) -> None:
        """Print coverage validation result."""
        self._print_title("COVERAGE CHECK")

        result = self.validation
        print(f"\nDays checked: {result.days_checked}")
        if result.is_valid:
            print("✓ Every day has exactly one team on each working shift")
            print()
            return

        print(f"✗ {len(result.errors)} violations")
        for message in result.errors:
            print(f"  • {message}")
        print()

    def team_frame(self) -> pd.DataFrame:
        """One row per team with working/free days, hours and shift counts."""
        data = []
        for team, breakdown in self.statistics.teams.items():
            row = {
                "Team": team,
                "Days": breakdown.total_days,
                "Working": breakdown.working_days,
                "Free": breakdown.free_days,
                "Hours": breakdown.work_hours,
            }
            row.update(breakdown.shift_distribution)
            data.append(row)

        if not data:
            return pd.DataFrame()
        return pd.DataFrame(data).set_index("Team")

    def _print_team_summary(self) -> None:
        """Print per-team statistics."""
        self._print_title("TEAM SUMMARY")

        df = self.team_frame()
        if df.empty:
            print("\n  No team statistics")
            print()
            return

        print(df.to_string())
        print(
            f"\nTotal: {self.statistics.working_shifts} working shifts, "
            f"{self.statistics.free_days} free days"
        )
        print()


def print_team_statistics(stats: TeamStatistics) -> None:
    """Print a single team's statistics and upcoming preview."""
    print(f"Team {stats.team} - {stats.period}")
    print(
        f"  Days: {stats.total_days}  Working: {stats.working_days}  "
        f"Free: {stats.free_days}  Hours: {stats.work_hours}"
    )
    distribution = ", ".join(f"{code}: {n}" for code, n in stats.shift_distribution.items())
    print(f"  Distribution: {distribution}")

    if stats.upcoming_shifts:
        df = pd.DataFrame([u.to_dict() for u in stats.upcoming_shifts])
        print()
        print(df.to_string(index=False))
