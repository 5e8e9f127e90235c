"""
Aggregate statistics over generated schedules.
"""

from typing import Dict, List, Optional, Union

from .config import CycleModel
from .models import (
    ScheduleStatistics,
    Shift,
    TeamBreakdown,
    TeamStatistics,
    UpcomingShift,
)

UPCOMING_PREVIEW = 7


class StatisticsAggregator:
    """Summarizes already-generated shifts; never re-resolves the cycle."""

    def __init__(self, model: CycleModel):
        self.model = model

    def summarize(
        self, shifts: List[Shift], team: Optional[Union[str, int]] = None
    ) -> Union[ScheduleStatistics, TeamStatistics]:
        """
        Summarize a schedule.

        Args:
            shifts: Generated shifts, any number of teams
            team: When given, summarize only this team's shifts

        Returns:
            TeamStatistics for a single team, otherwise ScheduleStatistics
        """
        if team is not None:
            return self.team_summary(shifts, team)
        return self.schedule_summary(shifts)

    def schedule_summary(self, shifts: List[Shift]) -> ScheduleStatistics:
        teams: Dict[str, TeamBreakdown] = {}
        for team in self.model.teams:
            team_shifts = [s for s in shifts if s.team == team]
            if team_shifts:
                teams[team] = self._breakdown(team, team_shifts)

        working = sum(b.working_days for b in teams.values())
        free = sum(b.free_days for b in teams.values())

        return ScheduleStatistics(
            total_shifts=len(shifts),
            working_shifts=working,
            free_days=free,
            shift_distribution=self._distribution(shifts),
            teams=teams,
        )

    def team_summary(self, shifts: List[Shift], team: Union[str, int]) -> TeamStatistics:
        """Statistics for one team; raises InvalidTeamError for unknown teams."""
        team = self.model.normalize_team(team)
        team_shifts = sorted(
            (s for s in shifts if s.team == team), key=lambda s: s.date
        )
        working = [s for s in team_shifts if s.is_working]
        period = team_shifts[0].date.strftime("%Y-%m") if team_shifts else ""

        return TeamStatistics(
            team=team,
            period=period,
            total_days=len(team_shifts),
            working_days=len(working),
            free_days=len(team_shifts) - len(working),
            work_hours=len(working) * self.model.hours_per_shift,
            shift_distribution=self._distribution(team_shifts),
            upcoming_shifts=[
                UpcomingShift(
                    date=s.date,
                    code=s.code,
                    start_time=s.start_time,
                    end_time=s.end_time,
                    weekday=s.weekday,
                )
                for s in team_shifts[:UPCOMING_PREVIEW]
            ],
        )

    def _breakdown(self, team: str, team_shifts: List[Shift]) -> TeamBreakdown:
        working = sum(1 for s in team_shifts if s.is_working)
        patterns = {band.label: 0 for band in self.model.pattern_bands}
        for s in team_shifts:
            patterns[s.pattern_label] = patterns.get(s.pattern_label, 0) + 1

        return TeamBreakdown(
            team=team,
            total_days=len(team_shifts),
            working_days=working,
            free_days=len(team_shifts) - working,
            work_hours=working * self.model.hours_per_shift,
            shift_distribution=self._distribution(team_shifts),
            pattern_distribution=patterns,
        )

    def _distribution(self, shifts: List[Shift]) -> Dict[str, int]:
        """Count shifts per working code, including codes that never occur."""
        distribution = {code: 0 for code in self.model.working_codes}
        for s in shifts:
            if s.code in distribution:
                distribution[s.code] += 1
        return distribution
