"""
Schedule generation over date ranges, built on the DateCycleMapper.
"""

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Protocol

from .config import team_sort_key
from .errors import InvalidTeamError, ScheduleCancelledError
from .mapper import DateCycleMapper, DateLike, TeamLike, parse_date
from .models import ScheduleRange, Shift

logger = logging.getLogger(__name__)


class CancelToken(Protocol):
    """Anything with an ``is_set()`` method, e.g. ``threading.Event``."""

    def is_set(self) -> bool: ...


class ScheduleGenerator:
    """Produces ordered shift lists for one or more teams."""

    def __init__(self, mapper: DateCycleMapper):
        self.mapper = mapper
        self.model = mapper.model

    def generate(
        self,
        schedule_range: ScheduleRange,
        teams: Optional[Iterable[TeamLike]] = None,
        cancel: Optional[CancelToken] = None,
    ) -> List[Shift]:
        """
        Generate shifts for every day in the range.

        Args:
            schedule_range: Inclusive dates to cover
            teams: Teams to include; None means every team in the rotation
            cancel: Optional cancellation signal, checked once per day

        Returns:
            Shifts ordered by date, then by team identifier

        Raises:
            InvalidTeamError: If a team is unknown or the team list is empty
            ScheduleCancelledError: If cancel is set while generating
        """
        team_ids = self._resolve_teams(teams)
        shifts: List[Shift] = []

        for day in schedule_range.dates():
            if cancel is not None and cancel.is_set():
                logger.info(
                    "Generation cancelled at %s after %d shifts", day, len(shifts)
                )
                raise ScheduleCancelledError(
                    f"Schedule generation cancelled at {day.isoformat()}"
                )
            for team in team_ids:
                shifts.append(self.mapper.resolve(day, team))

        logger.debug(
            "Generated %d shifts for %d teams from %s to %s",
            len(shifts),
            len(team_ids),
            schedule_range.start,
            schedule_range.end,
        )
        return shifts

    def generate_between(
        self,
        start: DateLike,
        end: DateLike,
        teams: Optional[Iterable[TeamLike]] = None,
        cancel: Optional[CancelToken] = None,
    ) -> List[Shift]:
        """Like generate(), taking raw start/end values."""
        schedule_range = ScheduleRange(
            start=parse_date(start, "start_date"), end=parse_date(end, "end_date")
        )
        return self.generate(schedule_range, teams, cancel)

    def team_schedule(self, team: TeamLike, start: DateLike, end: DateLike) -> List[Shift]:
        """Schedule for a single team."""
        team = self.mapper.normalize_team(team)
        return [s for s in self.generate_between(start, end) if s.team == team]

    def day_shifts(self, day: DateLike) -> List[Shift]:
        """Every team's shift on one date."""
        return self.generate_between(day, day)

    def month_schedule(
        self, year: int, month: int, teams: Optional[Iterable[TeamLike]] = None
    ) -> List[Shift]:
        """Schedule for a calendar month (month is 1-based)."""
        return self.generate(ScheduleRange.for_month(year, month), teams)

    def current_month_schedule(
        self, now: date | datetime, teams: Optional[Iterable[TeamLike]] = None
    ) -> List[Shift]:
        """Schedule for the month containing ``now``."""
        today = parse_date(now, "now")
        return self.month_schedule(today.year, today.month, teams)

    def year_schedule(
        self, year: int, teams: Optional[Iterable[TeamLike]] = None
    ) -> List[Shift]:
        return self.generate(ScheduleRange.for_year(year), teams)

    def _resolve_teams(self, teams: Optional[Iterable[TeamLike]]) -> List[str]:
        """Normalize, de-duplicate and sort the requested teams."""
        if teams is None:
            return list(self.model.teams)
        if isinstance(teams, (str, int)):
            teams = [teams]
        team_ids = sorted(
            {self.mapper.normalize_team(team) for team in teams}, key=team_sort_key
        )
        if not team_ids:
            raise InvalidTeamError("At least one team must be requested")
        return team_ids
