"""
Maps a (date, team) pair onto the master cycle.
"""

from datetime import date, datetime
from typing import Union

from .config import CycleModel
from .errors import InvalidDateRangeError
from .models import Shift

DateLike = Union[date, datetime, str]
TeamLike = Union[str, int]


def parse_date(value: DateLike, field_name: str = "date") -> date:
    """
    Coerce a date, datetime or ISO 8601 string to a calendar date.

    Raises:
        InvalidDateRangeError: If the value cannot be read as a date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as e:
            raise InvalidDateRangeError(
                f"{field_name} must be in ISO 8601 format (YYYY-MM-DD), got: {value!r}"
            ) from e
    raise InvalidDateRangeError(
        f"{field_name} must be a date or an ISO 8601 string, got {type(value).__name__}"
    )


class DateCycleMapper:
    """Resolves the shift a team works on a given calendar date."""

    def __init__(self, model: CycleModel):
        self.model = model

    def normalize_team(self, team: TeamLike) -> str:
        """
        Return the canonical string identifier for a team.

        Raises:
            InvalidTeamError: If the team is not part of the rotation
        """
        return self.model.normalize_team(team)

    def cycle_position(self, day: DateLike, team: TeamLike) -> int:
        """0-based index into the master cycle for a team on a date."""
        day = parse_date(day)
        team = self.normalize_team(team)
        days_since_epoch = (day - self.model.epoch).days
        # Python's % always lands in [0, cycle_length) for negative day counts
        return (days_since_epoch + self.model.team_offsets[team]) % self.model.cycle_length

    def resolve(self, day: DateLike, team: TeamLike) -> Shift:
        """
        Resolve the shift for one team on one date.

        Args:
            day: Calendar date (a datetime's time of day is ignored)
            team: Team identifier, e.g. "31"

        Returns:
            The Shift for that team and date

        Raises:
            InvalidTeamError: If the team is unknown
            InvalidDateRangeError: If the date cannot be parsed
        """
        day = parse_date(day)
        team = self.normalize_team(team)
        position = self.cycle_position(day, team)
        code = self.model.master_cycle[position]
        spec = self.model.shift_times[code]
        cycle_day = position + 1

        return Shift(
            team=team,
            date=day,
            code=code,
            start_time=spec.start,
            end_time=spec.end,
            cycle_day=cycle_day,
            pattern_label=self.model.band_for(cycle_day).label,
            shift_name=spec.name,
            weekday=self.model.weekday_names[day.weekday()],
            localized_date=self._localized_date(day),
        )

    def _localized_date(self, day: date) -> str:
        return f"{day.day} {self.model.month_names[day.month - 1]} {day.year}"
