"""
Data models for the shift rotation engine.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Dict, Iterator, List, Optional

from .errors import InvalidDateRangeError


@dataclass(frozen=True)
class ShiftTimeSpec:
    """Clock times and display name for one shift code."""

    code: str
    name: str
    start: Optional[time] = None
    end: Optional[time] = None

    @property
    def is_timed(self) -> bool:
        return self.start is not None and self.end is not None

    @property
    def crosses_midnight(self) -> bool:
        """True when the shift ends on the calendar day after it starts."""
        return self.is_timed and self.end <= self.start


@dataclass(frozen=True)
class PatternBand:
    """A named stretch of the master cycle (1-based, inclusive days)."""

    first_day: int
    last_day: int
    label: str

    def contains(self, cycle_day: int) -> bool:
        return self.first_day <= cycle_day <= self.last_day


@dataclass(frozen=True)
class Shift:
    """The resolved shift of one team on one calendar date."""

    team: str
    date: date
    code: str
    start_time: Optional[time]
    end_time: Optional[time]
    cycle_day: int  # 1-based position in the master cycle
    pattern_label: str
    shift_name: str
    weekday: str
    localized_date: str

    @property
    def is_working(self) -> bool:
        return self.start_time is not None

    @property
    def crosses_midnight(self) -> bool:
        return self.is_working and self.end_time <= self.start_time

    @property
    def start_datetime(self) -> Optional[datetime]:
        """Naive wall-clock start of the shift, or None for a day off."""
        if not self.is_working:
            return None
        return datetime.combine(self.date, self.start_time)

    @property
    def end_datetime(self) -> Optional[datetime]:
        """Naive wall-clock end; night shifts end on the following day."""
        if not self.is_working:
            return None
        end_date = self.date + timedelta(days=1) if self.crosses_midnight else self.date
        return datetime.combine(end_date, self.end_time)

    @property
    def hours(self) -> float:
        if not self.is_working:
            return 0.0
        return (self.end_datetime - self.start_datetime).total_seconds() / 3600

    def to_dict(self) -> Dict[str, object]:
        """JSON-ready representation with ISO date and HH:MM times."""
        return {
            "team": self.team,
            "date": self.date.isoformat(),
            "type": self.code,
            "start_time": _format_clock(self.start_time),
            "end_time": _format_clock(self.end_time),
            "shift_name": self.shift_name,
            "cycle_day": self.cycle_day,
            "pattern_name": self.pattern_label,
            "day_of_week": self.weekday,
            "localized_date": self.localized_date,
        }


def _format_clock(value: Optional[time]) -> str:
    return value.strftime("%H:%M") if value is not None else ""


@dataclass(frozen=True)
class ScheduleRange:
    """Inclusive range of calendar dates to generate."""

    start: date
    end: date

    def __post_init__(self):
        if self.end < self.start:
            raise InvalidDateRangeError(
                f"End date {self.end} cannot be before start date {self.start}"
            )

    @classmethod
    def for_month(cls, year: int, month: int) -> "ScheduleRange":
        """Range covering one calendar month (month is 1-based)."""
        if not 1 <= month <= 12:
            raise InvalidDateRangeError(f"Month must be between 1 and 12, got {month}")
        last_day = calendar.monthrange(year, month)[1]
        return cls(start=date(year, month, 1), end=date(year, month, last_day))

    @classmethod
    def for_year(cls, year: int) -> "ScheduleRange":
        return cls(start=date(year, 1, 1), end=date(year, 12, 31))

    @property
    def days(self) -> int:
        """Number of days in the range (inclusive)."""
        return (self.end - self.start).days + 1

    def dates(self) -> Iterator[date]:
        """Iterate every date from start to end."""
        for k in range(self.days):
            yield self.start + timedelta(days=k)

    def contains(self, check_date: date) -> bool:
        return self.start <= check_date <= self.end


@dataclass
class DayCoverage:
    """Which teams work on a date and with which codes."""

    date: date
    teams: List[str]
    codes: List[str]
    valid: bool


@dataclass
class ValidationResult:
    """Outcome of a coverage check over a list of shifts."""

    is_valid: bool
    errors: List[str]
    days_checked: int
    coverage: List[DayCoverage] = field(default_factory=list)

    @property
    def invalid_days(self) -> List[date]:
        return [day.date for day in self.coverage if not day.valid]


@dataclass
class UpcomingShift:
    """Preview entry in a team's statistics."""

    date: date
    code: str
    start_time: Optional[time]
    end_time: Optional[time]
    weekday: str

    def to_dict(self) -> Dict[str, object]:
        return {
            "date": self.date.isoformat(),
            "type": self.code,
            "start_time": _format_clock(self.start_time),
            "end_time": _format_clock(self.end_time),
            "day_of_week": self.weekday,
        }


@dataclass
class TeamStatistics:
    """Summary of one team's schedule over a period."""

    team: str
    period: str  # YYYY-MM
    total_days: int
    working_days: int
    free_days: int
    work_hours: int
    shift_distribution: Dict[str, int]
    upcoming_shifts: List[UpcomingShift] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "team": self.team,
            "period": self.period,
            "total_days": self.total_days,
            "work_days": self.working_days,
            "free_days": self.free_days,
            "work_hours": self.work_hours,
            "shift_distribution": dict(self.shift_distribution),
            "upcoming_shifts": [s.to_dict() for s in self.upcoming_shifts],
        }


@dataclass
class TeamBreakdown:
    """Per-team counts inside a multi-team summary."""

    team: str
    total_days: int
    working_days: int
    free_days: int
    work_hours: int
    shift_distribution: Dict[str, int]
    pattern_distribution: Dict[str, int]

    def to_dict(self) -> Dict[str, object]:
        return {
            "total_days": self.total_days,
            "work_days": self.working_days,
            "free_days": self.free_days,
            "work_hours": self.work_hours,
            "shift_distribution": dict(self.shift_distribution),
            "patterns": dict(self.pattern_distribution),
        }


@dataclass
class ScheduleStatistics:
    """Summary of a multi-team schedule."""

    total_shifts: int
    working_shifts: int
    free_days: int
    shift_distribution: Dict[str, int]
    teams: Dict[str, TeamBreakdown]

    def to_dict(self) -> Dict[str, object]:
        return {
            "total_shifts": self.total_shifts,
            "work_shifts": self.working_shifts,
            "free_days": self.free_days,
            "shift_distribution": dict(self.shift_distribution),
            "teams": {team: b.to_dict() for team, b in self.teams.items()},
        }


@dataclass(frozen=True)
class Countdown:
    """Time remaining until a shift starts."""

    days: int
    hours: int
    minutes: int
    total_hours: int

    @property
    def formatted(self) -> str:
        return f"{self.days}d {self.hours}h {self.minutes}m"

    def to_dict(self) -> Dict[str, object]:
        return {
            "days": self.days,
            "hours": self.hours,
            "minutes": self.minutes,
            "total_hours": self.total_hours,
            "formatted": self.formatted,
        }


@dataclass(frozen=True)
class TeamStatus:
    """A team's shift today and whether it is on duty right now."""

    team: str
    shift: Shift
    is_on_duty: bool

    @property
    def is_working_today(self) -> bool:
        return self.shift.is_working
