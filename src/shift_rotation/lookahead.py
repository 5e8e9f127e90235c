"""
Time-relative queries: next shift, countdown and who is on duty.

Every operation takes ``now`` explicitly. Naive datetimes are read as wall-clock
time in the rotation's timezone; aware datetimes are converted into it first.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from zoneinfo import ZoneInfo

from .mapper import DateCycleMapper, TeamLike
from .models import Countdown, Shift, TeamStatus

logger = logging.getLogger(__name__)


class NextShiftResolver:
    """Looks ahead from a given instant using the DateCycleMapper."""

    def __init__(self, mapper: DateCycleMapper):
        self.mapper = mapper
        self.model = mapper.model
        self.tz = ZoneInfo(self.model.timezone)

    @property
    def search_days(self) -> int:
        # Every team works at least once per cycle with the shipped rotation
        return self.model.cycle_length

    def local_now(self, now: datetime) -> datetime:
        """Naive wall-clock time in the rotation timezone."""
        if now.tzinfo is not None:
            return now.astimezone(self.tz).replace(tzinfo=None)
        return now

    def next_shift(self, team: TeamLike, now: datetime) -> Optional[Shift]:
        """
        Find the next working shift for a team.

        Today's shift counts if it has not started yet. Otherwise the following
        days are scanned, at most one full cycle ahead.

        Returns:
            The next working Shift, or None if none exists within the bound
        """
        team = self.mapper.normalize_team(team)
        local = self.local_now(now)
        today = self.mapper.resolve(local.date(), team)

        if today.is_working and today.start_time > local.time():
            return today

        for offset in range(1, self.search_days + 1):
            shift = self.mapper.resolve(local.date() + timedelta(days=offset), team)
            if shift.is_working:
                return shift

        logger.warning(
            "No working shift for team %s within %d days of %s",
            team,
            self.search_days,
            local,
        )
        return None

    def countdown(self, shift: Optional[Shift], now: datetime) -> Optional[Countdown]:
        """
        Time remaining until a shift starts.

        Returns:
            Countdown, or None for a day off or a start that is not in the future
        """
        if shift is None or not shift.is_working:
            return None

        if now.tzinfo is not None:
            # Elapsed time across a DST switch, not wall-clock difference
            start = shift.start_datetime.replace(tzinfo=self.tz).astimezone(timezone.utc)
            remaining = start - now.astimezone(timezone.utc)
        else:
            remaining = shift.start_datetime - now
        if remaining <= timedelta(0):
            return None

        total_minutes = int(remaining.total_seconds() // 60)
        days, rest = divmod(total_minutes, 24 * 60)
        hours, minutes = divmod(rest, 60)

        return Countdown(
            days=days,
            hours=hours,
            minutes=minutes,
            total_hours=total_minutes // 60,
        )

    def on_duty(self, now: datetime) -> Optional[Shift]:
        """The working shift in progress at ``now``, if any."""
        local = self.local_now(now)
        for team in self.model.teams:
            shift = self._active_shift(team, local)
            if shift is not None:
                return shift
        return None

    def current_status(self, now: datetime) -> List[TeamStatus]:
        """Today's shift for every team and whether each one is on duty."""
        local = self.local_now(now)
        return [
            TeamStatus(
                team=team,
                shift=self.mapper.resolve(local.date(), team),
                is_on_duty=self._active_shift(team, local) is not None,
            )
            for team in self.model.teams
        ]

    def _active_shift(self, team: str, local: datetime) -> Optional[Shift]:
        # A night shift from yesterday may still be running
        for day in (local.date(), local.date() - timedelta(days=1)):
            shift = self.mapper.resolve(day, team)
            if shift.is_working and shift.start_datetime <= local < shift.end_datetime:
                return shift
        return None
