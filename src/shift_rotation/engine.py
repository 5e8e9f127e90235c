"""
ShiftEngine: one CycleModel wired to every engine component.
"""

import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterable, List, Optional

from .config import ConfigLoader, CycleModel, default_cycle_model
from .errors import CycleIntegrityError
from .exporters import MatrixCSVExporter, TeamCSVExporter
from .generator import CancelToken, ScheduleGenerator
from .lookahead import NextShiftResolver
from .mapper import DateCycleMapper, DateLike, TeamLike
from .models import (
    Countdown,
    ScheduleRange,
    ScheduleStatistics,
    Shift,
    TeamStatistics,
    TeamStatus,
    ValidationResult,
)
from .statistics import StatisticsAggregator
from .validator import CoverageValidator

logger = logging.getLogger(__name__)


class ShiftEngine:
    """Entry point bundling mapper, generator, validator, statistics and lookahead.

    Construction runs a self-check over one full cycle: if the configured
    cycle and offsets do not staff every day with exactly one team per
    working shift type, a CycleIntegrityError is raised.
    """

    def __init__(self, model: Optional[CycleModel] = None, verify: bool = True):
        self.model = model if model is not None else default_cycle_model()
        self.mapper = DateCycleMapper(self.model)
        self.generator = ScheduleGenerator(self.mapper)
        self.validator = CoverageValidator(self.model)
        self.statistics = StatisticsAggregator(self.model)
        self.lookahead = NextShiftResolver(self.mapper)

        if verify:
            self.verify_cycle()

    @classmethod
    def from_yaml(cls, config_path: str | Path, verify: bool = True) -> "ShiftEngine":
        """Build an engine from a YAML cycle override."""
        return cls(ConfigLoader(config_path).load(), verify=verify)

    def verify_cycle(self) -> ValidationResult:
        """
        Validate daily coverage over one full cycle starting at the epoch.

        Raises:
            CycleIntegrityError: If any day in the cycle violates coverage
        """
        cycle = ScheduleRange(
            start=self.model.epoch,
            end=self.model.epoch + timedelta(days=self.model.cycle_length - 1),
        )
        result = self.validator.validate(self.generator.generate(cycle))
        if not result.is_valid:
            preview = "; ".join(result.errors[:5])
            raise CycleIntegrityError(
                f"Cycle configuration breaks daily coverage on "
                f"{len(result.invalid_days)} of {result.days_checked} days: {preview}"
            )
        logger.debug("Cycle self-check passed for %d days", result.days_checked)
        return result

    # Resolution and generation

    def resolve(self, day: DateLike, team: TeamLike) -> Shift:
        return self.mapper.resolve(day, team)

    def schedule(
        self,
        start: DateLike,
        end: DateLike,
        teams: Optional[Iterable[TeamLike]] = None,
        cancel: Optional[CancelToken] = None,
    ) -> List[Shift]:
        return self.generator.generate_between(start, end, teams, cancel)

    def team_schedule(self, team: TeamLike, start: DateLike, end: DateLike) -> List[Shift]:
        return self.generator.team_schedule(team, start, end)

    def day_shifts(self, day: DateLike) -> List[Shift]:
        return self.generator.day_shifts(day)

    def month_schedule(
        self, year: int, month: int, teams: Optional[Iterable[TeamLike]] = None
    ) -> List[Shift]:
        return self.generator.month_schedule(year, month, teams)

    def current_month_schedule(
        self, now: datetime, teams: Optional[Iterable[TeamLike]] = None
    ) -> List[Shift]:
        return self.generator.current_month_schedule(self.lookahead.local_now(now), teams)

    # Validation and statistics

    def validate(self, shifts: List[Shift]) -> ValidationResult:
        return self.validator.validate(shifts)

    def validate_month(self, year: int, month: int) -> ValidationResult:
        return self.validator.validate(self.month_schedule(year, month))

    def month_statistics(self, year: int, month: int) -> ScheduleStatistics:
        return self.statistics.schedule_summary(self.month_schedule(year, month))

    def team_statistics(self, team: TeamLike, year: int, month: int) -> TeamStatistics:
        team = self.mapper.normalize_team(team)
        return self.statistics.team_summary(self.month_schedule(year, month, [team]), team)

    # Lookahead

    def next_shift(self, team: TeamLike, now: datetime) -> Optional[Shift]:
        return self.lookahead.next_shift(team, now)

    def countdown(self, shift: Optional[Shift], now: datetime) -> Optional[Countdown]:
        return self.lookahead.countdown(shift, now)

    def on_duty(self, now: datetime) -> Optional[Shift]:
        return self.lookahead.on_duty(now)

    def current_status(self, now: datetime) -> List[TeamStatus]:
        return self.lookahead.current_status(now)

    # Export

    def export_team_csv(self, team: TeamLike, start: DateLike, end: DateLike) -> str:
        return TeamCSVExporter(self.team_schedule(team, start, end)).to_delimited_text()

    def export_roster_csv(self, start: DateLike, end: DateLike) -> str:
        return MatrixCSVExporter(self.schedule(start, end)).to_delimited_text()
