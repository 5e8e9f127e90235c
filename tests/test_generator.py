"""Tests for schedule generation."""

import threading
from datetime import date, datetime, timezone

import pytest

from shift_rotation.engine import ShiftEngine
from shift_rotation.errors import (
    InvalidDateRangeError,
    InvalidTeamError,
    ScheduleCancelledError,
)
from shift_rotation.generator import ScheduleGenerator
from shift_rotation.models import ScheduleRange

ANCHOR = date(2023, 1, 1)
TEAMS = ["31", "32", "33", "34", "35"]


class CancelAfter:
    """Cancel token that becomes set on the n-th check."""

    def __init__(self, checks: int):
        self.checks = checks
        self.calls = 0

    def is_set(self) -> bool:
        self.calls += 1
        return self.calls >= self.checks


class TestGenerate:
    """Tests for multi-team generation."""

    def test_month_for_all_teams(self, generator: ScheduleGenerator):
        shifts = generator.month_schedule(2025, 3)

        assert len(shifts) == 155
        assert sum(1 for s in shifts if s.is_working) == 93
        assert sum(1 for s in shifts if not s.is_working) == 62

    def test_ordered_by_date_then_team(self, generator: ScheduleGenerator):
        shifts = generator.generate(ScheduleRange(ANCHOR, date(2023, 1, 3)))

        assert [(s.date.day, s.team) for s in shifts[:6]] == [
            (1, "31"), (1, "32"), (1, "33"), (1, "34"), (1, "35"), (2, "31"),
        ]  # fmt: skip
        assert shifts == sorted(shifts, key=lambda s: (s.date, int(s.team)))

    def test_anchor_row(self, generator: ScheduleGenerator):
        codes = "".join(s.code for s in generator.day_shifts(ANCHOR))
        assert codes == "FLELN"

    def test_teams_are_deduplicated_and_sorted(self, generator: ScheduleGenerator):
        shifts = generator.generate(
            ScheduleRange(ANCHOR, ANCHOR), teams=["33", 31, "31"]
        )
        assert [s.team for s in shifts] == ["31", "33"]

    def test_single_team_value(self, generator: ScheduleGenerator):
        shifts = generator.generate(ScheduleRange(ANCHOR, ANCHOR), teams=35)
        assert [s.team for s in shifts] == ["35"]

    def test_empty_team_list_rejected(self, generator: ScheduleGenerator):
        with pytest.raises(InvalidTeamError, match="At least one team"):
            generator.generate(ScheduleRange(ANCHOR, ANCHOR), teams=[])

    def test_unknown_team_rejected(self, generator: ScheduleGenerator):
        with pytest.raises(InvalidTeamError):
            generator.generate(ScheduleRange(ANCHOR, ANCHOR), teams=["31", "40"])

    def test_reversed_range_rejected(self, generator: ScheduleGenerator):
        with pytest.raises(InvalidDateRangeError):
            generator.generate_between("2023-02-01", "2023-01-01")

    def test_generation_is_repeatable(self, generator: ScheduleGenerator):
        first = generator.month_schedule(2030, 7)
        second = generator.month_schedule(2030, 7)
        assert first == second


class TestCancellation:
    def test_already_cancelled(self, generator: ScheduleGenerator):
        event = threading.Event()
        event.set()

        with pytest.raises(ScheduleCancelledError, match="cancelled at 2023-01-01"):
            generator.generate(ScheduleRange.for_month(2023, 1), cancel=event)

    def test_cancelled_mid_range(self, generator: ScheduleGenerator):
        with pytest.raises(ScheduleCancelledError, match="cancelled at 2023-01-03"):
            generator.generate(ScheduleRange.for_month(2023, 1), cancel=CancelAfter(3))

    def test_unset_token_completes(self, generator: ScheduleGenerator):
        shifts = generator.generate(
            ScheduleRange.for_month(2023, 1), cancel=threading.Event()
        )
        assert len(shifts) == 155


class TestConvenienceRanges:
    """Tests for the single-team, day, month and year helpers."""

    def test_team_schedule(self, generator: ScheduleGenerator):
        shifts = generator.team_schedule(31, "2023-01-01", "2023-01-07")

        assert len(shifts) == 7
        assert {s.team for s in shifts} == {"31"}
        assert "".join(s.code for s in shifts) == "FFFEENN"

    def test_team_schedule_unknown_team(self, generator: ScheduleGenerator):
        with pytest.raises(InvalidTeamError):
            generator.team_schedule("36", "2023-01-01", "2023-01-07")

    def test_day_shifts(self, generator: ScheduleGenerator):
        shifts = generator.day_shifts("2023-01-01")
        assert [s.team for s in shifts] == TEAMS

    def test_leap_february(self, generator: ScheduleGenerator):
        assert len(generator.month_schedule(2024, 2)) == 145

    def test_bad_month(self, generator: ScheduleGenerator):
        with pytest.raises(InvalidDateRangeError):
            generator.month_schedule(2024, 13)

    def test_year_schedule(self, generator: ScheduleGenerator):
        shifts = generator.year_schedule(2023, ["31"])
        assert len(shifts) == 365
        assert shifts[-1].date == date(2023, 12, 31)

    def test_current_month(self, generator: ScheduleGenerator):
        shifts = generator.current_month_schedule(datetime(2025, 3, 14, 10, 0), ["31"])

        assert len(shifts) == 31
        assert shifts[0].date == date(2025, 3, 1)

    def test_engine_current_month_uses_local_time(self, engine: ShiftEngine):
        """23:30 UTC on 31 March is already April in Stockholm."""
        now = datetime(2025, 3, 31, 23, 30, tzinfo=timezone.utc)
        shifts = engine.current_month_schedule(now, ["31"])

        assert len(shifts) == 30
        assert shifts[0].date == date(2025, 4, 1)
