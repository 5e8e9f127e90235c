"""Tests for date-to-cycle resolution."""

from datetime import date, datetime, timedelta

import pytest

from shift_rotation.errors import InvalidDateRangeError, InvalidTeamError
from shift_rotation.mapper import DateCycleMapper, parse_date

ANCHOR = date(2023, 1, 1)
TEAMS = ["31", "32", "33", "34", "35"]


class TestAnchorDay:
    """The epoch date puts each team at its own offset."""

    @pytest.mark.parametrize(
        "team,code,cycle_day,label",
        [
            ("31", "F", 1, "3F→2E→2N→5L"),
            ("32", "L", 8, "3F→2E→2N→5L"),
            ("33", "E", 15, "2F→3E→2N→5L"),
            ("34", "L", 22, "2F→3E→2N→5L"),
            ("35", "N", 29, "2F→2E→3N→4L"),
        ],
    )
    def test_anchor_resolution(
        self, mapper: DateCycleMapper, team: str, code: str, cycle_day: int, label: str
    ):
        shift = mapper.resolve(ANCHOR, team)

        assert shift.team == team
        assert shift.date == ANCHOR
        assert shift.code == code
        assert shift.cycle_day == cycle_day
        assert shift.pattern_label == label
        assert shift.weekday == "söndag"
        assert shift.localized_date == "1 januari 2023"

    def test_first_week_of_team_31(self, mapper: DateCycleMapper):
        codes = "".join(
            mapper.resolve(ANCHOR + timedelta(days=k), "31").code for k in range(12)
        )
        assert codes == "FFFEENNLLLLL"


class TestCycleArithmetic:
    """Periodicity and team offsets."""

    @pytest.mark.parametrize("team", TEAMS)
    def test_repeats_every_35_days(self, mapper: DateCycleMapper, team: str):
        for k in range(35):
            day = ANCHOR + timedelta(days=k)
            first = mapper.resolve(day, team)
            later = mapper.resolve(day + timedelta(days=35), team)
            assert later.code == first.code
            assert later.cycle_day == first.cycle_day

    @pytest.mark.parametrize(
        "previous,team", [("31", "32"), ("32", "33"), ("33", "34"), ("34", "35")]
    )
    def test_team_is_seven_days_ahead_of_previous(
        self, mapper: DateCycleMapper, previous: str, team: str
    ):
        """Each team works today what the previous team works a week later."""
        for k in range(35):
            day = ANCHOR + timedelta(days=k)
            ahead = mapper.resolve(day + timedelta(days=7), previous)
            assert mapper.resolve(day, team).code == ahead.code
            assert mapper.resolve(day, team).cycle_day == ahead.cycle_day

    def test_day_before_epoch(self, mapper: DateCycleMapper):
        """Dates before the epoch wrap to the end of the cycle."""
        shift = mapper.resolve(date(2022, 12, 31), "31")

        assert mapper.cycle_position(date(2022, 12, 31), "31") == 34
        assert shift.code == "L"
        assert shift.cycle_day == 35
        assert shift.pattern_label == "2F→2E→3N→4L"

    def test_distant_past_and_future(self, mapper: DateCycleMapper):
        for day in (date(1990, 6, 15), date(2100, 12, 31)):
            for team in TEAMS:
                assert 1 <= mapper.resolve(day, team).cycle_day <= 35

    def test_leap_day(self, mapper: DateCycleMapper):
        shift = mapper.resolve(date(2024, 2, 29), "31")

        assert shift.code == "E"
        assert shift.cycle_day == 5
        assert shift.weekday == "torsdag"
        assert shift.localized_date == "29 februari 2024"


class TestInputForms:
    """Teams and dates may arrive in several forms."""

    def test_integer_team(self, mapper: DateCycleMapper):
        assert mapper.resolve(ANCHOR, 31) == mapper.resolve(ANCHOR, "31")

    def test_team_whitespace_stripped(self, mapper: DateCycleMapper):
        assert mapper.normalize_team(" 33 ") == "33"

    def test_iso_string_date(self, mapper: DateCycleMapper):
        assert mapper.resolve("2023-01-01", "31") == mapper.resolve(ANCHOR, "31")

    def test_datetime_time_is_ignored(self, mapper: DateCycleMapper):
        late = datetime(2023, 1, 1, 23, 59)
        assert mapper.resolve(late, "31") == mapper.resolve(ANCHOR, "31")

    @pytest.mark.parametrize("team", ["36", "", "A", 30])
    def test_unknown_team(self, mapper: DateCycleMapper, team):
        with pytest.raises(InvalidTeamError, match="Valid teams: 31, 32, 33, 34, 35"):
            mapper.resolve(ANCHOR, team)

    @pytest.mark.parametrize("team", [True, None, 31.0])
    def test_non_identifier_team(self, mapper: DateCycleMapper, team):
        with pytest.raises(InvalidTeamError, match="Invalid team identifier"):
            mapper.normalize_team(team)

    def test_unknown_team_is_a_value_error(self, mapper: DateCycleMapper):
        with pytest.raises(ValueError):
            mapper.normalize_team("99")


class TestParseDate:
    def test_accepts_date(self):
        assert parse_date(ANCHOR) == ANCHOR

    def test_accepts_datetime(self):
        assert parse_date(datetime(2023, 1, 1, 12, 30)) == ANCHOR

    @pytest.mark.parametrize("value", ["2023-13-01", "01/01/2023", "soon"])
    def test_rejects_bad_string(self, value: str):
        with pytest.raises(InvalidDateRangeError, match="startDate must be in ISO 8601"):
            parse_date(value, "startDate")

    def test_rejects_other_types(self):
        with pytest.raises(InvalidDateRangeError, match="got int"):
            parse_date(20230101)
