"""Tests for console reporting."""

from datetime import date

from shift_rotation.engine import ShiftEngine
from shift_rotation.reporter import ScheduleReporter, print_team_statistics


class TestScheduleReporter:
    """Tests for the roster report."""

    def test_roster_frame(self, engine: ShiftEngine):
        shifts = engine.schedule("2023-01-01", "2023-01-07")
        grid = ScheduleReporter(shifts).roster_frame()

        assert grid.shape == (7, 5)
        assert list(grid.columns) == ["31", "32", "33", "34", "35"]
        assert list(grid.loc[("2023-01-01", "söndag")]) == ["F", "L", "E", "L", "N"]

    def test_roster_frame_empty(self):
        assert ScheduleReporter([]).roster_frame().empty

    def test_team_frame(self, engine: ShiftEngine):
        shifts = engine.month_schedule(2023, 1)
        reporter = ScheduleReporter(shifts, statistics=engine.statistics.schedule_summary(shifts))
        df = reporter.team_frame()

        assert list(df.index) == ["31", "32", "33", "34", "35"]
        assert df.loc["31", "Working"] == 21
        assert df.loc["31", "Hours"] == 168
        assert df.loc["31", "F"] == 7

    def test_print_report(self, engine: ShiftEngine, capsys):
        shifts = engine.schedule("2023-01-01", "2023-01-03")
        reporter = ScheduleReporter(
            shifts,
            validation=engine.validate(shifts),
            statistics=engine.statistics.schedule_summary(shifts),
        )
        reporter.print_report(quiet=False)
        out = capsys.readouterr().out

        assert "Period: 2023-01-01 to 2023-01-03" in out
        assert "Shift records: 15" in out
        assert "Days checked: 3" in out
        assert "Total: 9 working shifts, 6 free days" in out

    def test_print_report_lists_violations(self, engine: ShiftEngine, capsys):
        shifts = [s for s in engine.day_shifts(date(2023, 1, 1)) if s.team != "31"]
        ScheduleReporter(shifts, validation=engine.validate(shifts)).print_report(quiet=False)
        out = capsys.readouterr().out

        assert "✗ 2 violations" in out
        assert "2023-01-01: missing F shift" in out

    def test_empty_report(self, capsys):
        ScheduleReporter([]).print_report(quiet=True)
        out = capsys.readouterr().out

        assert "No shifts in the requested period" in out
        assert "Nothing to show" in out


def test_print_team_statistics(engine: ShiftEngine, capsys):
    print_team_statistics(engine.team_statistics("35", 2023, 1))
    out = capsys.readouterr().out

    assert "Team 35 - 2023-01" in out
    assert "Distribution: F: " in out
    assert "söndag" in out
