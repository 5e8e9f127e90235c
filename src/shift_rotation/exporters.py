"""
Export strategies for generated schedules.

Each exporter renders a list of shifts to delimited text and can write it
to a file.
"""

import csv
import io
import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, List, Sequence

from .config import team_sort_key
from .errors import InvalidTeamError
from .models import Shift

logger = logging.getLogger(__name__)


class ExportStrategy(ABC):
    """Abstract base class for schedule export strategies.

    Subclasses implement a specific layout; writing to disk and input
    checks are shared here.
    """

    def __init__(self, shifts: Sequence[Shift], delimiter: str = ","):
        """Initialize the export strategy.

        Args:
            shifts: The shifts to export
            delimiter: Field separator for the output

        Raises:
            TypeError: If any item is not a Shift
        """
        for item in shifts:
            if not isinstance(item, Shift):
                raise TypeError(f"Expected Shift records, got {type(item).__name__}")
        self.shifts = list(shifts)
        self.delimiter = delimiter

    @abstractmethod
    def rows(self) -> List[List[str]]:
        """Return all rows, header first."""
        pass

    def to_delimited_text(self) -> str:
        """Render the rows as delimited text (no trailing newline)."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, delimiter=self.delimiter, lineterminator="\n")
        writer.writerows(self.rows())
        return buffer.getvalue().rstrip("\n")

    def export(self, filepath: str) -> None:
        """Write the rendered text to a file.

        Args:
            filepath: Path to the output file
        """
        with open(filepath, "w", newline="", encoding="utf-8") as f:
            f.write(self.to_delimited_text())
            f.write("\n")
        logger.info("Exported %d shifts to %s", len(self.shifts), filepath)

    @staticmethod
    def _clock(shift: Shift, which: str) -> str:
        value = shift.start_time if which == "start" else shift.end_time
        return value.strftime("%H:%M") if value is not None else ""


class TeamCSVExporter(ExportStrategy):
    """Exports one team's schedule, one row per shift in input order.

    Output format: Date, Weekday, ShiftCode, StartTime, EndTime, PatternLabel
    """

    HEADER = ["Date", "Weekday", "ShiftCode", "StartTime", "EndTime", "PatternLabel"]

    def __init__(self, shifts: Sequence[Shift], delimiter: str = ","):
        super().__init__(shifts, delimiter)
        teams = {s.team for s in self.shifts}
        if len(teams) > 1:
            raise InvalidTeamError(
                f"Team export expects shifts for a single team, got "
                f"{', '.join(sorted(teams, key=team_sort_key))}"
            )

    def rows(self) -> List[List[str]]:
        rows = [list(self.HEADER)]
        for shift in self.shifts:
            rows.append(
                [
                    shift.date.isoformat(),
                    shift.weekday,
                    shift.code,
                    self._clock(shift, "start"),
                    self._clock(shift, "end"),
                    shift.pattern_label,
                ]
            )
        return rows


class MatrixCSVExporter(ExportStrategy):
    """Exports a roster grid: one row per date, one column per team.

    Each cell holds the team's shift code for that date; dates missing
    for a team are left blank.
    """

    def rows(self) -> List[List[str]]:
        teams = sorted({s.team for s in self.shifts}, key=team_sort_key)
        grid: Dict[date, Dict[str, str]] = {}
        weekdays: Dict[date, str] = {}

        for shift in self.shifts:
            grid.setdefault(shift.date, {})[shift.team] = shift.code
            weekdays[shift.date] = shift.weekday

        rows = [["Date", "Weekday"] + [f"Team {team}" for team in teams]]
        for day in sorted(grid):
            rows.append(
                [day.isoformat(), weekdays[day]]
                + [grid[day].get(team, "") for team in teams]
            )
        return rows


def to_delimited_text(shifts: Sequence[Shift], delimiter: str = ",") -> str:
    """Render one team's shifts in the team CSV layout."""
    return TeamCSVExporter(shifts, delimiter).to_delimited_text()
