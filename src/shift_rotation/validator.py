"""
Daily coverage checks over generated schedules.
"""

from collections import Counter, defaultdict
from datetime import date
from typing import Dict, Iterable, List

from .config import CycleModel
from .models import DayCoverage, Shift, ValidationResult


class CoverageValidator:
    """Checks that every day is staffed by one team per working shift type.

    Violations are reported in the returned ValidationResult; nothing here
    raises, so callers decide whether a broken day is fatal.
    """

    def __init__(self, model: CycleModel):
        self.model = model

    @property
    def required_working_teams(self) -> int:
        return len(self.model.working_codes)

    def validate(self, shifts: Iterable[Shift]) -> ValidationResult:
        """
        Validate a flat list of shifts, typically one month for all teams.

        Returns:
            ValidationResult with one message per violated condition
        """
        by_date: Dict[date, List[Shift]] = defaultdict(list)
        for shift in shifts:
            by_date[shift.date].append(shift)

        errors: List[str] = []
        coverage: List[DayCoverage] = []

        for day in sorted(by_date):
            day_errors = self._check_day(day, by_date[day])
            working = [s for s in by_date[day] if self.model.is_working(s.code)]
            coverage.append(
                DayCoverage(
                    date=day,
                    teams=[s.team for s in working],
                    codes=[s.code for s in working],
                    valid=not day_errors,
                )
            )
            errors.extend(day_errors)

        return ValidationResult(
            is_valid=not errors,
            errors=errors,
            days_checked=len(by_date),
            coverage=coverage,
        )

    def _check_day(self, day: date, day_shifts: List[Shift]) -> List[str]:
        """Return the violation messages for a single date."""
        errors = []
        label = day.isoformat()
        working_codes = [s.code for s in day_shifts if self.model.is_working(s.code)]

        if len(working_codes) != self.required_working_teams:
            errors.append(
                f"{label}: {len(working_codes)} teams working instead of "
                f"{self.required_working_teams}"
            )

        counts = Counter(working_codes)
        for code in self.model.working_codes:
            if counts[code] == 0:
                errors.append(f"{label}: missing {code} shift")
            elif counts[code] > 1:
                errors.append(f"{label}: {counts[code]} teams working {code} shift")

        return errors
