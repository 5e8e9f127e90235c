"""
Cycle configuration: the immutable CycleModel and its YAML loader.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, time
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

import yaml

from .errors import (
    ConfigurationError,
    CycleIntegrityError,
    InvalidDateFormatError,
    InvalidTeamError,
)
from .models import PatternBand, ShiftTimeSpec

logger = logging.getLogger(__name__)


DEFAULT_MASTER_CYCLE: Tuple[str, ...] = (
    # 3F -> 2E -> 2N -> 5L
    "F", "F", "F", "E", "E", "N", "N", "L", "L", "L", "L", "L",
    # 2F -> 3E -> 2N -> 5L
    "F", "F", "E", "E", "E", "N", "N", "L", "L", "L", "L", "L",
    # 2F -> 2E -> 3N -> 4L
    "F", "F", "E", "E", "N", "N", "N", "L", "L", "L", "L",
)  # fmt: skip

DEFAULT_TEAM_OFFSETS: Dict[str, int] = {
    "31": 0,
    "32": 7,
    "33": 14,
    "34": 21,
    "35": 28,
}

DEFAULT_SHIFT_TIMES: Dict[str, ShiftTimeSpec] = {
    "F": ShiftTimeSpec("F", "Förmiddag", time(6, 0), time(14, 0)),
    "E": ShiftTimeSpec("E", "Eftermiddag", time(14, 0), time(22, 0)),
    "N": ShiftTimeSpec("N", "Natt", time(22, 0), time(6, 0)),
    "L": ShiftTimeSpec("L", "Ledig"),
}

DEFAULT_PATTERN_BANDS: Tuple[PatternBand, ...] = (
    PatternBand(1, 12, "3F→2E→2N→5L"),
    PatternBand(13, 24, "2F→3E→2N→5L"),
    PatternBand(25, 35, "2F→2E→3N→4L"),
)

# Monday first, matching date.weekday()
SWEDISH_WEEKDAYS: Tuple[str, ...] = (
    "måndag",
    "tisdag",
    "onsdag",
    "torsdag",
    "fredag",
    "lördag",
    "söndag",
)

SWEDISH_MONTHS: Tuple[str, ...] = (
    "januari",
    "februari",
    "mars",
    "april",
    "maj",
    "juni",
    "juli",
    "augusti",
    "september",
    "oktober",
    "november",
    "december",
)

DEFAULT_EPOCH = date(2023, 1, 1)
CYCLE_LENGTH = 35


def team_sort_key(team: str) -> Tuple[int, int, str]:
    """Sort numeric team identifiers numerically, anything else after them."""
    if team.isdigit():
        return (0, int(team), team)
    return (1, 0, team)


@dataclass(frozen=True)
class CycleModel:
    """Static rotation configuration shared by every engine component.

    Built once at process start and never mutated. Structural consistency
    is checked on construction; the emergent daily coverage invariant is
    checked by ``ShiftEngine`` once the components are wired up.
    """

    master_cycle: Tuple[str, ...] = DEFAULT_MASTER_CYCLE
    team_offsets: Mapping[str, int] = field(
        default_factory=lambda: dict(DEFAULT_TEAM_OFFSETS), hash=False
    )
    shift_times: Mapping[str, ShiftTimeSpec] = field(
        default_factory=lambda: dict(DEFAULT_SHIFT_TIMES), hash=False
    )
    pattern_bands: Tuple[PatternBand, ...] = DEFAULT_PATTERN_BANDS
    epoch: date = DEFAULT_EPOCH
    cycle_length: int = CYCLE_LENGTH
    off_code: str = "L"
    hours_per_shift: int = 8
    timezone: str = "Europe/Stockholm"
    company_id: str = "ssab"
    company_name: str = "SSAB Oxelösund"
    weekday_names: Tuple[str, ...] = SWEDISH_WEEKDAYS
    month_names: Tuple[str, ...] = SWEDISH_MONTHS

    def __post_init__(self):
        object.__setattr__(self, "master_cycle", tuple(self.master_cycle))
        object.__setattr__(self, "pattern_bands", tuple(self.pattern_bands))
        object.__setattr__(
            self, "team_offsets", MappingProxyType(dict(self.team_offsets))
        )
        object.__setattr__(
            self, "shift_times", MappingProxyType(dict(self.shift_times))
        )
        self._check_integrity()

    @property
    def teams(self) -> Tuple[str, ...]:
        """Team identifiers in ascending order."""
        return tuple(sorted(self.team_offsets, key=team_sort_key))

    @property
    def working_codes(self) -> Tuple[str, ...]:
        """Shift codes that represent a working shift, in configuration order."""
        return tuple(code for code in self.shift_times if code != self.off_code)

    def normalize_team(self, team: str | int) -> str:
        """
        Return the canonical string identifier for a team.

        Raises:
            InvalidTeamError: If the team is not part of the rotation
        """
        if isinstance(team, bool) or not isinstance(team, (str, int)):
            raise InvalidTeamError(f"Invalid team identifier: {team!r}")
        key = str(team).strip()
        if key not in self.team_offsets:
            raise InvalidTeamError(
                f"Unknown team '{key}'. Valid teams: {', '.join(self.teams)}"
            )
        return key

    def is_working(self, code: str) -> bool:
        return code != self.off_code

    def band_for(self, cycle_day: int) -> PatternBand:
        """Return the pattern band containing a 1-based cycle day."""
        for band in self.pattern_bands:
            if band.contains(cycle_day):
                return band
        raise CycleIntegrityError(f"Cycle day {cycle_day} is not covered by any band")

    def _check_integrity(self) -> None:
        """
        Validate that the static tables agree with each other.

        Raises:
            CycleIntegrityError: If any table is malformed
        """
        if len(self.master_cycle) != self.cycle_length:
            raise CycleIntegrityError(
                f"Master cycle must have {self.cycle_length} entries, "
                f"got {len(self.master_cycle)}"
            )

        if self.off_code not in self.shift_times:
            raise CycleIntegrityError(
                f"Day-off code '{self.off_code}' has no shift time entry"
            )

        unknown = sorted(set(self.master_cycle) - set(self.shift_times))
        if unknown:
            raise CycleIntegrityError(
                f"Master cycle uses undefined shift codes: {', '.join(unknown)}"
            )

        for code, spec in self.shift_times.items():
            if code == self.off_code and spec.is_timed:
                raise CycleIntegrityError(
                    f"Day-off code '{code}' must not carry start/end times"
                )
            if code != self.off_code and not spec.is_timed:
                raise CycleIntegrityError(
                    f"Working code '{code}' needs both a start and an end time"
                )

        if not self.team_offsets:
            raise CycleIntegrityError("At least one team offset must be defined")

        offsets = list(self.team_offsets.values())
        for team, offset in self.team_offsets.items():
            if not isinstance(offset, int) or isinstance(offset, bool):
                raise CycleIntegrityError(
                    f"Offset for team '{team}' must be an integer, got {offset!r}"
                )
            if not 0 <= offset < self.cycle_length:
                raise CycleIntegrityError(
                    f"Offset for team '{team}' must be between 0 and "
                    f"{self.cycle_length - 1}, got {offset}"
                )
        if len(set(offsets)) != len(offsets):
            raise CycleIntegrityError(f"Team offsets must be distinct, got {offsets}")

        expected_day = 1
        for band in self.pattern_bands:
            if band.first_day != expected_day or band.last_day < band.first_day:
                raise CycleIntegrityError(
                    f"Pattern band '{band.label}' must start at cycle day {expected_day}"
                )
            expected_day = band.last_day + 1
        if expected_day != self.cycle_length + 1:
            raise CycleIntegrityError(
                f"Pattern bands must cover cycle days 1-{self.cycle_length}"
            )

        if len(self.weekday_names) != 7 or len(self.month_names) != 12:
            raise CycleIntegrityError("Locale tables need 7 weekdays and 12 months")


def default_cycle_model() -> CycleModel:
    """Build the built-in five-team, 35-day rotation."""
    return CycleModel()


class ConfigLoader:
    """Loads a CycleModel override from a YAML file.

    Every key is optional; anything missing falls back to the built-in
    rotation. Example::

        epoch: 2023-01-01
        master_cycle: FFFEENNLLLLL FFEEENNLLLLL FFEENNNLLLL
        teams:
          "31": 0
          "32": 7
        shift_times:
          F: {name: Förmiddag, start: "06:00", end: "14:00"}
        pattern_bands:
          - {first_day: 1, last_day: 12, label: 3F→2E→2N→5L}
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the ConfigLoader with a configuration file path.

        Args:
            config_path: Path to the YAML configuration file

        Raises:
            FileNotFoundError: If config file doesn't exist
        """
        self.config_path = Path(config_path)

        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        self._raw_config: Dict[str, Any] | None = None
        self._config: CycleModel | None = None

    def load(self) -> CycleModel:
        """
        Load and parse the configuration file.

        Returns:
            CycleModel built from the file

        Raises:
            InvalidDateFormatError: If the epoch is not in ISO 8601 format
            ConfigurationError: If configuration is invalid
        """
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                self._raw_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read configuration file {self.config_path}: {e}"
            ) from e

        if not isinstance(self._raw_config, dict):
            raise ConfigurationError(
                f"Top level of {self.config_path} must be a mapping"
            )

        self._config = self._parse_config()
        logger.info(
            "Loaded cycle model from %s (%d teams, %d-day cycle)",
            self.config_path,
            len(self._config.team_offsets),
            self._config.cycle_length,
        )
        return self._config

    def reload(self) -> CycleModel:
        """Reload the configuration from the file."""
        return self.load()

    @property
    def config(self) -> CycleModel:
        """
        Get the loaded configuration.

        Raises:
            RuntimeError: If load() hasn't been called yet
        """
        if self._config is None:
            raise RuntimeError("Configuration not loaded. Call load() first.")
        return self._config

    @property
    def raw_config(self) -> Dict[str, Any]:
        """
        Get the raw configuration dictionary.

        Raises:
            RuntimeError: If load() hasn't been called yet
        """
        if self._raw_config is None:
            raise RuntimeError("Configuration not loaded. Call load() first.")
        return self._raw_config

    def _parse_config(self) -> CycleModel:
        """Parse raw YAML data into a CycleModel."""
        raw = self._raw_config
        kwargs: Dict[str, Any] = {}

        if "epoch" in raw:
            epoch = raw["epoch"]
            if not isinstance(epoch, date):
                raise InvalidDateFormatError(
                    f"epoch must be in ISO 8601 format (YYYY-MM-DD), got: {epoch}. "
                    f"Example: 2023-01-01"
                )
            kwargs["epoch"] = epoch

        if "master_cycle" in raw:
            kwargs["master_cycle"] = self._parse_master_cycle(raw["master_cycle"])
            kwargs["cycle_length"] = raw.get("cycle_length", CYCLE_LENGTH)

        if "teams" in raw:
            kwargs["team_offsets"] = self._parse_teams(raw["teams"])

        if "shift_times" in raw:
            kwargs["shift_times"] = self._parse_shift_times(raw["shift_times"])

        if "pattern_bands" in raw:
            kwargs["pattern_bands"] = self._parse_pattern_bands(raw["pattern_bands"])

        for key in ("off_code", "hours_per_shift", "timezone", "company_id", "company_name"):
            if key in raw:
                kwargs[key] = raw[key]

        return CycleModel(**kwargs)

    def _parse_master_cycle(self, cycle_raw: Any) -> Tuple[str, ...]:
        """Accept either a list of codes or a string of codes (whitespace ignored)."""
        if isinstance(cycle_raw, str):
            return tuple(ch for ch in cycle_raw if not ch.isspace())
        if isinstance(cycle_raw, list):
            return tuple(str(code) for code in cycle_raw)
        raise ConfigurationError(
            f"master_cycle must be a string or a list of codes, got {type(cycle_raw).__name__}"
        )

    def _parse_teams(self, teams_raw: Any) -> Dict[str, int]:
        if not isinstance(teams_raw, dict):
            raise ConfigurationError("teams must map team identifiers to day offsets")
        return {str(team): offset for team, offset in teams_raw.items()}

    def _parse_shift_times(self, times_raw: Any) -> Dict[str, ShiftTimeSpec]:
        if not isinstance(times_raw, dict):
            raise ConfigurationError("shift_times must map shift codes to time ranges")

        shift_times = {}
        for code, spec_raw in times_raw.items():
            spec_raw = spec_raw or {}
            if not isinstance(spec_raw, dict):
                raise ConfigurationError(
                    f"Shift '{code}' must be a mapping with name, start and end, "
                    f"got {spec_raw!r}"
                )
            shift_times[str(code)] = ShiftTimeSpec(
                code=str(code),
                name=spec_raw.get("name", str(code)),
                start=self._parse_clock(spec_raw.get("start"), code),
                end=self._parse_clock(spec_raw.get("end"), code),
            )
        return shift_times

    def _parse_clock(self, value: Any, code: str) -> time | None:
        """Parse an HH:MM clock time; YAML may also hand us minutes past midnight."""
        if value is None or value == "":
            return None
        if isinstance(value, int):
            # unquoted 06:00 is read by YAML 1.1 as a sexagesimal integer
            return time(value // 60, value % 60)
        try:
            return time.fromisoformat(str(value))
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid clock time '{value}' for shift '{code}', expected HH:MM"
            ) from e

    def _parse_pattern_bands(self, bands_raw: Any) -> Tuple[PatternBand, ...]:
        if not isinstance(bands_raw, list):
            raise ConfigurationError("pattern_bands must be a list")
        try:
            return tuple(
                PatternBand(
                    first_day=int(band["first_day"]),
                    last_day=int(band["last_day"]),
                    label=str(band["label"]),
                )
                for band in bands_raw
            )
        except (KeyError, TypeError) as e:
            raise ConfigurationError(
                f"Each pattern band needs first_day, last_day and label: {e}"
            ) from e

    def get_summary(self) -> str:
        """
        Get a summary of the loaded configuration.

        Raises:
            RuntimeError: If load() hasn't been called yet
        """
        config = self.config

        lines = [
            f"Configuration from: {self.config_path}",
            f"Company: {config.company_name}",
            f"Epoch: {config.epoch}",
            f"Cycle length: {config.cycle_length} days",
            f"Teams: {len(config.team_offsets)}",
        ]

        for team in config.teams:
            lines.append(f"  - {team}: offset {config.team_offsets[team]} days")

        return "\n".join(lines)
