"""
Shift Rotation - deterministic five-team, three-shift rotation schedules.
"""

__version__ = "0.1.0"

from .config import ConfigLoader, CycleModel, default_cycle_model
from .engine import ShiftEngine
from .errors import (
    ConfigurationError,
    CycleIntegrityError,
    InvalidDateFormatError,
    InvalidDateRangeError,
    InvalidRequestError,
    InvalidTeamError,
    ScheduleCancelledError,
    ShiftRotationError,
)
from .exporters import MatrixCSVExporter, TeamCSVExporter, to_delimited_text
from .generator import ScheduleGenerator
from .lookahead import NextShiftResolver
from .mapper import DateCycleMapper
from .models import (
    Countdown,
    DayCoverage,
    PatternBand,
    ScheduleRange,
    ScheduleStatistics,
    Shift,
    ShiftTimeSpec,
    TeamBreakdown,
    TeamStatistics,
    TeamStatus,
    UpcomingShift,
    ValidationResult,
)
from .reporter import ScheduleReporter
from .service import ScheduleService, ServiceResponse
from .statistics import StatisticsAggregator
from .validator import CoverageValidator

__all__ = [
    "ConfigLoader",
    "CycleModel",
    "default_cycle_model",
    "ShiftEngine",
    "ShiftRotationError",
    "ConfigurationError",
    "CycleIntegrityError",
    "InvalidDateFormatError",
    "InvalidDateRangeError",
    "InvalidRequestError",
    "InvalidTeamError",
    "ScheduleCancelledError",
    "DateCycleMapper",
    "ScheduleGenerator",
    "CoverageValidator",
    "StatisticsAggregator",
    "NextShiftResolver",
    "TeamCSVExporter",
    "MatrixCSVExporter",
    "to_delimited_text",
    "ScheduleReporter",
    "ScheduleService",
    "ServiceResponse",
    "Shift",
    "ShiftTimeSpec",
    "PatternBand",
    "ScheduleRange",
    "ValidationResult",
    "DayCoverage",
    "TeamStatistics",
    "TeamBreakdown",
    "ScheduleStatistics",
    "UpcomingShift",
    "Countdown",
    "TeamStatus",
]
