"""
Error taxonomy for the shift rotation engine.
"""


class ShiftRotationError(Exception):
    """Base class for all shift rotation errors."""

    pass


class ConfigurationError(ShiftRotationError):
    """Custom exception for configuration errors."""

    pass


class InvalidDateFormatError(ConfigurationError):
    """Raised when a configured date is not in ISO 8601 format (YYYY-MM-DD)."""

    pass


class CycleIntegrityError(ConfigurationError):
    """Raised when the master cycle, offsets or shift tables are inconsistent."""

    pass


class InvalidTeamError(ShiftRotationError, ValueError):
    """Raised for a team identifier outside the configured team set."""

    pass


class InvalidDateRangeError(ShiftRotationError, ValueError):
    """Raised for unparseable dates or an end date before the start date."""

    pass


class ScheduleCancelledError(ShiftRotationError):
    """Raised when a caller cancels a running schedule generation."""

    pass


class InvalidRequestError(ShiftRotationError, ValueError):
    """Raised when a schedule request is missing parameters or names an unknown company."""

    pass
