"""
Request handling on top of ShiftEngine.

Requests (as decoded from a query string or JSON body) are validated with
pydantic models, turned into engine calls and answered with JSON-ready
response bodies. Transport, persistence and authentication are left to the
caller.
"""

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from .engine import ShiftEngine
from .errors import InvalidRequestError, ShiftRotationError
from .models import ScheduleRange, Shift

logger = logging.getLogger(__name__)

MAX_RANGE_DAYS = 366

TEAM_RANGE_FIELDS = ("companyId", "teamId", "startDate", "endDate")


class ScheduleRequest(BaseModel):
    """
    Parameters of a schedule request.

    Validated against a ShiftEngine passed in the validation context
    (``{"engine": ..., "max_range_days": ...}``): team ids are normalized,
    the company must match the rotation's company and ranges are bounded.

    Request shapes:
        - **allTeams** + startDate/endDate: every team's shifts
        - **currentMonth** + teamId: one team's month, derived from now
        - otherwise companyId, teamId, startDate and endDate are required
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    company_id: Optional[str] = Field(None, alias="companyId")
    team_id: Optional[str] = Field(None, alias="teamId")
    start_date: Optional[date] = Field(None, alias="startDate")
    end_date: Optional[date] = Field(None, alias="endDate")
    include_stats: Optional[bool] = Field(None, alias="includeStats")
    current_month: bool = Field(False, alias="currentMonth")
    all_teams: bool = Field(False, alias="allTeams")

    @field_validator("company_id", "start_date", "end_date", mode="before")
    @classmethod
    def _blank_is_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("team_id", mode="before")
    @classmethod
    def _normalize_team(cls, value: Any, info: ValidationInfo) -> Optional[str]:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        engine = (info.context or {}).get("engine")
        if engine is None:
            return str(value).strip()
        return engine.mapper.normalize_team(value)

    @property
    def is_all_teams(self) -> bool:
        return self.all_teams and self.start_date is not None and self.end_date is not None

    @property
    def is_current_month(self) -> bool:
        return self.current_month and self.team_id is not None

    @model_validator(mode="after")
    def _check_shape(self, info: ValidationInfo) -> "ScheduleRequest":
        context = info.context or {}

        if not (self.is_all_teams or self.is_current_month):
            values = {
                "companyId": self.company_id,
                "teamId": self.team_id,
                "startDate": self.start_date,
                "endDate": self.end_date,
            }
            missing = [key for key in TEAM_RANGE_FIELDS if values[key] is None]
            if missing:
                raise InvalidRequestError(
                    f"Missing required parameters: {', '.join(missing)}"
                )

            engine = context.get("engine")
            if engine is not None:
                if self.company_id.strip().lower() != engine.model.company_id.lower():
                    raise InvalidRequestError(f"Company '{self.company_id}' not found")

        if self.start_date is not None and self.end_date is not None:
            schedule_range = self.schedule_range
            max_days = context.get("max_range_days", MAX_RANGE_DAYS)
            if schedule_range.days > max_days:
                raise ValueError(
                    f"Period cannot exceed {max_days} days, got {schedule_range.days}"
                )
        return self

    @property
    def schedule_range(self) -> ScheduleRange:
        """Requested range; raises InvalidDateRangeError when end precedes start."""
        return ScheduleRange(start=self.start_date, end=self.end_date)


class TeamInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    team_id: str = Field(..., alias="teamId")
    company_name: str = Field(..., alias="companyName")


class CoverageSummary(BaseModel):
    """Daily coverage result for an all-teams response."""

    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(..., alias="isValid")
    errors: List[str] = Field(default_factory=list)
    days_checked: int = Field(..., alias="daysChecked")


class ScheduleResponse(BaseModel):
    """Response body; only the fields set for a request shape are emitted."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    data: Optional[List[Dict[str, Any]]] = None
    stats: Optional[Dict[str, Any]] = None
    validation: Optional[CoverageSummary] = None
    next_shift: Optional[Dict[str, Any]] = Field(None, alias="nextShift")
    countdown: Optional[Dict[str, Any]] = None
    team_info: Optional[TeamInfo] = Field(None, alias="teamInfo")
    error: Optional[str] = None

    def to_body(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


@dataclass
class ServiceResponse:
    """HTTP-style status code plus a JSON-serializable body."""

    status: int
    body: Dict[str, Any]

    @property
    def ok(self) -> bool:
        return self.status == 200

    def to_json(self) -> str:
        return json.dumps(self.body, ensure_ascii=False)


def _validation_message(error: ValidationError) -> str:
    """Flatten pydantic errors into one readable line."""
    messages = []
    for item in error.errors():
        if item["type"] == "value_error":
            # raised by our own validators; the message is already complete
            messages.append(str(item["ctx"]["error"]))
        else:
            field = ".".join(str(part) for part in item["loc"]) or "request"
            messages.append(f"{field}: {item['msg']}")
    return "; ".join(messages)


class ScheduleService:
    """Answers schedule requests for a single rotation."""

    def __init__(self, engine: ShiftEngine, max_range_days: int = MAX_RANGE_DAYS):
        self.engine = engine
        self.max_range_days = max_range_days

    def parse_request(self, request: Mapping[str, Any]) -> ScheduleRequest:
        """
        Validate raw request parameters.

        Raises:
            pydantic.ValidationError: If any parameter is missing or invalid
        """
        return ScheduleRequest.model_validate(
            dict(request),
            context={"engine": self.engine, "max_range_days": self.max_range_days},
        )

    def handle(self, request: Mapping[str, Any], now: datetime) -> ServiceResponse:
        """
        Dispatch a request to the matching schedule operation.

        Args:
            request: Request parameters
            now: Current instant, used for month and next-shift lookups

        Returns:
            ServiceResponse with status 200 on success, 400 on invalid input
        """
        try:
            params = self.parse_request(request)
            if params.is_all_teams:
                response = self._all_teams(params)
            elif params.is_current_month:
                response = self._current_month(params, now)
            else:
                response = self._team_range(params, now)
        except ValidationError as e:
            return self._reject(_validation_message(e))
        except ShiftRotationError as e:
            return self._reject(str(e))

        return ServiceResponse(200, response.to_body())

    def _reject(self, message: str) -> ServiceResponse:
        logger.info("Rejected schedule request: %s", message)
        body = ScheduleResponse(success=False, error=message).to_body()
        return ServiceResponse(400, body)

    def _all_teams(self, params: ScheduleRequest) -> ScheduleResponse:
        shifts = self.engine.generator.generate(params.schedule_range)
        response = ScheduleResponse(success=True, data=[s.to_dict() for s in shifts])

        include_stats = True if params.include_stats is None else params.include_stats
        if include_stats:
            validation = self.engine.validate(shifts)
            response.stats = self.engine.statistics.schedule_summary(shifts).to_dict()
            response.validation = CoverageSummary(
                is_valid=validation.is_valid,
                errors=validation.errors,
                days_checked=validation.days_checked,
            )
        return response

    def _current_month(self, params: ScheduleRequest, now: datetime) -> ScheduleResponse:
        shifts = self.engine.current_month_schedule(now, [params.team_id])
        return self._team_response(params.team_id, shifts, now, include_stats=True)

    def _team_range(self, params: ScheduleRequest, now: datetime) -> ScheduleResponse:
        shifts = self.engine.generator.generate(params.schedule_range, [params.team_id])
        return self._team_response(
            params.team_id, shifts, now, include_stats=bool(params.include_stats)
        )

    def _team_response(
        self, team: str, shifts: List[Shift], now: datetime, include_stats: bool
    ) -> ScheduleResponse:
        next_shift = self.engine.next_shift(team, now)
        countdown = self.engine.countdown(next_shift, now)

        response = ScheduleResponse(
            success=True,
            data=[s.to_dict() for s in shifts],
            next_shift=next_shift.to_dict() if next_shift else None,
            countdown=countdown.to_dict() if countdown else None,
            team_info=TeamInfo(team_id=team, company_name=self.engine.model.company_name),
        )
        if include_stats:
            response.stats = self.engine.statistics.team_summary(shifts, team).to_dict()
        return response
