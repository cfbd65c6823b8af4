"""Request payload parsing for weekly schedule batches.

The transport layer delivers JSON in two day shapes that may be mixed within
one ``weekly_schedule`` list:

- Day-level: ``{"date_of_day": ..., "schedules": [{...shift...}, ...]}``
- Legacy single shift: ``{"date_of_day": ..., ...shift fields...}``

This module resolves that union at the boundary and hands the engine a single
WeeklyScheduleBatch shape. Shift time strings are passed through unparsed so
the validator can report malformed values together with every other problem.
Likewise an entry whose date cannot be read is set aside on the batch instead
of failing the whole payload.
"""

import logging
from datetime import date, datetime
from typing import Annotated, Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from shiftweek.domain.models import (
    DaySchedule,
    Employee,
    EmployeeId,
    RejectedEntry,
    ShiftAssignment,
    WeeklyScheduleBatch,
)
from shiftweek.domain.time_utils import InvalidFormatError, parse_calendar_date

logger = logging.getLogger(__name__)

Identifier = Union[int, str]


class PayloadError(ValueError):
    """The payload does not have the expected shape.

    Attributes:
        issues: One message per problem found, with its location.
    """

    def __init__(self, message: str, issues: Optional[list[str]] = None):
        super().__init__(message)
        self.issues = issues or []

    @classmethod
    def from_validation_error(cls, error: ValidationError, what: str) -> "PayloadError":
        issues = [
            f"{'.'.join(str(part) for part in issue['loc'])}: {issue['msg']}"
            for issue in error.errors()
        ]
        return cls(f"Invalid {what}: {len(issues)} issue(s)", issues)

    def __str__(self) -> str:
        if not self.issues:
            return super().__str__()
        return super().__str__() + "\n" + "\n".join(f"  - {i}" for i in self.issues)


def _skill_id(value: Any) -> Any:
    # Skills arrive either as bare IDs or as objects carrying an "id"
    if isinstance(value, dict):
        return value.get("id")
    return value


class SkillRef(BaseModel):
    id: Identifier


class EmploymentInfo(BaseModel):
    max_weekly_hours: Optional[float] = None


class EmployeeData(BaseModel):
    """Employee reference data as delivered by the directory."""

    id: Identifier
    skills: list[SkillRef] = Field(default_factory=list)
    employment_info: Optional[EmploymentInfo] = None
    full_name: Optional[str] = None

    def to_employee(self) -> Employee:
        return Employee(
            id=self.id,
            skill_ids=frozenset(skill.id for skill in self.skills),
            max_weekly_hours=(
                self.employment_info.max_weekly_hours if self.employment_info else None
            ),
            name=self.full_name,
        )


class ShiftItem(BaseModel):
    """One shift as submitted in a weekly payload."""

    emp_info_id: Identifier
    scheduled_start_time: str
    scheduled_end_time: str
    status_id: Optional[int] = None
    actual_start_time: Optional[str] = None
    actual_end_time: Optional[str] = None
    vci: Optional[bool] = None
    agree_on_exception: Optional[bool] = False
    exception_notes: Optional[str] = None
    required_skills: list[Identifier] = Field(default_factory=list)
    employee: Optional[EmployeeData] = None

    @field_validator("required_skills", mode="before")
    @classmethod
    def flatten_skills(cls, value):
        if value is None:
            return []
        return [_skill_id(v) for v in value]

    def to_shift(self) -> ShiftAssignment:
        return ShiftAssignment(
            employee_id=self.emp_info_id,
            scheduled_start=self.scheduled_start_time,
            scheduled_end=self.scheduled_end_time,
            status_id=self.status_id,
            actual_start=self.actual_start_time,
            actual_end=self.actual_end_time,
            vci=self.vci,
            agree_on_exception=bool(self.agree_on_exception),
            exception_notes=self.exception_notes,
            required_skill_ids=frozenset(self.required_skills),
            employee=self.employee.to_employee() if self.employee else None,
        )


def _date_only(value):
    # Stored schedules report dates as ISO datetimes ("2025-09-15T00:00:00Z")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


def _date_problem(value: Any) -> Optional[str]:
    """Why ``value`` is not a usable ``date_of_day``, or None if it is."""
    if isinstance(value, date):
        return None
    try:
        parse_calendar_date(_date_only(value))
    except InvalidFormatError as e:
        return str(e)
    return None


class DayLevelEntry(BaseModel):
    date_of_day: date
    schedules: list[ShiftItem]

    @field_validator("date_of_day", mode="before")
    @classmethod
    def normalize_date(cls, value):
        return _date_only(value)


class SingleShiftEntry(ShiftItem):
    date_of_day: date

    @field_validator("date_of_day", mode="before")
    @classmethod
    def normalize_date(cls, value):
        return _date_only(value)


class UnreadableDateEntry(BaseModel):
    """An entry whose date cannot be read. Its remaining fields are ignored."""

    date_of_day: Any
    emp_info_id: Optional[Any] = None


def _entry_kind(value: Any) -> str:
    if isinstance(value, dict):
        if "date_of_day" in value and _date_problem(value["date_of_day"]):
            return "unreadable"
        return "day" if "schedules" in value else "single"
    if isinstance(value, UnreadableDateEntry):
        return "unreadable"
    return "day" if hasattr(value, "schedules") else "single"


WeeklyScheduleEntry = Annotated[
    Union[
        Annotated[DayLevelEntry, Tag("day")],
        Annotated[SingleShiftEntry, Tag("single")],
        Annotated[UnreadableDateEntry, Tag("unreadable")],
    ],
    Discriminator(_entry_kind),
]


class WeeklyScheduleBody(BaseModel):
    """Top-level weekly request body."""

    model_config = ConfigDict(extra="ignore")

    weekly_schedule: list[WeeklyScheduleEntry]

    def to_batch(self) -> WeeklyScheduleBatch:
        """Normalize entries into day schedules.

        Day-level entries always become their own DaySchedule, so a repeated
        date stays visible to the duplicate-date check. Legacy single-shift
        entries sharing a date are grouped into one DaySchedule. Entries with
        an unreadable date are left out and carried as rejected entries.
        """
        days: list[tuple[date, list[ShiftAssignment]]] = []
        legacy_days: dict[date, list[ShiftAssignment]] = {}
        rejected: list[RejectedEntry] = []

        for position, entry in enumerate(self.weekly_schedule):
            if isinstance(entry, UnreadableDateEntry):
                rejected.append(
                    RejectedEntry(
                        position=position,
                        field_name="date_of_day",
                        value=entry.date_of_day,
                        message=_date_problem(entry.date_of_day),
                        employee_id=entry.emp_info_id,
                    )
                )
                continue

            if isinstance(entry, DayLevelEntry):
                days.append((entry.date_of_day, [s.to_shift() for s in entry.schedules]))
                continue

            shifts = legacy_days.get(entry.date_of_day)
            if shifts is None:
                shifts = []
                legacy_days[entry.date_of_day] = shifts
                days.append((entry.date_of_day, shifts))
            shifts.append(entry.to_shift())

        return WeeklyScheduleBatch(
            days=tuple(DaySchedule(date=d, shifts=tuple(s)) for d, s in days),
            rejected_entries=tuple(rejected),
        )


_employee_list = TypeAdapter(list[EmployeeData])


def parse_weekly_payload(data: Any) -> WeeklyScheduleBatch:
    """Parse a weekly request body into a batch.

    Args:
        data: Decoded JSON, ``{"weekly_schedule": [...]}``.

    Returns:
        The normalized WeeklyScheduleBatch.

    Raises:
        PayloadError: If the payload shape is invalid. All issues are listed.
            Unreadable dates are not shape errors; see
            ``WeeklyScheduleBatch.rejected_entries``.
    """
    try:
        body = WeeklyScheduleBody.model_validate(data)
    except ValidationError as e:
        raise PayloadError.from_validation_error(e, "weekly schedule payload") from e

    batch = body.to_batch()
    logger.debug(
        "Parsed weekly payload: %d entries -> %d days, %d shifts, %d rejected",
        len(body.weekly_schedule),
        len(batch.days),
        batch.total_shifts,
        len(batch.rejected_entries),
    )
    return batch


def parse_employees(data: Any) -> dict[EmployeeId, Employee]:
    """Parse employee reference data.

    Args:
        data: A list of employee objects, or ``{"employees": [...]}``.

    Returns:
        Dict mapping employee IDs to Employee objects.

    Raises:
        PayloadError: If any employee entry is invalid.
    """
    if isinstance(data, dict) and "employees" in data:
        data = data["employees"]

    try:
        records = _employee_list.validate_python(data)
    except ValidationError as e:
        raise PayloadError.from_validation_error(e, "employee data") from e

    return {record.id: record.to_employee() for record in records}
