"""Domain models for the weekly schedule engine.

This module contains the core data structures shared by validation and
analysis: employees, shift assignments, day schedules, weekly batches and the
analysis outputs built from them.

Input types are frozen. Validation and analysis never mutate them and every
result is a freshly constructed value.
"""

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from types import MappingProxyType
from typing import Hashable, Iterator, Mapping, Optional

from shiftweek.domain.time_utils import TimeLike

EmployeeId = Hashable
SkillId = Hashable


def _time_str(value: Optional[TimeLike]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, time):
        return value.strftime("%H:%M:%S")
    return value


def _sorted_ids(ids: frozenset) -> list:
    try:
        return sorted(ids)
    except TypeError:
        return sorted(ids, key=str)


@dataclass(frozen=True)
class Employee:
    """Read-only reference data for an employee.

    Attributes:
        id: Unique identifier for the employee.
        skill_ids: Skills the employee holds.
        max_weekly_hours: Weekly hour cap. None means unknown (unbounded).
        name: Display name, if known.
    """

    id: EmployeeId
    skill_ids: frozenset = field(default_factory=frozenset)
    max_weekly_hours: Optional[float] = None
    name: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.skill_ids, frozenset):
            object.__setattr__(self, "skill_ids", frozenset(self.skill_ids))


@dataclass(frozen=True)
class ShiftAssignment:
    """One scheduled work interval for one employee on one day.

    Scheduled and actual times may be ``datetime.time`` values or raw
    ``HH:MM:SS`` strings. Strings are not parsed here so that a malformed
    value can be reported alongside every other problem in the batch.

    Attributes:
        employee_id: Employee working the shift.
        scheduled_start: Planned start time.
        scheduled_end: Planned end time (same day, after the start).
        status_id: Schedule status reference.
        actual_start: Recorded start time, if any.
        actual_end: Recorded end time, if any.
        vci: Optional VCI flag carried through from the payload.
        agree_on_exception: Whether an exception was agreed for this shift.
        exception_notes: Free-text exception notes.
        required_skill_ids: Skills the shift requires.
        employee: Employee data attached to the shift by the caller.
    """

    employee_id: EmployeeId
    scheduled_start: TimeLike
    scheduled_end: TimeLike
    status_id: Optional[int] = None
    actual_start: Optional[TimeLike] = None
    actual_end: Optional[TimeLike] = None
    vci: Optional[bool] = None
    agree_on_exception: bool = False
    exception_notes: Optional[str] = None
    required_skill_ids: frozenset = field(default_factory=frozenset)
    employee: Optional[Employee] = None

    def __post_init__(self):
        if not isinstance(self.required_skill_ids, frozenset):
            object.__setattr__(
                self, "required_skill_ids", frozenset(self.required_skill_ids)
            )

    @property
    def has_exception(self) -> bool:
        """True if the shift carries an agreed exception or exception notes."""
        return self.agree_on_exception or bool(self.exception_notes)

    def to_dict(self) -> dict:
        return {
            "emp_info_id": self.employee_id,
            "scheduled_start_time": _time_str(self.scheduled_start),
            "scheduled_end_time": _time_str(self.scheduled_end),
            "status_id": self.status_id,
            "actual_start_time": _time_str(self.actual_start),
            "actual_end_time": _time_str(self.actual_end),
            "vci": self.vci,
            "agree_on_exception": self.agree_on_exception,
            "exception_notes": self.exception_notes,
            "required_skills": _sorted_ids(self.required_skill_ids),
        }


@dataclass(frozen=True)
class DaySchedule:
    """All shifts proposed for a single calendar day.

    Attributes:
        date: The calendar day.
        shifts: Shifts on this day, in submission order.
    """

    date: date
    shifts: tuple = ()

    def __post_init__(self):
        if not isinstance(self.shifts, tuple):
            object.__setattr__(self, "shifts", tuple(self.shifts))

    def employee_ids(self) -> list[EmployeeId]:
        """Distinct employee IDs on this day, in first-seen order."""
        return list(dict.fromkeys(s.employee_id for s in self.shifts))


@dataclass(frozen=True)
class RejectedEntry:
    """A submitted weekly entry left out of the batch because it was malformed.

    Attributes:
        position: Zero-based position of the entry in the submitted list.
        field_name: The field that could not be read.
        value: The raw submitted value.
        message: Why the value was rejected.
        employee_id: Employee of a single-shift entry, if known.
    """

    position: int
    field_name: str
    value: object
    message: str
    employee_id: Optional[EmployeeId] = None


@dataclass(frozen=True)
class WeeklyScheduleBatch:
    """A batch of day schedules submitted together for one work week.

    Attributes:
        days: Day schedules in submission order.
        rejected_entries: Submitted entries that could not become day
            schedules. The validator reports each one.
    """

    days: tuple = ()
    rejected_entries: tuple = ()

    def __post_init__(self):
        if not isinstance(self.days, tuple):
            object.__setattr__(self, "days", tuple(self.days))
        if not isinstance(self.rejected_entries, tuple):
            object.__setattr__(self, "rejected_entries", tuple(self.rejected_entries))

    @property
    def dates(self) -> list[date]:
        """Dates of all days, duplicates included."""
        return [day.date for day in self.days]

    @property
    def total_shifts(self) -> int:
        return sum(len(day.shifts) for day in self.days)

    def iter_shifts(self) -> Iterator[tuple[DaySchedule, int, ShiftAssignment]]:
        """Yield ``(day, index, shift)`` for every shift in the batch."""
        for day in self.days:
            for index, shift in enumerate(day.shifts):
                yield day, index, shift

    def employee_ids(self) -> list[EmployeeId]:
        """Distinct employee IDs across the batch, in first-seen order."""
        return list(dict.fromkeys(s.employee_id for _, _, s in self.iter_shifts()))

    def embedded_employees(self) -> dict[EmployeeId, Employee]:
        """Employee data attached to shifts, keyed by employee ID.

        When several shifts carry data for the same employee the last one wins.
        """
        employees: dict[EmployeeId, Employee] = {}
        for _, _, shift in self.iter_shifts():
            if shift.employee is not None:
                employees[shift.employee_id] = shift.employee
        return employees


@dataclass(frozen=True)
class SkillCoverage:
    """How well an employee's skills satisfy the skills required of them."""

    required: frozenset
    available: frozenset
    missing: frozenset
    fully_covered: bool

    def to_dict(self) -> dict:
        return {
            "required_skills": _sorted_ids(self.required),
            "available_skills": _sorted_ids(self.available),
            "missing_skills": _sorted_ids(self.missing),
            "fully_covered": self.fully_covered,
        }


@dataclass(frozen=True)
class HoursSummary:
    """Scheduled hours for one employee against their weekly cap.

    Attributes:
        employee_id: The employee.
        total_scheduled_hours: Sum of scheduled shift hours in the batch.
        max_weekly_hours: Weekly cap, or None when unknown.
        hours_remaining: Cap minus total (negative when over), None when the
            cap is unknown.
        is_over_limit: Whether the total exceeds a known cap.
        employee_name: Display name, if known.
    """

    employee_id: EmployeeId
    total_scheduled_hours: float
    max_weekly_hours: Optional[float]
    hours_remaining: Optional[float]
    is_over_limit: bool
    employee_name: Optional[str] = None

    @property
    def excess_hours(self) -> float:
        """Hours over the cap, 0.0 when within it or when the cap is unknown."""
        if self.hours_remaining is None or self.hours_remaining >= 0:
            return 0.0
        return -self.hours_remaining

    def to_dict(self) -> dict:
        return {
            "employee_name": self.employee_name or str(self.employee_id),
            "total_scheduled_hours": round(self.total_scheduled_hours, 2),
            "max_weekly_hours": self.max_weekly_hours,
            "hours_remaining": (
                round(self.hours_remaining, 2)
                if self.hours_remaining is not None
                else None
            ),
            "is_over_limit": self.is_over_limit,
        }


class ConflictType(Enum):
    """Kinds of structured conflicts reported by the analysis."""

    INVALID_FORMAT = "invalid_format"
    NON_POSITIVE_DURATION = "non_positive_duration"
    OVERLAP = "overlap"


@dataclass(frozen=True)
class ConflictDescriptor:
    """A machine-readable conflict tied to shifts on one day.

    Shift identifiers are zero-based positions within the day's shift list.
    ``second_shift`` is None for conflicts involving a single shift.
    """

    conflict_type: ConflictType
    schedule_date: date
    employee_id: EmployeeId
    first_shift: int
    second_shift: Optional[int] = None
    message: str = ""

    def to_dict(self) -> dict:
        return {
            "type": self.conflict_type.value,
            "date": self.schedule_date.isoformat(),
            "employee_id": self.employee_id,
            "first_shift": self.first_shift,
            "second_shift": self.second_shift,
            "message": self.message,
        }


@dataclass(frozen=True)
class DayAnalysis:
    """Aggregate statistics for one day of the batch."""

    date: date
    total_schedules: int
    unique_employees: int
    total_hours: float
    required_skills: frozenset
    available_skills: frozenset
    missing_skills: frozenset
    skill_coverage_complete: bool
    schedules_with_exceptions: int = 0
    schedules: tuple = ()

    def to_dict(self) -> dict:
        schedules = []
        for shift in self.schedules:
            item = shift.to_dict()
            item["date_of_day"] = self.date.isoformat()
            schedules.append(item)

        return {
            "date": self.date.isoformat(),
            "total_schedules": self.total_schedules,
            "total_employees": self.unique_employees,
            "total_hours": round(self.total_hours, 2),
            "required_skills": _sorted_ids(self.required_skills),
            "available_skills": _sorted_ids(self.available_skills),
            "missing_skills": _sorted_ids(self.missing_skills),
            "skill_coverage_complete": self.skill_coverage_complete,
            "schedules_with_exceptions": self.schedules_with_exceptions,
            "schedules": schedules,
        }


@dataclass(frozen=True)
class WeekTotals:
    """Week-level hour and exception totals."""

    total_hours: float = 0.0
    total_actual_hours: float = 0.0
    schedules_with_exceptions: int = 0

    def to_dict(self) -> dict:
        return {
            "total_hours": round(self.total_hours, 2),
            "total_actual_hours": round(self.total_actual_hours, 2),
            "schedules_with_exceptions": self.schedules_with_exceptions,
        }


@dataclass(frozen=True)
class WeeklyAnalysis:
    """Coverage and hours analysis for a weekly batch.

    Attributes:
        week_start: Earliest date in the batch, None for an empty batch.
        week_end: Latest date in the batch, None for an empty batch.
        total_schedules: Number of shifts across all days.
        unique_employees: Number of distinct employees scheduled.
        total_hours: Scheduled hours across all shifts.
        skill_coverage: Per-employee skill coverage over the whole batch.
        hours_summary: Per-employee hours against weekly caps.
        conflicts: Structural and overlap conflicts as descriptors.
        unique_dates: Number of distinct dates in the batch.
        daily_analysis: Per-date statistics.
        week_totals: Week-level totals including actual hours.
    """

    week_start: Optional[date]
    week_end: Optional[date]
    total_schedules: int
    unique_employees: int
    total_hours: float
    skill_coverage: Mapping = field(default_factory=dict)
    hours_summary: Mapping = field(default_factory=dict)
    conflicts: tuple = ()
    unique_dates: int = 0
    daily_analysis: Mapping = field(default_factory=dict)
    week_totals: WeekTotals = field(default_factory=WeekTotals)

    def __post_init__(self):
        # Read-only views over private copies
        for name in ("skill_coverage", "hours_summary", "daily_analysis"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    @property
    def fully_covered(self) -> bool:
        """True if every employee's skill requirements are met."""
        return all(c.fully_covered for c in self.skill_coverage.values())

    @property
    def employees_over_limit(self) -> list[EmployeeId]:
        return [
            emp_id
            for emp_id, summary in self.hours_summary.items()
            if summary.is_over_limit
        ]

    def to_dict(self) -> dict:
        return {
            "week_start": self.week_start.isoformat() if self.week_start else None,
            "week_end": self.week_end.isoformat() if self.week_end else None,
            "total_schedules": self.total_schedules,
            "unique_employees": self.unique_employees,
            "unique_dates": self.unique_dates,
            "total_hours": round(self.total_hours, 2),
            "skill_coverage": {
                str(emp_id): coverage.to_dict()
                for emp_id, coverage in self.skill_coverage.items()
            },
            "hours_summary": {
                str(emp_id): summary.to_dict()
                for emp_id, summary in self.hours_summary.items()
            },
            "conflicts": [c.to_dict() for c in self.conflicts],
            "daily_analysis": {
                d.isoformat(): day.to_dict() for d, day in self.daily_analysis.items()
            },
            "week_totals": self.week_totals.to_dict(),
        }


EmployeeLookup = Mapping[EmployeeId, Employee]
