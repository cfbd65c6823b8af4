"""Domain models and business rules for weekly schedules."""

from shiftweek.domain.models import (
    ConflictDescriptor,
    ConflictType,
    DayAnalysis,
    DaySchedule,
    Employee,
    EmployeeLookup,
    HoursSummary,
    RejectedEntry,
    ShiftAssignment,
    SkillCoverage,
    WeeklyAnalysis,
    WeeklyScheduleBatch,
    WeekTotals,
)
from shiftweek.domain.policies import DefaultWeekPolicy, WeekPolicy
from shiftweek.domain.skills import resolve_coverage
from shiftweek.domain.time_utils import (
    InvalidFormatError,
    NonPositiveDurationError,
    ScheduleInputError,
    duration_hours,
    parse_calendar_date,
    overlaps,
    parse_time_of_day,
)

__all__ = [
    # Models
    "ConflictDescriptor",
    "ConflictType",
    "DayAnalysis",
    "DaySchedule",
    "Employee",
    "EmployeeLookup",
    "HoursSummary",
    "RejectedEntry",
    "ShiftAssignment",
    "SkillCoverage",
    "WeeklyAnalysis",
    "WeeklyScheduleBatch",
    "WeekTotals",
    # Policies
    "DefaultWeekPolicy",
    "WeekPolicy",
    # Skills
    "resolve_coverage",
    # Time utilities
    "InvalidFormatError",
    "NonPositiveDurationError",
    "ScheduleInputError",
    "duration_hours",
    "parse_calendar_date",
    "overlaps",
    "parse_time_of_day",
]
