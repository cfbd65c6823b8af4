"""Wall-clock helpers for shift times.

Shift times are ``HH:MM:SS`` strings on the wire and ``datetime.time``
values inside the engine. Shifts never cross midnight, so every duration is
computed within a single day.
"""

import re
from datetime import date, time
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from shiftweek.domain.models import ShiftAssignment

TimeLike = Union[time, str]

_TIME_PATTERN = re.compile(r"([0-9]{2}):([0-9]{2}):([0-9]{2})")
_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class ScheduleInputError(ValueError):
    """Base class for malformed schedule input."""


class InvalidFormatError(ScheduleInputError):
    """A time or date string is not in the expected format."""


class NonPositiveDurationError(ScheduleInputError):
    """An interval ends at or before its start."""


def parse_time_of_day(value: str) -> time:
    """Parse a strict ``HH:MM:SS`` string.

    Args:
        value: The string to parse.

    Returns:
        The parsed time of day.

    Raises:
        InvalidFormatError: If the string is not two-digit ``HH:MM:SS`` or a
            component is out of range.
    """
    if not isinstance(value, str):
        raise InvalidFormatError(f"Time must be a string, got {type(value).__name__}")

    match = _TIME_PATTERN.fullmatch(value)
    if match is None:
        raise InvalidFormatError(f"Time {value!r} must be in HH:MM:SS format")

    hours, minutes, seconds = (int(part) for part in match.groups())
    if hours > 23 or minutes > 59 or seconds > 59:
        raise InvalidFormatError(f"Time {value!r} is out of range")

    return time(hour=hours, minute=minutes, second=seconds)


def parse_calendar_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string.

    Raises:
        InvalidFormatError: If the string is not ``YYYY-MM-DD`` or is not a
            real calendar date.
    """
    if not isinstance(value, str) or _DATE_PATTERN.fullmatch(value) is None:
        raise InvalidFormatError(f"Date {value!r} must be in YYYY-MM-DD format")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidFormatError(f"Date {value!r} is not a valid calendar date") from None


def as_time_of_day(value: TimeLike) -> time:
    """Return ``value`` as a time, parsing it if it is a string."""
    if isinstance(value, time):
        return value.replace(microsecond=0, tzinfo=None)
    return parse_time_of_day(value)


def seconds_since_midnight(t: time) -> int:
    return t.hour * 3600 + t.minute * 60 + t.second


def duration_hours(start: TimeLike, end: TimeLike) -> float:
    """Length of the interval ``[start, end)`` in hours.

    Raises:
        InvalidFormatError: If either bound is a malformed string.
        NonPositiveDurationError: If ``end`` is not after ``start``.
    """
    start_t = as_time_of_day(start)
    end_t = as_time_of_day(end)

    seconds = seconds_since_midnight(end_t) - seconds_since_midnight(start_t)
    if seconds <= 0:
        raise NonPositiveDurationError(
            f"End {end_t.isoformat()} must be after start {start_t.isoformat()}"
        )
    return seconds / 3600.0


def overlaps(a_start: time, a_end: time, b_start: time, b_end: time) -> bool:
    """Check whether two half-open intervals intersect.

    A shift ending exactly when another begins does not overlap it.
    """
    return a_start < b_end and b_start < a_end


def shift_hours(shift: "ShiftAssignment") -> float:
    """Scheduled hours a shift contributes to totals.

    Malformed or non-positive shifts contribute nothing; they are reported as
    structural violations by the validator.
    """
    try:
        return duration_hours(shift.scheduled_start, shift.scheduled_end)
    except ScheduleInputError:
        return 0.0


def actual_hours(shift: "ShiftAssignment") -> float:
    """Hours actually worked, or 0.0 when actual times are missing or bad."""
    if shift.actual_start is None or shift.actual_end is None:
        return 0.0
    try:
        return duration_hours(shift.actual_start, shift.actual_end)
    except ScheduleInputError:
        return 0.0


def try_interval(start: TimeLike, end: TimeLike) -> Optional[tuple[time, time]]:
    """Parse an interval, returning None when it is malformed or empty."""
    try:
        start_t = as_time_of_day(start)
        end_t = as_time_of_day(end)
    except ScheduleInputError:
        return None
    if end_t <= start_t:
        return None
    return start_t, end_t
