"""Individual batch checks used by the validator and the analysis builder.

Each check is a plain function over immutable inputs so it can be reused on
its own, e.g. to re-check a single day after an edit.
"""

from collections import Counter, defaultdict
from datetime import date
from typing import Iterable, Optional, Sequence

from shiftweek.domain.models import (
    Employee,
    EmployeeId,
    EmployeeLookup,
    HoursSummary,
    ShiftAssignment,
    WeeklyScheduleBatch,
)
from shiftweek.domain.policies import DefaultWeekPolicy, WeekPolicy
from shiftweek.domain.time_utils import overlaps, shift_hours, try_interval
from shiftweek.validation.result import (
    ValidationError,
    ValidationErrorType,
    ValidationResult,
)


def validate_week_window(
    dates: Iterable[date],
    policy: Optional[WeekPolicy] = None,
) -> ValidationResult:
    """Check that all dates fall within one inclusive work week.

    Args:
        dates: Dates present in the batch. Duplicates are ignored here.
        policy: Week policy giving the work-week length (default 7 days).

    Returns:
        ValidationResult with a single WEEK_WINDOW_VIOLATION when the span
        between the earliest and latest date is too large. An empty set of
        dates is valid.
    """
    policy = policy or DefaultWeekPolicy()
    result = ValidationResult()

    unique = set(dates)
    if not unique:
        return result

    first, last = min(unique), max(unique)
    span = (last - first).days
    if span > policy.max_span_days():
        result.add_error(
            ValidationError(
                error_type=ValidationErrorType.WEEK_WINDOW_VIOLATION,
                message=(
                    f"All dates must fall within a {policy.week_length_days()}-day "
                    f"work week (span of {span + 1} days from {first.isoformat()} "
                    f"to {last.isoformat()})"
                ),
                details={
                    "week_start": first.isoformat(),
                    "week_end": last.isoformat(),
                    "span_days": span + 1,
                },
            )
        )
    return result


def find_duplicate_dates(dates: Sequence[date]) -> list[date]:
    """Dates that appear more than once, in first-seen order."""
    counts = Counter(dates)
    return [d for d in dict.fromkeys(dates) if counts[d] > 1]


def find_overlapping_pairs(shifts: Sequence[ShiftAssignment]) -> list[tuple[int, int]]:
    """Find overlapping shift pairs for the same employee within one day.

    Shifts for different employees are never compared. Shifts with malformed
    or non-positive times are skipped; they are reported structurally.

    Args:
        shifts: All shifts of a single day.

    Returns:
        Every overlapping pair as ``(i, j)`` positions in ``shifts``, i < j.
    """
    by_employee: dict[EmployeeId, list[tuple[int, tuple]]] = defaultdict(list)
    for index, shift in enumerate(shifts):
        interval = try_interval(shift.scheduled_start, shift.scheduled_end)
        if interval is not None:
            by_employee[shift.employee_id].append((index, interval))

    pairs = []
    for entries in by_employee.values():
        for pos, (i, (a_start, a_end)) in enumerate(entries):
            for j, (b_start, b_end) in entries[pos + 1 :]:
                if overlaps(a_start, a_end, b_start, b_end):
                    pairs.append((i, j))
    return sorted(pairs)


def find_overlaps(
    shifts: Sequence[ShiftAssignment],
) -> list[tuple[ShiftAssignment, ShiftAssignment]]:
    """Like find_overlapping_pairs, but returns the shifts themselves."""
    return [(shifts[i], shifts[j]) for i, j in find_overlapping_pairs(shifts)]


def merge_employee_lookup(
    batch: WeeklyScheduleBatch,
    employee_lookup: Optional[EmployeeLookup] = None,
) -> dict[EmployeeId, Employee]:
    """Combine employee data attached to shifts with an explicit lookup.

    Entries from ``employee_lookup`` take precedence over shift-attached data.
    """
    employees = batch.embedded_employees()
    if employee_lookup:
        employees.update(employee_lookup)
    return employees


def aggregate_hours(
    batch: WeeklyScheduleBatch,
    employee_lookup: Optional[EmployeeLookup] = None,
    policy: Optional[WeekPolicy] = None,
) -> dict[EmployeeId, HoursSummary]:
    """Sum scheduled hours per employee and compare against weekly caps.

    Shifts with malformed or non-positive times contribute zero hours.
    Employees without a known cap (and no policy fallback) are never over
    the limit and have no ``hours_remaining``.

    Args:
        batch: The weekly batch.
        employee_lookup: Employee reference data keyed by employee ID.
        policy: Week policy supplying a fallback cap.

    Returns:
        Dict mapping employee IDs to HoursSummary, in first-seen order.
    """
    policy = policy or DefaultWeekPolicy()
    employees = merge_employee_lookup(batch, employee_lookup)

    totals: dict[EmployeeId, float] = {}
    for _, _, shift in batch.iter_shifts():
        totals[shift.employee_id] = totals.get(shift.employee_id, 0.0)
        totals[shift.employee_id] += shift_hours(shift)

    summaries = {}
    for emp_id, total in totals.items():
        employee = employees.get(emp_id)
        max_hours = employee.max_weekly_hours if employee else None
        if max_hours is None:
            max_hours = policy.default_max_weekly_hours()

        if max_hours is None:
            remaining = None
            over = False
        else:
            remaining = max_hours - total
            over = total > max_hours

        summaries[emp_id] = HoursSummary(
            employee_id=emp_id,
            total_scheduled_hours=total,
            max_weekly_hours=max_hours,
            hours_remaining=remaining,
            is_over_limit=over,
            employee_name=employee.name if employee else None,
        )
    return summaries
