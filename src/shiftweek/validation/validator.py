"""Validation of weekly schedule batches.

This module is the single source of truth for the rules a weekly batch must
satisfy before it is accepted. Every check runs on every call and every
failure is collected, so the caller sees all problems at once.
"""

import logging
from datetime import date
from typing import Optional

from shiftweek.domain.models import (
    DaySchedule,
    Employee,
    EmployeeId,
    EmployeeLookup,
    RejectedEntry,
    ShiftAssignment,
    WeeklyScheduleBatch,
)
from shiftweek.domain.policies import DefaultWeekPolicy, WeekPolicy
from shiftweek.domain.skills import resolve_coverage
from shiftweek.domain.time_utils import (
    InvalidFormatError,
    TimeLike,
    as_time_of_day,
)
from shiftweek.validation.checks import (
    aggregate_hours,
    find_duplicate_dates,
    find_overlapping_pairs,
    merge_employee_lookup,
    validate_week_window,
)
from shiftweek.validation.result import (
    ValidationError,
    ValidationErrorType,
    ValidationResult,
)

logger = logging.getLogger(__name__)


def _describe_interval(shift: ShiftAssignment) -> str:
    return f"{shift.scheduled_start}-{shift.scheduled_end}"


class BatchValidator:
    """Validates weekly batches against all structural and business rules.

    The validator holds only its policy, so one instance can be shared and
    called concurrently on independent batches.

    Example:
        >>> validator = BatchValidator()
        >>> result = validator.validate(batch, employees)
        >>> if not result.valid:
        ...     for violation in result.violations:
        ...         print(violation)
    """

    def __init__(self, policy: Optional[WeekPolicy] = None):
        self.policy = policy or DefaultWeekPolicy()

    def validate(
        self,
        batch: WeeklyScheduleBatch,
        employee_lookup: Optional[EmployeeLookup] = None,
    ) -> ValidationResult:
        """Validate a complete weekly batch.

        Args:
            batch: The batch to validate.
            employee_lookup: Dict mapping employee IDs to Employee objects.
                Overrides employee data attached to individual shifts.

        Returns:
            ValidationResult with the valid flag and all errors found.
        """
        result = ValidationResult()
        employees = merge_employee_lookup(batch, employee_lookup)

        for entry in batch.rejected_entries:
            self._report_rejected_entry(entry, result)

        # Structural checks on every shift
        for day in batch.days:
            for index, shift in enumerate(day.shifts):
                self._validate_shift_times(day.date, index, shift, result)

        # All dates inside one work week
        result.merge(validate_week_window(batch.dates, self.policy))

        self._validate_unique_dates(batch, result)

        # Overlaps are checked per day; consecutive days never conflict
        for day in batch.days:
            self._validate_day_overlaps(day, result)

        self._validate_weekly_hours(batch, employees, result)
        self._validate_skill_coverage(batch, employees, result)

        logger.debug(
            "Validated batch: %d days, %d shifts, %d violations",
            len(batch.days),
            batch.total_shifts,
            len(result.errors),
        )
        return result

    def _report_rejected_entry(self, entry: RejectedEntry, result: ValidationResult) -> None:
        result.add_error(
            ValidationError(
                error_type=ValidationErrorType.INVALID_FORMAT,
                message=(
                    f"Weekly schedule entry {entry.position} "
                    f"{entry.field_name}: {entry.message}"
                ),
                employee_id=entry.employee_id,
                details={
                    "entry": entry.position,
                    "field": entry.field_name,
                    "value": entry.value,
                },
            )
        )

    def _validate_shift_times(
        self,
        schedule_date: date,
        index: int,
        shift: ShiftAssignment,
        result: ValidationResult,
    ) -> None:
        """Check time formats and that the shift ends after it starts."""
        start = self._parse_time(
            schedule_date, index, shift, "scheduled_start_time", shift.scheduled_start, result
        )
        end = self._parse_time(
            schedule_date, index, shift, "scheduled_end_time", shift.scheduled_end, result
        )

        for field_name, value in (
            ("actual_start_time", shift.actual_start),
            ("actual_end_time", shift.actual_end),
        ):
            if value is not None:
                self._parse_time(schedule_date, index, shift, field_name, value, result)

        if start is not None and end is not None and end <= start:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.NON_POSITIVE_DURATION,
                    message=(
                        f"Shift {index} end time {end.isoformat()} must be after "
                        f"start time {start.isoformat()}"
                    ),
                    employee_id=shift.employee_id,
                    schedule_date=schedule_date,
                    shift_indexes=(index,),
                )
            )

    def _parse_time(
        self,
        schedule_date: date,
        index: int,
        shift: ShiftAssignment,
        field_name: str,
        value: TimeLike,
        result: ValidationResult,
    ):
        try:
            return as_time_of_day(value)
        except InvalidFormatError as e:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.INVALID_FORMAT,
                    message=f"Shift {index} {field_name}: {e}",
                    employee_id=shift.employee_id,
                    schedule_date=schedule_date,
                    shift_indexes=(index,),
                    details={"field": field_name, "value": value},
                )
            )
            return None

    def _validate_unique_dates(
        self,
        batch: WeeklyScheduleBatch,
        result: ValidationResult,
    ) -> None:
        for duplicate in find_duplicate_dates(batch.dates):
            count = batch.dates.count(duplicate)
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.DUPLICATE_DATE,
                    message=f"Duplicate date found in weekly schedule ({count} entries)",
                    schedule_date=duplicate,
                    details={"count": count},
                )
            )

    def _validate_day_overlaps(
        self,
        day: DaySchedule,
        result: ValidationResult,
    ) -> None:
        """Report every overlapping pair of shifts for one employee on one day."""
        for i, j in find_overlapping_pairs(day.shifts):
            first, second = day.shifts[i], day.shifts[j]
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.OVERLAP_VIOLATION,
                    message=(
                        f"has overlapping shifts {i} ({_describe_interval(first)}) "
                        f"and {j} ({_describe_interval(second)})"
                    ),
                    employee_id=first.employee_id,
                    schedule_date=day.date,
                    shift_indexes=(i, j),
                )
            )

    def _validate_weekly_hours(
        self,
        batch: WeeklyScheduleBatch,
        employees: dict[EmployeeId, Employee],
        result: ValidationResult,
    ) -> None:
        """Check aggregated weekly hours against each employee's cap."""
        for emp_id, summary in aggregate_hours(batch, employees, self.policy).items():
            if not summary.is_over_limit:
                continue
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.HOURS_OVER_LIMIT,
                    message=(
                        f"Weekly scheduled hours {summary.total_scheduled_hours:.2f} "
                        f"exceed max {summary.max_weekly_hours:.2f} "
                        f"by {summary.excess_hours:.2f} hours"
                    ),
                    employee_id=emp_id,
                    details={
                        "total_hours": summary.total_scheduled_hours,
                        "max_hours": summary.max_weekly_hours,
                        "excess_hours": summary.excess_hours,
                    },
                )
            )

    def _validate_skill_coverage(
        self,
        batch: WeeklyScheduleBatch,
        employees: dict[EmployeeId, Employee],
        result: ValidationResult,
    ) -> None:
        """Check that each shift's required skills are held by its employee."""
        for day, index, shift in batch.iter_shifts():
            if not shift.required_skill_ids:
                continue

            employee = employees.get(shift.employee_id)
            if employee is None:
                result.add_warning(
                    f"{day.date.isoformat()} Employee {shift.employee_id}: "
                    f"no employee data to check skills for shift {index}"
                )
                continue

            coverage = resolve_coverage(shift.required_skill_ids, employee.skill_ids)
            if coverage.fully_covered:
                continue

            missing = coverage.to_dict()["missing_skills"]
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.SKILL_COVERAGE_GAP,
                    message=f"Shift {index} is missing required skills {missing}",
                    employee_id=shift.employee_id,
                    schedule_date=day.date,
                    shift_indexes=(index,),
                    details={"missing_skills": missing},
                )
            )


def validate_batch(
    batch: WeeklyScheduleBatch,
    employee_lookup: Optional[EmployeeLookup] = None,
    policy: Optional[WeekPolicy] = None,
) -> ValidationResult:
    """Validate a batch with a one-off BatchValidator."""
    return BatchValidator(policy).validate(batch, employee_lookup)
