"""Weekly coverage and hours analysis.

This module builds the statistics a reviewer uses to decide whether a week's
staffing plan is acceptable:
- Schedule, employee and hour totals for the week and for each day
- Per-employee skill coverage across all of their shifts
- Per-employee hours against weekly caps
- Structured conflict descriptors for highlighting problem shifts

Analysis never fails on a bad batch. It returns a best-effort result so a
caller can preview a week before its violations are fixed.
"""

import logging
from collections import defaultdict
from typing import Iterable, Optional

from shiftweek.domain.models import (
    ConflictDescriptor,
    ConflictType,
    DayAnalysis,
    DaySchedule,
    Employee,
    EmployeeId,
    EmployeeLookup,
    ShiftAssignment,
    SkillCoverage,
    WeeklyAnalysis,
    WeeklyScheduleBatch,
    WeekTotals,
)
from shiftweek.domain.policies import DefaultWeekPolicy, WeekPolicy
from shiftweek.domain.skills import resolve_coverage
from shiftweek.domain.time_utils import actual_hours, shift_hours
from shiftweek.validation.checks import aggregate_hours, merge_employee_lookup
from shiftweek.validation.result import ValidationErrorType
from shiftweek.validation.validator import BatchValidator

logger = logging.getLogger(__name__)

# Validation errors that describe specific shifts and become conflicts
CONFLICT_TYPES = {
    ValidationErrorType.INVALID_FORMAT: ConflictType.INVALID_FORMAT,
    ValidationErrorType.NON_POSITIVE_DURATION: ConflictType.NON_POSITIVE_DURATION,
    ValidationErrorType.OVERLAP_VIOLATION: ConflictType.OVERLAP,
}


class WeeklyAnalysisBuilder:
    """Builds WeeklyAnalysis values from weekly batches.

    Example:
        >>> builder = WeeklyAnalysisBuilder()
        >>> analysis = builder.build(batch, employees)
        >>> analysis.hours_summary[7].is_over_limit
        False
    """

    def __init__(self, policy: Optional[WeekPolicy] = None):
        self.policy = policy or DefaultWeekPolicy()
        self._validator = BatchValidator(self.policy)

    def build(
        self,
        batch: WeeklyScheduleBatch,
        employee_lookup: Optional[EmployeeLookup] = None,
        employee_ids: Optional[Iterable[EmployeeId]] = None,
    ) -> WeeklyAnalysis:
        """Analyze a weekly batch.

        Args:
            batch: The batch to analyze.
            employee_lookup: Dict mapping employee IDs to Employee objects.
            employee_ids: If given, restrict every statistic to these employees.
                Week boundaries still span all dates in the batch.

        Returns:
            The weekly analysis.
        """
        employees = merge_employee_lookup(batch, employee_lookup)
        wanted = set(employee_ids) if employee_ids is not None else None

        def included(shift: ShiftAssignment) -> bool:
            return wanted is None or shift.employee_id in wanted

        shifts = [s for _, _, s in batch.iter_shifts() if included(s)]
        dates = batch.dates
        total_hours = sum(shift_hours(s) for s in shifts)

        hours_summary = {
            emp_id: summary
            for emp_id, summary in aggregate_hours(batch, employees, self.policy).items()
            if wanted is None or emp_id in wanted
        }

        analysis = WeeklyAnalysis(
            week_start=min(dates) if dates else None,
            week_end=max(dates) if dates else None,
            total_schedules=len(shifts),
            unique_employees=len({s.employee_id for s in shifts}),
            total_hours=total_hours,
            skill_coverage=self._build_skill_coverage(shifts, employees),
            hours_summary=hours_summary,
            conflicts=tuple(
                c for c in self._build_conflicts(batch, employees)
                if wanted is None or c.employee_id in wanted
            ),
            unique_dates=len(set(dates)),
            daily_analysis=self._build_daily_analysis(batch.days, employees, included),
            week_totals=WeekTotals(
                total_hours=total_hours,
                total_actual_hours=sum(actual_hours(s) for s in shifts),
                schedules_with_exceptions=sum(1 for s in shifts if s.has_exception),
            ),
        )

        logger.debug(
            "Analyzed week %s..%s: %d schedules, %d employees, %.2f hours",
            analysis.week_start,
            analysis.week_end,
            analysis.total_schedules,
            analysis.unique_employees,
            analysis.total_hours,
        )
        return analysis

    def _build_skill_coverage(
        self,
        shifts: list[ShiftAssignment],
        employees: dict[EmployeeId, Employee],
    ) -> dict[EmployeeId, SkillCoverage]:
        """Resolve each employee's combined requirements against their skills.

        Unknown employees are treated as holding no skills.
        """
        required: dict[EmployeeId, set] = {}
        for shift in shifts:
            required.setdefault(shift.employee_id, set()).update(shift.required_skill_ids)

        coverage = {}
        for emp_id, skills in required.items():
            employee = employees.get(emp_id)
            available = employee.skill_ids if employee else frozenset()
            coverage[emp_id] = resolve_coverage(skills, available)
        return coverage

    def _build_conflicts(
        self,
        batch: WeeklyScheduleBatch,
        employees: dict[EmployeeId, Employee],
    ) -> list[ConflictDescriptor]:
        """Reshape shift-level validation errors into conflict descriptors."""
        result = self._validator.validate(batch, employees)

        conflicts = []
        for error in result.errors:
            conflict_type = CONFLICT_TYPES.get(error.error_type)
            if conflict_type is None or not error.shift_indexes:
                continue
            second = error.shift_indexes[1] if len(error.shift_indexes) > 1 else None
            conflicts.append(
                ConflictDescriptor(
                    conflict_type=conflict_type,
                    schedule_date=error.schedule_date,
                    employee_id=error.employee_id,
                    first_shift=error.shift_indexes[0],
                    second_shift=second,
                    message=str(error),
                )
            )
        return conflicts

    def _build_daily_analysis(
        self,
        days: Iterable[DaySchedule],
        employees: dict[EmployeeId, Employee],
        included,
    ) -> dict:
        """Per-date statistics. Days sharing a date are combined."""
        shifts_by_date = defaultdict(list)
        for day in days:
            shifts_by_date[day.date].extend(s for s in day.shifts if included(s))

        daily = {}
        for day_date in sorted(shifts_by_date):
            shifts = shifts_by_date[day_date]
            emp_ids = {s.employee_id for s in shifts}

            required = set()
            for shift in shifts:
                required.update(shift.required_skill_ids)

            available = set()
            for emp_id in emp_ids:
                employee = employees.get(emp_id)
                if employee is not None:
                    available.update(employee.skill_ids)

            coverage = resolve_coverage(required, available)
            daily[day_date] = DayAnalysis(
                date=day_date,
                total_schedules=len(shifts),
                unique_employees=len(emp_ids),
                total_hours=sum(shift_hours(s) for s in shifts),
                required_skills=coverage.required,
                available_skills=coverage.available,
                missing_skills=coverage.missing,
                skill_coverage_complete=coverage.fully_covered,
                schedules_with_exceptions=sum(1 for s in shifts if s.has_exception),
                schedules=tuple(shifts),
            )
        return daily


def analyze(
    batch: WeeklyScheduleBatch,
    employee_lookup: Optional[EmployeeLookup] = None,
    employee_ids: Optional[Iterable[EmployeeId]] = None,
    policy: Optional[WeekPolicy] = None,
) -> WeeklyAnalysis:
    """Analyze a batch with a one-off WeeklyAnalysisBuilder."""
    return WeeklyAnalysisBuilder(policy).build(batch, employee_lookup, employee_ids)
