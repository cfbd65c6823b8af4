"""Response envelopes for the weekly schedule endpoints.

These helpers run validation and analysis over a batch and shape the results
the way the request handler returns them. HTTP status mapping and
serialization to bytes are left to the caller.
"""

from typing import Iterable, Optional

from shiftweek.analysis.weekly_analysis import WeeklyAnalysisBuilder
from shiftweek.domain.models import (
    EmployeeId,
    EmployeeLookup,
    WeeklyAnalysis,
    WeeklyScheduleBatch,
)
from shiftweek.domain.policies import WeekPolicy
from shiftweek.validation.result import ValidationResult
from shiftweek.validation.validator import BatchValidator


def _schedules(batch: WeeklyScheduleBatch) -> list[dict]:
    schedules = []
    for day, _, shift in batch.iter_shifts():
        item = shift.to_dict()
        item["date_of_day"] = day.date.isoformat()
        schedules.append(item)
    return schedules


def build_week_summary(analysis: WeeklyAnalysis, result: ValidationResult) -> dict:
    """Combine an analysis and a validation result into a week summary."""
    summary = analysis.to_dict()
    return {
        "week_start": summary["week_start"],
        "week_end": summary["week_end"],
        "total_schedules": analysis.total_schedules,
        "unique_employees": analysis.unique_employees,
        "employees_scheduled": len(analysis.hours_summary),
        "unique_dates": analysis.unique_dates,
        "total_hours": summary["total_hours"],
        "validation_status": "passed" if result.valid else "failed",
        "total_violations": len(result.errors),
        "skill_coverage_summary": summary["skill_coverage"],
        "hours_summary": summary["hours_summary"],
        "conflicts_summary": summary["conflicts"],
    }


def build_process_response(
    batch: WeeklyScheduleBatch,
    employee_lookup: Optional[EmployeeLookup] = None,
    policy: Optional[WeekPolicy] = None,
) -> dict:
    """Validate and analyze a batch for the weekly process endpoint.

    Returns:
        ``{"data": {"schedules", "week_summary"}, "validation_result"}``.
    """
    result = BatchValidator(policy).validate(batch, employee_lookup)
    analysis = WeeklyAnalysisBuilder(policy).build(batch, employee_lookup)
    summary = analysis.to_dict()

    return {
        "success": True,
        "message": (
            "Weekly schedule validated"
            if result.valid
            else f"Weekly schedule has {len(result.errors)} violation(s)"
        ),
        "data": {
            "schedules": _schedules(batch),
            "week_summary": build_week_summary(analysis, result),
        },
        "validation_result": {
            "valid": result.valid,
            "violations": result.violations,
            "warnings": list(result.warnings),
            "skill_coverage": summary["skill_coverage"],
            "hours_summary": summary["hours_summary"],
            "conflicts": summary["conflicts"],
        },
    }


def build_analysis_response(
    batch: WeeklyScheduleBatch,
    employee_lookup: Optional[EmployeeLookup] = None,
    employee_ids: Optional[Iterable[EmployeeId]] = None,
    policy: Optional[WeekPolicy] = None,
) -> dict:
    """Analyze a batch for the weekly analysis endpoint."""
    analysis = WeeklyAnalysisBuilder(policy).build(batch, employee_lookup, employee_ids)
    summary = analysis.to_dict()
    return {
        "success": True,
        "data": {
            "week_start": summary["week_start"],
            "week_end": summary["week_end"],
            "total_schedules": analysis.total_schedules,
            "unique_employees": analysis.unique_employees,
            "daily_analysis": summary["daily_analysis"],
            "week_totals": summary["week_totals"],
        },
    }
