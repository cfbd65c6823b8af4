"""Plain-text weekly report.

This module renders a human-readable review of a weekly batch:
- Week overview and per-day totals
- Per-employee hours against weekly caps
- Skill coverage gaps
- Validation violations and conflicts
"""

from pathlib import Path
from typing import Union

from shiftweek.domain.models import WeeklyAnalysis
from shiftweek.validation.result import ValidationResult


def _fmt_hours(value) -> str:
    return "-" if value is None else f"{value:.2f}"


class TextReportGenerator:
    """Generates plain-text weekly reports.

    Example:
        >>> generator = TextReportGenerator()
        >>> print(generator.generate_to_string(analysis, result))
    """

    def generate(
        self,
        analysis: WeeklyAnalysis,
        result: ValidationResult,
        output_path: Union[str, Path],
    ) -> str:
        """Generate the report and save it to a file.

        Returns:
            The generated text content.
        """
        content = self._generate_content(analysis, result)
        Path(output_path).write_text(content)
        return content

    def generate_to_string(
        self,
        analysis: WeeklyAnalysis,
        result: ValidationResult,
    ) -> str:
        return self._generate_content(analysis, result)

    def _generate_content(
        self,
        analysis: WeeklyAnalysis,
        result: ValidationResult,
    ) -> str:
        lines = []

        # Header
        lines.append("=" * 80)
        if analysis.week_start is None:
            lines.append("WEEKLY SCHEDULE REPORT - (empty batch)")
        else:
            lines.append(
                f"WEEKLY SCHEDULE REPORT - {analysis.week_start.isoformat()} "
                f"to {analysis.week_end.isoformat()}"
            )
        lines.append("=" * 80)
        lines.append("")

        status = "PASSED" if result.valid else f"FAILED ({len(result.errors)} violations)"
        lines.append(f"Validation: {status}")
        lines.append(f"Total Schedules: {analysis.total_schedules}")
        lines.append(f"Unique Employees: {analysis.unique_employees}")
        lines.append(f"Days: {analysis.unique_dates}")
        lines.append(f"Total Hours: {analysis.total_hours:.2f}")
        lines.append(f"Actual Hours: {analysis.week_totals.total_actual_hours:.2f}")
        lines.append(
            f"Schedules With Exceptions: {analysis.week_totals.schedules_with_exceptions}"
        )
        lines.append("")

        # Per-day breakdown
        lines.append("-" * 80)
        lines.append("DAILY BREAKDOWN")
        lines.append("-" * 80)
        lines.append(
            f"{'Date':<12} {'Day':<10} {'Shifts':>6} {'Staff':>6} {'Hours':>8}  Skills"
        )
        lines.append("-" * 80)
        for day_date, day in analysis.daily_analysis.items():
            if day.skill_coverage_complete:
                skills = "covered"
            else:
                skills = f"missing {day.to_dict()['missing_skills']}"
            lines.append(
                f"{day_date.isoformat():<12} {day_date.strftime('%A'):<10} "
                f"{day.total_schedules:>6} {day.unique_employees:>6} "
                f"{day.total_hours:>8.2f}  {skills}"
            )
        lines.append("")

        # Hours against caps
        lines.append("-" * 80)
        lines.append("EMPLOYEE HOURS")
        lines.append("-" * 80)
        lines.append(f"{'Employee':<24} {'Hours':>8} {'Max':>8} {'Left':>8}  Status")
        lines.append("-" * 80)
        for emp_id, summary in analysis.hours_summary.items():
            name = (summary.employee_name or str(emp_id))[:24]
            flag = "OVER LIMIT" if summary.is_over_limit else "ok"
            lines.append(
                f"{name:<24} {summary.total_scheduled_hours:>8.2f} "
                f"{_fmt_hours(summary.max_weekly_hours):>8} "
                f"{_fmt_hours(summary.hours_remaining):>8}  {flag}"
            )
        lines.append("")

        # Skill gaps
        gaps = {
            emp_id: coverage
            for emp_id, coverage in analysis.skill_coverage.items()
            if not coverage.fully_covered
        }
        lines.append("-" * 80)
        lines.append("SKILL COVERAGE GAPS")
        lines.append("-" * 80)
        if gaps:
            for emp_id, coverage in gaps.items():
                lines.append(
                    f"Employee {emp_id}: missing {coverage.to_dict()['missing_skills']}"
                )
        else:
            lines.append("All required skills covered.")
        lines.append("")

        # Violations
        lines.append("-" * 80)
        lines.append("VIOLATIONS")
        lines.append("-" * 80)
        if result.errors:
            for violation in result.violations:
                lines.append(f"  - {violation}")
        else:
            lines.append("None.")
        for warning in result.warnings:
            lines.append(f"  ! {warning}")

        lines.append("")
        lines.append("=" * 80)
        lines.append("END OF REPORT")
        lines.append("=" * 80)

        return "\n".join(lines)
