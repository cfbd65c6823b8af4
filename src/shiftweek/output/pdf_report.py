"""PDF generation for weekly schedule reviews.

This module creates printable PDF reports showing:
- Week overview and per-day totals
- Per-employee hours against weekly caps as a bar chart
- Skill coverage gaps, violations and conflicts
"""

from io import BytesIO
from pathlib import Path
from typing import Union

from shiftweek.domain.models import HoursSummary, WeeklyAnalysis
from shiftweek.validation.result import ValidationResult

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    "hours_ok": (0.4, 0.7, 0.4),  # Green
    "hours_over": (0.85, 0.35, 0.35),  # Red
    "hours_unknown": (0.6, 0.6, 0.6),  # Gray
    "cap_marker": (0.2, 0.2, 0.2),
    "row_shade": (0.95, 0.95, 0.95),
}


class WeeklyReportPDF:
    """Generates printable weekly review PDFs.

    Example:
        >>> generator = WeeklyReportPDF()
        >>> generator.generate(analysis, result, "week.pdf")
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin

    def generate(
        self,
        analysis: WeeklyAnalysis,
        result: ValidationResult,
        output_path: Union[str, Path],
    ) -> None:
        """Generate the PDF report and save it to a file."""
        try:
            from reportlab.lib.pagesizes import landscape, letter
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        c = canvas.Canvas(str(output_path), pagesize=landscape(letter))
        self._draw(c, analysis, result)
        c.save()

    def generate_to_buffer(
        self,
        analysis: WeeklyAnalysis,
        result: ValidationResult,
    ) -> BytesIO:
        """Generate the PDF report and return it as a bytes buffer."""
        try:
            from reportlab.lib.pagesizes import landscape, letter
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=landscape(letter))
        self._draw(c, analysis, result)
        c.save()
        buffer.seek(0)
        return buffer

    def _draw(self, c, analysis: WeeklyAnalysis, result: ValidationResult) -> None:
        self._draw_overview_page(c, analysis, result)
        self._draw_hours_page(c, analysis)
        self._draw_violations_pages(c, result)

    def _title(self, analysis: WeeklyAnalysis) -> str:
        if analysis.week_start is None:
            return "Weekly Schedule - empty batch"
        return (
            f"Weekly Schedule - {analysis.week_start.strftime('%b %d, %Y')} to "
            f"{analysis.week_end.strftime('%b %d, %Y')}"
        )

    def _draw_overview_page(
        self,
        c,
        analysis: WeeklyAnalysis,
        result: ValidationResult,
    ) -> None:
        """Draw header, week statistics and the daily breakdown table."""
        c.setFont("Helvetica-Bold", 16)
        c.drawString(self.margin, self.page_height - self.margin - 20, self._title(analysis))

        y = self.page_height - self.margin - 50
        c.setFont("Helvetica-Bold", 12)
        status = "PASSED" if result.valid else f"FAILED ({len(result.errors)} violations)"
        if result.valid:
            c.setFillColorRGB(*COLORS["hours_ok"])
        else:
            c.setFillColorRGB(*COLORS["hours_over"])
        c.drawString(self.margin, y, f"Validation: {status}")
        c.setFillColorRGB(0, 0, 0)
        y -= 25

        c.setFont("Helvetica", 10)
        stats = [
            f"Total Schedules: {analysis.total_schedules}",
            f"Unique Employees: {analysis.unique_employees}",
            f"Days Scheduled: {analysis.unique_dates}",
            f"Total Hours: {analysis.total_hours:.1f}",
            f"Actual Hours: {analysis.week_totals.total_actual_hours:.1f}",
            f"Schedules With Exceptions: {analysis.week_totals.schedules_with_exceptions}",
        ]
        for stat in stats:
            c.drawString(self.margin + 20, y, stat)
            y -= 15

        # Daily table
        y -= 20
        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Daily Breakdown")
        y -= 20

        columns = [
            ("Date", 0),
            ("Day", 90),
            ("Shifts", 180),
            ("Staff", 240),
            ("Hours", 300),
            ("Skills", 370),
        ]
        c.setFont("Helvetica-Bold", 9)
        for label, offset in columns:
            c.drawString(self.margin + offset, y, label)
        y -= 14

        c.setFont("Helvetica", 9)
        for row, (day_date, day) in enumerate(analysis.daily_analysis.items()):
            if row % 2 == 0:
                c.setFillColorRGB(*COLORS["row_shade"])
                c.rect(self.margin - 4, y - 4, self.page_width - 2 * self.margin, 14, fill=1, stroke=0)
                c.setFillColorRGB(0, 0, 0)

            if day.skill_coverage_complete:
                skills = "covered"
            else:
                skills = f"missing {day.to_dict()['missing_skills']}"
            values = [
                day_date.isoformat(),
                day_date.strftime("%A"),
                str(day.total_schedules),
                str(day.unique_employees),
                f"{day.total_hours:.1f}",
                skills[:60],
            ]
            for (_, offset), value in zip(columns, values):
                c.drawString(self.margin + offset, y, value)
            y -= 14

        c.showPage()

    def _draw_hours_page(self, c, analysis: WeeklyAnalysis) -> None:
        """Draw a horizontal bar per employee with their weekly cap marked."""
        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            "Employee Hours vs Weekly Cap",
        )

        summaries = list(analysis.hours_summary.values())
        if not summaries:
            c.setFont("Helvetica", 10)
            c.drawString(self.margin, self.page_height - self.margin - 50, "No employees scheduled.")
            c.showPage()
            return

        row_height = 18
        chart_left = self.margin + 140
        chart_width = self.page_width - chart_left - self.margin - 60
        top = self.page_height - self.margin - 50
        rows_per_page = int((top - self.margin) / row_height)

        scale_max = max(
            max(s.total_scheduled_hours for s in summaries),
            max((s.max_weekly_hours or 0.0) for s in summaries),
        ) or 1.0

        for page_start in range(0, len(summaries), rows_per_page):
            if page_start:
                c.setFont("Helvetica-Bold", 16)
                c.drawString(
                    self.margin,
                    self.page_height - self.margin - 20,
                    "Employee Hours vs Weekly Cap (continued)",
                )
            y = top
            for summary in summaries[page_start : page_start + rows_per_page]:
                y -= row_height
                self._draw_hours_row(c, summary, chart_left, chart_width, scale_max, y, row_height - 4)
            c.showPage()

    def _draw_hours_row(
        self,
        c,
        summary: HoursSummary,
        x: float,
        width: float,
        scale_max: float,
        y: float,
        height: float,
    ) -> None:
        name = summary.employee_name or str(summary.employee_id)
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica", 9)
        c.drawString(self.margin, y + height / 2 - 3, name[:24])

        if summary.max_weekly_hours is None:
            color = COLORS["hours_unknown"]
        elif summary.is_over_limit:
            color = COLORS["hours_over"]
        else:
            color = COLORS["hours_ok"]

        bar_width = (summary.total_scheduled_hours / scale_max) * width
        c.setFillColorRGB(*color)
        c.rect(x, y, bar_width, height, fill=1, stroke=0)

        if summary.max_weekly_hours is not None:
            cap_x = x + (summary.max_weekly_hours / scale_max) * width
            c.setStrokeColorRGB(*COLORS["cap_marker"])
            c.setLineWidth(1.5)
            c.line(cap_x, y - 2, cap_x, y + height + 2)

        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica", 8)
        label = f"{summary.total_scheduled_hours:.1f}h"
        if summary.max_weekly_hours is not None:
            label += f" / {summary.max_weekly_hours:.1f}h"
        c.drawString(x + width + 6, y + height / 2 - 3, label)

    def _draw_violations_pages(self, c, result: ValidationResult) -> None:
        """List every violation and warning, continuing over pages as needed."""
        lines = [f"- {v}" for v in result.violations] or ["No violations."]
        lines += [f"! {w}" for w in result.warnings]

        line_height = 13
        top = self.page_height - self.margin - 50
        lines_per_page = int((top - self.margin) / line_height)

        for page_start in range(0, len(lines), lines_per_page):
            c.setFont("Helvetica-Bold", 16)
            c.drawString(self.margin, self.page_height - self.margin - 20, "Violations")
            c.setFont("Helvetica", 8)
            y = top
            for line in lines[page_start : page_start + lines_per_page]:
                c.drawString(self.margin, y, line[:170])
                y -= line_height
            c.showPage()
