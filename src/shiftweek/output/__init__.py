"""Output generation for weekly reviews (text, PDF)."""

from shiftweek.output.pdf_report import WeeklyReportPDF
from shiftweek.output.text_report import TextReportGenerator

__all__ = [
    "TextReportGenerator",
    "WeeklyReportPDF",
]
