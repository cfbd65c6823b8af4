"""Weekly coverage and hours analysis."""

from shiftweek.analysis.weekly_analysis import WeeklyAnalysisBuilder, analyze

__all__ = [
    "WeeklyAnalysisBuilder",
    "analyze",
]
