"""Validation module for verifying weekly batches."""

from shiftweek.validation.checks import (
    aggregate_hours,
    find_duplicate_dates,
    find_overlapping_pairs,
    find_overlaps,
    validate_week_window,
)
from shiftweek.validation.result import (
    ValidationError,
    ValidationErrorType,
    ValidationResult,
)
from shiftweek.validation.validator import BatchValidator, validate_batch

__all__ = [
    "BatchValidator",
    "ValidationError",
    "ValidationErrorType",
    "ValidationResult",
    "aggregate_hours",
    "find_duplicate_dates",
    "find_overlapping_pairs",
    "find_overlaps",
    "validate_batch",
    "validate_week_window",
]
