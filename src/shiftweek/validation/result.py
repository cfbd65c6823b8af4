"""Validation error and result types."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Hashable, Optional


class ValidationErrorType(Enum):
    """Types of validation errors."""

    INVALID_FORMAT = "invalid_format"
    NON_POSITIVE_DURATION = "non_positive_duration"
    WEEK_WINDOW_VIOLATION = "week_window_violation"
    DUPLICATE_DATE = "duplicate_date"
    OVERLAP_VIOLATION = "overlap_violation"
    HOURS_OVER_LIMIT = "hours_over_limit"
    SKILL_COVERAGE_GAP = "skill_coverage_gap"


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    message: str
    employee_id: Optional[Hashable] = None
    schedule_date: Optional[date] = None
    shift_indexes: tuple = ()
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.schedule_date is not None:
            parts.append(self.schedule_date.isoformat())
        if self.employee_id is not None:
            parts.append(f"Employee {self.employee_id}:")
        parts.append(self.message)
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of validating a weekly batch.

    Every detected problem is collected; ``valid`` is False as soon as one
    error has been added.
    """

    valid: bool = True
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def violations(self) -> list[str]:
        """Errors rendered as messages, in detection order."""
        return [str(error) for error in self.errors]

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)

    def merge(self, other: "ValidationResult") -> None:
        """Append all errors and warnings from another result."""
        for error in other.errors:
            self.add_error(error)
        self.warnings.extend(other.warnings)

    def errors_of_type(self, error_type: ValidationErrorType) -> list[ValidationError]:
        return [e for e in self.errors if e.error_type == error_type]

    def to_dict(self) -> dict:
        return {"valid": self.valid, "violations": self.violations}
