"""Policy definitions for weekly schedule rules.

Policies hold the configurable business rules (work-week length, fallback
hour caps) separately from the validation and analysis engines so they can be
tested and swapped independently.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


class WeekPolicy(ABC):
    """Abstract base class for work-week rules."""

    @abstractmethod
    def week_length_days(self) -> int:
        """Number of calendar days in a work week (inclusive span)."""
        pass

    @abstractmethod
    def default_max_weekly_hours(self) -> Optional[float]:
        """Weekly hour cap for employees whose own cap is unknown.

        Returns:
            The fallback cap, or None to treat unknown caps as unbounded.
        """
        pass

    def max_span_days(self) -> int:
        """Largest allowed ``max(date) - min(date)`` in days."""
        return self.week_length_days() - 1


@dataclass(frozen=True)
class DefaultWeekPolicy(WeekPolicy):
    """Default work-week policy.

    - Work week: 7 consecutive calendar days
    - Unknown hour caps: unbounded (never over limit)
    """

    week_days: int = 7
    fallback_max_weekly_hours: Optional[float] = None

    def __post_init__(self):
        if self.week_days < 1:
            raise ValueError(f"week_days must be at least 1, got {self.week_days}")

    def week_length_days(self) -> int:
        return self.week_days

    def default_max_weekly_hours(self) -> Optional[float]:
        return self.fallback_max_weekly_hours
