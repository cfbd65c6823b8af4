"""Skill coverage resolution."""

from typing import Iterable

from shiftweek.domain.models import SkillCoverage


def resolve_coverage(required: Iterable, available: Iterable) -> SkillCoverage:
    """Compare required skills against the skills an employee holds.

    An empty requirement is trivially covered.

    Example:
        >>> resolve_coverage({1, 2}, {1}).missing
        frozenset({2})
    """
    required_set = frozenset(required)
    available_set = frozenset(available)
    missing = required_set - available_set
    return SkillCoverage(
        required=required_set,
        available=available_set,
        missing=missing,
        fully_covered=not missing,
    )
