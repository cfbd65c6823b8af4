"""Tests for work-week policies."""

import pytest

from shiftweek.domain.policies import DefaultWeekPolicy, WeekPolicy


class TestDefaultWeekPolicy:
    """Tests for DefaultWeekPolicy."""

    def test_defaults(self):
        policy = DefaultWeekPolicy()
        assert policy.week_length_days() == 7
        assert policy.max_span_days() == 6
        assert policy.default_max_weekly_hours() is None

    def test_custom(self):
        policy = DefaultWeekPolicy(week_days=5, fallback_max_weekly_hours=38.5)
        assert policy.max_span_days() == 4
        assert policy.default_max_weekly_hours() == 38.5

    def test_single_day_week(self):
        assert DefaultWeekPolicy(week_days=1).max_span_days() == 0

    @pytest.mark.parametrize("days", [0, -3])
    def test_rejects_non_positive_week(self, days):
        with pytest.raises(ValueError):
            DefaultWeekPolicy(week_days=days)

    def test_is_immutable(self):
        policy = DefaultWeekPolicy()
        with pytest.raises(AttributeError):
            policy.week_days = 5


class TestCustomPolicy:
    """A subclass only needs the two abstract rules."""

    def test_subclass(self):
        class FortnightPolicy(WeekPolicy):
            def week_length_days(self):
                return 14

            def default_max_weekly_hours(self):
                return 80.0

        policy = FortnightPolicy()
        assert policy.max_span_days() == 13

    def test_abstract(self):
        with pytest.raises(TypeError):
            WeekPolicy()
