"""Tests for weekly coverage and hours analysis."""

from datetime import date, timedelta

import pytest

from shiftweek.analysis import WeeklyAnalysisBuilder, analyze
from shiftweek.domain.models import (
    ConflictType,
    DaySchedule,
    Employee,
    ShiftAssignment,
    WeeklyAnalysis,
    WeeklyScheduleBatch,
)
from shiftweek.domain.policies import DefaultWeekPolicy

MONDAY = date(2024, 1, 15)


class TestWeeklyAnalysisBuilder:
    """Tests for WeeklyAnalysisBuilder."""

    @pytest.fixture
    def builder(self):
        return WeeklyAnalysisBuilder()

    @pytest.fixture
    def employees(self):
        return {
            1: Employee(id=1, skill_ids={"A"}, max_weekly_hours=40, name="Ana"),
            2: Employee(id=2, skill_ids={"A", "B", "C"}, max_weekly_hours=30),
        }

    @pytest.fixture
    def week(self):
        """A mixed week with skills, exceptions and actual times."""
        return WeeklyScheduleBatch(
            days=(
                DaySchedule(
                    date=MONDAY,
                    shifts=(
                        ShiftAssignment(
                            1,
                            "08:00:00",
                            "16:00:00",
                            required_skill_ids={"A", "B"},
                            actual_start="08:00:00",
                            actual_end="15:30:00",
                        ),
                        ShiftAssignment(2, "12:00:00", "20:00:00", required_skill_ids={"C"}),
                    ),
                ),
                DaySchedule(
                    date=MONDAY + timedelta(days=2),
                    shifts=(
                        ShiftAssignment(
                            2,
                            "09:00:00",
                            "13:00:00",
                            agree_on_exception=True,
                            exception_notes="Covering inventory",
                        ),
                    ),
                ),
            )
        )

    def test_week_totals(self, builder, employees, week):
        analysis = builder.build(week, employees)

        assert analysis.week_start == MONDAY
        assert analysis.week_end == MONDAY + timedelta(days=2)
        assert analysis.total_schedules == 3
        assert analysis.unique_employees == 2
        assert analysis.unique_dates == 2
        assert analysis.total_hours == 20.0
        assert analysis.week_totals.total_hours == 20.0
        assert analysis.week_totals.total_actual_hours == 7.5
        assert analysis.week_totals.schedules_with_exceptions == 1

    def test_skill_coverage_per_employee(self, builder, employees, week):
        """Employee 1 needs {A, B} but only holds {A}."""
        analysis = builder.build(week, employees)

        coverage = analysis.skill_coverage[1]
        assert coverage.required == frozenset({"A", "B"})
        assert coverage.missing == frozenset({"B"})
        assert not coverage.fully_covered
        assert analysis.skill_coverage[2].fully_covered
        assert not analysis.fully_covered

    def test_coverage_complete_for_every_employee(self, builder, employees, week):
        analysis = builder.build(week, employees)
        for coverage in analysis.skill_coverage.values():
            assert coverage.fully_covered == (not coverage.missing)
            assert coverage.missing == coverage.required - coverage.available

    def test_unknown_employee_holds_no_skills(self, builder):
        batch = WeeklyScheduleBatch(
            days=(
                DaySchedule(
                    MONDAY,
                    (ShiftAssignment(9, "09:00:00", "10:00:00", required_skill_ids={1, 2}),),
                ),
            )
        )
        coverage = builder.build(batch).skill_coverage[9]
        assert coverage.available == frozenset()
        assert coverage.missing == frozenset({1, 2})

    def test_hours_over_limit(self, builder):
        """Five nine-hour shifts against a 40 hour cap."""
        batch = WeeklyScheduleBatch(
            days=tuple(
                DaySchedule(
                    MONDAY + timedelta(days=i),
                    (ShiftAssignment(7, "08:00:00", "17:00:00"),),
                )
                for i in range(5)
            )
        )
        analysis = builder.build(batch, {7: Employee(id=7, max_weekly_hours=40)})

        summary = analysis.hours_summary[7]
        assert summary.total_scheduled_hours == 45.0
        assert summary.is_over_limit
        assert summary.hours_remaining == -5.0
        assert analysis.employees_over_limit == [7]

    def test_empty_batch(self, builder):
        analysis = builder.build(WeeklyScheduleBatch())

        assert analysis.total_schedules == 0
        assert analysis.unique_employees == 0
        assert analysis.total_hours == 0.0
        assert analysis.week_start is None
        assert analysis.week_end is None
        assert analysis.skill_coverage == {}
        assert analysis.hours_summary == {}
        assert analysis.conflicts == ()
        assert analysis.daily_analysis == {}
        assert analysis.fully_covered

    def test_daily_analysis(self, builder, employees, week):
        analysis = builder.build(week, employees)

        assert list(analysis.daily_analysis) == [MONDAY, MONDAY + timedelta(days=2)]
        monday = analysis.daily_analysis[MONDAY]
        assert monday.total_schedules == 2
        assert monday.unique_employees == 2
        assert monday.total_hours == 16.0
        # Employee 2 brings B, so the day as a whole is covered
        assert monday.required_skills == frozenset({"A", "B", "C"})
        assert monday.skill_coverage_complete

        wednesday = analysis.daily_analysis[MONDAY + timedelta(days=2)]
        assert wednesday.schedules_with_exceptions == 1
        assert wednesday.to_dict()["total_employees"] == 1

    def test_daily_analysis_sorted_and_merged(self, builder):
        tuesday = MONDAY + timedelta(days=1)
        batch = WeeklyScheduleBatch(
            days=(
                DaySchedule(tuesday, (ShiftAssignment(1, "09:00:00", "10:00:00"),)),
                DaySchedule(MONDAY, (ShiftAssignment(1, "09:00:00", "10:00:00"),)),
                DaySchedule(tuesday, (ShiftAssignment(2, "09:00:00", "11:00:00"),)),
            )
        )
        analysis = builder.build(batch)

        assert list(analysis.daily_analysis) == [MONDAY, tuesday]
        assert analysis.daily_analysis[tuesday].total_schedules == 2
        assert analysis.daily_analysis[tuesday].total_hours == 3.0
        assert analysis.unique_dates == 2

    def test_conflicts(self, builder):
        batch = WeeklyScheduleBatch(
            days=(
                DaySchedule(
                    MONDAY,
                    (
                        ShiftAssignment(1, "08:00:00", "12:00:00"),
                        ShiftAssignment(1, "11:00:00", "15:00:00"),
                        ShiftAssignment(2, "18:00:00", "10:00:00"),
                    ),
                ),
            )
        )
        conflicts = builder.build(batch).conflicts

        by_type = {c.conflict_type: c for c in conflicts}
        overlap = by_type[ConflictType.OVERLAP]
        assert (overlap.first_shift, overlap.second_shift) == (0, 1)
        assert overlap.employee_id == 1
        assert overlap.schedule_date == MONDAY

        bad = by_type[ConflictType.NON_POSITIVE_DURATION]
        assert bad.first_shift == 2
        assert bad.second_shift is None
        assert bad.to_dict()["type"] == "non_positive_duration"

    def test_week_level_violations_are_not_conflicts(self, builder):
        batch = WeeklyScheduleBatch(
            days=(
                DaySchedule(MONDAY, (ShiftAssignment(1, "09:00:00", "10:00:00"),)),
                DaySchedule(
                    MONDAY + timedelta(days=10),
                    (ShiftAssignment(1, "09:00:00", "10:00:00"),),
                ),
            )
        )
        assert builder.build(batch).conflicts == ()

    def test_employee_filter(self, builder, employees, week):
        analysis = builder.build(week, employees, employee_ids=[2])

        assert analysis.total_schedules == 2
        assert analysis.unique_employees == 1
        assert analysis.total_hours == 12.0
        assert set(analysis.skill_coverage) == {2}
        assert set(analysis.hours_summary) == {2}
        # Week bounds still cover the whole batch
        assert analysis.week_start == MONDAY
        assert analysis.daily_analysis[MONDAY].total_schedules == 1

    def test_daily_analysis_lists_schedules(self, builder, employees, week):
        analysis = builder.build(week, employees, employee_ids=[2])

        monday = analysis.daily_analysis[MONDAY]
        assert monday.schedules == (week.days[0].shifts[1],)
        data = monday.to_dict()["schedules"]
        assert data[0]["emp_info_id"] == 2
        assert data[0]["required_skills"] == ["C"]
        assert data[0]["date_of_day"] == "2024-01-15"

    def test_result_maps_are_read_only(self, builder, employees, week):
        analysis = builder.build(week, employees)

        with pytest.raises(TypeError):
            analysis.hours_summary[3] = analysis.hours_summary[1]
        with pytest.raises(TypeError):
            del analysis.skill_coverage[1]
        with pytest.raises(AttributeError):
            analysis.daily_analysis.clear()

    def test_result_maps_detached_from_inputs(self):
        coverage = {}
        analysis = WeeklyAnalysis(
            week_start=None,
            week_end=None,
            total_schedules=0,
            unique_employees=0,
            total_hours=0.0,
            skill_coverage=coverage,
        )
        coverage[1] = None
        assert dict(analysis.skill_coverage) == {}

    def test_idempotent(self, builder, employees, week):
        first = builder.build(week, employees)
        second = builder.build(week, employees)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_to_dict_keys(self, builder, employees, week):
        data = builder.build(week, employees).to_dict()

        assert data["week_start"] == "2024-01-15"
        assert data["week_end"] == "2024-01-17"
        assert set(data["hours_summary"]) == {"1", "2"}
        assert data["hours_summary"]["1"]["employee_name"] == "Ana"
        assert data["hours_summary"]["2"]["employee_name"] == "2"
        assert data["skill_coverage"]["1"]["missing_skills"] == ["B"]
        assert set(data["daily_analysis"]) == {"2024-01-15", "2024-01-17"}
        assert data["week_totals"]["total_actual_hours"] == 7.5


class TestAnalyzeFunction:
    """Tests for the analyze convenience function."""

    def test_policy_fallback_cap(self):
        batch = WeeklyScheduleBatch(
            days=(DaySchedule(MONDAY, (ShiftAssignment(1, "06:00:00", "18:00:00"),)),)
        )
        policy = DefaultWeekPolicy(fallback_max_weekly_hours=10)
        analysis = analyze(batch, policy=policy)

        assert analysis.hours_summary[1].is_over_limit
        assert analysis.hours_summary[1].hours_remaining == -2.0
