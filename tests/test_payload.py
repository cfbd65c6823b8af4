"""Tests for request payload parsing and response envelopes."""

from datetime import date, datetime

import pytest

from shiftweek.transport import (
    PayloadError,
    build_analysis_response,
    build_process_response,
    parse_employees,
    parse_weekly_payload,
)
from shiftweek.validation import ValidationErrorType, validate_batch


def shift(emp_id, start, end, **extra):
    item = {
        "emp_info_id": emp_id,
        "scheduled_start_time": start,
        "scheduled_end_time": end,
    }
    item.update(extra)
    return item


class TestParseWeeklyPayload:
    """Tests for parse_weekly_payload."""

    def test_day_level_entries(self):
        batch = parse_weekly_payload(
            {
                "weekly_schedule": [
                    {
                        "date_of_day": "2024-01-15",
                        "schedules": [
                            shift(1, "08:00:00", "12:00:00"),
                            shift(2, "09:00:00", "17:00:00", status_id=3),
                        ],
                    },
                    {
                        "date_of_day": "2024-01-16",
                        "schedules": [shift(1, "08:00:00", "12:00:00")],
                    },
                ]
            }
        )

        assert batch.dates == [date(2024, 1, 15), date(2024, 1, 16)]
        assert batch.total_shifts == 3
        monday = batch.days[0]
        assert monday.shifts[1].employee_id == 2
        assert monday.shifts[1].status_id == 3
        assert monday.shifts[0].scheduled_start == "08:00:00"

    def test_legacy_entries_grouped_by_date(self):
        batch = parse_weekly_payload(
            {
                "weekly_schedule": [
                    {"date_of_day": "2024-01-15", **shift(1, "08:00:00", "12:00:00")},
                    {"date_of_day": "2024-01-16", **shift(1, "08:00:00", "12:00:00")},
                    {"date_of_day": "2024-01-15", **shift(2, "13:00:00", "17:00:00")},
                ]
            }
        )

        assert batch.dates == [date(2024, 1, 15), date(2024, 1, 16)]
        assert [s.employee_id for s in batch.days[0].shifts] == [1, 2]

    def test_mixed_entries(self):
        batch = parse_weekly_payload(
            {
                "weekly_schedule": [
                    {
                        "date_of_day": "2024-01-15",
                        "schedules": [shift(1, "08:00:00", "12:00:00")],
                    },
                    {"date_of_day": "2024-01-16", **shift(2, "08:00:00", "12:00:00")},
                ]
            }
        )
        assert batch.dates == [date(2024, 1, 15), date(2024, 1, 16)]
        assert batch.total_shifts == 2

    def test_repeated_day_level_date_kept_separate(self):
        entry = {
            "date_of_day": "2024-01-15",
            "schedules": [shift(1, "08:00:00", "12:00:00")],
        }
        batch = parse_weekly_payload({"weekly_schedule": [entry, entry]})
        assert len(batch.days) == 2

    def test_iso_datetime_date(self):
        batch = parse_weekly_payload(
            {
                "weekly_schedule": [
                    {
                        "date_of_day": "2024-01-15T00:00:00Z",
                        "schedules": [shift(1, "08:00:00", "12:00:00")],
                    }
                ]
            }
        )
        assert batch.dates == [date(2024, 1, 15)]

    def test_skill_shapes(self):
        batch = parse_weekly_payload(
            {
                "weekly_schedule": [
                    {
                        "date_of_day": "2024-01-15",
                        "schedules": [
                            shift(1, "08:00:00", "12:00:00", required_skills=[1, {"id": 2}]),
                            shift(2, "08:00:00", "12:00:00", required_skills=None),
                        ],
                    }
                ]
            }
        )
        first, second = batch.days[0].shifts
        assert first.required_skill_ids == frozenset({1, 2})
        assert second.required_skill_ids == frozenset()

    def test_embedded_employee(self):
        batch = parse_weekly_payload(
            {
                "weekly_schedule": [
                    {
                        "date_of_day": "2024-01-15",
                        "schedules": [
                            shift(
                                4,
                                "08:00:00",
                                "12:00:00",
                                employee={
                                    "id": 4,
                                    "skills": [{"id": 10}],
                                    "employment_info": {"max_weekly_hours": 32},
                                    "full_name": "Kim Lee",
                                },
                            )
                        ],
                    }
                ]
            }
        )
        employee = batch.days[0].shifts[0].employee
        assert employee.skill_ids == frozenset({10})
        assert employee.max_weekly_hours == 32
        assert employee.name == "Kim Lee"

    def test_malformed_times_pass_through(self):
        """Bad time strings are reported by the validator, not the parser."""
        batch = parse_weekly_payload(
            {
                "weekly_schedule": [
                    {"date_of_day": "2024-01-15", **shift(1, "8am", "12:00:00")}
                ]
            }
        )
        assert batch.days[0].shifts[0].scheduled_start == "8am"

    def test_empty_weekly_schedule(self):
        batch = parse_weekly_payload({"weekly_schedule": []})
        assert batch.days == ()

    def test_missing_weekly_schedule(self):
        with pytest.raises(PayloadError) as exc_info:
            parse_weekly_payload({})
        assert exc_info.value.issues
        assert "weekly_schedule" in str(exc_info.value)

    def test_bad_date_sets_entry_aside(self):
        batch = parse_weekly_payload(
            {
                "weekly_schedule": [
                    {
                        "date_of_day": "2024-01-15",
                        "schedules": [shift(1, "08:00:00", "12:00:00")],
                    },
                    {"date_of_day": "15/01/2024", "schedules": []},
                    {"date_of_day": "2024-02-30", **shift(6, "08:00:00", "12:00:00")},
                ]
            }
        )

        assert batch.dates == [date(2024, 1, 15)]
        first, second = batch.rejected_entries
        assert (first.position, first.field_name, first.value) == (1, "date_of_day", "15/01/2024")
        assert "YYYY-MM-DD" in first.message
        assert first.employee_id is None
        assert second.position == 2
        assert second.employee_id == 6

    def test_bad_date_without_shift_fields(self):
        """An unreadable entry is set aside even when nothing else is present."""
        batch = parse_weekly_payload({"weekly_schedule": [{"date_of_day": "2025-9-16"}]})
        assert batch.days == ()
        assert batch.rejected_entries[0].value == "2025-9-16"

    def test_null_date_sets_entry_aside(self):
        batch = parse_weekly_payload(
            {"weekly_schedule": [{"date_of_day": None, "schedules": []}]}
        )
        assert len(batch.rejected_entries) == 1

    def test_bad_date_reported_with_overlap(self):
        batch = parse_weekly_payload(
            {
                "weekly_schedule": [
                    {
                        "date_of_day": "2025-09-15",
                        "schedules": [
                            shift(1, "08:00:00", "12:00:00"),
                            shift(1, "11:00:00", "15:00:00"),
                        ],
                    },
                    {"date_of_day": "2025-9-16"},
                ]
            }
        )
        result = validate_batch(batch)

        assert not result.valid
        format_errors = result.errors_of_type(ValidationErrorType.INVALID_FORMAT)
        assert len(format_errors) == 1
        assert format_errors[0].details["entry"] == 1
        assert "date_of_day" in format_errors[0].message
        assert len(result.errors_of_type(ValidationErrorType.OVERLAP_VIOLATION)) == 1

    def test_datetime_objects_accepted(self):
        batch = parse_weekly_payload(
            {
                "weekly_schedule": [
                    {
                        "date_of_day": datetime(2024, 1, 15, 9, 30),
                        "schedules": [shift(1, "08:00:00", "12:00:00")],
                    }
                ]
            }
        )
        assert batch.dates == [date(2024, 1, 15)]
        assert batch.rejected_entries == ()

    def test_missing_shift_field(self):
        with pytest.raises(PayloadError) as exc_info:
            parse_weekly_payload(
                {
                    "weekly_schedule": [
                        {
                            "date_of_day": "2024-01-15",
                            "schedules": [{"emp_info_id": 1}],
                        }
                    ]
                }
            )
        assert len(exc_info.value.issues) == 2

    def test_payload_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_weekly_payload([])


class TestParseEmployees:
    """Tests for parse_employees."""

    def test_list(self):
        employees = parse_employees(
            [
                {"id": 1, "skills": [{"id": "A"}], "employment_info": {"max_weekly_hours": 40}},
                {"id": 2},
            ]
        )
        assert employees[1].skill_ids == frozenset({"A"})
        assert employees[1].max_weekly_hours == 40
        assert employees[2].max_weekly_hours is None
        assert employees[2].skill_ids == frozenset()

    def test_wrapped(self):
        employees = parse_employees({"employees": [{"id": 5, "full_name": "Sam"}]})
        assert employees[5].name == "Sam"

    def test_invalid(self):
        with pytest.raises(PayloadError):
            parse_employees([{"skills": []}])


class TestResponses:
    """Tests for the response envelopes."""

    @pytest.fixture
    def payload(self):
        return {
            "weekly_schedule": [
                {
                    "date_of_day": "2024-01-15",
                    "schedules": [
                        shift(1, "08:00:00", "12:00:00", required_skills=[1]),
                        shift(1, "11:00:00", "15:00:00"),
                    ],
                },
                {
                    "date_of_day": "2024-01-16",
                    "schedules": [shift(2, "09:00:00", "17:00:00")],
                },
            ]
        }

    @pytest.fixture
    def employees(self):
        return parse_employees(
            [
                {"id": 1, "skills": [{"id": 1}], "employment_info": {"max_weekly_hours": 40}},
                {"id": 2, "employment_info": {"max_weekly_hours": 6}},
            ]
        )

    def test_process_response(self, payload, employees):
        batch = parse_weekly_payload(payload)
        response = build_process_response(batch, employees)

        assert response["success"] is True
        validation = response["validation_result"]
        assert validation["valid"] is False
        assert len(validation["violations"]) == 2
        assert validation["hours_summary"]["2"]["is_over_limit"] is True
        assert validation["conflicts"][0]["type"] == "overlap"

        schedules = response["data"]["schedules"]
        assert len(schedules) == 3
        assert schedules[2]["date_of_day"] == "2024-01-16"
        assert schedules[0]["required_skills"] == [1]

        summary = response["data"]["week_summary"]
        assert summary["validation_status"] == "failed"
        assert summary["total_violations"] == 2
        assert summary["week_start"] == "2024-01-15"
        assert summary["week_end"] == "2024-01-16"
        assert summary["unique_dates"] == 2
        assert summary["employees_scheduled"] == 2
        assert summary["total_hours"] == 16.0

    def test_process_response_valid(self, employees):
        batch = parse_weekly_payload(
            {
                "weekly_schedule": [
                    {"date_of_day": "2024-01-15", **shift(1, "08:00:00", "12:00:00")}
                ]
            }
        )
        response = build_process_response(batch, employees)

        assert response["validation_result"]["valid"] is True
        assert response["validation_result"]["violations"] == []
        assert response["data"]["week_summary"]["validation_status"] == "passed"

    def test_analysis_response(self, payload, employees):
        batch = parse_weekly_payload(payload)
        response = build_analysis_response(batch, employees, employee_ids=[1])

        data = response["data"]
        assert response["success"] is True
        assert data["total_schedules"] == 2
        assert data["unique_employees"] == 1
        assert data["week_start"] == "2024-01-15"
        assert data["daily_analysis"]["2024-01-15"]["total_hours"] == 8.0
        assert data["daily_analysis"]["2024-01-16"]["total_schedules"] == 0
        monday_schedules = data["daily_analysis"]["2024-01-15"]["schedules"]
        assert [s["scheduled_start_time"] for s in monday_schedules] == ["08:00:00", "11:00:00"]
        assert monday_schedules[0]["date_of_day"] == "2024-01-15"
        assert data["daily_analysis"]["2024-01-16"]["schedules"] == []
        assert data["week_totals"]["total_hours"] == 8.0
