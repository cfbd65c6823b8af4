"""Payload adapters between the transport layer and the engine."""

from shiftweek.transport.envelope import (
    build_analysis_response,
    build_process_response,
    build_week_summary,
)
from shiftweek.transport.payload import (
    PayloadError,
    parse_employees,
    parse_weekly_payload,
)

__all__ = [
    "PayloadError",
    "build_analysis_response",
    "build_process_response",
    "build_week_summary",
    "parse_employees",
    "parse_weekly_payload",
]
