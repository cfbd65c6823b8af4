"""Command-line interface for the weekly schedule engine."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from shiftweek.analysis.weekly_analysis import WeeklyAnalysisBuilder
from shiftweek.domain.models import Employee, EmployeeId, WeeklyScheduleBatch
from shiftweek.domain.policies import DefaultWeekPolicy
from shiftweek.output.pdf_report import WeeklyReportPDF
from shiftweek.output.text_report import TextReportGenerator
from shiftweek.transport.envelope import build_analysis_response, build_process_response
from shiftweek.transport.payload import PayloadError, parse_employees, parse_weekly_payload
from shiftweek.validation.validator import BatchValidator

logger = logging.getLogger("shiftweek")

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_BAD_INPUT = 2


def read_json(path: str):
    try:
        return json.loads(Path(path).read_text())
    except json.JSONDecodeError as e:
        raise PayloadError(f"{path} is not valid JSON: {e}") from e


def load_inputs(
    payload_path: str,
    employees_path: Optional[str] = None,
) -> tuple[WeeklyScheduleBatch, dict[EmployeeId, Employee]]:
    """Load a weekly payload and optional employee file.

    An ``employees`` list inside the payload file is used as reference data
    too; entries from ``employees_path`` take precedence.
    """
    data = read_json(payload_path)
    batch = parse_weekly_payload(data)

    employees: dict[EmployeeId, Employee] = {}
    if isinstance(data, dict) and "employees" in data:
        employees.update(parse_employees(data["employees"]))
    if employees_path:
        employees.update(parse_employees(read_json(employees_path)))

    logger.info(
        "Loaded %d days, %d shifts, %d employees",
        len(batch.days),
        batch.total_shifts,
        len(employees),
    )
    return batch, employees


def _write_output(text: str, output_path: Optional[str]) -> None:
    if output_path:
        Path(output_path).write_text(text)
        print(f"Wrote {output_path}")
    else:
        print(text)


def run_validate(args, policy: DefaultWeekPolicy) -> int:
    batch, employees = load_inputs(args.payload, args.employees)
    response = build_process_response(batch, employees, policy)
    _write_output(json.dumps(response, indent=2, default=str), args.output)
    return EXIT_OK if response["validation_result"]["valid"] else EXIT_INVALID


def run_analyze(args, policy: DefaultWeekPolicy) -> int:
    batch, employees = load_inputs(args.payload, args.employees)
    response = build_analysis_response(batch, employees, args.employee_ids, policy)
    _write_output(json.dumps(response, indent=2, default=str), args.output)
    return EXIT_OK


def run_report(args, policy: DefaultWeekPolicy) -> int:
    batch, employees = load_inputs(args.payload, args.employees)
    result = BatchValidator(policy).validate(batch, employees)
    analysis = WeeklyAnalysisBuilder(policy).build(batch, employees)

    if args.format == "pdf":
        if not args.output:
            print("error: --output is required for PDF reports", file=sys.stderr)
            return EXIT_BAD_INPUT
        WeeklyReportPDF().generate(analysis, result, args.output)
        print(f"Wrote {args.output}")
    else:
        _write_output(TextReportGenerator().generate_to_string(analysis, result), args.output)

    return EXIT_OK if result.valid else EXIT_INVALID


def _employee_id(value: str):
    # Employee IDs are numeric on the wire unless they clearly are not
    return int(value) if value.isdigit() else value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shiftweek",
        description="Validate and analyze weekly shift schedules",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--week-days",
        type=int,
        default=7,
        help="Length of the work week in days (default: 7)",
    )
    parser.add_argument(
        "--default-max-hours",
        type=float,
        default=None,
        help="Weekly hour cap for employees without one (default: unbounded)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    def add_common(sub):
        sub.add_argument("payload", help="Weekly schedule payload (JSON)")
        sub.add_argument(
            "--employees", "-e",
            type=str,
            help="Employee reference data (JSON list)",
        )
        sub.add_argument(
            "--output", "-o",
            type=str,
            help="Output file path (default: stdout)",
        )

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a weekly batch and print the process response",
    )
    add_common(validate_parser)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Print the weekly analysis response",
    )
    add_common(analyze_parser)
    analyze_parser.add_argument(
        "--employee-id",
        dest="employee_ids",
        action="append",
        type=_employee_id,
        help="Restrict analysis to this employee (repeatable)",
    )

    report_parser = subparsers.add_parser(
        "report",
        help="Render a weekly review report",
    )
    add_common(report_parser)
    report_parser.add_argument(
        "--format", "-f",
        type=str,
        default="text",
        choices=["text", "pdf"],
        help="Report format (default: text)",
    )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    commands = {
        "validate": run_validate,
        "analyze": run_analyze,
        "report": run_report,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return EXIT_BAD_INPUT

    try:
        policy = DefaultWeekPolicy(
            week_days=args.week_days,
            fallback_max_weekly_hours=args.default_max_hours,
        )
        return command(args, policy)
    except (ValueError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT


if __name__ == "__main__":
    sys.exit(main())
