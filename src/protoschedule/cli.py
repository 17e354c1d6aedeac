"""Command-line interface for protoschedule."""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from protoschedule.domain.decoding import decode_definition, load_definition
from protoschedule.domain.errors import ProtoscheduleError
from protoschedule.output.debug_generator import DebugGenerator
from protoschedule.output.pdf_generator import PDFGenerator
from protoschedule.scheduling.schedule import Schedule
from protoschedule.validation.validator import ScheduleValidator

logger = logging.getLogger(__name__)


def _parse_instant(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid instant {value!r}, expected ISO format like 2024-01-15T10:15"
        )


def _load_schedule(path: str, at: Optional[datetime]) -> Schedule:
    text = Path(path).read_text(encoding="utf-8")
    reference = at or datetime.now()
    logger.debug("loading %s relative to %s", path, reference)
    return Schedule(decode_definition(text), reference)


def run_show(path: str, at: Optional[datetime], days: bool = False) -> int:
    """Print the diagnostic dump of the week containing ``at``."""
    schedule = _load_schedule(path, at)
    print(DebugGenerator(include_days=days).generate_to_string(schedule), end="")
    return 0


def run_check(path: str, at: Optional[datetime]) -> int:
    """Report whether ``at`` is covered. Exit 0 when within, 1 otherwise."""
    instant = at or datetime.now()
    schedule = _load_schedule(path, instant)

    if not schedule.within(instant):
        print(f"{instant} is OUTSIDE schedule.")
        return 1

    print(f"{instant} is WITHIN schedule.")
    for interval in schedule.matching_intervals(instant):
        print(f"  {interval}")
    return 0


def run_validate(path: str) -> int:
    """Print every problem in the definition. Exit 0 when valid."""
    prototype = load_definition(path)
    result = ScheduleValidator().validate(prototype)

    print(f"{prototype.description or path}: {prototype.interval_count} intervals")
    for warning in result.warnings:
        print(f"  warning: {warning}")

    if result.is_valid:
        print("\nValidation: PASSED")
        return 0

    print(f"\nValidation: FAILED ({len(result.errors)} errors)")
    for error in result.errors:
        print(f"    - {error}")
    return 1


def run_pdf(path: str, output_path: str, at: Optional[datetime]) -> int:
    """Write the week timeline PDF."""
    schedule = _load_schedule(path, at)
    print(f"Generating PDF: {output_path}")
    PDFGenerator().generate(schedule, output_path)
    print("  PDF created successfully!")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="protoschedule",
        description="protoschedule - weekly prototype schedule queries",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s show desk.json                         Dump the current week
  %(prog)s show desk.json --at 2024-01-15 --days  Dump a given week with per-day counts
  %(prog)s check desk.json --at 2024-01-16T10:15  Is this instant covered?
  %(prog)s validate desk.json                     Report every bad token
  %(prog)s pdf desk.json -o week.pdf              Printable week timeline
        """,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    show_parser = subparsers.add_parser("show", help="Print the materialized week")
    show_parser.add_argument("definition", help="Schedule definition JSON file")
    show_parser.add_argument(
        "--at", "-a",
        type=_parse_instant,
        help="Instant inside the week to show (default: now)",
    )
    show_parser.add_argument(
        "--days", "-d",
        action="store_true",
        help="Append per-day interval and overlap counts",
    )

    check_parser = subparsers.add_parser("check", help="Check if an instant is covered")
    check_parser.add_argument("definition", help="Schedule definition JSON file")
    check_parser.add_argument(
        "--at", "-a",
        type=_parse_instant,
        help="Instant to check (default: now)",
    )

    validate_parser = subparsers.add_parser("validate", help="Validate a definition")
    validate_parser.add_argument("definition", help="Schedule definition JSON file")

    pdf_parser = subparsers.add_parser("pdf", help="Render the week as a PDF")
    pdf_parser.add_argument("definition", help="Schedule definition JSON file")
    pdf_parser.add_argument(
        "--output", "-o",
        type=str,
        required=True,
        help="Output PDF file path",
    )
    pdf_parser.add_argument(
        "--at", "-a",
        type=_parse_instant,
        help="Instant inside the week to render (default: now)",
    )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "show":
            return run_show(args.definition, args.at, args.days)
        elif args.command == "check":
            return run_check(args.definition, args.at)
        elif args.command == "validate":
            return run_validate(args.definition)
        elif args.command == "pdf":
            return run_pdf(args.definition, args.output, args.at)
        else:
            parser.print_help()
            return 1
    except (ProtoscheduleError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
