"""Command-line interface for the premium leave urgency tool."""

import argparse
import logging
import sys
from typing import Optional

from premium_leave.domain.models import UrgencyLevel
from premium_leave.domain.policies import DefaultUrgencyPolicy
from premium_leave.output.pdf_generator import PDFGenerator
from premium_leave.output.report_generator import ReportGenerator
from premium_leave.parsing.dates import DateNormalizer, format_date
from premium_leave.parsing.fields import RecordBuilder
from premium_leave.parsing.loader import load_rows
from premium_leave.scheduling.analyzer import LeaveAnalyzer
from premium_leave.scheduling.calculator import LeaveCalculator
from premium_leave.scheduling.retirement import ColumnRetirementEstimator
from premium_leave.scheduling.urgency import UrgencyClassifier

logger = logging.getLogger(__name__)

LEVEL_CHOICES = {level.value: level for level in UrgencyLevel}


def run_analyze(
    input_path: str,
    pdf_path: Optional[str] = None,
    report_path: Optional[str] = None,
    level: Optional[str] = None,
    escalate_low: int = 3,
    escalate_medium: int = 6,
    fuzzy: bool = False,
) -> None:
    """Analyze a leave spreadsheet and print urgency groups."""
    rows = load_rows(input_path)
    print(f"Analyzing {len(rows)} rows from {input_path}...")

    policy = DefaultUrgencyPolicy(escalate_low=escalate_low, escalate_medium=escalate_medium)
    analyzer = LeaveAnalyzer(
        ColumnRetirementEstimator(),
        classifier=UrgencyClassifier(policy=policy),
        builder=RecordBuilder(fuzzy=fuzzy),
    )
    result = analyzer.analyze_rows(rows)

    counts = result.counts
    print(f"\n  Employees: {counts.total}")
    print(f"  Urgent: {counts.urgent}")
    print(f"  Medium: {counts.medium}")
    print(f"  Low: {counts.low}")
    print(f"  No leave scheduled: {counts.no_leave}")

    levels = [LEVEL_CHOICES[level]] if level else sorted(UrgencyLevel, key=lambda lvl: lvl.priority)
    for current in levels:
        entries = result.by_level(current)
        if not entries:
            continue
        print(f"\n{current.label} ({len(entries)}):")
        for entry in entries:
            print(f"  - {entry.name}: {entry.assessment.reason} (score {entry.score})")

    if len(result.diagnostics):
        print(f"\n  Data issues: {len(result.diagnostics)}")
        for diagnostic in list(result.diagnostics)[:5]:
            print(f"    - {diagnostic}")
        if len(result.diagnostics) > 5:
            print(f"    ... and {len(result.diagnostics) - 5} more issues")

    if report_path:
        print(f"\nWriting report: {report_path}")
        ReportGenerator().generate(result, report_path)

    if pdf_path:
        print(f"\nGenerating PDF: {pdf_path}")
        PDFGenerator().generate(result, pdf_path)
        print("  PDF created successfully!")


def run_parse_date(tokens: list[str]) -> None:
    """Print how each token is interpreted as a leave period."""
    normalizer = DateNormalizer()
    for token in tokens:
        period = normalizer.parse_period(token)
        if not period.is_valid:
            print(f"{token!r}: invalid")
        elif period.is_custom_range:
            note = " (conflict: start after end)" if period.has_conflict else ""
            print(f"{token!r}: range {format_date(period.start)} to {format_date(period.end)}{note}")
        else:
            print(f"{token!r}: starts {format_date(period.start)}")


def run_schedule(start_token: str, months: int) -> None:
    """Print the canonical leave calendar for a start date and month count."""
    start = DateNormalizer().parse_single_date(start_token)
    if start is None:
        raise ValueError(f"Could not parse start date: {start_token!r}")

    calculator = LeaveCalculator()
    end = calculator.compute_end(start, months)
    days = months * calculator.policy.days_per_month
    full_blocks, remainder = divmod(months, calculator.policy.months_per_full_leave)

    print(f"Leave from {format_date(start)} to {format_date(end)}")
    print(f"  {calculator.describe(full_blocks, remainder, days)}")
    for segment in calculator.split_into_segments(start, months):
        print(
            f"  {segment.sequence:>2}. {format_date(segment.start)} - "
            f"{format_date(segment.end)} ({segment.days} days)"
        )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Premium Leave - Leave scheduling and retirement urgency tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s analyze servidores.csv                 Classify every employee
  %(prog)s analyze servidores.xlsx --pdf out.pdf  Generate PDF output
  %(prog)s analyze servidores.csv --level urgent  Only list urgent employees

  %(prog)s parse-date "jan/2025" "01/03/25 a 29/05/25"
  %(prog)s schedule 01/03/2025 3                  Show a 3-month leave calendar
        """,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Analyze command
    analyze_parser = subparsers.add_parser("analyze", parents=[common], help="Classify employees in a leave spreadsheet")
    analyze_parser.add_argument("input", help="Input file (.csv, .json or .xlsx)")
    analyze_parser.add_argument(
        "--pdf",
        type=str,
        help="Output PDF file path",
    )
    analyze_parser.add_argument(
        "--report", "-r",
        type=str,
        help="Output text report file path",
    )
    analyze_parser.add_argument(
        "--level", "-l",
        type=str,
        choices=sorted(LEVEL_CHOICES),
        help="Only list employees of this urgency level",
    )
    analyze_parser.add_argument(
        "--escalate-low",
        type=int,
        default=3,
        help="Unscheduled months that raise low to medium (default: 3)",
    )
    analyze_parser.add_argument(
        "--escalate-medium",
        type=int,
        default=6,
        help="Unscheduled months that raise medium to urgent (default: 6)",
    )
    analyze_parser.add_argument(
        "--fuzzy",
        action="store_true",
        help="Match column names by substring when no alias matches exactly",
    )

    # Parse-date command
    parse_parser = subparsers.add_parser("parse-date", parents=[common], help="Show how leave-start cells are read")
    parse_parser.add_argument("tokens", nargs="+", help="Cell values to parse")

    # Schedule command
    schedule_parser = subparsers.add_parser("schedule", parents=[common], help="Show the leave calendar for a start date")
    schedule_parser.add_argument("start", help="Leave start date, e.g. 01/03/2025")
    schedule_parser.add_argument("months", type=int, help="Number of leave months")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "analyze":
            run_analyze(
                args.input,
                pdf_path=args.pdf,
                report_path=args.report,
                level=args.level,
                escalate_low=args.escalate_low,
                escalate_medium=args.escalate_medium,
                fuzzy=args.fuzzy,
            )
            return 0
        elif args.command == "parse-date":
            run_parse_date(args.tokens)
            return 0
        elif args.command == "schedule":
            run_schedule(args.start, args.months)
            return 0
        else:
            parser.print_help()
            return 1
    except (ValueError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
