"""Command-line interface for config-diffgram."""

import argparse
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich_argparse import RichHelpFormatter

from . import __version__

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
    )


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="config-diffgram",
        description="Compare pilot and production configuration snapshots row by row",
        formatter_class=RichHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # diff command
    diff_parser = subparsers.add_parser(
        "diff",
        help="Count added, modified, deleted and unchanged rows",
        description="Diff two snapshots and summarize row states per table.",
        epilog="""
Examples:
  # Print a summary table
  config-diffgram diff pilot.json production.json

  # Save the summary as JSON
  config-diffgram diff pilot.json production.json --output diff.json

Exit codes:
  - 0: No differences found
  - 1: Differences found or errors occurred
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    diff_parser.add_argument("pilot", help="Path to pilot snapshot JSON")
    diff_parser.add_argument("production", help="Path to production snapshot JSON")
    diff_parser.add_argument("--output", help="Output file for summary JSON (default: console)")
    diff_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )

    # report command
    report_parser = subparsers.add_parser(
        "report",
        help="Generate HTML change report",
        description="Generate a self-contained HTML change report.",
        epilog="""
Examples:
  # Generate HTML report
  config-diffgram report pilot.json production.json --output report.html

  # Custom title
  config-diffgram report pilot.json production.json --output report.html --title "Sync rules"

Report features:
  - Table of contents with one entry per section
  - One nested table per section, parent rows spanning their child rows
  - Changed values shown with the production value struck out
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    report_parser.add_argument("pilot", help="Path to pilot snapshot JSON")
    report_parser.add_argument("production", help="Path to production snapshot JSON")
    report_parser.add_argument("--output", required=True, help="Output HTML file path")
    report_parser.add_argument(
        "--title",
        default="Configuration Change Report",
        help="Report title (default: Configuration Change Report)",
    )
    report_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    _configure_logging(args.verbose)

    # Import command handlers
    if args.command == "diff":
        from config_diffgram.commands.diff import diff_snapshots

        return diff_snapshots(args.pilot, args.production, args.output)
    elif args.command == "report":
        from config_diffgram.commands.report import generate_report

        return generate_report(args.pilot, args.production, args.output, args.title)

    return 0


if __name__ == "__main__":
    sys.exit(main())
