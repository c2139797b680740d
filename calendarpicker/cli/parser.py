"""Command-line argument parsing for the calendar picker.

This module handles command-line argument parsing, including setup of
argument groups and date validation.
"""

import argparse
import logging
from datetime import date, datetime
from typing import List, Optional

from .. import __version__
from ..core.models import CalendarMode, CalendarView

logger = logging.getLogger(__name__)


def parse_date(date_str: str) -> date:
    """Parse date string in YYYY-MM-DD format for command-line arguments.

    Args:
        date_str (str): Date string to parse in YYYY-MM-DD format

    Returns:
        date: Parsed date

    Raises:
        argparse.ArgumentTypeError: If date format is invalid or date is not parseable

    Example:
        >>> parse_date("2024-01-15")
        datetime.date(2024, 1, 15)
    """
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError as err:
        raise argparse.ArgumentTypeError(
            f"Invalid date format: {date_str}. Use YYYY-MM-DD"
        ) from err


def parse_preset_ids(value: str) -> List[str]:
    """Split a comma-separated preset id list; an empty string means all presets."""
    return [item.strip() for item in value.split(",") if item.strip()]


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser.

    Returns:
        argparse.ArgumentParser: Configured parser with calendar, logging
            and output options

    Example:
        >>> parser = create_parser()
        >>> args = parser.parse_args(["--mode", "range", "--presets"])
        >>> args.presets
        []
    """
    parser = argparse.ArgumentParser(
        prog="calendarpicker",
        description="Calendar Picker - keyboard-driven date and date-range selection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                   # Pick a single date interactively
  %(prog)s --mode range --presets            # Pick a range, with all built-in presets
  %(prog)s --mode range --presets today,last-week --view dual-month
  %(prog)s --date 2024-03-10 --print         # Render March 2024 once and exit
        """,
    )

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}", help="Show version information"
    )

    parser.add_argument(
        "--config", metavar="PATH", help="YAML configuration file (overrides the default search)"
    )

    # Calendar options
    calendar_group = parser.add_argument_group("calendar", "Selection and display options")

    calendar_group.add_argument(
        "--mode",
        choices=[mode.value for mode in CalendarMode],
        help="Selection mode (default: single)",
    )

    calendar_group.add_argument(
        "--view",
        choices=[view.value for view in CalendarView],
        help="Show one month or two consecutive months (default: single-month)",
    )

    calendar_group.add_argument(
        "--date",
        type=parse_date,
        metavar="YYYY-MM-DD",
        help="Preselected date; the range start in range mode",
    )

    calendar_group.add_argument(
        "--min-date", type=parse_date, metavar="YYYY-MM-DD", help="Earliest selectable date"
    )

    calendar_group.add_argument(
        "--max-date", type=parse_date, metavar="YYYY-MM-DD", help="Latest selectable date"
    )

    calendar_group.add_argument(
        "--presets",
        nargs="?",
        const=[],
        type=parse_preset_ids,
        metavar="IDS",
        help="Show preset tabs (range mode); optional comma-separated ids, default all",
    )

    calendar_group.add_argument(
        "--hide-actions", action="store_true", help="Hide the Clear/Apply actions"
    )

    calendar_group.add_argument(
        "--print",
        dest="print_only",
        action="store_true",
        help="Render the calendar once and exit instead of running interactively",
    )

    # Logging options
    logging_group = parser.add_argument_group("logging", "Logging configuration options")

    logging_group.add_argument(
        "--log-level",
        choices=["DEBUG", "VERBOSE", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set log level for console and file output",
    )

    verbosity = logging_group.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging (VERBOSE level)"
    )
    verbosity.add_argument(
        "--quiet", "-q", action="store_true", help="Only show errors on the console"
    )

    logging_group.add_argument(
        "--log-dir", metavar="PATH", help="Write timestamped log files to this directory"
    )

    logging_group.add_argument(
        "--no-log-colors", action="store_true", help="Disable colored console log output"
    )

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments (``sys.argv`` when ``argv`` is None)."""
    return create_parser().parse_args(argv)


__all__ = ["create_parser", "parse_args", "parse_date", "parse_preset_ids"]
