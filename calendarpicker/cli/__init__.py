"""CLI module for the calendar picker.

This module provides the command-line interface: argument parsing, settings
overrides and mode execution.
"""

import logging
from typing import List, Optional

from ..config.settings import CalendarPickerSettings, get_settings
from ..core.exceptions import CalendarConfigError
from ..utils.logging import apply_command_line_overrides, setup_logging
from .config import apply_cli_overrides, build_session
from .modes import run_interactive_mode, run_print_mode
from .parser import create_parser, parse_date

logger = logging.getLogger(__name__)


async def main_entry(argv: Optional[List[str]] = None) -> int:
    """Main entry point with argument parsing.

    Args:
        argv: Argument list, ``sys.argv[1:]`` when None

    Returns:
        Exit code (0 for success, 1 for runtime failure, 2 for invalid configuration)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.config:
        settings = CalendarPickerSettings(_config_file=args.config)
    else:
        settings = get_settings()

    settings = apply_command_line_overrides(settings, args)
    setup_logging(settings)

    try:
        settings = apply_cli_overrides(settings, args)
        if args.print_only:
            return run_print_mode(settings)
        return await run_interactive_mode(settings)
    except CalendarConfigError as e:
        logger.debug(f"Configuration rejected: {e!r}")
        print(f"Configuration error: {e}")
        return 2


__all__ = [
    "apply_cli_overrides",
    "build_session",
    "create_parser",
    "main_entry",
    "parse_date",
    "run_interactive_mode",
    "run_print_mode",
]
