"""Logging configuration and setup utilities."""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, List, Optional, TextIO, Union

if TYPE_CHECKING:
    from ..config.settings import CalendarPickerSettings

# Custom log level between INFO(20) and DEBUG(10)
VERBOSE = 15
logging.addLevelName(VERBOSE, "VERBOSE")

ROOT_LOGGER_NAME = "calendarpicker"

THIRD_PARTY_LOGGERS = ("asyncio", "dateutil", "pydantic")


def verbose(self: logging.Logger, message: Any, *args: Any, **kwargs: Any) -> None:
    """Add verbose() method to Logger class for detailed diagnostic logging.

    Args:
        self (logging.Logger): Logger instance (automatically provided)
        message (Any): Log message or format string
        *args (Any): Arguments for string formatting
        **kwargs (Any): Additional keyword arguments for logging

    Example:
        >>> logger = logging.getLogger(__name__)
        >>> logger.verbose("Paged view to %s", title)
    """
    if self.isEnabledFor(VERBOSE):
        self._log(VERBOSE, message, args, **kwargs)


# Add verbose method to all Logger instances
logging.Logger.verbose = verbose  # type: ignore[attr-defined]


def get_log_level(level_name: str) -> int:
    """Get numeric log level from string name, including custom VERBOSE level.

    Args:
        level_name (str): Log level name (DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        int: Numeric log level value for use with logging methods

    Raises:
        AttributeError: If level name is not recognized or invalid

    Example:
        >>> get_log_level("verbose")
        15
    """
    level_name = level_name.upper()
    if level_name == "VERBOSE":
        return VERBOSE
    level: int = getattr(logging, level_name)
    return level


LEVEL_COLORS = {
    "DEBUG": "\033[35m",
    "VERBOSE": "\033[32m",
    "INFO": "\033[34m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[1;31m",
}
RESET = "\033[0m"


def stream_supports_color(stream: TextIO) -> bool:
    """Check whether ANSI colors should be written to ``stream``.

    Honours ``NO_COLOR`` and ``TERM=dumb``; anything that is not a TTY gets
    plain text.
    """
    if "NO_COLOR" in os.environ or os.environ.get("TERM", "").lower() == "dumb":
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class ConsoleFormatter(logging.Formatter):
    """Formatter for the stderr console handler; colors the level name only."""

    def __init__(self, fmt: str, datefmt: Optional[str] = None, use_colors: bool = False) -> None:
        super().__init__(fmt, datefmt=datefmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        color = LEVEL_COLORS.get(record.levelname) if self.use_colors else None
        if color is None:
            return formatted
        return formatted.replace(record.levelname, f"{color}{record.levelname}{RESET}", 1)


class RunLogFileHandler(logging.FileHandler):
    """Writes each run of the picker to its own ``<prefix>_<YYYYmmdd_HHMMSS>.log``.

    Older run logs in the same directory are pruned so at most ``keep``
    remain. The timestamp in the name orders the files, so pruning never
    depends on file modification times.
    """

    def __init__(self, log_dir: Union[str, Path], prefix: str = ROOT_LOGGER_NAME, keep: int = 5) -> None:
        self.log_dir = Path(log_dir)
        self.prefix = prefix
        self.keep = keep

        self.log_dir.mkdir(parents=True, exist_ok=True)
        run_stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        super().__init__(str(self.log_dir / f"{prefix}_{run_stamp}.log"), encoding="utf-8")

        self.prune()

    def run_logs(self) -> List[Path]:
        """Run log files in ``log_dir``, oldest first."""
        return sorted(self.log_dir.glob(f"{self.prefix}_*.log"))

    def prune(self) -> List[Path]:
        """Delete the oldest run logs beyond ``keep``.

        Returns:
            The files that were removed
        """
        stale = self.run_logs()[: -self.keep] if self.keep > 0 else []
        removed = []
        for path in stale:
            if Path(self.baseFilename) == path:
                continue
            try:
                path.unlink()
            except OSError as e:
                logging.getLogger(__name__).debug(f"Could not remove old run log {path}: {e}")
                continue
            removed.append(path)
        return removed


def setup_logging(settings: "CalendarPickerSettings") -> logging.Logger:
    """Configure the ``calendarpicker`` logger from settings.

    Console output goes to stderr so it does not mix with the rendered
    calendar on stdout. File output, when enabled, goes to a timestamped
    file per run.

    Args:
        settings: Application settings with a ``logging`` section

    Returns:
        The configured package root logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)  # Allow all levels, handlers will filter
    logger.handlers.clear()
    logger.propagate = False

    log_settings = settings.logging

    if log_settings.console_enabled:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(get_log_level(log_settings.console_level))
        console_handler.setFormatter(
            ConsoleFormatter(
                "%(asctime)s - %(levelname)s - %(message)s",
                datefmt="%H:%M:%S",
                use_colors=log_settings.console_colors and stream_supports_color(sys.stderr),
            )
        )
        logger.addHandler(console_handler)

    if log_settings.file_enabled:
        if log_settings.file_directory:
            log_dir = Path(log_settings.file_directory)
        else:
            log_dir = settings.data_dir / "logs"

        file_handler = RunLogFileHandler(
            log_dir=log_dir,
            prefix=log_settings.file_prefix,
            keep=log_settings.max_log_files,
        )
        file_handler.setLevel(get_log_level(log_settings.file_level))

        if log_settings.include_function_names:
            file_format = (
                "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
            )
        else:
            file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_handler.setFormatter(logging.Formatter(file_format, datefmt="%Y-%m-%d %H:%M:%S"))

        logger.addHandler(file_handler)
        logger.info(f"Logging to file: {file_handler.baseFilename}")

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    third_party_level = get_log_level(log_settings.third_party_level)
    for lib in THIRD_PARTY_LOGGERS:
        logging.getLogger(lib).setLevel(third_party_level)

    logger.debug(f"Logging initialized (console={log_settings.console_level})")
    return logger


def apply_command_line_overrides(
    settings: "CalendarPickerSettings", args: Any
) -> "CalendarPickerSettings":
    """Apply command-line argument overrides to logging settings.

    Priority order: Command-line > Environment > YAML > Defaults. The
    settings object is modified in place and returned for convenience.

    Args:
        settings (CalendarPickerSettings): Current settings object to modify
        args (Any): Parsed command-line arguments from argparse

    Returns:
        CalendarPickerSettings: Settings object with command-line overrides applied
    """
    if getattr(args, "log_level", None):
        settings.logging.console_level = args.log_level
        settings.logging.file_level = args.log_level

    if getattr(args, "verbose", False):
        settings.logging.console_level = "VERBOSE"
        settings.logging.file_level = "VERBOSE"

    if getattr(args, "quiet", False):
        settings.logging.console_level = "ERROR"

    if getattr(args, "log_dir", None):
        settings.logging.file_enabled = True
        settings.logging.file_directory = args.log_dir

    if getattr(args, "no_log_colors", False):
        settings.logging.console_colors = False

    return settings
