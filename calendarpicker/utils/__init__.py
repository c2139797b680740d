"""Utility modules for the calendar picker."""

from .logging import VERBOSE, apply_command_line_overrides, get_log_level, setup_logging

__all__ = ["VERBOSE", "apply_command_line_overrides", "get_log_level", "setup_logging"]
