"""Execution modes for the calendar picker CLI."""

from .interactive import run_interactive_mode
from .snapshot import run_print_mode

__all__ = ["run_interactive_mode", "run_print_mode"]
