"""Text rendering of calendar snapshots."""

from .console_renderer import ConsoleRenderer, format_value

__all__ = ["ConsoleRenderer", "format_value"]
