"""Print mode: render the calendar once and exit."""

from ...config.settings import CalendarPickerSettings
from ...display.console_renderer import ConsoleRenderer
from ..config import build_session


def run_print_mode(settings: CalendarPickerSettings) -> int:
    """Render the configured calendar to stdout.

    Args:
        settings: Effective settings

    Returns:
        Exit code (always 0)
    """
    session = build_session(settings)
    renderer = ConsoleRenderer(settings)
    print(renderer.render(session.render(), show_help=False))
    return 0


__all__ = ["run_print_mode"]
