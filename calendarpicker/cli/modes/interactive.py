"""Interactive mode handler for the calendar picker CLI."""

import logging

from ...config.settings import CalendarPickerSettings
from ...display.console_renderer import ConsoleRenderer, format_value
from ...ui.interactive import InteractiveController
from ..config import build_session

logger = logging.getLogger(__name__)


async def run_interactive_mode(settings: CalendarPickerSettings) -> int:
    """Run the calendar with keyboard navigation until the user exits or applies.

    The applied value, if any, is printed on stdout after the screen is left.

    Args:
        settings: Effective settings

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    session = build_session(settings)
    controller = InteractiveController(session, ConsoleRenderer(settings))

    try:
        await controller.start()
    except KeyboardInterrupt:
        print("\nInteractive mode interrupted")
        return 0
    except Exception as e:
        logger.exception("Interactive mode failed")
        print(f"Interactive mode error: {e}")
        return 1

    if controller.applied_value is not None:
        print(format_value(controller.applied_value))
    return 0


__all__ = ["run_interactive_mode"]
