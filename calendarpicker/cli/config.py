"""Settings overrides and session construction for the CLI."""

import logging
from datetime import date
from typing import Any, Callable, Optional

from ..config.settings import CalendarPickerSettings
from ..core.models import CalendarMode, CalendarView, RangeValue
from ..core.selection import UNSET
from ..ui.calendar import CalendarSession

logger = logging.getLogger(__name__)


def apply_cli_overrides(settings: CalendarPickerSettings, args: Any) -> CalendarPickerSettings:
    """Apply calendar command-line options on top of the loaded settings.

    Args:
        settings: Settings loaded from defaults, environment and YAML
        args: Parsed command-line arguments

    Returns:
        The same settings object, updated in place
    """
    if getattr(args, "mode", None):
        settings.mode = CalendarMode(args.mode)
    if getattr(args, "view", None):
        settings.view = CalendarView(args.view)
    if getattr(args, "date", None):
        settings.initial_date = args.date
    if getattr(args, "min_date", None):
        settings.min_date = args.min_date
    if getattr(args, "max_date", None):
        settings.max_date = args.max_date
    if getattr(args, "presets", None) is not None:
        settings.show_presets = True
        settings.presets = args.presets
    if getattr(args, "hide_actions", False):
        settings.hide_actions = True

    logger.debug(
        f"Effective calendar settings: mode={settings.mode.value}, view={settings.view.value}, "
        f"min={settings.min_date}, max={settings.max_date}"
    )
    return settings


def build_session(
    settings: CalendarPickerSettings, today: Optional[Callable[[], date]] = None
) -> CalendarSession:
    """Create an uncontrolled calendar session from settings.

    Raises:
        CalendarConfigError: If the settings describe an invalid calendar
    """
    today = today or date.today
    options = settings.to_options(today)

    default_value: Any = UNSET
    if settings.initial_date is not None:
        if options.mode is CalendarMode.RANGE:
            default_value = RangeValue(start=settings.initial_date)
        else:
            default_value = settings.initial_date

    return CalendarSession(options, default_value=default_value, today=today)
