"""Built-in date-range presets and roving focus over preset tabs."""

import logging
from datetime import date, timedelta
from typing import Callable, List, Optional, Sequence

from .dates import add_months, add_years, start_of_week
from .models import Preset, RangeValue

logger = logging.getLogger(__name__)

TodayProvider = Callable[[], date]


def today_range(today: TodayProvider = date.today) -> RangeValue:
    day = today()
    return RangeValue(start=day, end=day)


def yesterday_range(today: TodayProvider = date.today) -> RangeValue:
    day = today() - timedelta(days=1)
    return RangeValue(start=day, end=day)


def this_week_range(today: TodayProvider = date.today) -> RangeValue:
    """Monday of the current week through today."""
    day = today()
    return RangeValue(start=start_of_week(day), end=day)


def last_week_range(today: TodayProvider = date.today) -> RangeValue:
    """The seven days before today, through today."""
    day = today()
    return RangeValue(start=day - timedelta(days=7), end=day)


def this_month_range(today: TodayProvider = date.today) -> RangeValue:
    day = today()
    return RangeValue(start=day.replace(day=1), end=day)


def last_month_range(today: TodayProvider = date.today) -> RangeValue:
    day = today()
    return RangeValue(start=add_months(day, -1), end=day)


def last_year_range(today: TodayProvider = date.today) -> RangeValue:
    day = today()
    return RangeValue(start=add_years(day, -1), end=day)


def default_presets(today: TodayProvider = date.today) -> List[Preset]:
    """Return the standard preset list.

    Args:
        today: Clock used by every resolver, injectable for tests

    Returns:
        Presets in display order
    """
    return [
        Preset(id="today", label="Today", resolver=lambda: today_range(today)),
        Preset(id="yesterday", label="Yesterday", resolver=lambda: yesterday_range(today)),
        Preset(id="this-week", label="This week", resolver=lambda: this_week_range(today)),
        Preset(id="last-week", label="Last week", resolver=lambda: last_week_range(today)),
        Preset(id="this-month", label="This month", resolver=lambda: this_month_range(today)),
        Preset(id="last-month", label="Last month", resolver=lambda: last_month_range(today)),
        Preset(id="last-year", label="Last year", resolver=lambda: last_year_range(today)),
    ]


def select_presets(ids: Sequence[str], today: TodayProvider = date.today) -> List[Preset]:
    """Pick built-in presets by id, keeping the requested order.

    Unknown ids are skipped with a warning.
    """
    available = {preset.id: preset for preset in default_presets(today)}
    chosen = []
    for preset_id in ids:
        preset = available.get(preset_id)
        if preset is None:
            logger.warning(f"Unknown built-in preset: {preset_id!r}")
            continue
        chosen.append(preset)
    return chosen


class PresetTabs:
    """Roving focus over a horizontal or vertical list of preset tabs.

    Only one tab is focusable at a time. Next/previous wrap around and skip
    disabled tabs; Home/End jump to the first/last enabled tab.
    """

    def __init__(self, presets: Sequence[Preset], active_id: Optional[str] = None) -> None:
        self._presets = list(presets)
        self._enabled = [i for i, preset in enumerate(self._presets) if not preset.disabled]
        self.focused_index = self._initial_focus(active_id)

    def _initial_focus(self, active_id: Optional[str]) -> int:
        if active_id is not None:
            for index in self._enabled:
                if self._presets[index].id == active_id:
                    return index
        return self._enabled[0] if self._enabled else -1

    @property
    def focused_preset(self) -> Optional[Preset]:
        if self.focused_index < 0:
            return None
        return self._presets[self.focused_index]

    def _position(self) -> int:
        try:
            return self._enabled.index(self.focused_index)
        except ValueError:
            return -1

    def focus_next(self) -> Optional[Preset]:
        if not self._enabled:
            return None
        position = self._position()
        if position == -1:
            self.focused_index = self._enabled[0]
        else:
            self.focused_index = self._enabled[(position + 1) % len(self._enabled)]
        return self.focused_preset

    def focus_previous(self) -> Optional[Preset]:
        if not self._enabled:
            return None
        position = self._position()
        if position == -1:
            self.focused_index = self._enabled[-1]
        else:
            self.focused_index = self._enabled[(position - 1) % len(self._enabled)]
        return self.focused_preset

    def focus_first(self) -> Optional[Preset]:
        if not self._enabled:
            return None
        self.focused_index = self._enabled[0]
        return self.focused_preset

    def focus_last(self) -> Optional[Preset]:
        if not self._enabled:
            return None
        self.focused_index = self._enabled[-1]
        return self.focused_preset

    def focus_id(self, preset_id: str) -> Optional[Preset]:
        """Move focus to a tab by id (click-to-focus)."""
        for index in self._enabled:
            if self._presets[index].id == preset_id:
                self.focused_index = index
                return self.focused_preset
        return None

    def tab_index(self, index: int) -> int:
        """Roving tabindex value for the tab at ``index``."""
        return 0 if index == self.focused_index else -1
