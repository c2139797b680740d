"""Calendar session: one calendar instance and its render snapshot.

:class:`CalendarSession` composes the selection state machine, the view
controller, the keyboard navigator and the preset tabs, and is the only
object a host (or the terminal front-end) needs to talk to. Every event is
applied synchronously; :meth:`CalendarSession.render` then returns an
immutable :class:`CalendarRender` describing what to draw.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from ..core.classifier import classify, is_interactive
from ..core.dates import MONTH_SHORT_NAMES, WEEK_DAY_HEADERS, format_day_label, format_month_year
from ..core.models import (
    CalendarMode,
    CalendarOptions,
    CalendarValue,
    CalendarView,
    DayCell,
    DayState,
    RangeValue,
    SubView,
    coerce_date,
)
from ..core.presets import PresetTabs
from ..core.selection import UNSET, ChangeCallback, SelectionStateMachine, resolve_source
from .keyboard import KeyCode, KeyEvent
from .navigation import KeyboardNavigator
from .view import ViewController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CellRender:
    """One rendered day cell."""

    cell: DayCell
    state: DayState
    tabindex: int
    label: str
    interactive: bool

    @property
    def date(self) -> date:
        return self.cell.date

    @property
    def day(self) -> int:
        return self.cell.day

    @property
    def attributes(self) -> Dict[str, str]:
        """Accessibility attributes of the cell."""
        attrs = {
            "role": "gridcell",
            "tabindex": str(self.tabindex),
            "aria-label": self.label,
        }
        if self.state.is_selection:
            attrs["aria-selected"] = "true"
        if self.state is DayState.DISABLED:
            attrs["aria-disabled"] = "true"
        if self.cell.is_today:
            attrs["aria-current"] = "date"
        return attrs


@dataclass(frozen=True)
class GridRender:
    """One month grid; ``primary`` is False for the read-only second month."""

    year: int
    month: int
    weeks: List[List[CellRender]]
    primary: bool = True
    column_headers: Tuple[str, ...] = WEEK_DAY_HEADERS

    @property
    def label(self) -> str:
        return format_month_year(self.month, self.year)

    @property
    def attributes(self) -> Dict[str, str]:
        return {"role": "grid", "aria-label": self.label}

    @property
    def header_attributes(self) -> List[Dict[str, str]]:
        return [{"role": "columnheader", "aria-label": name} for name in self.column_headers]

    def cells(self) -> List[CellRender]:
        return [cell for week in self.weeks for cell in week]

    def find(self, day: date) -> Optional[CellRender]:
        """Return the cell showing ``day``, if the grid has one."""
        for cell in self.cells():
            if cell.date == day:
                return cell
        return None


@dataclass(frozen=True)
class MonthOption:
    month: int
    label: str
    selected: bool


@dataclass(frozen=True)
class MonthPickerRender:
    year: int
    months: List[MonthOption]


@dataclass(frozen=True)
class YearOption:
    year: int
    selectable: bool
    selected: bool


@dataclass(frozen=True)
class YearPickerRender:
    label: str
    years: List[YearOption]


@dataclass(frozen=True)
class PresetTabRender:
    """One preset tab of the ``tablist``."""

    id: str
    label: str
    selected: bool
    disabled: bool
    tabindex: int

    @property
    def attributes(self) -> Dict[str, str]:
        attrs = {
            "role": "tab",
            "tabindex": str(self.tabindex),
            "aria-selected": "true" if self.selected else "false",
        }
        if self.disabled:
            attrs["aria-disabled"] = "true"
        return attrs


@dataclass(frozen=True)
class CalendarRender:
    """Immutable snapshot of everything the presentation layer draws."""

    mode: CalendarMode
    view: CalendarView
    sub_view: SubView
    title: str
    value: CalendarValue
    focused_date: date
    hover_date: Optional[date]
    grids: List[GridRender] = field(default_factory=list)
    month_picker: Optional[MonthPickerRender] = None
    year_picker: Optional[YearPickerRender] = None
    presets: List[PresetTabRender] = field(default_factory=list)
    show_presets: bool = False
    show_actions: bool = True

    @property
    def primary_grid(self) -> Optional[GridRender]:
        return self.grids[0] if self.grids else None


def _initial_display_date(value: CalendarValue) -> Optional[date]:
    """Date whose month is shown first: the selected date or range start."""
    if isinstance(value, RangeValue):
        return value.start
    return value


class CalendarSession:
    """A single calendar instance.

    Example:
        >>> options = CalendarOptions(mode=CalendarMode.RANGE)
        >>> session = CalendarSession(options, today=lambda: date(2024, 3, 1))
        >>> _ = session.click_day(date(2024, 3, 10))
        >>> session.click_day(date(2024, 3, 5))
        RangeValue(start=datetime.date(2024, 3, 5), end=datetime.date(2024, 3, 10))
    """

    def __init__(
        self,
        options: Optional[CalendarOptions] = None,
        value: Any = UNSET,
        default_value: Any = UNSET,
        on_change: Optional[ChangeCallback] = None,
        on_apply: Optional[ChangeCallback] = None,
        on_clear: Optional[Callable[[], None]] = None,
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        """Initialize the session.

        Args:
            options: Calendar options, defaults to a single-date calendar
            value: Host-owned value; passing it makes the calendar controlled
            default_value: Initial value of an uncontrolled calendar
            on_change: Called with every new value
            on_apply: Called with the current value when Apply is pressed
            on_clear: Called after the value is cleared
            today: Clock used for today markers, defaults to ``date.today``

        Raises:
            CalendarConfigError: If the value does not fit ``options.mode``
        """
        self.options = options or CalendarOptions()
        self._today = today or date.today
        self.constraints = self.options.constraints()

        source = resolve_source(self.options.mode, value, default_value)
        initial = _initial_display_date(source.value) or self._today()

        self.view = ViewController(
            initial_date=initial,
            view=self.options.view,
            min_year=self.constraints.min_year,
            max_year=self.constraints.max_year,
            year_span=self.options.year_picker_span,
            year_offset=self.options.year_picker_offset,
            decade_step=self.options.decade_step,
        )
        self.navigator = KeyboardNavigator(self.view, self._commit_focused, initial_focus=initial)
        self.navigator.rehome()
        self.selection = SelectionStateMachine(
            self.options.mode,
            source,
            presets=self.options.presets,
            on_change=on_change,
            on_apply=on_apply,
            on_clear=on_clear,
            page_to=self.navigator.move_focus,
        )
        self.preset_tabs = PresetTabs(self.options.presets)
        self._hover_date: Optional[date] = None

        logger.debug(
            f"Calendar session created: mode={self.options.mode.value}, "
            f"view={self.options.view.value}, controlled={self.selection.is_controlled}"
        )

    # State accessors

    @property
    def value(self) -> CalendarValue:
        return self.selection.value

    @property
    def is_controlled(self) -> bool:
        return self.selection.is_controlled

    @property
    def focused_date(self) -> date:
        return self.navigator.focused_date

    @property
    def hover_date(self) -> Optional[date]:
        return self._hover_date

    @property
    def sub_view(self) -> SubView:
        return self.view.sub_view

    @property
    def active_preset_id(self) -> Optional[str]:
        return self.selection.active_preset_id

    def today(self) -> date:
        return self._today()

    def set_external_value(self, value: Any) -> None:
        """Replace the host-owned value of a controlled calendar."""
        self.selection.set_external_value(value)

    # Day grid events

    def _primary_grid_span(self) -> Tuple[date, date]:
        weeks = self.view.primary_grid(self._today())
        return weeks[0][0].date, weeks[-1][-1].date

    def _accepts_day_input(self, day: date) -> bool:
        """Only enabled cells of the primary grid in the days sub-view take input."""
        if self.view.sub_view is not SubView.DAYS:
            logger.debug(f"Ignoring day input {day} outside the days view")
            return False
        first, last = self._primary_grid_span()
        if not first <= day <= last:
            logger.debug(f"Ignoring day input {day} outside the primary grid")
            return False
        if self.constraints.is_disabled(day):
            logger.debug(f"Ignoring day input on disabled date {day}")
            return False
        return True

    def click_day(self, day: date) -> Optional[CalendarValue]:
        """Click a day cell.

        Returns:
            The new value, or None when the click was ignored
        """
        day = coerce_date(day)
        if not self._accepts_day_input(day):
            return None

        new_value = self.selection.click_day(day)
        self.navigator.move_focus(day)
        if isinstance(new_value, RangeValue) and new_value.is_complete:
            self._hover_date = None
        return new_value

    def _commit_focused(self, day: date) -> None:
        self.click_day(day)

    def hover_day(self, day: Optional[date]) -> None:
        """Pointer entered a day cell (``None`` when it left the grid)."""
        if day is None:
            self._hover_date = None
            return
        day = coerce_date(day)
        if not self._accepts_day_input(day):
            return
        self._hover_date = day

    def on_outside_interaction(self) -> None:
        """Boundary event from the host: pointer or focus left the calendar."""
        if self._hover_date is not None:
            logger.debug("Outside interaction, clearing hover")
        self._hover_date = None

    def handle_key(self, key: Union[KeyCode, KeyEvent, str], shift: bool = False) -> bool:
        """Keyboard event on the day grid.

        Returns:
            True if the key was consumed
        """
        if self.view.sub_view is not SubView.DAYS:
            return False
        return self.navigator.handle_key(key, shift)

    # Actions

    def clear(self) -> CalendarValue:
        self._hover_date = None
        return self.selection.clear()

    def apply(self) -> CalendarValue:
        return self.selection.apply()

    # Presets

    def select_preset(self, preset_id: str) -> Optional[RangeValue]:
        """Activate a preset tab.

        Returns:
            The preset's range, or None if the preset is unknown or disabled
        """
        range_value = self.selection.select_preset(preset_id)
        if range_value is not None:
            self.preset_tabs.focus_id(preset_id)
            self._hover_date = None
        return range_value

    def handle_preset_key(self, key: Union[KeyCode, KeyEvent, str]) -> bool:
        """Keyboard event on the preset tablist.

        Returns:
            True if the key was consumed
        """
        if not self.options.presets_visible:
            return False
        if isinstance(key, KeyEvent):
            key = key.code
        elif isinstance(key, str):
            key = KeyCode.from_key_name(key)

        tabs = self.preset_tabs
        if key in (KeyCode.RIGHT_ARROW, KeyCode.DOWN_ARROW):
            tabs.focus_next()
        elif key in (KeyCode.LEFT_ARROW, KeyCode.UP_ARROW):
            tabs.focus_previous()
        elif key is KeyCode.HOME:
            tabs.focus_first()
        elif key is KeyCode.END:
            tabs.focus_last()
        elif key in (KeyCode.ENTER, KeyCode.SPACE):
            preset = tabs.focused_preset
            if preset is not None:
                self.select_preset(preset.id)
        else:
            return False
        return True

    # View controls

    def step_month(self, delta: int) -> None:
        self.view.step_month(delta)
        self.navigator.rehome()

    def toggle_months_view(self) -> SubView:
        self._hover_date = None
        return self.view.toggle_months_view()

    def toggle_years_view(self) -> SubView:
        self._hover_date = None
        return self.view.toggle_years_view()

    def select_month(self, month: int) -> None:
        self.view.select_month(month)
        self.navigator.rehome()

    def step_year(self, delta: int) -> None:
        self.view.step_year(delta)
        self.navigator.rehome()

    def select_year(self, year: int) -> bool:
        selected = self.view.select_year(year)
        if selected:
            self.navigator.rehome()
        return selected

    def step_decade(self, delta: int) -> List[int]:
        return self.view.step_decade(delta)

    # Rendering

    def _render_grid(self, year: int, month: int, weeks: List[List[DayCell]], primary: bool) -> GridRender:
        focused = self.focused_date
        rendered = []
        for week in weeks:
            row = []
            for cell in week:
                state = classify(
                    cell, self.options.mode, self.value, self._hover_date, self.constraints
                )
                row.append(
                    CellRender(
                        cell=cell,
                        state=state,
                        tabindex=0 if primary and cell.date == focused else -1,
                        label=format_day_label(cell.date),
                        interactive=primary and is_interactive(state),
                    )
                )
            rendered.append(row)
        return GridRender(year=year, month=month, weeks=rendered, primary=primary)

    def _render_grids(self) -> List[GridRender]:
        today = self._today()
        grids = [
            self._render_grid(
                self.view.displayed_year,
                self.view.displayed_month,
                self.view.primary_grid(today),
                primary=True,
            )
        ]
        secondary = self.view.secondary_month
        secondary_weeks = self.view.secondary_grid(today)
        if secondary is not None and secondary_weeks is not None:
            grids.append(self._render_grid(secondary[0], secondary[1], secondary_weeks, primary=False))
        return grids

    def _render_month_picker(self) -> MonthPickerRender:
        return MonthPickerRender(
            year=self.view.displayed_year,
            months=[
                MonthOption(month=i + 1, label=name, selected=i + 1 == self.view.displayed_month)
                for i, name in enumerate(MONTH_SHORT_NAMES)
            ],
        )

    def _render_year_picker(self) -> YearPickerRender:
        return YearPickerRender(
            label=self.view.year_window_label,
            years=[
                YearOption(
                    year=year,
                    selectable=self.view.is_year_selectable(year),
                    selected=year == self.view.displayed_year,
                )
                for year in self.view.year_window
            ],
        )

    def _render_presets(self) -> List[PresetTabRender]:
        if not self.options.presets_visible:
            return []
        active = self.active_preset_id
        return [
            PresetTabRender(
                id=preset.id,
                label=preset.label,
                selected=preset.id == active,
                disabled=preset.disabled,
                tabindex=self.preset_tabs.tab_index(index),
            )
            for index, preset in enumerate(self.options.presets)
        ]

    def render(self) -> CalendarRender:
        """Build a snapshot of the current state for the presentation layer."""
        sub_view = self.view.sub_view
        return CalendarRender(
            mode=self.options.mode,
            view=self.options.view,
            sub_view=sub_view,
            title=self.view.title,
            value=self.value,
            focused_date=self.focused_date,
            hover_date=self._hover_date,
            grids=self._render_grids() if sub_view is SubView.DAYS else [],
            month_picker=self._render_month_picker() if sub_view is SubView.MONTHS else None,
            year_picker=self._render_year_picker() if sub_view is SubView.YEARS else None,
            presets=self._render_presets(),
            show_presets=self.options.presets_visible,
            show_actions=not self.options.hide_actions and sub_view is SubView.DAYS,
        )
