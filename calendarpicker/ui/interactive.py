"""Interactive terminal controller for the calendar."""

import logging
from typing import Optional

from ..core.models import CalendarValue, SubView
from ..display.console_renderer import PICKER_COLUMNS, ConsoleRenderer
from .calendar import CalendarSession
from .keyboard import KeyboardHandler, KeyCode, KeyEvent

logger = logging.getLogger(__name__)

# Picker cursor movement per arrow key
_PICKER_MOVES = {
    KeyCode.LEFT_ARROW: -1,
    KeyCode.RIGHT_ARROW: 1,
    KeyCode.UP_ARROW: -PICKER_COLUMNS,
    KeyCode.DOWN_ARROW: PICKER_COLUMNS,
}


class InteractiveController:
    """Drives a :class:`CalendarSession` from terminal key presses."""

    def __init__(
        self,
        session: CalendarSession,
        renderer: Optional[ConsoleRenderer] = None,
        exit_on_apply: bool = True,
    ) -> None:
        """Initialize interactive controller.

        Args:
            session: Calendar session to drive
            renderer: Console renderer, a default one is created if omitted
            exit_on_apply: Stop listening once the value is applied
        """
        self.session = session
        self.renderer = renderer or ConsoleRenderer()
        self.keyboard = KeyboardHandler()
        self.exit_on_apply = exit_on_apply

        self._running = False
        self._presets_focused = False
        self._picker_cursor = 0
        self.applied_value: Optional[CalendarValue] = None

        self.keyboard.set_event_handler(self.handle_key_event)

        logger.info("Interactive controller initialized")

    @property
    def is_running(self) -> bool:
        """Check if interactive controller is running."""
        return self._running

    @property
    def presets_focused(self) -> bool:
        return self._presets_focused

    @property
    def picker_cursor(self) -> Optional[int]:
        """Highlighted month/year picker entry, None in the days view."""
        if self.session.sub_view is SubView.DAYS:
            return None
        return self._picker_cursor

    async def start(self) -> None:
        """Start interactive mode and block until the user exits."""
        if self._running:
            logger.warning("Interactive controller already running")
            return

        self._running = True
        logger.info("Starting interactive calendar")

        try:
            self.update_display()
            await self.keyboard.start_listening()
        finally:
            self._running = False
            logger.info("Interactive mode stopped")

    async def stop(self) -> None:
        """Stop interactive mode."""
        self._running = False
        self.keyboard.stop_listening()
        logger.debug("Interactive controller stop requested")

    def update_display(self) -> None:
        """Redraw the calendar."""
        content = self.renderer.render(self.session.render(), picker_cursor=self.picker_cursor)
        self.renderer.display_with_clear(content)

    async def handle_key_event(self, event: KeyEvent) -> None:
        """Apply one key event to the session and redraw.

        Args:
            event: Parsed key event
        """
        if event.code is KeyCode.ESCAPE:
            await self._handle_escape()
        elif event.code is KeyCode.CHARACTER and event.char:
            await self._handle_character(event.char)
        elif self.session.sub_view is not SubView.DAYS:
            self._handle_picker_key(event)
        elif self._presets_focused:
            self.session.handle_preset_key(event)
        else:
            self.session.handle_key(event)

        if self._running:
            self.update_display()

    async def _handle_escape(self) -> None:
        """Close an open picker, leave the preset tabs, or exit."""
        if self.session.sub_view is SubView.MONTHS:
            self.session.toggle_months_view()
        elif self.session.sub_view is SubView.YEARS:
            self.session.toggle_years_view()
        elif self._presets_focused:
            self._presets_focused = False
        else:
            logger.info("User requested exit from interactive mode")
            await self.stop()

    async def _handle_character(self, char: str) -> None:
        session = self.session
        if char == "m":
            if session.toggle_months_view() is SubView.MONTHS:
                self._picker_cursor = session.view.displayed_month - 1
        elif char == "y":
            if session.toggle_years_view() is SubView.YEARS:
                self._reset_year_cursor()
        elif char in "[]":
            self._step(-1 if char == "[" else 1)
        elif char == "c":
            if self._actions_available():
                session.clear()
        elif char == "a":
            await self._apply()
        elif char == "p":
            self._presets_focused = session.options.presets_visible and not self._presets_focused
        elif char.isdigit() and char != "0":
            self._select_preset_by_number(int(char))
        else:
            logger.debug(f"Unbound key: {char!r}")

    def _step(self, delta: int) -> None:
        """``[``/``]``: previous/next month, year or decade depending on the view."""
        sub_view = self.session.sub_view
        if sub_view is SubView.DAYS:
            self.session.step_month(delta)
        elif sub_view is SubView.MONTHS:
            self.session.step_year(delta)
        else:
            self.session.step_decade(delta)

    def _reset_year_cursor(self) -> None:
        window = self.session.view.year_window
        year = self.session.view.displayed_year
        self._picker_cursor = window.index(year) if year in window else 0

    def _handle_picker_key(self, event: KeyEvent) -> None:
        session = self.session
        size = 12 if session.sub_view is SubView.MONTHS else len(session.view.year_window)

        if event.code in _PICKER_MOVES:
            self._picker_cursor = (self._picker_cursor + _PICKER_MOVES[event.code]) % size
        elif event.code in (KeyCode.PAGE_UP, KeyCode.PAGE_DOWN):
            self._step(-1 if event.code is KeyCode.PAGE_UP else 1)
        elif event.code in (KeyCode.ENTER, KeyCode.SPACE):
            if session.sub_view is SubView.MONTHS:
                session.select_month(self._picker_cursor + 1)
            else:
                session.select_year(session.view.year_window[self._picker_cursor])

    def _select_preset_by_number(self, number: int) -> None:
        if not self.session.options.presets_visible:
            return
        presets = self.session.options.presets
        if number > len(presets):
            logger.debug(f"No preset number {number}")
            return
        self.session.select_preset(presets[number - 1].id)

    def _actions_available(self) -> bool:
        return not self.session.options.hide_actions and self.session.sub_view is SubView.DAYS

    async def _apply(self) -> None:
        if not self._actions_available():
            return
        self.applied_value = self.session.apply()
        logger.info(f"Applied value: {self.applied_value!r}")
        if self.exit_on_apply:
            await self.stop()
