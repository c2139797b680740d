"""Keyboard navigation over the focused date (roving focus grid protocol).

Key events are first mapped to a :data:`NavigationCommand` by the pure
:func:`command_for_key`, then interpreted by :class:`KeyboardNavigator`. The
navigator only moves focus and pages the view; committing a date is delegated
to the selection click handler.
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Callable, Optional, Union

from ..core.dates import add_months, add_years, days_in_month, end_of_week, start_of_week
from ..core.models import coerce_date
from .keyboard import KeyCode, KeyEvent
from .view import ViewController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveBy:
    """Move focus by a number of days (negative moves backward)."""

    days: int


@dataclass(frozen=True)
class JumpToWeekStart:
    """Move focus to the Monday of the focused week."""


@dataclass(frozen=True)
class JumpToWeekEnd:
    """Move focus to the Sunday of the focused week."""


@dataclass(frozen=True)
class PageMonth:
    """Move focus by whole months."""

    delta: int


@dataclass(frozen=True)
class PageYear:
    """Move focus by whole years."""

    delta: int


@dataclass(frozen=True)
class Commit:
    """Select the focused date as if it had been clicked."""


NavigationCommand = Union[MoveBy, JumpToWeekStart, JumpToWeekEnd, PageMonth, PageYear, Commit]


def command_for_key(key: Union[KeyCode, KeyEvent, str], shift: bool = False) -> Optional[NavigationCommand]:
    """Map a key to a navigation command.

    Args:
        key: KeyCode, KeyEvent or DOM-style key name (``"ArrowLeft"``, ``" "``)
        shift: Whether Shift was held; turns month paging into year paging

    Returns:
        The command, or None when the key is not part of the grid protocol
    """
    if isinstance(key, KeyEvent):
        shift = shift or key.shift
        key = key.code
    elif isinstance(key, str):
        key = KeyCode.from_key_name(key)

    if key is KeyCode.LEFT_ARROW:
        return MoveBy(-1)
    if key is KeyCode.RIGHT_ARROW:
        return MoveBy(1)
    if key is KeyCode.UP_ARROW:
        return MoveBy(-7)
    if key is KeyCode.DOWN_ARROW:
        return MoveBy(7)
    if key is KeyCode.HOME:
        return JumpToWeekStart()
    if key is KeyCode.END:
        return JumpToWeekEnd()
    if key is KeyCode.PAGE_UP:
        return PageYear(-1) if shift else PageMonth(-1)
    if key is KeyCode.PAGE_DOWN:
        return PageYear(1) if shift else PageMonth(1)
    if key in (KeyCode.ENTER, KeyCode.SPACE):
        return Commit()
    return None


class KeyboardNavigator:
    """Tracks the focused date and interprets navigation commands.

    Whenever focus leaves the displayed month the view is paged to follow it,
    so focus and the visible grid never diverge.
    """

    def __init__(
        self,
        view: ViewController,
        on_commit: Callable[[date], Any],
        initial_focus: Optional[date] = None,
    ) -> None:
        """Initialize navigator.

        Args:
            view: View controller to keep in sync with focus
            on_commit: Day-click handler invoked by Enter/Space
            initial_focus: Starting focus, defaults to today
        """
        self.view = view
        self._on_commit = on_commit
        self._focused_date = coerce_date(initial_focus) or date.today()

        logger.debug(f"Keyboard navigator initialized with focus: {self._focused_date}")

    @property
    def focused_date(self) -> date:
        """The single date eligible for keyboard activation."""
        return self._focused_date

    def handle_key(self, key: Union[KeyCode, KeyEvent, str], shift: bool = False) -> bool:
        """Handle a key press on the grid.

        Returns:
            True if the key was consumed, False for keys outside the protocol
        """
        command = command_for_key(key, shift)
        if command is None:
            return False
        self.execute(command)
        return True

    def execute(self, command: NavigationCommand) -> None:
        """Interpret one navigation command."""
        current = self._focused_date

        if isinstance(command, Commit):
            logger.debug(f"Committing focused date {current}")
            self._on_commit(current)
            return

        try:
            if isinstance(command, MoveBy):
                target = current + timedelta(days=command.days)
            elif isinstance(command, JumpToWeekStart):
                target = start_of_week(current)
            elif isinstance(command, JumpToWeekEnd):
                target = end_of_week(current)
            elif isinstance(command, PageMonth):
                target = add_months(current, command.delta)
            elif isinstance(command, PageYear):
                target = add_years(current, command.delta)
            else:
                raise TypeError(f"Unknown navigation command: {command!r}")
        except (OverflowError, ValueError):
            logger.debug(f"Ignoring {command!r} from {current}: target outside the date range")
            return

        self.move_focus(target)

    def move_focus(self, target: date) -> date:
        """Focus a date, paging the view if it lies in another month.

        Focus stays where it is when the view cannot show the target month.
        """
        target = coerce_date(target)
        old_focus = self._focused_date
        if not self.view.page_to(target):
            logger.debug(f"Focus kept at {old_focus}: cannot display {target}")
            return old_focus
        self._focused_date = target

        logger.debug(f"Focus moved: {old_focus} -> {target}")
        return target

    def rehome(self) -> date:
        """Bring focus back into the displayed month after the view moved on its own.

        The day of month is kept where possible and clamped to the month length.
        """
        if self.view.contains(self._focused_date):
            return self._focused_date
        year, month = self.view.displayed_year, self.view.displayed_month
        day = min(self._focused_date.day, days_in_month(year, month))
        self._focused_date = date(year, month, day)
        logger.debug(f"Focus re-homed to {self._focused_date}")
        return self._focused_date
