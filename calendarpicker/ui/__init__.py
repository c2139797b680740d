"""Calendar session, view and keyboard navigation."""

from .calendar import CalendarRender, CalendarSession
from .keyboard import KeyboardHandler, KeyCode, KeyEvent
from .navigation import KeyboardNavigator, command_for_key
from .view import ViewController

__all__ = [
    "CalendarRender",
    "CalendarSession",
    "KeyCode",
    "KeyEvent",
    "KeyboardHandler",
    "KeyboardNavigator",
    "ViewController",
    "command_for_key",
]
