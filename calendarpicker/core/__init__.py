"""Calendar date-selection engine core: date math, classification and selection."""

from .classifier import classify
from .dates import add_months, days_in_month, enumerate_month_grid, in_range, same_day
from .exceptions import CalendarConfigError, CalendarError
from .models import (
    CalendarMode,
    CalendarOptions,
    CalendarView,
    Constraints,
    DayCell,
    DayOrigin,
    DayState,
    Preset,
    RangeValue,
    SubView,
)
from .selection import ExternalValue, OwnedValue, SelectionStateMachine

__all__ = [
    "CalendarConfigError",
    "CalendarError",
    "CalendarMode",
    "CalendarOptions",
    "CalendarView",
    "Constraints",
    "DayCell",
    "DayOrigin",
    "DayState",
    "ExternalValue",
    "OwnedValue",
    "Preset",
    "RangeValue",
    "SelectionStateMachine",
    "SubView",
    "add_months",
    "classify",
    "days_in_month",
    "enumerate_month_grid",
    "in_range",
    "same_day",
]
