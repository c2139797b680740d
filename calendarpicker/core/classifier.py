"""Day-cell state classification."""

import logging
from datetime import date
from typing import Optional

from .dates import in_range, same_day
from .models import CalendarMode, CalendarValue, Constraints, DayCell, DayState, RangeValue

logger = logging.getLogger(__name__)


def _classify_against_range(day: date, start: date, end: date) -> Optional[DayState]:
    """State of ``day`` relative to an ordered ``[start, end]`` pair."""
    if same_day(day, start):
        return DayState.SELECTED if same_day(start, end) else DayState.RANGE_START
    if same_day(day, end):
        return DayState.RANGE_END
    if in_range(day, start, end):
        return DayState.RANGE_CENTER
    return None


def _single_mode_state(day: date, value: CalendarValue) -> Optional[DayState]:
    if isinstance(value, RangeValue):
        return None
    return DayState.SELECTED if same_day(day, value) else None


def _range_mode_state(
    day: date, value: CalendarValue, hover_date: Optional[date]
) -> Optional[DayState]:
    if not isinstance(value, RangeValue) or value.start is None:
        return None

    if value.end is not None:
        return _classify_against_range(day, value.start, value.end)

    # In progress: preview against the hover date, ordered either way round
    if hover_date is not None:
        preview = RangeValue(start=value.start, end=hover_date)
        return _classify_against_range(day, preview.start, preview.end)

    return DayState.RANGE_START if same_day(day, value.start) else None


def classify(
    cell: DayCell,
    mode: CalendarMode,
    value: CalendarValue,
    hover_date: Optional[date],
    constraints: Constraints,
) -> DayState:
    """Assign a visual/interaction state to a grid cell.

    Disabled takes absolute precedence: a date forbidden by ``constraints``
    is reported as disabled even when it is part of ``value``.

    Args:
        cell: Grid cell to classify
        mode: Selection mode
        value: Current calendar value
        hover_date: Date under the pointer, if any
        constraints: Disabled-date constraints

    Returns:
        The cell's DayState
    """
    if constraints.is_disabled(cell.date):
        return DayState.DISABLED

    if mode is CalendarMode.SINGLE:
        state = _single_mode_state(cell.date, value)
    else:
        state = _range_mode_state(cell.date, value, hover_date)

    if state is not None:
        return state
    return DayState.TODAY if cell.is_today else DayState.DEFAULT


def is_interactive(state: DayState) -> bool:
    """Disabled cells accept neither clicks nor commit keys."""
    return state is not DayState.DISABLED
