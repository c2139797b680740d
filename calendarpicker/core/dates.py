"""
Pure date arithmetic for month grids.

Everything here is stateless and deterministic given its inputs. Months are
1-based (1..12) like :class:`datetime.date`. Weeks start on Monday.
"""

import calendar
import logging
from datetime import MAXYEAR, MINYEAR, date, datetime, timedelta
from typing import List, Optional, Tuple, Union

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from .models import DayCell, DayOrigin, coerce_date

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7

WEEK_DAY_HEADERS = ("Mo", "Tu", "We", "Th", "Fr", "Sa", "Su")

WEEK_DAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

MONTH_SHORT_NAMES = tuple(name[:3] for name in MONTH_NAMES)

DateLike = Union[date, datetime]


def days_in_month(year: int, month: int) -> int:
    """Get the number of days in a month.

    Args:
        year: Four-digit year
        month: Month number, 1..12

    Returns:
        Day number of the last day of the month
    """
    return calendar.monthrange(year, month)[1]


def day_of_week_monday_first(day: DateLike) -> int:
    """Get the weekday index with Monday = 0 and Sunday = 6."""
    return coerce_date(day).weekday()


def same_day(a: Optional[DateLike], b: Optional[DateLike]) -> bool:
    """Check if two dates fall on the same calendar day.

    Missing values never match, including two missing values.
    """
    if a is None or b is None:
        return False
    return coerce_date(a) == coerce_date(b)


def in_range(day: DateLike, start: Optional[DateLike], end: Optional[DateLike]) -> bool:
    """Check if a date falls within ``[start, end]`` (inclusive both ends)."""
    if start is None or end is None:
        return False
    return coerce_date(start) <= coerce_date(day) <= coerce_date(end)


def add_months(day: DateLike, count: int) -> date:
    """Add a number of months, rolling over years and clamping the day.

    Example:
        >>> add_months(date(2024, 1, 31), 1)
        datetime.date(2024, 2, 29)
        >>> add_months(date(2024, 12, 15), 1)
        datetime.date(2025, 1, 15)
    """
    return coerce_date(day) + relativedelta(months=count)


def add_years(day: DateLike, count: int) -> date:
    """Add a number of years; February 29 clamps to February 28."""
    return coerce_date(day) + relativedelta(years=count)


def start_of_week(day: DateLike) -> date:
    """Monday of the week containing ``day``."""
    day = coerce_date(day)
    return day - timedelta(days=day.weekday())


def end_of_week(day: DateLike) -> date:
    """Sunday of the week containing ``day``."""
    day = coerce_date(day)
    return day + timedelta(days=6 - day.weekday())


def first_of_month(year: int, month: int) -> date:
    return date(year, month, 1)


def shift_month(year: int, month: int, count: int) -> Tuple[int, int]:
    """Move a (year, month) pair by whole months without building a date."""
    index = year * 12 + (month - 1) + count
    return index // 12, index % 12 + 1


def month_grid_fits(year: int, month: int) -> bool:
    """Check whether a month's padded grid lies within ``date.min``..``date.max``.

    December 9999 does not fit: its last week would run into year 10000.
    """
    if not MINYEAR <= year <= MAXYEAR or not 1 <= month <= 12:
        return False
    first = first_of_month(year, month)
    last = date(year, month, days_in_month(year, month))
    lead_room = (first - date.min).days >= day_of_week_monday_first(first)
    trail_room = (date.max - last).days >= 6 - day_of_week_monday_first(last)
    return lead_room and trail_room


def enumerate_month_grid(
    year: int, month: int, today: Optional[date] = None
) -> List[List[DayCell]]:
    """Generate the day cells of a month as complete Monday-first weeks.

    The first week is left-padded with the trailing days of the previous
    month and the last week right-padded with the leading days of the next
    month, so every week has exactly seven cells.

    Args:
        year: Four-digit year
        month: Month number, 1..12
        today: Reference date for ``is_today`` flags, defaults to today

    Returns:
        List of weeks, each a list of seven :class:`DayCell`
    """
    today = today or date.today()
    first = first_of_month(year, month)
    lead = day_of_week_monday_first(first)
    month_length = days_in_month(year, month)
    trail = (-(lead + month_length)) % DAYS_PER_WEEK

    grid_start = first - timedelta(days=lead)
    total = lead + month_length + trail

    cells = []
    for offset in range(total):
        current = grid_start + timedelta(days=offset)
        if offset < lead:
            origin = DayOrigin.PREVIOUS_MONTH
        elif offset < lead + month_length:
            origin = DayOrigin.CURRENT_MONTH
        else:
            origin = DayOrigin.NEXT_MONTH
        cells.append(
            DayCell(day=current.day, date=current, origin=origin, is_today=current == today)
        )

    return [cells[i : i + DAYS_PER_WEEK] for i in range(0, total, DAYS_PER_WEEK)]


def format_month_year(month: int, year: int) -> str:
    """Format a month and year for display, e.g. ``"March 2024"``."""
    return f"{MONTH_NAMES[month - 1]} {year}"


def format_day_label(day: DateLike) -> str:
    """Format a descriptive cell label, e.g. ``"Sunday, March 10, 2024"``."""
    day = coerce_date(day)
    return (
        f"{WEEK_DAY_NAMES[day.weekday()]}, {MONTH_NAMES[day.month - 1]} "
        f"{day.day}, {day.year}"
    )


def parse_date_text(text: Optional[str]) -> Optional[date]:
    """Parse user-typed date text for the text-entry collaborator.

    Malformed text is dropped: the result is ``None`` rather than an
    exception or a partially filled value.

    Args:
        text: Free-form date text such as ``"2024-03-10"`` or ``"Mar 10 2024"``

    Returns:
        Parsed date, or None if the text could not be parsed
    """
    if not text or not text.strip():
        return None
    try:
        return date_parser.parse(text.strip()).date()
    except (ValueError, OverflowError) as e:
        logger.debug(f"Dropping unparseable date text {text!r}: {e}")
        return None
