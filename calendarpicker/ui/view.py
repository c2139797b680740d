"""Displayed month/year and picker sub-view management."""

import logging
from datetime import MAXYEAR, MINYEAR, date
from typing import List, Optional, Tuple

from ..core.dates import enumerate_month_grid, format_month_year, month_grid_fits, shift_month
from ..core.models import CalendarView, DayCell, SubView, coerce_date

logger = logging.getLogger(__name__)


class ViewController:
    """Manages which month is shown and which picker sub-view is active.

    Only one of the days, months and years sub-views is active at a time. In
    dual-month view a second, read-only month follows the displayed one and
    both advance together.
    """

    def __init__(
        self,
        initial_date: Optional[date] = None,
        view: CalendarView = CalendarView.SINGLE_MONTH,
        min_year: Optional[int] = None,
        max_year: Optional[int] = None,
        year_span: int = 12,
        year_offset: int = 5,
        decade_step: int = 10,
    ) -> None:
        """Initialize view state.

        Args:
            initial_date: Date whose month is displayed first, defaults to today
            view: Single- or dual-month display
            min_year: Earliest selectable year in the year picker
            max_year: Latest selectable year in the year picker
            year_span: Number of years shown by the year picker
            year_offset: How many years before the displayed year the window starts
            decade_step: Years moved by one decade-stepper press
        """
        initial_date = coerce_date(initial_date) or date.today()
        self.displayed_year = initial_date.year
        self.displayed_month = initial_date.month
        self.view = view
        self.sub_view = SubView.DAYS
        self.min_year = min_year
        self.max_year = max_year
        self.year_span = year_span
        self.year_offset = year_offset
        self.decade_step = decade_step
        self._year_window_start: Optional[int] = None

        # December 9999 cannot be shown, nor November 9999 beside it in dual view
        while not self._can_display(self.displayed_year, self.displayed_month):
            self.displayed_year, self.displayed_month = shift_month(
                self.displayed_year, self.displayed_month, -1
            )

        logger.debug(f"View initialized at {self.title} ({view.value})")

    @property
    def title(self) -> str:
        return format_month_year(self.displayed_month, self.displayed_year)

    @property
    def is_dual(self) -> bool:
        return self.view is CalendarView.DUAL_MONTH

    @property
    def secondary_month(self) -> Optional[Tuple[int, int]]:
        """(year, month) of the read-only second grid, or None in single-month view."""
        if not self.is_dual:
            return None
        return shift_month(self.displayed_year, self.displayed_month, 1)

    def contains(self, day: date) -> bool:
        """Check whether ``day`` lies in the displayed (primary) month."""
        day = coerce_date(day)
        return day.year == self.displayed_year and day.month == self.displayed_month

    def primary_grid(self, today: Optional[date] = None) -> List[List[DayCell]]:
        return enumerate_month_grid(self.displayed_year, self.displayed_month, today)

    def secondary_grid(self, today: Optional[date] = None) -> Optional[List[List[DayCell]]]:
        secondary = self.secondary_month
        if secondary is None:
            return None
        return enumerate_month_grid(secondary[0], secondary[1], today)

    # Days view navigation

    def _can_display(self, year: int, month: int) -> bool:
        """Check that every grid shown for ``year``/``month`` stays within ``date`` limits."""
        if not month_grid_fits(year, month):
            return False
        if self.is_dual:
            return month_grid_fits(*shift_month(year, month, 1))
        return True

    def _show(self, year: int, month: int) -> bool:
        if not self._can_display(year, month):
            logger.debug(f"Ignoring move to {year}-{month:02d}: outside the displayable range")
            return False
        old_title = self.title
        self.displayed_year = year
        self.displayed_month = month
        logger.debug(f"Paged view: {old_title} -> {self.title}")
        return True

    def step_month(self, delta: int) -> bool:
        """Previous/next month controls; moves both grids in dual-month view."""
        return self._show(*shift_month(self.displayed_year, self.displayed_month, delta))

    def page_to(self, day: date) -> bool:
        """Show the month containing ``day``.

        Returns:
            False when that month cannot be displayed and the view stayed put
        """
        day = coerce_date(day)
        if self.contains(day):
            return True
        return self._show(day.year, day.month)

    # Sub-view toggles

    def toggle_months_view(self) -> SubView:
        """Month-label activation: open the month picker, or close it."""
        self._set_sub_view(SubView.DAYS if self.sub_view is SubView.MONTHS else SubView.MONTHS)
        return self.sub_view

    def toggle_years_view(self) -> SubView:
        """Year-label activation: open the year picker, or close it."""
        self._set_sub_view(SubView.DAYS if self.sub_view is SubView.YEARS else SubView.YEARS)
        return self.sub_view

    def _set_sub_view(self, sub_view: SubView) -> None:
        if sub_view is SubView.YEARS:
            self._year_window_start = None
        logger.debug(f"Sub-view: {self.sub_view.value} -> {sub_view.value}")
        self.sub_view = sub_view

    # Month picker

    def select_month(self, month: int) -> None:
        """Pick a month (1..12) and return to the day grid."""
        if not 1 <= month <= 12:
            logger.debug(f"Ignoring month outside 1..12: {month}")
            return
        if self._show(self.displayed_year, month):
            self._set_sub_view(SubView.DAYS)

    def step_year(self, delta: int) -> bool:
        """Month-picker year stepper; stays in the month picker."""
        moved = self._show(self.displayed_year + delta, self.displayed_month)
        logger.debug(f"Month picker year: {self.displayed_year}")
        return moved

    # Year picker

    @property
    def year_window_start(self) -> int:
        if self._year_window_start is not None:
            return self._year_window_start
        return self.displayed_year - self.year_offset

    @property
    def year_window(self) -> List[int]:
        start = self.year_window_start
        return list(range(start, start + self.year_span))

    @property
    def year_window_label(self) -> str:
        years = self.year_window
        return f"{years[0]} - {years[-1]}"

    @property
    def first_year(self) -> int:
        return MINYEAR if self.min_year is None else max(self.min_year, MINYEAR)

    @property
    def last_year(self) -> int:
        return MAXYEAR if self.max_year is None else min(self.max_year, MAXYEAR)

    def is_year_selectable(self, year: int) -> bool:
        return self.first_year <= year <= self.last_year

    def select_year(self, year: int) -> bool:
        """Pick a year and return to the day grid.

        Returns:
            False, leaving state untouched, when the year is out of bounds
        """
        if not self.is_year_selectable(year):
            logger.debug(f"Year {year} outside [{self.first_year}, {self.last_year}]")
            return False
        if not self._show(year, self.displayed_month):
            return False
        self._set_sub_view(SubView.DAYS)
        return True

    def step_decade(self, delta: int) -> List[int]:
        """Move the year window by whole decades, clamped to the year bounds.

        The window always keeps at least one year inside ``[min_year, max_year]``,
        which default to the years ``date`` can represent.

        Returns:
            The visible years after the move
        """
        start = self.year_window_start + delta * self.decade_step
        start = min(start, self.last_year)
        start = max(start, self.first_year - self.year_span + 1)
        self._year_window_start = start
        logger.debug(f"Year window: {self.year_window_label}")
        return self.year_window
