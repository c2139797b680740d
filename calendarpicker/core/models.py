"""
Data models for the calendar date-selection engine.

Input-facing structures (ranges, constraints, presets, options) are Pydantic
models so host-supplied values are validated once at the boundary. Per-render
structures (day cells) are plain frozen dataclasses built fresh on every
render and never persisted.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, FrozenSet, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .exceptions import CalendarConfigError

logger = logging.getLogger(__name__)


def coerce_date(value: Any) -> Any:
    """Reduce a datetime to its calendar day, passing everything else through."""
    if isinstance(value, datetime):
        return value.date()
    return value


class CalendarMode(str, Enum):
    """Selection mode."""

    SINGLE = "single"
    RANGE = "range"


class CalendarView(str, Enum):
    """Number of month grids shown side by side."""

    SINGLE_MONTH = "single-month"
    DUAL_MONTH = "dual-month"


class SubView(str, Enum):
    """Mutually exclusive picker views inside one calendar."""

    DAYS = "days"
    MONTHS = "months"
    YEARS = "years"


class DayOrigin(str, Enum):
    """Which month supplied a grid cell."""

    PREVIOUS_MONTH = "previous_month"
    CURRENT_MONTH = "current_month"
    NEXT_MONTH = "next_month"


class DayState(str, Enum):
    """Visual/interaction state of a day cell."""

    DEFAULT = "default"
    TODAY = "today"
    SELECTED = "selected"
    RANGE_START = "range_start"
    RANGE_CENTER = "range_center"
    RANGE_END = "range_end"
    DISABLED = "disabled"

    @property
    def is_selection(self) -> bool:
        """True for states that mark a selected date or a range member."""
        return self in _SELECTION_STATES


_SELECTION_STATES = frozenset(
    {DayState.SELECTED, DayState.RANGE_START, DayState.RANGE_CENTER, DayState.RANGE_END}
)


@dataclass(frozen=True)
class DayCell:
    """One cell of a month grid."""

    day: int
    date: date
    origin: DayOrigin
    is_today: bool = False

    @property
    def in_current_month(self) -> bool:
        return self.origin is DayOrigin.CURRENT_MONTH


class RangeValue(BaseModel):
    """Date range value used in range mode.

    Either endpoint may be missing while a selection is in progress. When both
    are present they are stored in ascending order, so an inverted range is
    never observable.

    Example:
        >>> RangeValue(start=date(2024, 3, 10), end=date(2024, 3, 5))
        RangeValue(start=datetime.date(2024, 3, 5), end=datetime.date(2024, 3, 10))
    """

    model_config = ConfigDict(frozen=True)

    start: Optional[date] = None
    end: Optional[date] = None

    @field_validator("start", "end", mode="before")
    @classmethod
    def _coerce_endpoints(cls, v: Any) -> Any:
        return coerce_date(v)

    @model_validator(mode="before")
    @classmethod
    def _sort_endpoints(cls, data: Any) -> Any:
        if isinstance(data, dict):
            start = coerce_date(data.get("start"))
            end = coerce_date(data.get("end"))
            if start is not None and end is not None and start > end:
                data = {**data, "start": end, "end": start}
        return data

    @property
    def is_empty(self) -> bool:
        return self.start is None and self.end is None

    @property
    def is_complete(self) -> bool:
        return self.start is not None and self.end is not None

    @property
    def is_in_progress(self) -> bool:
        """True when an anchor has been picked but the range is still open."""
        return self.start is not None and self.end is None


CalendarValue = Union[Optional[date], RangeValue]


def empty_value(mode: CalendarMode) -> CalendarValue:
    """Return the empty value for a selection mode."""
    return None if mode is CalendarMode.SINGLE else RangeValue()


class Constraints(BaseModel):
    """Disabled-date constraints.

    ``disabled_dates`` is an explicit list folded into the disabled check by
    set membership; ``disabled_predicate`` is an arbitrary callable. Both
    bounds are inclusive: ``min_date`` and ``max_date`` themselves stay
    selectable.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    min_date: Optional[date] = None
    max_date: Optional[date] = None
    disabled_dates: FrozenSet[date] = Field(default_factory=frozenset)
    disabled_predicate: Optional[Callable[[date], bool]] = None

    @field_validator("min_date", "max_date", mode="before")
    @classmethod
    def _coerce_bounds(cls, v: Any) -> Any:
        return coerce_date(v)

    @field_validator("disabled_dates", mode="before")
    @classmethod
    def _coerce_disabled_dates(cls, v: Any) -> Any:
        if v is None:
            return frozenset()
        return frozenset(coerce_date(d) for d in v)

    @model_validator(mode="after")
    def _validate_bounds(self) -> "Constraints":
        if self.min_date and self.max_date and self.min_date > self.max_date:
            raise CalendarConfigError(
                "min_date must not be after max_date",
                field_name="min_date",
                field_value=self.min_date,
                details={"max_date": str(self.max_date)},
            )
        return self

    @classmethod
    def build(
        cls,
        min_date: Optional[date] = None,
        max_date: Optional[date] = None,
        disabled_dates: Union[None, List[date], Callable[[date], bool]] = None,
    ) -> "Constraints":
        """Build constraints from the host-facing ``disabled_dates`` shape.

        Args:
            min_date: Earliest selectable date
            max_date: Latest selectable date
            disabled_dates: Either a list of dates or a predicate

        Returns:
            Constraints instance
        """
        if callable(disabled_dates):
            return cls(min_date=min_date, max_date=max_date, disabled_predicate=disabled_dates)
        return cls(min_date=min_date, max_date=max_date, disabled_dates=disabled_dates or [])

    @property
    def min_year(self) -> Optional[int]:
        return self.min_date.year if self.min_date else None

    @property
    def max_year(self) -> Optional[int]:
        return self.max_date.year if self.max_date else None

    def is_disabled(self, day: date) -> bool:
        """Check whether a date is forbidden by these constraints."""
        day = coerce_date(day)
        if self.min_date is not None and day < self.min_date:
            return True
        if self.max_date is not None and day > self.max_date:
            return True
        if day in self.disabled_dates:
            return True
        if self.disabled_predicate is not None:
            return bool(self.disabled_predicate(day))
        return False


class Preset(BaseModel):
    """Named generator of a date range, shown as a preset tab."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str = Field(..., min_length=1)
    label: str
    resolver: Callable[[], RangeValue]
    disabled: bool = False

    def resolve(self) -> RangeValue:
        """Compute a fresh range for this preset."""
        value = self.resolver()
        if not isinstance(value, RangeValue):
            value = RangeValue.model_validate(value)
        return value


class CalendarOptions(BaseModel):
    """Input properties of one calendar instance.

    Passed explicitly to every component that needs them. Value ownership and
    host callbacks are not part of the options; they are given to
    :class:`calendarpicker.ui.calendar.CalendarSession` directly.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    mode: CalendarMode = CalendarMode.SINGLE
    view: CalendarView = CalendarView.SINGLE_MONTH
    min_date: Optional[date] = None
    max_date: Optional[date] = None
    disabled_dates: Union[None, List[date], Callable[[date], bool]] = None
    presets: List[Preset] = Field(default_factory=list)
    show_presets: bool = False
    hide_actions: bool = False

    year_picker_span: int = Field(default=12, ge=1)
    year_picker_offset: int = Field(default=5, ge=0)
    decade_step: int = Field(default=10, ge=1)

    @field_validator("min_date", "max_date", mode="before")
    @classmethod
    def _coerce_bounds(cls, v: Any) -> Any:
        return coerce_date(v)

    @model_validator(mode="after")
    def _validate_presets(self) -> "CalendarOptions":
        ids = [preset.id for preset in self.presets]
        duplicates = sorted({pid for pid in ids if ids.count(pid) > 1})
        if duplicates:
            raise CalendarConfigError(
                "Preset ids must be unique",
                field_name="presets",
                field_value=", ".join(duplicates),
            )
        return self

    def constraints(self) -> Constraints:
        """Build the :class:`Constraints` described by these options."""
        return Constraints.build(self.min_date, self.max_date, self.disabled_dates)

    @property
    def presets_visible(self) -> bool:
        """Presets render only in range mode, when enabled and non-empty."""
        return self.show_presets and self.mode is CalendarMode.RANGE and bool(self.presets)
