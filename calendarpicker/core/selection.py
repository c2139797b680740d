"""Selection state machine: value ownership, day clicks, clear, apply and presets."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, Iterable, Optional, Union

from .dates import same_day
from .exceptions import CalendarConfigError
from .models import CalendarMode, CalendarValue, Preset, RangeValue, coerce_date, empty_value

logger = logging.getLogger(__name__)


class _Unset:
    """Marker for an argument the host did not supply (``None`` is a valid value)."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


@dataclass(frozen=True)
class OwnedValue:
    """Value owned by the state machine (uncontrolled mode)."""

    value: CalendarValue


@dataclass(frozen=True)
class ExternalValue:
    """Value owned by the host (controlled mode)."""

    value: CalendarValue


ValueSource = Union[OwnedValue, ExternalValue]

ChangeCallback = Callable[[CalendarValue], None]


def normalize_value(mode: CalendarMode, value: Any) -> CalendarValue:
    """Validate a host-supplied value against the selection mode.

    Args:
        mode: Selection mode the value must fit
        value: Host value (``None``/date for single, RangeValue or mapping for range)

    Returns:
        The value in its canonical form

    Raises:
        CalendarConfigError: If the value does not fit the mode
    """
    if mode is CalendarMode.SINGLE:
        if value is None or isinstance(value, date):
            return coerce_date(value)
        raise CalendarConfigError(
            "Single mode expects a date or None", field_name="value", field_value=value
        )

    if value is None:
        return RangeValue()
    if isinstance(value, RangeValue):
        return value
    if isinstance(value, dict):
        return RangeValue.model_validate(value)
    raise CalendarConfigError(
        "Range mode expects a RangeValue or a {start, end} mapping",
        field_name="value",
        field_value=value,
    )


def resolve_source(mode: CalendarMode, value: Any = UNSET, default_value: Any = UNSET) -> ValueSource:
    """Decide value ownership once, from what the host supplied."""
    if value is not UNSET:
        return ExternalValue(normalize_value(mode, value))
    if default_value is not UNSET:
        return OwnedValue(normalize_value(mode, default_value))
    return OwnedValue(empty_value(mode))


def next_single_value(day: date, current: CalendarValue) -> CalendarValue:
    """Single mode click: toggle the clicked date."""
    return None if same_day(day, current) else day


def next_range_value(day: date, current: CalendarValue) -> RangeValue:
    """Range mode click: two-click protocol with auto-sorted endpoints."""
    start = current.start if isinstance(current, RangeValue) else None
    end = current.end if isinstance(current, RangeValue) else None

    if start is None or end is not None:
        # First click, or a new range after a completed one
        return RangeValue(start=day, end=None)

    return RangeValue(start=start, end=day)


class SelectionStateMachine:
    """Owns the calendar value and implements the selection transitions.

    The value comes either from the host (controlled) or from this object
    (uncontrolled). Ownership is fixed at construction; each transition
    resolves it once and then either writes the internal value or only
    notifies the host, never a mix of both.
    """

    def __init__(
        self,
        mode: CalendarMode,
        source: ValueSource,
        presets: Iterable[Preset] = (),
        on_change: Optional[ChangeCallback] = None,
        on_apply: Optional[ChangeCallback] = None,
        on_clear: Optional[Callable[[], None]] = None,
        page_to: Optional[Callable[[date], None]] = None,
    ) -> None:
        """Initialize the state machine.

        Args:
            mode: Selection mode
            source: Initial value and its owner
            presets: Presets available for ``select_preset``
            on_change: Host callback receiving every new value
            on_apply: Host callback receiving the value on apply
            on_clear: Host callback invoked after clearing
            page_to: View hook used to show a preset's start month
        """
        self.mode = mode
        self._source = source
        self._presets: Dict[str, Preset] = {preset.id: preset for preset in presets}
        self._on_change = on_change
        self._on_apply = on_apply
        self._on_clear = on_clear
        self._page_to = page_to
        self._active_preset_id: Optional[str] = None

        logger.debug(
            f"Selection state machine initialized: mode={mode.value}, "
            f"controlled={self.is_controlled}"
        )

    @property
    def is_controlled(self) -> bool:
        return isinstance(self._source, ExternalValue)

    @property
    def value(self) -> CalendarValue:
        """The current value, from whichever side owns it."""
        return self._source.value

    @property
    def active_preset_id(self) -> Optional[str]:
        return self._active_preset_id

    def set_external_value(self, value: Any) -> None:
        """Accept a new host value in controlled mode (last write wins).

        Args:
            value: The host's authoritative value
        """
        if not self.is_controlled:
            logger.warning("Ignoring external value for an uncontrolled calendar")
            return
        self._source = ExternalValue(normalize_value(self.mode, value))
        logger.debug(f"External value replaced: {self._source.value!r}")

    def click_day(self, day: date) -> CalendarValue:
        """Apply a day click and return the new value.

        Any manual click deactivates the active preset.
        """
        day = coerce_date(day)
        current = self.value
        if self.mode is CalendarMode.SINGLE:
            new_value = next_single_value(day, current)
        else:
            new_value = next_range_value(day, current)

        logger.debug(f"Day click {day}: {current!r} -> {new_value!r}")
        self._commit(new_value)
        self._active_preset_id = None
        return new_value

    def clear(self) -> CalendarValue:
        """Reset to the empty value and notify ``on_clear``."""
        new_value = empty_value(self.mode)
        self._commit(new_value)
        self._active_preset_id = None
        logger.debug("Selection cleared")
        if self._on_clear is not None:
            self._on_clear()
        return new_value

    def apply(self) -> CalendarValue:
        """Send the current value to ``on_apply`` without changing state."""
        current = self.value
        logger.debug(f"Applying value {current!r}")
        if self._on_apply is not None:
            self._on_apply(current)
        return current

    def get_preset(self, preset_id: str) -> Optional[Preset]:
        return self._presets.get(preset_id)

    def select_preset(self, preset_id: str) -> Optional[RangeValue]:
        """Replace the value with a preset's freshly resolved range.

        Args:
            preset_id: Id of the preset to activate

        Returns:
            The resolved range, or None if no enabled preset has that id or
            the calendar is not in range mode
        """
        if self.mode is not CalendarMode.RANGE:
            logger.warning(f"Ignoring preset {preset_id!r}: presets need range mode")
            return None

        preset = self._presets.get(preset_id)
        if preset is None or preset.disabled:
            logger.warning(f"Unknown or disabled preset: {preset_id!r}")
            return None

        range_value = preset.resolve()
        self._commit(range_value)
        self._active_preset_id = preset_id
        logger.debug(f"Preset {preset_id!r} selected: {range_value!r}")

        if range_value.start is not None and self._page_to is not None:
            self._page_to(range_value.start)
        return range_value

    def _commit(self, new_value: CalendarValue) -> None:
        """Route a new value to its owner and notify the host."""
        if isinstance(self._source, OwnedValue):
            self._source = OwnedValue(new_value)
        if self._on_change is not None:
            self._on_change(new_value)
