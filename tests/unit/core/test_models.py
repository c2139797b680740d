"""Unit tests for calendarpicker.core.models and core.exceptions."""

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from calendarpicker.core.exceptions import CalendarConfigError, CalendarError
from calendarpicker.core.models import (
    CalendarMode,
    CalendarOptions,
    Constraints,
    DayState,
    Preset,
    RangeValue,
    empty_value,
)


class TestRangeValue:
    """Test RangeValue ordering and status properties."""

    def test_inverted_endpoints_are_sorted(self) -> None:
        """Test an inverted range is never observable."""
        value = RangeValue(start=date(2024, 3, 10), end=date(2024, 3, 5))

        assert value.start == date(2024, 3, 5)
        assert value.end == date(2024, 3, 10)

    def test_datetimes_are_reduced_to_dates(self) -> None:
        """Test datetime endpoints become dates."""
        value = RangeValue(start=datetime(2024, 3, 5, 9, 0), end=datetime(2024, 3, 10, 18, 0))

        assert value.start == date(2024, 3, 5)
        assert value.end == date(2024, 3, 10)

    def test_model_validate_sorts_mapping(self) -> None:
        """Test mapping input goes through the same ordering."""
        value = RangeValue.model_validate({"start": "2024-03-10", "end": "2024-03-01"})

        assert value == RangeValue(start=date(2024, 3, 1), end=date(2024, 3, 10))

    def test_status_properties(self) -> None:
        """Test empty, in-progress and complete states."""
        empty = RangeValue()
        in_progress = RangeValue(start=date(2024, 3, 5))
        complete = RangeValue(start=date(2024, 3, 5), end=date(2024, 3, 5))

        assert empty.is_empty and not empty.is_complete and not empty.is_in_progress
        assert in_progress.is_in_progress and not in_progress.is_complete
        assert complete.is_complete and not complete.is_in_progress

    def test_range_is_immutable(self) -> None:
        """Test that frozen ranges reject assignment."""
        value = RangeValue(start=date(2024, 3, 5))
        with pytest.raises(ValidationError):
            value.end = date(2024, 3, 6)


class TestEmptyValue:
    """Test per-mode empty values."""

    def test_single_mode_empty_is_none(self) -> None:
        """Test single mode starts with no date."""
        assert empty_value(CalendarMode.SINGLE) is None

    def test_range_mode_empty_is_open_range(self) -> None:
        """Test range mode starts with an empty range."""
        assert empty_value(CalendarMode.RANGE) == RangeValue()


class TestConstraints:
    """Test disabled-date constraints."""

    def test_bounds_are_inclusive(self) -> None:
        """Test min_date and max_date themselves remain enabled."""
        constraints = Constraints(min_date=date(2024, 3, 5), max_date=date(2024, 3, 20))

        assert not constraints.is_disabled(date(2024, 3, 5))
        assert not constraints.is_disabled(date(2024, 3, 20))
        assert constraints.is_disabled(date(2024, 3, 4))
        assert constraints.is_disabled(date(2024, 3, 21))

    def test_explicit_list(self) -> None:
        """Test listed dates are disabled."""
        constraints = Constraints.build(disabled_dates=[date(2024, 3, 8), date(2024, 3, 9)])

        assert constraints.is_disabled(date(2024, 3, 8))
        assert constraints.is_disabled(datetime(2024, 3, 9, 12, 0))
        assert not constraints.is_disabled(date(2024, 3, 10))

    def test_predicate(self) -> None:
        """Test a predicate disables matching dates."""
        constraints = Constraints.build(disabled_dates=lambda d: d.weekday() >= 5)

        assert constraints.is_disabled(date(2024, 3, 9))  # Saturday
        assert constraints.is_disabled(date(2024, 3, 10))  # Sunday
        assert not constraints.is_disabled(date(2024, 3, 11))

    def test_min_after_max_raises(self) -> None:
        """Test inconsistent bounds are rejected at construction."""
        with pytest.raises(CalendarConfigError) as exc_info:
            Constraints(min_date=date(2024, 5, 1), max_date=date(2024, 4, 1))

        assert exc_info.value.field_name == "min_date"

    def test_year_bounds(self) -> None:
        """Test year bounds derive from the date bounds."""
        constraints = Constraints(min_date=date(2020, 6, 1), max_date=date(2030, 1, 1))

        assert constraints.min_year == 2020
        assert constraints.max_year == 2030
        assert Constraints().min_year is None


class TestPreset:
    """Test preset resolution."""

    def test_resolve_returns_range(self) -> None:
        """Test a resolver result is returned as a RangeValue."""
        preset = Preset(
            id="launch",
            label="Launch week",
            resolver=lambda: RangeValue(start=date(2024, 3, 4), end=date(2024, 3, 10)),
        )

        assert preset.resolve() == RangeValue(start=date(2024, 3, 4), end=date(2024, 3, 10))

    def test_resolve_accepts_mapping(self) -> None:
        """Test resolvers may return a {start, end} mapping."""
        preset = Preset(
            id="q1",
            label="Q1",
            resolver=lambda: {"start": date(2024, 3, 31), "end": date(2024, 1, 1)},
        )

        assert preset.resolve() == RangeValue(start=date(2024, 1, 1), end=date(2024, 3, 31))

    def test_resolver_called_on_every_resolve(self) -> None:
        """Test presets are recomputed, not cached."""
        calls = []

        def resolver() -> RangeValue:
            calls.append(1)
            return RangeValue(start=date(2024, 1, 1), end=date(2024, 1, 2))

        preset = Preset(id="p", label="P", resolver=resolver)
        preset.resolve()
        preset.resolve()

        assert len(calls) == 2


class TestCalendarOptions:
    """Test option validation."""

    def test_defaults(self) -> None:
        """Test a default calendar is single-date, single-month."""
        options = CalendarOptions()

        assert options.mode is CalendarMode.SINGLE
        assert options.presets == []
        assert options.year_picker_span == 12
        assert options.year_picker_offset == 5
        assert options.decade_step == 10
        assert not options.presets_visible

    def test_duplicate_preset_ids_raise(self) -> None:
        """Test preset ids must be unique."""
        resolver = lambda: RangeValue()  # noqa: E731
        presets = [
            Preset(id="same", label="A", resolver=resolver),
            Preset(id="same", label="B", resolver=resolver),
        ]

        with pytest.raises(CalendarConfigError) as exc_info:
            CalendarOptions(mode=CalendarMode.RANGE, presets=presets)

        assert "same" in str(exc_info.value)

    def test_presets_visible_only_in_range_mode(self) -> None:
        """Test preset visibility needs range mode, the flag and presets."""
        presets = [Preset(id="p", label="P", resolver=lambda: RangeValue())]

        assert CalendarOptions(mode=CalendarMode.RANGE, presets=presets, show_presets=True).presets_visible
        assert not CalendarOptions(mode=CalendarMode.SINGLE, presets=presets, show_presets=True).presets_visible
        assert not CalendarOptions(mode=CalendarMode.RANGE, presets=presets).presets_visible
        assert not CalendarOptions(mode=CalendarMode.RANGE, show_presets=True).presets_visible

    def test_constraints_from_options(self) -> None:
        """Test options build matching constraints."""
        options = CalendarOptions(
            min_date=date(2024, 1, 1), disabled_dates=[date(2024, 3, 8)]
        )
        constraints = options.constraints()

        assert constraints.is_disabled(date(2023, 12, 31))
        assert constraints.is_disabled(date(2024, 3, 8))
        assert not constraints.is_disabled(date(2024, 3, 9))


class TestDayState:
    """Test DayState helpers."""

    def test_is_selection(self) -> None:
        """Test which states count as selected for aria-selected."""
        assert DayState.SELECTED.is_selection
        assert DayState.RANGE_START.is_selection
        assert DayState.RANGE_CENTER.is_selection
        assert DayState.RANGE_END.is_selection
        assert not DayState.TODAY.is_selection
        assert not DayState.DEFAULT.is_selection
        assert not DayState.DISABLED.is_selection


class TestCalendarErrors:
    """Test the exception hierarchy."""

    def test_config_error_is_calendar_error(self) -> None:
        """Test CalendarConfigError derives from CalendarError."""
        assert issubclass(CalendarConfigError, CalendarError)

    def test_str_includes_details(self) -> None:
        """Test the string form carries field details."""
        error = CalendarConfigError("Bad option", field_name="mode", field_value="weekly")

        assert error.message == "Bad option"
        assert error.details == {"field_name": "mode", "field_value": "weekly"}
        assert "weekly" in str(error)

    def test_str_without_details(self) -> None:
        """Test the plain message is used without details."""
        assert str(CalendarError("Plain")) == "Plain"
