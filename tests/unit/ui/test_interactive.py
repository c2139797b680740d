"""
Unit tests for the interactive terminal controller.

Exercises key routing from KeyEvents to the calendar session: picker cursor
movement, preset focus, actions and the escape chain.
"""

from datetime import date
from unittest.mock import AsyncMock, Mock, patch

import pytest

from calendarpicker.core.models import CalendarMode, CalendarOptions, RangeValue, SubView
from calendarpicker.ui.interactive import InteractiveController
from calendarpicker.ui.keyboard import KeyCode, KeyEvent


def char(c: str) -> KeyEvent:
    return KeyEvent(KeyCode.CHARACTER, char=c)


@pytest.fixture
def renderer() -> Mock:
    mock_renderer = Mock()
    mock_renderer.render.return_value = "rendered"
    return mock_renderer


@pytest.fixture
def make_controller(make_session, renderer):
    def _make(options=None, **kwargs):
        controller = InteractiveController(make_session(options), renderer=renderer, **kwargs)
        controller._running = True
        return controller

    return _make


class TestLifecycle:
    """Test start/stop of the controller."""

    @pytest.mark.asyncio
    async def test_start_draws_and_listens(self, make_session, renderer) -> None:
        """Test start renders once and hands over to the keyboard loop."""
        controller = InteractiveController(make_session(), renderer=renderer)

        with patch.object(controller.keyboard, "start_listening", new=AsyncMock()) as mock_listen:
            await controller.start()

        mock_listen.assert_awaited_once()
        renderer.display_with_clear.assert_called_once_with("rendered")
        assert controller.is_running is False

    @pytest.mark.asyncio
    async def test_escape_in_days_view_stops(self, make_controller) -> None:
        """Test Escape exits when nothing else is open."""
        controller = make_controller()

        await controller.handle_key_event(KeyEvent(KeyCode.ESCAPE))

        assert controller.is_running is False
        assert controller.keyboard.is_running is False

    @pytest.mark.asyncio
    async def test_redraws_after_each_key(self, make_controller, renderer) -> None:
        """Test every handled key triggers a redraw."""
        controller = make_controller()

        await controller.handle_key_event(KeyEvent(KeyCode.RIGHT_ARROW))

        assert controller.session.focused_date == date(2024, 3, 16)
        renderer.render.assert_called_once()
        assert renderer.render.call_args.kwargs == {"picker_cursor": None}


class TestDayGrid:
    """Test keys reaching the day grid."""

    @pytest.mark.asyncio
    async def test_enter_selects_focused_date(self, make_controller) -> None:
        """Test Enter commits the focused date."""
        controller = make_controller()

        await controller.handle_key_event(KeyEvent(KeyCode.UP_ARROW))
        await controller.handle_key_event(KeyEvent(KeyCode.ENTER))

        assert controller.session.value == date(2024, 3, 8)

    @pytest.mark.asyncio
    async def test_brackets_step_months(self, make_controller) -> None:
        """Test [ and ] page the displayed month."""
        controller = make_controller()

        await controller.handle_key_event(char("["))
        assert controller.session.render().title == "February 2024"

        await controller.handle_key_event(char("]"))
        await controller.handle_key_event(char("]"))
        assert controller.session.render().title == "April 2024"


class TestPickers:
    """Test month and year picker keys."""

    @pytest.mark.asyncio
    async def test_month_picker_cursor(self, make_controller, renderer) -> None:
        """Test the month picker opens on the displayed month and selects with Enter."""
        controller = make_controller()

        await controller.handle_key_event(char("m"))
        assert controller.session.sub_view is SubView.MONTHS
        assert controller.picker_cursor == 2
        assert renderer.render.call_args.kwargs == {"picker_cursor": 2}

        await controller.handle_key_event(KeyEvent(KeyCode.DOWN_ARROW))
        await controller.handle_key_event(KeyEvent(KeyCode.RIGHT_ARROW))
        assert controller.picker_cursor == 7

        await controller.handle_key_event(KeyEvent(KeyCode.ENTER))
        assert controller.session.sub_view is SubView.DAYS
        assert controller.session.render().title == "August 2024"
        assert controller.picker_cursor is None

    @pytest.mark.asyncio
    async def test_month_picker_cursor_wraps(self, make_controller) -> None:
        """Test cursor movement wraps around the twelve months."""
        controller = make_controller()
        await controller.handle_key_event(char("m"))

        await controller.handle_key_event(KeyEvent(KeyCode.UP_ARROW))

        assert controller.picker_cursor == 10

    @pytest.mark.asyncio
    async def test_month_picker_year_step(self, make_controller) -> None:
        """Test ] in the month picker moves the year and stays open."""
        controller = make_controller()
        await controller.handle_key_event(char("m"))

        await controller.handle_key_event(char("]"))
        await controller.handle_key_event(KeyEvent(KeyCode.PAGE_DOWN))

        assert controller.session.view.displayed_year == 2026
        assert controller.session.sub_view is SubView.MONTHS

    @pytest.mark.asyncio
    async def test_year_picker_selection(self, make_controller) -> None:
        """Test choosing a year from the year picker."""
        controller = make_controller()

        await controller.handle_key_event(char("y"))
        assert controller.picker_cursor == 5

        await controller.handle_key_event(KeyEvent(KeyCode.DOWN_ARROW))
        await controller.handle_key_event(KeyEvent(KeyCode.SPACE))

        assert controller.session.sub_view is SubView.DAYS
        assert controller.session.render().title == "March 2028"

    @pytest.mark.asyncio
    async def test_decade_step(self, make_controller) -> None:
        """Test [ in the year picker moves the window by a decade."""
        controller = make_controller()
        await controller.handle_key_event(char("y"))

        await controller.handle_key_event(char("["))

        assert controller.session.render().year_picker.label == "2009 - 2020"

    @pytest.mark.asyncio
    async def test_escape_closes_picker(self, make_controller) -> None:
        """Test Escape closes an open picker before exiting."""
        controller = make_controller()
        await controller.handle_key_event(char("y"))

        await controller.handle_key_event(KeyEvent(KeyCode.ESCAPE))

        assert controller.session.sub_view is SubView.DAYS
        assert controller.is_running is True


class TestPresets:
    """Test preset keys."""

    @pytest.mark.asyncio
    async def test_number_selects_preset(self, make_controller, range_options) -> None:
        """Test digit keys activate presets by position."""
        controller = make_controller(range_options)

        await controller.handle_key_event(char("1"))

        assert controller.session.active_preset_id == "today"
        assert controller.session.value == RangeValue(start=date(2024, 3, 15), end=date(2024, 3, 15))

    @pytest.mark.asyncio
    async def test_number_out_of_range_ignored(self, make_controller, range_options) -> None:
        """Test a digit beyond the preset list does nothing."""
        controller = make_controller(range_options)

        await controller.handle_key_event(char("9"))

        assert controller.session.active_preset_id is None

    @pytest.mark.asyncio
    async def test_preset_focus_mode(self, make_controller, range_options) -> None:
        """Test p moves arrow keys to the preset tablist and Escape leaves it."""
        controller = make_controller(range_options)

        await controller.handle_key_event(char("p"))
        assert controller.presets_focused is True

        await controller.handle_key_event(KeyEvent(KeyCode.END))
        await controller.handle_key_event(KeyEvent(KeyCode.ENTER))
        assert controller.session.active_preset_id == "last-year"
        assert controller.session.focused_date == date(2023, 3, 15)

        await controller.handle_key_event(KeyEvent(KeyCode.ESCAPE))
        assert controller.presets_focused is False
        assert controller.is_running is True

    @pytest.mark.asyncio
    async def test_preset_focus_needs_visible_presets(self, make_controller) -> None:
        """Test p does nothing for a calendar without presets."""
        controller = make_controller()

        await controller.handle_key_event(char("p"))

        assert controller.presets_focused is False


class TestActions:
    """Test the Clear and Apply keys."""

    @pytest.mark.asyncio
    async def test_apply_stops_with_value(self, make_controller) -> None:
        """Test a applies the value and exits."""
        on_apply = Mock()
        controller = make_controller()
        controller.session.selection._on_apply = on_apply
        await controller.handle_key_event(KeyEvent(KeyCode.ENTER))

        await controller.handle_key_event(char("a"))

        assert controller.applied_value == date(2024, 3, 15)
        on_apply.assert_called_once_with(date(2024, 3, 15))
        assert controller.is_running is False

    @pytest.mark.asyncio
    async def test_apply_without_exit(self, make_controller) -> None:
        """Test exit_on_apply=False keeps the controller running."""
        controller = make_controller(exit_on_apply=False)

        await controller.handle_key_event(char("a"))

        assert controller.applied_value is None
        assert controller.is_running is True

    @pytest.mark.asyncio
    async def test_clear(self, make_controller) -> None:
        """Test c clears the selection."""
        controller = make_controller(CalendarOptions(mode=CalendarMode.RANGE))
        controller.session.click_day(date(2024, 3, 4))

        await controller.handle_key_event(char("c"))

        assert controller.session.value == RangeValue()

    @pytest.mark.asyncio
    async def test_hidden_actions_are_inert(self, make_controller) -> None:
        """Test c and a do nothing when actions are hidden."""
        controller = make_controller(CalendarOptions(hide_actions=True))
        controller.session.click_day(date(2024, 3, 4))

        await controller.handle_key_event(char("c"))
        await controller.handle_key_event(char("a"))

        assert controller.session.value == date(2024, 3, 4)
        assert controller.applied_value is None
        assert controller.is_running is True
