"""Unit tests for keyboard navigation commands and the navigator."""

from datetime import date
from unittest.mock import Mock

import pytest

from calendarpicker.ui.keyboard import KeyCode, KeyEvent
from calendarpicker.ui.navigation import (
    Commit,
    JumpToWeekEnd,
    JumpToWeekStart,
    KeyboardNavigator,
    MoveBy,
    PageMonth,
    PageYear,
    command_for_key,
)
from calendarpicker.ui.view import ViewController


class TestCommandForKey:
    """Test the key to command mapping."""

    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            ("ArrowLeft", MoveBy(-1)),
            ("ArrowRight", MoveBy(1)),
            ("ArrowUp", MoveBy(-7)),
            ("ArrowDown", MoveBy(7)),
            ("Home", JumpToWeekStart()),
            ("End", JumpToWeekEnd()),
            ("PageUp", PageMonth(-1)),
            ("PageDown", PageMonth(1)),
            ("Enter", Commit()),
            (" ", Commit()),
        ],
    )
    def test_dom_key_names(self, key: str, expected) -> None:
        """Test DOM-style key names."""
        assert command_for_key(key) == expected

    def test_shift_page_keys_move_years(self) -> None:
        """Test Shift turns month paging into year paging."""
        assert command_for_key("PageUp", shift=True) == PageYear(-1)
        assert command_for_key(KeyCode.PAGE_DOWN, shift=True) == PageYear(1)
        assert command_for_key(KeyEvent(KeyCode.PAGE_DOWN, shift=True)) == PageYear(1)

    def test_shift_does_not_affect_arrows(self) -> None:
        """Test Shift is only meaningful for paging."""
        assert command_for_key(KeyEvent(KeyCode.LEFT_ARROW, shift=True)) == MoveBy(-1)

    @pytest.mark.parametrize("key", ["Tab", "a", "Escape", KeyCode.UNKNOWN, KeyCode.ESCAPE])
    def test_other_keys_are_not_consumed(self, key) -> None:
        """Test keys outside the protocol map to nothing."""
        assert command_for_key(key) is None


@pytest.fixture
def view() -> ViewController:
    return ViewController(initial_date=date(2024, 3, 15))


@pytest.fixture
def on_commit() -> Mock:
    return Mock()


@pytest.fixture
def navigator(view: ViewController, on_commit: Mock) -> KeyboardNavigator:
    return KeyboardNavigator(view, on_commit, initial_focus=date(2024, 3, 15))


class TestKeyboardNavigator:
    """Test focus movement and view synchronisation."""

    def test_arrow_keys_move_focus(self, navigator: KeyboardNavigator) -> None:
        """Test day and week moves."""
        navigator.handle_key("ArrowRight")
        assert navigator.focused_date == date(2024, 3, 16)
        navigator.handle_key("ArrowUp")
        assert navigator.focused_date == date(2024, 3, 9)
        navigator.handle_key("ArrowDown")
        navigator.handle_key("ArrowLeft")
        assert navigator.focused_date == date(2024, 3, 15)

    def test_home_end(self, navigator: KeyboardNavigator) -> None:
        """Test week start and end jumps."""
        navigator.handle_key(KeyCode.HOME)
        assert navigator.focused_date == date(2024, 3, 11)
        navigator.handle_key(KeyCode.END)
        assert navigator.focused_date == date(2024, 3, 17)

    def test_arrow_right_from_month_end_pages_view(self, view: ViewController, on_commit: Mock) -> None:
        """Test focus leaving the month pages the view to follow it."""
        navigator = KeyboardNavigator(view, on_commit, initial_focus=date(2024, 3, 31))

        navigator.handle_key("ArrowRight")

        assert navigator.focused_date == date(2024, 4, 1)
        assert (view.displayed_year, view.displayed_month) == (2024, 4)

    def test_arrow_up_into_previous_month(self, view: ViewController, on_commit: Mock) -> None:
        """Test a week move back across the month boundary."""
        navigator = KeyboardNavigator(view, on_commit, initial_focus=date(2024, 3, 3))

        navigator.handle_key("ArrowUp")

        assert navigator.focused_date == date(2024, 2, 25)
        assert view.displayed_month == 2

    def test_page_month_clamps_day(self, view: ViewController, on_commit: Mock) -> None:
        """Test month paging clamps to the target month's length."""
        navigator = KeyboardNavigator(view, on_commit, initial_focus=date(2024, 3, 31))

        navigator.handle_key("PageUp")

        assert navigator.focused_date == date(2024, 2, 29)
        assert view.displayed_month == 2

    def test_shift_page_moves_year(self, navigator: KeyboardNavigator, view: ViewController) -> None:
        """Test Shift+PageDown moves one year."""
        navigator.handle_key("PageDown", shift=True)

        assert navigator.focused_date == date(2025, 3, 15)
        assert view.displayed_year == 2025

    def test_commit_delegates_without_moving(self, navigator: KeyboardNavigator, on_commit: Mock) -> None:
        """Test Enter and Space hand the focused date to the click handler."""
        navigator.handle_key("Enter")
        navigator.handle_key(KeyEvent(KeyCode.SPACE))

        assert on_commit.call_count == 2
        on_commit.assert_called_with(date(2024, 3, 15))
        assert navigator.focused_date == date(2024, 3, 15)

    def test_unhandled_key_returns_false(self, navigator: KeyboardNavigator, on_commit: Mock) -> None:
        """Test keys outside the protocol are reported as not consumed."""
        assert navigator.handle_key("Tab") is False
        assert navigator.handle_key("ArrowLeft") is True
        on_commit.assert_not_called()

    def test_unknown_command_raises(self, navigator: KeyboardNavigator) -> None:
        """Test the dispatcher rejects foreign command objects."""
        with pytest.raises(TypeError):
            navigator.execute(object())

    def test_rehome_after_view_change(self, navigator: KeyboardNavigator, view: ViewController) -> None:
        """Test focus is clamped into a month changed by other controls."""
        view.page_to(date(2024, 2, 1))
        navigator.move_focus(date(2024, 1, 31))
        view.page_to(date(2024, 2, 1))

        assert navigator.rehome() == date(2024, 2, 29)

    def test_rehome_keeps_focus_inside_month(self, navigator: KeyboardNavigator) -> None:
        """Test rehome is a no-op when focus is already displayed."""
        assert navigator.rehome() == date(2024, 3, 15)

    def test_default_focus_is_today(self, view: ViewController, on_commit: Mock) -> None:
        """Test focus defaults to today."""
        assert KeyboardNavigator(view, on_commit).focused_date == date.today()


class TestDateLimits:
    """Test focus movement at the edges of the ``date`` range."""

    @pytest.fixture
    def last_view(self) -> ViewController:
        return ViewController(initial_date=date(9999, 11, 1))

    @pytest.mark.parametrize("key", ["ArrowRight", "ArrowDown", "End", "PageDown"])
    def test_moves_past_date_max_are_ignored(self, last_view: ViewController, on_commit: Mock, key: str) -> None:
        """Test keys whose target lies after 9999-12-31 leave focus and view alone."""
        navigator = KeyboardNavigator(last_view, on_commit, initial_focus=date(9999, 12, 31))

        assert navigator.handle_key(key) is True

        assert navigator.focused_date == date(9999, 12, 31)
        assert (last_view.displayed_year, last_view.displayed_month) == (9999, 11)

    def test_shift_page_past_9999_is_ignored(self, last_view: ViewController, on_commit: Mock) -> None:
        """Test Shift+PageDown in year 9999 does not raise."""
        navigator = KeyboardNavigator(last_view, on_commit, initial_focus=date(9999, 11, 15))

        navigator.handle_key("PageDown", shift=True)

        assert navigator.focused_date == date(9999, 11, 15)

    def test_focus_stays_when_month_cannot_be_shown(self, last_view: ViewController, on_commit: Mock) -> None:
        """Test focus does not enter December 9999, whose grid overflows date.max."""
        navigator = KeyboardNavigator(last_view, on_commit, initial_focus=date(9999, 11, 30))

        navigator.handle_key("ArrowRight")

        assert navigator.focused_date == date(9999, 11, 30)
        assert last_view.displayed_month == 11

    def test_moves_before_date_min_are_ignored(self, on_commit: Mock) -> None:
        """Test ArrowLeft and PageUp on 0001-01-01 keep focus."""
        view = ViewController(initial_date=date(1, 1, 1))
        navigator = KeyboardNavigator(view, on_commit, initial_focus=date(1, 1, 1))

        navigator.handle_key("ArrowLeft")
        navigator.handle_key("PageUp")

        assert navigator.focused_date == date(1, 1, 1)

    def test_move_focus_respects_view_refusal(self, on_commit: Mock) -> None:
        """Test move_focus keeps the old focus when the view declines to page."""
        view = Mock(spec=ViewController)
        view.page_to.return_value = False
        navigator = KeyboardNavigator(view, on_commit, initial_focus=date(2024, 3, 15))

        assert navigator.move_focus(date(2024, 4, 1)) == date(2024, 3, 15)
        view.page_to.assert_called_once_with(date(2024, 4, 1))
