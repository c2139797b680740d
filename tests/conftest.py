"""Shared test configuration and fixtures."""

from datetime import date
from typing import Callable

import pytest

from calendarpicker.config.settings import reset_settings
from calendarpicker.core.models import CalendarMode, CalendarOptions, CalendarView
from calendarpicker.core.presets import default_presets
from calendarpicker.ui.calendar import CalendarSession

FIXED_TODAY = date(2024, 3, 15)


@pytest.fixture
def fixed_today() -> date:
    """A Friday in March 2024 used as "today" throughout the tests."""
    return FIXED_TODAY


@pytest.fixture
def today_provider(fixed_today: date) -> Callable[[], date]:
    """Clock returning the fixed test date."""
    return lambda: fixed_today


@pytest.fixture
def single_options() -> CalendarOptions:
    return CalendarOptions(mode=CalendarMode.SINGLE)


@pytest.fixture
def range_options(today_provider: Callable[[], date]) -> CalendarOptions:
    """Range-mode options with the built-in presets shown."""
    return CalendarOptions(
        mode=CalendarMode.RANGE,
        presets=default_presets(today_provider),
        show_presets=True,
    )


@pytest.fixture
def dual_range_options() -> CalendarOptions:
    return CalendarOptions(mode=CalendarMode.RANGE, view=CalendarView.DUAL_MONTH)


@pytest.fixture
def make_session(today_provider: Callable[[], date]) -> Callable[..., CalendarSession]:
    """Factory building sessions pinned to the fixed test date."""

    def _make(options: CalendarOptions = None, **kwargs) -> CalendarSession:
        kwargs.setdefault("today", today_provider)
        return CalendarSession(options, **kwargs)

    return _make


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch):
    """Isolate tests from CALENDARPICKER_* environment variables and the settings singleton."""
    import os

    for key in list(os.environ):
        if key.startswith("CALENDARPICKER_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()
