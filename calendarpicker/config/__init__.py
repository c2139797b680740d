"""Configuration management for the calendar picker."""

from .settings import CalendarPickerSettings, LoggingSettings, get_settings, reset_settings

__all__ = ["CalendarPickerSettings", "LoggingSettings", "get_settings", "reset_settings"]
