"""
Exceptions for the calendarpicker engine.

Engine transitions (clicks, keys, presets) never raise; these exceptions are
reserved for invalid configuration detected when a calendar is constructed
or when settings are loaded.
"""

from typing import Any, Optional


class CalendarError(Exception):
    """Base exception for all calendarpicker errors.

    Args:
        message: Human-readable error description
        details: Optional dictionary containing additional error context

    Example:
        >>> raise CalendarError("Calendar setup failed", {"component": "presets"})
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class CalendarConfigError(CalendarError):
    """Exception raised when calendar options or settings are inconsistent.

    Raised for a ``min_date`` after ``max_date``, a default value shaped for
    the wrong selection mode, duplicate preset ids and similar problems.

    Args:
        message: Human-readable validation error description
        field_name: Name of the option that failed validation
        field_value: The invalid value
        details: Additional context about the failure

    Example:
        >>> raise CalendarConfigError(
        ...     "min_date must not be after max_date",
        ...     field_name="min_date",
        ...     field_value="2024-05-01",
        ... )
    """

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        field_value: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.field_name = field_name
        self.field_value = field_value

        error_details = details or {}
        if field_name:
            error_details["field_name"] = field_name
        if field_value is not None:
            error_details["field_value"] = str(field_value)

        super().__init__(message, error_details)
