"""Calendar Picker - date and date-range selection engine with a terminal front-end."""

__version__ = "1.0.0"
__author__ = "CalendarBot Team"
__email__ = "support@calendarbot.local"
__description__ = "Calendar date-selection engine: month grids, ranges, presets and keyboard navigation"

# Package metadata
__all__ = [
    "__author__",
    "__description__",
    "__email__",
    "__version__",
]
