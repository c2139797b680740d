"""Settings management using Pydantic for type validation and configuration."""

import logging
import os
from datetime import date
from pathlib import Path
from typing import Any, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.models import CalendarMode, CalendarOptions, CalendarView
from ..core.presets import TodayProvider, default_presets, select_presets

logger = logging.getLogger(__name__)

ENV_PREFIX = "CALENDARPICKER_"


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    model_config = ConfigDict(validate_assignment=True)

    # Console Logging
    console_enabled: bool = Field(default=True, description="Enable console logging")
    console_level: str = Field(
        default="WARNING",
        description="Console log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    console_colors: bool = Field(
        default=True, description="Enable colored console output (auto-detected)"
    )

    # File Logging
    file_enabled: bool = Field(default=False, description="Enable file logging")
    file_level: str = Field(
        default="DEBUG",
        description="File log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    file_directory: Optional[str] = Field(
        default=None, description="Custom log directory (defaults to data_dir/logs)"
    )
    file_prefix: str = Field(default="calendarpicker", description="Log file prefix")
    max_log_files: int = Field(default=5, description="Maximum number of log files to keep")
    include_function_names: bool = Field(
        default=True, description="Include function names and line numbers in file logs"
    )

    # Third-party Libraries
    third_party_level: str = Field(
        default="WARNING", description="Log level for third-party libraries"
    )


class CalendarPickerSettings(BaseSettings):
    """Application settings with environment variable support."""

    # Private attributes
    _explicit_args: set = PrivateAttr(default_factory=set)
    _env_vars_set: set = PrivateAttr(default_factory=set)
    _config_path: Optional[Path] = PrivateAttr(default=None)

    # Calendar behaviour
    mode: CalendarMode = Field(default=CalendarMode.SINGLE, description="single or range")
    view: CalendarView = Field(
        default=CalendarView.SINGLE_MONTH, description="single-month or dual-month"
    )
    initial_date: Optional[date] = Field(
        default=None, description="Preselected date (range start in range mode)"
    )
    min_date: Optional[date] = Field(default=None, description="Earliest selectable date")
    max_date: Optional[date] = Field(default=None, description="Latest selectable date")
    show_presets: bool = Field(default=False, description="Show preset tabs in range mode")
    presets: List[str] = Field(
        default_factory=list, description="Built-in preset ids to show (empty means all)"
    )
    hide_actions: bool = Field(default=False, description="Hide the Clear/Apply actions")

    # Year picker
    year_picker_span: int = Field(default=12, ge=1, description="Years shown by the year picker")
    year_picker_offset: int = Field(
        default=5, ge=0, description="Years before the displayed year where the window starts"
    )
    decade_step: int = Field(default=10, ge=1, description="Years moved by the decade stepper")

    # Logging
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    # Paths
    config_dir: Path = Field(default_factory=lambda: Path.home() / ".config" / "calendarpicker")
    data_dir: Path = Field(
        default_factory=lambda: Path.home() / ".local" / "share" / "calendarpicker"
    )

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        validate_assignment=True,
    )

    def __init__(self, **kwargs: Any) -> None:
        config_path = kwargs.pop("_config_file", None)

        # Track which environment variables are set before calling parent
        env_vars_set = {
            key[len(ENV_PREFIX) :].lower() for key in os.environ if key.startswith(ENV_PREFIX)
        }

        super().__init__(**kwargs)

        self._explicit_args = set(kwargs.keys())
        self._env_vars_set = env_vars_set
        self._config_path = Path(config_path) if config_path else None

        # Load YAML configuration after basic initialization
        self._load_yaml_config()

    def _find_config_file(self) -> Optional[Path]:
        """Find config file: explicit path, then project directory, then user home."""
        if self._config_path is not None:
            if self._config_path.exists():
                return self._config_path
            logger.warning(f"Config file not found: {self._config_path}")
            return None

        # Check project root directory first (go up from calendarpicker/config to project root)
        project_root = Path(__file__).parent.parent.parent
        project_config = project_root / "config" / "config.yaml"
        if project_config.exists():
            return project_config

        # Fall back to user home directory
        user_config = self.config_dir / "config.yaml"
        if user_config.exists():
            return user_config

        return None

    def _is_overridden(self, setting: str) -> bool:
        """Explicit arguments and environment variables win over YAML."""
        return setting in self._explicit_args or setting in self._env_vars_set

    def _load_calendar_settings(self, config_data: dict) -> None:
        """Load calendar behaviour settings from YAML data."""
        calendar_settings = [
            "mode",
            "view",
            "initial_date",
            "min_date",
            "max_date",
            "show_presets",
            "presets",
            "hide_actions",
        ]
        for setting in calendar_settings:
            if setting in config_data and not self._is_overridden(setting):
                setattr(self, setting, config_data[setting])

    def _load_year_picker_config(self, config_data: dict) -> None:
        """Load the ``year_picker`` section (span, offset, decade_step)."""
        year_picker = config_data.get("year_picker")
        if not year_picker:
            return

        mapping = {
            "span": "year_picker_span",
            "offset": "year_picker_offset",
            "decade_step": "decade_step",
        }
        for key, setting in mapping.items():
            if key in year_picker and not self._is_overridden(setting):
                setattr(self, setting, year_picker[key])

    def _load_logging_config(self, config_data: dict) -> None:
        """Load logging configuration from YAML data."""
        if "logging" not in config_data or "logging" in self._explicit_args:
            return

        logging_config = config_data["logging"] or {}
        for setting in LoggingSettings.model_fields:
            if setting in logging_config and f"logging__{setting}" not in self._env_vars_set:
                setattr(self.logging, setting, logging_config[setting])

    def _load_yaml_config(self) -> None:
        """Load configuration from YAML file if it exists."""
        config_file = self._find_config_file()
        if not config_file:
            return

        try:
            with config_file.open() as f:
                config_data = yaml.safe_load(f)

            if not config_data:
                return

            self._load_calendar_settings(config_data)
            self._load_year_picker_config(config_data)
            self._load_logging_config(config_data)
            logger.debug(f"Loaded configuration from {config_file}")

        except Exception as e:
            # Don't fail if YAML loading fails, just continue with defaults/env vars
            logger.warning(f"Could not load YAML config from {config_file}: {e}")

    @property
    def config_file(self) -> Path:
        """Path to the user YAML configuration file."""
        return self.config_dir / "config.yaml"

    def to_options(self, today: TodayProvider = date.today) -> CalendarOptions:
        """Build calendar options from these settings.

        Args:
            today: Clock used by the built-in presets

        Returns:
            CalendarOptions for a CalendarSession

        Raises:
            CalendarConfigError: If the configured options are inconsistent
        """
        if self.presets:
            presets = select_presets(self.presets, today)
        elif self.show_presets:
            presets = default_presets(today)
        else:
            presets = []

        options = CalendarOptions(
            mode=self.mode,
            view=self.view,
            min_date=self.min_date,
            max_date=self.max_date,
            presets=presets,
            show_presets=self.show_presets,
            hide_actions=self.hide_actions,
            year_picker_span=self.year_picker_span,
            year_picker_offset=self.year_picker_offset,
            decade_step=self.decade_step,
        )
        # Raises CalendarConfigError when min_date is after max_date
        options.constraints()
        return options


# Global settings management
_settings_instance: Optional[CalendarPickerSettings] = None


def get_settings() -> CalendarPickerSettings:
    """Get the global settings instance, creating it lazily if needed.

    Returns:
        CalendarPickerSettings: The global settings instance
    """
    if globals()["_settings_instance"] is None:
        globals()["_settings_instance"] = CalendarPickerSettings()
    return globals()["_settings_instance"]


def reset_settings() -> None:
    """Reset the global settings instance (primarily for testing)."""
    globals()["_settings_instance"] = None
