"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import (
    DEFAULT_LESSON_DURATION_MINUTES,
    DEFAULT_TRAVEL_BUFFER_MINUTES,
    WorkingHours,
    default_week,
)
from .domain.time_codec import is_valid_time, time_to_minutes

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class DefaultsConfig(BaseModel):
    """Defaults applied when registering a new coach."""
    lesson_duration_minutes: int = DEFAULT_LESSON_DURATION_MINUTES
    travel_buffer_minutes: int = DEFAULT_TRAVEL_BUFFER_MINUTES
    start_time: str = "09:00"
    end_time: str = "17:00"
    working_days: List[int] = Field(default_factory=lambda: [0, 1, 2, 3, 4])  # Monday-Friday

    @field_validator("lesson_duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure lesson duration is positive."""
        if value <= 0:
            raise ValueError("lesson_duration_minutes must be greater than zero")
        return value

    @field_validator("travel_buffer_minutes")
    @classmethod
    def validate_buffer(cls, value: int) -> int:
        if value < 0:
            raise ValueError("travel_buffer_minutes must not be negative")
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        """Validate a 24-hour HH:MM time."""
        if not is_valid_time(v):
            raise ValueError(f"Time must be HH:MM (24h), got {v!r}")
        return v

    @field_validator("working_days")
    @classmethod
    def validate_working_days(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range and deduplicated."""
        invalid_days = [day for day in value if day not in range(7)]
        if invalid_days:
            raise ValueError(f"working_days must be between 0 and 6, got {invalid_days}")
        # Preserve order while removing duplicates
        return list(dict.fromkeys(value))

    @model_validator(mode="after")
    def validate_hours_order(self) -> "DefaultsConfig":
        """Ensure the default window opens before it closes."""
        if time_to_minutes(self.end_time) <= time_to_minutes(self.start_time):
            raise ValueError("end_time must be later than start_time")
        return self

    def get_working_hours(self) -> List[WorkingHours]:
        """Build the default week of working hours."""
        return default_week(self.start_time, self.end_time, self.working_days)


class AppConfig(BaseModel):
    """Application configuration."""
    data_file: Path = Path("coach_data.json")
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
        return level

    def resolve_data_file(self, config_path: Path) -> Path:
        """Resolve a relative data_file against the config file's directory."""
        if self.data_file.is_absolute():
            return self.data_file
        return config_path.parent / self.data_file

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
