"""
Application configuration for the CCRM platform.

Settings come from (highest priority first) explicit overrides, a JSON
configuration file, ``CCRM_*`` environment variables and the defaults below.
The resulting :class:`AppConfig` is passed explicitly to every service.
"""

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import Field, PrivateAttr, ValidationError as PydanticValidationError
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.enums import CREDITS_PER_COURSE, Semester
from .core.exceptions import CCRMException, ConfigurationError


logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AppConfig(BaseSettings):
    """Runtime configuration: directories, enrollment limits and display settings."""

    model_config = SettingsConfigDict(env_prefix="CCRM_")

    app_name: str = "Campus Course & Records Manager"
    app_version: str = "1.0.0"

    data_dir: Path = Path("data")
    backup_dir: Optional[Path] = None
    export_dir: Optional[Path] = None
    import_dir: Optional[Path] = None

    max_students_per_course: int = Field(default=30, gt=0)
    max_courses_per_student: int = Field(default=6, gt=0)
    minimum_gpa: float = Field(default=2.0, ge=0.0, le=10.0)
    default_semester: Semester = Semester.FALL

    log_level: str = "INFO"
    error_log_retention: int = Field(default=10, gt=0)

    _started_at: float = PrivateAttr(default_factory=time.monotonic)

    @field_validator("default_semester", mode="before")
    @classmethod
    def parse_semester(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return Semester.parse(value)
            except CCRMException as exc:
                raise ValueError(exc.message)
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Any) -> str:
        level = str(value).strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @model_validator(mode="after")
    def derive_directories(self) -> "AppConfig":
        if self.backup_dir is None:
            self.backup_dir = self.data_dir / "backups"
        if self.export_dir is None:
            self.export_dir = self.data_dir / "exports"
        if self.import_dir is None:
            self.import_dir = self.data_dir / "imports"
        return self

    @property
    def log_dir(self) -> Path:
        return self.data_dir / "logs"

    @property
    def max_credits_per_student(self) -> int:
        """Credit ceiling implied by the per-student course limit."""
        return self.max_courses_per_student * CREDITS_PER_COURSE

    @property
    def uptime_seconds(self) -> float:
        return time.monotonic() - self._started_at

    def ensure_directories(self) -> None:
        """Create the data directory tree."""
        for directory in (self.data_dir, self.backup_dir, self.export_dir, self.import_dir):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise ConfigurationError(f"Cannot create directory {directory}: {exc}",
                                         details={"directory": str(directory)})
        logger.debug("Ensured data directories under %s", self.data_dir)

    def summary(self) -> str:
        """Render the active configuration as text."""
        lines = [
            "=== CCRM Configuration ===",
            f"Application: {self.app_name} v{self.app_version}",
            f"Data Directory: {self.data_dir}",
            f"Backup Directory: {self.backup_dir}",
            f"Export Directory: {self.export_dir}",
            f"Import Directory: {self.import_dir}",
            f"Max Students per Course: {self.max_students_per_course}",
            f"Max Courses per Student: {self.max_courses_per_student}",
            f"Minimum GPA: {self.minimum_gpa}",
            f"Default Semester: {self.default_semester.display_name}",
            f"Log Level: {self.log_level}",
            f"Error Logs Kept: {self.error_log_retention}",
            f"Uptime: {self.uptime_seconds:.0f} seconds",
        ]
        return "\n".join(lines) + "\n"


def load_config(path: Optional[Union[str, Path]] = None, **overrides: Any) -> AppConfig:
    """Build an :class:`AppConfig` from an optional JSON file plus overrides."""
    values: Dict[str, Any] = {}
    if path is not None:
        try:
            with open(path, "r", encoding="utf-8") as f:
                values = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigurationError(f"Cannot read configuration file {path}: {exc}",
                                     details={"path": str(path)})
        if not isinstance(values, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a JSON object")

    values.update({key: value for key, value in overrides.items() if value is not None})

    try:
        config = AppConfig(**values)
    except PydanticValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}",
                                 details={"errors": exc.errors()})
    logger.debug("Configuration loaded (data_dir=%s)", config.data_dir)
    return config
