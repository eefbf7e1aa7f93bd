"""Application configuration and settings management."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models.domain import Coordinate

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="BROODBOT_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "BroodBot"
    data_root: Path = Field(default=Path("data"), description="Root directory for locally stored state.")
    storage_file: Optional[Path] = Field(
        default=None,
        description="JSON file backing the key-value store. Defaults to <data_root>/broodbot.json.",
    )
    fallback_latitude: float = Field(default=52.0907, ge=-90.0, le=90.0)
    fallback_longitude: float = Field(default=5.1214, ge=-180.0, le=180.0)
    default_radius_km: float = Field(default=20.0, ge=0.0)
    default_nearest_limit: int = Field(default=5, ge=0)
    geolocation_url: Optional[str] = Field(
        default=None,
        description="IP geolocation endpoint returning JSON with latitude/longitude (e.g., https://ipapi.co/json/).",
    )
    geolocation_timeout_seconds: float = Field(default=10.0, gt=0.0)
    nominatim_url: str = Field(
        default="https://nominatim.openstreetmap.org",
        description="Base URL of the Nominatim service used for reverse geocoding.",
    )
    geocoding_language: str = "nl"
    user_agent: str = "BroodBot/1.0"
    log_level: str = "INFO"

    @field_validator("data_root", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("storage_file", mode="before")
    @classmethod
    def _expand_optional_path(cls, value: Any) -> Optional[Path]:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> str:
        level = str(value or "INFO").strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level '{value}'")
        return level

    @property
    def resolved_storage_file(self) -> Path:
        return self.storage_file or self.data_root / "broodbot.json"

    @property
    def fallback_coordinate(self) -> Coordinate:
        return Coordinate(self.fallback_latitude, self.fallback_longitude)


def configure_logging(level: str | None = None) -> None:
    """Install a basic console handler and set the package log level."""

    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("broodbot").setLevel((level or settings.log_level).upper())


settings = Settings()
