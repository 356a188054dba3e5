"""
Configuration settings for nomad records.

Uses Pydantic Settings to load environment variables controlling how date and
time values are normalized before they reach a wire format, and how the
package logs.
"""
from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Codec
    time_zone: Literal["utc", "local"] = Field("utc", alias="NOMAD_TIME_ZONE")

    # Logging
    log_level: str = Field("INFO", alias="NOMAD_LOG_LEVEL")
    json_logs: bool = Field(False, alias="NOMAD_JSON_LOGS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("time_zone", mode="before")
    @classmethod
    def normalize_time_zone(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    def resolve_tzinfo(self) -> tzinfo:
        """
        Return the zone date/time values are normalized to.

        "local" resolves to the host's current UTC offset.
        """
        if self.time_zone == "local":
            return datetime.now().astimezone().tzinfo or timezone.utc
        return timezone.utc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
