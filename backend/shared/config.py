"""
Central configuration for the Matchday flow service.
Uses pydantic-settings for env-based config with validation.
"""
from __future__ import annotations

from enum import Enum
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    DEV = "dev"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Root settings for the flow service."""

    model_config = SettingsConfigDict(
        env_prefix="MD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── General ──────────────────────────────────────────────
    environment: Environment = Environment.DEV
    debug: bool = False
    log_level: str = "INFO"
    instance_id: str = Field(default="", description="Unique pod/container ID for log context")

    # ── Host clock ───────────────────────────────────────────
    timezone: str = Field(default="UTC", description="IANA timezone of the automation host")

    # ── Liveness heuristics ──────────────────────────────────
    live_window_minutes: float = Field(
        default=120.0,
        gt=0,
        description="Minutes after kickoff a match scheduled today is assumed to be in progress",
    )

    # ── Provider ─────────────────────────────────────────────
    football_data_api_key: str = ""
    football_data_base_url: str = "https://api.football-data.org/v4"
    provider_request_timeout_s: float = 10.0
    provider_max_retries: int = 2
    next_match_lookahead_days: int = Field(default=30, ge=1)

    # ── Refresh loop ─────────────────────────────────────────
    team_ids: list[int] = Field(default_factory=list, description="Teams kept fresh by the refresh loop")
    refresh_interval_s: float = 60.0

    # ── API ──────────────────────────────────────────────────
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # ── Observability ────────────────────────────────────────
    metrics_enabled: bool = True
    metrics_port: int = 9090

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown IANA timezone: {value!r}") from exc
        return value

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton access to validated settings."""
    return Settings()
