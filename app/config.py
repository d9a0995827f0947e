"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"

_COMPLEXITY_LEVELS = ("low", "medium", "high")


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./meal_imports.db",
        description="Database connection URL used by SQLAlchemy for the import history",
        min_length=1,
    )
    meals_api_base_url: str = Field(
        default="http://localhost:5000/api/admin",
        description="Base URL of the catalogue API exposing the bulk meal endpoint",
        min_length=1,
    )
    meals_api_token: str | None = Field(
        default=None,
        description="Bearer token sent to the catalogue API",
    )
    meals_api_timeout_seconds: float = Field(
        default=30.0,
        description="Seconds before a bulk submission is considered failed",
        gt=0,
    )
    log_level: str = Field(
        default="INFO",
        description="Root logging level configured when the application starts",
    )
    cors_allowed_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to call the API from a browser",
    )
    app_timezone: str | None = Field(
        default=None,
        description="IANA timezone or UTC offset used for import timestamps",
    )
    review_ttl_minutes: int = Field(
        default=60,
        description="Minutes a transformed batch waits for confirmation before expiring",
        gt=0,
    )
    gas_cost_per_hour: float = Field(default=500, ge=0)
    labour_cost_per_hour: float = Field(default=1000, ge=0)
    utensil_costs: dict[str, float] = Field(
        default_factory=lambda: {"low": 100, "medium": 200, "high": 300},
        description="Flat utensil cost per complexity level",
    )
    complexity_multipliers: dict[str, float] = Field(
        default_factory=lambda: {"low": 0.8, "medium": 1.0, "high": 1.2},
        description="Multiplier applied to the cooking cost per complexity level",
    )
    profit_rate: float = Field(default=0.4, ge=0)
    chef_profit_share: float = Field(default=0.5, ge=0, le=1)

    @model_validator(mode="after")
    def _validate_complexity_tables(self) -> "Settings":
        for name in ("utensil_costs", "complexity_multipliers"):
            table = getattr(self, name)
            missing = [level for level in _COMPLEXITY_LEVELS if level not in table]
            if missing:
                raise ValueError(
                    f"{name.upper()} must define a value for: {', '.join(missing)}"
                )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
