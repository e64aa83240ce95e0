"""Configuration management for passpolicy.

This module uses Pydantic Settings to load and validate engine-wide
configuration from environment variables and .env files. Per-policy rule
values live in PasswordPolicy; these settings only cover the knobs that
apply to every policy (strength meter, generator ceilings, collaborator
behaviour).
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PASSPOLICY_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "passpolicy"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Strength Meter Settings
    strength_meter_type: Literal["zxcvbn", "traditional"] = "zxcvbn"
    strength_very_weak: int = Field(default=0, ge=0, le=100)
    strength_weak: int = Field(default=20, ge=0, le=100)
    strength_good: int = Field(default=45, ge=0, le=100)
    strength_strong: int = Field(default=75, ge=0, le=100)
    strength_very_strong: int = Field(default=100, ge=0, le=100)
    strength_max_test_length: int = Field(default=100, ge=1)

    # Random Generator Settings
    randomgen_max_attempts: int = Field(default=2000, ge=1)
    randomgen_jitter_count: int = Field(default=50, ge=1)
    randomgen_max_length: int = Field(default=50, ge=1)
    randomgen_strength_ceiling_quirk: bool = Field(
        default=False,
        description="Use max(100, policy) for generated password strength",
    )
    disallowed_http_inputs: list[str] = Field(
        default=[
            r"(?i).*<script.*",
            r"(?i).*&#.*",
            r"(?i).*javascript:.*",
        ]
    )

    # Wordlist Settings
    wordlist_fail_when_closed: bool = False
    shared_history_enabled: bool = True

    # External Rule Service Settings
    external_rule_url: str | None = None
    external_rule_halt_on_error: bool = False
    external_rule_timeout_seconds: float = Field(default=10.0, gt=0)

    @field_validator("disallowed_http_inputs", mode="before")
    @classmethod
    def parse_disallowed_http_inputs(cls, v: str | list[str]) -> list[str]:
        """Parse disallowed input patterns from comma-separated string or list."""
        if isinstance(v, str):
            return [pattern.strip() for pattern in v.split(",") if pattern.strip()]
        return v

    @model_validator(mode="after")
    def validate_strength_thresholds(self) -> "Settings":
        """Validate that strength thresholds are ordered from weak to strong."""
        thresholds = [
            self.strength_very_weak,
            self.strength_weak,
            self.strength_good,
            self.strength_strong,
            self.strength_very_strong,
        ]
        if thresholds != sorted(thresholds):
            raise ValueError(
                "Strength thresholds must be non-decreasing from very_weak to very_strong, "
                f"got {thresholds}"
            )
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    This function caches the settings instance to avoid reloading
    configuration on every call. Settings are loaded once at startup.

    Returns:
        Settings: Cached engine settings instance.
    """
    return Settings()
