# QuoteEngine - Commercial Insurance Quote Engine
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Configuration management using Pydantic Settings."""

from beartype import beartype
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with immutable configuration."""

    model_config = SettingsConfigDict(
        env_prefix="QUOTE_ENGINE_",
        env_file=None,
        env_file_encoding="utf-8",
        frozen=True,  # Immutable settings
        validate_default=True,
        extra="forbid",
    )

    app_name: str = Field(
        default="Commercial Quote Engine",
        description="Application name",
        min_length=1,
    )
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Deployment environment",
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Root log level",
    )

    # Quote lifecycle
    quote_validity_days: int = Field(
        default=30,
        ge=1,
        le=365,
        description="Days a quoted premium remains valid",
    )
    effective_date_lag_days: int = Field(
        default=1,
        ge=0,
        le=90,
        description="Default policy start, in days after the quote date",
    )
    policy_term_months: int = Field(
        default=12,
        ge=1,
        le=36,
        description="Policy term used to derive the policy expiration date",
    )

    # Monitoring
    slow_quote_threshold_ms: int = Field(
        default=2000,
        ge=1,
        description="Quote calculations slower than this are logged as warnings",
    )


_settings: Settings | None = None


@beartype
def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


@beartype
def clear_settings_cache() -> None:
    """Clear settings cache (for testing)."""
    global _settings
    _settings = None
