"""
Configuration — typed, validated settings loaded from environment/.env.

Uses pydantic-settings so an embedding application can tune railkit through
the environment without touching code:

    RAILKIT_LOG_LEVEL=DEBUG
    RAILKIT_CAPTURE_STACK_TRACES=true
    RAILKIT_RULE_FAILURE_CODE=Rules.Rejected
    RAILKIT_LOG_RULE_EVALUATIONS=true

Settings are read once and cached by get_settings(). Tests that change the
environment call get_settings.cache_clear().
"""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RailkitSettings(BaseSettings):
    """
    Library-wide settings.

    Load order (highest priority first):
      1. Environment variables prefixed with RAILKIT_
      2. .env file in the working directory
      3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="RAILKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="Minimum level for railkit log events")
    capture_stack_traces: bool = Field(
        default=False,
        description="Attach the creation stack trace to Errors built through the named factories",
    )
    rule_failure_code: str = Field(
        default="Rule.Failed",
        min_length=1,
        description="Error code used when a bool predicate lifted into a rule returns False",
    )
    log_rule_evaluations: bool = Field(
        default=False,
        description="Emit a debug event for every rule evaluated by the engine",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Reject names the logging module does not know."""
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> RailkitSettings:
    """Return the process-wide settings instance."""
    return RailkitSettings()
