"""Mapper configuration management using Pydantic Settings.

This module defines the `Settings` class, which loads configuration parameters
from environment variables and a `.env` file. It centralizes the few tunable
behaviours of the mapping engine: logging level, default mapping name,
context enforcement, proxy narrowing and provider modules to pre-load.

The `get_settings` function provides a cached, singleton instance of the
configuration, ensuring consistent settings throughout the application.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict as _SettingsConfigDict


class Settings(BaseSettings):
    """Defines all mapper configuration parameters.

    Values come from environment variables or a `.env` file; explicit keyword
    arguments (as used in tests) take precedence.
    """

    model_config = _SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    LOG_LEVEL: str = Field(
        default="WARNING", description="Level applied to the handcraft_mapper logger"
    )
    DEFAULT_MAPPING_NAME: str = Field(
        default="",
        description="Mapping name used when a caller does not pass one ('' = unnamed mapping)",
    )
    ENFORCE_MAPPING_CONTEXT: bool = Field(
        default=True,
        description=(
            "If true, a fresh MappingContext is created when the caller supplies none; "
            "if false, context-aware mappings receive None instead"
        ),
    )
    PROXY_NARROWING: bool = Field(
        default=True,
        description=(
            "If true, proxies are keyed by the class they advertise via __class__; "
            "if false, the plain runtime type is used"
        ),
    )
    # Use Any type to prevent Pydantic Settings JSON decoding; validator converts to list[str]
    PROVIDER_MODULES: Any = Field(
        default_factory=list,
        description=(
            "Comma-separated dotted module names scanned for @mapping_provider classes "
            "when building a mapper from settings. Empty list = no pre-loading."
        ),
    )

    @field_validator("PROVIDER_MODULES", mode="before")
    @classmethod
    def parse_comma_separated(cls, v: str | list[str]) -> list[str]:
        """Parse comma-separated string into list of stripped strings.

        Supports both direct list input (from code/tests) and comma-separated
        string input (from environment variables). Empty strings result in
        empty list.
        """
        if isinstance(v, list):
            return [s.strip() for s in v if s.strip()]
        if isinstance(v, str):
            if not v.strip():
                return []
            return [s.strip() for s in v.split(",") if s.strip()]
        return []

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        """Upper-case and validate the level name against the logging module."""
        level = str(v).strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v!r}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached, singleton instance of the mapper settings."""
    return Settings()


__all__ = ["Settings", "get_settings"]
