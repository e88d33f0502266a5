# =============================================================================
# SuperModel Configuration — Pydantic Settings
# =============================================================================
#
# Settings are read from the environment (prefix SUPERMODEL_) or a local .env
# file, falling back to the defaults below.
#
# USAGE:
#   from supermodel.config import get_settings
#   get_settings().decimal_separator
# =============================================================================

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Library settings.

    Attributes:
        log_level: Level applied by configure_logging() when none is given.
        decimal_separator: Separator between integer and fractional digits
            when parsing numeric text.
        grouping_separator: Thousands separator accepted in numeric text.
        null_policy: What an explicit null in a payload does to a declared
            field. "skip" leaves the field untouched, "clear" sets it to None.
        store_unknown_keys: Whether keys without a declared field are stored
            on the instance as plain attributes.
    """

    log_level: str = "WARNING"

    decimal_separator: str = "."
    grouping_separator: str = ","

    null_policy: Literal["skip", "clear"] = "skip"
    store_unknown_keys: bool = True

    model_config = SettingsConfigDict(
        env_prefix="SUPERMODEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("decimal_separator", "grouping_separator")
    @classmethod
    def _single_character(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("separators must be a single character")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


@lru_cache
def get_settings() -> Settings:
    """
    Create and cache the Settings instance.

    Tests that need different values should build Settings(...) directly
    or call get_settings.cache_clear() after patching the environment.
    """
    return Settings()
