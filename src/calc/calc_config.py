"""
Runtime configuration for CALC, read from environment variables.

Every variable carries the prefix CALC_ (for example `CALC_PRECISION=80`) and
may also be placed in a `.env` file in the working directory. Command-line
flags override these values.
"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Significant decimal digits kept by Float results
    precision: int = Field(default=50, ge=1, le=10_000)

    # Seed for the `rand` constant; system entropy when unset
    seed: int | None = None

    # Logging
    log_level: str = "WARNING"

    # REPL
    prompt: str = ">> "

    model_config = SettingsConfigDict(env_prefix="CALC_", env_file=".env", extra="ignore")

    @field_validator("log_level")
    @classmethod
    def known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level


@lru_cache
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
