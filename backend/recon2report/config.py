"""
Recon2Report application configuration.

Loads settings from environment variables with sensible defaults for local
use.  Uses Pydantic BaseSettings so every value can be overridden via an
environment variable or a ``.env`` file placed in the working directory.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for Recon2Report.

    All attributes can be overridden through environment variables of the same
    name (case-insensitive).  For example, set ``RULES_DIR`` in the shell or
    in a ``.env`` file to load a custom rule corpus.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ─────────────────────────────────────────────────────────
    APP_NAME: str = "Recon2Report"
    API_V1_PREFIX: str = "/api/v1"
    DEBUG: bool = False
    LOG_LEVEL: Optional[str] = None

    # ── Rule corpus ─────────────────────────────────────────────────────────
    # When unset, the corpus bundled with the package is used.
    RULES_DIR: Optional[Path] = None

    # ── CORS ────────────────────────────────────────────────────────────────
    CORS_ORIGINS: Annotated[list[str], NoDecode] = ["http://localhost:3000"]

    # ── Validators ──────────────────────────────────────────────────────────

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, value: object) -> list[str]:
        """Accept a comma-separated string *or* an actual list."""
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return list(value)  # type: ignore[arg-type]

    @field_validator("LOG_LEVEL", mode="after")
    @classmethod
    def normalise_log_level(cls, value: Optional[str]) -> Optional[str]:
        """Upper-case the level name so ``debug`` and ``DEBUG`` both work."""
        return value.upper() if value else None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton of the application settings.

    Using ``lru_cache`` ensures the ``.env`` file is read only once and the
    same ``Settings`` instance is reused across the entire process.
    """
    return Settings()
