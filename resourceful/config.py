"""
Resourceful — Configuration
============================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads RESOURCEFUL_* environment variables (or a .env
       file), validates types/ranges, and provides a singleton `settings` object.
Who:   Read by the API (default prefix, field naming), the application factory
       (logging, CORS, server bind) and the SQL data source helpers.
When:  Loaded once at module import time.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Library and server settings loaded from the environment.

    Everything has a development default; nothing is required.
    Attributes are grouped by concern.
    """

    # ── Routing ───────────────────────────────────────────────────────────
    # Prefix used when API() is built without an explicit one.
    # Normalized by the API to start and end with "/".
    api_prefix: str = Field(default="/")

    # Wire casing for record fields: "camel" (createdAt) or "snake" (created_at)
    field_naming: str = Field(default="camel")

    @field_validator("field_naming")
    @classmethod
    def validate_field_naming(cls, v: str) -> str:
        valid = {"camel", "snake"}
        lower = v.lower()
        if lower not in valid:
            raise ValueError(f"Invalid field_naming '{v}'. Must be one of: {valid}")
        return lower

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── HTTP middleware ───────────────────────────────────────────────────
    # Comma-separated origins; CORS middleware is only installed when set.
    cors_origins: str = Field(default="")

    # Responses smaller than this are sent uncompressed
    gzip_minimum_size: int = Field(default=500, ge=0)

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list, dropping blanks."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── SQL data source ───────────────────────────────────────────────────
    # Any async SQLAlchemy URL: sqlite+aiosqlite://..., postgresql+asyncpg://...
    database_url: str = Field(default="sqlite+aiosqlite:///./resourceful.db")

    # Pool sizing, ignored for SQLite (single-file databases use their own pool)
    db_pool_size: int = Field(default=20, ge=1, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_prefix="RESOURCEFUL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Singleton instance, imported throughout the package
settings = Settings()
