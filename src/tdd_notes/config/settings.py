from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from pathlib import Path
from typing import Literal
from functools import lru_cache
from ..validators.config_validators import (
    to_uppercase,
    to_lowercase,
    strip_trailing_slash,
    empty_to_none,
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment.
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "development"

    # Database configuration
    # In-memory by default, so every start reloads the tables from the notes or the
    # catalog. A file or Postgres URL keeps the append-only history across restarts.
    DATABASE_URL: str = "sqlite+aiosqlite:///:memory:"
    SQLALCHEMY_ECHO: bool = False

    # Registry
    SEED_ON_STARTUP: bool = True
    README_PATH: Path | None = None
    MONEY_REPOSITORY_URL: str = "https://github.com/tdd-notes/money-example"
    XUNIT_REPOSITORY_URL: str = "https://github.com/tdd-notes/xunit-example"

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"
    LOG_TO_STDOUT: bool = True
    LOG_DIR: Path = Path("./logs")
    LOG_MAX_BYTES: int = 10_000_000  # 10 MB
    LOG_BACKUP_COUNT: int = 5
    ENABLE_SQL_LOGGING: bool = False

    # --- Derived settings ---
    @property
    def is_sqlite(self) -> bool:
        """
        True when DATABASE_URL points at SQLite (file or in-memory).

        SQLite needs a couple of engine tweaks (static pool for in-memory databases),
        see `tdd_notes.database.session.create_engine_from_settings`.
        """
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def repository_urls(self) -> dict[str, str]:
        """Base URL of each external example repository, keyed by example slug."""
        return {
            "money": self.MONEY_REPOSITORY_URL,
            "xunit": self.XUNIT_REPOSITORY_URL,
        }

    # --- Validators ---
    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: str | None) -> str | None:
        """
        Normalize the LOG_LEVEL environment variable value to uppercase.

        Runs before type validation (mode="before") so `LOG_LEVEL=debug` in the
        environment is accepted and stored as "DEBUG", the form `logging` expects.
        """
        return to_uppercase(v)

    @field_validator("LOG_FORMAT", mode="before")
    def normalize_log_format(cls, v: str | None) -> str | None:
        """
        Normalize the LOG_FORMAT environment variable value to lowercase.
        """
        return to_lowercase(v)

    @field_validator("MONEY_REPOSITORY_URL", "XUNIT_REPOSITORY_URL", mode="before")
    def normalize_repository_url(cls, v: str | None) -> str | None:
        return strip_trailing_slash(v)

    @field_validator("README_PATH", mode="before")
    def normalize_readme_path(cls, v):
        return empty_to_none(v)

    # --- Config ---
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# get_settings() takes no arguments and always returns the same settings from the environment,
# so it is cached with @lru_cache().
@lru_cache()
def get_settings() -> Settings:
    return Settings()
