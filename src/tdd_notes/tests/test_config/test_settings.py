from pathlib import Path

import pytest
from pydantic import ValidationError

from tdd_notes.config.settings import Settings, get_settings


def test_defaults(monkeypatch):
    for name in ("DATABASE_URL", "LOG_LEVEL", "LOG_FORMAT", "README_PATH", "SEED_ON_STARTUP"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.DATABASE_URL == "sqlite+aiosqlite:///:memory:"
    assert settings.is_sqlite is True
    assert settings.SEED_ON_STARTUP is True
    assert settings.README_PATH is None
    assert settings.LOG_FORMAT == "json"


def test_environment_values_are_normalized(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", " debug ")
    monkeypatch.setenv("LOG_FORMAT", "TEXT")
    monkeypatch.setenv("MONEY_REPOSITORY_URL", "https://example.com/money//")
    monkeypatch.setenv("README_PATH", "")

    settings = Settings(_env_file=None)

    assert settings.LOG_LEVEL == "DEBUG"
    assert settings.LOG_FORMAT == "text"
    assert settings.MONEY_REPOSITORY_URL == "https://example.com/money"
    assert settings.repository_urls["money"] == "https://example.com/money"
    assert settings.README_PATH is None


def test_readme_path_from_env(monkeypatch):
    monkeypatch.setenv("README_PATH", "docs/NOTES.md")
    assert Settings(_env_file=None).README_PATH == Path("docs/NOTES.md")


def test_postgres_url_is_not_sqlite():
    settings = Settings(_env_file=None, DATABASE_URL="postgresql+psycopg://notes@db/notes")
    assert settings.is_sqlite is False


def test_invalid_log_format_is_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, LOG_FORMAT="xml")


def test_get_settings_is_cached():
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()
