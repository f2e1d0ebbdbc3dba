"""
Tests for settings loading and validation (src/config/settings.py).

**Purpose**: Verify defaults, validation in __post_init__, CHARTS_* environment
parsing and the lazily created settings singleton.

Environment variables are set per test with monkeypatch.
"""

from pathlib import Path

import pytest

from src.config import settings as settings_module
from src.config.settings import LoaderSettings, Settings, get_settings, reset_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Clear CHARTS_* variables and the cached singleton around each test."""
    for name in (
        "CHARTS_DATA_ROOT",
        "CHARTS_TIMEOUT_SECONDS",
        "CHARTS_ENCODING",
        "CHARTS_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


def test_loader_settings_defaults():
    """Defaults read from the working directory with a 30s timeout."""
    settings = LoaderSettings()
    assert settings.data_root == Path(".")
    assert settings.timeout_seconds == 30
    assert settings.encoding == "utf-8"
    assert settings.log_level == "INFO"


def test_loader_settings_coerces_data_root_to_path():
    """A string data root is stored as a Path."""
    settings = LoaderSettings(data_root="/srv/charts")
    assert settings.data_root == Path("/srv/charts")


@pytest.mark.parametrize("timeout", [0, -1])
def test_loader_settings_rejects_non_positive_timeout(timeout):
    """Zero or negative timeouts are rejected at construction."""
    with pytest.raises(ValueError, match="timeout_seconds must be positive"):
        LoaderSettings(timeout_seconds=timeout)


def test_loader_settings_rejects_empty_encoding():
    """An empty encoding name is rejected."""
    with pytest.raises(ValueError, match="encoding"):
        LoaderSettings(encoding="")


def test_loader_settings_rejects_unknown_log_level():
    """Log levels must be one the logging module knows."""
    with pytest.raises(ValueError, match="log_level"):
        LoaderSettings(log_level="LOUD")


def test_from_env_reads_variables(monkeypatch, tmp_path):
    """
    Test that every CHARTS_* variable is read.

    **Conceptual**: The log level is upper-cased, so operators can write
    "debug" in a .env file.
    """
    monkeypatch.setenv("CHARTS_DATA_ROOT", str(tmp_path))
    monkeypatch.setenv("CHARTS_TIMEOUT_SECONDS", "7")
    monkeypatch.setenv("CHARTS_ENCODING", "latin-1")
    monkeypatch.setenv("CHARTS_LOG_LEVEL", "debug")

    settings = LoaderSettings.from_env()

    assert settings.data_root == tmp_path
    assert settings.timeout_seconds == 7
    assert settings.encoding == "latin-1"
    assert settings.log_level == "DEBUG"


def test_from_env_rejects_non_integer_timeout(monkeypatch):
    """A non-integer timeout names the offending variable."""
    monkeypatch.setenv("CHARTS_TIMEOUT_SECONDS", "soon")
    with pytest.raises(ValueError, match="CHARTS_TIMEOUT_SECONDS must be an integer"):
        LoaderSettings.from_env()


def test_get_settings_is_cached(monkeypatch):
    """
    Test that get_settings builds settings once.

    Later environment changes are ignored until reset_settings() clears the
    cache.
    """
    first = get_settings()
    monkeypatch.setenv("CHARTS_TIMEOUT_SECONDS", "99")
    assert get_settings() is first

    reset_settings()
    assert get_settings().loader.timeout_seconds == 99


def test_settings_from_env_wraps_loader(monkeypatch):
    """Settings.from_env builds loader settings without touching the singleton."""
    monkeypatch.setenv("CHARTS_ENCODING", "utf-16")
    settings = Settings.from_env()
    assert settings.loader.encoding == "utf-16"
    assert settings_module._default_settings is None
