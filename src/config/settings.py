"""
Configuration settings for chart data ingestion.

**Conceptual**: This module provides strongly-typed configuration objects that
load from environment variables (via .env files). Settings are validated at
construction, so a bad timeout or empty encoding fails at startup rather than
halfway through loading a dataset.

**What is configurable**:
  - Where relative dataset paths are resolved (the data root).
  - HTTP timeout for remote datasets.
  - Text encoding used to decode dataset bodies.
  - Default log level for the command-line actions.

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

# Try to load .env file if present (dev/local environments)
try:
    from dotenv import load_dotenv
    # Load .env from project root
    env_path = Path(__file__).parent.parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)
except ImportError:
    # python-dotenv not installed; assume environment variables are set externally
    pass


_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class LoaderSettings:
    """
    Configuration for fetching and decoding CSV datasets.

    **Conceptual**: Chart datasets are addressed by a path such as
    "Ex5/Ex5_TV_energy.csv" or by a full http(s) URL. Relative paths are
    resolved against `data_root`; URLs are fetched over HTTP with
    `timeout_seconds`.

    Attributes:
        data_root: Directory that relative dataset paths resolve against.
                   Defaults to the current working directory.
        timeout_seconds: HTTP request timeout in seconds (default 30).
        encoding: Text encoding for dataset bodies (default "utf-8").
        log_level: Log level name used by actions (default "INFO").
    """
    data_root: Path = field(default_factory=lambda: Path("."))
    timeout_seconds: int = 30
    encoding: str = "utf-8"
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate settings after initialization."""
        # Frozen dataclass: coerce str -> Path through object.__setattr__
        if not isinstance(self.data_root, Path):
            object.__setattr__(self, "data_root", Path(self.data_root))
        if self.timeout_seconds <= 0:
            raise ValueError(
                f"timeout_seconds must be positive, got: {self.timeout_seconds}"
            )
        if not self.encoding:
            raise ValueError("encoding cannot be empty")
        if self.log_level.upper() not in _VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {list(_VALID_LOG_LEVELS)}, got: {self.log_level}"
            )

    @classmethod
    def from_env(cls) -> "LoaderSettings":
        """
        Load loader settings from environment variables.

        **Environment variables** (all optional):
          - CHARTS_DATA_ROOT: Directory for relative dataset paths (default ".").
          - CHARTS_TIMEOUT_SECONDS: HTTP timeout in seconds (default 30).
          - CHARTS_ENCODING: Body text encoding (default "utf-8").
          - CHARTS_LOG_LEVEL: Log level for actions (default "INFO").

        Returns:
            LoaderSettings object with values loaded from environment.

        Raises:
            ValueError: If CHARTS_TIMEOUT_SECONDS is not an integer, or any
                        value fails validation.

        Usage example:
            >>> # In .env file:
            >>> # CHARTS_DATA_ROOT=/srv/www/charts
            >>>
            >>> settings = LoaderSettings.from_env()
            >>> print(settings.data_root)  # /srv/www/charts
        """
        data_root = os.getenv("CHARTS_DATA_ROOT", ".")
        timeout_str = os.getenv("CHARTS_TIMEOUT_SECONDS", "30")
        encoding = os.getenv("CHARTS_ENCODING", "utf-8")
        log_level = os.getenv("CHARTS_LOG_LEVEL", "INFO")

        try:
            timeout_seconds = int(timeout_str)
        except ValueError:
            raise ValueError(
                f"CHARTS_TIMEOUT_SECONDS must be an integer, got: {timeout_str}"
            )

        return cls(
            data_root=Path(data_root),
            timeout_seconds=timeout_seconds,
            encoding=encoding,
            log_level=log_level.upper(),
        )


@dataclass(frozen=True)
class Settings:
    """
    Global settings for the charts project.

    **Usage pattern**:
      ```python
      from src.config.settings import get_settings

      settings = get_settings()
      client = ResourceClient(settings.loader)
      ```

    Attributes:
        loader: Dataset fetch/decode settings.
    """
    loader: LoaderSettings = field(default_factory=LoaderSettings)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load global settings from environment variables."""
        return cls(loader=LoaderSettings.from_env())


# Convenience singleton for accessing settings throughout the application.
# Tests construct their own Settings/LoaderSettings instead of using this.
_default_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings singleton.

    Settings are loaded from the environment on first call, then cached.

    Returns:
        Global Settings singleton.

    Raises:
        ValueError: If environment values fail validation.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = Settings.from_env()

    return _default_settings


def reset_settings() -> None:
    """Drop the cached singleton so the next get_settings() re-reads the environment."""
    global _default_settings
    _default_settings = None
