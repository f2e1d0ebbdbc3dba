"""
Text resource client for chart datasets.

**Conceptual**: Datasets live either on a web server (addressed by an
http/https URL) or on the local filesystem (addressed by a path relative to the
configured data root). This module hides that difference behind one call,
`ResourceClient.fetch_text(path)`, which returns the decoded body or raises
FetchError. It does NOT parse CSV; that is the loader's job.

**Layers**:
  1. ResourceClient (this file) - retrieves bytes, maps failures to FetchError
  2. CSV loader (src/data/loader.py) - parses and validates text
  3. Dataset functions (src/data/datasets.py) - shape rows for each chart

Each layer can be tested in isolation with mocks.
"""

import logging
from pathlib import Path
from urllib.parse import urlparse

import requests

from src.config.settings import LoaderSettings
from src.data.errors import FetchError

logger = logging.getLogger(__name__)

_REMOTE_SCHEMES = ("http", "https")


def is_remote(path: str) -> bool:
    """Return True if `path` is an http(s) URL rather than a filesystem path."""
    return urlparse(str(path)).scheme.lower() in _REMOTE_SCHEMES


class ResourceClient:
    """
    Fetch dataset text over HTTP or from disk.

    **Responsibilities**:
      - Resolve relative paths against `settings.data_root`
      - Make HTTP requests with timeout and a project User-Agent
      - Treat status >= 400, timeouts and connection errors as FetchError
      - Treat a missing local file as FetchError with status 404
      - Decode bodies with `settings.encoding`

    **Example usage**:
        >>> from src.config.settings import get_settings
        >>> with ResourceClient(get_settings().loader) as client:
        ...     text = client.fetch_text("Ex5/Ex5_TV_energy.csv")
    """

    def __init__(self, settings: LoaderSettings):
        """
        Initialize the client with loader settings.

        Args:
            settings: Data root, timeout and encoding configuration.
        """
        self.settings = settings
        self.session = requests.Session()
        self.session.headers.update({
            "Accept": "text/csv, text/plain;q=0.9, */*;q=0.5",
            "User-Agent": "energy_charts/1.0",
        })

    def resolve(self, path: str) -> Path:
        """Resolve a local dataset path against the data root (absolute paths pass through)."""
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.settings.data_root / candidate

    def fetch_text(self, path: str) -> str:
        """
        Retrieve a dataset and return its body as text.

        Args:
            path: http(s) URL, or filesystem path (relative to the data root
                  unless absolute).

        Returns:
            Full response body decoded to str.

        Raises:
            FetchError: If the resource is unreachable or the response status
                        indicates failure. The message names the path and,
                        where one exists, the status code and reason.
        """
        if is_remote(path):
            return self._fetch_remote(str(path))
        return self._fetch_local(str(path))

    def _fetch_remote(self, url: str) -> str:
        logger.debug("GET %s", url)
        try:
            response = self.session.get(url, timeout=self.settings.timeout_seconds)
        except requests.Timeout as e:
            raise FetchError(
                url,
                detail=f"Request timed out after {self.settings.timeout_seconds}s",
            ) from e
        except requests.ConnectionError as e:
            raise FetchError(
                url,
                detail="Could not connect. Check network connection and URL",
            ) from e
        except requests.RequestException as e:
            raise FetchError(url, detail=f"HTTP request failed: {e}") from e

        if response.status_code >= 400:
            raise FetchError(url, status=response.status_code, reason=response.reason)

        # Servers often omit charset for text/csv; fall back to configured encoding
        if not response.encoding or response.encoding.lower() == "iso-8859-1":
            response.encoding = self.settings.encoding
        return response.text

    def _fetch_local(self, path: str) -> str:
        resolved = self.resolve(path)
        logger.debug("Reading %s", resolved)
        if not resolved.is_file():
            raise FetchError(path, status=404, reason="Not Found")
        try:
            return resolved.read_text(encoding=self.settings.encoding)
        except UnicodeDecodeError as e:
            raise FetchError(
                path,
                detail=f"Could not decode as {self.settings.encoding}: {e}",
            ) from e
        except OSError as e:
            raise FetchError(path, detail=f"Could not read file: {e}") from e

    def close(self):
        """Close the HTTP session and release resources."""
        self.session.close()

    def __enter__(self):
        """Enable context manager support (with statement)."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Clean up session when exiting context manager."""
        self.close()
        return False  # Don't suppress exceptions
