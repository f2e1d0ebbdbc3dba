"""
Error taxonomy for CSV dataset loading.

**Conceptual**: Loading a chart dataset can fail in four distinct ways, each
fatal to the load call. Every error carries the dataset path and a
human-readable message (`str(exc)`) that chart components can show verbatim.
Per-row problems are not errors: they are recorded as RowParseWarning, logged,
and the row is dropped.

**Hierarchy**:
  - CsvLoadError
      - FetchError: resource unreachable or non-success status.
      - InsufficientDataError: fewer than two lines (no header + data row).
      - MissingColumnsError: required header columns absent.
      - EmptyResultError: every data row was skipped or discarded.

Callers can catch CsvLoadError to handle all load failures, or a subclass for
fine-grained handling.
"""

from dataclasses import dataclass
from typing import Optional, Sequence


class CsvLoadError(Exception):
    """
    Base exception for dataset load failures.

    Attributes:
        path: The dataset path or URL that failed to load.
    """

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class FetchError(CsvLoadError):
    """
    Raised when a dataset cannot be retrieved.

    **Conceptual**: Covers HTTP error statuses, timeouts, connection failures
    and missing local files (reported as status 404).

    Attributes:
        status: HTTP-style status code, or None when no response was received.
        reason: Status reason phrase, or None.
    """

    def __init__(
        self,
        path: str,
        status: Optional[int] = None,
        reason: Optional[str] = None,
        detail: Optional[str] = None,
    ):
        if status is not None:
            reason_part = f" {reason}" if reason else ""
            message = f"Failed to load file: {path} ({status}{reason_part})"
        else:
            message = f"Failed to load file: {path}"
        if detail:
            message = f"{message}. {detail}"
        super().__init__(message, path)
        self.status = status
        self.reason = reason


class InsufficientDataError(CsvLoadError):
    """Raised when a dataset has no header line or no data line."""

    def __init__(self, path: str, line_count: int):
        super().__init__(
            f"File contains insufficient data: {path} "
            f"({line_count} line(s), need a header and at least one data row)",
            path,
        )
        self.line_count = line_count


class MissingColumnsError(CsvLoadError):
    """
    Raised when required columns are absent from the header.

    Attributes:
        missing: Missing column names, in the order they were required.
    """

    def __init__(self, path: str, missing: Sequence[str]):
        super().__init__(
            f"Missing required columns: {', '.join(missing)} (in {path})",
            path,
        )
        self.missing = list(missing)


class EmptyResultError(CsvLoadError):
    """Raised when no data row survived parsing, transform and filtering."""

    def __init__(self, path: str):
        super().__init__(f"No valid data rows found in file: {path}", path)


@dataclass(frozen=True)
class RowParseWarning:
    """
    Non-fatal problem with a single data row.

    Never raised. The loader logs it and drops the row.

    Attributes:
        row_index: 1-based index of the data line (the header is line 0).
        message: What went wrong with the row.
    """
    row_index: int
    message: str

    def __str__(self) -> str:
        return f"Row {self.row_index}: {self.message}. Skipping."
