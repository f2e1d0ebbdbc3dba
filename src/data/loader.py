"""
CSV dataset loader with validation and per-row transforms.

**Conceptual**: This module is the single entry point for turning a CSV dataset
into chart records. `load_csv` fetches the text, checks that there is a header
and data, validates required columns, parses each row, applies a caller
transform and returns the surviving records in file order.

**Failure policy**:
  - Whole-load failures (fetch, too few lines, missing columns, nothing left)
    raise a CsvLoadError subclass and abort the call.
  - Per-row failures (wrong field count, transform raised) are logged as
    RowParseWarning and only drop that row.
  - A transform returning None drops the row silently. Any other value,
    including 0 or an empty dict, is kept.

**Concurrency**: `load_csv` is a coroutine. The blocking fetch runs in a worker
thread, so several datasets can load concurrently with `asyncio.gather`. No
state is shared between calls.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from src.config.settings import LoaderSettings, get_settings
from src.data.csv_parser import parse_csv_line
from src.data.errors import (
    CsvLoadError,
    EmptyResultError,
    InsufficientDataError,
    MissingColumnsError,
    RowParseWarning,
)
from src.venues.resource_client import ResourceClient

logger = logging.getLogger(__name__)

RawRow = Dict[str, str]
RowTransform = Callable[[RawRow], Optional[Any]]


@dataclass(frozen=True)
class LoadOptions:
    """
    Options for a single `load_csv` call.

    Attributes:
        required_columns: Header names that must be present, else the load
                          fails with MissingColumnsError before any row is read.
        transform: Called with each RawRow; returns the record to keep, or
                   None to discard the row.
    """
    required_columns: Optional[Sequence[str]] = None
    transform: Optional[RowTransform] = None


def split_lines(text: str) -> List[str]:
    """Trim the whole body and split it on newlines."""
    return text.strip().split("\n")


def find_missing_columns(headers: Sequence[str], required: Sequence[str]) -> List[str]:
    """Return required column names absent from `headers`, in required order."""
    present = set(headers)
    return [column for column in required if column not in present]


def build_row(headers: Sequence[str], values: Sequence[str]) -> RawRow:
    """Zip stripped header names to stripped field values."""
    return {header.strip(): value.strip() for header, value in zip(headers, values)}


def parse_rows(
    lines: Sequence[str],
    headers: Sequence[str],
    transform: Optional[RowTransform] = None,
) -> List[Any]:
    """
    Parse data lines into records, dropping rows that cannot be used.

    Args:
        lines: Data lines only (the header line excluded).
        headers: Parsed header fields.
        transform: Optional per-row transform; None return discards the row.

    Returns:
        Surviving records in file order.
    """
    records: List[Any] = []

    for row_index, line in enumerate(lines, start=1):
        values = parse_csv_line(line)

        if len(values) != len(headers):
            _warn(RowParseWarning(
                row_index,
                f"has {len(values)} values, expected {len(headers)}",
            ))
            continue

        row = build_row(headers, values)

        try:
            record = transform(row) if transform is not None else row
        except Exception as e:
            _warn(RowParseWarning(row_index, f"transform failed: {e}"))
            continue

        if record is None:
            continue

        records.append(record)

    return records


def parse_csv_text(
    text: str,
    path: str,
    options: Optional[LoadOptions] = None,
) -> List[Any]:
    """
    Validate and parse an already-fetched CSV body.

    Args:
        text: Full dataset body.
        path: Dataset path, used in error messages.
        options: Required columns and transform.

    Returns:
        List of transformed records (RawRow dicts when no transform is given).

    Raises:
        InsufficientDataError: Fewer than two lines.
        MissingColumnsError: Required columns absent from the header.
        EmptyResultError: No row survived.
    """
    options = options or LoadOptions()
    lines = split_lines(text)

    if len(lines) < 2:
        # A blank body still splits to one (empty) line
        line_count = len(lines) if lines[0] else 0
        raise InsufficientDataError(path, line_count)

    headers = parse_csv_line(lines[0])

    if options.required_columns:
        # Compare against the same stripped names RawRow keys use ("h2\r" -> "h2")
        missing = find_missing_columns(
            [header.strip() for header in headers],
            options.required_columns,
        )
        if missing:
            raise MissingColumnsError(path, missing)

    records = parse_rows(lines[1:], headers, options.transform)

    if not records:
        raise EmptyResultError(path)

    return records


async def load_csv(
    path: str,
    options: Optional[LoadOptions] = None,
    client: Optional[ResourceClient] = None,
    settings: Optional[LoaderSettings] = None,
) -> List[Any]:
    """
    Fetch a CSV dataset and return its transformed records.

    **Steps**:
      1. Fetch the text (in a worker thread).
      2. Require a header line and at least one data line.
      3. Check required columns against the header.
      4. Parse, transform and filter each data row.
      5. Require at least one surviving record.

    Args:
        path: Dataset URL or path (relative paths resolve against the data root).
        options: Required columns and per-row transform.
        client: Caller-owned ResourceClient to fetch with. Callers running
                loads concurrently should not share one client.
        settings: Used when `client` is omitted. The load then opens its own
                  client (from these settings, or `get_settings().loader`)
                  and closes it in the worker thread after the fetch.

    Returns:
        Records in file order.

    Raises:
        FetchError: Resource unreachable or failure status.
        InsufficientDataError: Fewer than two lines.
        MissingColumnsError: Required columns absent.
        EmptyResultError: No row survived.

    Example:
        >>> records = asyncio.run(load_csv(
        ...     "Ex5/Ex5_TV_energy_55inchtv_byScreenType.csv",
        ...     LoadOptions(required_columns=["Screen_Tech"]),
        ... ))
    """
    try:
        text = await _fetch(path, client, settings)
        return parse_csv_text(text, path, options)
    except CsvLoadError as e:
        logger.error("Error loading CSV: %s", e)
        raise


async def _fetch(
    path: str,
    client: Optional[ResourceClient],
    settings: Optional[LoaderSettings],
) -> str:
    if client is not None:
        return await asyncio.to_thread(client.fetch_text, path)

    return await asyncio.to_thread(
        fetch_with_own_client, path, settings or get_settings().loader
    )


def fetch_with_own_client(path: str, settings: LoaderSettings) -> str:
    """
    Open a client, fetch `path`, close the client, all on the calling thread.

    The session is never closed from another thread, even if the awaiting
    task is cancelled while the fetch is in flight.
    """
    with ResourceClient(settings) as client:
        return client.fetch_text(path)


def _warn(warning: RowParseWarning) -> None:
    logger.warning("%s", warning)
