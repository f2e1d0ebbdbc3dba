"""
Tests for the load_chart_data action.

**Purpose**: Verify argument handling, concurrent loading, reporting and CSV
export against datasets in a temporary data root.

**Testing philosophy**: Drive the action through `main(argv)` and its helper
functions with real files (no mocks for the happy path), so the test sees the
same output an operator would.
"""

import asyncio
import sys
from pathlib import Path
from unittest.mock import patch

import pandas as pd
import pytest

# Add project root to path so we can import actions module
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from actions.load_chart_data import (
    load_datasets,
    main,
    parse_args,
    report,
    resolve_dataset_names,
)
from src.config.settings import LoaderSettings, reset_settings
from src.data.datasets import BAR_PATH, DONUT_PATH, LINE_PATH
from src.data.errors import FetchError
from src.venues.resource_client import ResourceClient

SCREEN_TYPE_CSV = (
    'Screen_Tech,"Mean(Labelled energy consumption (kWh/year))"\nLED,154.9\nOLED,260.1\n'
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate each test from CHARTS_* variables and the settings singleton."""
    monkeypatch.delenv("CHARTS_DATA_ROOT", raising=False)
    monkeypatch.delenv("CHARTS_LOG_LEVEL", raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def data_root(tmp_path):
    """Data root holding the bar and line datasets (scatter and donut absent)."""
    (tmp_path / "Ex5").mkdir()
    (tmp_path / BAR_PATH).write_text(SCREEN_TYPE_CSV, encoding="utf-8")
    (tmp_path / LINE_PATH).write_text(
        "Year,Average Price (notTas-Snowy)\n2020,50.5\n2021,abc\n",
        encoding="utf-8",
    )
    return tmp_path


def test_parse_args_defaults():
    """With no arguments, no datasets are named and nothing is overridden."""
    args = parse_args([])
    assert args.datasets == []
    assert args.data_root is None
    assert args.output_dir is None


def test_parse_args_rejects_unknown_dataset():
    """An unknown dataset name is a usage error (argparse exits)."""
    with pytest.raises(SystemExit):
        parse_args(["pie"])


def test_resolve_dataset_names():
    """
    Test dataset name expansion.

    Nothing or "all" means every dataset; repeats are dropped and the first
    mention decides the order.
    """
    assert resolve_dataset_names([]) == ["scatter", "donut", "bar", "line"]
    assert resolve_dataset_names(["line", "bar", "line"]) == ["line", "bar"]
    assert resolve_dataset_names(["bar", "all"]) == ["bar", "scatter", "donut", "line"]


def test_load_datasets_collects_failures(data_root):
    """A failed dataset is reported as its error; the others still load."""
    settings = LoaderSettings(data_root=data_root)

    outcome = asyncio.run(load_datasets(["bar", "donut"], settings))

    assert len(outcome["bar"]) == 2
    assert isinstance(outcome["donut"], FetchError)


def test_load_datasets_gives_each_load_its_own_client(data_root):
    """
    Test that concurrent dataset loads never share a ResourceClient.

    **Conceptual**: Loads run in worker threads at the same time, and an HTTP
    session is not safe to share across threads. Wrapping the client class
    counts how many were created and which instances served which load.
    """
    (data_root / DONUT_PATH).write_text(SCREEN_TYPE_CSV, encoding="utf-8")
    settings = LoaderSettings(data_root=data_root)

    with patch("src.data.loader.ResourceClient", wraps=ResourceClient) as factory:
        outcome = asyncio.run(load_datasets(["bar", "donut", "line"], settings))

    assert all(isinstance(records, list) for records in outcome.values())
    assert factory.call_count == 3


def test_report_counts_failures_and_exports(tmp_path, capsys):
    """
    Test the per-dataset report.

    Successful datasets print a ✓ line with their field names and are
    exported when an output directory is given; failures print ✗ with the
    error text and are counted.
    """
    outcome = {
        "bar": [{"screenType": "LED", "energyConsumption": 154.9}],
        "donut": FetchError("Ex5/donut.csv", status=404, reason="Not Found"),
    }

    failures = report(outcome, tmp_path / "out")

    assert failures == 1
    out = capsys.readouterr().out
    assert "✓ bar: 1 records (screenType, energyConsumption)" in out
    assert "✗ donut: Failed to load file: Ex5/donut.csv (404 Not Found)" in out
    exported = pd.read_csv(tmp_path / "out" / "bar.csv")
    assert exported["screenType"].tolist() == ["LED"]


def test_main_success(data_root, tmp_path, capsys):
    """
    Test a full run that loads and exports two datasets.

    The line export keeps only the valid 2020 row and writes its date as
    YYYY-MM-DD.
    """
    output_dir = tmp_path / "exports"

    exit_code = main([
        "bar", "line",
        "--data-root", str(data_root),
        "--output-dir", str(output_dir),
        "--log-level", "warning",
    ])

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "✓ line: 1 records (date, price)" in out
    assert "Done!" in out
    line = pd.read_csv(output_dir / "line.csv")
    assert line["price"].tolist() == [50.5]
    assert line["date"].tolist() == ["2020-01-01"]


def test_main_failure_exit_code(data_root, capsys):
    """A dataset that fails to load makes the action exit with 1."""
    exit_code = main(["scatter", "--data-root", str(data_root)])

    assert exit_code == 1
    assert "1 dataset(s) failed to load" in capsys.readouterr().out


def test_main_bad_log_level(capsys):
    """An invalid log level is reported as a configuration error."""
    assert main(["bar", "--log-level", "loud"]) == 1
    assert "Configuration error" in capsys.readouterr().out
