#!/usr/bin/env python3
"""
Load chart datasets and print a summary (optionally export them to CSV).

**Purpose**: Runs the same dataset loaders the charts use, so a broken or
renamed CSV shows up here with the exact error message the chart would
display. Datasets are loaded concurrently.

**Usage**:
    python actions/load_chart_data.py
    python actions/load_chart_data.py bar line --data-root /srv/www/charts
    python actions/load_chart_data.py all --output-dir data/exports

**Example output**:
    $ python actions/load_chart_data.py bar
    Loading bar from data root . ...
    ✓ bar: 3 records (screenType, energyConsumption)
    Done!

Exit status is 1 if any dataset failed to load.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

# Add project root to Python path so we can import src modules
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.config.settings import LoaderSettings, get_settings
from src.data.datasets import DATASETS, records_to_frame
from src.data.errors import CsvLoadError

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None):
    """
    Parse command line arguments.

    Returns:
        Namespace with attributes: datasets (list), data_root, output_dir,
        log_level.
    """
    parser = argparse.ArgumentParser(
        description="Load chart datasets and report what each chart would receive",
        epilog="""
Examples:
  # Load every dataset from the configured data root
  python actions/load_chart_data.py

  # Load two datasets from a specific directory
  python actions/load_chart_data.py bar line --data-root /srv/www/charts

  # Export all records to CSV
  python actions/load_chart_data.py all --output-dir data/exports
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "datasets",
        nargs="*",
        help=f"Datasets to load: {', '.join(DATASETS)} or all (default: all)",
    )

    parser.add_argument(
        "--data-root",
        type=str,
        default=None,
        help="Directory dataset paths resolve against (default: CHARTS_DATA_ROOT or .)",
    )

    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="If given, write each dataset's records to <output-dir>/<name>.csv",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (default: CHARTS_LOG_LEVEL or INFO)",
    )

    args = parser.parse_args(argv)

    unknown = [name for name in args.datasets if name != "all" and name not in DATASETS]
    if unknown:
        parser.error(f"unknown dataset(s): {', '.join(unknown)}")

    return args


def resolve_dataset_names(requested: List[str]) -> List[str]:
    """Expand "all" (or nothing) and drop duplicates, keeping first-seen order."""
    names: List[str] = []
    for name in requested or ["all"]:
        expanded = list(DATASETS) if name == "all" else [name]
        for item in expanded:
            if item not in names:
                names.append(item)
    return names


def build_settings(data_root: Optional[str], log_level: Optional[str]) -> LoaderSettings:
    """Environment settings with command line overrides applied."""
    base = get_settings().loader
    return LoaderSettings(
        data_root=Path(data_root) if data_root else base.data_root,
        timeout_seconds=base.timeout_seconds,
        encoding=base.encoding,
        log_level=(log_level or base.log_level).upper(),
    )


async def load_datasets(
    names: List[str],
    settings: LoaderSettings,
) -> Dict[str, object]:
    """
    Load the named datasets concurrently.

    Each load opens, uses and closes its own ResourceClient, so concurrent
    fetches never share an HTTP session.

    Returns:
        Mapping of dataset name to its record list, or to the CsvLoadError
        that stopped it.
    """
    results = await asyncio.gather(
        *(DATASETS[name](settings=settings) for name in names),
        return_exceptions=True,
    )

    outcome: Dict[str, object] = {}
    for name, result in zip(names, results):
        # Anything other than a load failure is a bug; let it surface
        if isinstance(result, BaseException) and not isinstance(result, CsvLoadError):
            raise result
        outcome[name] = result
    return outcome


def report(outcome: Dict[str, object], output_dir: Optional[Path]) -> int:
    """Print one line per dataset, export if requested; return failure count."""
    failures = 0

    for name, result in outcome.items():
        if isinstance(result, CsvLoadError):
            print(f"✗ {name}: {result}")
            failures += 1
            continue

        fields = ", ".join(result[0].keys()) if result else ""
        print(f"✓ {name}: {len(result)} records ({fields})")

        if output_dir is not None:
            output_dir.mkdir(parents=True, exist_ok=True)
            output_file = output_dir / f"{name}.csv"
            records_to_frame(result).to_csv(output_file, index=False)
            print(f"  ✓ Saved to {output_file}")

    return failures


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        settings = build_settings(args.data_root, args.log_level)
    except ValueError as e:
        print(f"✗ Configuration error: {e}")
        return 1

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    names = resolve_dataset_names(args.datasets)
    print(f"Loading {', '.join(names)} from data root {settings.data_root} ...")

    outcome = asyncio.run(load_datasets(names, settings))

    output_dir = Path(args.output_dir) if args.output_dir else None
    failures = report(outcome, output_dir)

    if failures:
        print(f"{failures} dataset(s) failed to load")
        return 1

    print("Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
