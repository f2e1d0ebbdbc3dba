"""
energy_charts – Main entry point.

Loads every chart dataset and prints a one-line summary per chart. See
actions/load_chart_data.py for options (data root, export directory).
"""

import sys

from actions.load_chart_data import main as load_chart_data


def main() -> int:
    """Load all chart datasets with default settings."""
    return load_chart_data([])


if __name__ == "__main__":
    sys.exit(main())
