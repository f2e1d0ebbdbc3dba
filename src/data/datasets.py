"""
Named dataset loaders for the four TV-energy charts.

**Conceptual**: Each chart (scatter, donut, bar, line) reads one CSV file and
needs its rows in a specific shape. This module pairs every chart with its
dataset path, required columns and row transform, so chart code just says
"give me the bar chart data" without knowing file names or header spellings.

Records are plain dicts keyed by the field names chart components read
(`screenType`, `energyConsumption`, `starRating`, `date`, `price`, ...).

Numeric columns are parsed with `parse_float`, which keeps the leading numeric
part of a field ("50.5 kWh" -> 50.5) and yields NaN when there is none.
"""

import datetime as dt
import math
import re
from typing import Any, Awaitable, Callable, Dict, List, Optional

import pandas as pd

from src.config.settings import LoaderSettings
from src.data.loader import LoadOptions, RawRow, load_csv
from src.venues.resource_client import ResourceClient

# Dataset paths, relative to the configured data root
SCATTER_PATH = "Ex5/Ex5_TV_energy.csv"
DONUT_PATH = "Ex5/Ex5_TV_energy_Allsizes_byScreenType.csv"
BAR_PATH = "Ex5/Ex5_TV_energy_55inchtv_byScreenType.csv"
LINE_PATH = "Ex5/Ex5_ARE_Spot_Prices_cleaned.csv"

ENERGY_COLUMN = "Mean(Labelled energy consumption (kWh/year))"
SPOT_PRICE_COLUMN = "Average Price (notTas-Snowy)"

SCATTER_REQUIRED_COLUMNS = ["brand", "screen_tech", "screensize", "energy_consumpt", "star2"]
SCREEN_TYPE_REQUIRED_COLUMNS = ["Screen_Tech", ENERGY_COLUMN]

_FLOAT_PREFIX = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INT_PREFIX = re.compile(r"[+-]?\d+")


def parse_float(text: Optional[str]) -> float:
    """
    Parse the leading decimal number in `text`.

    Leading whitespace is skipped, then the longest numeric prefix is used.
    Returns NaN when there is no numeric prefix (or `text` is None).

    Example:
        >>> parse_float("50.5")
        50.5
        >>> parse_float(" 12e2kWh")
        1200.0
        >>> math.isnan(parse_float("abc"))
        True
    """
    if text is None:
        return math.nan
    match = _FLOAT_PREFIX.match(text.lstrip())
    if match is None:
        return math.nan
    return float(match.group(0).replace("Infinity", "inf"))


def is_number(text: Optional[str]) -> bool:
    """
    True if the whole of `text`, ignoring surrounding whitespace, is a number.

    Unlike `parse_float`, trailing characters make the value invalid
    ("2020abc" is not a number). Blank text is not a number.
    """
    if text is None:
        return False
    return _FLOAT_PREFIX.fullmatch(text.strip()) is not None


def parse_int(text: Optional[str]) -> Optional[int]:
    """Parse the leading integer in `text`, or None if there is none."""
    if text is None:
        return None
    match = _INT_PREFIX.match(text.lstrip())
    if match is None:
        return None
    return int(match.group(0))


def scatter_row(row: RawRow) -> Dict[str, Any]:
    """Shape one TV model row for the scatter plot."""
    return {
        "brand": row["brand"],
        "screenType": row["screen_tech"],
        "screenSize": parse_float(row["screensize"]),
        "energyConsumption": parse_float(row["energy_consumpt"]),
        "starRating": parse_float(row["star2"]),
    }


def screen_type_row(row: RawRow) -> Dict[str, Any]:
    """Shape one per-screen-technology average row (donut and bar charts)."""
    return {
        "screenType": row["Screen_Tech"],
        "energyConsumption": parse_float(row[ENERGY_COLUMN]),
    }


def spot_price_row(row: RawRow) -> Optional[Dict[str, Any]]:
    """
    Shape one yearly spot price row for the line graph.

    Returns None (discard) when the year or the price is not numeric. The
    year must be a number as a whole ("2020abc" is rejected); its integer part
    is used, and two-digit years 0-99 mean 1900-1999. Years a date cannot
    hold (negative, past 9999) are discarded too.
    """
    raw_year = row.get("Year")
    price = parse_float(row.get(SPOT_PRICE_COLUMN))

    if not is_number(raw_year) or math.isnan(price):
        return None

    year = parse_int(raw_year)
    if year is None:
        return None
    if 0 <= year <= 99:
        year += 1900
    if not dt.MINYEAR <= year <= dt.MAXYEAR:
        return None

    return {
        "date": dt.date(year, 1, 1),
        "price": price,
    }


async def get_scatter_plot_data(
    client: Optional[ResourceClient] = None,
    settings: Optional[LoaderSettings] = None,
) -> List[Dict[str, Any]]:
    """Load TV models (brand, screen type, size, energy, star rating)."""
    return await load_csv(
        SCATTER_PATH,
        LoadOptions(required_columns=SCATTER_REQUIRED_COLUMNS, transform=scatter_row),
        client=client,
        settings=settings,
    )


async def get_donut_chart_data(
    client: Optional[ResourceClient] = None,
    settings: Optional[LoaderSettings] = None,
) -> List[Dict[str, Any]]:
    """Load mean energy consumption by screen type, all screen sizes."""
    return await load_csv(
        DONUT_PATH,
        LoadOptions(required_columns=SCREEN_TYPE_REQUIRED_COLUMNS, transform=screen_type_row),
        client=client,
        settings=settings,
    )


async def get_bar_chart_data(
    client: Optional[ResourceClient] = None,
    settings: Optional[LoaderSettings] = None,
) -> List[Dict[str, Any]]:
    """Load mean energy consumption by screen type, 55-inch TVs only."""
    return await load_csv(
        BAR_PATH,
        LoadOptions(required_columns=SCREEN_TYPE_REQUIRED_COLUMNS, transform=screen_type_row),
        client=client,
        settings=settings,
    )


async def get_line_graph_data(
    client: Optional[ResourceClient] = None,
    settings: Optional[LoaderSettings] = None,
) -> List[Dict[str, Any]]:
    """
    Load yearly average spot prices, oldest year first.

    Rows with a non-numeric year or price are dropped. The file is not
    guaranteed to be in date order, so records are sorted by date.
    """
    records = await load_csv(
        LINE_PATH,
        LoadOptions(transform=spot_price_row),
        client=client,
        settings=settings,
    )
    return sorted(records, key=lambda record: record["date"])


# Each loader accepts `client=` (caller-owned, reused) or `settings=` (the
# load opens and closes its own client)
DatasetLoader = Callable[..., Awaitable[List[Dict[str, Any]]]]

DATASETS: Dict[str, DatasetLoader] = {
    "scatter": get_scatter_plot_data,
    "donut": get_donut_chart_data,
    "bar": get_bar_chart_data,
    "line": get_line_graph_data,
}


def records_to_frame(records: List[Dict[str, Any]]) -> pd.DataFrame:
    """
    Build a DataFrame from chart records, columns in record key order.

    A `date` column of `datetime.date` values is converted to datetime64 so it
    sorts and formats like the rest of the project's time columns.
    """
    df = pd.DataFrame.from_records(records)
    if "date" in df.columns:
        df["date"] = pd.to_datetime(df["date"])
    return df
