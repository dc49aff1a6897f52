"""
Timestamp parsing transform for jhu-dumps.

The ``Last Update`` column changed format several times while the feed
was live, sometimes within a single file:

- ``1/22/2020 17:00``     (US month/day/year, 24h clock)
- ``3/8/20 5:31``         (two-digit year)
- ``2020-02-01T19:43:03`` (ISO 8601 with ``T``)
- ``2020-03-23 23:19:34`` (ISO 8601 with a space)

Each cell is parsed on its own (``format="mixed"``). Unparsable cells
become ``NaT``. Any offset present is converted to UTC and dropped, so
the result is always a naive ``datetime64[ns]`` column.
"""

from __future__ import annotations

import pandas as pd


def parse_timestamps(series: pd.Series) -> pd.Series:
    """Parse a column of last-update strings leniently.

    Args:
        series: Raw cell strings (``None`` for cells past the row's end).

    Returns:
        Naive ``datetime64[ns]`` Series with ``NaT`` for unusable cells.
    """
    cleaned = series.astype(object).str.strip()
    parsed = pd.to_datetime(cleaned, errors="coerce", format="mixed", utc=True)
    return parsed.dt.tz_localize(None)
