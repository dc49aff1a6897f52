"""
Row cleaning pipeline for jhu-dumps.

Turns the raw cells of a dump (one column per layout field, every cell a
string or ``None`` when the row ended early) into typed columns:

1. **Names**: ``country``, ``province``, ``county``, ``full_name``, ``id``
   are stripped; empty becomes absent.
2. **Counts**: ``confirmed``, ``deaths``, ``recovered`` become
   non-negative integers (0 if unusable); ``active`` likewise, but stays
   absent for cells past the end of a short row.
3. **Coordinates**: ``latitude``, ``longitude`` become floats or ``NaN``.
4. **Timestamps**: ``last_updated`` becomes ``datetime64`` or ``NaT``.

Only the columns the layout defines are present in the input, and only
those are produced.
"""

from __future__ import annotations

import logging

import pandas as pd

from jhu_dumps.layout_registry import Layout
from jhu_dumps.transforms.numbers import (
    parse_coordinates,
    parse_counts,
    parse_optional_counts,
)
from jhu_dumps.transforms.text import clean_names
from jhu_dumps.transforms.timestamps import parse_timestamps

logger = logging.getLogger(__name__)

NAME_FIELDS = ("id", "country", "province", "county", "full_name")
COUNT_FIELDS = ("confirmed", "deaths", "recovered")
OPTIONAL_COUNT_FIELDS = ("active",)
COORDINATE_FIELDS = ("latitude", "longitude")
TIMESTAMP_FIELDS = ("last_updated",)


class RowCleaner:
    """Applies the cleaning steps for one layout.

    Stateless apart from the layout; ``run()`` returns a new DataFrame
    and never modifies its input.
    """

    def __init__(self, layout: Layout) -> None:
        self.layout = layout

    def run(self, df: pd.DataFrame) -> pd.DataFrame:
        """Clean the raw cells of a dump.

        Args:
            df: One column per field token of ``self.layout``; cells are
                strings, or ``None`` past the end of a short row.

        Returns:
            A DataFrame with the same columns, typed per field.
        """
        cleaned = df.copy()
        present = [c for c in df.columns if self.layout.has_field(c)]

        for col in present:
            if col in NAME_FIELDS:
                cleaned[col] = clean_names(df[col])
            elif col in COUNT_FIELDS:
                cleaned[col] = parse_counts(df[col])
            elif col in OPTIONAL_COUNT_FIELDS:
                cleaned[col] = parse_optional_counts(df[col])
            elif col in COORDINATE_FIELDS:
                cleaned[col] = parse_coordinates(df[col])
            elif col in TIMESTAMP_FIELDS:
                cleaned[col] = parse_timestamps(df[col])

        if "last_updated" in present:
            unparsed = int(
                (cleaned["last_updated"].isna() & df["last_updated"].notna()).sum()
            )
            if unparsed:
                logger.debug(
                    "%d row(s) with an unparsable last-update under layout '%s'",
                    unparsed, self.layout.name,
                )

        return cleaned
