"""
Number parsing transforms for jhu-dumps.

The daily reports carry counts and coordinates as plain decimal strings,
but older files leave cells blank, some rows hold decimals where integers
are expected (``"5.0"``), and a few carry negative corrections.

- Counts are coerced to non-negative integers: blank, non-numeric, and
  negative cells become 0; decimals are truncated. Counts too large for
  int64 are capped.
- Coordinates are coerced to floats: blank, non-numeric, and non-finite
  cells become ``NaN``.

Cells that are ``None`` (the row was too short to contain the column)
are treated like blank cells here; callers that must tell them apart
check the raw series themselves.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

# Largest float64 below 2**63, so clipped counts still fit in int64
_MAX_COUNT = float(np.nextafter(np.float64(2**63), 0))


def _to_numeric(series: pd.Series) -> pd.Series:
    """Strip whitespace and thousand separators, then coerce to float."""
    cleaned = series.astype(object).str.strip().str.replace(",", "", regex=False)
    numeric = pd.to_numeric(cleaned, errors="coerce").astype("float64")
    return numeric.replace([np.inf, -np.inf], np.nan)


def parse_counts(series: pd.Series) -> pd.Series:
    """Coerce a column of case counts to non-negative ``int64``.

    Args:
        series: Raw cell strings (``None`` for cells past the row's end).

    Returns:
        ``int64`` Series; anything unusable is 0.
    """
    numeric = _to_numeric(series).fillna(0).clip(lower=0, upper=_MAX_COUNT)
    return np.trunc(numeric).astype("int64")


def parse_optional_counts(series: pd.Series) -> pd.Series:
    """Coerce an optional count column, keeping absent cells absent.

    Cells present in the row follow ``parse_counts()``; cells past the
    row's end stay missing (``<NA>`` in a nullable ``Int64`` Series).
    """
    counts = parse_counts(series).astype("Int64")
    return counts.mask(series.isna())


def parse_coordinates(series: pd.Series) -> pd.Series:
    """Coerce a latitude/longitude column to ``float64`` (``NaN`` if unusable)."""
    return _to_numeric(series)
