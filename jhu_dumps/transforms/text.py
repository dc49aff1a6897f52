"""
Text cleaning transform for jhu-dumps.

Location names are used as tree keys, so they are normalized the same
way everywhere: surrounding whitespace is stripped and an empty name
means the unit is absent. Case and inner whitespace are kept as-is, so
``"Hong Kong"`` and ``"hong kong"`` are different keys.
"""

from __future__ import annotations

import pandas as pd


def clean_names(series: pd.Series) -> pd.Series:
    """Strip names; empty or missing cells become ``None``."""
    stripped = series.astype(object).str.strip()
    present = stripped.notna() & (stripped != "")
    return stripped.astype(object).where(present, None)
