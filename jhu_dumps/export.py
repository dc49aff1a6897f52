"""
Exporter for jhu-dumps.

Flattens a ``DumpTree`` into one table (one row per location record)
and writes it in CSV or Parquet form.

Output columns follow ``LocationRecord``: country, province, county,
counts, coordinates, last_updated, full_name, location_id. Intermediate
tree nodes without a record of their own produce no row.

CSV files are written with ``utf-8-sig`` encoding (BOM) so that location
names with accents display correctly when opened in Excel.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import pandas as pd

from jhu_dumps.exceptions import ExportError
from jhu_dumps.records import DumpTree

logger = logging.getLogger(__name__)

_SUPPORTED_FORMATS = {"csv", "parquet"}


def dump_to_frame(tree: DumpTree) -> pd.DataFrame:
    """Flatten *tree* into a DataFrame, nullable integer column for ``active``."""
    df = tree.to_frame()
    df["active"] = df["active"].astype("Int64")
    return df


def export_dump(
    tree: DumpTree,
    path: str | Path,
    output_format: Literal["csv", "parquet"] = "parquet",
) -> Path:
    """Write the records of *tree* to *path*.

    The parent directory is created if it does not exist.

    Args:
        tree: A parsed dump.
        path: Destination file path (extension is not changed).
        output_format: "csv" or "parquet".

    Returns:
        The path that was written.

    Raises:
        ExportError: If *output_format* is unsupported, or if the write fails.
    """
    if output_format not in _SUPPORTED_FORMATS:
        raise ExportError(
            f"Unsupported output format: '{output_format}'. "
            f"Supported formats: {sorted(_SUPPORTED_FORMATS)}"
        )

    path = Path(path)
    df = dump_to_frame(tree)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if output_format == "csv":
            df.to_csv(path, index=False, encoding="utf-8-sig")
        else:  # parquet
            df.to_parquet(path, index=False, engine="pyarrow")
    except Exception as exc:
        raise ExportError(
            f"Failed to write {path.name} as {output_format}: {exc}"
        ) from exc

    logger.info("Exported dump -> %s (%d rows)", path, len(df))
    return path
