"""
Dump parser / tree builder for jhu-dumps.

Converts the raw text of one daily report into a ``DumpTree`` using a
resolved ``Layout``.

Input structure:
  - Line 1: header row. Discarded; its column names are not checked
    against the layout.
  - Lines 2+: one location per line. Fields are CSV-tokenized, so quoted
    names such as ``"Korea, South"`` keep their embedded commas.

Row handling is lenient:
  - Blank lines are skipped.
  - A line the CSV tokenizer rejects is skipped with a warning.
  - A row shorter than the layout leaves the missing attributes absent.
  - Unusable counts become 0; unusable coordinates and timestamps become
    absent (see ``jhu_dumps.transforms``).
  - A row with a blank country cell is keyed by its most general named
    unit instead (province, then county). A row naming no location at
    all cannot be placed in the tree and is skipped with a warning.

Only undecodable input fails the whole parse (``DumpDecodeError``).

Tree insertion follows the row order, so a location repeated later in
the file replaces the earlier record (last write wins).
"""

from __future__ import annotations

import csv
import logging
import math
from datetime import datetime
from typing import Any

import pandas as pd

from jhu_dumps.exceptions import DumpDecodeError
from jhu_dumps.layout_registry import Layout
from jhu_dumps.records import DumpTree, LocationRecord
from jhu_dumps.transforms.pipeline import RowCleaner

logger = logging.getLogger(__name__)

# Layout field tokens whose LocationRecord attribute has a different name
_RECORD_ATTRS = {"id": "location_id"}
_INT_ATTRS = {"confirmed", "deaths", "recovered", "active"}


def decode_dump(raw: str | bytes, target: str | None = None) -> str:
    """Return *raw* as text, decoding bytes as UTF-8 (BOM tolerated).

    Raises:
        DumpDecodeError: If *raw* is bytes that are not valid UTF-8.
    """
    if isinstance(raw, str):
        return raw.lstrip("\ufeff")
    try:
        return bytes(raw).decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise DumpDecodeError(str(exc), target=target) from exc


def tokenize_rows(text: str) -> list[list[str]]:
    """Split *text* into CSV rows, dropping the header and blank lines."""
    rows: list[list[str]] = []
    lines = text.splitlines()
    for line_no, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        try:
            row = next(csv.reader([line]))
        except csv.Error as exc:
            logger.warning("Skipping line %d: not valid CSV (%s)", line_no, exc)
            continue
        rows.append(row)
    return rows


def rows_to_frame(rows: list[list[str]], layout: Layout) -> pd.DataFrame:
    """Pick each layout field's cell out of every row.

    Cells past the end of a short row are ``None``; extra trailing cells
    are ignored.
    """
    data = {
        field: [row[idx] if idx < len(row) else None for row in rows]
        for field, idx in layout.columns.items()
    }
    return pd.DataFrame(data, columns=list(layout.columns), dtype=object)


def _to_python(value: Any) -> Any:
    """Map pandas missing markers to ``None`` and unwrap pandas scalars."""
    if value is None or value is pd.NA or value is pd.NaT:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    return value


def _build_record(row: dict[str, Any]) -> LocationRecord | None:
    kwargs: dict[str, Any] = {}
    for field, value in row.items():
        attr = _RECORD_ATTRS.get(field, field)
        value = _to_python(value)
        if value is None:
            continue
        if attr in _INT_ATTRS:
            value = int(value)
        elif attr in ("latitude", "longitude"):
            value = float(value)
        elif attr == "last_updated" and not isinstance(value, datetime):
            continue
        kwargs[attr] = value

    if "country" not in kwargs:
        # Key a row with a blank country cell by its most general named unit
        for unit in ("province", "county"):
            if unit in kwargs:
                kwargs["country"] = kwargs.pop(unit)
                break
        else:
            return None
    return LocationRecord(**kwargs)


def parse_dump(
    raw: str | bytes,
    layout: Layout,
    target: str | None = None,
) -> DumpTree:
    """Parse one daily report into a location tree.

    Args:
        raw: The dump as text, or as UTF-8 bytes.
        layout: The layout the dump was written in.
        target: Where the dump came from; only used in error messages.

    Returns:
        A fresh ``DumpTree`` whose root children are countries.

    Raises:
        DumpDecodeError: If *raw* is bytes that are not valid UTF-8.
    """
    text = decode_dump(raw, target=target)
    rows = tokenize_rows(text)
    tree = DumpTree()

    if not rows:
        logger.info("Parsed empty dump under layout '%s'", layout.name)
        return tree

    df = RowCleaner(layout).run(rows_to_frame(rows, layout))

    skipped = 0
    for row_no, row in enumerate(df.to_dict("records"), start=1):
        record = _build_record(row)
        if record is None:
            skipped += 1
            logger.warning("Skipping data row %d: no location name", row_no)
            continue
        tree.insert(record)

    logger.info(
        "Parsed %d row(s) into %d countr%s under layout '%s' (%d skipped)",
        len(rows) - skipped,
        len(tree),
        "y" if len(tree) == 1 else "ies",
        layout.name,
        skipped,
    )
    return tree
