"""
Record and tree types for jhu-dumps.

- ``LocationRecord``: the parsed counts and metadata of one CSV row.
  Optional attributes are ``None`` when the row's layout has no column
  for them (or the row was too short); they are never defaulted to 0.
- ``DumpTree``: the location hierarchy of one daily dump. The root holds
  no record; its children are countries, then provinces/states, then
  counties. A node exists for every location prefix that appeared in the
  dump, and carries a record only if a row named exactly that location.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from typing import Iterator

import pandas as pd


@dataclass(frozen=True)
class LocationRecord:
    """One location's counts on one date."""
    country: str
    last_updated: datetime | None = None
    confirmed: int = 0
    deaths: int = 0
    recovered: int = 0
    province: str | None = None
    county: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    active: int | None = None
    full_name: str | None = None
    location_id: str | None = None

    @property
    def key_path(self) -> tuple[str, ...]:
        """Tree path of this record: country, then province and county if present."""
        return tuple(
            unit for unit in (self.country, self.province, self.county)
            if unit is not None
        )


RECORD_COLUMNS = [f.name for f in fields(LocationRecord)]


@dataclass
class DumpTree:
    """A node of the location hierarchy.

    Attributes:
        key: Location name of this node (``None`` for the root).
        record: The record of the row naming exactly this location, if any.
        children: Child nodes keyed by the next, more specific location unit.
    """
    key: str | None = None
    record: LocationRecord | None = None
    children: dict[str, DumpTree] = field(default_factory=dict)

    # -- Building -----------------------------------------------------------

    def insert(self, record: LocationRecord) -> DumpTree:
        """Place *record* at its key path, creating intermediate nodes.

        An existing node at that path is reused and its record replaced,
        so repeated locations resolve last-write-wins.

        Returns:
            The node holding *record*.
        """
        node = self
        for unit in record.key_path:
            child = node.children.get(unit)
            if child is None:
                child = DumpTree(key=unit)
                node.children[unit] = child
            node = child
        node.record = record
        return node

    # -- Lookup -------------------------------------------------------------

    def get(self, *keys: str) -> DumpTree | None:
        """Return the descendant at ``keys`` (e.g. ``"US", "Washington"``)."""
        node: DumpTree | None = self
        for unit in keys:
            if node is None:
                return None
            node = node.children.get(unit)
        return node

    def __contains__(self, key: str) -> bool:
        return key in self.children

    def __len__(self) -> int:
        return len(self.children)

    def __iter__(self) -> Iterator[str]:
        return iter(self.children)

    @property
    def is_root(self) -> bool:
        return self.key is None

    # -- Traversal ----------------------------------------------------------

    def walk(self) -> Iterator[tuple[tuple[str, ...], DumpTree]]:
        """Yield ``(path, node)`` depth-first, parents before children.

        The node this is called on is not yielded.
        """
        stack: list[tuple[tuple[str, ...], DumpTree]] = [
            ((key,), child) for key, child in reversed(self.children.items())
        ]
        while stack:
            path, node = stack.pop()
            yield path, node
            stack.extend(
                (path + (key,), child)
                for key, child in reversed(node.children.items())
            )

    def records(self) -> list[LocationRecord]:
        """All records below this node, depth-first."""
        return [node.record for _, node in self.walk() if node.record is not None]

    def to_frame(self) -> pd.DataFrame:
        """Flatten the records below this node into a DataFrame.

        One row per record; columns follow ``LocationRecord``'s fields.
        Absent optional attributes become missing values.
        """
        rows = [asdict(record) for record in self.records()]
        df = pd.DataFrame(rows, columns=RECORD_COLUMNS)
        if not df.empty:
            df["last_updated"] = pd.to_datetime(df["last_updated"])
        return df
