"""
Layout registry for jhu-dumps.

Loads layout YAML files from jhu_dumps/layouts/ and exposes them as an
ordered, immutable catalog of Pydantic models. Each layout defines:
- name: unique identifier (e.g., "legacy")
- effective_date: first feed date that uses this layout
- columns: field token -> zero-based column index in the daily CSV

The catalog (``REGISTRY``) is built once at import time and sorted by
effective date. Adding a layout means dropping a new YAML file with a
later effective date; existing files never change.

Every packaged layout must load: an invalid file raises
LayoutDefinitionError instead of being skipped.
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from jhu_dumps.exceptions import LayoutDefinitionError

logger = logging.getLogger(__name__)

# Directory containing layout YAML files (sibling package)
_LAYOUTS_DIR = Path(__file__).parent / "layouts"

KNOWN_FIELDS = frozenset({
    "id",
    "county",
    "province",
    "country",
    "last_updated",
    "latitude",
    "longitude",
    "confirmed",
    "deaths",
    "recovered",
    "active",
    "full_name",
})


class Layout(BaseModel):
    """One historical column layout of the daily report CSV."""

    model_config = ConfigDict(frozen=True)

    name: str
    effective_date: date
    description: str = ""
    columns: Mapping[str, int]

    @field_validator("columns")
    @classmethod
    def _check_columns(cls, value: Mapping[str, int]) -> Mapping[str, int]:
        unknown = sorted(set(value) - KNOWN_FIELDS)
        if unknown:
            raise ValueError(f"Unknown field tokens: {unknown}")
        if "country" not in value:
            raise ValueError("A layout must map the 'country' column")
        indices = list(value.values())
        if any(i < 0 for i in indices):
            raise ValueError(f"Column indices must be non-negative: {value}")
        if len(set(indices)) != len(indices):
            raise ValueError(f"Column indices must be unique: {value}")
        return MappingProxyType(dict(value))

    def has_field(self, field: str) -> bool:
        return field in self.columns

    def index_of(self, field: str) -> int | None:
        return self.columns.get(field)

    @property
    def width(self) -> int:
        """Number of columns a complete row has under this layout."""
        return max(self.columns.values()) + 1

    def __repr__(self) -> str:
        return f"Layout(name={self.name!r}, effective_date={self.effective_date.isoformat()})"


def load_layout(path: Path) -> Layout:
    """Load a single layout YAML file.

    Raises:
        LayoutDefinitionError: If the file is not a valid layout.
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise LayoutDefinitionError(f"Layout file {path} does not contain a mapping")

    try:
        return Layout.model_validate(raw)
    except ValidationError as exc:
        raise LayoutDefinitionError(f"Invalid layout in {path}: {exc}") from exc


def load_all_layouts(layouts_dir: Path | None = None) -> tuple[Layout, ...]:
    """Load all layout YAML files, sorted by effective date.

    Args:
        layouts_dir: Directory to scan for .yaml files. Defaults to
            the built-in layouts/ directory.

    Returns:
        Tuple of Layout objects with strictly increasing effective dates.

    Raises:
        LayoutDefinitionError: If any file is invalid, the directory holds
            no layouts, or two layouts share a name or an effective date.
    """
    layouts_dir = layouts_dir or _LAYOUTS_DIR
    layouts: list[Layout] = []
    for yaml_path in sorted(layouts_dir.glob("*.yaml")):
        layout = load_layout(yaml_path)
        layouts.append(layout)
        logger.debug(
            "Loaded layout: %s (effective %s) from %s",
            layout.name, layout.effective_date, yaml_path,
        )

    if not layouts:
        raise LayoutDefinitionError(f"No layout YAML files found in {layouts_dir}")

    layouts.sort(key=lambda l: l.effective_date)

    names = [l.name for l in layouts]
    if len(set(names)) != len(names):
        raise LayoutDefinitionError(f"Duplicate layout names: {names}")
    for earlier, later in zip(layouts, layouts[1:]):
        if earlier.effective_date >= later.effective_date:
            raise LayoutDefinitionError(
                f"Layouts '{earlier.name}' and '{later.name}' share the "
                f"effective date {later.effective_date.isoformat()}"
            )

    logger.debug("Loaded %d layouts", len(layouts))
    return tuple(layouts)


REGISTRY: tuple[Layout, ...] = load_all_layouts()


def get_layout(name: str, registry: tuple[Layout, ...] = REGISTRY) -> Layout:
    """Look up a registered layout by name.

    Raises:
        KeyError: If no layout has that name.
    """
    for layout in registry:
        if layout.name == name:
            return layout
    raise KeyError(f"Unknown layout '{name}'. Known: {[l.name for l in registry]}")


LEGACY = get_layout("legacy")
GEOGRAPHICALLY_AWARE = get_layout("geographically_aware")
COUNTY_AWARE = get_layout("county_aware")
