"""
jhu-dumps: retrieve and parse the JHU CSSE COVID-19 daily reports.

The daily report CSV changed its columns twice while the feed was live.
This package knows every layout, picks the right one for a date, and
parses a day's file into a country -> province/state -> county tree.

Public API surface:

- ``resolve_format(d)`` -- the layout in effect on date *d*, as
  ``Ok(Layout)`` or ``Err(ResolutionFailure)``.

- ``locate(d)`` -- the URL of the daily report for *d*.

- ``retrieve(d, config=None, fetcher=None)`` -- **recommended entry
  point**. Coroutine that resolves, locates, fetches, and parses; returns
  ``Ok(DumpTree)`` or ``Err`` carrying a ``ResolutionFailure``,
  ``TransportFailure``, or ``DumpDecodeError``.

- ``retrieve_sync(...)`` -- ``retrieve()`` run to completion with
  ``asyncio.run`` for scripts and notebooks without an event loop.

Expected failures are returned, not raised. Branch on the result before
using its payload::

    result = jhu_dumps.retrieve_sync(date(2020, 4, 1))
    if isinstance(result, jhu_dumps.Err):
        print(result.error)
    else:
        us = result.value.get("US")
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from typing import Union

from jhu_dumps.config import RetrievalConfig
from jhu_dumps.exceptions import (
    DumpDecodeError,
    ExportError,
    InvalidDateError,
    JhuDumpsError,
    LayoutDefinitionError,
    ResolutionFailure,
    TransportFailure,
)
from jhu_dumps.export import dump_to_frame, export_dump
from jhu_dumps.fetch import Fetcher, HttpxFetcher
from jhu_dumps.layout_registry import (
    COUNTY_AWARE,
    GEOGRAPHICALLY_AWARE,
    LEGACY,
    REGISTRY,
    Layout,
    get_layout,
)
from jhu_dumps.locate import DEFAULT_BASE_URL, date_for_target, locate
from jhu_dumps.parser import parse_dump
from jhu_dumps.records import DumpTree, LocationRecord
from jhu_dumps.resolve import as_calendar_date, resolve_format
from jhu_dumps.result import Err, Ok, Result

__all__ = [
    "resolve_format",
    "locate",
    "retrieve",
    "retrieve_sync",
    "parse_dump",
    "date_for_target",
    "export_dump",
    "dump_to_frame",
    "get_layout",
    "RetrievalConfig",
    "HttpxFetcher",
    "Fetcher",
    "Layout",
    "REGISTRY",
    "LEGACY",
    "GEOGRAPHICALLY_AWARE",
    "COUNTY_AWARE",
    "DEFAULT_BASE_URL",
    "DumpTree",
    "LocationRecord",
    "Ok",
    "Err",
    "Result",
    "RetrievalError",
    "JhuDumpsError",
    "LayoutDefinitionError",
    "InvalidDateError",
    "ResolutionFailure",
    "TransportFailure",
    "DumpDecodeError",
    "ExportError",
]

logger = logging.getLogger(__name__)

RetrievalError = Union[ResolutionFailure, TransportFailure, DumpDecodeError]


async def retrieve(
    d: date | datetime,
    config: RetrievalConfig | None = None,
    fetcher: Fetcher | None = None,
) -> Result[DumpTree, RetrievalError]:
    """Fetch and parse the daily report for *d*.

    Orchestration:
      1. Layout: ``config.layout`` if set, else ``resolve_format(d)``.
         A resolution failure is returned before any request is made.
      2. ``locate(d, config.base_url)`` -> target URL.
      3. ``fetcher.fetch(target)`` -> raw bytes (the only await).
      4. ``parse_dump(raw, layout)`` -> a fresh ``DumpTree``.

    Nothing is cached: every call refetches and reparses.

    Args:
        d: The feed date. A ``datetime`` is reduced to its calendar date.
        config: Retrieval settings; defaults to ``RetrievalConfig()``.
        fetcher: Network collaborator; defaults to an ``HttpxFetcher``
            using ``config.timeout``.

    Returns:
        ``Ok(DumpTree)`` or ``Err(ResolutionFailure | TransportFailure |
        DumpDecodeError)``.

    Raises:
        InvalidDateError: If *d* is not a date.
    """
    config = config or RetrievalConfig()
    day = as_calendar_date(d)

    if config.layout is not None:
        layout = config.layout
        logger.info("retrieve(%s) -- using layout override '%s'", day, layout.name)
    else:
        resolved = resolve_format(day)
        if isinstance(resolved, Err):
            logger.info("retrieve(%s) -- no layout applies", day)
            return resolved
        layout = resolved.value
        logger.info("retrieve(%s) -- resolved layout '%s'", day, layout.name)

    target = locate(day, config.base_url)
    fetcher = fetcher or HttpxFetcher(timeout=config.timeout)

    fetched = await fetcher.fetch(target)
    if isinstance(fetched, Err):
        return fetched

    try:
        tree = parse_dump(fetched.value, layout, target=target)
    except DumpDecodeError as exc:
        logger.warning("retrieve(%s) -- %s", day, exc)
        return Err(exc)
    return Ok(tree)


def retrieve_sync(
    d: date | datetime,
    config: RetrievalConfig | None = None,
    fetcher: Fetcher | None = None,
) -> Result[DumpTree, RetrievalError]:
    """Blocking wrapper around ``retrieve()``.

    Must not be called from inside a running event loop.
    """
    return asyncio.run(retrieve(d, config=config, fetcher=fetcher))
