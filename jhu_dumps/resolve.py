"""
Format resolution for jhu-dumps.

Picks the layout that applies to a given feed date: the latest layout
whose effective date is on or before that date. The boundary is
inclusive, so a layout's own effective date already uses it.

Resolution is a pure function of ``(date, registry)``. A date before the
first layout is an expected outcome and is returned as
``Err(ResolutionFailure)``, not raised.
"""

from __future__ import annotations

import logging
from bisect import bisect_right
from datetime import date, datetime
from typing import Sequence

from jhu_dumps.exceptions import InvalidDateError, ResolutionFailure
from jhu_dumps.layout_registry import REGISTRY, Layout
from jhu_dumps.result import Err, Ok, Result

logger = logging.getLogger(__name__)


def as_calendar_date(d: object) -> date:
    """Reduce a ``date`` or ``datetime`` to its calendar date.

    Raises:
        InvalidDateError: If *d* is not a date at all.
    """
    if isinstance(d, datetime):
        return d.date()
    if isinstance(d, date):
        return d
    raise InvalidDateError(f"Expected a date or datetime, got {type(d).__name__}: {d!r}")


def resolve_format(
    d: date | datetime,
    registry: Sequence[Layout] = REGISTRY,
) -> Result[Layout, ResolutionFailure]:
    """Resolve the layout in effect on *d*.

    Args:
        d: The feed date. A ``datetime`` is reduced to its calendar date.
        registry: Layouts sorted by strictly increasing effective date.
            Defaults to the packaged registry.

    Returns:
        ``Ok(layout)`` for the latest layout with ``effective_date <= d``,
        or ``Err(ResolutionFailure)`` if *d* precedes every layout.

    Raises:
        InvalidDateError: If *d* is not a date.
    """
    day = as_calendar_date(d)
    effective_dates = [layout.effective_date for layout in registry]

    # bisect_right puts equal dates left of the insertion point -> inclusive
    pos = bisect_right(effective_dates, day)
    if pos == 0:
        logger.debug("No layout covers %s", day)
        return Err(ResolutionFailure(day))

    layout = registry[pos - 1]
    logger.debug("Resolved %s -> layout '%s'", day, layout.name)
    return Ok(layout)
