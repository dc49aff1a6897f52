"""
Feed file locator for jhu-dumps.

The data provider publishes one CSV per day, named ``MM-DD-YYYY.csv``,
under a fixed directory of its repository. ``locate()`` builds that URL
for a date; ``date_for_target()`` reads the date back out of one.

No I/O happens here.
"""

from __future__ import annotations

import re
from datetime import date, datetime

from jhu_dumps.exceptions import InvalidDateError
from jhu_dumps.resolve import as_calendar_date

DEFAULT_BASE_URL = (
    "https://raw.githubusercontent.com/CSSEGISandData/COVID-19/master/"
    "csse_covid_19_data/csse_covid_19_daily_reports"
)

_TARGET_PATTERN = re.compile(r"(?:^|/)(\d{2})-(\d{2})-(\d{4})\.csv$")


def file_name_for(d: date | datetime) -> str:
    """Return the feed's file name for *d*, e.g. ``03-01-2020.csv``."""
    day = as_calendar_date(d)
    # strftime pads %Y inconsistently for years < 1000 across platforms
    return f"{day.month:02d}-{day.day:02d}-{day.year:04d}.csv"


def locate(d: date | datetime, base_url: str = DEFAULT_BASE_URL) -> str:
    """Build the URL of the daily report for *d*.

    Args:
        d: The feed date. A ``datetime`` is reduced to its calendar date.
        base_url: Directory URL the daily files live under. A trailing
            slash is ignored.

    Returns:
        ``{base_url}/MM-DD-YYYY.csv``

    Raises:
        InvalidDateError: If *d* is not a date.
    """
    return f"{base_url.rstrip('/')}/{file_name_for(d)}"


def date_for_target(target: str) -> date:
    """Parse the calendar date back out of a locator target.

    Raises:
        InvalidDateError: If *target* does not end in ``MM-DD-YYYY.csv``
            or names an impossible date.
    """
    match = _TARGET_PATTERN.search(target)
    if match is None:
        raise InvalidDateError(f"Target does not follow the MM-DD-YYYY.csv convention: {target}")
    month, day, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise InvalidDateError(f"Target names an invalid date: {target}") from exc
