"""
Custom exception hierarchy for jhu-dumps.

Two kinds of failure live here:
- Expected outcomes of a retrieval (ResolutionFailure, TransportFailure,
  DumpDecodeError). The public API returns these inside ``Err`` instead of
  raising them; ``Err.unwrap()`` re-raises them for callers that prefer
  exceptions.
- Programming or packaging errors (InvalidDateError,
  LayoutDefinitionError, ExportError), which are raised directly.
"""

from __future__ import annotations

from datetime import date


class JhuDumpsError(Exception):
    """Base exception for all jhu-dumps errors."""


class LayoutDefinitionError(JhuDumpsError):
    """Raised when a packaged layout YAML file is invalid.

    This includes duplicate column indices, unknown field tokens, a missing
    ``country`` column, or effective dates that are not strictly increasing
    across the registry.
    """


class InvalidDateError(JhuDumpsError, ValueError):
    """Raised when a date argument is not a calendar date."""


class ResolutionFailure(JhuDumpsError):
    """No known layout is effective on the queried date."""

    def __init__(self, uncovered_date: date) -> None:
        self.uncovered_date = uncovered_date
        super().__init__(
            f"No layout is effective on {uncovered_date.isoformat()}; "
            "the date precedes every known layout."
        )


class TransportFailure(JhuDumpsError):
    """The feed file could not be fetched (network error or non-2xx status)."""

    def __init__(
        self,
        target: str,
        reason: str,
        status_code: int | None = None,
    ) -> None:
        self.target = target
        self.reason = reason
        self.status_code = status_code
        status = f" (HTTP {status_code})" if status_code is not None else ""
        super().__init__(f"Failed to fetch {target}{status}: {reason}")


class DumpDecodeError(JhuDumpsError):
    """The fetched bytes could not be decoded as text."""

    def __init__(self, reason: str, target: str | None = None) -> None:
        self.reason = reason
        self.target = target
        where = f" from {target}" if target else ""
        super().__init__(f"Dump{where} is not decodable as UTF-8 text: {reason}")


class ExportError(JhuDumpsError):
    """Raised when a dump cannot be written to disk.

    For example, permission errors, disk full, or unsupported format.
    """
