"""
HTTP fetcher for jhu-dumps.

The retrieval pipeline needs exactly one capability from the network:
"given a URL, asynchronously return the raw body or a transport failure".
``HttpxFetcher`` provides it on top of ``httpx.AsyncClient``.

- A 2xx response returns ``Ok(body_bytes)``.
- Redirects are followed, for injected clients too.
- A non-2xx response, a timeout, or any other ``httpx.HTTPError`` returns
  ``Err(TransportFailure)`` carrying the attempted URL.
- There are no retries; callers wanting them wrap ``fetch()``.

Any object with a matching ``async fetch(url)`` method can stand in for
``HttpxFetcher`` (see ``Fetcher``).
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from jhu_dumps.exceptions import TransportFailure
from jhu_dumps.result import Err, Ok, Result

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    """Anything that can fetch a URL's body asynchronously."""

    async def fetch(self, url: str) -> Result[bytes, TransportFailure]:
        ...


class HttpxFetcher:
    """Fetch URLs with ``httpx.AsyncClient``.

    Args:
        timeout: Request timeout in seconds, used when the fetcher opens
            its own client.
        client: An existing client to reuse. The fetcher does not close
            a client it was given.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.timeout = timeout
        self._client = client

    async def fetch(self, url: str) -> Result[bytes, TransportFailure]:
        logger.info("Fetching %s", url)
        try:
            if self._client is not None:
                response = await self._client.get(url, follow_redirects=True)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning("Fetching %s failed with HTTP %d", url, status)
            return Err(TransportFailure(url, exc.response.reason_phrase or "HTTP error", status))
        except httpx.HTTPError as exc:
            logger.warning("Fetching %s failed: %s", url, exc)
            return Err(TransportFailure(url, str(exc) or type(exc).__name__))

        logger.info("Fetched %s (%d bytes)", url, len(response.content))
        return Ok(response.content)
