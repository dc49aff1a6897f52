"""
Shared test fixtures and sample dumps for jhu-dumps tests.

Sample dumps mirror the real daily report files of each layout era,
trimmed to a handful of rows. Edit here if new layouts are added.
"""

from __future__ import annotations

import httpx
import pytest

from jhu_dumps.fetch import HttpxFetcher

# ---------------------------------------------------------------------------
# Sample dumps, one per layout
# ---------------------------------------------------------------------------
LEGACY_SAMPLE = """\
Province/State,Country/Region,Last Update,Confirmed,Deaths,Recovered
Hubei,Mainland China,2/14/20 23:13,51986,1318,4131
Guangdong,Mainland China,2/14/20 10:23,1261,2,409
,Japan,2/14/20 8:33,251,1,18
"King County, WA",US,2/14/20 0:00,1,,1
"""

GEO_SAMPLE = """\
Province/State,Country/Region,Last Update,Confirmed,Deaths,Recovered,Latitude,Longitude
Hubei,China,2020-03-01T10:13:19,66907,2761,31536,30.9756,112.2707
,"Korea, South",2020-03-01T23:43:03,3736,17,30,36.0000,128.0000
Diamond Princess,Cruise Ship,2020-03-01T01:13:06,705,6,10,35.4437,139.6380
"""

COUNTY_SAMPLE = """\
FIPS,Admin2,Province_State,Country_Region,Last_Update,Lat,Long_,Confirmed,Deaths,Recovered,Active,Combined_Key
53033,King,Washington,US,2020-03-23 23:19:34,47.49137892,-121.8346131,1170,87,0,0,"King, Washington, US"
53061,Snohomish,Washington,US,2020-03-23 23:19:34,48.04615983,-121.7170703,351,10,0,0,"Snohomish, Washington, US"
,,,Italy,2020-03-23 23:19:34,41.8719,12.5674,63927,6077,7432,50418,Italy
"""


# ---------------------------------------------------------------------------
# Network helpers
# ---------------------------------------------------------------------------
def make_fetcher(handler) -> HttpxFetcher:
    """An ``HttpxFetcher`` whose client answers through *handler*.

    *handler* receives an ``httpx.Request`` and returns an ``httpx.Response``.
    """
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpxFetcher(client=client)


@pytest.fixture()
def recorded_requests() -> list[str]:
    """URLs requested through ``serve_body``'s fetcher, in order."""
    return []


@pytest.fixture()
def serve_body(recorded_requests):
    """Factory: a fetcher answering every request with *body* and *status*."""

    def _factory(body: bytes | str, status: int = 200) -> HttpxFetcher:
        content = body.encode("utf-8") if isinstance(body, str) else body

        def handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(str(request.url))
            return httpx.Response(status, content=content)

        return make_fetcher(handler)

    return _factory


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (full retrieval over a mocked transport)",
    )
