"""Shared pytest fixtures for avalanchewatch tests.

Test Tiers:
- unit: Fast tests with fixtures, no network (default)
- live: Real upstream tests, slow, requires network

Run live tests with: pytest -m live --run-live
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock, patch

import pytest
import requests

from avalanchewatch.cache import FreshnessCache
from avalanchewatch.config import RegionConfig, Settings


def pytest_addoption(parser):
    """Add command line options for test configuration."""
    parser.addoption(
        "--run-live",
        action="store_true",
        default=False,
        help="Run live upstream tests (slow, requires network)",
    )


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: fast unit tests using fixtures")
    config.addinivalue_line("markers", "live: real API tests (slow, requires network)")


def pytest_collection_modifyitems(config, items):
    """Skip live tests unless --run-live is specified."""
    if config.getoption("--run-live"):
        # --run-live given: don't skip live tests
        return

    skip_live = pytest.mark.skip(reason="need --run-live option to run")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


class FakeClock:
    """Controllable UTC clock."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def make_response(body, status_code: int = 200) -> Mock:
    """Mock requests.Response carrying body (str or bytes)."""
    content = body.encode("utf-8") if isinstance(body, str) else body
    response = Mock()
    response.status_code = status_code
    response.content = content
    response.text = content.decode("utf-8")
    if status_code >= 400:
        response.raise_for_status = Mock(
            side_effect=requests.HTTPError(f"{status_code} Error", response=response)
        )
    else:
        response.raise_for_status = Mock()
    return response


class FakeUpstream:
    """Routes mocked requests.get calls by URL.

    Each route maps a URL to a body string, a (body, status) tuple, a Mock
    response or an exception instance to raise. Unrouted URLs raise ConnectionError.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def __call__(self, url, params=None, timeout=None, headers=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout, "headers": headers})
        route = self.routes.get(url)
        if route is None:
            raise requests.ConnectionError(f"No route to {url}")
        if isinstance(route, Exception):
            raise route
        if isinstance(route, tuple):
            return make_response(*route)
        if isinstance(route, Mock):
            return route
        return make_response(route)

    def urls(self) -> list:
        return [call["url"] for call in self.calls]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 15, 7, 0, tzinfo=timezone.utc))


@pytest.fixture
def settings() -> Settings:
    """Default Vanoise / Savoie settings."""
    return Settings(region=RegionConfig())


@pytest.fixture
def cache(clock) -> FreshnessCache:
    return FreshnessCache(ttl=timedelta(hours=6), clock=clock)


@pytest.fixture
def bulletin_xml() -> str:
    """Structured bulletin with explicit zone risks and problems."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<BULLETINS_NEIGE_AVALANCHE MASSIF="VANOISE">
  <CARTOUCHERISQUE>
    <RISQUE LOC1="4" LOC2="2" />
    <RisqueComment>Plaques a vent sensibles au-dessus de 2200m.</RisqueComment>
  </CARTOUCHERISQUE>
  <DateValidite>16/01/2026</DateValidite>
  <TypeAvalanche>neige_ventee</TypeAvalanche>
  <TypeAvalanche>neige_humide</TypeAvalanche>
  <NeigeFraiche24h>25 cm</NeigeFraiche24h>
  <Enneigement>190 cm at 2500m</Enneigement>
  <TendanceComment>Stable</TendanceComment>
</BULLETINS_NEIGE_AVALANCHE>
"""


@pytest.fixture
def avalanche_page_html() -> str:
    """Avalanche page with a 'risque marqué' label and a summary block."""
    return """<html><head><meta charset="utf-8"></head><body>
<div class="bulletin">
  <span class="risque-niveau">Risque marqué</span>
  <p class="resume">Risque marqué sur les versants nord.</p>
</div>
</body></html>
"""


@pytest.fixture
def vigilance_html() -> str:
    """Vigilance page with two alerts, one nested in a vigilance container."""
    return """<html><head><meta charset="utf-8"></head><body>
<section class="vigilance-list">
  <div class="vigilance-item" data-level="orange" data-type="avalanche">
    <h3>Avalanches</h3>
    <p>Risque d'avalanches important en montagne.</p>
  </div>
  <div class="alert" data-level="jaune" data-type="snow-ice">
    <h4>Neige-verglas</h4>
  </div>
</section>
</body></html>
"""


@pytest.fixture
def openmeteo_payload() -> dict:
    """Two-day Open-Meteo response with hourly data."""
    hourly_times = [f"2026-01-15T{h:02d}:00" for h in range(24)] + [
        f"2026-01-16T{h:02d}:00" for h in range(24)
    ]
    n = len(hourly_times)
    return {
        "latitude": 45.4,
        "longitude": 6.57,
        "daily": {
            "time": ["2026-01-15", "2026-01-16"],
            "temperature_2m_max": [-5.0, 4.0],
            "temperature_2m_min": [-12.0, -3.0],
            "snowfall_sum": [25.0, 5.0],
            "precipitation_sum": [20.0, 4.0],
            "wind_speed_10m_max": [10.0, 45.0],
            "wind_gusts_10m_max": [25.0, 70.0],
            "weather_code": [73, 3],
        },
        "hourly": {
            "time": hourly_times,
            "temperature_2m": [-8.0] * n,
            "snowfall": [1.0] * n,
            "precipitation": [0.8] * n,
            "wind_speed_10m": [12.0] * n,
            "wind_gusts_10m": [30.0] * n,
            "weather_code": [71] * n,
        },
    }


@pytest.fixture
def upstream():
    """Patch outbound HTTP; tests add routes to the returned FakeUpstream."""
    fake = FakeUpstream()
    with patch("avalanchewatch.sources.http.requests.get", side_effect=fake):
        yield fake
