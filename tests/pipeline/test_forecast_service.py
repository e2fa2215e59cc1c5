"""Tests for the extended forecast service."""

import json

import pytest

from avalanchewatch.errors import ForecastUnavailableError
from avalanchewatch.pipeline import ForecastService


@pytest.fixture
def service(settings, cache):
    return ForecastService(settings, cache)


class TestClampDays:
    def test_default(self, service):
        assert service.clamp_days(None) == 7

    def test_bounds(self, service):
        assert service.clamp_days(30) == 16
        assert service.clamp_days(0) == 1
        assert service.clamp_days(5) == 5


class TestForecastService:
    def test_defaults_to_region(self, service, upstream, settings, openmeteo_payload):
        upstream.routes[settings.forecast_url] = json.dumps(openmeteo_payload)

        forecast = service.get(days=2)

        params = upstream.calls[0]["params"]
        assert params["latitude"] == settings.region.latitude
        assert params["longitude"] == settings.region.longitude
        assert forecast.location.lat == settings.region.latitude

    def test_days_clamped_in_request(self, service, upstream, settings, openmeteo_payload):
        upstream.routes[settings.forecast_url] = json.dumps(openmeteo_payload)

        forecast = service.get(days=40)

        assert upstream.calls[0]["params"]["forecast_days"] == 16
        assert forecast.days == 16

    def test_cached_per_parameters(self, service, upstream, settings, openmeteo_payload):
        upstream.routes[settings.forecast_url] = json.dumps(openmeteo_payload)

        service.get(lat=45.4, lon=6.57, days=2)
        service.get(lat=45.4, lon=6.57, days=2)
        assert len(upstream.calls) == 1

        service.get(lat=45.4, lon=6.57, days=3)
        assert len(upstream.calls) == 2

        # Single slot: the first variant was replaced
        service.get(lat=45.4, lon=6.57, days=2)
        assert len(upstream.calls) == 3

    def test_failure_raises_and_is_not_cached(self, service, upstream, cache):
        with pytest.raises(ForecastUnavailableError):
            service.get()

        assert cache.fetched_at("forecast") is None

    def test_bad_payload_raises(self, service, upstream, settings):
        upstream.routes[settings.forecast_url] = json.dumps({"error": True, "reason": "bad"})

        with pytest.raises(ForecastUnavailableError, match="daily"):
            service.get()

    def test_coordinates_rounded_once(self, service, upstream, settings, openmeteo_payload):
        upstream.routes[settings.forecast_url] = json.dumps(openmeteo_payload)

        first = service.get(lat=45.400012, lon=6.570049, days=2)
        second = service.get(lat=45.400038, lon=6.570011, days=2)

        assert len(upstream.calls) == 1
        assert upstream.calls[0]["params"]["latitude"] == 45.4
        assert upstream.calls[0]["params"]["longitude"] == 6.57
        assert first.location.lat == second.location.lat == 45.4
        assert first.location.lon == 6.57
