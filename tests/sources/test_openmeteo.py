"""Tests for Open-Meteo forecast reshaping."""

import json

import pytest

from avalanchewatch.errors import SourceParseError
from avalanchewatch.sources import OpenMeteoForecastSource


@pytest.fixture
def source(settings, clock):
    return OpenMeteoForecastSource(settings, lat=45.4, lon=6.57, days=2, clock=clock)


class TestQueryParams:
    def test_params(self, source):
        params = source.query_params()

        assert params["latitude"] == 45.4
        assert params["longitude"] == 6.57
        assert params["forecast_days"] == 2
        assert params["timezone"] == "Europe/Paris"
        assert "snowfall_sum" in params["daily"]
        assert "wind_gusts_10m" in params["hourly"]


class TestParse:
    """Tests for daily/hourly reshaping."""

    def test_days(self, source, openmeteo_payload, clock):
        forecast = source.parse(json.dumps(openmeteo_payload).encode())

        assert forecast.days == 2
        assert forecast.location.lat == 45.4
        assert forecast.update_time == clock()
        assert [day.date for day in forecast.forecast] == ["2026-01-15", "2026-01-16"]

    def test_three_hourly_samples(self, source, openmeteo_payload):
        forecast = source.parse(json.dumps(openmeteo_payload).encode())
        first = forecast.forecast[0]

        assert len(first.hourly) == 8
        assert [s.time for s in first.hourly][:3] == [
            "2026-01-15T00:00",
            "2026-01-15T03:00",
            "2026-01-15T06:00",
        ]
        assert first.hourly[0].temperature == -8.0
        assert first.hourly[0].weather_code == 71

    def test_derived_fields(self, source, openmeteo_payload):
        forecast = source.parse(json.dumps(openmeteo_payload).encode())
        snowy, windy = forecast.forecast

        assert snowy.avalanche_risk == "considerable"
        assert snowy.freezing_level == 750
        assert snowy.weather_description == "Moderate snowfall"
        assert windy.avalanche_risk == "moderate"
        assert windy.freezing_level == 2100
        assert windy.weather_description == "Overcast"

    def test_missing_field_is_none(self, source, openmeteo_payload):
        del openmeteo_payload["daily"]["wind_gusts_10m_max"]

        forecast = source.parse(json.dumps(openmeteo_payload).encode())

        assert forecast.forecast[0].wind_gusts is None

    def test_null_values(self, source, openmeteo_payload):
        openmeteo_payload["daily"]["temperature_2m_max"] = [None, 4.0]

        forecast = source.parse(json.dumps(openmeteo_payload).encode())

        assert forecast.forecast[0].temp_max is None
        assert forecast.forecast[0].freezing_level is None

    def test_serialises_camel_case(self, source, openmeteo_payload):
        data = source.parse(json.dumps(openmeteo_payload).encode()).model_dump(
            mode="json", by_alias=True
        )

        day = data["forecast"][0]
        assert day["tempMax"] == -5.0
        assert day["freezingLevel"] == 750
        assert day["avalancheRisk"] == "considerable"
        assert "windGusts" in day["hourly"][0]


class TestParseErrors:
    def test_not_json(self, source):
        with pytest.raises(SourceParseError, match="not JSON"):
            source.parse(b"<html>")

    def test_missing_daily(self, source, openmeteo_payload):
        del openmeteo_payload["daily"]

        with pytest.raises(SourceParseError, match="daily"):
            source.parse(json.dumps(openmeteo_payload).encode())

    def test_inconsistent_arrays(self, source, openmeteo_payload):
        openmeteo_payload["daily"]["snowfall_sum"] = [1.0]

        with pytest.raises(SourceParseError, match="Inconsistent"):
            source.parse(json.dumps(openmeteo_payload).encode())

    def test_non_numeric_value(self, source, openmeteo_payload):
        openmeteo_payload["daily"]["temperature_2m_max"] = ["n/a", 4.0]

        with pytest.raises(SourceParseError, match="Malformed forecast values"):
            source.parse(json.dumps(openmeteo_payload).encode())

    def test_nested_value(self, source, openmeteo_payload):
        openmeteo_payload["daily"]["snowfall_sum"] = [[1.0, 2.0], 5.0]

        with pytest.raises(SourceParseError, match="Malformed forecast values"):
            source.parse(json.dumps(openmeteo_payload).encode())
