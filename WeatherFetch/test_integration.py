"""Integration tests - can optionally hit real API (disabled by default)."""
import os
import pytest
from openweather_client import WeatherClient
from weather_observer import TransportError


@pytest.mark.skipif(
    not os.environ.get("OPENWEATHER_API_KEY"),
    reason="OPENWEATHER_API_KEY not set - skipping integration test"
)
def test_openweather_integration_city():
    """
    Integration test that hits the real OpenWeather API.

    Set OPENWEATHER_API_KEY environment variable to run this test.
    """
    api_key = os.environ.get("OPENWEATHER_API_KEY")

    with WeatherClient(api_key=api_key, units="metric", timeout=10) as client:
        weather = client.fetch_by_city("London").result(timeout=30)

    assert weather.city_name
    assert weather.condition_id > 0
    assert weather.temperature_celsius is not None


@pytest.mark.skipif(
    not os.environ.get("OPENWEATHER_API_KEY"),
    reason="OPENWEATHER_API_KEY not set - skipping integration test"
)
def test_openweather_integration_coordinates():
    api_key = os.environ.get("OPENWEATHER_API_KEY")

    with WeatherClient(api_key=api_key, units="metric", timeout=10) as client:
        weather = client.fetch_by_coordinates(33.44, -94.04).result(timeout=30)

    assert weather.condition_id > 0


@pytest.mark.skipif(
    not os.environ.get("OPENWEATHER_API_KEY"),
    reason="OPENWEATHER_API_KEY not set - skipping integration test"
)
def test_openweather_integration_bad_key():
    with WeatherClient(api_key="invalid", timeout=10) as client:
        error = client.fetch_by_city("London").exception(timeout=30)

    assert isinstance(error, TransportError)
    assert error.status_code == 401
