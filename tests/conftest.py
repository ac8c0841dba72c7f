# ABOUTME: Shared test fixtures for the country detail services test suite.
# ABOUTME: Provides sample REST Countries, OpenWeather and exchange-rate payloads plus test settings.

from datetime import datetime, timezone

import pytest

from globetrekker.config import Settings


def epoch(year: int, month: int, day: int, hour: int) -> int:
    """UTC epoch seconds for a calendar hour."""
    return int(datetime(year, month, day, hour, tzinfo=timezone.utc).timestamp())


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openweather_api_key="weather-key",
        exchange_rate_api_key="rates-key",
        restcountries_url="https://countries.test/v3.1",
        openweather_url="https://weather.test/data/2.5",
        exchange_rate_url="https://rates.test/v6",
    )


@pytest.fixture
def denmark_payload() -> dict:
    return {
        "cca3": "DNK",
        "cca2": "DK",
        "name": {"common": "Denmark", "official": "Kingdom of Denmark"},
        "flags": {"png": "https://flagcdn.com/w320/dk.png", "svg": "https://flagcdn.com/dk.svg"},
        "population": 5831404,
        "capital": ["Copenhagen"],
        "region": "Europe",
        "subregion": "Northern Europe",
        "currencies": {"DKK": {"name": "Danish krone", "symbol": "kr"}},
        "languages": {"dan": "Danish"},
        "idd": {"root": "+4", "suffixes": ["5"]},
        "area": 43094.0,
        "timezones": ["UTC-04:00", "UTC+01:00"],
        "car": {"side": "right"},
        "maps": {"googleMaps": "https://goo.gl/maps/UddGPN7hAyrtpFiT6"},
        "latlng": [56.0, 10.0],
        "capitalInfo": {"latlng": [55.67, 12.58]},
        "independent": True,
        "unMember": True,
        "status": "officially-assigned",
    }


@pytest.fixture
def current_weather_payload() -> dict:
    return {
        "dt": epoch(2025, 1, 15, 11),
        "main": {"temp": 3.4, "temp_min": 1.2, "temp_max": 4.9, "humidity": 87, "pressure": 1012},
        "weather": [{"icon": "04d", "main": "Clouds", "description": "broken clouds"}],
        "wind": {"speed": 5.1},
    }


@pytest.fixture
def forecast_payload() -> dict:
    items = []
    for day in (15, 16, 17):
        for hour in (0, 9, 12, 15, 21):
            items.append(
                {
                    "dt": epoch(2025, 1, day, hour),
                    "main": {"temp": float(day - 14 + hour / 10)},
                    "weather": [{"icon": "01d", "main": "Clear"}],
                }
            )
    return {"list": items, "city": {"name": "Copenhagen", "timezone": 0}}


@pytest.fixture
def rates_payload() -> dict:
    return {
        "result": "success",
        "base_code": "USD",
        "conversion_rates": {"USD": 1, "EUR": 0.9, "JPY": 150, "DKK": 6.9},
    }
