# ABOUTME: Service layer for OpenWeather current-conditions and forecast calls, plus the weather aggregator.
# ABOUTME: Fetches both endpoints concurrently, buckets the forecast per day and tracks load state.

import asyncio
import logging
import math
from collections.abc import Callable
from datetime import datetime, timezone
from enum import Enum

import httpx
from pydantic import ValidationError

from globetrekker.config import Settings
from globetrekker.deps import ServiceDeps
from globetrekker.errors import ApplicationError, MissingInputError, ServiceError
from globetrekker.forecast import bucket_by_day
from globetrekker.models import ForecastSeries, WeatherReport, WeatherSample
from globetrekker.state import RequestTracker, ViewState
from globetrekker.transport import get_json

logger = logging.getLogger(__name__)

ICON_URL = "https://openweathermap.org/img/wn/{icon}{suffix}.png"
NO_LOCALITY_MESSAGE = "No locality data available"


class TemperatureUnit(str, Enum):
    CELSIUS = "C"
    FAHRENHEIT = "F"

    def toggled(self) -> "TemperatureUnit":
        return TemperatureUnit.FAHRENHEIT if self is TemperatureUnit.CELSIUS else TemperatureUnit.CELSIUS


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 9 / 5 + 32


def format_temperature(celsius: float, unit: TemperatureUnit = TemperatureUnit.CELSIUS) -> str:
    """Display a Celsius reading in the chosen unit, rounded to a whole degree (e.g. "21°C")."""
    if unit is TemperatureUnit.FAHRENHEIT:
        return f"{_round_half_up(celsius_to_fahrenheit(celsius))}°F"
    return f"{_round_half_up(celsius)}°C"


def wind_speed_kmh(speed_ms: float) -> int:
    return _round_half_up(speed_ms * 3.6)


def icon_url(icon: str, large: bool = True) -> str:
    """OpenWeather icon image URL; the large variant is used for current conditions."""
    return ICON_URL.format(icon=icon, suffix="@2x" if large else "")


def weather_query(city: str | None, country_code: str | None) -> str:
    """Build the "city,country" query both endpoints are keyed by."""
    if not city or not city.strip():
        raise MissingInputError(NO_LOCALITY_MESSAGE)
    if not country_code or not country_code.strip():
        raise MissingInputError("No country code available")
    return f"{city.strip()},{country_code.strip()}"


def _params(settings: Settings, query: str) -> dict:
    return {"q": query, "units": "metric", "appid": settings.openweather_api_key}


async def get_current_weather(
    client: httpx.AsyncClient, settings: Settings, city: str, country_code: str
) -> WeatherSample:
    """Fetch current conditions from the OpenWeather /weather endpoint."""
    query = weather_query(city, country_code)
    data = await get_json(
        client, f"{settings.openweather_url}/weather", source="Weather API", params=_params(settings, query)
    )
    return parse_current(data)


async def get_forecast(
    client: httpx.AsyncClient, settings: Settings, city: str, country_code: str
) -> ForecastSeries:
    """Fetch the 3-hourly, five-day forecast from the OpenWeather /forecast endpoint."""
    query = weather_query(city, country_code)
    data = await get_json(
        client, f"{settings.openweather_url}/forecast", source="Forecast API", params=_params(settings, query)
    )
    return parse_forecast(data)


def _condition(item: dict) -> dict:
    conditions = item.get("weather") or [{}]
    return conditions[0]


def parse_current(data: dict) -> WeatherSample:
    """Parse a /weather payload into a WeatherSample."""
    try:
        main = data["main"]
        condition = _condition(data)
        return WeatherSample(
            timestamp=data.get("dt", int(datetime.now(timezone.utc).timestamp())),
            temperature=main["temp"],
            min_temperature=main.get("temp_min"),
            max_temperature=main.get("temp_max"),
            humidity=main.get("humidity"),
            pressure=main.get("pressure"),
            wind_speed=(data.get("wind") or {}).get("speed"),
            condition_code=condition.get("icon"),
            condition_text=condition.get("main"),
            condition_description=condition.get("description"),
        )
    except (KeyError, TypeError, AttributeError, ValidationError) as e:
        raise ApplicationError("Weather API returned an unexpected payload") from e


def parse_forecast(data: dict) -> ForecastSeries:
    """Parse a /forecast payload: the list of steps and the city's UTC offset."""
    try:
        samples = [
            WeatherSample(
                timestamp=item["dt"],
                temperature=item["main"]["temp"],
                min_temperature=item["main"].get("temp_min"),
                max_temperature=item["main"].get("temp_max"),
                humidity=item["main"].get("humidity"),
                pressure=item["main"].get("pressure"),
                wind_speed=(item.get("wind") or {}).get("speed"),
                condition_code=_condition(item).get("icon"),
                condition_text=_condition(item).get("main"),
                condition_description=_condition(item).get("description"),
            )
            for item in data.get("list", [])
        ]
        utc_offset = (data.get("city") or {}).get("timezone", 0)
        return ForecastSeries(samples=samples, utc_offset=utc_offset)
    except (KeyError, TypeError, AttributeError, ValidationError) as e:
        raise ApplicationError("Forecast API returned an unexpected payload") from e


class WeatherAggregator:
    """Current weather plus a per-day forecast for one locality, with its own load state.

    Both endpoints are requested together and both must succeed; the first failure
    becomes the error state. A response that arrives after the selection moved on is
    dropped. The temperature unit is display state only and never triggers a fetch.
    """

    def __init__(
        self,
        deps: ServiceDeps,
        unit: TemperatureUnit = TemperatureUnit.CELSIUS,
        on_change: Callable[[ViewState[WeatherReport]], None] | None = None,
    ):
        self.deps = deps
        self.unit = unit
        self.state: ViewState[WeatherReport] = ViewState()
        self._on_change = on_change
        self._requests = RequestTracker()

    async def fetch(self, locality: str | None, country_code: str | None) -> ViewState[WeatherReport]:
        token = self._requests.issue((locality, country_code))
        try:
            weather_query(locality, country_code)
        except MissingInputError as e:
            logger.warning("Weather not requested: %s", e)
            self._set(ViewState.idle().fail(str(e)))
            return self.state

        self._set(self.state.start())
        client, settings = self.deps.http_client, self.deps.settings
        try:
            current, series = await asyncio.gather(
                get_current_weather(client, settings, locality, country_code),
                get_forecast(client, settings, locality, country_code),
            )
        except ServiceError as e:
            if self._requests.is_current(token):
                logger.warning("Weather unavailable for %s,%s: %s", locality, country_code, e)
                self._set(self.state.fail(str(e)))
            return self.state

        if self._requests.is_current(token):
            report = WeatherReport(
                locality=locality,
                country_code=country_code,
                current=current,
                forecast_days=bucket_by_day(series.samples, series.utc_offset),
            )
            self._set(self.state.succeed(report))
        return self.state

    def toggle_unit(self) -> TemperatureUnit:
        self.unit = self.unit.toggled()
        return self.unit

    def format_temperature(self, celsius: float) -> str:
        return format_temperature(celsius, self.unit)

    def _set(self, state: ViewState[WeatherReport]):
        self.state = state
        if self._on_change is not None:
            self._on_change(state)
