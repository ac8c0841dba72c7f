# ABOUTME: Per-country composition of the map, weather and currency components.
# ABOUTME: Loads the independent sources side by side and keeps each failure inside its own component.

import asyncio
import logging

from globetrekker.currency import CurrencyConverter
from globetrekker.deps import ServiceDeps
from globetrekker.geometry import capital_coordinates, compute_region
from globetrekker.map_availability import MapAvailability
from globetrekker.models import Country, Region
from globetrekker.weather_service import WeatherAggregator

logger = logging.getLogger(__name__)


class CountryDetails:
    """Detail view model for one selected country.

    Each component owns its own state; load() never raises for a source failure,
    it only leaves the affected component in its error state.
    """

    def __init__(self, deps: ServiceDeps, country: Country, map_timeout: float | None = None):
        self.deps = deps
        self.country = country
        map_kwargs = {} if map_timeout is None else {"timeout": map_timeout}
        self.map = MapAvailability(country, **map_kwargs)
        self.weather = WeatherAggregator(deps)
        self.currency = CurrencyConverter.for_country(deps, country)

    @property
    def region(self) -> Region:
        return compute_region(self.country)

    @property
    def capital_coordinates(self) -> tuple[float, float] | None:
        return capital_coordinates(self.country)

    @property
    def weather_country_code(self) -> str:
        # OpenWeather expects ISO 3166 alpha-2 codes
        return self.country.code2 or self.country.code

    async def load(self):
        """Start the map supervisor and fetch weather and exchange rates concurrently."""
        self.map.start()
        await asyncio.gather(
            self.weather.fetch(self.country.primary_capital, self.weather_country_code),
            self.currency.initialize(),
        )
        logger.debug(
            "Details for %s: weather=%s currency=%s",
            self.country.code,
            self.weather.state.status.value,
            self.currency.state.status.value,
        )

    def close(self):
        self.map.close()

    async def __aenter__(self) -> "CountryDetails":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.close()
