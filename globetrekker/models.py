# ABOUTME: Pydantic BaseModels for country profiles, weather samples and exchange-rate data.
# ABOUTME: Defines the structured types each component fetches, derives and exposes to the UI.

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_SOURCE_CONFIG = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel, extra="ignore")


class CountryName(BaseModel):
    model_config = _SOURCE_CONFIG

    common: str
    official: str | None = None


class Flags(BaseModel):
    model_config = _SOURCE_CONFIG

    png: str | None = None
    svg: str | None = None


class CurrencyInfo(BaseModel):
    """One entry of a country's currency map."""

    model_config = _SOURCE_CONFIG

    name: str | None = None
    symbol: str | None = None


class CallingCode(BaseModel):
    model_config = _SOURCE_CONFIG

    root: str | None = None
    suffixes: list[str] = []


class CapitalInfo(BaseModel):
    model_config = _SOURCE_CONFIG

    latlng: list = []


class Car(BaseModel):
    model_config = _SOURCE_CONFIG

    side: str | None = None


class MapLinks(BaseModel):
    model_config = _SOURCE_CONFIG

    google_maps: str | None = None
    open_street_maps: str | None = None


class CountrySummary(BaseModel):
    """Country list entry, as returned by the /all endpoint with a reduced field set."""

    model_config = _SOURCE_CONFIG

    code: str = Field(alias="cca3")
    name: CountryName
    flags: Flags = Flags()
    independent: bool | None = None
    status: str | None = None


class Country(BaseModel):
    """Full country profile from the /alpha/{code} endpoint.

    latlng is kept as received; malformed coordinates are detected where they are
    used rather than rejected here, so the rest of the profile stays usable.
    """

    model_config = _SOURCE_CONFIG

    code: str = Field(alias="cca3")
    code2: str | None = Field(default=None, alias="cca2")
    name: CountryName
    flags: Flags = Flags()
    population: int | None = None
    capital: list[str] = []
    region: str | None = None
    subregion: str | None = None
    currencies: dict[str, CurrencyInfo] = {}
    languages: dict[str, str] = {}
    idd: CallingCode = CallingCode()
    area: float | None = None
    timezones: list[str] = []
    car: Car = Car()
    maps: MapLinks = MapLinks()
    latlng: list = []
    capital_info: CapitalInfo = CapitalInfo()
    independent: bool | None = None
    un_member: bool | None = None
    status: str | None = None

    @property
    def primary_capital(self) -> str | None:
        return self.capital[0] if self.capital else None

    @property
    def currency_codes(self) -> list[str]:
        return list(self.currencies)

    @property
    def calling_code(self) -> str | None:
        """International dialling prefix, e.g. "+45"; root alone when there are several suffixes."""
        if not self.idd.root:
            return None
        if len(self.idd.suffixes) == 1:
            return self.idd.root + self.idd.suffixes[0]
        return self.idd.root


class Region(BaseModel):
    """Map viewport: center point and the latitude/longitude span around it."""

    model_config = ConfigDict(frozen=True)

    center_lat: float
    center_lng: float
    lat_span: float
    lng_span: float


class WeatherSample(BaseModel):
    """One weather observation or forecast step, in metric units."""

    model_config = ConfigDict(frozen=True)

    timestamp: int
    temperature: float
    min_temperature: float | None = None
    max_temperature: float | None = None
    humidity: float | None = None
    pressure: float | None = None
    wind_speed: float | None = None
    condition_code: str | None = None  # icon id, e.g. "04d"
    condition_text: str | None = None  # e.g. "Clouds"
    condition_description: str | None = None  # e.g. "broken clouds"

    @property
    def time(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)


class ForecastDay(BaseModel):
    """The sample picked to represent one weekday of the forecast window."""

    model_config = ConfigDict(frozen=True)

    label: str
    sample: WeatherSample


class WeatherReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    locality: str
    country_code: str
    current: WeatherSample
    forecast_days: list[ForecastDay] = []


class ExchangeRateTable(BaseModel):
    """Rates per one unit of the base currency, fetched in a single request."""

    model_config = ConfigDict(frozen=True)

    base_code: str
    rates: dict[str, float]

    @property
    def currencies(self) -> list[str]:
        return list(self.rates)


class ConversionResult(BaseModel):
    """Unrounded conversion output; rounding happens only in the display properties."""

    model_config = ConfigDict(frozen=True)

    from_code: str
    to_code: str
    source_amount: float
    amount: float
    implied_rate: float

    @property
    def display_amount(self) -> str:
        return f"{self.amount:.2f}"

    @property
    def display_rate(self) -> str:
        return f"{self.implied_rate:.4f}"


class ForecastSeries(BaseModel):
    """Raw forecast steps plus the location's UTC offset in seconds, as reported by the source."""

    model_config = ConfigDict(frozen=True)

    samples: list[WeatherSample] = []
    utc_offset: int = 0
