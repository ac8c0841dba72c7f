# ABOUTME: Exchange-rate fetching and local currency conversion against a single USD-based rate table.
# ABOUTME: The table is loaded once per converter; every pair and cross-rate is computed from it.

import logging
import math
from collections.abc import Callable

import httpx
from pydantic import ValidationError

from globetrekker.config import Settings
from globetrekker.deps import ServiceDeps
from globetrekker.errors import ApplicationError, ServiceError, UnknownCurrencyError
from globetrekker.models import ConversionResult, Country, ExchangeRateTable
from globetrekker.state import Status, ViewState
from globetrekker.transport import get_json

logger = logging.getLogger(__name__)

BASE_CURRENCY = "USD"


async def get_exchange_rates(client: httpx.AsyncClient, settings: Settings) -> ExchangeRateTable:
    """Fetch the latest rates relative to BASE_CURRENCY.

    Raises:
        TransportError: Non-2xx status or transport failure.
        ApplicationError: The payload's result is not "success", or the rates are unusable.
    """
    url = f"{settings.exchange_rate_url}/{settings.exchange_rate_api_key}/latest/{BASE_CURRENCY}"
    data = await get_json(client, url, source="Exchange rate API")
    return parse_exchange_rates(data)


def parse_exchange_rates(data) -> ExchangeRateTable:
    if not isinstance(data, dict):
        raise ApplicationError("Exchange rate API returned an unexpected payload")
    if data.get("result") != "success":
        raise ApplicationError(data.get("error-type") or data.get("error") or "Exchange rate API error")

    try:
        table = ExchangeRateTable(
            base_code=data.get("base_code", BASE_CURRENCY), rates=data["conversion_rates"]
        )
    except (KeyError, ValidationError) as e:
        raise ApplicationError("Exchange rate API returned an unexpected payload") from e

    bad = [code for code, rate in table.rates.items() if not (math.isfinite(rate) and rate > 0)]
    if bad:
        raise ApplicationError(f"Exchange rate API returned invalid rates for {', '.join(bad)}")
    return table


def default_target_currency(country: Country | None) -> str:
    """First currency the country declares, or the base currency when it declares none."""
    if country is not None and country.currency_codes:
        return country.currency_codes[0]
    return BASE_CURRENCY


def parse_amount(text) -> float | None:
    """Numeric amount from user input, or None when it is empty or not a finite number.

    Parsing is strict: trailing text and digit-group underscores ("1_000") are rejected.
    """
    if text is None or "_" in str(text):
        return None
    try:
        amount = float(str(text).strip())
    except ValueError:
        return None
    return amount if math.isfinite(amount) else None


def _rate(table: ExchangeRateTable, code: str) -> float:
    if code in table.rates:
        return table.rates[code]
    if code == table.base_code:
        return 1.0
    raise UnknownCurrencyError(f"Unknown currency: {code}")


def convert(table: ExchangeRateTable, amount: float, from_code: str, to_code: str) -> ConversionResult:
    """Convert through the base currency: amount / rate[from] * rate[to].

    No intermediate rounding; ConversionResult rounds only for display.
    """
    from_rate = _rate(table, from_code)
    to_rate = _rate(table, to_code)
    amount_in_base = amount if from_code == table.base_code else amount / from_rate
    return ConversionResult(
        from_code=from_code,
        to_code=to_code,
        source_amount=amount,
        amount=amount_in_base * to_rate,
        implied_rate=to_rate / from_rate,
    )


class CurrencyConverter:
    """Converter session: one rate table, a from/to selection and the amount being typed.

    initialize() fetches the table once; a failed fetch leaves the converter in a
    terminal error state. Selection changes, swaps and amount edits never refetch.
    """

    def __init__(
        self,
        deps: ServiceDeps,
        default_target: str | None = None,
        on_change: Callable[[ViewState[ExchangeRateTable]], None] | None = None,
    ):
        self.deps = deps
        self.state: ViewState[ExchangeRateTable] = ViewState()
        self.from_code = BASE_CURRENCY
        self.to_code = default_target or BASE_CURRENCY
        self.amount_text = "1"
        self._on_change = on_change

    @classmethod
    def for_country(cls, deps: ServiceDeps, country: Country | None, **kwargs) -> "CurrencyConverter":
        return cls(deps, default_target=default_target_currency(country), **kwargs)

    async def initialize(self) -> ViewState[ExchangeRateTable]:
        """Load the rate table. Later calls return the existing state without a request."""
        if self.state.status is not Status.IDLE:
            return self.state

        self._set(self.state.start())
        try:
            table = await get_exchange_rates(self.deps.http_client, self.deps.settings)
        except ServiceError as e:
            logger.warning("Exchange rates unavailable: %s", e)
            self._set(self.state.fail(str(e)))
            return self.state

        if self.to_code not in table.rates and self.to_code != table.base_code:
            logger.debug("Default currency %s not in rate table, using %s", self.to_code, table.base_code)
            self.to_code = table.base_code
        self._set(self.state.succeed(table))
        return self.state

    @property
    def table(self) -> ExchangeRateTable:
        if not self.state.is_ready:
            raise RuntimeError("exchange rates are not loaded")
        return self.state.data

    @property
    def currencies(self) -> list[str]:
        return self.table.currencies if self.state.is_ready else []

    def convert(self, amount: float, from_code: str, to_code: str) -> ConversionResult:
        return convert(self.table, amount, from_code, to_code)

    def select_from(self, code: str):
        _rate(self.table, code)
        self.from_code = code

    def select_to(self, code: str):
        _rate(self.table, code)
        self.to_code = code

    def swap(self):
        self.from_code, self.to_code = self.to_code, self.from_code

    def set_amount(self, text: str):
        self.amount_text = text

    @property
    def result(self) -> ConversionResult | None:
        """Conversion of the current input, or None while loading, on error, or for invalid input."""
        if not self.state.is_ready:
            return None
        amount = parse_amount(self.amount_text)
        if amount is None:
            return None
        return self.convert(amount, self.from_code, self.to_code)

    def _set(self, state: ViewState[ExchangeRateTable]):
        self.state = state
        if self._on_change is not None:
            self._on_change(state)
