# ABOUTME: Service layer for the REST Countries API: country list and single country profiles.
# ABOUTME: The list keeps officially assigned independent countries only, sorted by common name.

import logging

import httpx
from pydantic import ValidationError

from globetrekker.config import Settings
from globetrekker.errors import ApplicationError, MissingInputError
from globetrekker.models import Country, CountrySummary
from globetrekker.transport import get_json

logger = logging.getLogger(__name__)

LIST_FIELDS = "name,flags,cca3,independent,status"
OFFICIALLY_ASSIGNED = "officially-assigned"


async def list_countries(client: httpx.AsyncClient, settings: Settings | None = None) -> list[CountrySummary]:
    """Fetch all countries and keep the independent, officially assigned ones."""
    settings = settings or Settings()
    data = await get_json(
        client, f"{settings.restcountries_url}/all", source="Countries API", params={"fields": LIST_FIELDS}
    )
    try:
        countries = [CountrySummary.model_validate(item) for item in data]
    except (TypeError, ValidationError) as e:
        raise ApplicationError("Countries API returned an unexpected payload") from e

    official = [c for c in countries if c.independent is True and c.status == OFFICIALLY_ASSIGNED]
    logger.debug("Kept %d of %d countries", len(official), len(countries))
    return sorted(official, key=lambda c: c.name.common.casefold())


def filter_countries(countries: list[CountrySummary], query: str | None) -> list[CountrySummary]:
    """Case-insensitive substring search on the common name; a blank query matches everything."""
    if not query or not query.strip():
        return list(countries)
    needle = query.strip().casefold()
    return [c for c in countries if needle in c.name.common.casefold()]


async def get_country(client: httpx.AsyncClient, code: str | None, settings: Settings | None = None) -> Country:
    """Fetch one country profile by its 2- or 3-letter code."""
    if not code or not code.strip():
        raise MissingInputError("No country code available")
    settings = settings or Settings()
    data = await get_json(client, f"{settings.restcountries_url}/alpha/{code.strip()}", source="Countries API")

    # /alpha answers with a one-element list for most codes
    if isinstance(data, list):
        if not data:
            raise ApplicationError(f"Countries API returned no country for {code}")
        data = data[0]
    try:
        return Country.model_validate(data)
    except ValidationError as e:
        raise ApplicationError("Countries API returned an unexpected payload") from e
