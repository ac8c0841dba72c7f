# ABOUTME: Dependency container for the detail services using Pydantic BaseModel.
# ABOUTME: Holds the httpx.AsyncClient and Settings shared by the country, weather and currency services.

import httpx
from pydantic import BaseModel, ConfigDict, Field

from globetrekker.config import Settings


class ServiceDeps(BaseModel):
    """Dependencies handed to each component when a country view is built."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    http_client: httpx.AsyncClient
    settings: Settings = Field(default_factory=Settings)


def create_http_client(settings: Settings | None = None) -> httpx.AsyncClient:
    """Create an httpx client with the configured timeout.

    No retry transport is installed: a failed fetch surfaces as an error state and
    the user re-selects the country to try again.
    """
    settings = settings or Settings()
    return httpx.AsyncClient(timeout=httpx.Timeout(settings.http_timeout))
