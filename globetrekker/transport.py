# ABOUTME: Shared JSON GET helper that normalises HTTP failures into the service error taxonomy.
# ABOUTME: Non-2xx statuses and transport errors become TransportError; undecodable bodies ApplicationError.

import logging
from typing import Any

import httpx

from globetrekker.errors import ApplicationError, TransportError

logger = logging.getLogger(__name__)


async def get_json(client: httpx.AsyncClient, url: str, *, source: str, params: dict | None = None) -> Any:
    """GET a URL and return the decoded JSON body.

    Args:
        client: Shared async HTTP client.
        url: Absolute request URL.
        source: Human-readable source name used in error messages (e.g. "Weather API").
        params: Optional query parameters.

    Raises:
        TransportError: The request failed or the status was not 2xx.
        ApplicationError: The body was not valid JSON.
    """
    try:
        resp = await client.get(url, params=params)
    except httpx.HTTPError as e:
        logger.warning("%s request failed: %s", source, e)
        raise TransportError(f"{source} request failed: {e}") from e

    if not resp.is_success:
        logger.warning("%s returned HTTP %s", source, resp.status_code)
        raise TransportError(f"{source} error: {resp.status_code}", status_code=resp.status_code)

    try:
        return resp.json()
    except ValueError as e:
        raise ApplicationError(f"{source} returned an invalid body") from e
