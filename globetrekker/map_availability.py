# ABOUTME: Supervises an interactive map render with a readiness timeout and an error channel.
# ABOUTME: On failure or timeout it switches, permanently, to a static map image and deep links.

import asyncio
import logging
import webbrowser
from collections.abc import Callable
from enum import Enum
from urllib.parse import urlencode

from globetrekker.errors import MapTimeoutError
from globetrekker.geometry import compute_region, static_map_zoom
from globetrekker.models import Country, Region

logger = logging.getLogger(__name__)

MAP_READY_TIMEOUT = 5.0

STATIC_MAP_URL = "https://staticmap.openstreetmap.de/staticmap.php"
OPENSTREETMAP_URL = "https://www.openstreetmap.org/"
GOOGLE_MAPS_SEARCH_URL = "https://www.google.com/maps/search/"


class MapState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    TIMED_OUT = "timed_out"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (MapState.READY, MapState.TIMED_OUT, MapState.FAILED)

    @property
    def uses_fallback(self) -> bool:
        return self in (MapState.TIMED_OUT, MapState.FAILED)


def static_map_url(region: Region, zoom: int) -> str:
    """Static image URL centred on the region with a red marker at the same point."""
    center = f"{region.center_lat},{region.center_lng}"
    query = urlencode(
        {
            "center": center,
            "zoom": zoom,
            "size": "600x400",
            "maptype": "mapnik",
            "markers": f"{center},red",
        },
        safe=",",
    )
    return f"{STATIC_MAP_URL}?{query}"


def openstreetmap_url(lat: float, lng: float) -> str:
    return f"{OPENSTREETMAP_URL}?mlat={lat}&mlon={lng}#map=5/{lat}/{lng}"


def google_maps_url(lat: float, lng: float) -> str:
    return f"{GOOGLE_MAPS_SEARCH_URL}?api=1&query={lat},{lng}"


class MapAvailability:
    """Arbitrates between an interactive map and a static-image fallback.

    start() arms a one-shot timer. The first of signal_ready(), signal_error() or the
    timer firing decides the outcome; everything after that is ignored. close() is
    the unmount hook and always cancels the timer, so no transition can fire once the
    view is gone. The class is also an async context manager that calls start() and
    close() around its body.

    Args:
        country: Country whose coordinates and area drive the viewport and fallback zoom.
        timeout: Seconds to wait for readiness.
        opener: Callable used by the deep-link actions; defaults to webbrowser.open.
        on_change: Optional callback invoked with the new MapState on every transition.
    """

    def __init__(
        self,
        country: Country,
        timeout: float = MAP_READY_TIMEOUT,
        opener: Callable[[str], object] | None = None,
        on_change: Callable[[MapState], None] | None = None,
    ):
        self.country = country
        self.region = compute_region(country)
        self.timeout = timeout
        self.state = MapState.IDLE
        self.error: Exception | None = None
        self._opener = opener or webbrowser.open
        self._on_change = on_change
        self._timer: asyncio.TimerHandle | None = None
        self._closed = False

    async def __aenter__(self) -> "MapAvailability":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.close()

    def start(self):
        """Enter LOADING and arm the readiness timer on the running loop."""
        if self.state is not MapState.IDLE or self._closed:
            return
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.timeout, self._on_timeout)
        self._transition(MapState.LOADING)

    def signal_ready(self):
        if self._settle():
            self._transition(MapState.READY)

    def signal_error(self, error: Exception | None = None):
        if self._settle():
            self.error = error
            logger.warning("Interactive map failed for %s: %s", self.country.code, error)
            self._transition(MapState.FAILED)

    def close(self):
        """Unmount: cancel any pending timer and ignore all later signals."""
        self._cancel_timer()
        self._closed = True

    def _on_timeout(self):
        self._timer = None
        if self.state is not MapState.LOADING or self._closed:
            return
        self.error = MapTimeoutError(f"Map not ready after {self.timeout:g}s")
        logger.warning("Interactive map timed out for %s", self.country.code)
        self._transition(MapState.TIMED_OUT)

    def _settle(self) -> bool:
        """Cancel the timer and report whether a LOADING outcome may still be recorded."""
        if self.state is not MapState.LOADING or self._closed:
            logger.debug("Ignoring map signal in state %s", self.state.value)
            return False
        self._cancel_timer()
        return True

    def _cancel_timer(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _transition(self, state: MapState):
        logger.debug("Map %s: %s -> %s", self.country.code, self.state.value, state.value)
        self.state = state
        if self._on_change is not None:
            self._on_change(state)

    @property
    def uses_fallback(self) -> bool:
        return self.state.uses_fallback

    @property
    def fallback_zoom(self) -> int:
        return static_map_zoom(self.country.area)

    @property
    def static_map_url(self) -> str:
        return static_map_url(self.region, self.fallback_zoom)

    def open_in_openstreetmap(self):
        self._opener(openstreetmap_url(self.region.center_lat, self.region.center_lng))

    def open_in_google_maps(self):
        self._opener(google_maps_url(self.region.center_lat, self.region.center_lng))
