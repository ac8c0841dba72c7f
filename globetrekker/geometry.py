# ABOUTME: Map viewport and zoom derivation from a country's coordinates and land area.
# ABOUTME: Pure functions: area bands pick the span, so shape and bounding box are ignored.

from numbers import Real

from globetrekker.models import Country, Region

DEFAULT_REGION = Region(center_lat=0.0, center_lng=0.0, lat_span=50.0, lng_span=50.0)
DEFAULT_SPAN = 5.0
DEFAULT_STATIC_ZOOM = 5

# (area threshold in km², value) pairs, largest first; an area must exceed the threshold.
SPAN_BANDS = (
    (5_000_000, 10.0),
    (1_000_000, 8.0),
    (500_000, 6.0),
    (100_000, 4.0),
    (20_000, 3.0),
)
SMALLEST_SPAN = 2.0

STATIC_ZOOM_BANDS = (
    (1_000_000, 3),
    (500_000, 4),
    (100_000, 5),
    (20_000, 6),
)
SMALLEST_STATIC_ZOOM = 7


def _is_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def coordinates(latlng) -> tuple[float, float] | None:
    """Return (lat, lng) when latlng holds at least two numbers, else None."""
    if not latlng or len(latlng) < 2:
        return None
    lat, lng = latlng[0], latlng[1]
    if not (_is_number(lat) and _is_number(lng)):
        return None
    return float(lat), float(lng)


def _band(area: float, bands, smallest):
    for threshold, value in bands:
        if area > threshold:
            return value
    return smallest


def span_for_area(area: float | None) -> float:
    """Viewport span in degrees for a land area in km²."""
    if not area:
        return DEFAULT_SPAN
    return _band(area, SPAN_BANDS, SMALLEST_SPAN)


def static_map_zoom(area: float | None) -> int:
    """Zoom level for the static fallback map; coarser than the interactive span bands."""
    if not area:
        return DEFAULT_STATIC_ZOOM
    return _band(area, STATIC_ZOOM_BANDS, SMALLEST_STATIC_ZOOM)


def compute_region(country: Country | None) -> Region:
    """Derive the map viewport for a country.

    Countries without usable coordinates get DEFAULT_REGION, a wide view of (0, 0)
    that signals no precise location is known.
    """
    coords = coordinates(country.latlng) if country is not None else None
    if coords is None:
        return DEFAULT_REGION

    span = span_for_area(country.area)
    return Region(center_lat=coords[0], center_lng=coords[1], lat_span=span, lng_span=span)


def capital_coordinates(country: Country) -> tuple[float, float] | None:
    """Capital (lat, lng) when the source provides exactly two values."""
    latlng = country.capital_info.latlng
    if len(latlng) != 2:
        return None
    return coordinates(latlng)


def format_latitude(lat: float) -> str:
    return f"{abs(lat):.2f}° {'N' if lat >= 0 else 'S'}"


def format_longitude(lng: float) -> str:
    return f"{abs(lng):.2f}° {'E' if lng >= 0 else 'W'}"
