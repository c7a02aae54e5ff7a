"""Geospatial utilities (no external dependencies)."""

from __future__ import annotations

import math

from presence_check.errors import InvalidInputError
from presence_check.models import Circle, GeoPoint

EARTH_RADIUS_M = 6_371_000.0  # mean Earth radius in meters (spherical model)


def validate_point(point: GeoPoint) -> None:
    """Raise InvalidInputError unless the point has finite, in-range coordinates."""

    lat, lon = point.latitude, point.longitude
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise InvalidInputError(f"non-finite coordinate: ({lat!r}, {lon!r})")
    if not -90.0 <= lat <= 90.0:
        raise InvalidInputError(f"latitude out of range [-90, 90]: {lat!r}")
    if not -180.0 <= lon <= 180.0:
        raise InvalidInputError(f"longitude out of range [-180, 180]: {lon!r}")


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute Haversine distance in meters between two lat/lon points.

    Args:
        lat1: Latitude 1 in degrees.
        lon1: Longitude 1 in degrees.
        lat2: Latitude 2 in degrees.
        lon2: Longitude 2 in degrees.

    Returns:
        Distance in meters.

    Raises:
        InvalidInputError: If any coordinate is non-finite or out of range.
    """

    validate_point(GeoPoint(lat1, lon1))
    validate_point(GeoPoint(lat2, lon2))

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    # rounding can push a just outside [0, 1] for coincident/antipodal points
    a = min(1.0, max(0.0, a))
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_M * c


def distance_m(p1: GeoPoint, p2: GeoPoint) -> float:
    """Great-circle distance in meters between two points."""

    return haversine_m(p1.latitude, p1.longitude, p2.latitude, p2.longitude)


def is_inside_circle(point: GeoPoint, circle: Circle) -> bool:
    """Check whether a point is inside or on the boundary of a circle."""

    return distance_m(point, circle.center) <= circle.radius_m


def format_distance(meters: float) -> str:
    """Short human-readable distance: ``"25m"`` below 1 km, ``"1.2km"`` above."""

    if meters < 1000:
        return f"{math.floor(meters + 0.5)}m"
    return f"{meters / 1000:.1f}km"
