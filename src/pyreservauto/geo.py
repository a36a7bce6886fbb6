"""Great-circle distance between coordinates."""

from __future__ import annotations

import math

from pyreservauto._constants import EARTH_RADIUS_M
from pyreservauto.models.coordinate import Coordinate


def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Distance in meters between two points given in degrees."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)

    a = math.sin(d_lat / 2) ** 2 + (
        math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def distance(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance from *a* to *b* in meters.

    Symmetric, and ``0.0`` for identical coordinates.  Inputs must be
    finite; the feed layer rejects records that are not.
    """
    return haversine_m(a.latitude, a.longitude, b.latitude, b.longitude)
