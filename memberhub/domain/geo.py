"""Great-circle distance between coordinates (haversine)."""
from __future__ import annotations

import math

EARTH_RADIUS_KM = 6371.0


def distance_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def within_radius(lat: float, lng: float, point_lat: float | None, point_lng: float | None, radius_km: float) -> bool:
    if point_lat is None or point_lng is None:
        return False
    return distance_km(lat, lng, point_lat, point_lng) <= radius_km
