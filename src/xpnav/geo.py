"""Great-circle helpers shared by the spatial queries and the fix resolver.

Coordinates are plain decimal degrees. Distances are nautical miles.
"""

import math

EARTH_RADIUS_NM = 3440.065
NM_PER_DEGREE_LAT = 60.0


def haversine_nm(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate great circle distance between two points.

    Args:
        lat1: First latitude in degrees.
        lon1: First longitude in degrees.
        lat2: Second latitude in degrees.
        lon2: Second longitude in degrees.

    Returns:
        Distance in nautical miles.

    Examples:
        >>> round(haversine_nm(0.0, 0.0, 1.0, 0.0), 1)
        60.0
    """
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dlat = phi2 - phi1
    dlon = math.radians(lon2 - lon1)

    a = math.sin(dlat / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlon / 2) ** 2
    c = 2 * math.asin(min(1.0, math.sqrt(a)))

    return c * EARTH_RADIUS_NM


def bounding_box(center_lat: float, center_lon: float, radius_nm: float) -> tuple[float, float, float, float]:
    """Return the (min_lat, min_lon, max_lat, max_lon) square around a point.

    The latitude half-range is ``radius / 60`` degrees and the longitude
    half-range is that value divided by ``cos(center_lat)``. Near the poles the
    longitude range is unbounded.
    """
    lat_range = radius_nm / NM_PER_DEGREE_LAT
    cos_lat = math.cos(math.radians(center_lat))

    if cos_lat <= 1e-9:
        lon_range = 360.0
    else:
        lon_range = lat_range / cos_lat

    return (
        center_lat - lat_range,
        center_lon - lon_range,
        center_lat + lat_range,
        center_lon + lon_range,
    )


def in_bounding_box(lat: float, lon: float, center_lat: float, center_lon: float, radius_nm: float) -> bool:
    """Cheap pre-check run before the exact distance test."""
    min_lat, min_lon, max_lat, max_lon = bounding_box(center_lat, center_lon, radius_nm)
    return min_lat <= lat <= max_lat and min_lon <= lon <= max_lon


def normalize_bearing(bearing: float) -> float:
    """Wrap a bearing into [0, 360)."""
    return bearing % 360.0
