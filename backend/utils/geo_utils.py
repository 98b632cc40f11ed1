"""
Geo Utilities
Great-circle distance and coordinate checks used by the hub and routes
"""

import math
from typing import Optional

# Earth's radius in kilometers
EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate distance between two coordinates using Haversine formula

    Args:
        lat1, lon1: First coordinate in degrees (latitude, longitude)
        lat2, lon2: Second coordinate in degrees (latitude, longitude)

    Returns:
        Distance in kilometers (unrounded)
    """
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = (
        math.sin(dlat / 2) * math.sin(dlat / 2)
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(dlon / 2)
        * math.sin(dlon / 2)
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def is_valid_coordinate(latitude: Optional[float], longitude: Optional[float]) -> bool:
    """True when both values are present and inside [-90,90] x [-180,180]"""
    if latitude is None or longitude is None:
        return False

    if math.isnan(latitude) or math.isnan(longitude):
        return False

    return -90 <= latitude <= 90 and -180 <= longitude <= 180
