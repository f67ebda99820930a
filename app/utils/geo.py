import math

from app.schemas import Coordinates

EARTH_RADIUS_KM = 6371

# Praia da Costa, Vila Velha
BEACH_REFERENCE = Coordinates(lat=-20.3305, lng=-40.2855)


def to_rad(deg: float) -> float:
    return deg * (math.pi / 180)


def calculate_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle (haversine) distance in kilometres."""
    d_lat = to_rad(lat2 - lat1)
    d_lng = to_rad(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(to_rad(lat1)) * math.cos(to_rad(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def calculate_beach_distance(lat: float, lng: float) -> int:
    """Metres from (lat, lng) to the fixed beach reference point."""
    return round(calculate_distance(lat, lng, BEACH_REFERENCE.lat, BEACH_REFERENCE.lng) * 1000)
