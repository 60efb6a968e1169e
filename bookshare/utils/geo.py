import math

EARTH_RADIUS_KM = 6371.0
# sort key for books whose distance is unknown
FAR_AWAY_KM = 999


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance_km(book, lat: float = None, lng: float = None):
    """
    Distance from (lat, lng) to the book owner's current location, rounded to
    0.1 km. A zero or missing coordinate on either side means unknown (None).
    """
    owner = book.owner
    if not (lat and lng and owner and owner.lat and owner.lng):
        return None
    return round(haversine_km(lat, lng, owner.lat, owner.lng), 1)
