from math import radians, sin, cos, atan2, sqrt

from waystop.models.location import Point

EARTH_RADIUS_MILES = 3958.8


def haversine_miles(a: Point, b: Point) -> float:
    """Great-circle distance between two points in miles."""
    lat1, lon1 = radians(a.latitude), radians(a.longitude)
    lat2, lon2 = radians(b.latitude), radians(b.longitude)
    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    return EARTH_RADIUS_MILES * 2 * atan2(sqrt(h), sqrt(1 - h))
