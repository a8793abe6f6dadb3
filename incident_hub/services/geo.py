"""
Great-circle helpers for the proximity search.

The store is queried with a cheap rectangle (see `bounding_box`) and the
exact radius is enforced afterwards with the Haversine distance.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Sequence, Tuple

EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE = 111.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distance in kilometers between two lat/lng points (degrees)."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def radius_to_degrees(radius_km: float) -> float:
    # 1 degree ~ 111 km at the equator
    return radius_km / KM_PER_DEGREE


def _longitude_half_width(lat: float, radius_km: float) -> float:
    """
    East-west half width (degrees) of the circle around `lat`.

    Never narrower than radius/111. Grows with 1/cos(lat) and reaches 180
    once the circle covers a pole.
    """
    base = radius_to_degrees(radius_km)
    angular = radius_km / EARTH_RADIUS_KM
    if angular >= math.pi / 2:
        return 180.0
    cos_lat = math.cos(math.radians(lat))
    ratio = math.sin(angular) / cos_lat if cos_lat > 0 else math.inf
    if ratio >= 1:
        return 180.0
    return min(180.0, max(base, math.degrees(math.asin(ratio))))


@dataclass(frozen=True)
class BoundingBox:
    south: float
    north: float
    # one range normally, two when the box crosses the antimeridian
    lon_ranges: Tuple[Tuple[float, float], ...]

    def contains(self, lat: float, lon: float) -> bool:
        if not self.south <= lat <= self.north:
            return False
        return any(west <= lon <= east for west, east in self.lon_ranges)

    def to_query(self) -> Dict[str, Any]:
        lon_clauses = [{"longitude": {"$gte": w, "$lte": e}} for w, e in self.lon_ranges]
        query: Dict[str, Any] = {
            "latitude": {"$ne": None, "$gte": self.south, "$lte": self.north},
        }
        if len(lon_clauses) == 1:
            query.update(lon_clauses[0])
            query["longitude"]["$ne"] = None
        else:
            query["longitude"] = {"$ne": None}
            query["$or"] = lon_clauses
        return query


def bounding_box(lat: float, lon: float, radius_km: float) -> BoundingBox:
    lat_delta = radius_to_degrees(radius_km)
    lon_delta = _longitude_half_width(lat, radius_km)

    south = max(-90.0, lat - lat_delta)
    north = min(90.0, lat + lat_delta)

    if lon_delta >= 180.0:
        return BoundingBox(south, north, ((-180.0, 180.0),))

    west = lon - lon_delta
    east = lon + lon_delta
    if west < -180.0:
        ranges = ((west + 360.0, 180.0), (-180.0, east))
    elif east > 180.0:
        ranges = ((west, 180.0), (-180.0, east - 360.0))
    else:
        ranges = ((west, east),)
    return BoundingBox(south, north, ranges)


def rank_by_distance(
    candidates: Iterable[Dict[str, Any]],
    lat: float,
    lon: float,
    radius_km: float,
) -> List[Dict[str, Any]]:
    """
    Attach `distance` (km) to each candidate, keep the ones inside the
    radius and sort nearest first. Candidates without coordinates are
    dropped. Equal distances keep their input order.
    """
    ranked = []
    for doc in candidates:
        r_lat, r_lon = doc.get("latitude"), doc.get("longitude")
        if r_lat is None or r_lon is None:
            continue
        distance = haversine_km(lat, lon, float(r_lat), float(r_lon))
        if distance <= radius_km:
            ranked.append({**doc, "distance": distance})
    ranked.sort(key=lambda d: d["distance"])
    return ranked


def format_distance(distance_km: float) -> str:
    if distance_km < 1:
        return f"{round(distance_km * 1000)}m"
    return f"{distance_km:.1f}km"


def is_within_range(a: Sequence[float], b: Sequence[float], max_distance_km: float) -> bool:
    return haversine_km(a[0], a[1], b[0], b[1]) <= max_distance_km
