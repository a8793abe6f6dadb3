import math

import pytest

from incident_hub.services.geo import (
    EARTH_RADIUS_KM,
    bounding_box,
    format_distance,
    haversine_km,
    is_within_range,
    rank_by_distance,
    radius_to_degrees,
)


def destination(lat, lon, bearing_deg, distance_km):
    """Point reached travelling `distance_km` from (lat, lon) on a bearing."""
    d = distance_km / EARTH_RADIUS_KM
    b = math.radians(bearing_deg)
    p1 = math.radians(lat)
    l1 = math.radians(lon)
    p2 = math.asin(math.sin(p1) * math.cos(d) + math.cos(p1) * math.sin(d) * math.cos(b))
    l2 = l1 + math.atan2(
        math.sin(b) * math.sin(d) * math.cos(p1),
        math.cos(d) - math.sin(p1) * math.sin(p2),
    )
    lon2 = (math.degrees(l2) + 540.0) % 360.0 - 180.0
    return math.degrees(p2), lon2


def test_haversine_zero_and_symmetry():
    assert haversine_km(10, 20, 10, 20) == 0
    a = haversine_km(37.7749, -122.4194, 40.7128, -74.0060)
    b = haversine_km(40.7128, -74.0060, 37.7749, -122.4194)
    assert a == pytest.approx(b)
    # SF to NYC is roughly 4130 km
    assert a == pytest.approx(4130, rel=0.01)


def test_one_degree_latitude_is_about_111_km():
    assert haversine_km(0, 0, 1, 0) == pytest.approx(111.19, abs=0.01)


def test_short_distance_formats_in_meters():
    d = haversine_km(37.7749, -122.4194, 37.7750, -122.4195)
    assert d == pytest.approx(0.0142, abs=0.0005)
    assert format_distance(d) == "14m"


@pytest.mark.parametrize(
    "km, label",
    [(0.0, "0m"), (0.25, "250m"), (0.9994, "999m"), (1.0, "1.0km"), (2.345, "2.3km"), (15.06, "15.1km")],
)
def test_format_distance(km, label):
    assert format_distance(km) == label


def test_radius_to_degrees():
    assert radius_to_degrees(111) == pytest.approx(1.0)
    assert radius_to_degrees(5) == pytest.approx(0.04504, abs=1e-5)


def test_box_is_square_at_equator():
    box = bounding_box(0, 0, 111)
    assert box.south == pytest.approx(-1)
    assert box.north == pytest.approx(1)
    (west, east), = box.lon_ranges
    assert west == pytest.approx(-1)
    assert east == pytest.approx(1)


def test_box_widens_with_latitude():
    (w0, e0), = bounding_box(0, 0, 50).lon_ranges
    (w60, e60), = bounding_box(60, 0, 50).lon_ranges
    assert (e60 - w60) > 1.9 * (e0 - w0)


@pytest.mark.parametrize("lat", [-84.5, -60, -30, 0, 12.5, 45, 70, 84.5])
@pytest.mark.parametrize("lon", [-179.95, -45, 0, 100, 179.95])
@pytest.mark.parametrize("radius", [0.05, 2, 5, 15, 120, 900])
def test_box_contains_whole_circle(lat, lon, radius):
    box = bounding_box(lat, lon, radius)
    for bearing in range(0, 360, 10):
        p_lat, p_lon = destination(lat, lon, bearing, radius * 0.999)
        assert haversine_km(lat, lon, p_lat, p_lon) <= radius
        assert box.contains(p_lat, p_lon), (bearing, p_lat, p_lon)


def test_box_splits_across_antimeridian():
    box = bounding_box(0, 179.99, 5)
    assert len(box.lon_ranges) == 2
    assert box.contains(0, -179.99)
    assert box.contains(0, 179.97)
    assert not box.contains(0, 0)

    query = box.to_query()
    assert "$or" in query
    assert query["longitude"] == {"$ne": None}


def test_box_covering_pole_spans_all_longitudes():
    box = bounding_box(89.5, 10, 200)
    assert box.lon_ranges == ((-180.0, 180.0),)
    assert box.north == 90.0


def test_single_range_query_excludes_nulls():
    query = bounding_box(10, 10, 5).to_query()
    assert query["latitude"]["$ne"] is None
    assert query["longitude"]["$ne"] is None
    assert "$or" not in query


def test_rank_by_distance_filters_sorts_and_skips_unlocated():
    center = (0.0, 0.0)
    docs = [
        {"id": "far", "latitude": 1.0, "longitude": 0.0},
        {"id": "mid", "latitude": 0.02, "longitude": 0.0},
        {"id": "none", "latitude": None, "longitude": None},
        {"id": "near", "latitude": 0.001, "longitude": 0.0},
    ]
    ranked = rank_by_distance(docs, *center, radius_km=5)
    assert [d["id"] for d in ranked] == ["near", "mid"]
    assert ranked[0]["distance"] <= ranked[1]["distance"]
    assert all(d["distance"] <= 5 for d in ranked)


def test_rank_by_distance_keeps_input_order_on_ties():
    docs = [
        {"id": "a", "latitude": 0.01, "longitude": 0.0},
        {"id": "b", "latitude": -0.01, "longitude": 0.0},
    ]
    assert [d["id"] for d in rank_by_distance(docs, 0, 0, 5)] == ["a", "b"]


def test_is_within_range():
    assert is_within_range((0, 0), (0.01, 0), 5)
    assert not is_within_range((0, 0), (1, 0), 5)
