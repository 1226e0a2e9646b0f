import json
import math

import pytest

from app.services.geofence import (
    LatLng,
    generate_corridor_boundary,
    haversine_distance,
    is_point_in_polygon,
    parse_boundary,
    path_length,
)

UNIT_SQUARE = {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]]}


def test_point_inside_unit_square():
    assert is_point_in_polygon(LatLng(0.5, 0.5), UNIT_SQUARE) is True


def test_point_outside_unit_square():
    assert is_point_in_polygon(LatLng(2, 2), UNIT_SQUARE) is False


def test_vertex_result_is_stable():
    first = is_point_in_polygon(LatLng(0, 0), UNIT_SQUARE)
    assert all(is_point_in_polygon(LatLng(0, 0), UNIT_SQUARE) == first for _ in range(5))


@pytest.mark.parametrize("polygon", [
    None,
    {},
    {"type": "Polygon", "coordinates": []},
    {"type": "Polygon", "coordinates": [[[0, 0], [1, 1]]]},
    {"type": "Polygon", "coordinates": [[["a", "b"], [1, 0], [1, 1], [0, 1]]]},
    {"type": "Polygon", "coordinates": [[0, 1, 2]]},
    {"type": "Polygon", "coordinates": [[{"x": 0}, {"x": 1}, {"x": 2}]]},
])
def test_missing_or_malformed_polygon_is_outside(polygon):
    assert is_point_in_polygon(LatLng(0.5, 0.5), polygon) is False


def test_ring_uses_lng_lat_order():
    # Tall thin box: lng 10..11, lat 0..50
    polygon = {"type": "Polygon", "coordinates": [[[10, 0], [11, 0], [11, 50], [10, 50], [10, 0]]]}
    assert is_point_in_polygon(LatLng(lat=25, lng=10.5), polygon)
    assert not is_point_in_polygon(LatLng(lat=10.5, lng=25), polygon)


def test_haversine_zero_and_symmetry():
    a = LatLng(14.6, 121.0)
    b = LatLng(14.61, 121.02)
    assert haversine_distance(a, a) == 0
    assert haversine_distance(a, b) == pytest.approx(haversine_distance(b, a))


def test_haversine_one_degree_of_longitude_at_equator():
    assert haversine_distance(LatLng(0, 0), LatLng(0, 1)) == pytest.approx(111_195, rel=0.01)


def test_path_length_sums_legs():
    points = [LatLng(0, 0), LatLng(0, 1), LatLng(0, 2)]
    assert path_length(points) == pytest.approx(2 * haversine_distance(points[0], points[1]))
    assert path_length([]) == 0
    assert path_length([LatLng(5, 5)]) == 0


def test_degenerate_corridor_is_closed_square():
    p = LatLng(14.6, 121.0)
    polygon = generate_corridor_boundary(p, p, 100)
    ring = polygon["coordinates"][0]

    assert polygon["type"] == "Polygon"
    assert len(ring) == 5
    assert ring[0] == ring[-1]

    lngs = [v[0] for v in ring]
    lats = [v[1] for v in ring]
    assert max(lats) - min(lats) == pytest.approx(200 / 111_320)
    assert max(lngs) - min(lngs) == pytest.approx(200 / (111_320 * math.cos(math.radians(14.6))))
    assert (max(lats) + min(lats)) / 2 == pytest.approx(p.lat)
    assert (max(lngs) + min(lngs)) / 2 == pytest.approx(p.lng)
    assert is_point_in_polygon(p, polygon)


def test_corridor_extends_past_endpoints():
    start = LatLng(14.6, 121.0)
    end = LatLng(14.6, 121.01)
    polygon = generate_corridor_boundary(start, end, 100)
    ring = polygon["coordinates"][0]

    assert len(ring) == 5
    assert ring[0] == ring[-1]
    # Midpoint and both endpoints are covered
    assert is_point_in_polygon(LatLng(14.6, 121.005), polygon)
    assert is_point_in_polygon(start, polygon)
    assert is_point_in_polygon(end, polygon)
    # ~50 m beyond the end cap is still inside, ~200 m is not
    beyond = 50 / (111_320 * math.cos(math.radians(14.6)))
    assert is_point_in_polygon(LatLng(14.6, 121.01 + beyond), polygon)
    assert not is_point_in_polygon(LatLng(14.6, 121.01 + 4 * beyond), polygon)
    # ~200 m to the side is outside
    assert not is_point_in_polygon(LatLng(14.6 + 200 / 111_320, 121.005), polygon)


def test_parse_boundary_accepts_polygon_text():
    polygon = generate_corridor_boundary(LatLng(1, 1), LatLng(1, 1), 50)
    assert parse_boundary(json.dumps(polygon)) == polygon


@pytest.mark.parametrize("raw", [
    None,
    "",
    "not json",
    json.dumps({"type": "Point", "coordinates": [1, 2]}),
    json.dumps({"type": "Polygon", "coordinates": []}),
    json.dumps({"type": "Polygon", "coordinates": [[[0, 0], [1, 1]]]}),
    json.dumps([1, 2, 3]),
    json.dumps({"type": "Polygon", "coordinates": [[[0], [1], [2], [3]]]}),
    json.dumps({"type": "Polygon", "coordinates": [[{"x": 0}, {"x": 1}, {"x": 2}]]}),
    json.dumps({"type": "Polygon", "coordinates": [[[0, 0], [1, "a"], [1, 1], [0, 1]]]}),
])
def test_parse_boundary_rejects_bad_input(raw):
    assert parse_boundary(raw) is None
