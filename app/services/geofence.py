"""
Geofence geometry: point-in-polygon, great-circle distance and corridor synthesis.

Pure functions, no I/O. Polygons follow GeoJSON: ``{"type": "Polygon",
"coordinates": [ring, ...]}`` where each ring is a list of ``[lng, lat]``
pairs and only the outer ring (index 0) is considered.
"""

import json
import logging
import math
from typing import Any, Dict, Iterable, NamedTuple, Optional

from app.constants.tracking import EARTH_RADIUS_METERS, METERS_PER_DEGREE_LAT

logger = logging.getLogger(__name__)

class LatLng(NamedTuple):
    lat: float
    lng: float

def is_point_in_polygon(point: LatLng, polygon: Optional[Dict[str, Any]]) -> bool:
    """
    Ray-casting containment test against the polygon's outer ring.

    Returns False when the polygon is absent, has fewer than 3 ring points,
    or is malformed. Points exactly on an edge or vertex get a stable but
    unspecified answer.
    """
    if not polygon:
        return False
    try:
        ring = polygon["coordinates"][0]
    except (KeyError, IndexError, TypeError):
        return False
    if not isinstance(ring, (list, tuple)) or len(ring) < 3:
        return False

    inside = False
    try:
        j = len(ring) - 1
        for i in range(len(ring)):
            xi, yi = float(ring[i][1]), float(ring[i][0])  # lat, lng
            xj, yj = float(ring[j][1]), float(ring[j][0])
            # yi != yj whenever the first clause holds, so no division by zero
            if (yi > point.lng) != (yj > point.lng) and point.lat < (xj - xi) * (point.lng - yi) / (yj - yi) + xi:
                inside = not inside
            j = i
    except (LookupError, TypeError, ValueError):
        return False
    return inside

def haversine_distance(a: LatLng, b: LatLng) -> float:
    """Great-circle distance in meters between two points."""
    lat_a = math.radians(a.lat)
    lat_b = math.radians(b.lat)
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)

    sin_lat = math.sin(d_lat / 2)
    sin_lng = math.sin(d_lng / 2)
    h = sin_lat * sin_lat + math.cos(lat_a) * math.cos(lat_b) * sin_lng * sin_lng

    # Rounding can push h a hair above 1 for antipodal points
    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(min(1.0, h)))

def path_length(points: Iterable[LatLng]) -> float:
    """Sum of consecutive haversine distances along ``points`` in order."""
    total = 0.0
    previous = None
    for point in points:
        if previous is not None:
            total += haversine_distance(previous, point)
        previous = point
    return total

def generate_corridor_boundary(start: LatLng, end: LatLng, buffer_meters: float) -> Dict[str, Any]:
    """
    Rectangular corridor around the segment start -> end.

    The rectangle is offset ``buffer_meters`` to either side of the segment
    and extended by the same amount past each endpoint. When both points
    coincide the result is an axis-aligned square of side 2 x buffer
    centred on the point. The ring is closed.
    """
    buffer_lat = buffer_meters / METERS_PER_DEGREE_LAT
    avg_lat = math.radians((start.lat + end.lat) / 2)
    buffer_lng = buffer_meters / (METERS_PER_DEGREE_LAT * math.cos(avg_lat))

    dx = end.lng - start.lng
    dy = end.lat - start.lat
    length = math.hypot(dx, dy)

    if length == 0:
        ring = [
            [start.lng - buffer_lng, start.lat - buffer_lat],
            [start.lng + buffer_lng, start.lat - buffer_lat],
            [start.lng + buffer_lng, start.lat + buffer_lat],
            [start.lng - buffer_lng, start.lat + buffer_lat],
        ]
    else:
        # Perpendicular and axial offsets, scaled per axis to degrees
        px = -dy / length * buffer_lng
        py = dx / length * buffer_lat
        ax = dx / length * buffer_lng
        ay = dy / length * buffer_lat
        ring = [
            [start.lng - px - ax, start.lat - py - ay],
            [end.lng - px + ax, end.lat - py + ay],
            [end.lng + px + ax, end.lat + py + ay],
            [start.lng + px - ax, start.lat + py - ay],
        ]

    ring.append(list(ring[0]))
    return {"type": "Polygon", "coordinates": [ring]}

def _is_vertex(vertex: Any) -> bool:
    if not isinstance(vertex, (list, tuple)) or len(vertex) < 2:
        return False
    return all(
        isinstance(c, (int, float)) and not isinstance(c, bool) and math.isfinite(c)
        for c in vertex[:2]
    )

def _is_ring(ring: Any) -> bool:
    return isinstance(ring, (list, tuple)) and len(ring) >= 3 and all(_is_vertex(v) for v in ring)

def parse_boundary(geojson: Any) -> Optional[Dict[str, Any]]:
    """
    Parse a stored boundary into a polygon dict.

    Anything that is not a GeoJSON Polygon whose outer ring has at least
    three numeric [lng, lat] vertices comes back as None so callers skip
    the boundary check.
    """
    if not geojson:
        return None
    if isinstance(geojson, str):
        try:
            geojson = json.loads(geojson)
        except ValueError:
            logger.warning("Ignoring boundary that is not valid JSON")
            return None
    if not isinstance(geojson, dict) or geojson.get("type") != "Polygon":
        logger.warning("Ignoring boundary that is not a GeoJSON Polygon")
        return None
    coordinates = geojson.get("coordinates")
    if not isinstance(coordinates, list) or not coordinates or not _is_ring(coordinates[0]):
        logger.warning("Ignoring boundary polygon without a usable outer ring")
        return None
    return geojson
