"""
Geodesic helpers: distances, rounding and snapping points onto polylines.
"""

from dataclasses import dataclass
from math import asin, cos, radians, sin, sqrt
from typing import Sequence

from shapely.geometry import LineString, Point
from shapely.ops import nearest_points

from ..errors import GeometryComputationError
from ..models import Position

EARTH_RADIUS_M = 6371000.0
COORDINATE_PRECISION = 6  # ~0.1 m


def round_coordinate(value: float) -> float:
    return round(value, COORDINATE_PRECISION)


def haversine_m(a: Position, b: Position) -> float:
    """Great-circle distance in meters between two (lng, lat) positions."""
    lng1, lat1, lng2, lat2 = map(radians, [a[0], a[1], b[0], b[1]])
    dlat = lat2 - lat1
    dlng = lng2 - lng1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_M * asin(min(1.0, sqrt(h)))


@dataclass(frozen=True)
class Snap:
    """Nearest point on a polyline to some coordinate."""
    position: Position
    index: int  # index of the polyline vertex starting the snapped segment
    distance_m: float


def snap_to_line(line: Sequence[Position], target: Position) -> Snap:
    """Snap target onto the polyline.

    Segments are scanned in order and the first one with the strictly
    smallest distance wins, so a target sitting on a shared vertex snaps to
    the segment ending there.
    """
    if len(line) < 2:
        raise GeometryComputationError(f"Cannot snap onto a polyline with {len(line)} point(s)")

    point = Point(target)
    best = None
    for index in range(len(line) - 1):
        segment = LineString([line[index], line[index + 1]])
        nearest = nearest_points(segment, point)[0]
        position = (nearest.x, nearest.y)
        distance = haversine_m(target, position)
        if best is None or distance < best.distance_m:
            best = Snap(position=position, index=index, distance_m=distance)
    return best
