"""
Intersection point of two street geometries.

Tiered strategy, each tier tried only when the previous one found nothing:

1. Exact: true line intersections. Several candidates (boulevards crossing
   twice, same-name streets in different districts) are disambiguated by
   distance to the locality center.
2. Buffered: both streets widened by BUFFER_DISTANCE_M to bridge small gaps
   in the map data; the centroid of the overlap is used.
3. Nearest point: closest approach between the two streets, accepted only
   below NEAREST_POINT_MAX_M. Further apart the streets are not considered
   to meet.
"""

import logging
from typing import List, Optional

import geopandas as gpd
from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry

from ..localities import Locality
from ..models import Coordinates, StreetGeometry
from ..utils.geo import haversine_m, snap_to_line

logger = logging.getLogger(__name__)

BUFFER_DISTANCE_M = 30.0
NEAREST_POINT_MAX_M = 200.0

WGS84 = "EPSG:4326"


def _collect_points(geometry: BaseGeometry) -> List[Point]:
    """Flatten an intersection result into candidate points."""
    if geometry.is_empty:
        return []
    if geometry.geom_type == "Point":
        return [geometry]
    if geometry.geom_type in ("LineString", "LinearRing"):
        # Streets overlapping along a run
        return [geometry.centroid]
    if hasattr(geometry, "geoms"):
        points = []
        for part in geometry.geoms:
            points.extend(_collect_points(part))
        return points
    return [geometry.centroid]


class IntersectionSolver:
    """Computes where two streets meet."""

    def __init__(
        self,
        locality: Locality,
        buffer_m: float = BUFFER_DISTANCE_M,
        nearest_max_m: float = NEAREST_POINT_MAX_M,
    ):
        self.locality = locality
        self.buffer_m = buffer_m
        self.nearest_max_m = nearest_max_m

    def intersect(self, geom_a: StreetGeometry, geom_b: StreetGeometry) -> Optional[Coordinates]:
        """Find the intersection point of two streets, or None if unresolved."""
        try:
            point = self._exact_intersection(geom_a, geom_b)
            if point is not None:
                return point

            logger.info(
                f"No exact intersections between '{geom_a.name}' and '{geom_b.name}', "
                f"trying {self.buffer_m:.0f}m buffers"
            )
            point = self._buffered_intersection(geom_a, geom_b)
            if point is not None:
                return point

            return self._nearest_point(geom_a, geom_b)
        except Exception as e:
            logger.error(
                f"Error finding intersection of '{geom_a.name}' and '{geom_b.name}': "
                f"{type(e).__name__}: {e}"
            )
            return None

    def _exact_intersection(self, geom_a: StreetGeometry, geom_b: StreetGeometry) -> Optional[Coordinates]:
        candidates = _collect_points(geom_a.to_shapely().intersection(geom_b.to_shapely()))
        if not candidates:
            return None

        logger.info(f"Found {len(candidates)} exact intersection(s)")
        if len(candidates) == 1:
            point = candidates[0]
            logger.info(f"Intersection found at {point.y:.6f}, {point.x:.6f}")
            return Coordinates(lat=point.y, lng=point.x)

        return self.closest_to_center(candidates)

    def closest_to_center(self, candidates: List[Point]) -> Coordinates:
        """Pick the candidate nearest the locality center.

        Equal distances fall back to (lng, lat) ordering so the choice does not
        depend on the order shapely returns points in.
        """
        center = (self.locality.center.lng, self.locality.center.lat)
        ranked = sorted(
            ((haversine_m(center, (p.x, p.y)), p.x, p.y) for p in candidates)
        )
        distance, lng, lat = ranked[0]
        logger.info(
            f"Using closest intersection to {self.locality.id} center: "
            f"{lat:.6f}, {lng:.6f} ({distance:.0f}m away)"
        )
        return Coordinates(lat=lat, lng=lng)

    def _buffered_intersection(self, geom_a: StreetGeometry, geom_b: StreetGeometry) -> Optional[Coordinates]:
        # Buffer in a metric CRS (local UTM zone) for accurate distances
        streets = gpd.GeoSeries([geom_a.to_shapely(), geom_b.to_shapely()], crs=WGS84)
        utm_crs = streets.estimate_utm_crs()
        buffered = streets.to_crs(utm_crs).buffer(self.buffer_m)

        overlap = buffered.iloc[0].intersection(buffered.iloc[1])
        if overlap.is_empty:
            return None

        centroid = gpd.GeoSeries([overlap.centroid], crs=utm_crs).to_crs(WGS84).iloc[0]
        logger.info(f"Found buffered intersection at {centroid.y:.6f}, {centroid.x:.6f}")
        return Coordinates(lat=centroid.y, lng=centroid.x)

    def _nearest_point(self, geom_a: StreetGeometry, geom_b: StreetGeometry) -> Optional[Coordinates]:
        best = None
        for line_a in geom_a.lines:
            for line_b in geom_b.lines:
                for vertex in line_a:
                    snap = snap_to_line(line_b, vertex)
                    if best is None or snap.distance_m < best.distance_m:
                        best = snap

        if best is not None and best.distance_m < self.nearest_max_m:
            lng, lat = best.position
            logger.info(f"Found nearest point at {lat:.6f}, {lng:.6f} (gap {best.distance_m:.1f}m)")
            return Coordinates(lat=lat, lng=lng)

        gap = f"{best.distance_m:.1f}m" if best is not None else "unknown"
        logger.warning(
            f"Streets too far apart, no valid intersection of '{geom_a.name}' "
            f"and '{geom_b.name}' (gap {gap})"
        )
        return None
