"""
Street section extraction.

Recovers the path of a street between two already resolved points. The
street's map ways are tried one by one first; if no single way carries both
points (the street is split into several ways, e.g. at intersections), the
ways are stitched together greedily starting from the start point.
"""

import logging
from typing import List, Optional

from ..models import Coordinates, Polyline, StreetGeometry
from ..providers.base import GeometryProvider
from ..utils.geo import haversine_m, snap_to_line

logger = logging.getLogger(__name__)

SNAP_MAX_M = 50.0
STITCH_REACH_M = 10.0
MAX_STITCH_SEGMENTS = 10


class SectionExtractor:
    """Extracts the sub-path of a street between two points."""

    def __init__(
        self,
        provider: GeometryProvider,
        snap_max_m: float = SNAP_MAX_M,
        stitch_reach_m: float = STITCH_REACH_M,
        max_stitch_segments: int = MAX_STITCH_SEGMENTS,
    ):
        """Initialize extractor.

        Args:
            provider: Source of full street geometries
            snap_max_m: Maximum snap distance from an endpoint to a way
            stitch_reach_m: Distance to the end point at which stitching stops
            max_stitch_segments: Cap on the number of ways stitched together
        """
        self.provider = provider
        self.snap_max_m = snap_max_m
        self.stitch_reach_m = stitch_reach_m
        self.max_stitch_segments = max_stitch_segments

    def extract(self, street_name: str, start: Coordinates, end: Coordinates) -> Optional[Polyline]:
        """Return the street path from start to end, or None.

        Raises:
            StreetGeometryError: from the geometry provider
        """
        logger.info(
            f"Finding section of '{street_name}' from {start.lat:.6f}, {start.lng:.6f} "
            f"to {end.lat:.6f}, {end.lng:.6f}"
        )

        geometry = self.provider.fetch_street_geometry(street_name)
        if geometry is None:
            logger.warning(f"No geometry found for street '{street_name}'")
            return None

        try:
            return self.extract_from_geometry(geometry, start, end)
        except Exception as e:
            logger.error(f"Error extracting section of '{street_name}': {type(e).__name__}: {e}")
            return None

    def extract_from_geometry(
        self,
        geometry: StreetGeometry,
        start: Coordinates,
        end: Coordinates,
    ) -> Optional[Polyline]:
        section = self.single_way_section(geometry.lines, start, end)
        if section is not None:
            logger.info(f"Found street section with {len(section)} point(s)")
            return section

        logger.info("No single segment found, trying to connect segments")
        path = self.stitch_section(geometry.lines, start, end)
        if path is None:
            logger.info(f"Could not extract section of '{geometry.name}'")
        return path

    def single_way_section(
        self,
        lines: List[Polyline],
        start: Coordinates,
        end: Coordinates,
    ) -> Optional[Polyline]:
        """Section cut from the one way both points snap onto most closely."""
        best_section = None
        best_total = float("inf")

        for line in lines:
            if len(line) < 2:
                continue

            start_snap = snap_to_line(line, start.to_position())
            end_snap = snap_to_line(line, end.to_position())
            if start_snap.distance_m >= self.snap_max_m or end_snap.distance_m >= self.snap_max_m:
                continue

            total = start_snap.distance_m + end_snap.distance_m
            if total >= best_total:
                continue

            low = min(start_snap.index, end_snap.index)
            high = max(start_snap.index, end_snap.index)
            section = list(line[low:high + 2])
            # Output always runs start -> end, whatever way the street was digitized
            if start_snap.index == end_snap.index:
                segment_start = line[start_snap.index]
                backwards = (
                    haversine_m(segment_start, start_snap.position)
                    > haversine_m(segment_start, end_snap.position)
                )
            else:
                backwards = start_snap.index > end_snap.index
            if backwards:
                section.reverse()

            best_total = total
            best_section = section

        if best_section is not None and len(best_section) >= 2:
            return best_section
        return None

    def stitch_section(
        self,
        lines: List[Polyline],
        start: Coordinates,
        end: Coordinates,
    ) -> Optional[Polyline]:
        """Greedily chain ways from start towards end.

        Each step appends the unused way closest to the current path head,
        oriented so that its nearer end connects to the head.
        """
        end_position = end.to_position()
        head = start.to_position()
        path: Polyline = []
        used = set()

        while not path or haversine_m(path[-1], end_position) > self.stitch_reach_m:
            if len(used) >= self.max_stitch_segments:
                logger.info(f"Too many segments ({len(used)}), giving up")
                break

            nearest_index = None
            nearest_distance = float("inf")
            for index, line in enumerate(lines):
                if index in used or len(line) < 2:
                    continue
                distance = snap_to_line(line, head).distance_m
                if distance < nearest_distance:
                    nearest_distance = distance
                    nearest_index = index

            if nearest_index is None or nearest_distance > self.snap_max_m:
                logger.info(f"Cannot connect segments (nearest {nearest_distance:.1f}m)")
                break

            used.add(nearest_index)
            line = lines[nearest_index]
            if haversine_m(head, line[-1]) < haversine_m(head, line[0]):
                line = list(reversed(line))
            path.extend(line)
            head = path[-1]

        if len(path) >= 2 and haversine_m(path[-1], end_position) <= self.stitch_reach_m:
            logger.info(f"Connected {len(used)} segment(s) into path of {len(path)} point(s)")
            return path
        return None
