"""
Conversion of Overpass responses into StreetGeometry.
"""

import logging
from typing import Any, Dict, List, Optional

from ..errors import ServerQueryError
from ..models import Polyline, Position, StreetGeometry
from ..utils.geo import round_coordinate

logger = logging.getLogger(__name__)

# ~10 m half-width of the synthetic box drawn around a square node
SQUARE_NODE_OFFSET = 0.0001


def _position(point: Any) -> Optional[Position]:
    """(lng, lat) of an element or geometry point, or None if malformed."""
    if not isinstance(point, dict):
        return None
    lat = point.get("lat")
    lon = point.get("lon")
    if isinstance(lat, bool) or isinstance(lon, bool):
        return None
    if not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)):
        return None
    return (lon, lat)


def _node_box(element: Dict[str, Any]) -> Optional[Polyline]:
    position = _position(element)
    if position is None:
        return None
    lon, lat = position
    return [
        (round_coordinate(lon - SQUARE_NODE_OFFSET), round_coordinate(lat - SQUARE_NODE_OFFSET)),
        (round_coordinate(lon + SQUARE_NODE_OFFSET), round_coordinate(lat + SQUARE_NODE_OFFSET)),
    ]


def _way_line(element: Dict[str, Any]) -> Optional[Polyline]:
    """Polyline of a way; a way with any malformed point is dropped whole."""
    points = element.get("geometry")
    if not isinstance(points, list) or len(points) < 2:
        return None

    line = []
    for point in points:
        position = _position(point)
        if position is None:
            return None
        line.append((round_coordinate(position[0]), round_coordinate(position[1])))
    return line


def parse_street_geometry(street_name: str, payload: Dict[str, Any]) -> Optional[StreetGeometry]:
    """Build a StreetGeometry from an Overpass JSON payload.

    Returns None when the payload has no elements or none of them carries
    usable geometry. Malformed elements are skipped.

    Raises:
        ServerQueryError: The payload is not an Overpass element list
    """
    if not isinstance(payload, dict):
        raise ServerQueryError(f"Unexpected Overpass payload type {type(payload).__name__}")

    elements = payload.get("elements") or []
    if not isinstance(elements, list):
        raise ServerQueryError(
            f"Overpass 'elements' is {type(elements).__name__}, expected a list"
        )
    if not elements:
        logger.info(f"Could not find street in OSM: '{street_name}'")
        return None

    lines: List[Polyline] = []
    skipped = 0
    for element in elements:
        if not isinstance(element, dict):
            skipped += 1
            continue

        element_type = element.get("type")
        if element_type == "node":
            line = _node_box(element)
        elif element_type == "way":
            line = _way_line(element)
        else:
            continue

        if line is None:
            skipped += 1
        else:
            lines.append(line)

    if skipped:
        logger.warning(f"Skipped {skipped} malformed element(s) for '{street_name}'")

    if not lines:
        logger.info(f"No valid geometries in response for '{street_name}'")
        return None

    geometry = StreetGeometry(name=street_name, lines=lines)
    logger.info(
        f"Found {len(lines)} way segment(s), {geometry.point_count} point(s) for '{street_name}'"
    )
    return geometry
