"""
Live geometry provider backed by the Overpass API.
"""

import logging
from typing import Optional

from ..localities import Locality
from ..models import StreetGeometry
from ..overpass.client import OverpassClient
from ..overpass.parser import parse_street_geometry
from ..overpass.query import build_street_query
from .base import GeometryProvider

logger = logging.getLogger(__name__)


class OverpassGeometryProvider(GeometryProvider):
    """Fetches street geometry from OpenStreetMap within a locality."""

    def __init__(self, client: OverpassClient, locality: Locality):
        self.client = client
        self.locality = locality

    def fetch_street_geometry(self, street_name: str) -> Optional[StreetGeometry]:
        query = build_street_query(street_name, self.locality.bbox)
        logger.debug(f"Overpass query for '{street_name}':\n{query}")

        payload = self.client.query(query)
        return parse_street_geometry(street_name, payload)
