"""
Fixture-backed address geocoder for offline runs.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from ..models import Coordinates
from .base import AddressGeocoder

logger = logging.getLogger(__name__)


class FixtureAddressGeocoder(AddressGeocoder):
    """Looks addresses up in a {query: {"lat": .., "lng": ..}} mapping."""

    def __init__(self, fixtures: Union[Path, str, Dict[str, Dict[str, float]], None] = None):
        if fixtures is None:
            entries = {}
        elif isinstance(fixtures, dict):
            entries = fixtures
        else:
            path = Path(fixtures)
            if not path.exists():
                raise FileNotFoundError(f"Address fixture file not found: {path}")
            with open(path, "r", encoding="utf-8") as f:
                entries = json.load(f)

        self._coordinates = {
            query: Coordinates(lat=float(entry["lat"]), lng=float(entry["lng"]))
            for query, entry in entries.items()
        }

    def geocode(self, query: str) -> Optional[Coordinates]:
        coords = self._coordinates.get(query.strip())
        if coords is None:
            logger.info(f"No fixture for address '{query}'")
        return coords
