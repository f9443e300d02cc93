"""
Fixture-backed geometry provider.

Fixtures are a JSON object mapping street names to recorded Overpass
responses ({"elements": [...]}). Lookup tries the exact name first, then the
normalized name, so "ул. „Оборище“" and "ул. Оборище" share a fixture.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..models import StreetGeometry
from ..overpass.parser import parse_street_geometry
from ..utils.text import normalize_street_name
from .base import GeometryProvider

logger = logging.getLogger(__name__)


class FixtureGeometryProvider(GeometryProvider):
    """Serves street geometry from recorded Overpass responses."""

    def __init__(self, fixtures: Union[Path, str, Dict[str, Any]]):
        """Initialize provider.

        Args:
            fixtures: Path to a JSON fixture file, or the already loaded mapping
        """
        if isinstance(fixtures, dict):
            responses = fixtures
        else:
            path = Path(fixtures)
            if not path.exists():
                raise FileNotFoundError(f"Geometry fixture file not found: {path}")
            with open(path, "r", encoding="utf-8") as f:
                responses = json.load(f)
            logger.info(f"Loaded {len(responses)} geometry fixture(s) from {path}")

        self._responses = dict(responses)
        self._normalized = {
            normalize_street_name(name): response for name, response in self._responses.items()
        }

    def fetch_street_geometry(self, street_name: str) -> Optional[StreetGeometry]:
        payload = self._responses.get(street_name)
        if payload is None:
            payload = self._normalized.get(normalize_street_name(street_name))
        if payload is None:
            logger.info(f"No fixture for street '{street_name}'")
            return None
        return parse_street_geometry(street_name, payload)
