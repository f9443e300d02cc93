"""
House-number geocoding through the Nominatim search API.

Searches are bounded to the locality viewbox and results outside the
locality bounds are discarded; the first remaining result wins.
"""

import logging
from typing import Optional

import requests

from ..localities import Locality
from ..models import Coordinates
from ..utils.text import normalize_address_for_search
from .base import AddressGeocoder

logger = logging.getLogger(__name__)

DEFAULT_URL = "https://nominatim.openstreetmap.org/search"
DEFAULT_TIMEOUT_S = 10
DEFAULT_USER_AGENT = "street-geometry/0.1"
RESULT_LIMIT = 5


class NominatimGeocoder(AddressGeocoder):
    """Geocodes street addresses with house numbers."""

    def __init__(
        self,
        locality: Locality,
        url: str = DEFAULT_URL,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
    ):
        self.locality = locality
        self.url = url
        self.timeout_s = timeout_s
        self.user_agent = user_agent
        self.session = session or requests.Session()

    def geocode(self, query: str) -> Optional[Coordinates]:
        params = {
            "q": normalize_address_for_search(query),
            "format": "json",
            "limit": RESULT_LIMIT,
            "addressdetails": 1,
            "bounded": 1,
            "viewbox": self.locality.viewbox,
        }

        try:
            response = self.session.get(
                self.url,
                params=params,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout_s,
            )
            response.raise_for_status()
            results = response.json()
        except requests.exceptions.RequestException as e:
            logger.warning(f"Nominatim request failed for '{query}': {e}")
            return None
        except ValueError as e:
            logger.warning(f"Nominatim returned invalid JSON for '{query}': {e}")
            return None

        if not results:
            logger.warning(f"Nominatim found no results for '{query}'")
            return None

        for result in results:
            try:
                coords = Coordinates(lat=float(result["lat"]), lng=float(result["lon"]))
            except (KeyError, TypeError, ValueError):
                logger.debug(f"Skipping malformed Nominatim result: {result}")
                continue

            if self.locality.contains(coords.lat, coords.lng):
                logger.info(f"Nominatim geocoded '{query}' to {coords.lat:.6f}, {coords.lng:.6f}")
                return coords

            logger.warning(
                f"Nominatim result outside {self.locality.id} for '{query}': "
                f"{coords.lat:.6f}, {coords.lng:.6f}"
            )

        logger.warning(f"All Nominatim results outside {self.locality.id} for '{query}'")
        return None
