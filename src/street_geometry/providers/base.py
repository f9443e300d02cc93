"""
Base class for street geometry providers.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import StreetGeometry


class GeometryProvider(ABC):
    """Source of street geometries."""

    @abstractmethod
    def fetch_street_geometry(self, street_name: str) -> Optional[StreetGeometry]:
        """Fetch the full geometry of a named street.

        Args:
            street_name: Street name as written in the source text

        Returns:
            StreetGeometry, or None when the street is not found

        Raises:
            ClientQueryError: The lookup query was malformed
            ServerQueryError: The response was not an Overpass element list
            ServiceUnavailableError: The backing service could not be reached
        """
        pass
