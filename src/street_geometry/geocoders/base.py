"""
Base class for free-text address geocoders.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import Coordinates


class AddressGeocoder(ABC):
    """Resolves a free-text address (street plus house number) to a point."""

    @abstractmethod
    def geocode(self, query: str) -> Optional[Coordinates]:
        """Return coordinates inside the configured locality, or None."""
        pass
