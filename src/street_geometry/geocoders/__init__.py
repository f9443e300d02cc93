"""
Text geocoders for house-number endpoints.
"""

from .base import AddressGeocoder
from .fixture import FixtureAddressGeocoder
from .nominatim import NominatimGeocoder

__all__ = [
    "AddressGeocoder",
    "FixtureAddressGeocoder",
    "NominatimGeocoder",
]
