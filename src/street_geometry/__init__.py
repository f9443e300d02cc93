"""
Street geometry resolution for municipal interruption notices.

Resolves street names, cross-street pairs and house-number endpoints to
coordinates and extracts street sections from OpenStreetMap data.
"""

from .classifier import build_house_number_query, has_house_number, route_endpoints
from .config_manager import ConfigManager, ResolverConfig
from .errors import (
    ClientQueryError,
    ConfigurationError,
    GeometryComputationError,
    ServiceUnavailableError,
    StreetGeometryError,
)
from .models import Coordinates, ResolvedAddress, StreetGeometry, StreetSection
from .resolver import StreetResolver, deduplicate_addresses, find_missing_endpoints
from .utils.text import normalize_street_name
from .wiring import build_resolver

__version__ = "0.1.0"

__all__ = [
    "build_house_number_query",
    "has_house_number",
    "route_endpoints",
    "normalize_street_name",
    "ConfigManager",
    "ResolverConfig",
    "ClientQueryError",
    "ConfigurationError",
    "GeometryComputationError",
    "ServiceUnavailableError",
    "StreetGeometryError",
    "Coordinates",
    "ResolvedAddress",
    "StreetGeometry",
    "StreetSection",
    "StreetResolver",
    "deduplicate_addresses",
    "find_missing_endpoints",
    "build_resolver",
]
