"""
Overpass API access: query building, failover client and response parsing.
"""

from .client import OverpassClient
from .parser import parse_street_geometry
from .query import build_street_query

__all__ = [
    "OverpassClient",
    "parse_street_geometry",
    "build_street_query",
]
