"""
Street geometry providers.

The live provider queries Overpass; the fixture provider serves recorded
responses so pipelines can run offline. One of them is chosen at startup.
"""

from .base import GeometryProvider
from .fixture_provider import FixtureGeometryProvider
from .overpass_provider import OverpassGeometryProvider

__all__ = [
    "GeometryProvider",
    "FixtureGeometryProvider",
    "OverpassGeometryProvider",
]
