"""Shared fixtures: recorded street geometries and an offline resolver."""

from pathlib import Path

import pytest

from street_geometry.geocoders import FixtureAddressGeocoder
from street_geometry.geometry import IntersectionSolver, SectionExtractor
from street_geometry.localities import LocalityRegistry
from street_geometry.providers import FixtureGeometryProvider
from street_geometry.resolver import StreetResolver
from street_geometry.utils.throttle import Throttle

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    return FIXTURES_DIR


@pytest.fixture
def sofia():
    return LocalityRegistry().get("bg.sofia")


@pytest.fixture
def geometry_provider():
    return FixtureGeometryProvider(FIXTURES_DIR / "streets.json")


@pytest.fixture
def address_geocoder():
    return FixtureAddressGeocoder(FIXTURES_DIR / "addresses.json")


@pytest.fixture
def resolver(sofia, geometry_provider, address_geocoder):
    return StreetResolver(
        provider=geometry_provider,
        address_geocoder=address_geocoder,
        solver=IntersectionSolver(sofia),
        extractor=SectionExtractor(geometry_provider),
        throttle=Throttle(0),
    )
