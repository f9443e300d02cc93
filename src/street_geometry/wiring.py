"""
Construction of a StreetResolver from configuration.

Configuration is built first; the provider strategy (live Overpass or
recorded fixtures) is selected here once and injected.
"""

import logging
from typing import Optional

import requests

from .config_manager import ResolverConfig
from .geocoders import AddressGeocoder, FixtureAddressGeocoder, NominatimGeocoder
from .geometry import IntersectionSolver, SectionExtractor
from .localities import Locality, LocalityRegistry
from .overpass import OverpassClient
from .providers import FixtureGeometryProvider, GeometryProvider, OverpassGeometryProvider
from .resolver import StreetResolver
from .utils.throttle import Throttle

logger = logging.getLogger(__name__)


def resolve_locality(config: ResolverConfig) -> Locality:
    return LocalityRegistry(config.localities).get(config.locality)


def build_provider(
    config: ResolverConfig,
    locality: Locality,
    session: Optional[requests.Session] = None,
) -> GeometryProvider:
    if config.provider == "fixture":
        logger.info(f"Using geometry fixtures from {config.geometry_fixtures}")
        return FixtureGeometryProvider(config.geometry_fixtures)

    client = OverpassClient(
        instances=config.overpass_instances,
        timeout_s=config.overpass_timeout_s,
        user_agent=config.user_agent,
        session=session,
    )
    return OverpassGeometryProvider(client, locality)


def build_address_geocoder(
    config: ResolverConfig,
    locality: Locality,
    session: Optional[requests.Session] = None,
) -> AddressGeocoder:
    if config.provider == "fixture":
        return FixtureAddressGeocoder(config.address_fixtures)

    return NominatimGeocoder(
        locality,
        url=config.nominatim_url,
        timeout_s=config.nominatim_timeout_s,
        user_agent=config.user_agent,
        session=session,
    )


def build_resolver(
    config: ResolverConfig,
    session: Optional[requests.Session] = None,
    show_progress: bool = False,
) -> StreetResolver:
    """Wire a resolver for the configured locality and provider."""
    locality = resolve_locality(config)
    provider = build_provider(config, locality, session)

    return StreetResolver(
        provider=provider,
        address_geocoder=build_address_geocoder(config, locality, session),
        solver=IntersectionSolver(
            locality,
            buffer_m=config.buffer_m,
            nearest_max_m=config.nearest_max_m,
        ),
        extractor=SectionExtractor(
            provider,
            snap_max_m=config.snap_max_m,
            stitch_reach_m=config.stitch_reach_m,
            max_stitch_segments=config.max_stitch_segments,
        ),
        throttle=Throttle(config.request_delay_s),
        show_progress=show_progress,
    )
