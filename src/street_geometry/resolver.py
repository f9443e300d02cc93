"""
Batch orchestration of street geometry resolution.

Batches are processed sequentially with a fixed delay between items. A
failure on one item (unreachable service, malformed query, geometry error)
is logged and that item is omitted; the rest of the batch carries on.
"""

import logging
import re
from typing import Dict, Iterable, List, Optional, Sequence

from tqdm import tqdm

from .classifier import route_endpoints
from .errors import StreetGeometryError
from .geocoders.base import AddressGeocoder
from .geometry.intersection import IntersectionSolver
from .geometry.section import SectionExtractor
from .models import (
    Coordinates,
    IntersectionQuery,
    Polyline,
    ResolvedAddress,
    StreetGeometry,
    StreetSection,
)
from .providers.base import GeometryProvider
from .utils.geo import haversine_m
from .utils.throttle import Throttle

logger = logging.getLogger(__name__)

DUPLICATE_DISTANCE_M = 50.0

DIGIT = re.compile(r"\d")


class StreetResolver:
    """Resolves intersections, endpoints and street sections for a locality."""

    def __init__(
        self,
        provider: GeometryProvider,
        address_geocoder: AddressGeocoder,
        solver: IntersectionSolver,
        extractor: SectionExtractor,
        throttle: Optional[Throttle] = None,
        show_progress: bool = False,
    ):
        """Initialize resolver.

        Args:
            provider: Street geometry source
            address_geocoder: Text geocoder for house-number addresses
            solver: Intersection solver bound to the locality
            extractor: Section extractor using the same provider
            throttle: Delay between batch items (default 0.5s)
            show_progress: Show a tqdm progress bar for batches
        """
        self.provider = provider
        self.address_geocoder = address_geocoder
        self.solver = solver
        self.extractor = extractor
        self.throttle = throttle or Throttle()
        self.show_progress = show_progress

    def fetch_street_geometry(self, street_name: str) -> Optional[StreetGeometry]:
        return self.provider.fetch_street_geometry(street_name)

    def _batch(self, items: Sequence, desc: str):
        return tqdm(
            self.throttle.iterate(items),
            total=len(items),
            desc=desc,
            disable=not self.show_progress,
        )

    def geocode_intersections(self, intersections: Sequence[str]) -> List[ResolvedAddress]:
        """Resolve "A ∩ B" queries to intersection points.

        Unresolvable items are omitted from the result.
        """
        results = []

        # Malformed items make no request, so they are dropped before throttling
        queries = []
        for text in intersections:
            query = IntersectionQuery.parse(text)
            if query is None:
                logger.error(f"Invalid intersection format: '{text}'")
                continue
            queries.append((text, query))

        for _, (text, query) in self._batch(queries, "Intersections"):
            try:
                geom_a = self.provider.fetch_street_geometry(query.street)
                geom_b = self.provider.fetch_street_geometry(query.cross_street)
            except StreetGeometryError as e:
                logger.error(f"Error processing intersection '{text}': {e}")
                continue

            if geom_a is None or geom_b is None:
                continue

            point = self.solver.intersect(geom_a, geom_b)
            if point is None:
                logger.error(f"Could not find intersection '{text}'")
                continue

            results.append(ResolvedAddress(original_text=text, formatted_address=text, coordinates=point))

        logger.info(f"Resolved {len(results)}/{len(intersections)} intersection(s)")
        return results

    def geocode_addresses(self, addresses: Sequence[str]) -> List[ResolvedAddress]:
        """Resolve free-text addresses.

        Addresses containing a number go to the address geocoder; bare street
        names resolve to the center of the street geometry.
        """
        results = []

        for _, address in self._batch(addresses, "Addresses"):
            try:
                if DIGIT.search(address):
                    logger.info(f"Geocoding numbered address '{address}'")
                    coords = self.address_geocoder.geocode(address)
                else:
                    geometry = self.provider.fetch_street_geometry(address)
                    coords = geometry.center() if geometry is not None else None
            except StreetGeometryError as e:
                logger.error(f"Error geocoding address '{address}': {e}")
                continue

            if coords is None:
                logger.warning(f"Failed to geocode address '{address}'")
                continue

            results.append(ResolvedAddress(original_text=address, formatted_address=address, coordinates=coords))

        return results

    def geocode_intersections_for_streets(
        self,
        streets: Iterable[StreetSection],
        pre_resolved: Optional[Dict[str, Coordinates]] = None,
    ) -> Dict[str, Coordinates]:
        """Resolve the endpoints of street sections.

        Cross-street endpoints are stored under the cross-street name,
        house-number endpoints under the original endpoint text. Endpoints
        found in pre_resolved are not looked up again.
        """
        streets = list(streets)
        resolved: Dict[str, Coordinates] = {}
        routing = route_endpoints(streets, pre_resolved)

        for address in self.geocode_intersections(routing.intersections):
            query = IntersectionQuery.parse(address.formatted_address)
            resolved[query.cross_street] = address.coordinates

        if routing.house_number_queries:
            logger.info(f"Geocoding {len(routing.house_number_queries)} house-number endpoint(s)")
            for address in self.geocode_addresses(list(routing.house_number_queries)):
                endpoint = routing.house_number_queries.get(address.original_text)
                if endpoint is not None:
                    resolved[endpoint] = address.coordinates

        return resolved

    def street_section(self, street_name: str, start: Coordinates, end: Coordinates) -> Optional[Polyline]:
        return self.extractor.extract(street_name, start, end)

    def resolve_street_sections(
        self,
        streets: Sequence[StreetSection],
        endpoint_coords: Dict[str, Coordinates],
    ) -> Dict[int, Polyline]:
        """Section geometry for every street whose endpoints are both resolved.

        Returns a mapping from the street's index in the input to its path.
        """
        sections: Dict[int, Polyline] = {}

        for index, section in self._batch(streets, "Sections"):
            start = endpoint_coords.get(section.from_)
            end = endpoint_coords.get(section.to)
            if start is None or end is None:
                logger.warning(
                    f"Skipping section of '{section.street}': unresolved endpoint(s) "
                    f"'{section.from_}' / '{section.to}'"
                )
                continue

            try:
                path = self.extractor.extract(section.street, start, end)
            except StreetGeometryError as e:
                logger.error(f"Error extracting section of '{section.street}': {e}")
                continue

            if path is not None:
                sections[index] = path

        return sections


def find_missing_endpoints(
    streets: Iterable[StreetSection],
    resolved: Dict[str, Coordinates],
) -> List[str]:
    """Endpoints of the given sections that have no coordinates yet."""
    missing = []
    for section in streets:
        for endpoint in section.endpoints():
            if endpoint not in resolved:
                missing.append(endpoint)
    return missing


def deduplicate_addresses(
    addresses: Iterable[ResolvedAddress],
    threshold_m: float = DUPLICATE_DISTANCE_M,
) -> List[ResolvedAddress]:
    """Drop addresses repeating an earlier text or lying within threshold_m of one."""
    kept: Dict[str, ResolvedAddress] = {}

    for address in addresses:
        key = address.original_text.lower().strip()
        if key in kept:
            continue

        position = address.coordinates.to_position()
        if any(
            haversine_m(position, existing.coordinates.to_position()) < threshold_m
            for existing in kept.values()
        ):
            continue

        kept[key] = address

    return list(kept.values())
