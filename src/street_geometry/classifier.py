"""
Endpoint classification and query building.

A street section ("ул. Оборище" from "ул. Граф Игнатиев" to "№111") has two
endpoints. Each endpoint is either a cross street, resolved by intersecting
two street geometries, or a house/building number, resolved by a text
geocoder with the street name as context.
"""

import logging
import re
from typing import Dict, Iterable, Optional

from .models import EndpointClassification, EndpointRouting, IntersectionQuery, StreetSection

logger = logging.getLogger(__name__)

# "14", "25Б"; a Latin suffix is ambiguous with unrelated codes
STANDALONE_NUMBER = re.compile(r"^\d+[а-яё]?$", re.IGNORECASE)

HOUSE_NUMBER_MARKERS = re.compile(
    r"№\s*\d+"             # №111, № 65
    r"|бл\.\s*\d+"         # бл. 38, бл.5
    r"|номер\s+\d+"        # номер 3
    r"|сградата.*№\s*\d+",  # сградата с № 65
    re.IGNORECASE,
)


def has_house_number(endpoint: str) -> bool:
    """Check if a street endpoint refers to a house or building number."""
    trimmed = endpoint.strip()
    if STANDALONE_NUMBER.match(trimmed):
        return True
    return HOUSE_NUMBER_MARKERS.search(trimmed) is not None


def classify_endpoint(endpoint: str) -> EndpointClassification:
    if has_house_number(endpoint):
        return EndpointClassification.HOUSE_NUMBER
    return EndpointClassification.CROSS_STREET


def build_house_number_query(street_name: str, endpoint: str) -> str:
    """Build a geocoder query for a house-number endpoint.

    An endpoint that already names the street ("ул. Оборище №111") is used
    as-is so the street name is not prefixed twice.
    """
    street = street_name.strip()
    trimmed = endpoint.strip()

    if street.lower() in trimmed.lower():
        return trimmed
    return f"{street} {trimmed}"


def route_endpoints(
    streets: Iterable[StreetSection],
    pre_resolved: Optional[Dict[str, object]] = None,
) -> EndpointRouting:
    """Split unresolved street endpoints into intersection and house-number lookups.

    Intersections are deduplicated by their exact "A ∩ B" text and
    house-number lookups by the built query; first-seen order is kept.
    Endpoints already present in pre_resolved are skipped.
    """
    pre_resolved = pre_resolved or {}
    routing = EndpointRouting()
    seen_intersections = set()

    for section in streets:
        for endpoint in section.endpoints():
            if endpoint in pre_resolved:
                logger.debug(f"Skipping already resolved endpoint '{endpoint}'")
                continue

            if classify_endpoint(endpoint) is EndpointClassification.HOUSE_NUMBER:
                query = build_house_number_query(section.street, endpoint)
                routing.house_number_queries.setdefault(query, endpoint)
                continue

            text = IntersectionQuery(street=section.street, cross_street=endpoint).text
            if text not in seen_intersections:
                seen_intersections.add(text)
                routing.intersections.append(text)

    logger.info(
        f"Routed endpoints: {len(routing.intersections)} intersection(s), "
        f"{len(routing.house_number_queries)} house-number query(ies)"
    )
    return routing
