"""
Street-name text normalization.

Normalized names are only used to build fuzzy-match query fragments; the
original text is what gets displayed and echoed back.
"""

import re

STREET_TYPE_PREFIX = re.compile(r"^(бул\.|ул\.|площад|пл\.)\s*")
SQUARE_PREFIX = re.compile(r"^(площад|пл\.)\s*")
MINOR_STREET_MARKER = re.compile(r"(^|\s)ул\.")
# ASCII and typographic quotes, including Bulgarian low-9 and guillemets
QUOTES = re.compile(r"[\"'`“”„‟‘’‚‛«»‹›]")
WHITESPACE = re.compile(r"\s+")


def normalize_street_name(name: str) -> str:
    """Normalize a street name for OSM name matching.

    Lowercases, drops a leading street type (бул., ул., площад, пл.),
    removes every quote style and collapses whitespace.
    """
    name = name.lower()
    name = STREET_TYPE_PREFIX.sub("", name)
    name = QUOTES.sub("", name)
    return WHITESPACE.sub(" ", name).strip()


def is_square(street_name: str) -> bool:
    """Squares are queried as place=square nodes/ways instead of highways."""
    return SQUARE_PREFIX.match(street_name.lower()) is not None


def includes_minor_streets(street_name: str) -> bool:
    """Names marked "ул." may be residential streets, not only main roads.

    "бул." ends in the same letters, so the marker must start a word.
    """
    return MINOR_STREET_MARKER.search(street_name.lower()) is not None


def normalize_address_for_search(address: str) -> str:
    """Nominatim does not understand the "№" marker."""
    return WHITESPACE.sub(" ", re.sub(r"№\s*", "", address)).strip()
