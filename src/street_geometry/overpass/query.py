"""
Overpass QL for street and square lookup.

Only the subset of the query language needed here: a bbox-bounded union of
tag-filtered node/way searches, output with inline geometry.
"""

from ..utils.text import includes_minor_streets, is_square, normalize_street_name

QUERY_TIMEOUT_S = 25

MAIN_HIGHWAYS = "primary|secondary|tertiary|trunk"
MINOR_HIGHWAYS = "residential|unclassified|living_street"

NAME_TAGS = ("name", "name:bg")


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def build_street_query(street_name: str, bbox: str) -> str:
    """Build the query for a street, boulevard or square.

    Names are matched case-insensitively as a regex "contains" on both the
    primary and the Bulgarian name tag.
    """
    name = _escape(normalize_street_name(street_name))

    if is_square(street_name):
        filters = [
            f'{element}["place"="square"]["{tag}"~"{name}",i]({bbox});'
            for tag in NAME_TAGS
            for element in ("node", "way")
        ]
    else:
        highways = MAIN_HIGHWAYS
        if includes_minor_streets(street_name):
            highways = f"{MAIN_HIGHWAYS}|{MINOR_HIGHWAYS}"
        filters = [
            f'way["highway"~"^({highways})$"]["{tag}"~"{name}",i]({bbox});'
            for tag in NAME_TAGS
        ]

    body = "\n  ".join(filters)
    return f"[out:json][timeout:{QUERY_TIMEOUT_S}];\n(\n  {body}\n);\nout geom;\n"
