"""
Overpass QL query builder.

Each source-backed category maps to a fixed list of tag filters. Every
filter is emitted once for nodes and once for ways, scoped to the area
bounding box, and the union is returned with its body and skeleton
geometry.
"""

from typing import Dict, List, Optional, Tuple

from geoingest.configs.config import AreaConfig
from geoingest.schemas.category import Category

# (key, value); a None value matches any feature carrying the key
TagFilter = Tuple[str, Optional[str]]

ELEMENT_KINDS = ("node", "way")

CATEGORY_FILTERS: Dict[Category, List[TagFilter]] = {
    Category.LODGING: [
        ("tourism", "hotel"),
        ("tourism", "guest_house"),
        ("tourism", "hostel"),
    ],
    Category.DINING: [
        ("amenity", "restaurant"),
        ("amenity", "cafe"),
        ("amenity", "fast_food"),
    ],
    Category.ATTRACTIONS: [
        ("tourism", "attraction"),
        ("tourism", "museum"),
        ("historic", None),
        ("amenity", "place_of_worship"),
        ("leisure", "park"),
    ],
    Category.SPORTS: [
        ("leisure", "pitch"),
        ("leisure", "stadium"),
        ("amenity", "sports_centre"),
        ("club", "sport"),
    ],
}


def format_filter(tag_filter: TagFilter) -> str:
    """Render one tag filter, e.g. ``["tourism"="hotel"]`` or ``["historic"]``."""
    key, value = tag_filter
    if value is None:
        return f'["{key}"]'
    return f'["{key}"="{value}"]'


def build_query(category: Category, area: Optional[AreaConfig] = None) -> str:
    """
    Build the Overpass query for a category.

    Args:
        category: Source-backed category to query
        area: Target area; defaults to the built-in Kolkata box

    Returns:
        Complete Overpass QL query string

    Raises:
        ValueError: If the category is synthetic and has no source query
    """
    if category not in CATEGORY_FILTERS:
        raise ValueError(f"Category '{category.value}' has no source query")

    area = area or AreaConfig()
    bbox = area.bbox_clause

    clauses = [
        f"  {kind}{format_filter(tag_filter)}({bbox});"
        for kind in ELEMENT_KINDS
        for tag_filter in CATEGORY_FILTERS[category]
    ]

    lines = [
        f"[out:json][timeout:{area.query_timeout}];",
        "(",
        *clauses,
        ");",
        "out body;",
        ">;",
        "out skel qt;",
    ]
    return "\n".join(lines) + "\n"
