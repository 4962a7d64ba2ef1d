"""
Record Normalizer.

Turns raw OSM records into normalized catalogue entities, one builder per
source-backed category. Every builder shares the place envelope (identity,
location, address, contact, tags and lifecycle metadata) and adds its own
category-specific attributes from the rule tables.

Records without coordinates or tags, and records whose name resolves to
the category placeholder, are discarded here and never reach the loader.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional
import logging

from geoingest.configs.config import AreaConfig
from geoingest.schemas.category import Category
from geoingest.schemas.entity import (
    Accessibility,
    Address,
    Attraction,
    Contact,
    Dining,
    EntryFee,
    GeoPoint,
    Lodging,
    MenuItem,
    MenuSection,
    ModerationStatus,
    NormalizedEntity,
    PriceRange,
    RoomType,
    SportsFacility,
)
from geoingest.schemas.osm import RawRecord

from . import rules
from .contact import (
    extract_tags,
    make_slug,
    resolve_email,
    resolve_phones,
    resolve_website,
    short_description,
)

logger = logging.getLogger(__name__)

Tags = Mapping[str, str]


# ============================================================================
# SHARED ENVELOPE
# ============================================================================


def _envelope(record: RawRecord, name: str, area: AreaConfig) -> Dict[str, Any]:
    """Fields common to every source-backed entity."""
    tags = record.tags or {}
    return {
        "name": name,
        "slug": make_slug(name, record.id),
        "short_description": short_description(tags),
        "location": GeoPoint.from_lat_lon(record.lat, record.lon),
        "address": Address(
            street=tags.get("addr:street", ""),
            area=tags.get("addr:suburb") or tags.get("addr:district") or "",
            city=area.city,
            state=area.state,
            pincode=tags.get("addr:postcode", ""),
            landmark=tags.get("landmark", ""),
        ),
        "contact": Contact(
            phone=resolve_phones(tags),
            email=resolve_email(tags),
            website=resolve_website(tags),
        ),
        "tags": extract_tags(tags),
        "status": ModerationStatus.PENDING,
        "featured": False,
        "promoted": False,
        "external_id": record.id,
        "source": area.provenance,
    }


def _entry_fee(schedule, currency: str) -> EntryFee:
    adult, child, senior = schedule
    return EntryFee(
        adult=adult,
        child=child,
        senior=senior,
        currency=currency,
        is_free=adult == 0 and child == 0 and senior == 0,
    )


# ============================================================================
# CATEGORY BUILDERS
# ============================================================================


def build_lodging(record: RawRecord, name: str, area: AreaConfig) -> Lodging:
    tags = record.tags or {}
    subtype = tags.get("tourism")
    min_price = rules.estimate_price(subtype, "min")
    return Lodging(
        **_envelope(record, name, area),
        description=tags.get("description") or f"A {subtype} in {area.city}",
        category=rules.classify_hotel(tags),
        price_range=PriceRange(
            min=min_price,
            max=rules.estimate_price(subtype, "max"),
            currency=area.currency,
        ),
        amenities=rules.all_matches(rules.HOTEL_AMENITY_RULES, tags),
        room_types=[
            RoomType(name="Standard Room", price=min_price, capacity=2, amenities=["WiFi", "AC"])
        ],
    )


def sample_menu(cuisine: List[str]) -> List[MenuSection]:
    """One illustrative menu section keyed on the primary cuisine."""
    primary = cuisine[0] if cuisine else "Bengali"
    return [
        MenuSection(
            category="Main Course",
            items=[
                MenuItem(
                    name="Fish Curry Rice" if primary == "Bengali" else "Chicken Biryani",
                    price=180,
                    description=f"Traditional {primary.lower()} dish with steamed rice",
                    is_veg=False,
                    spice_level=2,
                ),
                MenuItem(
                    name="Vegetable Thali",
                    price=150,
                    description="Complete vegetarian meal with dal, sabzi, rice, and roti",
                    is_veg=True,
                    spice_level=1,
                ),
            ],
        )
    ]


def build_dining(record: RawRecord, name: str, area: AreaConfig) -> Dining:
    tags = record.tags or {}
    cuisine = rules.cuisines(tags)
    return Dining(
        **_envelope(record, name, area),
        description=tags.get("description") or f"A {tags.get('amenity')} serving delicious food",
        cuisine=cuisine,
        price_category=rules.dining_price_category(tags),
        avg_meal_cost=rules.estimate_price(tags.get("amenity"), "avg"),
        amenities=rules.all_matches(rules.DINING_AMENITY_RULES, tags),
        menu=sample_menu(cuisine),
    )


def build_attraction(record: RawRecord, name: str, area: AreaConfig) -> Attraction:
    tags = record.tags or {}
    category = rules.classify_attraction(tags)
    template = rules.ATTRACTION_DESCRIPTIONS.get(category, rules.ATTRACTION_DESCRIPTION_DEFAULT)
    return Attraction(
        **_envelope(record, name, area),
        description=tags.get("description") or template.format(name=name, city=area.city),
        category=category,
        entry_fee=_entry_fee(
            rules.entry_fee_schedule(rules.ATTRACTION_ENTRY_FEES, category, "Cultural"),
            area.currency,
        ),
        best_time_to_visit=rules.ATTRACTION_BEST_TIMES.get(
            category, rules.ATTRACTION_BEST_TIME_DEFAULT
        ),
        duration=rules.ATTRACTION_DURATIONS.get(category, rules.DEFAULT_DURATION),
        accessibility=Accessibility(wheelchair_accessible=tags.get("wheelchair") == "yes"),
        amenities=rules.all_matches(rules.ATTRACTION_AMENITY_RULES, tags),
    )


def build_sports(record: RawRecord, name: str, area: AreaConfig) -> SportsFacility:
    tags = record.tags or {}
    category = rules.classify_sports(tags)
    sport = rules.sport_type(tags)
    template = rules.SPORTS_DESCRIPTIONS.get(category, rules.SPORTS_DESCRIPTION_DEFAULT)
    described_sport = tags.get("sport") or "various sports"
    return SportsFacility(
        **_envelope(record, name, area),
        description=tags.get("description")
        or template.format(name=name, sport=described_sport, city=area.city),
        category=category,
        sport=sport,
        capacity=rules.estimate_capacity(tags),
        facilities=rules.sports_facilities(tags),
        entry_fee=_entry_fee(
            rules.entry_fee_schedule(rules.SPORTS_ENTRY_FEES, category, "Sports Facilities"),
            area.currency,
        ),
        best_time_to_visit=rules.SPORTS_BEST_TIMES.get(category, rules.SPORTS_BEST_TIME_DEFAULT),
        duration=rules.SPORTS_DURATIONS.get(category, rules.DEFAULT_DURATION),
        amenities=rules.all_matches(rules.SPORTS_AMENITY_RULES, tags),
    )


BUILDERS: Dict[Category, Callable[[RawRecord, str, AreaConfig], NormalizedEntity]] = {
    Category.LODGING: build_lodging,
    Category.DINING: build_dining,
    Category.ATTRACTIONS: build_attraction,
    Category.SPORTS: build_sports,
}


# ============================================================================
# ENTRY POINTS
# ============================================================================


def resolve_name(tags: Tags, category: Category) -> str:
    """Trimmed name tag, or the category placeholder when absent."""
    return (tags.get("name") or "").strip() or category.fallback_name


def normalize_record(
    record: RawRecord,
    category: Category,
    area: Optional[AreaConfig] = None,
) -> Optional[NormalizedEntity]:
    """
    Normalize a single raw record.

    Args:
        record: Raw OSM element
        category: Source-backed category the record was fetched for
        area: Target area; defaults to the built-in Kolkata area

    Returns:
        The normalized entity, or None when the record is discarded

    Raises:
        ValueError: If the category is synthetic
    """
    if category not in BUILDERS:
        raise ValueError(f"Category '{category.value}' is not source-backed")
    if not record.is_locatable:
        return None

    name = resolve_name(record.tags, category)
    if name == category.fallback_name:
        return None

    return BUILDERS[category](record, name, area or AreaConfig())


def normalize_records(
    records: List[RawRecord],
    category: Category,
    area: Optional[AreaConfig] = None,
) -> List[NormalizedEntity]:
    """
    Normalize a batch of raw records.

    Discarded records are dropped and repeated external ids keep only their
    first occurrence, so slugs are unique within the returned list.
    """
    area = area or AreaConfig()
    entities: List[NormalizedEntity] = []
    seen_ids = set()
    discarded = 0
    repeated = 0

    for record in records:
        entity = normalize_record(record, category, area)
        if entity is None:
            discarded += 1
            continue
        if entity.external_id in seen_ids:
            repeated += 1
            continue
        seen_ids.add(entity.external_id)
        entities.append(entity)

    logger.info(
        f"Normalized {len(entities)}/{len(records)} {category.value} records "
        f"({discarded} discarded, {repeated} repeated ids)"
    )
    return entities
