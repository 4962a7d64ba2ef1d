"""Domain schemas: raw source records, categories and normalized entities."""

from geoingest.schemas.category import Category
from geoingest.schemas.entity import (
    ENTITY_ADAPTER,
    Address,
    Attraction,
    Contact,
    Dining,
    EntryFee,
    Event,
    GeoPoint,
    Lodging,
    ModerationStatus,
    NormalizedEntity,
    PriceRange,
    Promotion,
    SportsFacility,
)
from geoingest.schemas.osm import RawRecord

__all__ = [
    "ENTITY_ADAPTER",
    "Address",
    "Attraction",
    "Category",
    "Contact",
    "Dining",
    "EntryFee",
    "Event",
    "GeoPoint",
    "Lodging",
    "ModerationStatus",
    "NormalizedEntity",
    "PriceRange",
    "Promotion",
    "RawRecord",
    "SportsFacility",
]
