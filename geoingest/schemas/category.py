"""
Category registry.

A category is one of the fixed domain buckets the pipeline processes
independently. Each one knows its datastore collection, the placeholder
name used when a record carries no name, and the field the loader uses to
detect records that were already ingested.
"""

from enum import Enum
from typing import List, Optional


class Category(str, Enum):
    """Domain buckets, in run order."""

    LODGING = "lodging"
    DINING = "dining"
    ATTRACTIONS = "attractions"
    SPORTS = "sports"
    EVENTS = "events"
    PROMOTIONS = "promotions"

    @property
    def collection(self) -> str:
        """Datastore collection (and snapshot file stem) for this category."""
        return _COLLECTIONS[self]

    @property
    def label(self) -> str:
        """Human readable name for reports."""
        return _LABELS[self]

    @property
    def is_synthetic(self) -> bool:
        """True for categories generated locally instead of fetched."""
        return self in (Category.EVENTS, Category.PROMOTIONS)

    @property
    def fallback_name(self) -> Optional[str]:
        """Placeholder name that marks a record without a real name tag."""
        return _FALLBACK_NAMES.get(self)

    @property
    def dedup_field(self) -> str:
        """Document field the loader checks for already ingested records."""
        return "slug" if self.is_synthetic else "external_id"

    @property
    def snapshot_filename(self) -> str:
        return f"{self.collection}.json"

    @classmethod
    def source_backed(cls) -> List["Category"]:
        """Categories fetched from the geodata source, in run order."""
        return [c for c in cls if not c.is_synthetic]


_COLLECTIONS = {
    Category.LODGING: "hotels",
    Category.DINING: "restaurants",
    Category.ATTRACTIONS: "attractions",
    Category.SPORTS: "sports",
    Category.EVENTS: "events",
    Category.PROMOTIONS: "promotions",
}

_LABELS = {
    Category.LODGING: "Hotels",
    Category.DINING: "Restaurants",
    Category.ATTRACTIONS: "Attractions",
    Category.SPORTS: "Sports Facilities",
    Category.EVENTS: "Events",
    Category.PROMOTIONS: "Promotions",
}

_FALLBACK_NAMES = {
    Category.LODGING: "Unnamed Hotel",
    Category.DINING: "Unnamed Restaurant",
    Category.ATTRACTIONS: "Unnamed Attraction",
    Category.SPORTS: "Unnamed Sports Facility",
}
