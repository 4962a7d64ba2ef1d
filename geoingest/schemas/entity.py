# geoingest/schemas/entity.py
"""
Normalized entity schema for the destination catalogue.

Every category produces its own entity shape, but all of them share the
ingestion lifecycle block (moderation status, featured/promoted flags and
provenance). The four source-backed shapes additionally share the place
envelope: identity, geolocation, address and contact blocks.

The shapes form a tagged union discriminated by ``kind`` so that snapshots
read back from disk are rebuilt into the right class.
"""

from datetime import date
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


class ModerationStatus(str, Enum):
    """Lifecycle flag gating public visibility."""

    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"


# ============================================================================
# SHARED BLOCKS
# ============================================================================


class GeoPoint(BaseModel):
    """GeoJSON point; coordinates are (longitude, latitude)."""

    type: Literal["Point"] = "Point"
    coordinates: Tuple[float, float]

    @classmethod
    def from_lat_lon(cls, lat: float, lon: float) -> "GeoPoint":
        return cls(coordinates=(lon, lat))

    @property
    def longitude(self) -> float:
        return self.coordinates[0]

    @property
    def latitude(self) -> float:
        return self.coordinates[1]


class Address(BaseModel):
    street: str = ""
    area: str = ""
    city: str
    state: str
    pincode: str = ""
    landmark: str = ""


class Contact(BaseModel):
    phone: List[str] = Field(default_factory=list)
    email: str = ""
    website: str = ""
    social_media: Dict[str, str] = Field(default_factory=dict)

    @field_validator("phone")
    @classmethod
    def dedupe_phones(cls, v: List[str]) -> List[str]:
        """Drop empty and repeated numbers, keeping first-seen order."""
        return list(dict.fromkeys(p for p in v if p))


class PriceRange(BaseModel):
    min: int = Field(ge=0)
    max: int = Field(ge=0)
    currency: str


class EntryFee(BaseModel):
    adult: int = Field(ge=0)
    child: int = Field(ge=0)
    senior: int = Field(ge=0)
    currency: str
    is_free: bool = False


class DayHours(BaseModel):
    open: str = "09:00"
    close: str = "21:00"
    closed: bool = False


def default_week() -> Dict[str, DayHours]:
    """Seven identical 09:00-21:00 days."""
    return {day: DayHours() for day in WEEKDAYS}


class RoomType(BaseModel):
    name: str
    price: int
    capacity: int = 2
    amenities: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    available: bool = True


class MenuItem(BaseModel):
    name: str
    price: int
    description: str = ""
    is_veg: bool = False
    is_vegan: bool = False
    spice_level: int = Field(default=1, ge=0, le=5)


class MenuSection(BaseModel):
    category: str
    items: List[MenuItem] = Field(default_factory=list)


class Accessibility(BaseModel):
    wheelchair_accessible: bool = False
    public_transport: str = "Metro, Bus available nearby"


# ============================================================================
# LIFECYCLE & ENVELOPE
# ============================================================================


class LifecycleMixin(BaseModel):
    """Ingestion metadata carried by every entity."""

    model_config = ConfigDict(extra="forbid")

    status: ModerationStatus = ModerationStatus.PENDING
    featured: bool = False
    promoted: bool = False
    external_id: Optional[int] = None
    source: str = "OpenStreetMap"

    @property
    def display_name(self) -> str:
        return getattr(self, "name", "") or getattr(self, "title", "")


class PlaceEnvelope(LifecycleMixin):
    """Fields shared by every source-backed place."""

    name: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    description: str = ""
    short_description: str = Field(default="", max_length=200)
    location: GeoPoint
    address: Address
    contact: Contact = Field(default_factory=Contact)
    amenities: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v


# ============================================================================
# SOURCE-BACKED SHAPES
# ============================================================================


class Lodging(PlaceEnvelope):
    kind: Literal["lodging"] = "lodging"
    category: str
    price_range: PriceRange
    room_types: List[RoomType] = Field(default_factory=list)
    check_in_time: str = "14:00"
    check_out_time: str = "12:00"


class Dining(PlaceEnvelope):
    kind: Literal["dining"] = "dining"
    cuisine: List[str] = Field(default_factory=list)
    price_category: str
    avg_meal_cost: int = Field(ge=0)
    opening_hours: Dict[str, DayHours] = Field(default_factory=default_week)
    menu: List[MenuSection] = Field(default_factory=list)


class Attraction(PlaceEnvelope):
    kind: Literal["attraction"] = "attraction"
    category: str
    entry_fee: EntryFee
    timings: Dict[str, DayHours] = Field(default_factory=default_week)
    best_time_to_visit: str = ""
    duration: str = ""
    accessibility: Accessibility = Field(default_factory=Accessibility)


class SportsFacility(PlaceEnvelope):
    kind: Literal["sports_facility"] = "sports_facility"
    category: str
    sport: str
    capacity: int = Field(ge=0)
    facilities: List[str] = Field(default_factory=list)
    entry_fee: EntryFee
    timings: Dict[str, DayHours] = Field(default_factory=default_week)
    best_time_to_visit: str = ""
    duration: str = ""


# ============================================================================
# SYNTHETIC SHAPES
# ============================================================================


class TicketPrice(BaseModel):
    min: int = 0
    max: int = 0
    currency: str = "INR"
    is_free: bool = False


class Organizer(BaseModel):
    name: str
    contact: str = ""
    email: str = ""


class Venue(BaseModel):
    name: str
    capacity: int = 0
    type: str = "Outdoor"


class Event(LifecycleMixin):
    kind: Literal["event"] = "event"
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    description: str = ""
    category: str
    start_date: date
    end_date: date
    start_time: str = ""
    end_time: str = ""
    location: GeoPoint
    address: Address
    ticket_price: TicketPrice = Field(default_factory=TicketPrice)
    organizer: Optional[Organizer] = None
    venue: Optional[Venue] = None
    is_recurring: bool = False
    recurrence_pattern: str = ""


class Promotion(LifecycleMixin):
    kind: Literal["promotion"] = "promotion"
    title: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    description: str = ""
    business_type: str
    discount_percent: int = Field(ge=0, le=100)
    valid_from: date
    valid_until: date
    code: str
    min_amount: int = 0
    max_discount: int = 0
    usage_limit: int = 0
    used_count: int = 0
    is_active: bool = True
    terms: List[str] = Field(default_factory=list)


NormalizedEntity = Annotated[
    Union[Lodging, Dining, Attraction, SportsFacility, Event, Promotion],
    Field(discriminator="kind"),
]

ENTITY_ADAPTER: TypeAdapter = TypeAdapter(NormalizedEntity)
