"""
Synthetic catalogue for the events and promotions categories.

These categories have no geodata source; the pipeline seeds them with a
fixed sample so the catalogue is never empty. Entries are identified by
slug, which keeps re-runs idempotent.
"""

from datetime import date
from typing import List

from geoingest.schemas.entity import (
    Address,
    Event,
    GeoPoint,
    ModerationStatus,
    Organizer,
    Promotion,
    TicketPrice,
    Venue,
)

from .normalization.contact import slugify

SYNTHETIC_SOURCE = "Sample"


def sample_events() -> List[Event]:
    name = "Durga Puja Festival 2024"
    return [
        Event(
            name=name,
            slug=slugify(name),
            description=(
                "The biggest festival of Bengal celebrating Goddess Durga with "
                "elaborate pandals and cultural programs."
            ),
            category="Festivals",
            start_date=date(2024, 10, 10),
            end_date=date(2024, 10, 15),
            start_time="06:00",
            end_time="23:00",
            location=GeoPoint(coordinates=(88.3639, 22.5726)),
            address=Address(
                street="Park Street",
                area="Central Kolkata",
                city="Kolkata",
                state="West Bengal",
            ),
            ticket_price=TicketPrice(min=0, max=0, currency="INR", is_free=True),
            organizer=Organizer(
                name="Kolkata Puja Committee Association",
                contact="+91 33 1234 5678",
                email="info@kolkatapuja.org",
            ),
            venue=Venue(name="Various Pandals across Kolkata", capacity=1000000, type="Outdoor"),
            is_recurring=True,
            recurrence_pattern="Annual",
            status=ModerationStatus.PENDING,
            featured=False,
            promoted=False,
            source=SYNTHETIC_SOURCE,
        )
    ]


def sample_promotions() -> List[Promotion]:
    title = "30% Off on Heritage Hotels"
    return [
        Promotion(
            title=title,
            slug=slugify(title),
            description=(
                "Experience the royal heritage of Kolkata with 30% discount on "
                "all heritage hotels."
            ),
            business_type="Hotel",
            discount_percent=30,
            valid_from=date(2024, 1, 1),
            valid_until=date(2024, 12, 31),
            code="HERITAGE30",
            min_amount=2000,
            max_discount=1500,
            usage_limit=1000,
            used_count=0,
            is_active=True,
            terms=[
                "Valid on heritage category hotels only",
                "Minimum stay of 2 nights required",
                "Cannot be combined with other offers",
            ],
            source=SYNTHETIC_SOURCE,
        )
    ]
