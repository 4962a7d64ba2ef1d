"""
Unit tests for the synthetic events and promotions catalogue.
"""

from geoingest.ingestion.synthetic import SYNTHETIC_SOURCE, sample_events, sample_promotions
from geoingest.schemas.entity import Event, ModerationStatus, Promotion


class TestSampleEvents:
    def test_single_festival(self):
        events = sample_events()
        assert len(events) == 1
        event = events[0]
        assert isinstance(event, Event)
        assert event.name == "Durga Puja Festival 2024"
        assert event.slug == "durga-puja-festival-2024"
        assert event.ticket_price.is_free is True
        assert event.start_date < event.end_date

    def test_lifecycle_defaults(self):
        event = sample_events()[0]
        assert event.status == ModerationStatus.PENDING
        assert event.featured is False
        assert event.source == SYNTHETIC_SOURCE

    def test_deterministic(self):
        assert sample_events() == sample_events()


class TestSamplePromotions:
    def test_heritage_offer(self):
        promotion = sample_promotions()[0]
        assert isinstance(promotion, Promotion)
        assert promotion.slug == "30-off-on-heritage-hotels"
        assert promotion.code == "HERITAGE30"
        assert promotion.discount_percent == 30
        assert len(promotion.terms) == 3

    def test_serializes_dates_as_iso(self):
        doc = sample_promotions()[0].model_dump(mode="json")
        assert doc["valid_from"] == "2024-01-01"
        assert doc["kind"] == "promotion"
