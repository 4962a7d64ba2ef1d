"""
Unit tests for slug and contact resolution helpers.
"""

import pytest

from geoingest.ingestion.normalization.contact import (
    extract_tags,
    make_slug,
    resolve_email,
    resolve_phones,
    resolve_website,
    short_description,
    slugify,
)


class TestSlugify:
    @pytest.mark.parametrize("text,expected", [
        ("Grand Hotel", "grand-hotel"),
        ("  Grand Hotel & Spa ", "grand-hotel-spa"),
        ("30% Off on Heritage Hotels", "30-off-on-heritage-hotels"),
        ("Hotel -- Hindusthan", "hotel-hindusthan"),
        ("--Edge--", "edge"),
        ("Flury's Tea Room", "flurys-tea-room"),
        ("snake_case name", "snake_case-name"),
        ("Café Coffee Day", "caf-coffee-day"),
        ("কালীঘাট মন্দির", ""),
    ])
    def test_slugify(self, text, expected):
        assert slugify(text) == expected

    def test_make_slug_appends_external_id(self):
        assert make_slug("Grand Hotel", 101) == "grand-hotel-101"

    def test_make_slug_is_stable(self):
        assert make_slug("Indian Museum", 42) == make_slug("Indian Museum", 42)

    def test_make_slug_non_latin_name_keeps_only_id(self):
        assert make_slug("কালীঘাট মন্দির", 9) == "-9"

    def test_make_slug_drops_accented_letters(self):
        assert make_slug("Café Coffee Day", 7) == "caf-coffee-day-7"


class TestContactResolution:
    def test_email_priority(self):
        tags = {"operator:email": "ops@x.in", "contact:email": "hello@x.in"}
        assert resolve_email(tags) == "hello@x.in"

    def test_email_skips_empty_values(self):
        assert resolve_email({"email": "", "brand:email": "brand@x.in"}) == "brand@x.in"

    def test_email_missing(self):
        assert resolve_email({}) == ""

    def test_website_priority(self):
        tags = {"url": "https://u.example", "contact:website": "https://c.example"}
        assert resolve_website(tags) == "https://c.example"

    def test_website_missing(self):
        assert resolve_website({"name": "x"}) == ""

    def test_phones_union_deduplicated_in_order(self):
        tags = {
            "brand:phone": "+91 1",
            "phone": "+91 2",
            "contact:phone": "+91 1",
            "phone:main": "",
        }
        assert resolve_phones(tags) == ["+91 2", "+91 1"]

    def test_no_phones(self):
        assert resolve_phones({}) == []


class TestDescriptionAndTags:
    def test_short_description_truncated(self):
        assert short_description({"description": "x" * 250}) == "x" * 200

    def test_short_description_missing(self):
        assert short_description({}) == ""

    def test_extract_tags(self):
        tags = {
            "addr:suburb": "Park Street",
            "addr:district": "Kolkata",
            "heritage": "yes",
            "tourism": "hotel",
        }
        assert extract_tags(tags) == ["Park Street", "Kolkata", "Heritage", "hotel"]

    def test_extract_tags_skips_missing(self):
        assert extract_tags({"amenity": "cafe", "heritage": "no"}) == ["cafe"]
