"""
Unit tests for the decision tables in normalization.rules.
"""

import pytest

from geoingest.ingestion.normalization import rules


class TestFirstMatch:
    def test_first_matching_rule_wins(self):
        table = ((lambda t: "a" in t, "A"), (lambda t: True, "ANY"))
        assert rules.first_match(table, {"a": "1"}, "default") == "A"
        assert rules.first_match(table, {"b": "1"}, "default") == "ANY"

    def test_default_when_nothing_matches(self):
        assert rules.first_match((), {}, "default") == "default"

    def test_all_matches_keeps_table_order(self):
        table = ((lambda t: True, "x"), (lambda t: False, "y"), (lambda t: True, "z"))
        assert rules.all_matches(table, {}) == ["x", "z"]


class TestParseLeadingInt:
    @pytest.mark.parametrize("value,expected", [
        ("4", 4), ("4S", 4), (" 12 ", 12), ("-1", -1),
        ("", None), (None, None), ("five", None),
    ])
    def test_values(self, value, expected):
        assert rules.parse_leading_int(value) == expected


class TestHotelCategory:
    @pytest.mark.parametrize("tags,expected", [
        ({"stars": "5"}, "Luxury"),
        ({"stars": "4"}, "Luxury"),
        ({"stars": "3"}, "Business"),
        ({"stars": "2"}, "Budget"),
        ({"stars": "1", "name": "Palace Inn"}, "Budget"),
        ({"tourism": "hostel"}, "Budget"),
        ({"tourism": "guest_house"}, "Budget"),
        ({"tourism": "hotel", "name": "The Heritage Villa"}, "Heritage"),
        ({"tourism": "hotel", "name": "Marble PALACE"}, "Heritage"),
        ({"tourism": "hotel", "name": "Sunset Resort"}, "Resort"),
        ({"tourism": "hotel", "name": "Boutique 9"}, "Boutique"),
        ({"tourism": "hotel", "name": "Grand Hotel"}, "Business"),
    ])
    def test_classification(self, tags, expected):
        assert rules.classify_hotel(tags) == expected

    def test_stars_checked_before_subtype(self):
        assert rules.classify_hotel({"tourism": "hostel", "stars": "4"}) == "Luxury"

    def test_non_numeric_stars_are_budget(self):
        assert rules.classify_hotel({"stars": "unknown", "name": "Sunset Resort"}) == "Budget"
        assert rules.classify_hotel({"stars": "unknown", "tourism": "hotel"}) == "Budget"


class TestAttractionCategory:
    @pytest.mark.parametrize("tags,expected", [
        ({"historic": "monument"}, "Historical"),
        ({"historic": "yes", "amenity": "place_of_worship"}, "Historical"),
        ({"amenity": "place_of_worship"}, "Religious"),
        ({"tourism": "museum"}, "Museums"),
        ({"tourism": "gallery"}, "Museums"),
        ({"leisure": "park"}, "Parks"),
        ({"building": "government"}, "Architecture"),
        ({"tourism": "attraction"}, "Cultural"),
    ])
    def test_classification(self, tags, expected):
        assert rules.classify_attraction(tags) == expected


class TestSportsCategory:
    @pytest.mark.parametrize("tags,expected", [
        ({"leisure": "stadium"}, "Stadium"),
        ({"leisure": "pitch"}, "Sports Grounds"),
        ({"amenity": "sports_centre"}, "Coaching Centers"),
        ({"club": "sport"}, "Sports Clubs"),
        ({"leisure": "track"}, "Sports Facilities"),
    ])
    def test_classification(self, tags, expected):
        assert rules.classify_sports(tags) == expected

    @pytest.mark.parametrize("tags,expected", [
        ({"sport": "tennis", "leisure": "pitch"}, "tennis"),
        ({"leisure": "pitch"}, "football"),
        ({"leisure": "stadium"}, "cricket"),
        ({"amenity": "sports_centre"}, "multi-sport"),
        ({"club": "sport"}, "multi-sport"),
        ({}, "general"),
    ])
    def test_sport_type(self, tags, expected):
        assert rules.sport_type(tags) == expected


class TestDining:
    @pytest.mark.parametrize("tags,expected", [
        ({"amenity": "fast_food"}, "Budget"),
        ({"amenity": "cafe"}, "Budget"),
        ({"amenity": "restaurant", "payment:credit_cards": "yes"}, "Mid-range"),
        ({"amenity": "restaurant", "cuisine": "fine_dining"}, "Fine Dining"),
        ({"amenity": "restaurant", "cuisine": "fine_dining", "payment:credit_cards": "yes"}, "Mid-range"),
        ({"amenity": "restaurant"}, "Mid-range"),
    ])
    def test_price_category(self, tags, expected):
        assert rules.dining_price_category(tags) == expected

    @pytest.mark.parametrize("tags,expected", [
        ({}, ["Bengali"]),
        ({"cuisine": "indian;chinese"}, ["Bengali", "Chinese"]),
        ({"cuisine": "Bengali"}, ["Bengali"]),
        ({"cuisine": "north_indian"}, ["Bengali"]),
        ({"cuisine": "continental;fast_food"}, ["Continental", "Fast Food"]),
        ({"cuisine": "pizza; thai"}, ["Pizza", "Thai"]),
        ({"cuisine": "pizza;;"}, ["Pizza"]),
    ])
    def test_cuisines(self, tags, expected):
        assert rules.cuisines(tags) == expected


class TestEstimates:
    @pytest.mark.parametrize("subtype,bound,expected", [
        ("hotel", "min", 1500), ("hotel", "max", 8000), ("hotel", "avg", 3500),
        ("guest_house", "min", 800), ("hostel", "max", 1500),
        ("restaurant", "avg", 500), ("cafe", "avg", 250), ("fast_food", "min", 80),
    ])
    def test_price_table(self, subtype, bound, expected):
        assert rules.estimate_price(subtype, bound) == expected

    @pytest.mark.parametrize("subtype", ["motel", None, ""])
    def test_unknown_subtype_uses_restaurant_bucket(self, subtype):
        assert rules.estimate_price(subtype, "avg") == 500

    @pytest.mark.parametrize("tags,expected", [
        ({"capacity": "66000", "leisure": "stadium"}, 66000),
        ({"capacity": "lots", "leisure": "stadium"}, 50000),
        ({"leisure": "pitch"}, 1000),
        ({"amenity": "sports_centre"}, 200),
        ({"club": "sport"}, 500),
        ({}, 100),
    ])
    def test_capacity(self, tags, expected):
        assert rules.estimate_capacity(tags) == expected

    def test_entry_fee_fallback_bucket(self):
        assert rules.entry_fee_schedule(rules.ATTRACTION_ENTRY_FEES, "Zoo", "Cultural") == (50, 25, 25)
        assert rules.entry_fee_schedule(rules.SPORTS_ENTRY_FEES, "Stadium", "Sports Facilities") == (100, 50, 50)


class TestFeatureLists:
    def test_hotel_amenities(self):
        tags = {"internet_access": "yes", "parking": "yes", "swimming_pool": "yes", "bar": "no"}
        assert rules.all_matches(rules.HOTEL_AMENITY_RULES, tags) == ["WiFi", "Parking", "Pool"]

    def test_wifi_from_either_tag(self):
        assert rules.all_matches(rules.DINING_AMENITY_RULES, {"wifi": "yes"}) == ["WiFi"]

    def test_dining_amenities(self):
        tags = {"outdoor_seating": "yes", "delivery": "yes", "takeaway": "yes"}
        assert rules.all_matches(rules.DINING_AMENITY_RULES, tags) == [
            "Outdoor Seating", "Home Delivery", "Takeaway",
        ]

    def test_attraction_amenities(self):
        tags = {"wheelchair": "yes", "shop": "yes"}
        assert rules.all_matches(rules.ATTRACTION_AMENITY_RULES, tags) == ["Wheelchair Access", "Gift Shop"]

    def test_sports_facilities(self):
        tags = {"sport": "cricket", "surface": "grass", "lit": "yes", "covered": "yes"}
        assert rules.sports_facilities(tags) == [
            "cricket", "grass surface", "Floodlights", "Covered facility",
        ]

    def test_sports_amenities(self):
        tags = {"toilets": "yes", "lit": "yes", "drinking_water": "yes"}
        assert rules.all_matches(rules.SPORTS_AMENITY_RULES, tags) == [
            "Toilets", "Drinking Water", "Floodlights",
        ]
