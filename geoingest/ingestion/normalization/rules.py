"""
Decision tables for category heuristics.

Every classification is an ordered tuple of ``(predicate, result)`` pairs
evaluated top to bottom; the first predicate that matches wins, otherwise
the table's default applies. Feature lists (amenities, facilities) use the
same predicates but collect every match.

Numeric estimates come from fixed lookup tables with an explicit fallback
bucket for unrecognized subtypes.
"""

import re
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")
Tags = Mapping[str, str]
Predicate = Callable[[Tags], bool]
Rule = Tuple[Predicate, T]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


# ============================================================================
# EVALUATION
# ============================================================================


def first_match(rules: Sequence[Rule], tags: Tags, default: T) -> T:
    """Result of the first rule whose predicate holds, else ``default``."""
    for predicate, result in rules:
        if predicate(tags):
            return result
    return default


def all_matches(rules: Sequence[Rule], tags: Tags) -> List[T]:
    """Results of every rule whose predicate holds, in table order."""
    return [result for predicate, result in rules if predicate(tags)]


def parse_leading_int(value: Optional[str]) -> Optional[int]:
    """Integer prefix of a tag value ("4", "4S", " 12 "), or None."""
    if not value:
        return None
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


# ============================================================================
# PREDICATES
# ============================================================================


def has(key: str) -> Predicate:
    return lambda tags: bool(tags.get(key))


def tag_is(key: str, value: str) -> Predicate:
    return lambda tags: tags.get(key) == value


def is_yes(key: str) -> Predicate:
    return tag_is(key, "yes")


def any_of(*predicates: Predicate) -> Predicate:
    return lambda tags: any(p(tags) for p in predicates)


def tag_contains(key: str, *needles: str) -> Predicate:
    def predicate(tags: Tags) -> bool:
        value = (tags.get(key) or "").lower()
        return any(needle in value for needle in needles)

    return predicate


def stars(check: Callable[[int], bool]) -> Predicate:
    def predicate(tags: Tags) -> bool:
        parsed = parse_leading_int(tags.get("stars"))
        return parsed is not None and check(parsed)

    return predicate


# ============================================================================
# CLASSIFICATION TABLES
# ============================================================================

HOTEL_CATEGORY_RULES: Tuple[Rule, ...] = (
    (stars(lambda n: n >= 4), "Luxury"),
    (stars(lambda n: n == 3), "Business"),
    (has("stars"), "Budget"),
    (tag_is("tourism", "hostel"), "Budget"),
    (tag_is("tourism", "guest_house"), "Budget"),
    (tag_contains("name", "heritage", "palace"), "Heritage"),
    (tag_contains("name", "resort"), "Resort"),
    (tag_contains("name", "boutique"), "Boutique"),
)
HOTEL_CATEGORY_DEFAULT = "Business"

ATTRACTION_CATEGORY_RULES: Tuple[Rule, ...] = (
    (has("historic"), "Historical"),
    (tag_is("amenity", "place_of_worship"), "Religious"),
    (tag_is("tourism", "museum"), "Museums"),
    (tag_is("tourism", "gallery"), "Museums"),
    (tag_is("leisure", "park"), "Parks"),
    (tag_is("building", "government"), "Architecture"),
)
ATTRACTION_CATEGORY_DEFAULT = "Cultural"

SPORTS_CATEGORY_RULES: Tuple[Rule, ...] = (
    (tag_is("leisure", "stadium"), "Stadium"),
    (tag_is("leisure", "pitch"), "Sports Grounds"),
    (tag_is("amenity", "sports_centre"), "Coaching Centers"),
    (tag_is("club", "sport"), "Sports Clubs"),
)
SPORTS_CATEGORY_DEFAULT = "Sports Facilities"

SPORT_TYPE_RULES: Tuple[Rule, ...] = (
    (tag_is("leisure", "pitch"), "football"),
    (tag_is("leisure", "stadium"), "cricket"),
    (tag_is("amenity", "sports_centre"), "multi-sport"),
    (tag_is("club", "sport"), "multi-sport"),
)
SPORT_TYPE_DEFAULT = "general"

DINING_PRICE_RULES: Tuple[Rule, ...] = (
    (tag_is("amenity", "fast_food"), "Budget"),
    (tag_is("amenity", "cafe"), "Budget"),
    (is_yes("payment:credit_cards"), "Mid-range"),
    (tag_contains("cuisine", "fine_dining"), "Fine Dining"),
)
DINING_PRICE_DEFAULT = "Mid-range"

# Evaluated on a single lowercased cuisine token
CUISINE_RULES: Tuple[Rule, ...] = (
    (lambda c: "indian" in c or "bengali" in c, "Bengali"),
    (lambda c: "chinese" in c, "Chinese"),
    (lambda c: "continental" in c, "Continental"),
    (lambda c: "fast_food" in c, "Fast Food"),
)


def classify_hotel(tags: Tags) -> str:
    return first_match(HOTEL_CATEGORY_RULES, tags, HOTEL_CATEGORY_DEFAULT)


def classify_attraction(tags: Tags) -> str:
    return first_match(ATTRACTION_CATEGORY_RULES, tags, ATTRACTION_CATEGORY_DEFAULT)


def classify_sports(tags: Tags) -> str:
    return first_match(SPORTS_CATEGORY_RULES, tags, SPORTS_CATEGORY_DEFAULT)


def sport_type(tags: Tags) -> str:
    if tags.get("sport"):
        return tags["sport"]
    return first_match(SPORT_TYPE_RULES, tags, SPORT_TYPE_DEFAULT)


def dining_price_category(tags: Tags) -> str:
    return first_match(DINING_PRICE_RULES, tags, DINING_PRICE_DEFAULT)


def cuisines(tags: Tags) -> List[str]:
    """Display cuisines from a ``;`` separated cuisine tag (default indian)."""
    raw = tags.get("cuisine") or "indian"
    result = []
    for token in raw.split(";"):
        token = token.strip().lower()
        if not token:
            continue
        result.append(first_match(CUISINE_RULES, token, token[:1].upper() + token[1:]))
    return result


# ============================================================================
# FEATURE TABLES
# ============================================================================

_WIFI = any_of(is_yes("internet_access"), is_yes("wifi"))

HOTEL_AMENITY_RULES: Tuple[Rule, ...] = (
    (_WIFI, "WiFi"),
    (is_yes("amenity:air_conditioning"), "AC"),
    (is_yes("parking"), "Parking"),
    (is_yes("swimming_pool"), "Pool"),
    (is_yes("fitness_centre"), "Gym"),
    (is_yes("spa"), "Spa"),
    (is_yes("restaurant"), "Restaurant"),
    (is_yes("bar"), "Bar"),
    (is_yes("room_service"), "Room Service"),
)

DINING_AMENITY_RULES: Tuple[Rule, ...] = (
    (is_yes("outdoor_seating"), "Outdoor Seating"),
    (_WIFI, "WiFi"),
    (is_yes("parking"), "Parking"),
    (is_yes("live_music"), "Live Music"),
    (is_yes("amenity:air_conditioning"), "AC"),
    (is_yes("delivery"), "Home Delivery"),
    (is_yes("takeaway"), "Takeaway"),
)

ATTRACTION_AMENITY_RULES: Tuple[Rule, ...] = (
    (is_yes("guided_tours"), "Guided Tours"),
    (is_yes("audio_guide"), "Audio Guide"),
    (is_yes("parking"), "Parking"),
    (is_yes("wheelchair"), "Wheelchair Access"),
    (is_yes("photography"), "Photography"),
    (is_yes("shop"), "Gift Shop"),
)

SPORTS_AMENITY_RULES: Tuple[Rule, ...] = (
    (_WIFI, "WiFi"),
    (is_yes("parking"), "Parking"),
    (is_yes("changing_room"), "Changing Rooms"),
    (is_yes("shower"), "Showers"),
    (is_yes("toilets"), "Toilets"),
    (is_yes("drinking_water"), "Drinking Water"),
    (is_yes("first_aid"), "First Aid"),
    (is_yes("lit"), "Floodlights"),
)

_SPORTS_FACILITY_FLAGS: Tuple[Rule, ...] = (
    (is_yes("lit"), "Floodlights"),
    (is_yes("covered"), "Covered facility"),
    (is_yes("changing_room"), "Changing rooms"),
    (is_yes("shower"), "Showers"),
    (is_yes("parking"), "Parking"),
)


def sports_facilities(tags: Tags) -> List[str]:
    """Sport, surface and flagged facilities of a sports venue."""
    facilities = []
    if tags.get("sport"):
        facilities.append(tags["sport"])
    if tags.get("surface"):
        facilities.append(f"{tags['surface']} surface")
    facilities.extend(all_matches(_SPORTS_FACILITY_FLAGS, tags))
    return facilities


# ============================================================================
# LOOKUP TABLES
# ============================================================================

PRICE_TABLE: Dict[str, Dict[str, int]] = {
    "hotel": {"min": 1500, "max": 8000, "avg": 3500},
    "guest_house": {"min": 800, "max": 3000, "avg": 1800},
    "hostel": {"min": 500, "max": 1500, "avg": 900},
    "restaurant": {"min": 200, "max": 1000, "avg": 500},
    "cafe": {"min": 100, "max": 400, "avg": 250},
    "fast_food": {"min": 80, "max": 300, "avg": 150},
}
PRICE_FALLBACK = "restaurant"


def estimate_price(subtype: Optional[str], bound: str) -> int:
    """Price estimate for a subtype; unknown subtypes use the restaurant bucket."""
    bucket = PRICE_TABLE.get(subtype or "", PRICE_TABLE[PRICE_FALLBACK])
    return bucket[bound]


ATTRACTION_ENTRY_FEES: Dict[str, Tuple[int, int, int]] = {
    "Historical": (10, 5, 5),
    "Religious": (0, 0, 0),
    "Museums": (20, 10, 10),
    "Parks": (5, 2, 2),
    "Architecture": (15, 8, 8),
    "Cultural": (50, 25, 25),
}

SPORTS_ENTRY_FEES: Dict[str, Tuple[int, int, int]] = {
    "Stadium": (100, 50, 50),
    "Sports Grounds": (20, 10, 10),
    "Coaching Centers": (500, 300, 300),
    "Sports Clubs": (200, 100, 100),
    "Sports Facilities": (50, 25, 25),
}

ATTRACTION_DURATIONS: Dict[str, str] = {
    "Historical": "1-2 hours",
    "Religious": "30-60 minutes",
    "Museums": "2-3 hours",
    "Parks": "1-3 hours",
    "Architecture": "30-60 minutes",
    "Cultural": "2-4 hours",
}

SPORTS_DURATIONS: Dict[str, str] = {
    "Stadium": "2-4 hours",
    "Sports Grounds": "1-2 hours",
    "Coaching Centers": "1-2 hours per session",
    "Sports Clubs": "1-3 hours",
    "Sports Facilities": "1-2 hours",
}
DEFAULT_DURATION = "1-2 hours"

ATTRACTION_BEST_TIMES: Dict[str, str] = {
    "Parks": "Early morning or evening",
    "Religious": "Morning or evening prayers",
}
ATTRACTION_BEST_TIME_DEFAULT = "Any time during opening hours"

SPORTS_BEST_TIMES: Dict[str, str] = {
    "Stadium": "Evening matches, daytime practice",
    "Sports Grounds": "Morning and evening",
    "Coaching Centers": "Morning and evening sessions",
    "Sports Clubs": "All day with peak hours in evening",
}
SPORTS_BEST_TIME_DEFAULT = "Morning and evening"

CAPACITY_RULES: Tuple[Rule, ...] = (
    (tag_is("leisure", "stadium"), 50000),
    (tag_is("leisure", "pitch"), 1000),
    (tag_is("amenity", "sports_centre"), 200),
    (tag_is("club", "sport"), 500),
)
CAPACITY_DEFAULT = 100


def estimate_capacity(tags: Tags) -> int:
    """Declared capacity when numeric, else the venue-type estimate."""
    declared = parse_leading_int(tags.get("capacity"))
    if declared is not None and declared >= 0:
        return declared
    return first_match(CAPACITY_RULES, tags, CAPACITY_DEFAULT)


def entry_fee_schedule(
    table: Dict[str, Tuple[int, int, int]], category: str, fallback: str
) -> Tuple[int, int, int]:
    return table.get(category, table[fallback])


# ============================================================================
# DESCRIPTION TEMPLATES
# ============================================================================

ATTRACTION_DESCRIPTIONS: Dict[str, str] = {
    "Historical": "{name} is a significant historical site in {city}, showcasing the rich heritage of the city.",
    "Religious": "{name} is an important place of worship, offering spiritual solace to visitors.",
    "Museums": "{name} houses a fascinating collection of artifacts and exhibits.",
    "Parks": "{name} is a beautiful green space perfect for relaxation and recreation.",
    "Architecture": "{name} represents the architectural heritage of {city}.",
    "Cultural": "{name} is a vibrant cultural center celebrating the arts and traditions of Bengal.",
}
ATTRACTION_DESCRIPTION_DEFAULT = "Visit {name} for a memorable experience in {city}."

SPORTS_DESCRIPTIONS: Dict[str, str] = {
    "Stadium": "{name} is a premier sports stadium in {city}, hosting major sporting events and matches.",
    "Sports Grounds": "{name} is a well-maintained sports ground perfect for {sport} and recreational activities.",
    "Coaching Centers": "{name} is a professional coaching center offering training in {sport} and fitness programs.",
    "Sports Clubs": "{name} is a sports club providing facilities and training for {sport} enthusiasts.",
    "Sports Facilities": "{name} offers excellent sports facilities for {sport} in {city}.",
}
SPORTS_DESCRIPTION_DEFAULT = "Visit {name} for {sport} activities in {city}."
