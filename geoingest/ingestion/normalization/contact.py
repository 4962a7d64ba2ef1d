"""
Identity and contact resolution helpers.

OSM mappers spell the same contact attribute several ways. Email and
website take the first non-empty spelling in priority order; phone numbers
are collected from every spelling and deduplicated.
"""

import re
from typing import List, Mapping, Sequence

EMAIL_KEYS = (
    "email",
    "contact:email",
    "email:main",
    "contact:email:main",
    "operator:email",
    "brand:email",
)

WEBSITE_KEYS = (
    "website",
    "contact:website",
    "url",
    "contact:url",
    "operator:website",
    "brand:website",
)

PHONE_KEYS = (
    "phone",
    "contact:phone",
    "phone:main",
    "contact:phone:main",
    "operator:phone",
    "brand:phone",
)

SHORT_DESCRIPTION_LENGTH = 200

_NON_SLUG_CHARS = re.compile(r"[^A-Za-z0-9_\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def slugify(text: str) -> str:
    """
    URL-safe form of a name.

    Lowercases, drops everything except ASCII word characters, whitespace and
    hyphens, turns whitespace runs into single hyphens and trims hyphens
    from both ends.

    Example:
        >>> slugify("  Grand Hotel & Spa ")
        'grand-hotel-spa'
    """
    slug = text.lower().strip()
    slug = _NON_SLUG_CHARS.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def make_slug(name: str, external_id: int) -> str:
    """Stable slug from a name and the source identifier."""
    return f"{slugify(name)}-{external_id}"


def first_present(tags: Mapping[str, str], keys: Sequence[str]) -> str:
    """Value of the first key with a non-empty value, else an empty string."""
    for key in keys:
        value = tags.get(key)
        if value:
            return value
    return ""


def resolve_email(tags: Mapping[str, str]) -> str:
    return first_present(tags, EMAIL_KEYS)


def resolve_website(tags: Mapping[str, str]) -> str:
    return first_present(tags, WEBSITE_KEYS)


def resolve_phones(tags: Mapping[str, str]) -> List[str]:
    """Every non-empty phone spelling, deduplicated in priority order."""
    phones = [tags[key] for key in PHONE_KEYS if tags.get(key)]
    return list(dict.fromkeys(phones))


def short_description(tags: Mapping[str, str]) -> str:
    return (tags.get("description") or "")[:SHORT_DESCRIPTION_LENGTH]


def extract_tags(tags: Mapping[str, str]) -> List[str]:
    """Search tags: suburb, district, heritage marker, tourism and amenity values."""
    found = [
        tags.get("addr:suburb", ""),
        tags.get("addr:district", ""),
        "Heritage" if tags.get("heritage") == "yes" else "",
        tags.get("tourism", ""),
        tags.get("amenity", ""),
    ]
    return [tag for tag in found if tag]
