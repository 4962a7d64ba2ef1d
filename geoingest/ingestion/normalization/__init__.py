"""
Normalization of raw OSM records into catalogue entities.
"""

from .contact import make_slug, slugify
from .normalizer import normalize_record, normalize_records

__all__ = ["make_slug", "normalize_record", "normalize_records", "slugify"]
