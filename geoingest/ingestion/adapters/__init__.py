"""
Source adapters for the ingestion layer.

Adapters encapsulate the transport to an external geodata source and hand
back parsed RawRecord models.
"""

from .base_adapter import AdapterConfig, BaseSourceAdapter, FetchResult
from .overpass_adapter import OverpassAdapter, OverpassAdapterConfig

__all__ = [
    "AdapterConfig",
    "BaseSourceAdapter",
    "FetchResult",
    "OverpassAdapter",
    "OverpassAdapterConfig",
]
