"""Raw records as returned by the Overpass interpreter."""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class RawRecord(BaseModel):
    """
    One OSM element from an Overpass `elements` array.

    Ways and relations only carry coordinates when the query asks for
    `center` output; with `out body` they arrive without `lat`/`lon` and are
    dropped before normalization.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int
    type: str = "node"
    lat: Optional[float] = None
    lon: Optional[float] = None
    tags: Optional[Dict[str, str]] = None

    @property
    def is_locatable(self) -> bool:
        """True when the record has coordinates and at least one tag."""
        return self.lat is not None and self.lon is not None and bool(self.tags)

    def tag(self, key: str, default: str = "") -> str:
        return (self.tags or {}).get(key) or default


class OverpassResponse(BaseModel):
    """Top-level Overpass JSON payload."""

    model_config = ConfigDict(extra="ignore")

    elements: list = Field(default_factory=list)
