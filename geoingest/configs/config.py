# geoingest/configs/config.py
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import yaml

from geoingest.ingestion.errors import ConfigurationError


@dataclass(frozen=True)
class AreaConfig:
    """
    Target area of an ingestion run.

    The bounding box scopes every Overpass query; city, state and currency
    fill the address and commerce blocks of normalized entities.
    """

    name: str = "Kolkata"
    bbox: Tuple[float, float, float, float] = (22.4000, 88.2500, 22.7000, 88.5000)
    city: str = "Kolkata"
    state: str = "West Bengal"
    currency: str = "INR"
    query_timeout: int = 25
    provenance: str = "OpenStreetMap"

    @property
    def bbox_clause(self) -> str:
        """Bounding box in Overpass `(south, west, north, east)` order."""
        return ", ".join(f"{value:.4f}" for value in self.bbox)


class Config:
    """
    File-based configuration for the ingestion pipeline.
    """

    # This points to geoingest/configs/
    CONFIG_DIR = Path(__file__).parent.resolve()
    INGESTION_CONFIG_PATH = CONFIG_DIR / "ingestion.yaml"

    @classmethod
    def load_ingestion_config(cls, path: Optional[Path] = None) -> dict:
        """Loads the YAML configuration for the ingestion area."""
        config_path = Path(path) if path else cls.INGESTION_CONFIG_PATH
        if not config_path.exists():
            raise ConfigurationError(f"Missing config at {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a mapping in {config_path}")
        return data

    @classmethod
    def load_area(cls, path: Optional[Path] = None) -> AreaConfig:
        """Build an AreaConfig from the ingestion YAML."""
        data = cls.load_ingestion_config(path)
        area = data.get("area") or {}
        query = data.get("query") or {}

        bbox = area.get("bbox", AreaConfig.bbox)
        if not isinstance(bbox, (list, tuple)) or len(bbox) != 4:
            raise ConfigurationError(
                f"area.bbox must have 4 values (south, west, north, east), got {bbox}"
            )
        try:
            south, west, north, east = (float(v) for v in bbox)
            query_timeout = int(query.get("timeout", AreaConfig.query_timeout))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Non-numeric area.bbox or query.timeout: {e}") from e
        if south >= north or west >= east:
            raise ConfigurationError(f"area.bbox is empty or inverted: {bbox}")

        return AreaConfig(
            name=area.get("name", AreaConfig.name),
            bbox=(south, west, north, east),
            city=area.get("city", AreaConfig.city),
            state=area.get("state", AreaConfig.state),
            currency=area.get("currency", AreaConfig.currency),
            query_timeout=query_timeout,
            provenance=data.get("provenance", AreaConfig.provenance),
        )
