"""Configuration for the ingestion pipeline."""

from geoingest.configs.config import AreaConfig, Config
from geoingest.configs.settings import Settings, get_settings

__all__ = ["AreaConfig", "Config", "Settings", "get_settings"]
