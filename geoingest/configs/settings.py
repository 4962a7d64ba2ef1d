"""Environment-driven settings for a pipeline run."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import make_url

PROJECT_ROOT = Path(__file__).resolve().parents[2]
PACKAGE_CONFIG_DIR = Path(__file__).resolve().parent

DEFAULT_DATABASE_URL = "postgresql://localhost:5432/destination_kolkata"
DEFAULT_OVERPASS_URL = "https://overpass-api.de/api/interpreter"


class Settings(BaseSettings):
    """
    Run settings read from the environment and ``<project root>/.env``.

    Field names double as the environment variable names.
    """

    # --- datastore ---
    DATABASE_URL: str = DEFAULT_DATABASE_URL

    # --- geodata source ---
    OVERPASS_URL: str = DEFAULT_OVERPASS_URL
    SOURCE_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)
    FETCH_RETRIES: int = Field(default=0, ge=0)

    # --- loading ---
    BATCH_SIZE: int = Field(default=50, gt=0)
    CATEGORY_DELAY_SECONDS: float = Field(default=2.0, ge=0)

    # --- logging ---
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False

    # --- files ---
    OUTPUT_DIR: Path = PROJECT_ROOT / "data" / "ingested"
    INGESTION_CONFIG_PATH: Path = PACKAGE_CONFIG_DIR / "ingestion.yaml"

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def get_psycopg2_params(self) -> dict:
        """Split DATABASE_URL into keyword arguments for ``psycopg2.connect``."""
        url = make_url(self.DATABASE_URL)
        return dict(
            host=url.host,
            port=url.port,
            dbname=url.database,
            user=url.username,
            password=url.password,
        )


@lru_cache
def get_settings() -> Settings:
    """Process-wide Settings, built on first use."""
    return Settings()
