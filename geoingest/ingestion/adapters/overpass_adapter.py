"""
Overpass Source Adapter.

Issues one Overpass QL query per call and returns the parsed elements as
RawRecord models. Retry policy is left to the caller.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

import requests
from pydantic import ValidationError

from geoingest.configs.settings import DEFAULT_OVERPASS_URL
from geoingest.ingestion.errors import SourceTimeout, SourceUnavailable
from geoingest.schemas.osm import OverpassResponse, RawRecord

from .base_adapter import AdapterConfig, BaseSourceAdapter, FetchResult


@dataclass
class OverpassAdapterConfig(AdapterConfig):
    """
    Configuration for the Overpass interpreter endpoint.
    """

    endpoint: str = DEFAULT_OVERPASS_URL
    headers: Dict[str, str] = field(default_factory=dict)


class OverpassAdapter(BaseSourceAdapter):
    """
    Adapter for the Overpass API.

    One POST per query with a plain-text body. Timeouts raise
    SourceTimeout; network errors, non-2xx responses and bodies that are
    not an Overpass JSON document raise SourceUnavailable.
    """

    def __init__(self, config: OverpassAdapterConfig):
        self._session: Optional[requests.Session] = None
        super().__init__(config)

    @property
    def overpass_config(self) -> OverpassAdapterConfig:
        """Get typed config."""
        return self.config

    def _validate_config(self) -> None:
        if not self.overpass_config.endpoint:
            raise ValueError("Overpass adapter requires an endpoint")
        if self.overpass_config.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")

    def _get_session(self) -> requests.Session:
        """Get or create HTTP session."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({
                "User-Agent": "geoingest/0.1 (+https://www.openstreetmap.org/copyright)",
                "Accept": "application/json",
                "Content-Type": "text/plain",
                **self.overpass_config.headers,
            })
        return self._session

    def fetch(self, query: str) -> FetchResult:
        """
        Run a query against the Overpass endpoint.

        Args:
            query: Overpass QL query string

        Returns:
            FetchResult with parsed RawRecord list

        Raises:
            SourceTimeout: The request exceeded the configured timeout
            SourceUnavailable: Any other transport or decoding failure
        """
        fetch_started = datetime.utcnow()
        url = self.overpass_config.endpoint
        self.logger.info(f"Fetching data from Overpass API ({url})")

        try:
            response = self._get_session().post(
                url,
                data=query.encode("utf-8"),
                timeout=self.overpass_config.request_timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.Timeout as e:
            raise SourceTimeout(
                f"Overpass request timed out after {self.overpass_config.request_timeout}s"
            ) from e
        except requests.RequestException as e:
            raise SourceUnavailable(f"Overpass request failed: {e}") from e
        except ValueError as e:
            raise SourceUnavailable(f"Overpass returned a non-JSON body: {e}") from e

        try:
            parsed = OverpassResponse.model_validate(payload)
        except ValidationError as e:
            raise SourceUnavailable(f"Unexpected Overpass payload: {e}") from e

        records = self._parse_elements(parsed.elements)
        return FetchResult(
            records=records,
            metadata={"endpoint": url, "elements": len(parsed.elements)},
            fetch_started_at=fetch_started,
            fetch_ended_at=datetime.utcnow(),
        )

    def _parse_elements(self, elements: list) -> List[RawRecord]:
        records = []
        for idx, element in enumerate(elements):
            try:
                records.append(RawRecord.model_validate(element))
            except ValidationError as e:
                self.logger.warning(f"Skipping malformed element {idx}: {e.error_count()} errors")
        return records

    def close(self) -> None:
        """Close HTTP session."""
        if self._session:
            self._session.close()
            self._session = None
