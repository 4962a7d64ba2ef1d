"""
Base Source Adapter.

Contract shared by geodata sources: run one query string, return the
parsed records, raise a SourceError subclass when the source cannot
answer.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from geoingest.schemas.osm import RawRecord


@dataclass
class FetchResult:
    """
    Records returned by one successful query.

    Failures are raised as SourceError subclasses rather than encoded here.
    """

    records: List[RawRecord] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    fetch_started_at: Optional[datetime] = None
    fetch_ended_at: Optional[datetime] = None

    @property
    def total_fetched(self) -> int:
        return len(self.records)

    @property
    def duration_seconds(self) -> float:
        if self.fetch_started_at and self.fetch_ended_at:
            return (self.fetch_ended_at - self.fetch_started_at).total_seconds()
        return 0.0


@dataclass
class AdapterConfig:
    source_id: str
    request_timeout: float = 30.0


class BaseSourceAdapter(ABC):
    """
    Abstract geodata source.

    Subclasses implement fetch() and _validate_config(); close() releases
    network resources and runs on context-manager exit.
    """

    def __init__(self, config: AdapterConfig):
        self.config = config
        self.logger = logging.getLogger(f"geoingest.adapter.{config.source_id}")
        self._validate_config()

    @property
    def source_id(self) -> str:
        return self.config.source_id

    @abstractmethod
    def fetch(self, query: str) -> FetchResult:
        """
        Run one query against the source.

        Raises:
            SourceTimeout: No answer within the request timeout
            SourceUnavailable: Network failure, bad status or undecodable body
        """

    @abstractmethod
    def _validate_config(self) -> None:
        """Raise ValueError for an unusable configuration."""

    def close(self) -> None:
        pass

    def __enter__(self) -> "BaseSourceAdapter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
