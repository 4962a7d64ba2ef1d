"""
Error taxonomy for the ingestion pipeline.

Source and duplicate-check errors are contained at category level by the
orchestrator; configuration and connection errors reach the CLI exit code.
"""

from typing import Any, Optional


class IngestionError(Exception):
    """Base class for all pipeline errors."""


class SourceError(IngestionError):
    """The external geodata source could not serve a query."""


class SourceUnavailable(SourceError):
    """Network failure, non-2xx response or undecodable body."""


class SourceTimeout(SourceError):
    """The source did not answer within the fetch deadline."""


class DuplicateCheckFailure(IngestionError):
    """
    The existence query against the datastore failed.

    Carries the statistics accumulated by the batches that completed before
    the failure so the category can still report them.
    """

    def __init__(self, message: str, stats: Optional[Any] = None):
        super().__init__(message)
        self.stats = stats


class RecordInsertFailure(IngestionError):
    """A single record was rejected by the datastore."""

    def __init__(self, key: Any, cause: BaseException):
        super().__init__(f"Insert failed for {key!r}: {cause}")
        self.key = key
        self.cause = cause


class SnapshotError(IngestionError):
    """A category snapshot could not be written or read."""


class ConfigurationError(IngestionError):
    """Invalid or unusable configuration detected before the run starts."""


class DatastoreConnectionError(IngestionError):
    """The datastore could not be reached."""
