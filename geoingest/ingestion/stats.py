"""
Run statistics.

LoadStatistics counts what happened to the records of one category,
CategoryOutcome is the explicit per-category result (statistics plus an
optional error) and RunReport accumulates outcomes over a run. All three
are immutable; a run threads its report through ``with_outcome`` and
closes it with ``finish``.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from geoingest.schemas.category import Category

from .errors import IngestionError


class RunMode(str, Enum):
    """Operating modes selectable from the command line."""

    INGEST_AND_LOAD = "ingest-and-load"
    LOAD_EXISTING = "load-existing"
    FRESH_INGEST = "fresh-ingest"


@dataclass(frozen=True)
class LoadStatistics:
    """Per-category record counts. Every successful insert is pending."""

    total: int = 0
    success: int = 0
    failed: int = 0
    skipped: int = 0
    pending: int = 0

    def __add__(self, other: "LoadStatistics") -> "LoadStatistics":
        if not isinstance(other, LoadStatistics):
            return NotImplemented
        return LoadStatistics(
            total=self.total + other.total,
            success=self.success + other.success,
            failed=self.failed + other.failed,
            skipped=self.skipped + other.skipped,
            pending=self.pending + other.pending,
        )

    @property
    def success_rate(self) -> float:
        """Success percentage; 0 when nothing was processed."""
        if self.total == 0:
            return 0.0
        return (self.success / self.total) * 100


@dataclass(frozen=True)
class CategoryOutcome:
    """Result of processing one category."""

    category: Category
    stats: LoadStatistics = field(default_factory=LoadStatistics)
    error: Optional[IngestionError] = None
    deleted: int = 0
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def duration_seconds(self) -> float:
        if self.started_at and self.ended_at:
            return (self.ended_at - self.started_at).total_seconds()
        return 0.0


@dataclass(frozen=True)
class RunReport:
    """Immutable accumulator of category outcomes for one run."""

    mode: RunMode
    started_at: datetime
    outcomes: Tuple[CategoryOutcome, ...] = ()
    finished_at: Optional[datetime] = None
    run_id: str = ""

    def with_outcome(self, outcome: CategoryOutcome) -> "RunReport":
        """Return a new report with ``outcome`` appended."""
        if self.finished_at is not None:
            raise ValueError("Cannot add outcomes to a finished report")
        return replace(self, outcomes=self.outcomes + (outcome,))

    def finish(self, finished_at: Optional[datetime] = None) -> "RunReport":
        return replace(self, finished_at=finished_at or datetime.utcnow())

    @property
    def is_finished(self) -> bool:
        return self.finished_at is not None

    @property
    def duration_seconds(self) -> float:
        if self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()

    @property
    def timestamp(self) -> str:
        """ISO timestamp of the report (finish time, else start time)."""
        return (self.finished_at or self.started_at).isoformat()

    @property
    def totals(self) -> LoadStatistics:
        """Grand totals over every category."""
        combined = LoadStatistics()
        for outcome in self.outcomes:
            combined = combined + outcome.stats
        return combined

    @property
    def failed_categories(self) -> Tuple[CategoryOutcome, ...]:
        return tuple(o for o in self.outcomes if not o.ok)

    @property
    def total_deleted(self) -> int:
        return sum(o.deleted for o in self.outcomes)

    def outcome_for(self, category: Category) -> Optional[CategoryOutcome]:
        for outcome in self.outcomes:
            if outcome.category == category:
                return outcome
        return None
