"""
Run Orchestrator.

Drives one ingestion run over every category, strictly in sequence:

    IDLE -> CONNECTING -> (FETCHING -> NORMALIZING -> SNAPSHOTTING -> LOADING)*
         -> REPORTING -> DONE

Source-backed categories are fetched, normalized, snapshotted and loaded;
the synthetic categories are snapshotted and loaded from the sample
catalogue. A failing category becomes a CategoryOutcome carrying its error
and the run moves on to the next one. Only datastore connection, delete
and configuration failures abort the run.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
import logging
import time
import uuid

from geoingest.configs.config import AreaConfig
from geoingest.configs.settings import Settings, get_settings
from geoingest.logging_config import with_context
from geoingest.schemas.category import Category

from .errors import DuplicateCheckFailure, IngestionError, SnapshotError, SourceError
from .loader import BatchLoader
from .normalization import normalize_records
from .query_builder import build_query
from .snapshot import SnapshotStore
from .stats import CategoryOutcome, LoadStatistics, RunMode, RunReport
from .synthetic import sample_events, sample_promotions

logger = logging.getLogger(__name__)

HISTORY_COLLECTION = "data_ingestion_history"
MAX_HISTORY_ERRORS = 20
RETRY_BACKOFF_SECONDS = 1.0

CategoryError = (SourceError, DuplicateCheckFailure, SnapshotError)

SYNTHETIC_CATALOGUE: Dict[Category, Callable[[], List[Any]]] = {
    Category.EVENTS: sample_events,
    Category.PROMOTIONS: sample_promotions,
}


class RunState(str, Enum):
    """Lifecycle of a single run."""

    IDLE = "idle"
    CONNECTING = "connecting"
    FETCHING = "fetching"
    NORMALIZING = "normalizing"
    SNAPSHOTTING = "snapshotting"
    LOADING = "loading"
    REPORTING = "reporting"
    DONE = "done"


class RunOrchestrator:
    """
    Coordinates one run of the ingestion pipeline.

    Responsibilities:
    - Open the shared datastore connection and close it at the end
    - Process categories in order, containing per-category failures
    - Apply the inter-category delay and fetch retries
    - Record an ingestion history entry per category
    - Build the immutable RunReport

    An orchestrator runs once; create a new one for every run.
    """

    def __init__(
        self,
        settings: Optional[Settings],
        datastore,
        source,
        snapshots: SnapshotStore,
        loader: Optional[BatchLoader] = None,
        sleep: Callable[[float], None] = time.sleep,
        area: Optional[AreaConfig] = None,
    ):
        self.settings = settings or get_settings()
        self.datastore = datastore
        self.source = source
        self.snapshots = snapshots
        self.loader = loader or BatchLoader(self.settings.BATCH_SIZE)
        self.area = area or AreaConfig()
        self._sleep = sleep

        self.state = RunState.IDLE
        self.state_history: List[RunState] = [RunState.IDLE]
        self.run_id: Optional[str] = None
        self.mode: Optional[RunMode] = None
        self.report: Optional[RunReport] = None

    # ========================================================================
    # ENTRY POINTS
    # ========================================================================

    def ingest_and_load(self) -> RunReport:
        """Fetch, normalize, snapshot and load every category. Additive."""
        return self._execute(RunMode.INGEST_AND_LOAD, self._ingest_all)

    def load_existing(self) -> RunReport:
        """Load previously written snapshots without contacting the source."""
        return self._execute(RunMode.LOAD_EXISTING, self._load_all_snapshots)

    def fresh_ingest(self) -> RunReport:
        """Delete pending records in every category, then ingest and load."""

        def body() -> None:
            deleted = self._delete_pending()
            self._ingest_all(deleted)

        return self._execute(RunMode.FRESH_INGEST, body)

    # ========================================================================
    # RUN LIFECYCLE
    # ========================================================================

    def _set_state(self, state: RunState) -> None:
        self.state = state
        self.state_history.append(state)

    def _log(self, category: Optional[Category] = None) -> logging.LoggerAdapter:
        return with_context(
            logger,
            run_id=self.run_id,
            category=category.value if category else None,
            stage=self.state.value,
        )

    def _execute(self, mode: RunMode, body: Callable[[], None]) -> RunReport:
        if self.state != RunState.IDLE:
            raise RuntimeError("RunOrchestrator instances run once; create a new one")

        self.run_id = uuid.uuid4().hex[:12]
        self.mode = mode
        self.report = RunReport(mode=mode, started_at=datetime.utcnow(), run_id=self.run_id)

        self._set_state(RunState.CONNECTING)
        self._log().info(f"Starting {mode.value} run for {self.area.name}")
        try:
            self.datastore.connect()
            body()

            self._set_state(RunState.REPORTING)
            self.report = self.report.finish()
            totals = self.report.totals
            self._log().info(
                f"Run finished in {self.report.duration_seconds:.2f}s: "
                f"{totals.success} loaded (pending review), {totals.failed} failed, "
                f"{totals.skipped} skipped, {len(self.report.failed_categories)} categories failed"
            )
        finally:
            self.datastore.close()
            self._set_state(RunState.DONE)
        return self.report

    def _record(self, outcome: CategoryOutcome) -> None:
        self.report = self.report.with_outcome(outcome)
        self._write_history(outcome)

    # ========================================================================
    # MODES
    # ========================================================================

    def _ingest_all(self, deleted: Optional[Dict[Category, int]] = None) -> None:
        deleted = deleted or {}
        delay = self.settings.CATEGORY_DELAY_SECONDS
        for index, category in enumerate(Category.source_backed()):
            if index > 0 and delay > 0:
                self._sleep(delay)
            self._record(self._ingest_category(category, deleted.get(category, 0)))

        for category, factory in SYNTHETIC_CATALOGUE.items():
            self._record(self._seed_category(category, factory, deleted.get(category, 0)))

    def _load_all_snapshots(self) -> None:
        for category in Category:
            self._record(self._load_snapshot(category))

    def _delete_pending(self) -> Dict[Category, int]:
        """
        Remove pending records from every category collection.

        Records with any other status are never touched.

        Raises:
            IngestionError: A delete failed; the run cannot continue
        """
        deleted = {}
        for category in Category:
            try:
                count = self.datastore.collection(category.collection).delete_many(
                    {"status": "pending"}
                )
            except Exception as e:
                raise IngestionError(
                    f"Failed to delete pending records from {category.collection}: {e}"
                ) from e
            deleted[category] = count
            self._log(category).info(f"Deleted {count} pending records from {category.collection}")
        return deleted

    # ========================================================================
    # CATEGORY STEPS
    # ========================================================================

    def _fetch(self, category: Category) -> list:
        query = build_query(category, self.area)
        attempts = self.settings.FETCH_RETRIES + 1
        for attempt in range(1, attempts + 1):
            try:
                result = self.source.fetch(query)
            except SourceError as e:
                if attempt >= attempts:
                    raise
                backoff = RETRY_BACKOFF_SECONDS * (2 ** (attempt - 1))
                self._log(category).warning(
                    f"Fetch attempt {attempt}/{attempts} failed ({e}); retrying in {backoff:.1f}s"
                )
                self._sleep(backoff)
                continue
            self._log(category).info(f"Fetched {result.total_fetched} records")
            return result.records

    def _ingest_category(self, category: Category, deleted: int = 0) -> CategoryOutcome:
        started = datetime.utcnow()
        stats = LoadStatistics()
        error = None
        try:
            self._set_state(RunState.FETCHING)
            records = self._fetch(category)

            self._set_state(RunState.NORMALIZING)
            entities = normalize_records(records, category, self.area)

            self._set_state(RunState.SNAPSHOTTING)
            self.snapshots.write(category, entities)

            self._set_state(RunState.LOADING)
            stats = self._load(category, entities)
        except CategoryError as e:
            error = e
            if isinstance(e, DuplicateCheckFailure) and e.stats is not None:
                stats = e.stats
            self._log(category).error(f"{category.label} failed: {type(e).__name__}: {e}")

        return CategoryOutcome(
            category=category,
            stats=stats,
            error=error,
            deleted=deleted,
            started_at=started,
            ended_at=datetime.utcnow(),
        )

    def _seed_category(
        self,
        category: Category,
        factory: Callable[[], List[Any]],
        deleted: int = 0,
    ) -> CategoryOutcome:
        started = datetime.utcnow()
        stats = LoadStatistics()
        error = None
        try:
            entities = factory()

            self._set_state(RunState.SNAPSHOTTING)
            self.snapshots.write(category, entities)

            self._set_state(RunState.LOADING)
            stats = self._load(category, entities)
        except CategoryError as e:
            error = e
            if isinstance(e, DuplicateCheckFailure) and e.stats is not None:
                stats = e.stats
            self._log(category).error(f"{category.label} failed: {type(e).__name__}: {e}")

        return CategoryOutcome(
            category=category,
            stats=stats,
            error=error,
            deleted=deleted,
            started_at=started,
            ended_at=datetime.utcnow(),
        )

    def _load_snapshot(self, category: Category) -> CategoryOutcome:
        started = datetime.utcnow()
        self._set_state(RunState.SNAPSHOTTING)
        if not self.snapshots.exists(category):
            self._log(category).warning(
                f"No snapshot at {self.snapshots.path_for(category)}; skipping {category.label}"
            )
            return CategoryOutcome(category=category, started_at=started, ended_at=datetime.utcnow())

        stats = LoadStatistics()
        error = None
        try:
            entities, rejected = self.snapshots.read(category)
            invalid = LoadStatistics(total=rejected, failed=rejected)

            self._set_state(RunState.LOADING)
            stats = self._load(category, entities) + invalid
        except CategoryError as e:
            error = e
            if isinstance(e, DuplicateCheckFailure) and e.stats is not None:
                stats = e.stats
            self._log(category).error(f"{category.label} failed: {type(e).__name__}: {e}")

        return CategoryOutcome(
            category=category,
            stats=stats,
            error=error,
            started_at=started,
            ended_at=datetime.utcnow(),
        )

    def _load(self, category: Category, entities: List[Any]) -> LoadStatistics:
        collection = self.datastore.collection(category.collection)
        return self.loader.load(collection, entities, category.dedup_field)

    # ========================================================================
    # HISTORY
    # ========================================================================

    def _history_status(self, outcome: CategoryOutcome) -> str:
        stats = outcome.stats
        if outcome.error is not None or (stats.failed > 0 and stats.success == 0):
            return "failed"
        if stats.failed > 0:
            return "partial"
        return "success"

    def _write_history(self, outcome: CategoryOutcome) -> None:
        """Insert one audit document; failures are logged and ignored."""
        stats = outcome.stats
        errors = []
        if outcome.error is not None:
            errors.append({"type": type(outcome.error).__name__, "message": str(outcome.error)})

        doc = {
            "data_type": outcome.category.collection,
            "operation": "import" if self.mode == RunMode.LOAD_EXISTING else "ingest",
            "status": self._history_status(outcome),
            "records_processed": stats.total,
            "records_successful": stats.success,
            "records_failed": stats.failed,
            "records_skipped": stats.skipped,
            "errors": errors[:MAX_HISTORY_ERRORS],
            "metadata": {
                "source": self.area.provenance,
                "mode": self.mode.value,
                "run_id": self.run_id,
            },
            "start_time": outcome.started_at.isoformat() if outcome.started_at else None,
            "end_time": outcome.ended_at.isoformat() if outcome.ended_at else None,
            "duration_ms": int(outcome.duration_seconds * 1000),
        }
        try:
            self.datastore.collection(HISTORY_COLLECTION, moderated=False).insert_one(doc)
        except Exception as e:
            self._log(outcome.category).warning(f"Could not write ingestion history: {e}")
