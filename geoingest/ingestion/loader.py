"""
Batch Loader.

Persists normalized entities into a document collection in fixed-size
batches:

1. One existence query per batch on the dedup key; entities already stored
   are skipped.
2. Survivors are serialized with the lifecycle defaults forced (pending,
   not featured, not promoted) and bulk inserted.
3. When the bulk insert is rejected, the same survivors are inserted one
   at a time so a single bad record cannot sink its batch.

A failed existence query aborts the category: without it the loader cannot
tell new records from stored ones.
"""

from typing import Any, Dict, List, Optional, Sequence
import logging

from geoingest.schemas.entity import ModerationStatus

from .datastore import DocumentCollection
from .errors import DuplicateCheckFailure, RecordInsertFailure
from .stats import LoadStatistics

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50


def to_document(entity) -> Dict[str, Any]:
    """Serialize an entity for storage with ingestion lifecycle defaults."""
    doc = entity.model_dump(mode="json")
    doc["status"] = ModerationStatus.PENDING.value
    doc["featured"] = False
    doc["promoted"] = False
    return doc


class BatchLoader:
    """
    Loads entities into a collection with per-batch deduplication.

    Example:
        >>> loader = BatchLoader(batch_size=50)
        >>> stats = loader.load(collection, entities, dedup_field="external_id")
    """

    def __init__(self, batch_size: int = DEFAULT_BATCH_SIZE):
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self.batch_size = batch_size

    def load(
        self,
        collection: DocumentCollection,
        entities: Sequence[Any],
        dedup_field: Optional[str] = None,
    ) -> LoadStatistics:
        """
        Load entities into a collection.

        Args:
            collection: Target document collection
            entities: Normalized entities to persist
            dedup_field: Document field identifying already stored records;
                None disables the existence check

        Returns:
            Statistics summed over every batch

        Raises:
            DuplicateCheckFailure: The existence query failed; carries the
                statistics of the batches completed before the failure
        """
        if not entities:
            logger.warning(f"No data to load into {collection.name}")
            return LoadStatistics()

        stats = LoadStatistics()
        batch_count = (len(entities) + self.batch_size - 1) // self.batch_size
        for index in range(batch_count):
            batch = entities[index * self.batch_size:(index + 1) * self.batch_size]
            try:
                batch_stats = self._load_batch(collection, list(batch), dedup_field)
            except DuplicateCheckFailure as e:
                e.stats = stats
                raise
            stats = stats + batch_stats
            logger.info(
                f"{collection.name}: batch {index + 1}/{batch_count} "
                f"inserted {batch_stats.success}, skipped {batch_stats.skipped}, "
                f"failed {batch_stats.failed}"
            )

        logger.info(
            f"{collection.name}: {stats.success} inserted (pending review), "
            f"{stats.skipped} skipped, {stats.failed} failed of {stats.total}"
        )
        return stats

    def _load_batch(
        self,
        collection: DocumentCollection,
        batch: List[Any],
        dedup_field: Optional[str],
    ) -> LoadStatistics:
        docs = [to_document(entity) for entity in batch]
        skipped = 0

        if dedup_field:
            existing = self._existing_keys(collection, docs, dedup_field)
            fresh = [doc for doc in docs if doc.get(dedup_field) not in existing]
            skipped = len(docs) - len(fresh)
            docs = fresh

        if not docs:
            return LoadStatistics(total=len(batch), skipped=skipped)

        try:
            collection.insert_many(docs, ordered=False)
            success, failed = len(docs), 0
        except Exception as e:
            logger.warning(
                f"{collection.name}: bulk insert of {len(docs)} records failed ({e}); "
                "retrying individually"
            )
            success, failed = self._insert_individually(collection, docs, dedup_field)

        return LoadStatistics(
            total=len(batch),
            success=success,
            failed=failed,
            skipped=skipped,
            pending=success,
        )

    def _existing_keys(
        self,
        collection: DocumentCollection,
        docs: List[Dict[str, Any]],
        dedup_field: str,
    ) -> set:
        keys = [doc.get(dedup_field) for doc in docs if doc.get(dedup_field) is not None]
        if not keys:
            return set()
        try:
            found = collection.find({dedup_field: {"$in": keys}}, {dedup_field: 1})
        except Exception as e:
            raise DuplicateCheckFailure(
                f"Existence check on {collection.name}.{dedup_field} failed: {e}"
            ) from e
        return {doc.get(dedup_field) for doc in found}

    def _insert_individually(
        self,
        collection: DocumentCollection,
        docs: List[Dict[str, Any]],
        dedup_field: Optional[str],
    ):
        success = 0
        failed = 0
        for doc in docs:
            try:
                collection.insert_one(doc)
                success += 1
            except Exception as e:
                failed += 1
                key = doc.get(dedup_field or "slug") or doc.get("name") or doc.get("title")
                logger.error(str(RecordInsertFailure(key, e)))
        return success, failed
