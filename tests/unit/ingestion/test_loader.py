"""
Unit tests for the loader module.

Tests for BatchLoader deduplication, batching and failure isolation.
"""

import pytest

from geoingest.ingestion.errors import DuplicateCheckFailure
from geoingest.ingestion.loader import BatchLoader, to_document
from geoingest.ingestion.normalization import normalize_records
from geoingest.ingestion.stats import LoadStatistics
from geoingest.ingestion.synthetic import sample_events
from geoingest.schemas.category import Category
from geoingest.schemas.entity import ModerationStatus

# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def hotels(make_record):
    """Five distinct named hotels."""
    records = [make_record(100 + i, name=f"Hotel {i}", tourism="hotel") for i in range(5)]
    return normalize_records(records, Category.LODGING)


# =============================================================================
# TEST CLASSES
# =============================================================================


class TestToDocument:
    def test_lifecycle_flags_forced(self, hotels):
        entity = hotels[0].model_copy(update={"featured": True, "promoted": True, "status": ModerationStatus.ACTIVE})
        doc = to_document(entity)
        assert doc["status"] == "pending"
        assert doc["featured"] is False
        assert doc["promoted"] is False

    def test_json_compatible(self, hotels):
        doc = to_document(hotels[0])
        assert doc["kind"] == "lodging"
        assert doc["location"]["coordinates"] == [88.3639, 22.5726]


class TestBatchLoader:
    def test_invalid_batch_size(self):
        with pytest.raises(ValueError):
            BatchLoader(batch_size=0)

    def test_empty_input_returns_zero_stats(self, fake_collection):
        assert BatchLoader().load(fake_collection, [], "external_id") == LoadStatistics()
        assert fake_collection.insert_many_calls == 0

    def test_loads_everything_into_empty_collection(self, fake_collection, hotels):
        stats = BatchLoader().load(fake_collection, hotels, "external_id")
        assert stats == LoadStatistics(total=5, success=5, failed=0, skipped=0, pending=5)
        assert fake_collection.count_documents({"status": "pending"}) == 5

    def test_reingest_skips_everything(self, fake_collection, hotels):
        loader = BatchLoader()
        loader.load(fake_collection, hotels, "external_id")
        stats = loader.load(fake_collection, hotels, "external_id")
        assert stats == LoadStatistics(total=5, success=0, failed=0, skipped=5, pending=0)
        assert len(fake_collection.docs) == 5

    def test_partial_overlap(self, fake_collection, hotels):
        loader = BatchLoader()
        loader.load(fake_collection, hotels[:2], "external_id")
        stats = loader.load(fake_collection, hotels, "external_id")
        assert stats.success == 3
        assert stats.skipped == 2

    def test_one_existence_query_per_batch(self, fake_collection, hotels):
        BatchLoader(batch_size=2).load(fake_collection, hotels, "external_id")
        assert len(fake_collection.find_calls) == 3
        filter, projection = fake_collection.find_calls[0]
        assert filter == {"external_id": {"$in": [100, 101]}}
        assert projection == {"external_id": 1}
        assert fake_collection.insert_many_calls == 3

    def test_no_dedup_field_skips_existence_query(self, fake_collection, hotels):
        BatchLoader().load(fake_collection, hotels, None)
        assert fake_collection.find_calls == []

    def test_batch_isolation(self, fake_collection, hotels):
        fake_collection.reject = lambda doc: doc["external_id"] == 102
        stats = BatchLoader().load(fake_collection, hotels, "external_id")

        assert stats.success == 4
        assert stats.failed == 1
        assert stats.pending == 4
        assert fake_collection.insert_one_calls == 5
        assert sorted(d["external_id"] for d in fake_collection.docs) == [100, 101, 103, 104]

    def test_fallback_only_retries_the_failing_batch(self, fake_collection, hotels):
        fake_collection.reject = lambda doc: doc["external_id"] == 104
        stats = BatchLoader(batch_size=2).load(fake_collection, hotels, "external_id")
        assert stats == LoadStatistics(total=5, success=4, failed=1, skipped=0, pending=4)
        assert fake_collection.insert_one_calls == 1

    def test_fallback_does_not_reinsert_skipped(self, fake_collection, hotels):
        loader = BatchLoader()
        loader.load(fake_collection, hotels[:2], "external_id")
        fake_collection.reject = lambda doc: doc["external_id"] == 103
        stats = loader.load(fake_collection, hotels, "external_id")
        assert stats == LoadStatistics(total=5, success=2, failed=1, skipped=2, pending=2)
        assert fake_collection.insert_one_calls == 3

    def test_existence_check_failure_is_fatal(self, fake_collection, hotels):
        fake_collection.fail_find = True
        with pytest.raises(DuplicateCheckFailure) as exc:
            BatchLoader().load(fake_collection, hotels, "external_id")
        assert exc.value.stats == LoadStatistics()
        assert fake_collection.docs == []

    def test_existence_check_failure_carries_partial_stats(self, fake_collection, hotels):
        original_find = fake_collection.find
        calls = {"n": 0}

        def flaky_find(filter, projection=None):
            calls["n"] += 1
            if calls["n"] == 2:
                raise RuntimeError("connection reset")
            return original_find(filter, projection)

        fake_collection.find = flaky_find
        with pytest.raises(DuplicateCheckFailure) as exc:
            BatchLoader(batch_size=2).load(fake_collection, hotels, "external_id")
        assert exc.value.stats == LoadStatistics(total=2, success=2, pending=2)

    def test_synthetic_dedup_by_slug(self, fake_collection):
        loader = BatchLoader()
        first = loader.load(fake_collection, sample_events(), "slug")
        second = loader.load(fake_collection, sample_events(), "slug")
        assert first.success == 1
        assert second.skipped == 1
        assert len(fake_collection.docs) == 1
