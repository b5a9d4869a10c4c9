"""Unit tests for terradocs.cache."""

from __future__ import annotations

import asyncio

import aiosqlite
import pytest

from terradocs.cache import Cache
from terradocs.errors import ErrorCode, TerraDocsError
from terradocs.models.docs import DocumentRecord, ResourceIdentifier

from tests.conftest import make_record

S3 = ResourceIdentifier(provider="aws", kind="resource", name="aws_s3_bucket")
AMI = ResourceIdentifier(provider="aws", kind="data_source", name="aws_ami")
GCS = ResourceIdentifier(provider="google", kind="resource", name="google_storage_bucket")


class GatedLoader:
    """Loader that blocks until released and counts its invocations."""

    def __init__(self, record: DocumentRecord, error: Exception | None = None) -> None:
        self.record = record
        self.error = error
        self.calls = 0
        self.release = asyncio.Event()

    async def __call__(self) -> DocumentRecord:
        self.calls += 1
        await self.release.wait()
        if self.error is not None:
            raise self.error
        return self.record


async def _failing_execute(*args, **kwargs):
    raise aiosqlite.OperationalError("disk I/O error")


async def _started(loader: GatedLoader) -> None:
    while loader.calls == 0:
        await asyncio.sleep(0.001)
    # Let the remaining callers reach the shared task
    await asyncio.sleep(0.01)


# ---------------------------------------------------------------------------
# Reads and writes
# ---------------------------------------------------------------------------


class TestPutAndGet:
    async def test_put_then_get(self, cache: Cache) -> None:
        record = make_record()
        await cache.put(S3, record, "5.31.0")
        assert await cache.get(S3) == record

    async def test_get_missing_returns_none(self, cache: Cache) -> None:
        assert await cache.get(S3) is None

    async def test_entry_carries_version(self, cache: Cache) -> None:
        await cache.put(S3, make_record(), "5.31.0")
        entry = await cache.get_entry(S3)
        assert entry is not None
        assert entry.version == "5.31.0"
        assert entry.record.identifier == S3

    async def test_put_overwrites(self, cache: Cache) -> None:
        await cache.put(S3, make_record(), "5.31.0")
        updated = make_record().model_copy(update={"description": "Updated."})
        await cache.put(S3, updated, "5.31.0")
        record = await cache.get(S3)
        assert record is not None
        assert record.description == "Updated."
        assert cache.stats().entries == 1

    async def test_read_failure_returns_none(
        self, cache: Cache, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        await cache.put(S3, make_record(), "5.31.0")
        monkeypatch.setattr(cache._db, "execute", _failing_execute)
        assert await cache.get(S3) is None
        assert cache.stats().misses == 1

    async def test_write_failure_does_not_raise(
        self, cache: Cache, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(cache._db, "execute", _failing_execute)
        await cache.put(S3, make_record(), "5.31.0")

    async def test_corrupt_record_is_a_miss(self, cache: Cache) -> None:
        await cache.put(S3, make_record(), "5.31.0")
        await cache._db.execute("UPDATE doc_cache SET record = '{not json'")
        await cache._db.commit()
        assert await cache.get(S3) is None


# ---------------------------------------------------------------------------
# Version binding
# ---------------------------------------------------------------------------


class TestVersionBinding:
    async def test_put_binds_version(self, cache: Cache) -> None:
        await cache.put(S3, make_record(), "5.31.0")
        assert await cache.bound_version("aws") == "5.31.0"

    async def test_unbound_provider(self, cache: Cache) -> None:
        assert await cache.bound_version("aws") is None

    async def test_new_version_drops_documents(self, cache: Cache) -> None:
        await cache.put(S3, make_record(), "5.31.0")
        await cache.put(AMI, make_record("aws_ami", kind="data_source"), "5.31.0")

        await cache.bind_version("aws", "5.32.0")

        assert await cache.get(S3) is None
        assert await cache.get(AMI) is None
        assert await cache.bound_version("aws") == "5.32.0"
        assert cache.stats().entries == 0

    async def test_same_version_keeps_documents(self, cache: Cache) -> None:
        await cache.put(S3, make_record(), "5.31.0")
        await cache.bind_version("aws", "5.31.0")
        assert await cache.get(S3) is not None

    async def test_other_providers_unaffected(self, cache: Cache) -> None:
        await cache.put(S3, make_record(), "5.31.0")
        await cache.put(GCS, make_record("google_storage_bucket", provider="google"), "5.10.0")
        await cache.bind_version("aws", "5.32.0")
        assert await cache.get(GCS) is not None


# ---------------------------------------------------------------------------
# Invalidation
# ---------------------------------------------------------------------------


class TestInvalidate:
    async def test_invalidate_one_provider(self, cache: Cache) -> None:
        await cache.put(S3, make_record(), "5.31.0")
        await cache.put(AMI, make_record("aws_ami", kind="data_source"), "5.31.0")
        await cache.put(GCS, make_record("google_storage_bucket", provider="google"), "5.10.0")

        removed = await cache.invalidate("aws")

        assert removed == 2
        assert await cache.get(S3) is None
        assert await cache.bound_version("aws") is None
        assert await cache.get(GCS) is not None
        assert cache.stats().entries == 1

    async def test_invalidate_unknown_provider(self, cache: Cache) -> None:
        assert await cache.invalidate("nothing") == 0

    async def test_invalidate_failure_does_not_raise(
        self, cache: Cache, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(cache._db, "execute", _failing_execute)
        assert await cache.invalidate("aws") == 0

    async def test_clear(self, cache: Cache) -> None:
        await cache.put(S3, make_record(), "5.31.0")
        await cache.put(GCS, make_record("google_storage_bucket", provider="google"), "5.10.0")
        await cache.get(S3)

        await cache.clear()

        stats = cache.stats()
        assert stats.entries == 0
        assert stats.hits == 0
        assert stats.misses == 0
        assert await cache.bound_version("google") is None


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


class TestStats:
    async def test_empty_cache(self, cache: Cache) -> None:
        stats = cache.stats()
        assert stats.requests == 0
        assert stats.hit_rate == 0.0

    async def test_hit_rate_percentage(self, cache: Cache) -> None:
        await cache.put(S3, make_record(), "5.31.0")
        await cache.get(S3)
        await cache.get(S3)
        await cache.get(AMI)
        stats = cache.stats()
        assert stats.hits == 2
        assert stats.misses == 1
        assert stats.requests == 3
        assert stats.hit_rate == 66.67

    async def test_entry_count(self, cache: Cache) -> None:
        await cache.put(S3, make_record(), "5.31.0")
        await cache.put(AMI, make_record("aws_ami", kind="data_source"), "5.31.0")
        assert cache.stats().entries == 2


# ---------------------------------------------------------------------------
# Load coalescing
# ---------------------------------------------------------------------------


class TestGetOrLoad:
    async def test_miss_runs_loader_and_stores(self, cache: Cache) -> None:
        loader = GatedLoader(make_record())
        loader.release.set()
        record = await cache.get_or_load(S3, "5.31.0", loader)
        assert record == loader.record
        assert await cache.get(S3) == record
        assert loader.calls == 1

    async def test_hit_skips_loader(self, cache: Cache) -> None:
        await cache.put(S3, make_record(), "5.31.0")
        loader = GatedLoader(make_record())
        loader.release.set()
        await cache.get_or_load(S3, "5.31.0", loader)
        assert loader.calls == 0

    async def test_concurrent_callers_share_one_load(self, cache: Cache) -> None:
        loader = GatedLoader(make_record())
        tasks = [asyncio.create_task(cache.get_or_load(S3, "5.31.0", loader)) for _ in range(10)]
        await _started(loader)
        assert cache.in_flight(S3)
        assert cache.stats().in_flight == 1

        loader.release.set()
        results = await asyncio.gather(*tasks)

        assert loader.calls == 1
        assert all(r is results[0] for r in results)
        assert not cache.in_flight(S3)

    async def test_distinct_identifiers_load_independently(self, cache: Cache) -> None:
        s3_loader = GatedLoader(make_record())
        ami_loader = GatedLoader(make_record("aws_ami", kind="data_source"))
        s3_loader.release.set()
        ami_loader.release.set()
        await asyncio.gather(
            cache.get_or_load(S3, "5.31.0", s3_loader),
            cache.get_or_load(AMI, "5.31.0", ami_loader),
        )
        assert s3_loader.calls == 1
        assert ami_loader.calls == 1

    async def test_failure_shared_and_not_cached(self, cache: Cache) -> None:
        error = TerraDocsError(ErrorCode.FETCH_FAILED, "HTTP 500", "Try again.", True)
        loader = GatedLoader(make_record(), error=error)
        tasks = [asyncio.create_task(cache.get_or_load(S3, "5.31.0", loader)) for _ in range(3)]
        await _started(loader)
        loader.release.set()

        results = await asyncio.gather(*tasks, return_exceptions=True)

        assert loader.calls == 1
        assert all(r is error for r in results)
        assert await cache.get(S3) is None
        assert not cache.in_flight(S3)

        # The next request retries from scratch
        loader.error = None
        await cache.get_or_load(S3, "5.31.0", loader)
        assert loader.calls == 2

    async def test_cancelled_waiter_does_not_cancel_load(self, cache: Cache) -> None:
        loader = GatedLoader(make_record())
        first = asyncio.create_task(cache.get_or_load(S3, "5.31.0", loader))
        second = asyncio.create_task(cache.get_or_load(S3, "5.31.0", loader))
        await _started(loader)

        first.cancel()
        loader.release.set()

        assert await second == loader.record
        with pytest.raises(asyncio.CancelledError):
            await first
        assert loader.calls == 1
        assert await cache.get(S3) is not None

    async def test_load_invalidated_mid_flight_not_stored(self, cache: Cache) -> None:
        loader = GatedLoader(make_record())
        task = asyncio.create_task(cache.get_or_load(S3, "5.31.0", loader))
        await _started(loader)

        await cache.invalidate("aws")
        assert not cache.in_flight(S3)
        loader.release.set()

        # The waiter still gets the record; it is simply not kept
        assert await task == loader.record
        assert await cache.get(S3) is None

    async def test_request_after_invalidate_starts_fresh_load(self, cache: Cache) -> None:
        stale = GatedLoader(make_record(version="5.31.0"))
        fresh = GatedLoader(make_record(version="5.32.0"))
        old_task = asyncio.create_task(cache.get_or_load(S3, "5.31.0", stale))
        await _started(stale)

        await cache.invalidate("aws")
        fresh.release.set()
        record = await cache.get_or_load(S3, "5.32.0", fresh)

        assert fresh.calls == 1
        assert record.source_version == "5.32.0"

        stale.release.set()
        await old_task
        stored = await cache.get(S3)
        assert stored is not None
        assert stored.source_version == "5.32.0"

    async def test_clear_mid_flight_not_stored(self, cache: Cache) -> None:
        loader = GatedLoader(make_record())
        task = asyncio.create_task(cache.get_or_load(S3, "5.31.0", loader))
        await _started(loader)

        await cache.clear()
        loader.release.set()

        await task
        assert await cache.get(S3) is None

    async def test_version_change_detaches_old_load(self, cache: Cache) -> None:
        await cache.bind_version("aws", "1.0.0")
        stale = GatedLoader(make_record(version="1.0.0"))
        fresh = GatedLoader(make_record(version="2.0.0"))
        old_task = asyncio.create_task(cache.get_or_load(S3, "1.0.0", stale))
        await _started(stale)

        await cache.bind_version("aws", "2.0.0")
        assert not cache.in_flight(S3)
        fresh.release.set()
        record = await cache.get_or_load(S3, "2.0.0", fresh)

        assert fresh.calls == 1
        assert record.source_version == "2.0.0"

        stale.release.set()
        assert (await old_task).source_version == "1.0.0"
        stored = await cache.get(S3)
        assert stored is not None
        assert stored.source_version == "2.0.0"

    async def test_callers_on_different_versions_do_not_share_a_load(
        self, cache: Cache
    ) -> None:
        old = GatedLoader(make_record(version="1.0.0"))
        new = GatedLoader(make_record(version="2.0.0"))
        old_task = asyncio.create_task(cache.get_or_load(S3, "1.0.0", old))
        await _started(old)

        new.release.set()
        record = await cache.get_or_load(S3, "2.0.0", new)
        assert new.calls == 1
        assert record.source_version == "2.0.0"

        old.release.set()
        assert (await old_task).source_version == "1.0.0"
        assert old.calls == 1
