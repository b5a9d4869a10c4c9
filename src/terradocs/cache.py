"""SQLite document cache with version binding and load coalescing.

Documents are keyed by ResourceIdentifier and bound to the provider version
they were fetched for. An entry is a hit only while its version equals the
provider's currently bound version; binding a new version drops the
provider's documents wholesale.

All storage operations catch ``aiosqlite.Error`` internally and degrade
gracefully: read failures become misses and write failures are logged and
ignored, so the freshly loaded record still reaches the caller. Errors are
logged with ``exc_info=True`` so they remain observable on stderr.

``get_or_load`` is the coalescing entry point. At most one load per
identifier and provider version is in flight; every concurrent caller
awaits the same task and sees the same record or the same exception.
Binding a new version detaches loads started for the old one. Failures are
never stored.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import aiosqlite
import structlog
from pydantic import ValidationError

from terradocs.models.cache import CacheEntry, CacheStats
from terradocs.models.docs import DocumentRecord

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from terradocs.models.docs import ResourceIdentifier

log = structlog.get_logger()

_CREATE_DOC_TABLE = """
CREATE TABLE IF NOT EXISTS doc_cache (
    cache_key  TEXT PRIMARY KEY,
    provider   TEXT NOT NULL,
    kind       TEXT NOT NULL,
    name       TEXT NOT NULL,
    version    TEXT NOT NULL,
    record     TEXT NOT NULL,
    stored_at  TEXT NOT NULL
)
"""

_CREATE_VERSION_TABLE = """
CREATE TABLE IF NOT EXISTS provider_versions (
    provider    TEXT PRIMARY KEY,
    version     TEXT NOT NULL,
    bound_at    TEXT NOT NULL
)
"""

_CREATE_PROVIDER_INDEX = "CREATE INDEX IF NOT EXISTS idx_doc_provider ON doc_cache(provider)"


def _retrieve_exception(task: asyncio.Task[DocumentRecord]) -> None:
    # Marks the exception retrieved when every waiter was cancelled.
    if not task.cancelled() and task.exception() is not None:
        log.debug("cache_load_failed", task=task.get_name(), error=str(task.exception()))


class Cache:
    """SQLite-backed document cache shared by every provider."""

    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db
        self._in_flight: dict[tuple[ResourceIdentifier, str], asyncio.Task[DocumentRecord]] = {}
        self._generations: dict[str, int] = {}
        self._epoch = 0
        self._hits = 0
        self._misses = 0
        self._entries = 0

    async def init_db(self) -> None:
        """Create tables. Called once at startup."""
        await self._db.execute("PRAGMA journal_mode = WAL")
        await self._db.execute(_CREATE_DOC_TABLE)
        await self._db.execute(_CREATE_VERSION_TABLE)
        await self._db.execute(_CREATE_PROVIDER_INDEX)
        await self._db.commit()
        await self._refresh_count()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_entry(self, identifier: ResourceIdentifier) -> CacheEntry | None:
        """Read an entry bound to the provider's current version.

        Returns ``None`` on miss, version mismatch or read failure.
        """
        try:
            cursor = await self._db.execute(
                "SELECT d.record, d.version, d.stored_at FROM doc_cache d "
                "JOIN provider_versions p ON p.provider = d.provider AND p.version = d.version "
                "WHERE d.cache_key = ?",
                (identifier.key,),
            )
            row = await cursor.fetchone()
        except aiosqlite.Error:
            log.warning("cache_read_error", key=identifier.key, exc_info=True)
            self._misses += 1
            return None

        if row is None:
            self._misses += 1
            return None

        try:
            record = DocumentRecord.model_validate_json(row[0])
        except ValidationError:
            log.warning("cache_entry_invalid", key=identifier.key, exc_info=True)
            self._misses += 1
            return None

        self._hits += 1
        return CacheEntry(
            record=record,
            version=row[1],
            stored_at=datetime.fromisoformat(row[2]),
        )

    async def get(self, identifier: ResourceIdentifier) -> DocumentRecord | None:
        entry = await self.get_entry(identifier)
        return entry.record if entry is not None else None

    async def bound_version(self, provider: str) -> str | None:
        try:
            cursor = await self._db.execute(
                "SELECT version FROM provider_versions WHERE provider = ?", (provider,)
            )
            row = await cursor.fetchone()
        except aiosqlite.Error:
            log.warning("cache_read_error", key=f"version:{provider}", exc_info=True)
            return None
        return row[0] if row else None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def bind_version(self, provider: str, version: str) -> None:
        """Record the provider's current version. A change drops its documents."""
        current = await self.bound_version(provider)
        if current == version:
            return
        if current is not None:
            self._bump(provider)
            self._drop_in_flight(provider)
            log.info("cache_version_changed", provider=provider, old=current, new=version)
        try:
            await self._db.execute("DELETE FROM doc_cache WHERE provider = ?", (provider,))
            await self._db.execute(
                "INSERT OR REPLACE INTO provider_versions (provider, version, bound_at) "
                "VALUES (?, ?, ?)",
                (provider, version, datetime.now(UTC).isoformat()),
            )
            await self._db.commit()
        except aiosqlite.Error:
            log.warning("cache_write_error", key=f"version:{provider}", exc_info=True)
        await self._refresh_count()

    async def put(
        self, identifier: ResourceIdentifier, record: DocumentRecord, version: str
    ) -> None:
        """Store a record under the given provider version. Non-fatal on failure."""
        await self.bind_version(identifier.provider, version)
        try:
            await self._db.execute(
                "INSERT OR REPLACE INTO doc_cache "
                "(cache_key, provider, kind, name, version, record, stored_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    identifier.key,
                    identifier.provider,
                    str(identifier.kind),
                    identifier.name,
                    version,
                    record.model_dump_json(),
                    datetime.now(UTC).isoformat(),
                ),
            )
            await self._db.commit()
        except aiosqlite.Error:
            log.warning("cache_write_error", key=identifier.key, exc_info=True)
        await self._refresh_count()

    async def invalidate(self, provider: str) -> int:
        """Drop every document and the bound version of one provider.

        Loads already in flight for the provider still complete for their
        waiters but are not stored. Returns the number of documents removed.
        """
        self._bump(provider)
        self._drop_in_flight(provider)

        removed = 0
        try:
            cursor = await self._db.execute(
                "DELETE FROM doc_cache WHERE provider = ?", (provider,)
            )
            removed = cursor.rowcount
            await self._db.execute("DELETE FROM provider_versions WHERE provider = ?", (provider,))
            await self._db.commit()
        except aiosqlite.Error:
            log.warning("cache_invalidate_error", provider=provider, exc_info=True)
        await self._refresh_count()
        log.info("cache_invalidated", provider=provider, removed=removed)
        return removed

    async def clear(self) -> None:
        """Drop all documents, bound versions and counters."""
        self._epoch += 1
        self._in_flight.clear()
        try:
            await self._db.execute("DELETE FROM doc_cache")
            await self._db.execute("DELETE FROM provider_versions")
            await self._db.commit()
        except aiosqlite.Error:
            log.warning("cache_clear_error", exc_info=True)
        self._hits = 0
        self._misses = 0
        await self._refresh_count()
        log.info("cache_cleared")

    # ------------------------------------------------------------------
    # Coalescing
    # ------------------------------------------------------------------

    async def get_or_load(
        self,
        identifier: ResourceIdentifier,
        version: str,
        loader: Callable[[], Awaitable[DocumentRecord]],
    ) -> DocumentRecord:
        """Return the cached record or run ``loader`` exactly once for all callers.

        Waiters are shielded: cancelling one never cancels the shared load.
        """
        # Loads are shared only between callers that resolved the same version.
        key = (identifier, version)
        task = self._in_flight.get(key)
        if task is None:
            record = await self.get(identifier)
            if record is not None:
                return record
            task = self._in_flight.get(key)

        if task is None:
            task = asyncio.create_task(
                self._load(identifier, version, loader), name=f"load:{identifier.key}"
            )
            task.add_done_callback(_retrieve_exception)
            self._in_flight[key] = task
        else:
            log.debug("cache_load_coalesced", key=identifier.key)

        return await asyncio.shield(task)

    async def _load(
        self,
        identifier: ResourceIdentifier,
        version: str,
        loader: Callable[[], Awaitable[DocumentRecord]],
    ) -> DocumentRecord:
        token = self._token(identifier.provider)
        try:
            record = await loader()
            if self._token(identifier.provider) == token:
                await self.put(identifier, record, version)
            else:
                log.info("cache_store_skipped", key=identifier.key, reason="invalidated")
            return record
        finally:
            key = (identifier, version)
            if self._in_flight.get(key) is asyncio.current_task():
                del self._in_flight[key]

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def in_flight(self, identifier: ResourceIdentifier) -> bool:
        return any(key[0] == identifier for key in self._in_flight)

    def stats(self) -> CacheStats:
        requests = self._hits + self._misses
        return CacheStats(
            hits=self._hits,
            misses=self._misses,
            requests=requests,
            hit_rate=round(self._hits / requests * 100, 2) if requests else 0.0,
            entries=self._entries,
            in_flight=len(self._in_flight),
        )

    def _token(self, provider: str) -> tuple[int, int]:
        return self._epoch, self._generations.get(provider, 0)

    def _bump(self, provider: str) -> None:
        self._generations[provider] = self._generations.get(provider, 0) + 1

    def _drop_in_flight(self, provider: str) -> None:
        for key in [k for k in self._in_flight if k[0].provider == provider]:
            del self._in_flight[key]

    async def _refresh_count(self) -> None:
        try:
            cursor = await self._db.execute("SELECT COUNT(*) FROM doc_cache")
            row = await cursor.fetchone()
        except aiosqlite.Error:
            log.warning("cache_read_error", key="count", exc_info=True)
            return
        self._entries = row[0] if row else 0
