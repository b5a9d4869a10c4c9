"""Application state container.

AppState is the explicit context object for the whole pipeline. It is created
once (inside the FastMCP lifespan, or directly by library consumers and
tests) and passed to every tool handler and to DocsService. There are no
module-level singletons.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import aiosqlite
import structlog

from terradocs.cache import Cache
from terradocs.fetcher import DocumentFetcher
from terradocs.index import SearchIndex, build_index
from terradocs.registry import ProviderRegistry, build_default_registry
from terradocs.transport import HttpTransport, build_allowlist, build_http_client
from terradocs.versions import VersionResolver

if TYPE_CHECKING:
    import httpx

    from terradocs.config import Settings
    from terradocs.protocols import Transport

log = structlog.get_logger()


@dataclass
class AppState:
    """Holds all shared runtime state. Passed to every tool handler."""

    settings: Settings
    transport: Transport
    db: aiosqlite.Connection
    cache: Cache
    resolver: VersionResolver
    fetcher: DocumentFetcher
    registry: ProviderRegistry

    # Only set when the state owns a real HTTP client
    http_client: httpx.AsyncClient | None = None

    _index: SearchIndex | None = field(default=None, repr=False)
    _index_revision: int = field(default=-1, repr=False)

    def search_index(self) -> SearchIndex:
        """Return the search index, rebuilding it if the registry changed."""
        if self._index is None or self._index_revision != self.registry.revision:
            self._index = build_index(
                self.registry.index_entries(),
                fuzzy_score_cutoff=self.settings.search.fuzzy_score_cutoff,
            )
            self._index_revision = self.registry.revision
            log.debug("search_index_built", entries=len(self._index))
        return self._index

    async def reset(self) -> None:
        """Drop every cached document, resolved version and the search index."""
        await self.cache.clear()
        self.resolver.invalidate_all()
        self._index = None
        log.info("state_reset")

    async def aclose(self) -> None:
        if self.http_client is not None:
            await self.http_client.aclose()
        await self.db.close()


async def build_state(settings: Settings, *, transport: Transport | None = None) -> AppState:
    """Wire up transport, cache, resolver, fetcher and the provider registry.

    Pass ``transport`` (e.g. a StubTransport) to run without a network; an
    httpx-backed transport is built otherwise.
    """
    http_client: httpx.AsyncClient | None = None
    if transport is None:
        http_client = build_http_client(settings)
        allowlist = build_allowlist(
            [settings.registry.base_url, settings.docs.base_url],
            extra_domains=settings.transport.extra_allowed_domains,
        )
        transport = HttpTransport(
            http_client,
            allowlist,
            max_redirects=settings.transport.max_redirects,
        )

    database = settings.cache.database
    if database != ":memory:":
        db_path = Path(database).expanduser()
        db_path.parent.mkdir(parents=True, exist_ok=True)
        database = str(db_path)
    db = await aiosqlite.connect(database)
    cache = Cache(db)
    await cache.init_db()

    resolver = VersionResolver(transport, settings.registry)
    fetcher = DocumentFetcher(transport, settings.docs)
    registry = build_default_registry(settings, resolver=resolver, fetcher=fetcher, cache=cache)

    return AppState(
        settings=settings,
        transport=transport,
        db=db,
        cache=cache,
        resolver=resolver,
        fetcher=fetcher,
        registry=registry,
        http_client=http_client,
    )
