"""Consumer-facing lookup API.

DocsService is what editors, the MCP tools and scripts talk to. It routes a
(kind, name) pair to the provider that owns it, and offers both an awaitable
form (``fetch_docs``) and a callback form (``get_docs``) that returns the
scheduled task.
"""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from terradocs.errors import ErrorCode, TerraDocsError
from terradocs.models.docs import ResourceIdentifier, ResourceKind

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from terradocs.models.cache import CacheStats
    from terradocs.models.docs import DocumentRecord, ExampleBlock
    from terradocs.state import AppState

log = structlog.get_logger()

# The most looked-up documents, warmed by prefetch_popular()
POPULAR_RESOURCES: tuple[ResourceIdentifier, ...] = tuple(
    ResourceIdentifier(provider="aws", kind=kind, name=name)
    for kind, name in [
        ("resource", "aws_s3_bucket"),
        ("resource", "aws_instance"),
        ("resource", "aws_vpc"),
        ("resource", "aws_subnet"),
        ("resource", "aws_security_group"),
        ("data_source", "aws_ami"),
        ("data_source", "aws_vpc"),
        ("data_source", "aws_availability_zones"),
    ]
)


def _parse_kind(kind: ResourceKind | str) -> ResourceKind:
    try:
        return ResourceKind.parse(kind)
    except ValueError:
        raise TerraDocsError(
            code=ErrorCode.INVALID_INPUT,
            message=f"Invalid kind: {kind!r}",
            suggestion="Use 'resource' or 'data_source' (alias 'data').",
            recoverable=False,
        ) from None


@dataclass(frozen=True)
class LookupResult:
    """Outcome delivered to callback consumers: a record or an error, never both."""

    success: bool
    record: DocumentRecord | None = None
    error: TerraDocsError | None = None


class DocsService:
    def __init__(self, state: AppState) -> None:
        self._state = state
        self._background: set[asyncio.Task[Any]] = set()

    @property
    def state(self) -> AppState:
        return self._state

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    async def fetch_docs(
        self,
        kind: ResourceKind | str,
        name: str,
        *,
        provider: str | None = None,
    ) -> DocumentRecord:
        """Return documentation for a resource. Raises TerraDocsError on failure."""
        kind = _parse_kind(kind)
        module = self._state.registry.lookup(kind, name, provider=provider)
        return await module.get_docs(kind, name)

    def get_docs(
        self,
        kind: ResourceKind | str,
        name: str,
        callback: Callable[[LookupResult], Any] | None = None,
        *,
        provider: str | None = None,
    ) -> asyncio.Task[LookupResult]:
        """Schedule a lookup and invoke ``callback`` with its LookupResult.

        The callback may be a plain function or a coroutine function. The
        returned task resolves to the same LookupResult.
        """

        async def run() -> LookupResult:
            try:
                record = await self.fetch_docs(kind, name, provider=provider)
                result = LookupResult(success=True, record=record)
            except TerraDocsError as exc:
                log.info("lookup_failed", name=name, code=exc.code, message=exc.message)
                result = LookupResult(success=False, error=exc)
            if callback is not None:
                outcome = callback(result)
                if inspect.isawaitable(outcome):
                    await outcome
            return result

        return self._spawn(run(), name=f"get_docs:{name}")

    async def get_examples(
        self,
        kind: ResourceKind | str,
        name: str,
        *,
        provider: str | None = None,
    ) -> list[ExampleBlock]:
        kind = _parse_kind(kind)
        module = self._state.registry.lookup(kind, name, provider=provider)
        return await module.get_examples(kind, name)

    async def insert_example(
        self,
        kind: ResourceKind | str,
        name: str,
        *,
        index: int = 0,
        provider: str | None = None,
    ) -> str:
        """Return the source of one example, ready to insert into a buffer.

        Index 0 is the primary example.
        """
        example, _total = await self.get_example(kind, name, index=index, provider=provider)
        return example.source

    async def get_example(
        self,
        kind: ResourceKind | str,
        name: str,
        *,
        index: int = 0,
        provider: str | None = None,
    ) -> tuple[ExampleBlock, int]:
        """Return one example and the total number of examples."""
        examples = await self.get_examples(kind, name, provider=provider)
        if not examples:
            raise TerraDocsError(
                code=ErrorCode.NOT_FOUND,
                message=f"No Terraform examples found for '{name}'",
                suggestion="Read the argument reference with get_resource_docs instead.",
                recoverable=False,
            )
        if not 0 <= index < len(examples):
            raise TerraDocsError(
                code=ErrorCode.INVALID_INPUT,
                message=f"Example index {index} out of range for '{name}'",
                suggestion=f"Use an index between 0 and {len(examples) - 1}.",
                recoverable=False,
            )
        return examples[index], len(examples)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(
        self,
        query: str,
        *,
        kind: ResourceKind | str | None = None,
        provider: str | None = None,
        limit: int | None = None,
    ) -> list[ResourceIdentifier]:
        wanted = _parse_kind(kind) if kind is not None else None
        return self._state.search_index().search(
            query, kind=wanted, provider=provider, limit=limit
        )

    # ------------------------------------------------------------------
    # Background prefetch
    # ------------------------------------------------------------------

    def prefetch(self, identifiers: Iterable[ResourceIdentifier]) -> list[asyncio.Task[Any]]:
        """Warm the cache in the background. Failures are logged, not raised."""
        return [
            self._spawn(self._prefetch_one(identifier), name=f"prefetch:{identifier.key}")
            for identifier in identifiers
        ]

    def prefetch_popular(self) -> list[asyncio.Task[Any]]:
        """Prefetch POPULAR_RESOURCES for every provider that is registered."""
        wanted = [i for i in POPULAR_RESOURCES if i.provider in self._state.registry]
        log.info("prefetch_popular", count=len(wanted))
        return self.prefetch(wanted)

    async def _prefetch_one(self, identifier: ResourceIdentifier) -> DocumentRecord | None:
        try:
            return await self.fetch_docs(
                identifier.kind, identifier.name, provider=identifier.provider
            )
        except TerraDocsError:
            log.warning("prefetch_failed", identifier=identifier.key, exc_info=True)
            return None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def invalidate(self, provider: str) -> int:
        """Forget one provider's documents and resolved version."""
        self._state.resolver.invalidate(provider)
        return await self._state.cache.invalidate(provider)

    async def reset(self) -> None:
        await self._state.reset()

    def stats(self) -> CacheStats:
        return self._state.cache.stats()

    def _spawn(self, coro: Any, *, name: str) -> asyncio.Task[Any]:
        task = asyncio.create_task(coro, name=name)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task
