"""Built-in provider module backed by the Terraform registry and GitHub docs."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from terradocs.errors import ErrorCode, TerraDocsError
from terradocs.models.docs import ResourceIdentifier, ResourceKind
from terradocs.parser import parse_document

if TYPE_CHECKING:
    from collections.abc import Iterable

    from terradocs.cache import Cache
    from terradocs.fetcher import DocumentFetcher
    from terradocs.models.docs import DocumentRecord, ExampleBlock
    from terradocs.models.registry import CatalogEntry, ProviderSpec
    from terradocs.versions import VersionResolver

log = structlog.get_logger()


class TerraformProvider:
    """A ProviderModule for one HashiCorp-style provider repository.

    The catalog drives search and listing. Documentation lookups are not
    limited to it: any name carrying the provider prefix is fetched.
    """

    def __init__(
        self,
        spec: ProviderSpec,
        catalog: Iterable[CatalogEntry],
        *,
        resolver: VersionResolver,
        fetcher: DocumentFetcher,
        cache: Cache,
    ) -> None:
        self._spec = spec
        self._catalog = list(catalog)
        self._resolver = resolver
        self._fetcher = fetcher
        self._cache = cache

    @property
    def name(self) -> str:
        return self._spec.name

    @property
    def spec(self) -> ProviderSpec:
        return self._spec

    def claims(self, name: str) -> bool:
        return name.startswith(f"{self._spec.prefix}_")

    def catalog(self) -> list[CatalogEntry]:
        return list(self._catalog)

    def list_resources(self) -> list[ResourceIdentifier]:
        return [
            ResourceIdentifier(provider=self.name, kind=entry.kind, name=entry.name)
            for entry in self._catalog
        ]

    def identifier(self, kind: ResourceKind | str, name: str) -> ResourceIdentifier:
        if not self.claims(name):
            raise TerraDocsError(
                code=ErrorCode.NOT_FOUND,
                message=f"'{name}' does not belong to provider '{self.name}'",
                suggestion=f"Resource names for this provider start with '{self._spec.prefix}_'.",
                recoverable=False,
            )
        return ResourceIdentifier(provider=self.name, kind=ResourceKind.parse(kind), name=name)

    async def get_docs(self, kind: ResourceKind | str, name: str) -> DocumentRecord:
        """Resolve the provider version, then serve from cache or fetch and parse."""
        identifier = self.identifier(kind, name)
        resolved = await self._resolver.resolve(self._spec)
        await self._cache.bind_version(self.name, resolved.version)

        async def load() -> DocumentRecord:
            url, body = await self._fetcher.fetch(self._spec, identifier, resolved.version)
            return parse_document(body, identifier, version=resolved.version, source_url=url)

        return await self._cache.get_or_load(identifier, resolved.version, load)

    async def get_examples(self, kind: ResourceKind | str, name: str) -> list[ExampleBlock]:
        record = await self.get_docs(kind, name)
        return list(record.examples)

    def __repr__(self) -> str:
        return f"TerraformProvider(name={self.name!r}, resources={len(self._catalog)})"
