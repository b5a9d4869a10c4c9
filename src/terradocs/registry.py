"""Provider registry: the extension point for documentation sources.

Any object satisfying ``terradocs.protocols.ProviderModule`` can be
registered. The built-in providers are TerraformProvider instances built from
the catalogs in ``terradocs.providers``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from terradocs.errors import ErrorCode, TerraDocsError
from terradocs.index import entries_for
from terradocs.models.docs import ResourceIdentifier, ResourceKind
from terradocs.protocols import ProviderModule
from terradocs.providers import BUILTIN, TerraformProvider

if TYPE_CHECKING:
    from collections.abc import Iterator

    from terradocs.cache import Cache
    from terradocs.config import Settings
    from terradocs.fetcher import DocumentFetcher
    from terradocs.models.registry import IndexEntry
    from terradocs.versions import VersionResolver

log = structlog.get_logger()


class ProviderRegistry:
    """Name-keyed collection of provider modules in registration order."""

    def __init__(self) -> None:
        self._providers: dict[str, ProviderModule] = {}
        self._revision = 0

    def register(self, provider: ProviderModule, *, replace: bool = False) -> None:
        if not isinstance(provider, ProviderModule):
            raise TypeError(f"{provider!r} does not implement the ProviderModule protocol")
        if provider.name in self._providers and not replace:
            raise ValueError(f"Provider '{provider.name}' is already registered")
        self._providers[provider.name] = provider
        self._revision += 1
        log.info("provider_registered", provider=provider.name)

    def unregister(self, name: str) -> bool:
        removed = self._providers.pop(name, None) is not None
        if removed:
            self._revision += 1
            log.info("provider_unregistered", provider=name)
        return removed

    @property
    def revision(self) -> int:
        """Incremented on every change; a stale search index compares against it."""
        return self._revision

    def get(self, name: str) -> ProviderModule | None:
        return self._providers.get(name)

    def names(self) -> list[str]:
        return list(self._providers)

    def __iter__(self) -> Iterator[ProviderModule]:
        return iter(list(self._providers.values()))

    def __len__(self) -> int:
        return len(self._providers)

    def __contains__(self, name: object) -> bool:
        return name in self._providers

    def claimed_by(self, name: str) -> ProviderModule | None:
        for provider in self._providers.values():
            if provider.claims(name):
                return provider
        return None

    def lookup(
        self,
        kind: ResourceKind | str,
        name: str,
        *,
        provider: str | None = None,
    ) -> ProviderModule:
        """Find the provider documenting a resource.

        Catalog membership wins, then prefix claims. Raises NOT_FOUND when
        no registered provider owns the name.
        """
        kind = ResourceKind.parse(kind)
        if provider is not None:
            module = self._providers.get(provider)
            if module is None:
                raise TerraDocsError(
                    code=ErrorCode.NOT_FOUND,
                    message=f"Provider '{provider}' is not registered",
                    suggestion=f"Registered providers: {', '.join(self.names()) or 'none'}.",
                    recoverable=False,
                )
            return module

        for module in self._providers.values():
            identifier = ResourceIdentifier(provider=module.name, kind=kind, name=name)
            if identifier in module.list_resources():
                return module

        module = self.claimed_by(name)
        if module is None:
            raise TerraDocsError(
                code=ErrorCode.NOT_FOUND,
                message=f"No registered provider documents '{name}'",
                suggestion="Use search_resources to find available resource names.",
                recoverable=False,
            )
        return module

    def index_entries(self) -> list[IndexEntry]:
        entries: list[IndexEntry] = []
        for provider in self._providers.values():
            entries.extend(entries_for(provider))
        return entries


def build_default_registry(
    settings: Settings,
    *,
    resolver: VersionResolver,
    fetcher: DocumentFetcher,
    cache: Cache,
) -> ProviderRegistry:
    """Register every built-in provider enabled in settings."""
    registry = ProviderRegistry()
    for name in settings.providers.enabled:
        builtin = BUILTIN.get(name)
        if builtin is None:
            log.warning("provider_unknown", provider=name, available=sorted(BUILTIN))
            continue
        spec, catalog = builtin
        registry.register(
            TerraformProvider(spec, catalog, resolver=resolver, fetcher=fetcher, cache=cache)
        )
    return registry
