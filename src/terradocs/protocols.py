"""Protocol interfaces for swappable components.

The pipeline references these protocols, not the concrete implementations.
This allows:
- Tests to drive the pipeline through a StubTransport instead of the network
- Third-party providers to register without subclassing anything
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from terradocs.models.docs import (
        DocumentRecord,
        ExampleBlock,
        ResourceIdentifier,
        ResourceKind,
    )
    from terradocs.models.registry import CatalogEntry
    from terradocs.transport import TransportResult


class Transport(Protocol):
    """Asynchronous HTTP GET returning a (success, payload, error) triple."""

    async def get(self, url: str) -> TransportResult: ...


@runtime_checkable
class ProviderModule(Protocol):
    """Extension point: one documentation source per Terraform provider."""

    @property
    def name(self) -> str: ...

    def claims(self, name: str) -> bool:
        """Return True if this provider documents the given resource type name."""
        ...

    def catalog(self) -> list[CatalogEntry]: ...

    def list_resources(self) -> list[ResourceIdentifier]: ...

    async def get_docs(self, kind: ResourceKind | str, name: str) -> DocumentRecord: ...

    async def get_examples(self, kind: ResourceKind | str, name: str) -> list[ExampleBlock]: ...
