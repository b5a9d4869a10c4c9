from __future__ import annotations

from terradocs.models.cache import CacheEntry, CacheStats
from terradocs.models.docs import (
    ArgumentDefinition,
    AttributeDefinition,
    DocumentRecord,
    ExampleBlock,
    ResourceIdentifier,
    ResourceKind,
)
from terradocs.models.registry import CatalogEntry, IndexEntry, ProviderSpec, ProviderVersion
from terradocs.models.tools import (
    GetResourceDocsInput,
    GetResourceDocsOutput,
    GetResourceExampleInput,
    GetResourceExampleOutput,
    ResourceMatch,
    SearchResourcesInput,
    SearchResourcesOutput,
)

__all__ = [
    # docs
    "ResourceKind",
    "ResourceIdentifier",
    "ArgumentDefinition",
    "AttributeDefinition",
    "ExampleBlock",
    "DocumentRecord",
    # registry
    "ProviderSpec",
    "ProviderVersion",
    "CatalogEntry",
    "IndexEntry",
    # cache
    "CacheEntry",
    "CacheStats",
    # tools
    "SearchResourcesInput",
    "SearchResourcesOutput",
    "ResourceMatch",
    "GetResourceDocsInput",
    "GetResourceDocsOutput",
    "GetResourceExampleInput",
    "GetResourceExampleOutput",
]
