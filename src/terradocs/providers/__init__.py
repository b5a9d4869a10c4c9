from __future__ import annotations

from terradocs.models.registry import CatalogEntry, ProviderSpec
from terradocs.providers import aws, azurerm, google, hashicorp, kubernetes
from terradocs.providers.base import TerraformProvider

# name → (spec, catalog) for every provider shipped with the package
BUILTIN: dict[str, tuple[ProviderSpec, tuple[CatalogEntry, ...]]] = {
    spec.name: (spec, catalog)
    for spec, catalog in (
        *((module.SPEC, module.CATALOG) for module in (aws, azurerm, google, kubernetes)),
        *hashicorp.PROVIDERS,
    )
}

__all__ = ["BUILTIN", "TerraformProvider"]
