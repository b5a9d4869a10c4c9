from __future__ import annotations

import re
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

from terradocs.models.docs import ResourceIdentifier, ResourceKind


class ProviderSpec(BaseModel):
    """Static description of a provider's registry and documentation layout."""

    model_config = ConfigDict(frozen=True)

    name: str  # Registry name, e.g. "aws"
    org: str = "hashicorp"
    display_name: str
    prefix: str  # Resource type prefix without trailing underscore
    ref_template: str = "v{version}"  # Git ref of the docs; "main" pins a branch

    @field_validator("name", "prefix")
    @classmethod
    def validate_slug(cls, v: str) -> str:
        if not re.match(r"^[a-z0-9][a-z0-9_-]*$", v):
            raise ValueError(f"Invalid provider slug: {v!r}")
        return v

    @property
    def repository(self) -> str:
        return f"terraform-provider-{self.name}"


class CatalogEntry(BaseModel):
    """One row of a provider's static resource catalog."""

    model_config = ConfigDict(frozen=True)

    kind: ResourceKind
    name: str
    category: str = ""
    description: str = ""

    @field_validator("kind", mode="before")
    @classmethod
    def validate_kind(cls, v: object) -> object:
        if isinstance(v, str):
            return ResourceKind.parse(v)
        return v


class ProviderVersion(BaseModel):
    """A resolved provider version. Immutable once fetched."""

    model_config = ConfigDict(frozen=True)

    provider: str
    version: str
    channel: Literal["stable", "prerelease", "pinned"]
    resolved_at: datetime


class IndexEntry(BaseModel):
    """Derived search row. Rebuildable at any time, never persisted."""

    model_config = ConfigDict(frozen=True)

    identifier: ResourceIdentifier
    display_name: str
    tokens: frozenset[str]
    category: str = ""
    description: str = ""
