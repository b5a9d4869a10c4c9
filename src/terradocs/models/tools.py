"""Input/output models for the MCP tool handlers."""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from terradocs.models.docs import (
    ArgumentDefinition,
    AttributeDefinition,
    ExampleBlock,
    ResourceKind,
)

_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9_]*$")


def _validate_kind(v: str) -> ResourceKind:
    try:
        return ResourceKind.parse(v)
    except ValueError:
        raise ValueError(f"Invalid kind: {v!r} (expected 'resource' or 'data_source')") from None


def _validate_name(v: str) -> str:
    v = v.strip().lower()
    if not _NAME_RE.match(v):
        raise ValueError(f"Invalid resource name: {v!r}")
    return v


class SearchResourcesInput(BaseModel):
    query: str = Field(default="", max_length=500)
    kind: ResourceKind | None = None
    provider: str | None = None
    limit: int = Field(default=20, ge=1, le=500)

    @field_validator("kind", mode="before")
    @classmethod
    def validate_kind(cls, v: object) -> object:
        if isinstance(v, str):
            return _validate_kind(v)
        return v


class ResourceMatch(BaseModel):
    provider: str
    kind: ResourceKind
    name: str
    category: str
    description: str


class SearchResourcesOutput(BaseModel):
    matches: list[ResourceMatch]


class GetResourceDocsInput(BaseModel):
    kind: ResourceKind
    name: str
    provider: str | None = None

    @field_validator("kind", mode="before")
    @classmethod
    def validate_kind(cls, v: object) -> object:
        if isinstance(v, str):
            return _validate_kind(v)
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _validate_name(v)


class GetResourceDocsOutput(BaseModel):
    provider: str
    kind: ResourceKind
    name: str
    title: str
    subcategory: str | None
    description: str
    arguments: list[ArgumentDefinition]
    attributes: list[AttributeDefinition]
    examples: list[ExampleBlock]
    source_version: str
    source_url: str
    fetched_at: datetime


class GetResourceExampleInput(GetResourceDocsInput):
    index: int = Field(default=0, ge=0)


class GetResourceExampleOutput(BaseModel):
    provider: str
    kind: ResourceKind
    name: str
    index: int
    total: int
    language: str
    title: str | None
    source: str
