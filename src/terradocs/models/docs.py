from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator


class ResourceKind(StrEnum):
    RESOURCE = "resource"
    DATA_SOURCE = "data_source"

    @classmethod
    def parse(cls, value: str | ResourceKind) -> ResourceKind:
        """Accept ``resource``, ``data_source`` and the short ``data`` alias."""
        if isinstance(value, ResourceKind):
            return value
        normalised = value.strip().lower().replace("-", "_")
        if normalised == "data":
            return cls.DATA_SOURCE
        return cls(normalised)

    @property
    def docs_dir(self) -> str:
        """Directory letter used by provider repositories: ``r`` or ``d``."""
        return "r" if self is ResourceKind.RESOURCE else "d"


class ResourceIdentifier(BaseModel):
    """Uniquely names a documentation target. Used as cache and index key."""

    model_config = ConfigDict(frozen=True)

    provider: str
    kind: ResourceKind
    name: str  # Full Terraform type name, e.g. "aws_s3_bucket"

    @field_validator("kind", mode="before")
    @classmethod
    def validate_kind(cls, v: object) -> object:
        if isinstance(v, str):
            return ResourceKind.parse(v)
        return v

    @property
    def short_name(self) -> str:
        """Name without the provider prefix: ``aws_s3_bucket`` → ``s3_bucket``."""
        prefix = f"{self.provider}_"
        return self.name[len(prefix) :] if self.name.startswith(prefix) else self.name

    @property
    def key(self) -> str:
        return f"{self.provider}/{self.kind}/{self.name}"

    def __str__(self) -> str:
        return self.key


class ArgumentDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: str | None = None  # Inferred from qualifiers, e.g. "String", "Block"
    required: bool = False
    description: str = ""
    default: str | None = None
    forces_new: bool = False


class AttributeDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""


class ExampleBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    language: str
    source: str  # Verbatim fenced block body, without the fences
    title: str | None = None


class DocumentRecord(BaseModel):
    """Structured documentation for one resource or data source.

    Immutable: a refetch builds a new record that replaces the cached one.
    """

    model_config = ConfigDict(frozen=True)

    identifier: ResourceIdentifier
    title: str
    subcategory: str | None = None
    description: str = ""
    arguments: tuple[ArgumentDefinition, ...] = ()
    attributes: tuple[AttributeDefinition, ...] = ()
    examples: tuple[ExampleBlock, ...] = ()
    fetched_at: datetime
    source_version: str
    source_url: str

    @property
    def primary_example(self) -> ExampleBlock | None:
        return self.examples[0] if self.examples else None
