"""Shared test fixtures for the terradocs test suite."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import aiosqlite
import pytest

from terradocs.cache import Cache
from terradocs.config import Settings
from terradocs.models.docs import DocumentRecord, ExampleBlock, ResourceIdentifier
from terradocs.models.registry import CatalogEntry, ProviderSpec
from terradocs.transport import StubTransport

FIXTURES_DIR = Path(__file__).parent / "fixtures"

REGISTRY_BASE = "https://registry.terraform.io"
DOCS_BASE = "https://raw.githubusercontent.com"
AWS_VERSIONS_URL = f"{REGISTRY_BASE}/v1/providers/hashicorp/aws/versions"
AWS_DOCS_ROOT = f"{DOCS_BASE}/hashicorp/terraform-provider-aws/v5.31.0/website/docs"
S3_BUCKET_URL = f"{AWS_DOCS_ROOT}/r/s3_bucket.html.markdown"
AMI_URL = f"{AWS_DOCS_ROOT}/d/ami.html.markdown"


def load_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


def make_record(
    name: str = "aws_s3_bucket",
    *,
    provider: str = "aws",
    kind: str = "resource",
    version: str = "5.31.0",
    examples: tuple[ExampleBlock, ...] = (),
) -> DocumentRecord:
    return DocumentRecord(
        identifier=ResourceIdentifier(provider=provider, kind=kind, name=name),
        title=f"Resource: {name}",
        description=f"Provides a {name} resource.",
        examples=examples,
        fetched_at=datetime.now(UTC),
        source_version=version,
        source_url=f"https://example.com/{name}",
    )


class StaticProvider:
    """Minimal ProviderModule serving records from a dict. No network."""

    def __init__(
        self,
        name: str,
        catalog: list[CatalogEntry],
        records: dict[str, DocumentRecord] | None = None,
    ) -> None:
        self._name = name
        self._catalog = catalog
        self.records = records or {}
        self.calls: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    def claims(self, name: str) -> bool:
        return name.startswith(f"{self._name}_")

    def catalog(self) -> list[CatalogEntry]:
        return list(self._catalog)

    def list_resources(self) -> list[ResourceIdentifier]:
        return [
            ResourceIdentifier(provider=self._name, kind=c.kind, name=c.name)
            for c in self._catalog
        ]

    async def get_docs(self, kind: str, name: str) -> DocumentRecord:
        self.calls.append(name)
        return self.records[name]

    async def get_examples(self, kind: str, name: str) -> list[ExampleBlock]:
        return list((await self.get_docs(kind, name)).examples)


@pytest.fixture()
def settings() -> Settings:
    return Settings()


@pytest.fixture()
def stub_transport() -> StubTransport:
    return StubTransport()


@pytest.fixture()
def aws_transport(stub_transport: StubTransport) -> StubTransport:
    """Stub serving the AWS version list and two documentation pages."""
    stub_transport.set_response(AWS_VERSIONS_URL, load_fixture("aws_versions.json"))
    stub_transport.set_response(S3_BUCKET_URL, load_fixture("aws_s3_bucket.html.markdown"))
    stub_transport.set_response(AMI_URL, load_fixture("aws_ami.html.markdown"))
    return stub_transport


@pytest.fixture()
async def cache() -> Cache:
    async with aiosqlite.connect(":memory:") as db:
        cache = Cache(db)
        await cache.init_db()
        yield cache


@pytest.fixture()
def aws_spec() -> ProviderSpec:
    return ProviderSpec(name="aws", display_name="Amazon Web Services", prefix="aws")


@pytest.fixture()
def sample_catalog() -> list[CatalogEntry]:
    return [
        CatalogEntry(kind="resource", name="aws_s3_bucket", category="S3"),
        CatalogEntry(kind="resource", name="aws_s3_bucket_policy", category="S3"),
        CatalogEntry(kind="resource", name="aws_instance", category="EC2"),
        CatalogEntry(kind="data_source", name="aws_instance", category="EC2"),
        CatalogEntry(kind="data_source", name="aws_ami", category="EC2"),
    ]
