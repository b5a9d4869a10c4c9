"""Unit tests for terradocs.fetcher."""

from __future__ import annotations

import pytest

from terradocs.config import DocsSettings
from terradocs.errors import ErrorCode, TerraDocsError
from terradocs.fetcher import DocumentFetcher, docs_url
from terradocs.models.docs import ResourceIdentifier
from terradocs.models.registry import ProviderSpec
from terradocs.transport import StubTransport

from tests.conftest import AMI_URL, DOCS_BASE, S3_BUCKET_URL, load_fixture

S3 = ResourceIdentifier(provider="aws", kind="resource", name="aws_s3_bucket")
AMI = ResourceIdentifier(provider="aws", kind="data_source", name="aws_ami")


def _fetcher(transport: StubTransport) -> DocumentFetcher:
    return DocumentFetcher(transport, DocsSettings())


class TestDocsUrl:
    def test_resource_url(self, aws_spec: ProviderSpec) -> None:
        assert docs_url(DOCS_BASE, aws_spec, S3, "5.31.0") == S3_BUCKET_URL

    def test_data_source_url(self, aws_spec: ProviderSpec) -> None:
        assert docs_url(DOCS_BASE, aws_spec, AMI, "5.31.0") == AMI_URL

    def test_trailing_slash_on_base(self, aws_spec: ProviderSpec) -> None:
        assert docs_url(f"{DOCS_BASE}/", aws_spec, S3, "5.31.0") == S3_BUCKET_URL

    def test_branch_ref_template(self) -> None:
        spec = ProviderSpec(
            name="kubernetes", display_name="Kubernetes", prefix="kubernetes", ref_template="main"
        )
        identifier = ResourceIdentifier(
            provider="kubernetes", kind="resource", name="kubernetes_namespace"
        )
        url = docs_url(DOCS_BASE, spec, identifier, "2.24.0")
        assert url == (
            f"{DOCS_BASE}/hashicorp/terraform-provider-kubernetes/main"
            "/website/docs/r/namespace.html.markdown"
        )

    def test_build_url_uses_configured_base(
        self, stub_transport: StubTransport, aws_spec: ProviderSpec
    ) -> None:
        fetcher = DocumentFetcher(stub_transport, DocsSettings(base_url="https://mirror.test"))
        url = fetcher.build_url(aws_spec, S3, "5.31.0")
        assert url.startswith("https://mirror.test/hashicorp/terraform-provider-aws/v5.31.0/")


class TestFetch:
    async def test_returns_url_and_body(
        self, aws_transport: StubTransport, aws_spec: ProviderSpec
    ) -> None:
        url, body = await _fetcher(aws_transport).fetch(aws_spec, S3, "5.31.0")
        assert url == S3_BUCKET_URL
        assert body == load_fixture("aws_s3_bucket.html.markdown")

    async def test_network_error(
        self, stub_transport: StubTransport, aws_spec: ProviderSpec
    ) -> None:
        stub_transport.set_failure(S3_BUCKET_URL, "connection reset")
        with pytest.raises(TerraDocsError) as exc_info:
            await _fetcher(stub_transport).fetch(aws_spec, S3, "5.31.0")
        assert exc_info.value.code == ErrorCode.NETWORK_ERROR
        assert exc_info.value.recoverable is True
        assert "connection reset" in exc_info.value.message

    async def test_404_is_permanent(
        self, stub_transport: StubTransport, aws_spec: ProviderSpec
    ) -> None:
        stub_transport.set_response(S3_BUCKET_URL, "404: Not Found", status_code=404)
        with pytest.raises(TerraDocsError) as exc_info:
            await _fetcher(stub_transport).fetch(aws_spec, S3, "5.31.0")
        assert exc_info.value.code == ErrorCode.FETCH_FAILED
        assert exc_info.value.recoverable is False
        assert "aws_s3_bucket" in exc_info.value.suggestion
        assert exc_info.value.url == S3_BUCKET_URL

    @pytest.mark.parametrize("status", [429, 500, 502, 503])
    async def test_transient_statuses_recoverable(
        self, stub_transport: StubTransport, aws_spec: ProviderSpec, status: int
    ) -> None:
        stub_transport.set_response(S3_BUCKET_URL, "try later", status_code=status)
        with pytest.raises(TerraDocsError) as exc_info:
            await _fetcher(stub_transport).fetch(aws_spec, S3, "5.31.0")
        assert exc_info.value.code == ErrorCode.FETCH_FAILED
        assert exc_info.value.recoverable is True

    async def test_403_is_permanent(
        self, stub_transport: StubTransport, aws_spec: ProviderSpec
    ) -> None:
        stub_transport.set_response(S3_BUCKET_URL, "forbidden", status_code=403)
        with pytest.raises(TerraDocsError) as exc_info:
            await _fetcher(stub_transport).fetch(aws_spec, S3, "5.31.0")
        assert exc_info.value.recoverable is False
