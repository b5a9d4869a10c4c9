"""Documentation fetcher for provider repositories.

Maps a (provider, kind, name, version) tuple onto the raw documentation file
in the provider's source repository and retrieves it through the Transport.
The Fetcher owns no network state: the Transport is injected by the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from terradocs.errors import ErrorCode, TerraDocsError

if TYPE_CHECKING:
    from terradocs.config import DocsSettings
    from terradocs.models.docs import ResourceIdentifier
    from terradocs.models.registry import ProviderSpec
    from terradocs.protocols import Transport

log = structlog.get_logger()

# Status codes worth retrying later; everything else is a permanent miss.
_TRANSIENT_STATUSES = frozenset({408, 425, 429})


def docs_url(
    base_url: str,
    spec: ProviderSpec,
    identifier: ResourceIdentifier,
    version: str,
) -> str:
    """Build the raw documentation URL.

    ``aws_s3_bucket`` at 5.31.0 maps to
    ``{base}/hashicorp/terraform-provider-aws/v5.31.0/website/docs/r/s3_bucket.html.markdown``.
    """
    ref = spec.ref_template.format(version=version)
    return (
        f"{base_url.rstrip('/')}/{spec.org}/{spec.repository}/{ref}"
        f"/website/docs/{identifier.kind.docs_dir}/{identifier.short_name}.html.markdown"
    )


class DocumentFetcher:
    """Retrieves raw documentation content for a resolved provider version."""

    def __init__(self, transport: Transport, settings: DocsSettings) -> None:
        self._transport = transport
        self._base_url = settings.base_url

    def build_url(self, spec: ProviderSpec, identifier: ResourceIdentifier, version: str) -> str:
        return docs_url(self._base_url, spec, identifier, version)

    async def fetch(
        self,
        spec: ProviderSpec,
        identifier: ResourceIdentifier,
        version: str,
    ) -> tuple[str, str]:
        """Fetch the documentation body. Returns ``(url, body)``.

        Raises TerraDocsError with NETWORK_ERROR when the transport fails and
        FETCH_FAILED for any non-200 response.
        """
        url = self.build_url(spec, identifier, version)
        result = await self._transport.get(url)

        if not result.success or result.payload is None:
            raise TerraDocsError(
                code=ErrorCode.NETWORK_ERROR,
                message=f"Network error fetching {url}: {result.error}",
                suggestion="The documentation source may be temporarily unavailable.",
                recoverable=True,
                url=url,
            )

        status = result.payload.status_code
        if status != 200:
            if status == 404:
                suggestion = (
                    f"No documentation for '{identifier.name}' at version {version}. "
                    "Check the resource name and kind."
                )
            else:
                suggestion = "The documentation source may be temporarily unavailable."
            raise TerraDocsError(
                code=ErrorCode.FETCH_FAILED,
                message=f"HTTP {status} fetching {url}",
                suggestion=suggestion,
                recoverable=status >= 500 or status in _TRANSIENT_STATUSES,
                url=url,
            )

        log.info(
            "fetch_complete",
            url=url,
            identifier=identifier.key,
            version=version,
            content_length=len(result.payload.body),
        )
        return url, result.payload.body
