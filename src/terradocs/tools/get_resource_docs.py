"""Tool handler for get_resource_docs.

Receives AppState, routes the lookup through DocsService (version
resolution, cache, fetch, parse), and returns a structured dict. No MCP or
FastMCP imports; server.py handles the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from terradocs.errors import ErrorCode, TerraDocsError
from terradocs.models.tools import GetResourceDocsInput, GetResourceDocsOutput
from terradocs.service import DocsService

if TYPE_CHECKING:
    from terradocs.state import AppState


async def handle(
    name: str,
    state: AppState,
    *,
    kind: str = "resource",
    provider: str | None = None,
) -> dict:
    """Handle a get_resource_docs tool call."""
    log = structlog.get_logger().bind(tool="get_resource_docs", name=name, kind=kind)
    log.info("handler_called")

    try:
        validated = GetResourceDocsInput(kind=kind, name=name, provider=provider)
    except ValueError as exc:
        raise TerraDocsError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide a Terraform type name such as 'aws_s3_bucket' and a valid kind.",
            recoverable=False,
        ) from exc

    record = await DocsService(state).fetch_docs(
        validated.kind, validated.name, provider=validated.provider
    )
    log.info(
        "docs_returned",
        version=record.source_version,
        arguments=len(record.arguments),
        examples=len(record.examples),
    )

    output = GetResourceDocsOutput(
        provider=record.identifier.provider,
        kind=record.identifier.kind,
        name=record.identifier.name,
        title=record.title,
        subcategory=record.subcategory,
        description=record.description,
        arguments=list(record.arguments),
        attributes=list(record.attributes),
        examples=list(record.examples),
        source_version=record.source_version,
        source_url=record.source_url,
        fetched_at=record.fetched_at,
    )
    return output.model_dump(mode="json")
