"""Tool handler for get_resource_example."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from terradocs.errors import ErrorCode, TerraDocsError
from terradocs.models.tools import GetResourceExampleInput, GetResourceExampleOutput
from terradocs.service import DocsService

if TYPE_CHECKING:
    from terradocs.state import AppState


async def handle(
    name: str,
    state: AppState,
    *,
    kind: str = "resource",
    index: int = 0,
    provider: str | None = None,
) -> dict:
    """Handle a get_resource_example tool call."""
    log = structlog.get_logger().bind(tool="get_resource_example", name=name, index=index)
    log.info("handler_called")

    try:
        validated = GetResourceExampleInput(kind=kind, name=name, index=index, provider=provider)
    except ValueError as exc:
        raise TerraDocsError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide a Terraform type name, a valid kind and a non-negative index.",
            recoverable=False,
        ) from exc

    example, total = await DocsService(state).get_example(
        validated.kind, validated.name, index=validated.index, provider=validated.provider
    )

    output = GetResourceExampleOutput(
        provider=state.registry.lookup(
            validated.kind, validated.name, provider=validated.provider
        ).name,
        kind=validated.kind,
        name=validated.name,
        index=validated.index,
        total=total,
        language=example.language,
        title=example.title,
        source=example.source,
    )
    return output.model_dump(mode="json")
