"""Tool handler for search_resources.

Receives AppState, delegates to the search index, and returns a structured
dict. No MCP or FastMCP imports; server.py handles the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from terradocs.errors import ErrorCode, TerraDocsError
from terradocs.models.tools import ResourceMatch, SearchResourcesInput, SearchResourcesOutput
from terradocs.service import DocsService

if TYPE_CHECKING:
    from terradocs.state import AppState


async def handle(
    query: str,
    state: AppState,
    *,
    kind: str | None = None,
    provider: str | None = None,
    limit: int = 20,
) -> dict:
    """Handle a search_resources tool call."""
    log = structlog.get_logger().bind(tool="search_resources", query=query)
    log.info("handler_called")

    try:
        validated = SearchResourcesInput(query=query, kind=kind, provider=provider, limit=limit)
    except ValueError as exc:
        raise TerraDocsError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide a query (max 500 chars), kind 'resource' or 'data_source'.",
            recoverable=False,
        ) from exc

    index = state.search_index()
    identifiers = DocsService(state).search(
        validated.query,
        kind=validated.kind,
        provider=validated.provider,
        limit=min(validated.limit, state.settings.search.max_results),
    )

    matches: list[ResourceMatch] = []
    for identifier in identifiers:
        entry = index.entry(identifier)
        matches.append(
            ResourceMatch(
                provider=identifier.provider,
                kind=identifier.kind,
                name=identifier.name,
                category=entry.category if entry else "",
                description=entry.description if entry else "",
            )
        )
    log.info("search_complete", match_count=len(matches))

    output = SearchResourcesOutput(matches=matches)
    return output.model_dump(mode="json")
