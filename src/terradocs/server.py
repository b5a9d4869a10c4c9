"""MCP server entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Create AppState via the FastMCP lifespan context manager
- Register tools
- Start the stdio transport
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from mcp.server.fastmcp import Context, FastMCP
from mcp.types import CallToolResult, TextContent

import terradocs.tools.get_resource_docs as t_get_docs
import terradocs.tools.get_resource_example as t_get_example
import terradocs.tools.search_resources as t_search
from terradocs import __version__
from terradocs.config import Settings
from terradocs.errors import TerraDocsError
from terradocs.service import DocsService
from terradocs.state import AppState, build_state

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # Logs go to stderr; stdout carries the MCP JSON-RPC stream
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncGenerator[AppState, None]:
    """Create and tear down all shared resources for the server's lifetime."""
    settings = Settings()
    _setup_logging(settings)

    log.info("server_starting", version=__version__)

    state = await build_state(settings)

    log.info(
        "server_started",
        version=__version__,
        providers=state.registry.names(),
        cache=settings.cache.database,
        channel=settings.registry.channel,
    )

    prefetches = DocsService(state).prefetch_popular() if settings.cache.preload_popular else []

    try:
        yield state
    finally:
        for task in prefetches:
            task.cancel()
        await state.aclose()
        log.info("server_stopping")


# ---------------------------------------------------------------------------
# FastMCP instance and tool registration
# ---------------------------------------------------------------------------

mcp = FastMCP("terradocs", lifespan=lifespan)
# FastMCP doesn't expose a version kwarg; set it on the underlying Server
# so the MCP initialize handshake reports our version, not the SDK's.
mcp._mcp_server.version = __version__  # pyright: ignore[reportPrivateUsage]


def _serialise_tool_error(error: TerraDocsError) -> CallToolResult:
    """Convert a TerraDocsError to the MCP tool error result envelope."""
    return CallToolResult(
        content=[TextContent(type="text", text=json.dumps(error.to_dict()))],
        isError=True,
    )


def _log_tool_error(tool: str, exc: TerraDocsError) -> None:
    log.warning(
        "tool_error",
        tool=tool,
        code=exc.code,
        message=exc.message,
        recoverable=exc.recoverable,
    )


@mcp.tool()
async def search_resources(
    ctx: Context,
    query: str = "",
    kind: str | None = None,
    provider: str | None = None,
    limit: int = 20,
) -> object:
    """Search Terraform resources and data sources across the built-in providers.

    Matches exact names first, then prefixes, substrings and fuzzy token
    overlap. An empty query lists everything. Filter by kind ('resource' or
    'data_source') or by provider name, e.g. 'aws', 'google' or 'vault'.
    """
    state: AppState = ctx.request_context.lifespan_context
    try:
        return await t_search.handle(query, state, kind=kind, provider=provider, limit=limit)
    except TerraDocsError as exc:
        _log_tool_error("search_resources", exc)
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool="search_resources", exc_info=True)
        raise


@mcp.tool()
async def get_resource_docs(
    name: str,
    ctx: Context,
    kind: str = "resource",
    provider: str | None = None,
) -> object:
    """Fetch structured documentation for a Terraform resource or data source.

    Returns the description, arguments (required flag, default, forces-new),
    exported attributes and HCL examples for the latest stable provider version.
    """
    state: AppState = ctx.request_context.lifespan_context
    try:
        return await t_get_docs.handle(name, state, kind=kind, provider=provider)
    except TerraDocsError as exc:
        _log_tool_error("get_resource_docs", exc)
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool="get_resource_docs", exc_info=True)
        raise


@mcp.tool()
async def get_resource_example(
    name: str,
    ctx: Context,
    kind: str = "resource",
    index: int = 0,
    provider: str | None = None,
) -> object:
    """Return one HCL example for a resource, ready to paste into a .tf file.

    Index 0 is the primary example; the response carries the total count.
    """
    state: AppState = ctx.request_context.lifespan_context
    try:
        return await t_get_example.handle(
            name, state, kind=kind, index=index, provider=provider
        )
    except TerraDocsError as exc:
        _log_tool_error("get_resource_example", exc)
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool="get_resource_example", exc_info=True)
        raise


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
