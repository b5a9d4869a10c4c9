"""Integration test fixtures.

Provides a fully wired AppState (in-memory SQLite, all built-in providers)
whose network is a StubTransport serving the AWS fixtures from
tests/conftest.py, plus a baseline environment for subprocess MCP tests.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from terradocs.config import Settings
from terradocs.state import AppState, build_state

if TYPE_CHECKING:
    from pathlib import Path

    from terradocs.transport import StubTransport


@pytest.fixture()
def subprocess_env(tmp_path: Path) -> dict[str, str]:
    """Baseline env dict for subprocess-based MCP integration tests.

    Points the cache at an isolated tmp directory and both upstreams at a
    loopback address the transport refuses, so no test reaches the network.
    """
    env = os.environ.copy()
    env["TERRADOCS__CACHE__DB_PATH"] = str(tmp_path / "docs.db")
    env["TERRADOCS__REGISTRY__BASE_URL"] = "http://127.0.0.1:1"
    env["TERRADOCS__DOCS__BASE_URL"] = "http://127.0.0.1:1"
    env["TERRADOCS__LOGGING__LEVEL"] = "WARNING"
    return env


@pytest.fixture()
async def app_state(aws_transport: StubTransport) -> AppState:
    """Full AppState wired against the stubbed AWS registry and docs."""
    state = await build_state(Settings(), transport=aws_transport)
    yield state
    await state.aclose()
