"""Provider version resolution against the Terraform registry.

Fetches the published version list for a provider, drops channels the policy
excludes, and selects the highest semantic version. Resolved versions are
kept in memory for ``version_ttl_hours`` and can be invalidated explicitly.
"""

from __future__ import annotations

import asyncio
import json
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Literal

import structlog
from packaging.version import InvalidVersion, Version

from terradocs.errors import ErrorCode, TerraDocsError
from terradocs.models.registry import ProviderVersion

if TYPE_CHECKING:
    from collections.abc import Iterable

    from terradocs.config import RegistrySettings
    from terradocs.models.registry import ProviderSpec
    from terradocs.protocols import Transport

log = structlog.get_logger()

Channel = Literal["stable", "prerelease"]


def versions_url(base_url: str, spec: ProviderSpec) -> str:
    return f"{base_url.rstrip('/')}/v1/providers/{spec.org}/{spec.name}/versions"


def select_version(raw_versions: Iterable[str], channel: Channel = "stable") -> str | None:
    """Return the highest version allowed by the channel policy, or None.

    Semantic-version ordering is authoritative. Under ``stable`` every
    pre-release and dev release is excluded. Strings that do not parse as
    versions are skipped.
    """
    best: tuple[Version, str] | None = None
    for raw in raw_versions:
        try:
            parsed = Version(raw)
        except InvalidVersion:
            log.debug("version_unparseable", version=raw)
            continue
        if channel == "stable" and (parsed.is_prerelease or parsed.is_devrelease):
            continue
        if best is None or parsed > best[0]:
            best = (parsed, raw)
    return best[1] if best else None


def _retrieve_exception(task: asyncio.Task[ProviderVersion]) -> None:
    # Marks the exception retrieved when every waiter was cancelled.
    if not task.cancelled() and task.exception() is not None:
        log.debug("version_resolve_failed", task=task.get_name(), error=str(task.exception()))


def _extract_versions(body: str) -> list[str]:
    data = json.loads(body)
    entries = data["versions"]
    if not isinstance(entries, list):
        raise ValueError("'versions' must be a list")
    raw: list[str] = []
    for entry in entries:
        value = entry.get("version") if isinstance(entry, dict) else None
        if isinstance(value, str) and value:
            raw.append(value)
    return raw


class VersionResolver:
    """Resolves and caches the documentation version for each provider."""

    def __init__(self, transport: Transport, settings: RegistrySettings) -> None:
        self._transport = transport
        self._settings = settings
        self._resolved: dict[str, ProviderVersion] = {}
        self._in_flight: dict[str, asyncio.Task[ProviderVersion]] = {}

    def cached(self, provider: str) -> ProviderVersion | None:
        """Return the resolved version if present and within its TTL."""
        resolved = self._resolved.get(provider)
        if resolved is None:
            return None
        if resolved.channel == "pinned":
            return resolved
        ttl = timedelta(hours=self._settings.version_ttl_hours)
        if datetime.now(UTC) - resolved.resolved_at >= ttl:
            return None
        return resolved

    def pin(self, provider: str, version: str) -> ProviderVersion:
        """Fix a provider to an explicit version, bypassing the registry."""
        pinned = ProviderVersion(
            provider=provider,
            version=version.removeprefix("v"),
            channel="pinned",
            resolved_at=datetime.now(UTC),
        )
        self._resolved[provider] = pinned
        log.info("version_pinned", provider=provider, version=pinned.version)
        return pinned

    def invalidate(self, provider: str) -> None:
        self._resolved.pop(provider, None)
        self._in_flight.pop(provider, None)

    def invalidate_all(self) -> None:
        self._resolved.clear()
        self._in_flight.clear()

    async def resolve(self, spec: ProviderSpec) -> ProviderVersion:
        cached = self.cached(spec.name)
        if cached is not None:
            return cached

        configured = self._settings.pinned_versions.get(spec.name)
        if configured:
            return self.pin(spec.name, configured)

        # One registry round-trip per provider, however many callers are waiting.
        # Every waiter observes the same version or the same exception.
        task = self._in_flight.get(spec.name)
        if task is None:
            task = asyncio.create_task(self._resolve_once(spec), name=f"resolve:{spec.name}")
            task.add_done_callback(_retrieve_exception)
            self._in_flight[spec.name] = task
        else:
            log.debug("version_resolve_coalesced", provider=spec.name)
        return await asyncio.shield(task)

    async def _resolve_once(self, spec: ProviderSpec) -> ProviderVersion:
        try:
            resolved = await self._fetch(spec)
            # Not remembered when invalidated while the registry call ran.
            if self._in_flight.get(spec.name) is asyncio.current_task():
                self._resolved[spec.name] = resolved
            return resolved
        finally:
            if self._in_flight.get(spec.name) is asyncio.current_task():
                del self._in_flight[spec.name]

    async def _fetch(self, spec: ProviderSpec) -> ProviderVersion:
        url = versions_url(self._settings.base_url, spec)
        channel: Channel = self._settings.channel
        result = await self._transport.get(url)

        if not result.success or result.payload is None:
            raise TerraDocsError(
                code=ErrorCode.NETWORK_ERROR,
                message=f"Network error fetching {url}: {result.error}",
                suggestion="The Terraform registry may be unreachable. Check your connection.",
                recoverable=True,
                url=url,
            )

        if result.payload.status_code != 200:
            raise TerraDocsError(
                code=ErrorCode.FETCH_FAILED,
                message=f"HTTP {result.payload.status_code} fetching {url}",
                suggestion=f"Check that '{spec.org}/{spec.name}' exists in the registry.",
                recoverable=result.payload.status_code >= 500,
                url=url,
            )

        try:
            raw_versions = _extract_versions(result.payload.body)
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise TerraDocsError(
                code=ErrorCode.FETCH_FAILED,
                message=f"Invalid registry response from {url}: {exc}",
                suggestion="The registry returned an unexpected payload. Try again later.",
                recoverable=True,
                url=url,
            ) from exc

        selected = select_version(raw_versions, channel)
        if selected is None:
            raise TerraDocsError(
                code=ErrorCode.NO_VERSIONS_AVAILABLE,
                message=f"No {channel} versions available for provider '{spec.name}'",
                suggestion="Set registry.channel to 'prerelease' or pin a version explicitly.",
                recoverable=False,
                url=url,
            )

        log.info(
            "version_resolved",
            provider=spec.name,
            version=selected,
            channel=channel,
            candidates=len(raw_versions),
        )
        return ProviderVersion(
            provider=spec.name,
            version=selected,
            channel=channel,
            resolved_at=datetime.now(UTC),
        )
