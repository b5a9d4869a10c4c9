"""HTTP transport for registry and documentation requests.

Every network call in the pipeline goes through a Transport. The contract is
``get(url) -> TransportResult``: any HTTP response is a success carrying its
status code, while network-level failures come back as ``success=False`` with
a readable error. A Transport never raises for those.
"""

from __future__ import annotations

import asyncio
import ipaddress
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from urllib.parse import urljoin, urlparse

import httpx
import structlog

from terradocs import __version__

if TYPE_CHECKING:
    from collections.abc import Iterable

    from terradocs.config import Settings

log = structlog.get_logger()

PRIVATE_NETWORKS: list[ipaddress.IPv4Network | ipaddress.IPv6Network] = [
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("::1/128"),
    ipaddress.ip_network("fc00::/7"),
]


@dataclass(frozen=True)
class TransportPayload:
    body: str
    status_code: int


@dataclass(frozen=True)
class TransportResult:
    success: bool
    payload: TransportPayload | None = None
    error: str | None = None

    @classmethod
    def ok(cls, body: str, status_code: int = 200) -> TransportResult:
        return cls(success=True, payload=TransportPayload(body=body, status_code=status_code))

    @classmethod
    def failed(cls, error: str) -> TransportResult:
        return cls(success=False, error=error)


def build_http_client(settings: Settings) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once at startup."""
    return httpx.AsyncClient(
        follow_redirects=False,
        timeout=httpx.Timeout(settings.transport.timeout_seconds),
        headers={
            "User-Agent": f"terradocs/{__version__}",
            "Accept": "text/markdown, text/plain, application/json;q=0.9, */*;q=0.8",
        },
        limits=httpx.Limits(
            max_connections=10,
            max_keepalive_connections=5,
        ),
    )


def _base_domain(hostname: str) -> str:
    """Return the last two DNS labels: ``'raw.github.com'`` → ``'github.com'``."""
    parts = hostname.rstrip(".").split(".")
    return ".".join(parts[-2:]) if len(parts) >= 2 else hostname


def build_allowlist(urls: Iterable[str], extra_domains: Iterable[str] = ()) -> frozenset[str]:
    """Build the host allowlist from the configured registry and docs base URLs."""
    base_domains: set[str] = {_base_domain(d) for d in extra_domains if d}
    for url in urls:
        hostname = urlparse(url).hostname or ""
        if hostname:
            base_domains.add(_base_domain(hostname))
    return frozenset(base_domains)


def is_url_allowed(url: str, allowlist: frozenset[str]) -> bool:
    """Check whether a URL may be requested.

    Private IP ranges are blocked unconditionally, regardless of allowlist.
    """
    hostname = urlparse(url).hostname or ""

    try:
        addr = ipaddress.ip_address(hostname)
        if any(addr in net for net in PRIVATE_NETWORKS):
            return False
    except ValueError:
        pass  # hostname is a domain name, not an IP

    return _base_domain(hostname) in allowlist


class HttpTransport:
    """httpx-backed Transport with per-hop allowlist checks on redirects."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        allowlist: frozenset[str],
        *,
        max_redirects: int = 3,
    ) -> None:
        self._client = client
        self._allowlist = allowlist
        self._max_redirects = max_redirects

    async def get(self, url: str) -> TransportResult:
        current_url = url

        for hop in range(self._max_redirects + 1):
            if not is_url_allowed(current_url, self._allowlist):
                log.warning("transport_blocked", url=current_url, reason="not_in_allowlist")
                return TransportResult.failed(f"URL not allowed: {current_url}")

            try:
                response = await self._client.get(current_url)
            except httpx.HTTPError as exc:
                log.warning("transport_error", url=current_url, error=str(exc))
                return TransportResult.failed(f"Network error fetching {current_url}: {exc}")

            if response.is_redirect and "location" in response.headers:
                if hop == self._max_redirects:
                    break
                current_url = urljoin(current_url, response.headers["location"])
                continue

            log.debug(
                "transport_response",
                url=url,
                status_code=response.status_code,
                content_length=len(response.content),
            )
            return TransportResult.ok(response.text, response.status_code)

        return TransportResult.failed(f"Too many redirects fetching {url}")


@dataclass
class StubTransport:
    """In-process Transport serving canned responses.

    Supports per-URL simulated latency and forced failure so the pipeline can
    be exercised deterministically without a network. Every request is
    recorded in ``requests``.
    """

    responses: dict[str, TransportPayload] = field(default_factory=dict)
    delays: dict[str, float] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)
    requests: list[str] = field(default_factory=list)

    def set_response(self, url: str, body: str, status_code: int = 200) -> None:
        self.responses[url] = TransportPayload(body=body, status_code=status_code)

    def set_delay(self, url: str, seconds: float) -> None:
        self.delays[url] = seconds

    def set_failure(self, url: str, error: str) -> None:
        self.failures[url] = error

    def clear_failure(self, url: str) -> None:
        self.failures.pop(url, None)

    def request_count(self, url: str) -> int:
        return self.requests.count(url)

    def reset(self) -> None:
        self.responses.clear()
        self.delays.clear()
        self.failures.clear()
        self.requests.clear()

    async def get(self, url: str) -> TransportResult:
        self.requests.append(url)

        delay = self.delays.get(url, 0.0)
        if delay > 0:
            await asyncio.sleep(delay)

        if url in self.failures:
            return TransportResult.failed(self.failures[url])

        payload = self.responses.get(url)
        if payload is None:
            return TransportResult.failed(f"No stub response for {url}")
        return TransportResult(success=True, payload=payload)
