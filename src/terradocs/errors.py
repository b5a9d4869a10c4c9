from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    NETWORK_ERROR = "NETWORK_ERROR"
    NO_VERSIONS_AVAILABLE = "NO_VERSIONS_AVAILABLE"
    FETCH_FAILED = "FETCH_FAILED"
    UNSUPPORTED_CONTENT = "UNSUPPORTED_CONTENT"
    PARSE_FAILED = "PARSE_FAILED"
    NOT_FOUND = "NOT_FOUND"
    INVALID_INPUT = "INVALID_INPUT"


class TerraDocsError(Exception):
    """Raised by the lookup pipeline for all expected failure conditions.

    Propagates unchanged to the immediate caller. ``DocsService.get_docs``
    turns it into a failed ``LookupResult`` and server.py serialises it into
    the MCP error response. Failures are never cached, so the next request
    for the same identifier retries from scratch.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str,
        recoverable: bool = False,
        *,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable
        self.url = url

    def to_dict(self) -> dict:
        error: dict = {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "recoverable": self.recoverable,
        }
        if self.url is not None:
            error["url"] = self.url
        return {"error": error}
