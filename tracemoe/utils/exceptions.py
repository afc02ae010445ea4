"""Custom exception hierarchy for the trace.moe client.

All library-specific exceptions inherit from TraceMoeError,
so callers can catch every failure raised by the client in one place.

Hierarchy:
    TraceMoeError (base)
    ├── RemoteRejectionError   : trace.moe returned a structured `error` message
    ├── RateLimitedError       : 429 Too Many Requests, not retried
    ├── TransportError         : network failure, unexpected status, bad body
    └── MalformedResponseError : success status but body breaks the wire contract
"""
from __future__ import annotations

import httpx


class TraceMoeError(Exception):
    """Base exception for the trace.moe client."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class RemoteRejectionError(TraceMoeError):
    """Raised when trace.moe answers with a non-empty `error` field.

    This is how the service reports quota and validation problems, e.g.
    HTTP 402 "Concurrency limit exceeded".
    """


class RateLimitedError(TraceMoeError):
    """Raised when trace.moe returns 429 and the request is not retried.

    Attributes:
        response: The raw 429 response, for callers doing their own backoff.
        reset_at: UNIX timestamp from the `x-ratelimit-reset` header, if any.
    """

    def __init__(
        self,
        response: httpx.Response | None = None,
        reset_at: float | None = None,
    ) -> None:
        self.response = response
        self.reset_at = reset_at
        super().__init__(
            message="trace.moe rate limit exceeded. Try again shortly.",
            status_code=429,
        )


class TransportError(TraceMoeError):
    """Raised for any other transport-level failure."""

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        self.upstream_status = upstream_status
        super().__init__(message, upstream_status)


class MalformedResponseError(TraceMoeError):
    """Raised when a successful response does not match the wire contract."""
