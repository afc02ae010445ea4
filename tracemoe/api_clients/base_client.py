"""Abstract base API client with rate-limit retry, error mapping, and structured logging.

Features:
- Persistent connection pooling via httpx.AsyncClient
- Optional retry of 429 responses, timed by the `x-ratelimit-reset` header
- Mapping of failed responses onto the tracemoe exception hierarchy
- Structured logging for every request/response

The executor keeps no per-call state on the instance, so one client can
serve any number of concurrent coroutines.
"""
from __future__ import annotations

import asyncio
import math
import time
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable

import httpx
import structlog

from tracemoe.utils.exceptions import (
    RateLimitedError,
    RemoteRejectionError,
    TransportError,
)

logger = structlog.get_logger(__name__)

RATE_LIMIT_RESET_HEADER = "x-ratelimit-reset"

HTTPCall = Callable[[], Awaitable[httpx.Response]]

_NOT_JSON = object()


class BaseAPIClient(ABC):
    """Abstract base class for async HTTP API clients.

    Args:
        base_url: The API's base URL (no trailing slash).
        timeout: HTTP request timeout in seconds.
        retry_on_rate_limit: Wait for the rate-limit reset and retry on 429.
        max_rate_limit_retries: Max 429 retries per call; None retries
            until the API accepts the request.
        headers: Additional default headers to send with every request.
        transport: Optional httpx transport (e.g. httpx.MockTransport in tests).
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        retry_on_rate_limit: bool = False,
        max_rate_limit_retries: int | None = None,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._retry_on_rate_limit = retry_on_rate_limit
        self._max_rate_limit_retries = max_rate_limit_retries
        self._transport = transport
        self._client_name = self.__class__.__name__

        default_headers = {
            "Accept": "application/json",
            "User-Agent": "tracemoe-python/0.1",
        }
        if headers:
            default_headers.update(headers)

        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout, connect=10),
            headers=default_headers,
            follow_redirects=True,
            transport=transport,
        )

    @property
    def retry_on_rate_limit(self) -> bool:
        return self._retry_on_rate_limit

    async def aclose(self) -> None:
        """Close the underlying HTTP client and release connections."""
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    # ── Public API ────────────────────────────────────────────────────

    async def get(self, endpoint: str) -> Any:
        """GET `endpoint` and return the decoded JSON body."""
        return await self._execute(lambda: self._client.get(endpoint))

    async def post(self, endpoint: str, content: bytes) -> Any:
        """POST raw bytes to `endpoint` and return the decoded JSON body."""
        return await self._execute(lambda: self._client.post(endpoint, content=content))

    # ── Internal Methods ──────────────────────────────────────────────

    async def _execute(
        self,
        call: HTTPCall,
        *,
        retry_on_rate_limit: bool | None = None,
        decode_json: bool = True,
    ) -> Any:
        """Run `call` and map its outcome onto a body or an exception.

        Args:
            call: Zero-argument coroutine factory issuing the request. It is
                invoked again for every retry.
            retry_on_rate_limit: Overrides the client-wide retry setting.
            decode_json: Return the decoded JSON body (True) or raw bytes.

        Returns:
            Decoded JSON body, or the raw content when `decode_json` is False.

        Raises:
            RemoteRejectionError: The body carries a non-empty `error`.
            RateLimitedError: 429 and no (further) retry allowed.
            TransportError: Network failure, other error status, or a body
                that is not JSON.
        """
        if retry_on_rate_limit is None:
            retry_on_rate_limit = self._retry_on_rate_limit

        retries = 0
        while True:
            logger.debug("api_request", client=self._client_name, attempt=retries + 1)
            start = time.monotonic()
            try:
                response = await call()
            except httpx.TimeoutException as e:
                logger.warning("transport_error", client=self._client_name, error="timeout")
                raise TransportError(
                    f"{self._client_name}: request timed out after {self._timeout}s"
                ) from e
            except httpx.HTTPError as e:
                logger.warning("transport_error", client=self._client_name, error=str(e))
                raise TransportError(f"{self._client_name}: {e}") from e

            logger.info(
                "api_response",
                client=self._client_name,
                method=response.request.method,
                endpoint=response.request.url.path,
                status=response.status_code,
                duration_ms=round((time.monotonic() - start) * 1000),
                attempt=retries + 1,
            )

            body = _json_body(response) if decode_json else _NOT_JSON
            message = _error_message(body)
            if message:
                logger.warning(
                    "remote_rejection",
                    client=self._client_name,
                    status=response.status_code,
                    message=message,
                )
                raise RemoteRejectionError(message, response.status_code)

            if response.is_success:
                if not decode_json:
                    return response.content
                if body is _NOT_JSON:
                    raise TransportError(
                        f"Response from {response.request.url.path} is not valid JSON",
                        upstream_status=response.status_code,
                    )
                return body

            if response.status_code == 429:
                delay, reset_at = _rate_limit_delay(response)
                if retry_on_rate_limit and self._may_retry(retries):
                    retries += 1
                    logger.warning(
                        "rate_limited",
                        client=self._client_name,
                        retry_in=round(delay, 3),
                        retry=retries,
                    )
                    await asyncio.sleep(delay)
                    continue
                raise RateLimitedError(response=response, reset_at=reset_at)

            logger.warning(
                "transport_error",
                client=self._client_name,
                status=response.status_code,
                endpoint=response.request.url.path,
            )
            raise TransportError(
                f"{self._client_name}: HTTP {response.status_code} for {response.request.url.path}",
                upstream_status=response.status_code,
            )

    def _may_retry(self, retries: int) -> bool:
        return self._max_rate_limit_retries is None or retries < self._max_rate_limit_retries

    @abstractmethod
    async def health_check(self) -> bool:
        """Verify the API is reachable.

        Returns:
            True if API is healthy, False otherwise.
        """
        ...


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return _NOT_JSON


def _error_message(body: Any) -> str:
    """Return the `error` field of a decoded body, or "" when there is none."""
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return ""


def _rate_limit_delay(response: httpx.Response) -> tuple[float, float | None]:
    """Seconds until the rate limit resets, and the reset timestamp itself.

    A missing, unparseable, non-finite or past reset time gives a zero delay.
    """
    try:
        reset_at = float(response.headers[RATE_LIMIT_RESET_HEADER])
    except (KeyError, ValueError):
        return 0.0, None
    if not math.isfinite(reset_at):
        return 0.0, None
    return max(reset_at - time.time(), 0.0), reset_at
