"""trace.moe API client for anime scene lookup.

trace.moe finds the anime scene an image or short video was taken from.
Base URL: https://api.trace.moe
Rate Limit: per IP or API key, see GET /me
Auth: optional API key in the x-trace-key header

Endpoints:
- search_by_url, search_by_path (/search)
- fetch_limits (/me)
- download_video, download_image (preview media of a search result)
"""
from __future__ import annotations

import asyncio
from pathlib import Path

import httpx
import structlog

from tracemoe.api_clients.base_client import BaseAPIClient
from tracemoe.config import DEFAULT_BASE_URL, Settings, get_settings
from tracemoe.models.api_schemas import (
    APILimits,
    MediaDownloadOptions,
    SearchOptions,
    SearchResponse,
    SearchResult,
)
from tracemoe.services.normalizer import normalize_limits, normalize_search_response
from tracemoe.utils.filenames import resolve_filename
from tracemoe.utils.query_builder import build_query

logger = structlog.get_logger(__name__)

API_KEY_HEADER = "x-trace-key"
SEARCH_ENDPOINT = "/search"
ME_ENDPOINT = "/me"


class TraceMoeClient(BaseAPIClient):
    """Client for the trace.moe API.

    Args:
        api_key: Optional API key (https://www.patreon.com/soruly).
        base_url: trace.moe API base URL.
        retry_on_rate_limit: Wait for the rate-limit reset and retry on 429
            instead of raising RateLimitedError.
        max_rate_limit_retries: Cap on 429 retries per call (None = no cap).
        timeout: HTTP request timeout in seconds.
        transport: Optional httpx transport shared by API and media requests.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        retry_on_rate_limit: bool = False,
        max_rate_limit_retries: int | None = None,
        timeout: int = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key

        headers = {"Content-Type": "application/x-www-form-urlencoded"}
        if api_key:
            headers[API_KEY_HEADER] = api_key

        super().__init__(
            base_url=base_url,
            timeout=timeout,
            retry_on_rate_limit=retry_on_rate_limit,
            max_rate_limit_retries=max_rate_limit_retries,
            headers=headers,
            transport=transport,
        )

        # Previews live on media.trace.moe and are fetched without the key
        self._media_client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=10),
            follow_redirects=True,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "TraceMoeClient":
        """Create a client configured from environment settings."""
        settings = settings or get_settings()
        return cls(
            settings.TRACEMOE_API_KEY,
            base_url=settings.TRACEMOE_BASE_URL,
            retry_on_rate_limit=settings.TRACEMOE_RETRY_ON_RATE_LIMIT,
            max_rate_limit_retries=settings.TRACEMOE_MAX_RATE_LIMIT_RETRIES,
            timeout=settings.HTTP_TIMEOUT,
            transport=transport,
        )

    @property
    def api_key(self) -> str | None:
        return self._api_key

    async def aclose(self) -> None:
        await self._media_client.aclose()
        await super().aclose()

    # ── Search Endpoints ──────────────────────────────────────────────

    async def search_by_url(
        self,
        media_url: str | httpx.URL,
        options: SearchOptions | None = None,
    ) -> SearchResponse:
        """Find the anime scene shown in the media at `media_url`.

        Args:
            media_url: URL of an image or video containing the scene.
            options: Search options.

        Returns:
            Normalized SearchResponse.
        """
        endpoint = SEARCH_ENDPOINT + build_query(options, str(media_url))
        raw = await self.get(endpoint)

        response = normalize_search_response(raw)
        logger.info("search_completed", source="url", results=len(response.results))
        return response

    async def search_by_path(
        self,
        media_path: str | Path,
        options: SearchOptions | None = None,
    ) -> SearchResponse:
        """Find the anime scene shown in a local image or video file.

        Args:
            media_path: Path to the media file; its bytes are uploaded as-is.
            options: Search options.

        Returns:
            Normalized SearchResponse.
        """
        endpoint = SEARCH_ENDPOINT + build_query(options)
        content = await asyncio.to_thread(Path(media_path).read_bytes)
        raw = await self.post(endpoint, content)

        response = normalize_search_response(raw)
        logger.info(
            "search_completed",
            source="file",
            size_bytes=len(content),
            results=len(response.results),
        )
        return response

    # ── Account Endpoints ─────────────────────────────────────────────

    async def fetch_limits(self) -> APILimits:
        """Fetch limits and quota of the caller's IP address or API key."""
        return normalize_limits(await self.get(ME_ENDPOINT))

    # ── Media Downloads ───────────────────────────────────────────────

    async def download_video(
        self,
        result: SearchResult,
        options: MediaDownloadOptions | None = None,
    ) -> Path:
        """Save the video preview of a search result.

        Returns:
            Path of the saved file.
        """
        options = options or MediaDownloadOptions()
        media_url = f"{result.video_url}&size={options.size.value}"
        if options.should_mute:
            media_url += "&mute"
        return await self._download_media(media_url, result, True, options)

    async def download_image(
        self,
        result: SearchResult,
        options: MediaDownloadOptions | None = None,
    ) -> Path:
        """Save the image preview of a search result.

        Returns:
            Path of the saved file.
        """
        options = options or MediaDownloadOptions()
        media_url = f"{result.image_url}&size={options.size.value}"
        return await self._download_media(media_url, result, False, options)

    # ── Health Check ──────────────────────────────────────────────────

    async def health_check(self) -> bool:
        """Verify trace.moe is reachable."""
        try:
            await self.fetch_limits()
            return True
        except Exception:
            return False

    # ── Private Helpers ───────────────────────────────────────────────

    async def _download_media(
        self,
        media_url: str,
        result: SearchResult,
        is_video: bool,
        options: MediaDownloadOptions,
    ) -> Path:
        directory = Path(options.directory)
        if not await asyncio.to_thread(directory.exists):
            await asyncio.to_thread(directory.mkdir, parents=True, exist_ok=True)

        destination = directory / resolve_filename(result, is_video, options.name)
        content = await self._execute(
            lambda: self._media_client.get(media_url),
            decode_json=False,
        )
        await asyncio.to_thread(destination.write_bytes, content)

        logger.info(
            "media_downloaded",
            kind="video" if is_video else "image",
            path=str(destination),
            size_bytes=len(content),
        )
        return destination
