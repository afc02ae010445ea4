"""Async Python client for the trace.moe anime scene search API.

Usage:
    from tracemoe import TraceMoeClient, SearchOptions

    async with TraceMoeClient(retry_on_rate_limit=True) as client:
        response = await client.search_by_url(
            "https://images.plurk.com/32B15UXxymfSMwKGTObY5e.jpg",
            SearchOptions(should_include_extra_anilist_info=True),
        )
        best = response.results[0]
        await client.download_video(best)
"""
from __future__ import annotations

from tracemoe.api_clients.tracemoe_client import TraceMoeClient
from tracemoe.config import Settings, get_settings
from tracemoe.models.api_schemas import (
    AnilistInfo,
    AnilistTitle,
    APILimits,
    MediaDownloadOptions,
    MediaSize,
    SearchOptions,
    SearchResponse,
    SearchResult,
)
from tracemoe.utils.exceptions import (
    MalformedResponseError,
    RateLimitedError,
    RemoteRejectionError,
    TraceMoeError,
    TransportError,
)
from tracemoe.utils.logger import setup_logging

__all__ = [
    "TraceMoeClient",
    "Settings",
    "get_settings",
    "setup_logging",
    "AnilistInfo",
    "AnilistTitle",
    "APILimits",
    "MediaDownloadOptions",
    "MediaSize",
    "SearchOptions",
    "SearchResponse",
    "SearchResult",
    "TraceMoeError",
    "RemoteRejectionError",
    "RateLimitedError",
    "TransportError",
    "MalformedResponseError",
]
