"""Caller-facing models returned by the trace.moe client.

The normalizer builds these from the raw wire payloads. They are immutable
and compare by value.

Optional fields are only *set* when the API actually sent a value, so
absence stays observable: `"episode" in result.model_fields_set` is False
for a result without an episode, and `to_dict()` leaves the key out
entirely. Falsy values that were sent (e.g. `is_nsfw_anime=False`) are kept.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

Episode = int | float | str | tuple[int | float, ...]


class _DomainModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> dict[str, Any]:
        """Dump to the camelCase shape, leaving out absent optional fields."""
        return self.model_dump(by_alias=True, exclude_unset=True)


# ══════════════════════════════════════════════════════════════════════
# Search
# ══════════════════════════════════════════════════════════════════════

class AnilistTitle(_DomainModel):
    """Titles of the anime on AniList."""
    native_title: str | None = Field(default=None, serialization_alias="nativeTitle")
    romaji_title: str = Field(serialization_alias="romajiTitle")
    english_title: str | None = Field(default=None, serialization_alias="englishTitle")


class AnilistInfo(_DomainModel):
    """AniList metadata of a result.

    Only `id` is set unless the search asked for extra AniList info.
    """
    id: int
    mal_id: int | None = Field(default=None, serialization_alias="malID")
    title: AnilistTitle | None = None
    synonyms: tuple[str, ...] | None = None
    is_nsfw_anime: bool | None = Field(default=None, serialization_alias="isNSFWAnime")


class SearchResult(_DomainModel):
    """A scene matching the searched media."""
    anilist_info: AnilistInfo = Field(serialization_alias="anilistInfo")
    filename: str
    episode: Episode | None = None
    from_timestamp: float = Field(serialization_alias="fromTimestamp")
    to_timestamp: float = Field(serialization_alias="toTimestamp")
    similarity_percentage: float = Field(serialization_alias="similarityPercentage")
    video_url: str = Field(serialization_alias="videoURL")
    image_url: str = Field(serialization_alias="imageURL")


class SearchResponse(_DomainModel):
    """Search results, most similar first, in the order trace.moe sent them."""
    checked_frames_count: int = Field(serialization_alias="checkedFramesCount")
    results: tuple[SearchResult, ...] = ()


# ══════════════════════════════════════════════════════════════════════
# Account limits
# ══════════════════════════════════════════════════════════════════════

class APILimits(_DomainModel):
    """Limits and quota of the caller's IP address or API key."""
    id: str
    priority: int
    concurrency: int
    total_quota: int = Field(serialization_alias="totalQuota")
    remaining_quota: int = Field(serialization_alias="remainingQuota")


# ══════════════════════════════════════════════════════════════════════
# Request options
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SearchOptions:
    """Optional /search parameters. Unset (None) options are not sent."""
    should_cut_black_borders: bool | None = None
    anilist_id: int | str | None = None
    should_include_extra_anilist_info: bool | None = None


class MediaSize(str, Enum):
    """Preview sizes accepted by the media server."""
    SMALL = "s"
    MEDIUM = "m"
    LARGE = "l"


@dataclass(frozen=True)
class MediaDownloadOptions:
    """Where and how to save a preview.

    `name` needs no extension; the matching one is appended when missing.
    """
    size: MediaSize = MediaSize.MEDIUM
    should_mute: bool = False
    directory: str | Path = "."
    name: str | None = None
