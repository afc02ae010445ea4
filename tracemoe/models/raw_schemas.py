"""Pydantic models for the raw JSON payloads returned by trace.moe.

These mirror the wire format as-is, including its camelCase keys and
loose optionality. Nothing outside the normalizer should depend on them.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RawAnilistTitle(BaseModel):
    """AniList titles as sent when `anilistInfo` is requested."""
    model_config = ConfigDict(extra="ignore")

    native: str | None = None
    romaji: str
    english: str | None = None


class RawAnilistInfo(BaseModel):
    """Embedded AniList object, only sent when `anilistInfo` is requested."""
    model_config = ConfigDict(extra="ignore")

    id: int
    idMal: int | None = None
    title: RawAnilistTitle | None = None
    synonyms: list[str] | None = None
    isAdult: bool | None = None


class RawSearchResult(BaseModel):
    """One matching scene from /search."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    # Bare AniList ID, or the full object when extra info was requested
    anilist: int | RawAnilistInfo
    filename: str
    episode: int | float | str | list[int | float] | None = None
    from_: float = Field(alias="from")
    to: float
    similarity: float
    video: str
    image: str


class RawSearchResponse(BaseModel):
    """Envelope returned by /search. `error` is empty on success."""
    model_config = ConfigDict(extra="ignore")

    frameCount: int | None = None
    error: str = ""
    result: list[RawSearchResult] | None = None


class RawAPILimitsResponse(BaseModel):
    """Payload returned by /me."""
    model_config = ConfigDict(extra="ignore")

    id: str
    priority: int
    concurrency: int
    quota: int
    quotaUsed: int
