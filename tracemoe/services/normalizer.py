"""Translation of raw trace.moe payloads into the caller-facing models.

Every function here is pure: it takes a decoded JSON body (or an already
validated raw model) and returns a fresh, immutable domain object.

Optional fields are passed to the domain constructors only when the API
sent a value, so they stay unset (and drop out of `to_dict()`) otherwise.
Wire `null` counts as not sent.
"""
from __future__ import annotations

import math
import sys
from typing import Any

import structlog
from pydantic import ValidationError

from tracemoe.models.api_schemas import (
    AnilistInfo,
    AnilistTitle,
    APILimits,
    SearchResponse,
    SearchResult,
)
from tracemoe.models.raw_schemas import (
    RawAnilistInfo,
    RawAnilistTitle,
    RawAPILimitsResponse,
    RawSearchResponse,
    RawSearchResult,
)
from tracemoe.utils.exceptions import MalformedResponseError

logger = structlog.get_logger(__name__)

SIMILARITY_PRECISION = 3


def round_to_precision(value: float, precision: int = SIMILARITY_PRECISION) -> float:
    """Round half away from zero to `precision` decimals.

    Machine epsilon is added first so values stored just below a ...5
    boundary (1.0005 is really 1.000499999...) still round up.
    """
    factor = 10 ** precision
    scaled = (value + sys.float_info.epsilon) * factor
    return math.copysign(math.floor(abs(scaled) + 0.5), scaled) / factor


def normalize_search_response(raw: dict[str, Any] | RawSearchResponse) -> SearchResponse:
    """Build a SearchResponse from a /search body.

    Raises:
        MalformedResponseError: If the body has no `result` list, or does
            not match the wire schema at all.
    """
    if not isinstance(raw, RawSearchResponse):
        raw = _validate(RawSearchResponse, raw)

    if raw.result is None or raw.frameCount is None:
        raise MalformedResponseError(
            "trace.moe search response has no result and no error message"
        )

    results = tuple(normalize_search_result(item) for item in raw.result)
    logger.debug("search_normalized", results=len(results), frames=raw.frameCount)
    return SearchResponse(checked_frames_count=raw.frameCount, results=results)


def normalize_search_result(raw: RawSearchResult) -> SearchResult:
    """Build a SearchResult from one raw result."""
    fields: dict[str, Any] = {
        "anilist_info": normalize_anilist(raw.anilist),
        "filename": raw.filename,
        "from_timestamp": raw.from_,
        "to_timestamp": raw.to,
        "similarity_percentage": round_to_precision(raw.similarity * 100),
        "video_url": raw.video,
        "image_url": raw.image,
    }
    if isinstance(raw.episode, list):
        fields["episode"] = tuple(raw.episode)
    elif raw.episode is not None:
        fields["episode"] = raw.episode
    return SearchResult(**fields)


def normalize_anilist(raw: int | RawAnilistInfo) -> AnilistInfo:
    """Resolve the bare-ID / embedded-object union of the `anilist` field."""
    if isinstance(raw, int):
        return AnilistInfo(id=raw)

    fields: dict[str, Any] = {"id": raw.id}
    if raw.idMal is not None:
        fields["mal_id"] = raw.idMal
    if raw.title is not None:
        fields["title"] = normalize_anilist_title(raw.title)
    if raw.synonyms is not None:
        fields["synonyms"] = tuple(raw.synonyms)
    if raw.isAdult is not None:
        fields["is_nsfw_anime"] = raw.isAdult
    return AnilistInfo(**fields)


def normalize_anilist_title(raw: RawAnilistTitle) -> AnilistTitle:
    """Map AniList titles, dropping the ones sent as null."""
    fields: dict[str, Any] = {"romaji_title": raw.romaji}
    if raw.native is not None:
        fields["native_title"] = raw.native
    if raw.english is not None:
        fields["english_title"] = raw.english
    return AnilistTitle(**fields)


def normalize_limits(raw: dict[str, Any] | RawAPILimitsResponse) -> APILimits:
    """Build APILimits from a /me body. Remaining quota is computed here, once."""
    if not isinstance(raw, RawAPILimitsResponse):
        raw = _validate(RawAPILimitsResponse, raw)

    return APILimits(
        id=raw.id,
        priority=raw.priority,
        concurrency=raw.concurrency,
        total_quota=raw.quota,
        remaining_quota=raw.quota - raw.quotaUsed,
    )


def _validate(model, payload: Any):
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        logger.warning("malformed_response", schema=model.__name__, errors=e.error_count())
        raise MalformedResponseError(
            f"trace.moe response does not match {model.__name__}: {e}"
        ) from e
