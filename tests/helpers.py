"""Sample payloads and a scripted fake of trace.moe for the test suite.

Provides:
- Raw (wire) and normalized sample payloads
- A scripted fake of api.trace.moe / media.trace.moe on httpx.MockTransport
"""
from __future__ import annotations

from collections import OrderedDict

import httpx

from tracemoe.models.api_schemas import (
    AnilistInfo,
    AnilistTitle,
    APILimits,
    SearchResponse,
    SearchResult,
)

API_KEY = "xxxxxxxxxxxxxxxxxxxxxxx"
MEDIA_URL = "https://images.plurk.com/32B15UXxymfSMwKGTObY5e.jpg"

SOURCE_FILENAME = "[Leopard-Raws] Gochuumon wa Usagi Desu ka 2nd - 01 RAW (KBS 1280x720 x264 AAC).mp4"
_ENCODED_FILENAME = (
    "%5BLeopard-Raws%5D%20Gochuumon%20wa%20Usagi%20Desu%20ka%202nd%20-%2001%20RAW%20"
    "(KBS%201280x720%20x264%20AAC).mp4"
)
VIDEO_URL = (
    f"https://media.trace.moe/video/21034/{_ENCODED_FILENAME}"
    "?t=290.625&now=1682020800&token=uiNol9dajDX5mzlqnANJQKPBgY"
)
IMAGE_URL = (
    f"https://media.trace.moe/image/21034/{_ENCODED_FILENAME}.jpg"
    "?t=290.625&now=1682020800&token=HyeNAbd2qC9kx2QgTJfMY5fJ7Y"
)


def build_raw_search_response(with_anilist_info: bool = False) -> dict:
    anilist = 21034
    if with_anilist_info:
        anilist = {
            "id": 21034,
            "idMal": 29787,
            "synonyms": ["Gochiusa"],
            "title": {
                "native": "ご注文はうさぎですか？？",
                "romaji": "Gochuumon wa Usagi desu ka??",
                "english": "Is the Order a Rabbit?? Season 2",
            },
            "isAdult": False,
        }

    return {
        "frameCount": 5890247,
        "error": "",
        "result": [
            {
                "anilist": anilist,
                "filename": SOURCE_FILENAME,
                "episode": 1,
                "from": 288.58,
                "to": 292.67,
                "similarity": 0.99,
                "video": VIDEO_URL,
                "image": IMAGE_URL,
            }
        ],
    }


def build_search_response(with_anilist_info: bool = False) -> SearchResponse:
    anilist_info = AnilistInfo(id=21034)
    if with_anilist_info:
        anilist_info = AnilistInfo(
            id=21034,
            mal_id=29787,
            synonyms=("Gochiusa",),
            title=AnilistTitle(
                native_title="ご注文はうさぎですか？？",
                romaji_title="Gochuumon wa Usagi desu ka??",
                english_title="Is the Order a Rabbit?? Season 2",
            ),
            is_nsfw_anime=False,
        )

    return SearchResponse(
        checked_frames_count=5890247,
        results=(
            SearchResult(
                anilist_info=anilist_info,
                filename=SOURCE_FILENAME,
                episode=1,
                from_timestamp=288.58,
                to_timestamp=292.67,
                similarity_percentage=99,
                video_url=VIDEO_URL,
                image_url=IMAGE_URL,
            ),
        ),
    )


def build_raw_limits(api_key: str | None = None) -> dict:
    return {
        "id": api_key or "127.0.0.1",
        "priority": 0,
        "concurrency": 1,
        "quota": 1000,
        "quotaUsed": 100,
    }


def build_limits(api_key: str | None = None) -> APILimits:
    return APILimits(
        id=api_key or "127.0.0.1",
        priority=0,
        concurrency=1,
        total_quota=1000,
        remaining_quota=900,
    )


class FakeTraceMoe:
    """Scripted stand-in for trace.moe, routed by URL path prefix.

    Each `reply()` queues one response; every request pops the next one
    queued for the first matching prefix. Unscripted requests get a 404.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._queues: OrderedDict[str, list[httpx.Response]] = OrderedDict()

    def reply(self, path_prefix: str, status_code: int = 200, **kwargs) -> None:
        self._queues.setdefault(path_prefix, []).append(httpx.Response(status_code, **kwargs))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for prefix, queue in self._queues.items():
            if request.url.path.startswith(prefix) and queue:
                return queue.pop(0)
        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)
