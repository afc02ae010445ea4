"""Query string construction for the /search endpoint.

trace.moe (and the recorded fixtures) match raw query strings, so the
parameters always come out in the same order and values are not re-encoded:

    url, cutBorders, anilistID, anilistInfo

`cutBorders` and `anilistInfo` are bare flags (no `=`).
"""
from __future__ import annotations

from tracemoe.models.api_schemas import SearchOptions


def build_query(options: SearchOptions | None = None, media_url: str | None = None) -> str:
    """Build the /search query string.

    Args:
        options: Search options; None values are left out.
        media_url: URL of the media to search for, sent as `url`.

    Returns:
        "" when there is nothing to send, otherwise a string starting with "?".
    """
    options = options or SearchOptions()
    params: list[str] = []

    if media_url is not None:
        params.append(f"url={media_url}")
    if options.should_cut_black_borders:
        params.append("cutBorders")
    if options.anilist_id is not None:
        params.append(f"anilistID={options.anilist_id}")
    if options.should_include_extra_anilist_info:
        params.append("anilistInfo")

    if not params:
        return ""
    return "?" + "&".join(params)
