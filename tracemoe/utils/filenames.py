"""Destination filenames for downloaded scene previews."""
from __future__ import annotations

import httpx

from tracemoe.models.api_schemas import SearchResult

VIDEO_EXTENSIONS = (".mp4",)
IMAGE_EXTENSIONS = (".jpg", ".jpeg")


def resolve_filename(result: SearchResult, is_video: bool, requested_name: str | None = None) -> str:
    """Pick the filename a preview of `result` is saved under.

    Without a requested name the file is named after the source video and
    the exact preview timestamp, e.g. ``foo.mp4`` at t=290.625 becomes
    ``foo@290.625.mp4`` (or ``.jpg`` for images).

    A requested name is kept as-is when its extension is accepted for the
    media kind (compared case-insensitively); otherwise the default
    extension is appended to it.
    """
    accepted = VIDEO_EXTENSIONS if is_video else IMAGE_EXTENSIONS
    default_extension = accepted[0]

    if not requested_name:
        stem, dot, _ = result.filename.rpartition(".")
        base = stem if dot else result.filename
        return f"{base}@{_preview_timestamp(result)}{default_extension}"

    if _extension(requested_name).lower() in accepted:
        return requested_name
    return requested_name + default_extension


def _extension(name: str) -> str:
    _, dot, ext = name.rpartition(".")
    return f".{ext}" if dot else ""


def _preview_timestamp(result: SearchResult) -> str:
    # The image URL carries the exact preview timestamp as `t`
    t = httpx.URL(result.image_url).params.get("t")
    if t is None:
        return f"{result.from_timestamp:g}"
    return t
