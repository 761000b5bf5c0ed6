"""Image extraction from media content lists."""

from __future__ import annotations

from typing import Any, Optional, Sequence

IMAGE_CONTENT_TYPES = ("image", "thumbnail")


def is_image(media_content: Any) -> bool:
    if not isinstance(media_content, dict):
        return False
    content_type = media_content.get("contentType")
    return isinstance(content_type, str) and content_type.lower() in IMAGE_CONTENT_TYPES


def main_image(media_contents: Optional[Sequence[Any]]) -> Optional[str]:
    """Return the URL of the first image in ``media_contents``, if any."""
    if not media_contents:
        return None
    for media_content in media_contents:
        if not is_image(media_content):
            continue
        source = media_content.get("sourceUrl")
        url = source.get("url") if isinstance(source, dict) else None
        if isinstance(url, str) and url:
            return url
    return None


__all__ = ["IMAGE_CONTENT_TYPES", "is_image", "main_image"]
