"""Static content bundles published as JSON files."""

from __future__ import annotations

import json
from typing import Any, List, Mapping, Optional

from ..errors import MalformedContentError
from ..models import EntityKind, ListItem
from .base import Normalizer, require_mapping
from .media import main_image


def parse_public_json_file(payload: Any) -> List[Any]:
    """Decode the ``content`` of a ``publicJsonFile`` response.

    A missing file yields an empty bundle; content that is not a JSON list
    raises MalformedContentError.
    """
    if payload is None:
        return []
    if not isinstance(payload, Mapping):
        raise MalformedContentError("publicJsonFile payload must be an object")
    content = payload.get("content")
    if content is None or content == "":
        return []
    if isinstance(content, str):
        try:
            content = json.loads(content)
        except json.JSONDecodeError as exc:
            raise MalformedContentError(f"publicJsonFile content is not valid JSON: {exc}") from exc
    if not isinstance(content, list):
        raise MalformedContentError("publicJsonFile content must be a list of entries")
    return content


class ContentEntryNormalizer(Normalizer):
    """Entries carry their own route; there is never a subtitle."""

    kind = EntityKind.CONTENT_ENTRY

    def normalize(
        self,
        raw: Mapping[str, Any],
        *,
        title_override: Optional[str] = None,
        condensed: bool = False,
        position: Optional[int] = None,
    ) -> ListItem:
        raw = require_mapping(raw, self.kind)
        title = raw.get("title") if isinstance(raw.get("title"), str) else ""
        image = _entry_image(raw)
        if not title and not image:
            raise MalformedContentError("content entry needs a title or an image")

        entity_id = raw.get("id")
        if entity_id is None or entity_id == "":
            entity_id = f"{position if position is not None else 0}-{title or image}"

        params = raw.get("params")
        route_params = dict(params) if isinstance(params, Mapping) else {}
        if title_override:
            route_params["title"] = title_override
        route_name = raw.get("routeName")

        return ListItem(
            id=str(entity_id),
            kind=self.kind,
            title=title,
            image=image,
            route_name=route_name if isinstance(route_name, str) else "",
            route_params=route_params,
        )


def _entry_image(raw: Mapping[str, Any]) -> Optional[str]:
    for key in ("image", "icon"):
        value = raw.get(key)
        if isinstance(value, str) and value:
            return value
    picture = raw.get("picture")
    if isinstance(picture, Mapping) and isinstance(picture.get("uri"), str):
        return picture["uri"]
    return main_image(raw.get("mediaContents"))
