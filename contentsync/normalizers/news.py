"""News item normalization."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..models import EntityKind, ListItem, QueryType
from .base import (
    Normalizer,
    compose_subtitle,
    detail_route_params,
    nested_name,
    require_id,
    require_mapping,
    share_message,
)
from .media import main_image


class NewsItemNormalizer(Normalizer):
    kind = EntityKind.NEWS_ITEM

    def normalize(
        self,
        raw: Mapping[str, Any],
        *,
        title_override: Optional[str] = None,
        condensed: bool = False,
        position: Optional[int] = None,
    ) -> ListItem:
        raw = require_mapping(raw, self.kind)
        entity_id = require_id(raw, self.kind)
        first_block = _first_content_block(raw)
        title = first_block.get("title") if first_block else None
        published_at = raw.get("publishedAt")
        title = title if isinstance(title, str) else ""
        subtitle = compose_subtitle(
            self.format_date(published_at), nested_name(raw, "dataProvider")
        )

        return ListItem(
            id=entity_id,
            kind=self.kind,
            title=title,
            subtitle=subtitle,
            image=main_image(first_block.get("mediaContents")) if first_block else None,
            route_name="Detail",
            route_params=detail_route_params(
                title=title_override or "Nachricht",
                query=QueryType.NEWS_ITEM.value,
                entity_id=entity_id,
                root_route_name="NewsItems",
                details=raw,
                share_message=share_message(title, subtitle),
            ),
            sort_key=published_at if isinstance(published_at, str) else None,
        )


def _first_content_block(raw: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    blocks = raw.get("contentBlocks")
    if isinstance(blocks, list) and blocks and isinstance(blocks[0], Mapping):
        return blocks[0]
    return None
