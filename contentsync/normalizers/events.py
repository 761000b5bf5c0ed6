"""Event record normalization."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..models import EntityKind, ListItem, QueryType
from .base import (
    Normalizer,
    compose_subtitle,
    detail_route_params,
    require_id,
    require_mapping,
    share_message,
)
from .media import main_image


class EventRecordNormalizer(Normalizer):
    kind = EntityKind.EVENT_RECORD

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
        list_date = raw.get("listDate")
        title = raw.get("title")
        title = title if isinstance(title, str) else ""
        subtitle = compose_subtitle(self.format_date(list_date), _location(raw))

        return ListItem(
            id=entity_id,
            kind=self.kind,
            title=title,
            subtitle=subtitle,
            image=main_image(raw.get("mediaContents")),
            route_name="Detail",
            route_params=detail_route_params(
                title=title_override or "Veranstaltung",
                query=QueryType.EVENT_RECORD.value,
                entity_id=entity_id,
                root_route_name="EventRecords",
                details=raw,
                share_message=share_message(title, subtitle),
            ),
            sort_key=list_date if isinstance(list_date, str) else None,
        )


def _location(raw: Mapping[str, Any]) -> Optional[str]:
    """Addition of the first address, falling back to its city."""
    addresses = raw.get("addresses")
    if not isinstance(addresses, list) or not addresses:
        return None
    first = addresses[0]
    if not isinstance(first, Mapping):
        return None
    return first.get("addition") or first.get("city") or None
