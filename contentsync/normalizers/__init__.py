"""Normalization of domain entities into uniform list items."""

from __future__ import annotations

from datetime import UTC, datetime, tzinfo
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from ..errors import MalformedContentError
from ..models import EntityKind, ListItem, QueryType
from ..queries.registry import coerce_query_type
from .base import Normalizer
from .content import ContentEntryNormalizer, parse_public_json_file
from .dates import DateFormatter, LocalizedDateFormatter, is_upcoming
from .events import EventRecordNormalizer
from .news import NewsItemNormalizer
from .places import CategoryNormalizer, PointOfInterestNormalizer, TourNormalizer

_BUILTIN_FACTORIES: Dict[EntityKind, Callable[[Optional[DateFormatter]], Normalizer]] = {
    EntityKind.NEWS_ITEM: NewsItemNormalizer,
    EntityKind.EVENT_RECORD: EventRecordNormalizer,
    EntityKind.POINT_OF_INTEREST: PointOfInterestNormalizer,
    EntityKind.TOUR: TourNormalizer,
    EntityKind.CONTENT_ENTRY: ContentEntryNormalizer,
    EntityKind.CATEGORY: CategoryNormalizer,
}

QUERY_KINDS: Dict[QueryType, EntityKind] = {
    QueryType.NEWS_ITEMS: EntityKind.NEWS_ITEM,
    QueryType.NEWS_ITEM: EntityKind.NEWS_ITEM,
    QueryType.EVENT_RECORDS: EntityKind.EVENT_RECORD,
    QueryType.EVENT_RECORD: EntityKind.EVENT_RECORD,
    QueryType.POINTS_OF_INTEREST: EntityKind.POINT_OF_INTEREST,
    QueryType.POINT_OF_INTEREST: EntityKind.POINT_OF_INTEREST,
    QueryType.TOURS: EntityKind.TOUR,
    QueryType.TOUR: EntityKind.TOUR,
    QueryType.CATEGORIES: EntityKind.CATEGORY,
    QueryType.PUBLIC_JSON_FILE: EntityKind.CONTENT_ENTRY,
}

# Queries returning a list of entities rather than a single one.
_LIST_QUERIES = {
    QueryType.NEWS_ITEMS,
    QueryType.EVENT_RECORDS,
    QueryType.POINTS_OF_INTEREST,
    QueryType.TOURS,
    QueryType.CATEGORIES,
}

_TYPENAME_KINDS = {
    EntityKind.POINT_OF_INTEREST.value: EntityKind.POINT_OF_INTEREST,
    EntityKind.TOUR.value: EntityKind.TOUR,
}


def normalizer_for(kind: EntityKind, formatter: DateFormatter | None = None) -> Normalizer:
    return _BUILTIN_FACTORIES[kind](formatter)


def normalize(
    query_type: QueryType | str,
    raw: Mapping[str, Any],
    title_override: Optional[str] = None,
    *,
    formatter: DateFormatter | None = None,
    condensed: bool = False,
    position: Optional[int] = None,
) -> ListItem:
    """Normalize one raw entity returned by ``query_type``."""
    kind = _kind_for(coerce_query_type(query_type), raw)
    return normalizer_for(kind, formatter).normalize(
        raw, title_override=title_override, condensed=condensed, position=position
    )


def filter_upcoming(
    entities: Iterable[Any],
    now: datetime,
    *,
    field: str = "listDate",
    zone: tzinfo = UTC,
) -> List[Any]:
    """Keep entities whose ``field`` is at or after ``now``."""
    return [
        entity
        for entity in entities
        if isinstance(entity, Mapping) and is_upcoming(entity.get(field), now, zone)
    ]


def upcoming_items(
    items: Iterable[ListItem],
    now: datetime,
    *,
    zone: tzinfo = UTC,
) -> List[ListItem]:
    """Drop event items whose list date lies before ``now``; other kinds pass through."""
    return [
        item
        for item in items
        if item.kind is not EntityKind.EVENT_RECORD or is_upcoming(item.sort_key, now, zone)
    ]


def extract_entities(query_type: QueryType | str, data: Mapping[str, Any] | None) -> List[Any]:
    """Pull the raw entities for ``query_type`` out of a GraphQL ``data`` payload."""
    resolved = coerce_query_type(query_type)
    if not data:
        return []
    if not isinstance(data, Mapping):
        raise MalformedContentError("response data must be an object")

    if resolved is QueryType.POINTS_OF_INTEREST_AND_TOURS:
        entities: List[Any] = []
        for key, kind in (("pointsOfInterest", EntityKind.POINT_OF_INTEREST), ("tours", EntityKind.TOUR)):
            for entity in _as_list(data.get(key), key):
                if isinstance(entity, Mapping) and "__typename" not in entity:
                    entity = {**entity, "__typename": kind.value}
                entities.append(entity)
        return entities
    if resolved is QueryType.PUBLIC_JSON_FILE:
        return parse_public_json_file(data.get(resolved.value))

    payload = data.get(resolved.value)
    if resolved in _LIST_QUERIES:
        return _as_list(payload, resolved.value)
    return [] if payload is None else [payload]


def normalize_many(
    query_type: QueryType | str,
    data: Mapping[str, Any] | None,
    title_override: Optional[str] = None,
    *,
    formatter: DateFormatter | None = None,
    condensed: bool = False,
    now: Optional[datetime] = None,
    upcoming_only: Optional[bool] = None,
) -> List[ListItem]:
    """Extract and normalize every entity of a response, preserving server order.

    Event lists are reduced to upcoming events before normalization unless
    ``upcoming_only`` is False.
    """
    resolved = coerce_query_type(query_type)
    formatter = formatter or LocalizedDateFormatter()
    entities = extract_entities(resolved, data)
    if upcoming_only is None:
        upcoming_only = resolved is QueryType.EVENT_RECORDS
    if upcoming_only:
        entities = filter_upcoming(entities, now or datetime.now(UTC), zone=formatter.timezone)

    normalizers: Dict[EntityKind, Normalizer] = {}
    items: List[ListItem] = []
    for position, raw in enumerate(entities):
        kind = _kind_for(resolved, raw)
        normalizer = normalizers.get(kind)
        if normalizer is None:
            normalizer = normalizers[kind] = normalizer_for(kind, formatter)
        items.append(
            normalizer.normalize(
                raw, title_override=title_override, condensed=condensed, position=position
            )
        )
    return items


def _kind_for(query_type: QueryType, raw: Any) -> EntityKind:
    kind = QUERY_KINDS.get(query_type)
    if kind is not None:
        return kind
    typename = raw.get("__typename") if isinstance(raw, Mapping) else None
    kind = _TYPENAME_KINDS.get(typename) if isinstance(typename, str) else None
    if kind is None:
        raise MalformedContentError(
            f"{query_type.value} entry has no recognised __typename: {typename!r}"
        )
    return kind


def _as_list(value: Any, key: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedContentError(f"'{key}' must be a list")
    return value


__all__ = [
    "Normalizer",
    "QUERY_KINDS",
    "extract_entities",
    "filter_upcoming",
    "normalize",
    "normalize_many",
    "normalizer_for",
    "parse_public_json_file",
    "upcoming_items",
]
