"""Lookup of query documents by query type and feature-flag context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from ..errors import NotFoundError
from ..models import QueryType
from . import documents


@dataclass(frozen=True)
class QueryContext:
    """Feature flags that select between query variants."""

    show_news_filter: bool = False
    show_events_filter: bool = True


@dataclass(frozen=True)
class QueryDescriptor:
    """Concrete query shape for one query type."""

    query_type: QueryType
    document: str
    fetch_more_document: Optional[str] = None
    variable_names: Tuple[str, ...] = ()

    @property
    def paginable(self) -> bool:
        return self.fetch_more_document is not None


@dataclass(frozen=True)
class _QueryDefinition:
    document: str
    variable_names: Tuple[str, ...]
    fetch_more_document: Optional[str] = None
    filtered_document: Optional[str] = None
    filter_flag: Optional[str] = None


_LIST_VARIABLES = ("limit", "offset")

_DEFINITIONS: Dict[QueryType, _QueryDefinition] = {
    QueryType.NEWS_ITEMS: _QueryDefinition(
        document=documents.GET_NEWS_ITEMS,
        variable_names=_LIST_VARIABLES + ("dataProvider",),
        fetch_more_document=documents.GET_MORE_NEWS_ITEMS,
        filtered_document=documents.GET_NEWS_ITEMS_WITH_PROVIDERS,
        filter_flag="show_news_filter",
    ),
    QueryType.NEWS_ITEM: _QueryDefinition(documents.GET_NEWS_ITEM, ("id",)),
    QueryType.EVENT_RECORDS: _QueryDefinition(
        document=documents.GET_EVENT_RECORDS,
        variable_names=_LIST_VARIABLES + ("order", "categoryId"),
        fetch_more_document=documents.GET_MORE_EVENT_RECORDS,
        filtered_document=documents.GET_EVENT_RECORDS_WITH_CATEGORIES,
        filter_flag="show_events_filter",
    ),
    QueryType.EVENT_RECORD: _QueryDefinition(documents.GET_EVENT_RECORD, ("id",)),
    QueryType.POINTS_OF_INTEREST: _QueryDefinition(
        document=documents.GET_POINTS_OF_INTEREST,
        variable_names=_LIST_VARIABLES + ("category",),
        fetch_more_document=documents.GET_MORE_POINTS_OF_INTEREST,
    ),
    QueryType.POINT_OF_INTEREST: _QueryDefinition(documents.GET_POINT_OF_INTEREST, ("id",)),
    QueryType.TOURS: _QueryDefinition(
        document=documents.GET_TOURS,
        variable_names=_LIST_VARIABLES + ("category",),
        fetch_more_document=documents.GET_MORE_TOURS,
    ),
    QueryType.TOUR: _QueryDefinition(documents.GET_TOUR, ("id",)),
    QueryType.CATEGORIES: _QueryDefinition(documents.GET_CATEGORIES, ()),
    QueryType.POINTS_OF_INTEREST_AND_TOURS: _QueryDefinition(
        documents.GET_POINTS_OF_INTEREST_AND_TOURS,
        ("limit", "orderPoi", "orderTour"),
    ),
    QueryType.PUBLIC_JSON_FILE: _QueryDefinition(documents.GET_PUBLIC_JSON_FILE, ("name",)),
}

FILTER_VARIABLES: Dict[QueryType, str] = {
    QueryType.NEWS_ITEMS: "dataProvider",
    QueryType.EVENT_RECORDS: "categoryId",
}


def coerce_query_type(query_type: QueryType | str) -> QueryType:
    """Return ``query_type`` as a QueryType, raising NotFoundError when unknown."""
    if isinstance(query_type, QueryType):
        return query_type
    try:
        return QueryType(query_type)
    except ValueError as exc:
        raise NotFoundError(query_type) from exc


class QueryRegistry:
    """Pure mapping from (query type, context) to a query descriptor."""

    def __init__(self, definitions: Mapping[QueryType, _QueryDefinition] | None = None) -> None:
        self._definitions = dict(definitions if definitions is not None else _DEFINITIONS)

    def describe(
        self, query_type: QueryType | str, context: QueryContext | None = None
    ) -> QueryDescriptor:
        """Return the descriptor for ``query_type`` under ``context``."""
        definition, resolved = self._definition(query_type)
        context = context or QueryContext()
        document = definition.document
        if definition.filter_flag and definition.filtered_document:
            if getattr(context, definition.filter_flag):
                document = definition.filtered_document
        return QueryDescriptor(
            query_type=resolved,
            document=document,
            fetch_more_document=definition.fetch_more_document,
            variable_names=definition.variable_names,
        )

    def describe_fetch_more(self, query_type: QueryType | str) -> Optional[QueryDescriptor]:
        """Return the fetch-more descriptor, or None when the query never paginates."""
        definition, resolved = self._definition(query_type)
        if definition.fetch_more_document is None:
            return None
        return QueryDescriptor(
            query_type=resolved,
            document=definition.fetch_more_document,
            variable_names=definition.variable_names,
        )

    def query_types(self) -> Tuple[QueryType, ...]:
        return tuple(self._definitions)

    def _definition(self, query_type: QueryType | str) -> Tuple[_QueryDefinition, QueryType]:
        resolved = coerce_query_type(query_type)
        definition = self._definitions.get(resolved)
        if definition is None:
            raise NotFoundError(query_type)
        return definition, resolved


def apply_filter(
    query_type: QueryType | str,
    variables: Mapping[str, Any],
    selected: Any | None,
) -> Dict[str, Any]:
    """Return new variables with the list filter set to ``selected``.

    ``selected=None`` stands for "all" and drops the filter variable. The
    mapping passed in is never modified.
    """
    updated = dict(variables)
    key = FILTER_VARIABLES.get(coerce_query_type(query_type))
    if key is None:
        return updated
    if selected is None or selected == "":
        updated.pop(key, None)
    else:
        updated[key] = selected
    return updated


def resource_key_for(query_type: QueryType | str, variables: Mapping[str, Any] | None = None) -> str:
    """Name the cached dataset a query populates."""
    resolved = coerce_query_type(query_type)
    if resolved is QueryType.PUBLIC_JSON_FILE:
        name = (variables or {}).get("name")
        if not name:
            raise ValueError("publicJsonFile queries require a 'name' variable")
        return f"{resolved.value}-{name}"
    return resolved.value


__all__ = [
    "FILTER_VARIABLES",
    "QueryContext",
    "QueryDescriptor",
    "QueryRegistry",
    "apply_filter",
    "coerce_query_type",
    "resource_key_for",
]
