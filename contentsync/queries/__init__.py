"""Query registry and GraphQL documents."""

from .registry import (
    FILTER_VARIABLES,
    QueryContext,
    QueryDescriptor,
    QueryRegistry,
    apply_filter,
    coerce_query_type,
    resource_key_for,
)

__all__ = [
    "FILTER_VARIABLES",
    "QueryContext",
    "QueryDescriptor",
    "QueryRegistry",
    "apply_filter",
    "coerce_query_type",
    "resource_key_for",
]
