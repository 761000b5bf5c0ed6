"""Core data models shared across contentsync components."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class QueryType(str, Enum):
    """Queries understood by the registry."""

    NEWS_ITEMS = "newsItems"
    NEWS_ITEM = "newsItem"
    EVENT_RECORDS = "eventRecords"
    EVENT_RECORD = "eventRecord"
    POINTS_OF_INTEREST = "pointsOfInterest"
    POINT_OF_INTEREST = "pointOfInterest"
    TOURS = "tours"
    TOUR = "tour"
    CATEGORIES = "categories"
    POINTS_OF_INTEREST_AND_TOURS = "pointsOfInterestAndTours"
    PUBLIC_JSON_FILE = "publicJsonFile"


class EntityKind(str, Enum):
    """Discriminator for the entity variants a list can contain."""

    NEWS_ITEM = "NewsItem"
    EVENT_RECORD = "EventRecord"
    POINT_OF_INTEREST = "PointOfInterest"
    TOUR = "Tour"
    CONTENT_ENTRY = "ContentEntry"
    CATEGORY = "Category"


class FetchDirective(str, Enum):
    """Whether a read may be served from cache, must hit the network, or both."""

    CACHE_ONLY = "cache-only"
    CACHE_AND_NETWORK = "cache-and-network"
    NETWORK_ONLY = "network-only"


@dataclass(frozen=True)
class ConnectivityState:
    """Reachability as last reported by the connectivity oracle."""

    is_connected: bool = True
    is_backend_healthy: bool = True


@dataclass(frozen=True)
class StalenessRecord:
    """Last successful refresh of a cached resource."""

    resource_key: str
    last_refreshed_at: Optional[datetime]


@dataclass(frozen=True)
class ListItem:
    """Uniform, navigable representation of a domain entity."""

    id: str
    kind: EntityKind
    title: str
    route_name: str
    route_params: Dict[str, Any] = field(default_factory=dict)
    subtitle: Optional[str] = None
    image: Optional[str] = None
    sort_key: Optional[str] = None

    @property
    def identity(self) -> Tuple[str, str]:
        return (self.kind.value, self.id)


@dataclass(frozen=True)
class PagedResult:
    """Ordered accumulation of fetched items with next-offset bookkeeping."""

    items: Tuple[ListItem, ...] = ()
    has_more: bool = True

    @property
    def offset(self) -> int:
        return len(self.items)

