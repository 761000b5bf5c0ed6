"""Content synchronization layer for news, events, places and tours."""

from .config import SyncConfig, load_config
from .connectivity import ConnectivityMonitor, ConnectivityOracle
from .errors import (
    ConfigError,
    ContentSyncError,
    MalformedContentError,
    NotFoundError,
    TransportError,
)
from .models import (
    ConnectivityState,
    EntityKind,
    FetchDirective,
    ListItem,
    PagedResult,
    QueryType,
    StalenessRecord,
)
from .pagination import merge
from .policy import resolve
from .queries import QueryContext, QueryDescriptor, QueryRegistry
from .stores import StalenessTracker
from .sync import ContentSynchronizer, ResultSource, SyncResult

__all__ = [
    "ConfigError",
    "ConnectivityMonitor",
    "ConnectivityOracle",
    "ConnectivityState",
    "ContentSyncError",
    "ContentSynchronizer",
    "EntityKind",
    "FetchDirective",
    "ListItem",
    "MalformedContentError",
    "NotFoundError",
    "PagedResult",
    "QueryContext",
    "QueryDescriptor",
    "QueryRegistry",
    "QueryType",
    "ResultSource",
    "StalenessRecord",
    "StalenessTracker",
    "SyncConfig",
    "SyncResult",
    "TransportError",
    "load_config",
    "merge",
    "resolve",
]
