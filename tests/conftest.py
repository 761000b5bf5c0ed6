from __future__ import annotations

import pytest

from contentsync.config import FreshnessConfig
from contentsync.connectivity import ConnectivityMonitor
from contentsync.normalizers.dates import LocalizedDateFormatter
from contentsync.queries import QueryRegistry
from contentsync.stores import MemoryKeyValueStore, ResponseCache, StalenessTracker
from contentsync.sync import ContentSynchronizer
from contentsync.transport import GraphQLTransport
from tests._fixtures.content import FakeClock, ScriptedServer


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def server() -> ScriptedServer:
    """Scripted content server; tests assign ``server.replies`` before loading."""
    return ScriptedServer({})


@pytest.fixture
def response_cache() -> ResponseCache:
    return ResponseCache()


@pytest.fixture
def transport(server: ScriptedServer, response_cache: ResponseCache) -> GraphQLTransport:
    return GraphQLTransport("https://cms.example.org/graphql", cache=response_cache, sender=server)


@pytest.fixture
def tracker() -> StalenessTracker:
    return StalenessTracker(MemoryKeyValueStore())


@pytest.fixture
def monitor() -> ConnectivityMonitor:
    return ConnectivityMonitor()


@pytest.fixture
def synchronizer(
    transport: GraphQLTransport,
    tracker: StalenessTracker,
    monitor: ConnectivityMonitor,
    clock: FakeClock,
) -> ContentSynchronizer:
    return ContentSynchronizer(
        QueryRegistry(),
        transport,
        tracker,
        monitor,
        freshness=FreshnessConfig(default_seconds=300),
        formatter=LocalizedDateFormatter(),
        clock=clock,
    )
