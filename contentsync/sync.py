"""Per-resource synchronization of cached and fetched content.

Each resource key has at most one refresh in flight. Concurrent ``load`` or
``refresh`` calls for the same key join that operation instead of issuing
another request, and ``load_more`` calls for a key run one at a time.
Every fetch or ``release`` starts a new generation for the key. A
completion from an older generation is dropped without touching the in-memory
result or the staleness tracker.
"""

from __future__ import annotations

import asyncio
import functools
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .config import FreshnessConfig, SyncConfig
from .connectivity import ConnectivityMonitor, ConnectivityOracle
from .errors import MalformedContentError, TransportError
from .logging import get_logger
from .models import FetchDirective, ListItem, PagedResult, QueryType
from .normalizers import normalize_many, upcoming_items
from .normalizers.dates import DateFormatter, LocalizedDateFormatter
from .pagination import first_page, merge, next_offset
from .policy import decide
from .queries import QueryContext, QueryDescriptor, QueryRegistry, coerce_query_type, resource_key_for
from .stores import JsonFileKeyValueStore, ResponseCache, StalenessTracker
from .transport import GraphQLTransport, Transport, TransportResult


class ResultSource(str, Enum):
    CACHE = "cache"
    NETWORK = "network"
    NONE = "none"


@dataclass(frozen=True)
class SyncResult:
    """What a screen receives for a resource."""

    resource_key: str
    result: PagedResult
    source: ResultSource
    stale: bool = False
    error: Optional[str] = None

    @property
    def items(self) -> Tuple[ListItem, ...]:
        return self.result.items

    @property
    def has_more(self) -> bool:
        return self.result.has_more


UpdateCallback = Callable[[SyncResult], None]


@dataclass
class _ResourceState:
    query_type: QueryType
    variables: Dict[str, Any]
    context: QueryContext
    title_override: Optional[str] = None
    result: PagedResult = field(default_factory=PagedResult)
    generation: int = 0
    inflight: Optional["asyncio.Task[SyncResult]"] = None
    more_lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def same_request(self, variables: Mapping[str, Any], context: QueryContext) -> bool:
        return self.variables == dict(variables) and self.context == context


class ContentSynchronizer:
    """Decides between cache and network for every resource and keeps the results."""

    def __init__(
        self,
        registry: QueryRegistry,
        transport: Transport,
        tracker: StalenessTracker,
        connectivity: ConnectivityOracle,
        *,
        freshness: FreshnessConfig | None = None,
        formatter: DateFormatter | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.registry = registry
        self.transport = transport
        self.tracker = tracker
        self.connectivity = connectivity
        self.freshness = freshness or FreshnessConfig()
        self.formatter = formatter or LocalizedDateFormatter()
        self._clock = clock or (lambda: datetime.now(UTC))
        self._states: Dict[str, _ResourceState] = {}
        self.logger = get_logger("sync")

    @classmethod
    def from_config(
        cls,
        config: SyncConfig,
        *,
        connectivity: ConnectivityOracle | None = None,
        transport: Transport | None = None,
    ) -> "ContentSynchronizer":
        """Wire the default collaborators described by ``config``."""
        if transport is None:
            transport = GraphQLTransport(
                config.server.url,
                cache=ResponseCache(config.cache.responses_path),
                request_timeout=config.server.request_timeout,
                headers=config.server.headers,
            )
        return cls(
            QueryRegistry(),
            transport,
            StalenessTracker(JsonFileKeyValueStore(config.cache.staleness_path)),
            connectivity or ConnectivityMonitor(),
            freshness=config.freshness,
            formatter=LocalizedDateFormatter(config.locale.date_pattern, config.locale.timezone),
        )

    # ------------------------------------------------------------------
    # Public API

    async def load(
        self,
        query_type: QueryType | str,
        variables: Mapping[str, Any] | None = None,
        *,
        context: QueryContext | None = None,
        resource_key: str | None = None,
        title_override: str | None = None,
        on_update: UpdateCallback | None = None,
    ) -> SyncResult:
        """Serve a resource according to the fetch policy."""
        return await self._start(
            query_type,
            variables,
            context=context,
            resource_key=resource_key,
            title_override=title_override,
            on_update=on_update,
            force=False,
        )

    async def refresh(
        self,
        query_type: QueryType | str,
        variables: Mapping[str, Any] | None = None,
        *,
        context: QueryContext | None = None,
        resource_key: str | None = None,
        title_override: str | None = None,
        on_update: UpdateCallback | None = None,
    ) -> SyncResult:
        """Pull-to-refresh: go to the network unless offline or the backend is down."""
        return await self._start(
            query_type,
            variables,
            context=context,
            resource_key=resource_key,
            title_override=title_override,
            on_update=on_update,
            force=True,
        )

    async def load_more(self, resource_key: str) -> SyncResult:
        """Fetch the next page of a loaded resource and merge it."""
        state = self._states.get(resource_key)
        if state is None:
            raise KeyError(f"Resource '{resource_key}' has not been loaded")

        descriptor = self.registry.describe_fetch_more(state.query_type)
        if descriptor is None:
            state.result = PagedResult(items=state.result.items, has_more=False)
            return self._result(state, resource_key, state.result, ResultSource.CACHE)

        if state.inflight is not None and not state.inflight.done():
            await self._await(resource_key, state.inflight)

        connectivity = self.connectivity.state
        if not (connectivity.is_connected and connectivity.is_backend_healthy):
            self.logger.debug("Skipping load more for %s while offline", resource_key)
            return self._result(state, resource_key, state.result, ResultSource.CACHE, stale=True)

        async with state.more_lock:
            if not state.result.has_more:
                return self._result(state, resource_key, state.result, ResultSource.CACHE)
            generation = state.generation
            offset = next_offset(state.result)
            variables = {**state.variables, "offset": offset}
            self.logger.debug("Loading more %s from offset %d", resource_key, offset)
            try:
                response = await self._execute(descriptor, variables, FetchDirective.NETWORK_ONLY)
                items = self._normalize(state, response)
            except TransportError as exc:
                self.logger.warning("Load more for %s failed: %s", resource_key, exc)
                return self._result(
                    state, resource_key, state.result, ResultSource.CACHE, stale=True, error=str(exc)
                )
            except MalformedContentError as exc:
                self.logger.error("Discarding malformed page of %s: %s", resource_key, exc)
                return self._result(state, resource_key, state.result, ResultSource.CACHE, error=str(exc))

            if state.generation != generation:
                self.logger.debug("Discarding page of %s from superseded generation", resource_key)
                return self._result(state, resource_key, state.result, ResultSource.CACHE)
            state.result = merge(state.result, items)
            return self._result(state, resource_key, state.result, ResultSource.NETWORK)

    def release(self, resource_key: str) -> None:
        """Stop caring about a resource; in-flight completions will be ignored."""
        state = self._states.get(resource_key)
        if state is None:
            return
        state.generation += 1
        if state.inflight is not None and not state.inflight.done():
            self.logger.debug("Cancelling in-flight fetch of %s", resource_key)
            state.inflight.cancel()
        state.inflight = None

    def current(self, resource_key: str) -> Optional[PagedResult]:
        state = self._states.get(resource_key)
        return self._visible(state, state.result) if state is not None else None

    def resource_keys(self) -> List[str]:
        return sorted(self._states)

    # ------------------------------------------------------------------
    # Internal helpers

    async def _start(
        self,
        query_type: QueryType | str,
        variables: Mapping[str, Any] | None,
        *,
        context: QueryContext | None,
        resource_key: str | None,
        title_override: str | None,
        on_update: UpdateCallback | None,
        force: bool,
    ) -> SyncResult:
        resolved = coerce_query_type(query_type)
        variables = dict(variables or {})
        context = context or QueryContext()
        descriptor = self.registry.describe(resolved, context)
        key = resource_key or resource_key_for(resolved, variables)

        state = self._states.get(key)
        if state is not None and state.inflight is not None and not state.inflight.done():
            if state.same_request(variables, context):
                self.logger.debug("Joining in-flight fetch of %s", key)
                return await self._await(key, state.inflight)
            self.logger.debug("Superseding in-flight fetch of %s with new variables", key)
            self.release(key)

        if state is None:
            state = _ResourceState(query_type=resolved, variables=variables, context=context)
            self._states[key] = state
        else:
            state.query_type = resolved
            state.variables = variables
            state.context = context
        state.title_override = title_override
        state.generation += 1

        task = asyncio.ensure_future(
            self._fetch(key, state, descriptor, state.generation, force, on_update)
        )
        state.inflight = task
        return await self._await(key, task)

    async def _await(self, key: str, task: "asyncio.Task[SyncResult]") -> SyncResult:
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if task.cancelled() and (current is None or not current.cancelling()):
                self.logger.debug("Fetch of %s was released before completing", key)
                return SyncResult(key, PagedResult(has_more=False), ResultSource.NONE)
            raise

    async def _fetch(
        self,
        key: str,
        state: _ResourceState,
        descriptor: QueryDescriptor,
        generation: int,
        force: bool,
        on_update: UpdateCallback | None,
    ) -> SyncResult:
        started_at = self._clock()
        last_refreshed = self.tracker.get_last_refreshed(key)
        window = self.freshness.window_for(key)
        decision = decide(self.connectivity.state, last_refreshed, window, now=started_at)
        directive = decision.directive
        if force and directive is FetchDirective.CACHE_AND_NETWORK:
            directive = FetchDirective.NETWORK_ONLY
        self.logger.debug("Resolved %s for %s (%s)", directive.value, key, decision.reason.value)

        cached: Optional[PagedResult] = None
        if directive is not FetchDirective.NETWORK_ONLY:
            cached = await self._read_cache(state, descriptor)

        if directive is FetchDirective.CACHE_ONLY:
            stale = last_refreshed is None or started_at - last_refreshed > window
            if cached is None:
                return self._apply(key, state, generation, PagedResult(has_more=False), ResultSource.NONE, stale)
            return self._apply(key, state, generation, cached, ResultSource.CACHE, stale)

        # Without a cached copy the network leg is no longer optional.
        advisory = decision.network_advisory and cached is not None
        if cached is not None and on_update is not None and state.generation == generation:
            on_update(self._result(state, key, cached, ResultSource.CACHE, stale=not advisory))

        try:
            response = await self._execute(descriptor, state.variables, directive)
            items = self._normalize(state, response)
        except TransportError as exc:
            if advisory:
                self.logger.debug("Optional refresh of %s failed: %s", key, exc)
                return self._apply(key, state, generation, cached, ResultSource.CACHE, False)
            self.logger.warning("Fetching %s failed, serving cached data: %s", key, exc)
            fallback = cached if cached is not None else state.result
            if not fallback.items and cached is None:
                # A forced refresh skipped the cached leg.
                fallback = await self._read_cache(state, descriptor) or fallback
            if not fallback.items:
                fallback = PagedResult(has_more=False)
            source = ResultSource.CACHE if fallback.items else ResultSource.NONE
            return self._apply(key, state, generation, fallback, source, True, error=str(exc))
        except MalformedContentError as exc:
            self.logger.error("Malformed content for %s: %s", key, exc)
            return self._apply(
                key, state, generation, PagedResult(has_more=False), ResultSource.NONE, False, error=str(exc)
            )

        result = self._apply(
            key, state, generation, _first_page(descriptor, items), ResultSource.NETWORK, False
        )
        if state.generation == generation:
            self.tracker.record_refresh(key, started_at)
        if on_update is not None and state.generation == generation:
            on_update(result)
        return result

    def _apply(
        self,
        key: str,
        state: _ResourceState,
        generation: int,
        result: PagedResult,
        source: ResultSource,
        stale: bool,
        *,
        error: Optional[str] = None,
    ) -> SyncResult:
        sync_result = self._result(state, key, result, source, stale=stale, error=error)
        if state.generation != generation:
            self.logger.debug("Discarding completion of %s from superseded generation", key)
            return sync_result
        state.result = result
        return sync_result

    async def _read_cache(
        self, state: _ResourceState, descriptor: QueryDescriptor
    ) -> Optional[PagedResult]:
        response = await self._execute(descriptor, state.variables, FetchDirective.CACHE_ONLY)
        if response is None:
            return None
        try:
            return _first_page(descriptor, self._normalize(state, response))
        except MalformedContentError as exc:
            self.logger.error("Ignoring malformed cached content for %s: %s", descriptor.query_type.value, exc)
            return None

    async def _execute(
        self,
        descriptor: QueryDescriptor,
        variables: Mapping[str, Any],
        directive: FetchDirective,
    ) -> Optional[TransportResult]:
        loop = asyncio.get_running_loop()
        call = functools.partial(self.transport.execute, descriptor, dict(variables), directive)
        return await loop.run_in_executor(None, call)

    def _normalize(
        self, state: _ResourceState, response: Optional[TransportResult]
    ) -> List[ListItem]:
        if response is None:
            return []
        return normalize_many(
            state.query_type,
            response.data,
            state.title_override,
            formatter=self.formatter,
            upcoming_only=False,
        )

    def _visible(self, state: _ResourceState, result: PagedResult) -> PagedResult:
        """Event lists keep every fetched event but only show upcoming ones."""
        if state.query_type is not QueryType.EVENT_RECORDS:
            return result
        items = upcoming_items(result.items, self._clock(), zone=self.formatter.timezone)
        return PagedResult(items=tuple(items), has_more=result.has_more)

    def _result(
        self,
        state: _ResourceState,
        key: str,
        result: PagedResult,
        source: ResultSource,
        *,
        stale: bool = False,
        error: Optional[str] = None,
    ) -> SyncResult:
        return SyncResult(key, self._visible(state, result), source, stale=stale, error=error)


def _first_page(descriptor: QueryDescriptor, items: List[ListItem]) -> PagedResult:
    page = first_page(items)
    if not descriptor.paginable and page.has_more:
        return PagedResult(items=page.items, has_more=False)
    return page


__all__ = ["ContentSynchronizer", "ResultSource", "SyncResult"]
