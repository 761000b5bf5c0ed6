"""Connectivity oracle consumed by the fetch policy."""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Callable, List, Optional, Protocol
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .logging import get_logger
from .models import ConnectivityState


class ConnectivityOracle(Protocol):
    """Readable, possibly lagging view of network reachability."""

    @property
    def state(self) -> ConnectivityState:
        ...


class ConnectivityMonitor:
    """Holds the last reported connectivity state and notifies listeners on change."""

    def __init__(self, state: ConnectivityState | None = None) -> None:
        self._state = state or ConnectivityState()
        self._lock = threading.Lock()
        self._listeners: List[Callable[[ConnectivityState], None]] = []
        self.logger = get_logger("connectivity")

    @property
    def state(self) -> ConnectivityState:
        return self._state

    def update(
        self,
        *,
        is_connected: Optional[bool] = None,
        is_backend_healthy: Optional[bool] = None,
    ) -> ConnectivityState:
        with self._lock:
            previous = self._state
            changes = {}
            if is_connected is not None:
                changes["is_connected"] = is_connected
            if is_backend_healthy is not None:
                changes["is_backend_healthy"] = is_backend_healthy
            self._state = replace(previous, **changes)
            current = self._state
        if current != previous:
            self.logger.info(
                "Connectivity changed: connected=%s backend_healthy=%s",
                current.is_connected,
                current.is_backend_healthy,
            )
            for listener in list(self._listeners):
                listener(current)
        return current

    def subscribe(self, listener: Callable[[ConnectivityState], None]) -> Callable[[], None]:
        """Register ``listener``; the returned callable unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def probe(self, url: str, *, timeout: float = 5.0) -> ConnectivityState:
        """Check the backend and record the outcome.

        Any HTTP answer proves the network is up; only 5xx answers mark the
        backend unhealthy. Connection failures mark the device offline.
        """
        request = Request(url, method="GET")
        try:
            with urlopen(request, timeout=timeout):  # type: ignore[arg-type]
                pass
        except HTTPError as exc:
            return self.update(is_connected=True, is_backend_healthy=exc.code < 500)
        except (URLError, TimeoutError, OSError) as exc:
            self.logger.debug("Backend probe of %s failed: %s", url, exc)
            return self.update(is_connected=False)
        return self.update(is_connected=True, is_backend_healthy=True)


__all__ = ["ConnectivityMonitor", "ConnectivityOracle"]
