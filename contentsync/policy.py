"""Fetch policy resolution from connectivity and staleness."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Optional

from .models import ConnectivityState, FetchDirective


class DecisionReason(str, Enum):
    """Which rule of the cascade produced a directive."""

    OFFLINE = "offline"
    BACKEND_UNHEALTHY = "backend_unhealthy"
    NEVER_REFRESHED = "never_refreshed"
    STALE = "stale"
    FRESH = "fresh"


@dataclass(frozen=True)
class FetchDecision:
    """A directive together with the rule that produced it."""

    directive: FetchDirective
    reason: DecisionReason

    @property
    def network_advisory(self) -> bool:
        """True when the cached data alone is correct and the network leg is optional."""
        return self.reason is DecisionReason.FRESH


def decide(
    connectivity: ConnectivityState,
    last_refreshed_at: Optional[datetime],
    freshness_window: timedelta,
    *,
    now: Optional[datetime] = None,
) -> FetchDecision:
    """Evaluate the priority cascade; connectivity and backend health dominate staleness."""
    if not connectivity.is_connected:
        return FetchDecision(FetchDirective.CACHE_ONLY, DecisionReason.OFFLINE)
    if not connectivity.is_backend_healthy:
        return FetchDecision(FetchDirective.CACHE_ONLY, DecisionReason.BACKEND_UNHEALTHY)
    if last_refreshed_at is None:
        return FetchDecision(FetchDirective.NETWORK_ONLY, DecisionReason.NEVER_REFRESHED)

    current = now or datetime.now(UTC)
    if current - last_refreshed_at > freshness_window:
        return FetchDecision(FetchDirective.CACHE_AND_NETWORK, DecisionReason.STALE)
    return FetchDecision(FetchDirective.CACHE_AND_NETWORK, DecisionReason.FRESH)


def resolve(
    connectivity: ConnectivityState,
    last_refreshed_at: Optional[datetime],
    freshness_window: timedelta,
    *,
    now: Optional[datetime] = None,
) -> FetchDirective:
    """Return the fetch directive for a read."""
    return decide(connectivity, last_refreshed_at, freshness_window, now=now).directive


__all__ = ["DecisionReason", "FetchDecision", "decide", "resolve"]
