"""Per-resource record of the last successful refresh."""

from __future__ import annotations

import threading
from datetime import UTC, datetime
from typing import Dict, List, Optional

from ..logging import get_logger
from ..models import StalenessRecord
from .kv import KeyValueStore

_KEY_PREFIX = "refreshed_at:"


class StalenessTracker:
    """Keeps the maximum refresh timestamp seen for each resource key.

    Reads never touch the network; they only consult the backing store. Writes
    are serialized per resource key so refreshes of unrelated resources never
    wait on each other.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self.logger = get_logger("staleness")

    def get_last_refreshed(self, resource_key: str) -> Optional[datetime]:
        """Return the last refresh time, or None when the resource was never fetched."""
        raw = self._store.get(_KEY_PREFIX + resource_key)
        return _parse_timestamp(raw) if raw else None

    def record_refresh(self, resource_key: str, at: datetime) -> bool:
        """Store ``at`` unless an equal or later refresh is already recorded.

        Returns False when the call lost against a newer value and was discarded.
        """
        at = _as_utc(at)
        with self._lock_for(resource_key):
            current = self.get_last_refreshed(resource_key)
            if current is not None and current >= at:
                self.logger.debug(
                    "Discarding refresh of %s at %s; %s already recorded",
                    resource_key,
                    _format_timestamp(at),
                    _format_timestamp(current),
                )
                return False
            self._store.set(_KEY_PREFIX + resource_key, _format_timestamp(at))
        return True

    def records(self) -> List[StalenessRecord]:
        """Return every known record, sorted by resource key."""
        records = []
        for key in self._store.keys():
            if not key.startswith(_KEY_PREFIX):
                continue
            resource_key = key[len(_KEY_PREFIX):]
            records.append(
                StalenessRecord(
                    resource_key=resource_key,
                    last_refreshed_at=self.get_last_refreshed(resource_key),
                )
            )
        return sorted(records, key=lambda record: record.resource_key)

    def _lock_for(self, resource_key: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(resource_key)
            if lock is None:
                lock = threading.Lock()
                self._locks[resource_key] = lock
            return lock


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _format_timestamp(value: datetime) -> str:
    return _as_utc(value).isoformat().replace("+00:00", "Z")


def _parse_timestamp(raw: str) -> Optional[datetime]:
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    return _as_utc(parsed)


__all__ = ["StalenessTracker"]
