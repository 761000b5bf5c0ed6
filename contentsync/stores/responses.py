"""Persistent cache of GraphQL response payloads."""

from __future__ import annotations

import hashlib
import json
import threading
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

_CACHE_VERSION = 1


def response_fingerprint(document: str, variables: Mapping[str, Any]) -> str:
    """Identify a response by the query document and its variables."""
    normalized = " ".join(document.split())
    serialized = json.dumps(dict(variables), sort_keys=True, default=str)
    digest = hashlib.sha256(f"{normalized}\n{serialized}".encode("utf-8"))
    return digest.hexdigest()


class ResponseCache:
    """Stores the last ``data`` payload returned for each (document, variables)."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path
        self._entries: Dict[str, Dict[str, object]] = {}
        self._dirty = False
        self._lock = threading.Lock()
        if self._path is not None:
            self._load(self._path)

    def get(self, document: str, variables: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        entry = self._entries.get(response_fingerprint(document, variables))
        if not entry:
            return None
        data = entry.get("data")
        if not isinstance(data, dict):
            return None
        return data

    def store(
        self,
        document: str,
        variables: Mapping[str, Any],
        data: Mapping[str, Any],
    ) -> None:
        with self._lock:
            self._entries[response_fingerprint(document, variables)] = {
                "data": dict(data),
                "stored_at": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            }
            self._dirty = True

    def persist(self) -> None:
        with self._lock:
            if not self._dirty or self._path is None:
                return
            payload = {
                "version": _CACHE_VERSION,
                "entries": self._entries,
            }
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
            tmp_path.replace(self._path)
            self._dirty = False

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._dirty = True

    def __len__(self) -> int:
        return len(self._entries)

    # ------------------------------------------------------------------
    # Internal helpers

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError):
            return
        if not isinstance(data, dict) or data.get("version") != _CACHE_VERSION:
            return
        entries = data.get("entries")
        if not isinstance(entries, dict):
            return
        self._entries = {
            key: raw
            for key, raw in entries.items()
            if isinstance(key, str) and isinstance(raw, dict) and "data" in raw
        }
        self._dirty = False


__all__ = ["ResponseCache", "response_fingerprint"]
