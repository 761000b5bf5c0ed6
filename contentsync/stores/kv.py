"""Key-value stores backing persisted synchronization state."""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Dict, Iterable, Optional, Protocol

_STORE_VERSION = 1


class KeyValueStore(Protocol):
    """Minimal persistent mapping with per-key atomic get/set."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def keys(self) -> Iterable[str]:
        ...


class MemoryKeyValueStore:
    """Process-local store, used in tests and for throwaway sessions."""

    def __init__(self, initial: Dict[str, str] | None = None) -> None:
        self._entries: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        return self._entries.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._entries[key] = value

    def keys(self) -> Iterable[str]:
        return list(self._entries)


class JsonFileKeyValueStore:
    """Stores string values in a versioned JSON document on disk.

    Every ``set`` rewrites the document so values survive process restarts.
    Unreadable, corrupt or foreign-version files start out empty.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._entries: Dict[str, str] = {}
        self._write_lock = threading.Lock()
        self._load(path)

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> Optional[str]:
        return self._entries.get(key)

    def set(self, key: str, value: str) -> None:
        with self._write_lock:
            self._entries[key] = value
            self._persist()

    def keys(self) -> Iterable[str]:
        return list(self._entries)

    # ------------------------------------------------------------------
    # Internal helpers

    def _persist(self) -> None:
        payload = {"version": _STORE_VERSION, "entries": self._entries}
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        tmp_path.replace(self._path)

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError):
            return
        if not isinstance(data, dict) or data.get("version") != _STORE_VERSION:
            return
        entries = data.get("entries")
        if not isinstance(entries, dict):
            return
        self._entries = {
            key: value
            for key, value in entries.items()
            if isinstance(key, str) and isinstance(value, str)
        }


__all__ = ["JsonFileKeyValueStore", "KeyValueStore", "MemoryKeyValueStore"]
