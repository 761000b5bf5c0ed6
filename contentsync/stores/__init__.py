"""Persistent stores used by the synchronization layer."""

from .kv import JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore
from .responses import ResponseCache, response_fingerprint
from .staleness import StalenessTracker

__all__ = [
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "ResponseCache",
    "StalenessTracker",
    "response_fingerprint",
]
