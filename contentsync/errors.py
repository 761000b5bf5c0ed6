"""Exception types raised by the synchronization layer."""

from __future__ import annotations


class ContentSyncError(RuntimeError):
    """Base class for contentsync failures."""


class NotFoundError(ContentSyncError, LookupError):
    """Raised when the query registry is asked for an unknown query type."""

    def __init__(self, query_type: object) -> None:
        super().__init__(f"Unknown query type: {query_type!r}")
        self.query_type = query_type


class TransportError(ContentSyncError):
    """Raised when the network or the backend fails during a fetch."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class MalformedContentError(ContentSyncError):
    """Raised when a fetched payload cannot be parsed or normalized."""


class ConfigError(ContentSyncError):
    """Raised when the configuration file cannot be parsed."""


__all__ = [
    "ConfigError",
    "ContentSyncError",
    "MalformedContentError",
    "NotFoundError",
    "TransportError",
]
