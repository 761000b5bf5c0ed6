"""GraphQL over HTTP transport honoring fetch directives."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Sequence
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..errors import MalformedContentError, TransportError
from ..logging import get_logger
from ..models import FetchDirective
from ..queries.registry import QueryDescriptor
from ..stores.responses import ResponseCache


@dataclass
class GraphQLRequest:
    """A single GraphQL POST against the content server."""

    url: str
    document: str
    variables: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)
    timeout: Optional[float] = None


@dataclass(frozen=True)
class TransportResult:
    """The ``data`` of a response and whether it came from the cache."""

    data: Dict[str, Any]
    from_cache: bool


class Transport(Protocol):
    def execute(
        self,
        descriptor: QueryDescriptor,
        variables: Mapping[str, Any],
        directive: FetchDirective,
    ) -> Optional[TransportResult]:
        ...


class GraphQLTransport:
    """Executes queries against the content server with a response cache.

    ``CACHE_ONLY`` answers from the cache and never touches the network,
    returning None on a miss. ``NETWORK_ONLY`` and ``CACHE_AND_NETWORK`` both
    fetch and write the response through to the cache; callers wanting the
    cached leg of ``CACHE_AND_NETWORK`` read it first with ``CACHE_ONLY``.
    """

    ENV_URL_KEYS = ("CONTENTSYNC_SERVER_URL",)

    def __init__(
        self,
        url: str | None = None,
        *,
        cache: ResponseCache | None = None,
        request_timeout: Optional[float] = 30.0,
        headers: Mapping[str, str] | None = None,
        sender: Callable[[GraphQLRequest], Dict[str, Any]] | None = None,
    ) -> None:
        self.url = self._resolve_url(url)
        self.cache = cache if cache is not None else ResponseCache()
        self.request_timeout = request_timeout
        self.headers = dict(headers or {})
        self._sender = sender or self._http_sender
        self.logger = get_logger("transport")

    def execute(
        self,
        descriptor: QueryDescriptor,
        variables: Mapping[str, Any],
        directive: FetchDirective,
    ) -> Optional[TransportResult]:
        document = descriptor.document
        if directive is FetchDirective.CACHE_ONLY:
            cached = self.cache.get(document, variables)
            if cached is None:
                self.logger.debug("Cache miss for %s", descriptor.query_type.value)
                return None
            return TransportResult(data=cached, from_cache=True)

        if not self.url:
            raise TransportError("No content server URL configured.")
        request = GraphQLRequest(
            url=self.url,
            document=document,
            variables=dict(variables),
            headers=dict(self.headers),
            timeout=self.request_timeout,
        )
        self.logger.debug("Fetching %s from %s", descriptor.query_type.value, self.url)
        data = self._sender(request)
        self.cache.store(document, variables, data)
        self.cache.persist()
        return TransportResult(data=data, from_cache=False)

    @staticmethod
    def _http_sender(request: GraphQLRequest) -> Dict[str, Any]:
        body = json.dumps({"query": request.document, "variables": request.variables}).encode("utf-8")
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        headers.update(request.headers)
        http_request = Request(request.url, data=body, headers=headers, method="POST")
        timeout = request.timeout or 30.0

        try:
            with urlopen(http_request, timeout=timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = detail.strip() or exc.reason
            raise TransportError(
                f"GraphQL request failed with status {exc.code}: {message}", status=exc.code
            ) from exc
        except URLError as exc:
            raise TransportError(f"GraphQL request failed: {exc.reason}") from exc
        except TimeoutError as exc:
            raise TransportError("GraphQL request timed out") from exc

        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise MalformedContentError("GraphQL server returned invalid JSON") from exc

        return GraphQLTransport._extract_data(payload)

    @staticmethod
    def _extract_data(payload: Any) -> Dict[str, Any]:
        if not isinstance(payload, dict):
            raise MalformedContentError("GraphQL response must be a JSON object")
        errors = payload.get("errors")
        data = payload.get("data")
        if errors and not data:
            raise TransportError(f"GraphQL server reported errors: {_error_messages(errors)}")
        if not isinstance(data, dict):
            raise MalformedContentError("GraphQL response has no data object")
        return data

    def _resolve_url(self, url: str | None) -> str | None:
        if url:
            return url.rstrip("/")
        for key in self.ENV_URL_KEYS:
            value = os.getenv(key)
            if value:
                return value.rstrip("/")
        return None


def _error_messages(errors: Any) -> str:
    if not isinstance(errors, Sequence) or isinstance(errors, str):
        return str(errors)
    messages = []
    for error in errors:
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            messages.append(error["message"])
        else:
            messages.append(str(error))
    return "; ".join(messages)


__all__ = ["GraphQLRequest", "GraphQLTransport", "Transport", "TransportResult"]
