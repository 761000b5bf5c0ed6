"""Tests for the GraphQL transport."""

from __future__ import annotations

import io
import json
from urllib.error import HTTPError, URLError

import pytest

from contentsync.errors import MalformedContentError, TransportError
from contentsync.models import FetchDirective, QueryType
from contentsync.queries import QueryRegistry
from contentsync.stores import ResponseCache
from contentsync.transport import GraphQLTransport
from contentsync.transport import graphql as graphql_module


class FakeResponse:
    def __init__(self, body: bytes) -> None:
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        return None


@pytest.fixture
def descriptor():
    return QueryRegistry().describe(QueryType.NEWS_ITEMS)


def test_http_sender_posts_query_and_variables(monkeypatch, descriptor) -> None:
    captured = {}

    def fake_urlopen(request, timeout):
        captured["url"] = request.full_url
        captured["body"] = json.loads(request.data.decode("utf-8"))
        captured["auth"] = request.get_header("Authorization")
        captured["timeout"] = timeout
        return FakeResponse(json.dumps({"data": {"newsItems": []}}).encode("utf-8"))

    monkeypatch.setattr(graphql_module, "urlopen", fake_urlopen)
    transport = GraphQLTransport(
        "https://cms.example.org/graphql/",
        headers={"Authorization": "Bearer token"},
        request_timeout=12.0,
    )

    result = transport.execute(descriptor, {"limit": 10}, FetchDirective.NETWORK_ONLY)

    assert result is not None
    assert result.data == {"newsItems": []}
    assert result.from_cache is False
    assert captured["url"] == "https://cms.example.org/graphql"
    assert captured["body"] == {"query": descriptor.document, "variables": {"limit": 10}}
    assert captured["auth"] == "Bearer token"
    assert captured["timeout"] == 12.0


def test_network_results_are_written_through_to_cache(descriptor) -> None:
    cache = ResponseCache()
    transport = GraphQLTransport(
        "https://cms.example.org/graphql",
        cache=cache,
        sender=lambda request: {"newsItems": [{"id": "1"}]},
    )

    transport.execute(descriptor, {}, FetchDirective.CACHE_AND_NETWORK)
    cached = transport.execute(descriptor, {}, FetchDirective.CACHE_ONLY)

    assert cached is not None
    assert cached.from_cache is True
    assert cached.data == {"newsItems": [{"id": "1"}]}


def test_cache_only_never_calls_sender(descriptor) -> None:
    def _fail(request):
        raise AssertionError("network must not be used")

    transport = GraphQLTransport("https://cms.example.org/graphql", sender=_fail)

    assert transport.execute(descriptor, {}, FetchDirective.CACHE_ONLY) is None


def test_missing_url_raises_transport_error(monkeypatch, descriptor) -> None:
    monkeypatch.delenv("CONTENTSYNC_SERVER_URL", raising=False)
    transport = GraphQLTransport()

    with pytest.raises(TransportError):
        transport.execute(descriptor, {}, FetchDirective.NETWORK_ONLY)


def test_url_falls_back_to_environment(monkeypatch) -> None:
    monkeypatch.setenv("CONTENTSYNC_SERVER_URL", "https://env.example.org/graphql/")

    assert GraphQLTransport().url == "https://env.example.org/graphql"


def test_http_errors_become_transport_errors(monkeypatch, descriptor) -> None:
    def fake_urlopen(request, timeout):
        raise HTTPError(request.full_url, 503, "Service Unavailable", hdrs=None, fp=io.BytesIO(b"down"))

    monkeypatch.setattr(graphql_module, "urlopen", fake_urlopen)
    transport = GraphQLTransport("https://cms.example.org/graphql")

    with pytest.raises(TransportError) as excinfo:
        transport.execute(descriptor, {}, FetchDirective.NETWORK_ONLY)

    assert excinfo.value.status == 503
    assert "down" in str(excinfo.value)


def test_connection_errors_become_transport_errors(monkeypatch, descriptor) -> None:
    def fake_urlopen(request, timeout):
        raise URLError("connection refused")

    monkeypatch.setattr(graphql_module, "urlopen", fake_urlopen)
    transport = GraphQLTransport("https://cms.example.org/graphql")

    with pytest.raises(TransportError):
        transport.execute(descriptor, {}, FetchDirective.NETWORK_ONLY)


def test_invalid_json_is_malformed(monkeypatch, descriptor) -> None:
    monkeypatch.setattr(graphql_module, "urlopen", lambda request, timeout: FakeResponse(b"<html>"))
    transport = GraphQLTransport("https://cms.example.org/graphql")

    with pytest.raises(MalformedContentError):
        transport.execute(descriptor, {}, FetchDirective.NETWORK_ONLY)


def test_graphql_errors_without_data_raise_transport_error() -> None:
    with pytest.raises(TransportError) as excinfo:
        GraphQLTransport._extract_data({"errors": [{"message": "boom"}], "data": None})

    assert "boom" in str(excinfo.value)


def test_response_without_data_is_malformed() -> None:
    with pytest.raises(MalformedContentError):
        GraphQLTransport._extract_data({"data": []})
