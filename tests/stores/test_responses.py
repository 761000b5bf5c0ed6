"""Tests for the response cache."""

from __future__ import annotations

import json
from pathlib import Path

from contentsync.stores import ResponseCache, response_fingerprint

DOCUMENT = "query { newsItems { id } }"


def test_fingerprint_ignores_whitespace_and_variable_order() -> None:
    a = response_fingerprint(DOCUMENT, {"limit": 10, "offset": 0})
    b = response_fingerprint("query {\n  newsItems { id }\n}", {"offset": 0, "limit": 10})

    assert a == b
    assert a != response_fingerprint(DOCUMENT, {"limit": 10, "offset": 10})


def test_response_cache_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "responses.json"
    cache = ResponseCache(path)
    cache.store(DOCUMENT, {"limit": 10}, {"newsItems": [{"id": "1"}]})
    cache.persist()

    reloaded = ResponseCache(path)

    assert reloaded.get(DOCUMENT, {"limit": 10}) == {"newsItems": [{"id": "1"}]}
    assert reloaded.get(DOCUMENT, {"limit": 20}) is None
    assert len(reloaded) == 1


def test_persist_without_changes_does_not_write(tmp_path: Path) -> None:
    path = tmp_path / "responses.json"
    ResponseCache(path).persist()

    assert not path.exists()


def test_response_cache_without_path_stays_in_memory() -> None:
    cache = ResponseCache()
    cache.store(DOCUMENT, {}, {"newsItems": []})
    cache.persist()

    assert cache.get(DOCUMENT, {}) == {"newsItems": []}
    cache.clear()
    assert len(cache) == 0


def test_response_cache_ignores_foreign_version(tmp_path: Path) -> None:
    path = tmp_path / "responses.json"
    path.write_text(json.dumps({"version": 0, "entries": {}}), encoding="utf-8")

    assert len(ResponseCache(path)) == 0


def test_persist_replaces_file_without_leaving_temporary(tmp_path: Path) -> None:
    path = tmp_path / "responses.json"
    path.write_text("stale", encoding="utf-8")
    cache = ResponseCache(path)
    cache.store(DOCUMENT, {}, {"newsItems": [{"id": "2"}]})
    cache.persist()

    assert sorted(entry.name for entry in tmp_path.iterdir()) == ["responses.json"]
    assert ResponseCache(path).get(DOCUMENT, {}) == {"newsItems": [{"id": "2"}]}
