"""Tests for the FastAPI service mode."""

from __future__ import annotations

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from contentsync.service import create_app
from tests._fixtures.content import NOW, news_item


@pytest.fixture
def client(synchronizer) -> TestClient:
    return TestClient(create_app(lambda: synchronizer))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_load_resource_endpoint(client: TestClient, server) -> None:
    server.replies = [{"newsItems": [news_item("1", "Markt eröffnet")]}]

    response = client.post("/resources/newsItems", json={"variables": {"limit": 10}})

    assert response.status_code == 200
    payload = response.json()
    assert payload["resource_key"] == "newsItems"
    assert payload["source"] == "network"
    assert payload["stale"] is False
    assert payload["has_more"] is True
    assert payload["items"][0]["title"] == "Markt eröffnet"
    assert payload["items"][0]["kind"] == "NewsItem"
    assert server.requests[0].variables == {"limit": 10}


def test_filter_is_applied_to_variables(client: TestClient, server) -> None:
    server.replies = [{"eventRecords": []}]

    response = client.post("/resources/eventRecords", json={"filter": "7"})

    assert response.status_code == 200
    assert server.requests[0].variables == {"categoryId": "7"}


def test_load_more_endpoint(client: TestClient, server) -> None:
    def _reply(request):
        offset = request.variables.get("offset", 0)
        return {"newsItems": [news_item(str(offset))]}

    server.replies = [_reply]

    client.post("/resources/newsItems", json={})
    response = client.post("/resources/newsItems/more")

    assert response.status_code == 200
    assert [item["id"] for item in response.json()["items"]] == ["0", "1"]


def test_load_more_unknown_resource_returns_404(client: TestClient) -> None:
    response = client.post("/resources/tours/more")

    assert response.status_code == 404


def test_unknown_query_type_returns_404(client: TestClient) -> None:
    response = client.post("/resources/weatherReports", json={})

    assert response.status_code == 404
    assert "weatherReports" in response.json()["detail"]


def test_public_json_file_without_name_returns_400(client: TestClient) -> None:
    response = client.post("/resources/publicJsonFile", json={})

    assert response.status_code == 400


def test_release_endpoint(client: TestClient) -> None:
    response = client.delete("/resources/newsItems")

    assert response.status_code == 200
    assert response.json() == {"status": "released"}


def test_staleness_endpoint(client: TestClient, tracker) -> None:
    tracker.record_refresh("tours", NOW - timedelta(minutes=2))

    response = client.get("/staleness")

    assert response.status_code == 200
    entries = response.json()
    assert [entry["resource_key"] for entry in entries] == ["tours"]
    assert entries[0]["last_refreshed_at"].startswith("2024-05-10T11:58:00")
