"""Tests for normalizing entities into list items."""

from __future__ import annotations

import json

import pytest

from contentsync.errors import MalformedContentError
from contentsync.models import EntityKind, QueryType
from contentsync.normalizers import extract_entities, normalize, normalize_many
from contentsync.normalizers.base import compose_subtitle
from tests._fixtures.content import NOW, event_record, image, news_item, point_of_interest, tour


def test_news_item_subtitle_joins_date_and_provider() -> None:
    raw = news_item("1", "Markt eröffnet", media=[image("https://cdn.example.org/markt.jpg")])

    item = normalize(QueryType.NEWS_ITEMS, raw)

    assert item.kind is EntityKind.NEWS_ITEM
    assert item.title == "Markt eröffnet"
    assert item.subtitle == "09.05.2024 | Stadtverwaltung"
    assert item.image == "https://cdn.example.org/markt.jpg"
    assert item.route_name == "Detail"
    assert item.route_params["query"] == "newsItem"
    assert item.route_params["queryVariables"] == {"id": "1"}
    assert item.route_params["rootRouteName"] == "NewsItems"
    assert item.route_params["title"] == "Nachricht"


def test_subtitle_has_no_trailing_separator_when_provider_missing() -> None:
    item = normalize(QueryType.NEWS_ITEMS, news_item("1", provider=None))

    assert item.subtitle == "09.05.2024"


def test_subtitle_is_none_when_every_part_is_missing() -> None:
    raw = news_item("1", provider=None)
    raw["publishedAt"] = None

    assert normalize(QueryType.NEWS_ITEMS, raw).subtitle is None
    assert compose_subtitle(None, "  ", "") is None


def test_title_override_names_the_detail_screen() -> None:
    item = normalize(QueryType.EVENT_RECORDS, event_record("5"), "Veranstaltungen im Park")

    assert item.route_params["title"] == "Veranstaltungen im Park"


def test_event_subtitle_prefers_address_addition() -> None:
    with_addition = normalize(QueryType.EVENT_RECORDS, event_record("1", addition="Burghof"))
    city_only = normalize(QueryType.EVENT_RECORDS, event_record("2"))
    no_address = normalize(QueryType.EVENT_RECORDS, event_record("3", city=None))

    assert with_addition.subtitle == "20.05.2024 | Burghof"
    assert city_only.subtitle == "20.05.2024 | Bad Belzig"
    assert no_address.subtitle == "20.05.2024"
    assert city_only.sort_key == "2024-05-20"


def test_places_use_category_subtitle_unless_condensed() -> None:
    item = normalize(QueryType.POINTS_OF_INTEREST, point_of_interest("9"))
    condensed = normalize(QueryType.TOURS, tour("9"), condensed=True)

    assert item.subtitle == "Museen"
    assert item.route_params["query"] == "pointOfInterest"
    assert condensed.subtitle is None
    assert condensed.route_params["rootRouteName"] == "Tours"


def test_category_routes_to_index_of_its_entities() -> None:
    museums = normalize(QueryType.CATEGORIES, {"id": "c1", "name": "Museen", "pointsOfInterestCount": 4})
    hikes = normalize(
        QueryType.CATEGORIES, {"id": "c2", "name": "Wandern", "pointsOfInterestCount": 0, "toursCount": 3}
    )

    assert museums.route_name == "Index"
    assert museums.route_params["query"] == "pointsOfInterest"
    assert museums.route_params["queryVariables"] == {"category": "Museen"}
    assert hikes.route_params["query"] == "tours"


def test_missing_image_yields_none() -> None:
    raw = news_item("1", media=[{"contentType": "video", "sourceUrl": {"url": "https://x/v.mp4"}}])

    assert normalize(QueryType.NEWS_ITEMS, raw).image is None


def test_main_image_skips_leading_non_image_media() -> None:
    raw = news_item(
        "1",
        media=[
            {"contentType": "video", "sourceUrl": {"url": "https://cdn.example.org/clip.mp4"}},
            image("https://cdn.example.org/a.jpg"),
            image("https://cdn.example.org/b.jpg"),
        ],
    )

    assert normalize(QueryType.NEWS_ITEMS, raw).image == "https://cdn.example.org/a.jpg"


def test_tour_detail_route_uses_tours_title_and_share_content() -> None:
    item = normalize(QueryType.TOURS, tour("4"))

    assert item.route_params["title"] == "Touren"
    assert item.route_params["query"] == "tour"
    assert item.route_params["shareContent"] == {"message": "Burgenrundweg\nWandern"}


def test_share_content_carries_title_and_subtitle() -> None:
    item = normalize(QueryType.NEWS_ITEMS, news_item("1", "Markt eröffnet"))
    untitled = normalize(QueryType.EVENT_RECORDS, {"id": "2"})

    assert item.route_params["shareContent"] == {"message": "Markt eröffnet\n09.05.2024 | Stadtverwaltung"}
    assert "shareContent" not in untitled.route_params


def test_entity_without_id_is_malformed() -> None:
    with pytest.raises(MalformedContentError):
        normalize(QueryType.TOURS, {"name": "Ohne Id"})


def test_normalize_many_filters_past_events() -> None:
    data = {
        "eventRecords": [
            event_record("past", list_date="2024-05-09"),
            event_record("today", list_date="2024-05-10"),
            event_record("later", list_date="2024-06-01"),
            event_record("broken", list_date="soon"),
        ]
    }

    items = normalize_many(QueryType.EVENT_RECORDS, data, now=NOW)

    assert [item.id for item in items] == ["today", "later"]


def test_upcoming_boundary_is_inclusive_for_timestamps() -> None:
    data = {
        "eventRecords": [
            event_record("now", list_date=NOW.isoformat()),
            event_record("earlier", list_date="2024-05-10T11:59:59+00:00"),
        ]
    }

    items = normalize_many(QueryType.EVENT_RECORDS, data, now=NOW)

    assert [item.id for item in items] == ["now"]


def test_upcoming_filter_can_be_disabled() -> None:
    data = {"eventRecords": [event_record("past", list_date="2020-01-01")]}

    assert normalize_many(QueryType.EVENT_RECORDS, data, now=NOW, upcoming_only=False)[0].id == "past"


def test_mixed_places_and_tours_keep_their_kinds() -> None:
    data = {"pointsOfInterest": [point_of_interest("1")], "tours": [tour("1")]}

    items = normalize_many(QueryType.POINTS_OF_INTEREST_AND_TOURS, data)

    assert [item.identity for item in items] == [("PointOfInterest", "1"), ("Tour", "1")]


def test_public_json_file_entries() -> None:
    entries = [
        {"title": "Willkommen", "routeName": "Html", "params": {"query": "publicHtmlFile"}},
        {"picture": {"uri": "https://cdn.example.org/banner.png"}},
    ]
    data = {"publicJsonFile": {"name": "homeCarousel", "content": json.dumps(entries)}}

    items = normalize_many(QueryType.PUBLIC_JSON_FILE, data, "Start")

    assert [item.kind for item in items] == [EntityKind.CONTENT_ENTRY] * 2
    assert items[0].route_name == "Html"
    assert items[0].route_params == {"query": "publicHtmlFile", "title": "Start"}
    assert items[0].subtitle is None
    assert items[1].image == "https://cdn.example.org/banner.png"
    assert items[1].id == "1-https://cdn.example.org/banner.png"


def test_missing_public_json_file_is_empty() -> None:
    assert normalize_many(QueryType.PUBLIC_JSON_FILE, {"publicJsonFile": None}) == []


def test_invalid_public_json_content_is_malformed() -> None:
    data = {"publicJsonFile": {"content": "{not json"}}

    with pytest.raises(MalformedContentError):
        normalize_many(QueryType.PUBLIC_JSON_FILE, data)


def test_list_payload_of_wrong_type_is_malformed() -> None:
    with pytest.raises(MalformedContentError):
        extract_entities(QueryType.NEWS_ITEMS, {"newsItems": {"id": "1"}})


def test_single_entity_queries_extract_one_entity() -> None:
    assert extract_entities(QueryType.NEWS_ITEM, {"newsItem": news_item("1")}) == [news_item("1")]
    assert extract_entities(QueryType.NEWS_ITEM, {"newsItem": None}) == []


def test_normalize_many_preserves_server_order() -> None:
    data = {"newsItems": [news_item(str(index)) for index in (3, 1, 2)]}

    assert [item.id for item in normalize_many(QueryType.NEWS_ITEMS, data)] == ["3", "1", "2"]
