"""Tests for merging paginated results."""

from __future__ import annotations

from contentsync.models import EntityKind, ListItem, PagedResult
from contentsync.pagination import first_page, merge, next_offset


def _item(entity_id: str, kind: EntityKind = EntityKind.NEWS_ITEM) -> ListItem:
    return ListItem(id=entity_id, kind=kind, title=f"Item {entity_id}", route_name="Detail")


def _ids(result: PagedResult) -> list[str]:
    return [item.id for item in result.items]


def test_merge_appends_in_server_order() -> None:
    existing = first_page([_item("1"), _item("2")])

    merged = merge(existing, [_item("3"), _item("4")])

    assert _ids(merged) == ["1", "2", "3", "4"]
    assert merged.has_more is True
    assert next_offset(merged) == 4


def test_merge_drops_duplicates_and_keeps_first_occurrence() -> None:
    original = ListItem(id="2", kind=EntityKind.NEWS_ITEM, title="Original", route_name="Detail")
    existing = first_page([_item("1"), original])
    shifted = ListItem(id="2", kind=EntityKind.NEWS_ITEM, title="Shifted", route_name="Detail")

    merged = merge(existing, [shifted, _item("3")])

    assert _ids(merged) == ["1", "2", "3"]
    assert merged.items[1].title == "Original"


def test_merge_is_idempotent_for_a_retried_page() -> None:
    existing = first_page([_item("1")])
    page = [_item("2"), _item("3")]

    once = merge(existing, page)
    twice = merge(once, page)

    assert twice == once


def test_empty_page_marks_result_exhausted() -> None:
    existing = first_page([_item("1"), _item("2")])

    merged = merge(existing, [])

    assert _ids(merged) == ["1", "2"]
    assert merged.has_more is False
    assert merge(merged, []) is merged


def test_identity_includes_kind() -> None:
    existing = first_page([_item("7", EntityKind.POINT_OF_INTEREST)])

    merged = merge(existing, [_item("7", EntityKind.TOUR)])

    assert [item.identity for item in merged.items] == [("PointOfInterest", "7"), ("Tour", "7")]


def test_duplicates_within_one_page_collapse() -> None:
    merged = first_page([_item("1"), _item("1"), _item("2")])

    assert _ids(merged) == ["1", "2"]


def test_first_page_of_nothing_has_no_more() -> None:
    result = first_page([])

    assert result.items == ()
    assert result.has_more is False
    assert next_offset(result) == 0
