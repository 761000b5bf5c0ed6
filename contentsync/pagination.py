"""Merging of incrementally fetched pages into one ordered result set.

Duplicate identities are dropped and the first occurrence wins. A retried
"load more" that returns a page already merged therefore leaves the result
unchanged, and a page that overlaps the previous one (items shifting on the
server between requests) only contributes its unseen items.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Set, Tuple

from .models import ListItem, PagedResult


def merge(existing: PagedResult, incoming: Sequence[ListItem]) -> PagedResult:
    """Append ``incoming`` after ``existing`` in server order.

    An empty page leaves the items untouched and marks the result as
    exhausted so callers can disable further "load more" triggers.
    """
    if not incoming:
        if not existing.has_more:
            return existing
        return PagedResult(items=existing.items, has_more=False)

    seen: Set[Tuple[str, str]] = {item.identity for item in existing.items}
    appended: List[ListItem] = []
    for item in incoming:
        if item.identity in seen:
            continue
        seen.add(item.identity)
        appended.append(item)

    if not appended:
        return existing
    return PagedResult(items=existing.items + tuple(appended), has_more=True)


def first_page(items: Iterable[ListItem]) -> PagedResult:
    """Build the result of a fresh (non-paginated) fetch."""
    return merge(PagedResult(), list(items))


def next_offset(result: PagedResult) -> int:
    """Offset for the next fetch-more call, always recomputed from the items."""
    return len(result.items)


__all__ = ["first_page", "merge", "next_offset"]
