"""Base class for per-entity normalizers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

from ..errors import MalformedContentError
from ..models import EntityKind, ListItem
from .dates import DateFormatter, LocalizedDateFormatter, parse_date

SUBTITLE_SEPARATOR = " | "


class Normalizer(ABC):
    """Maps one entity variant onto the common list item shape."""

    kind: EntityKind

    def __init__(self, formatter: DateFormatter | None = None) -> None:
        self.formatter = formatter or LocalizedDateFormatter()

    @abstractmethod
    def normalize(
        self,
        raw: Mapping[str, Any],
        *,
        title_override: Optional[str] = None,
        condensed: bool = False,
        position: Optional[int] = None,
    ) -> ListItem:
        """Return the list item for ``raw``; ``title_override`` names the detail screen."""

    def format_date(self, value: Any) -> Optional[str]:
        parsed = parse_date(value)
        if parsed is None:
            return None
        return self.formatter.format_date(parsed)


def require_mapping(raw: Any, kind: EntityKind) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise MalformedContentError(f"{kind.value} entry must be an object, got {type(raw).__name__}")
    return raw


def require_id(raw: Mapping[str, Any], kind: EntityKind) -> str:
    value = raw.get("id")
    if value is None or value == "":
        raise MalformedContentError(f"{kind.value} entry is missing an id")
    return str(value)


def compose_subtitle(*parts: Optional[str]) -> Optional[str]:
    """Join the present parts; None when nothing is left."""
    present = [part.strip() for part in parts if isinstance(part, str) and part.strip()]
    if not present:
        return None
    return SUBTITLE_SEPARATOR.join(present)


def nested_name(raw: Mapping[str, Any], key: str) -> Optional[str]:
    value = raw.get(key)
    if isinstance(value, Mapping):
        name = value.get("name")
        if isinstance(name, str) and name:
            return name
    return None


def detail_route_params(
    *,
    title: str,
    query: str,
    entity_id: str,
    root_route_name: str,
    details: Mapping[str, Any],
    share_message: Optional[str] = None,
) -> Dict[str, Any]:
    params: Dict[str, Any] = {
        "title": title,
        "query": query,
        "queryVariables": {"id": entity_id},
        "rootRouteName": root_route_name,
        "details": dict(details),
    }
    if share_message:
        params["shareContent"] = {"message": share_message}
    return params


def share_message(title: Optional[str], subtitle: Optional[str]) -> Optional[str]:
    """Text offered to the share sheet: the title, then the subtitle line."""
    lines = [part for part in (title, subtitle) if part]
    return "\n".join(lines) or None


__all__ = [
    "Normalizer",
    "SUBTITLE_SEPARATOR",
    "compose_subtitle",
    "detail_route_params",
    "nested_name",
    "require_id",
    "require_mapping",
    "share_message",
]
