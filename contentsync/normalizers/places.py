"""Points of interest, tours and their categories."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..models import EntityKind, ListItem, QueryType
from .base import (
    Normalizer,
    detail_route_params,
    nested_name,
    require_id,
    require_mapping,
    share_message,
)
from .media import main_image


class _PlaceNormalizer(Normalizer):
    detail_query: QueryType
    detail_title: str
    root_route_name: str

    def normalize(
        self,
        raw: Mapping[str, Any],
        *,
        title_override: Optional[str] = None,
        condensed: bool = False,
        position: Optional[int] = None,
    ) -> ListItem:
        raw = require_mapping(raw, self.kind)
        entity_id = require_id(raw, self.kind)
        name = raw.get("name")
        name = name if isinstance(name, str) else ""
        category = nested_name(raw, "category")

        return ListItem(
            id=entity_id,
            kind=self.kind,
            title=name,
            subtitle=None if condensed else category,
            image=main_image(raw.get("mediaContents")),
            route_name="Detail",
            route_params=detail_route_params(
                title=title_override or self.detail_title,
                query=self.detail_query.value,
                entity_id=entity_id,
                root_route_name=self.root_route_name,
                details=raw,
                share_message=share_message(name, category),
            ),
        )


class PointOfInterestNormalizer(_PlaceNormalizer):
    kind = EntityKind.POINT_OF_INTEREST
    detail_query = QueryType.POINT_OF_INTEREST
    detail_title = "Ort"
    root_route_name = "PointsOfInterest"


class TourNormalizer(_PlaceNormalizer):
    kind = EntityKind.TOUR
    detail_query = QueryType.TOUR
    detail_title = "Touren"
    root_route_name = "Tours"


class CategoryNormalizer(Normalizer):
    """Categories open the index screen of their points of interest or tours."""

    kind = EntityKind.CATEGORY

    def normalize(
        self,
        raw: Mapping[str, Any],
        *,
        title_override: Optional[str] = None,
        condensed: bool = False,
        position: Optional[int] = None,
    ) -> ListItem:
        raw = require_mapping(raw, self.kind)
        entity_id = require_id(raw, self.kind)
        name = raw.get("name") if isinstance(raw.get("name"), str) else ""
        only_tours = not raw.get("pointsOfInterestCount") and bool(raw.get("toursCount"))
        query = QueryType.TOURS if only_tours else QueryType.POINTS_OF_INTEREST

        return ListItem(
            id=entity_id,
            kind=self.kind,
            title=name,
            route_name="Index",
            route_params={
                "title": title_override or name,
                "query": query.value,
                "queryVariables": {"category": name},
                "rootRouteName": "PointsOfInterestAndTours",
            },
        )
