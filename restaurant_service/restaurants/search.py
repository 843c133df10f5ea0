from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ..pagination import Page, PageRequest
from .data_store import DocumentStore
from .models import Restaurant

logger = logging.getLogger(__name__)


class SearchPath(str, Enum):
    rating = "rating"
    text = "text"
    geo = "geo"
    all = "all"


@dataclass(frozen=True)
class SearchPlan:
    path: SearchPath
    query: str | None = None
    min_rating: float | None = None
    latitude: float | None = None
    longitude: float | None = None
    radius_km: float | None = None


def resolve_search(
    query: str | None,
    min_rating: float | None,
    latitude: float | None = None,
    longitude: float | None = None,
    radius: float | None = None,
) -> SearchPlan:
    """
    Classify a search request into exactly one query path.

    Rules are checked in order and the first match wins:
    1. rating floor without a text term -> rating threshold query
    2. non-blank text term -> fuzzy text query with a rating floor (default 0)
    3. any location argument -> geo radius query
    4. otherwise -> plain listing
    """
    term = query.strip() if query else ""

    if min_rating is not None and not term:
        return SearchPlan(SearchPath.rating, min_rating=min_rating)

    if term:
        return SearchPlan(
            SearchPath.text,
            query=term,
            min_rating=min_rating if min_rating is not None else 0.0,
        )

    if latitude is not None or longitude is not None or radius is not None:
        return SearchPlan(
            SearchPath.geo, latitude=latitude, longitude=longitude, radius_km=radius
        )

    return SearchPlan(SearchPath.all)


def execute_search(
    store: DocumentStore, plan: SearchPlan, page_request: PageRequest
) -> Page[Restaurant]:
    logger.debug("Executing %s search: %s", plan.path.value, plan)
    if plan.path is SearchPath.rating:
        return store.query_by_min_rating(plan.min_rating, page_request)
    if plan.path is SearchPath.text:
        return store.query_by_text_and_min_rating(
            plan.query, plan.min_rating, page_request
        )
    if plan.path is SearchPath.geo:
        return store.query_by_geo_radius(
            plan.latitude, plan.longitude, plan.radius_km, page_request
        )
    return store.find_all(page_request)
