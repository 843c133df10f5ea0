from __future__ import annotations

import logging
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Any

import numpy as np
import pandas as pd

from ..errors import InvalidSearchError
from ..pagination import Page, PageRequest, paginate
from .fuzzy import best_match_distance
from .models import Restaurant

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0088

_FRAME_COLUMNS = ["id", "name", "cuisine_type", "average_rating", "latitude", "longitude"]


class DocumentStore(ABC):
    """Whole-document persistence and the query shapes restaurant search needs."""

    @abstractmethod
    def save(self, restaurant: Restaurant) -> Restaurant:
        """Insert or fully replace ``restaurant``; assigns an id on insert."""

    @abstractmethod
    def find_by_id(self, restaurant_id: str) -> Restaurant | None:
        ...

    @abstractmethod
    def delete_by_id(self, restaurant_id: str) -> None:
        """Remove a document. Deleting an unknown id is not an error."""

    @abstractmethod
    def query_by_min_rating(
        self, min_rating: float, page_request: PageRequest
    ) -> Page[Restaurant]:
        ...

    @abstractmethod
    def query_by_text_and_min_rating(
        self, text: str, min_rating: float, page_request: PageRequest
    ) -> Page[Restaurant]:
        """Fuzzy match on name or cuisine type, AND'd with a rating floor."""

    @abstractmethod
    def query_by_geo_radius(
        self,
        latitude: float | None,
        longitude: float | None,
        radius_km: float | None,
        page_request: PageRequest,
    ) -> Page[Restaurant]:
        ...

    @abstractmethod
    def find_all(self, page_request: PageRequest) -> Page[Restaurant]:
        ...


def haversine_km(
    latitude: float, longitude: float, latitudes: np.ndarray, longitudes: np.ndarray
) -> np.ndarray:
    """Great-circle distance in km from one point to arrays of points."""
    lat1 = np.radians(latitude)
    lat2 = np.radians(latitudes)
    dlat = lat2 - lat1
    dlon = np.radians(longitudes) - np.radians(longitude)
    a = np.sin(dlat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))


class InMemoryDocumentStore(DocumentStore):
    """
    Process-local document store.

    Documents are kept in their serialized (JSON-compatible) form so callers
    never share object references with the store; every read returns a fresh
    aggregate. Each single-document operation is atomic. Concurrent
    read-modify-write cycles on the same document resolve last-writer-wins.
    """

    def __init__(self) -> None:
        self._documents: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    # ── Document operations ──────────────────────────────────────────────

    def save(self, restaurant: Restaurant) -> Restaurant:
        document = restaurant.model_dump(mode="json")
        if not document.get("id"):
            document["id"] = uuid.uuid4().hex
        with self._lock:
            self._documents[document["id"]] = document
        return Restaurant.model_validate(document)

    def find_by_id(self, restaurant_id: str) -> Restaurant | None:
        with self._lock:
            document = self._documents.get(restaurant_id)
        if document is None:
            return None
        return Restaurant.model_validate(document)

    def delete_by_id(self, restaurant_id: str) -> None:
        with self._lock:
            self._documents.pop(restaurant_id, None)

    def clear(self) -> None:
        with self._lock:
            self._documents.clear()

    def __len__(self) -> int:
        return len(self._documents)

    # ── Queries ──────────────────────────────────────────────────────────

    def _frame(self) -> pd.DataFrame:
        """Flatten the searchable fields of every document, in insertion order."""
        with self._lock:
            documents = list(self._documents.values())
        rows = [
            {
                "id": d["id"],
                "name": d.get("name", ""),
                "cuisine_type": d.get("cuisine_type", ""),
                "average_rating": d.get("average_rating", 0.0),
                "latitude": d["geo_location"]["latitude"],
                "longitude": d["geo_location"]["longitude"],
            }
            for d in documents
        ]
        return pd.DataFrame(rows, columns=_FRAME_COLUMNS)

    def _page_of(self, ids: list[str], page_request: PageRequest) -> Page[Restaurant]:
        page = paginate(ids, page_request)
        # A document deleted between the frame snapshot and here is skipped
        restaurants = [r for r in map(self.find_by_id, page.content) if r is not None]
        return Page[Restaurant](
            content=restaurants, total=page.total, page=page.page, size=page.size
        )

    def query_by_min_rating(
        self, min_rating: float, page_request: PageRequest
    ) -> Page[Restaurant]:
        df = self._frame()
        matches = df.loc[df["average_rating"] >= min_rating, "id"]
        return self._page_of(matches.tolist(), page_request)

    def query_by_text_and_min_rating(
        self, text: str, min_rating: float, page_request: PageRequest
    ) -> Page[Restaurant]:
        df = self._frame()
        df = df.loc[df["average_rating"] >= min_rating].copy()
        df["_distance"] = [
            best_match_distance(text, name, cuisine)
            for name, cuisine in zip(df["name"], df["cuisine_type"])
        ]
        df = df.loc[df["_distance"].notna()]
        # Stable sort keeps insertion order among equally close matches
        df = df.sort_values("_distance", kind="stable")
        return self._page_of(df["id"].tolist(), page_request)

    def query_by_geo_radius(
        self,
        latitude: float | None,
        longitude: float | None,
        radius_km: float | None,
        page_request: PageRequest,
    ) -> Page[Restaurant]:
        missing = [
            name
            for name, value in (
                ("latitude", latitude),
                ("longitude", longitude),
                ("radius", radius_km),
            )
            if value is None
        ]
        if missing:
            raise InvalidSearchError(
                [f"{name} is required for a location search" for name in missing]
            )
        if radius_km < 0:
            raise InvalidSearchError(["radius must not be negative"])

        df = self._frame()
        if df.empty:
            return Page[Restaurant](page=page_request.page, size=page_request.size)
        df["_distance_km"] = haversine_km(
            latitude,
            longitude,
            df["latitude"].to_numpy(dtype=float),
            df["longitude"].to_numpy(dtype=float),
        )
        df = df.loc[df["_distance_km"] <= radius_km].sort_values(
            "_distance_km", kind="stable"
        )
        return self._page_of(df["id"].tolist(), page_request)

    def find_all(self, page_request: PageRequest) -> Page[Restaurant]:
        with self._lock:
            ids = list(self._documents.keys())
        return self._page_of(ids, page_request)


_store: InMemoryDocumentStore | None = None


def get_store() -> InMemoryDocumentStore:
    """Return the process-wide document store, creating it on first call."""
    global _store
    if _store is None:
        _store = InMemoryDocumentStore()
    return _store


def reset_store() -> None:
    get_store().clear()
