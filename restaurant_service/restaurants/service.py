from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from ..errors import RestaurantNotFoundError
from ..pagination import Page, PageRequest
from .data_store import DocumentStore, get_store
from .geolocation import GeoLocator, get_geolocator
from .models import Photo, Restaurant, RestaurantCreateUpdateRequest
from .search import execute_search, resolve_search

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def build_photos(photo_ids: list[str], uploaded_at: datetime) -> list[Photo]:
    return [Photo(url=photo_id, upload_date=uploaded_at) for photo_id in photo_ids]


class RestaurantService:
    """Lifecycle of restaurant aggregates. Never touches the review collection."""

    def __init__(
        self,
        store: DocumentStore,
        geolocator: GeoLocator,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._geolocator = geolocator
        self._clock = clock

    def create_restaurant(self, request: RestaurantCreateUpdateRequest) -> Restaurant:
        # Geolocate first: a failure must leave nothing persisted
        geo_location = self._geolocator.locate(request.address)

        restaurant = Restaurant(
            name=request.name,
            cuisine_type=request.cuisine_type,
            contact_information=request.contact_information,
            address=request.address,
            geo_location=geo_location,
            operating_hours=request.operating_hours,
            average_rating=0.0,
            photos=build_photos(request.photo_ids, self._clock()),
            reviews=[],
        )
        saved = self._store.save(restaurant)
        logger.info("Created restaurant %s (%s)", saved.id, saved.name)
        return saved

    def get_restaurant(self, restaurant_id: str) -> Restaurant | None:
        return self._store.find_by_id(restaurant_id)

    def update_restaurant(
        self, restaurant_id: str, request: RestaurantCreateUpdateRequest
    ) -> Restaurant:
        restaurant = self._store.find_by_id(restaurant_id)
        if restaurant is None:
            raise RestaurantNotFoundError(f"Restaurant not found: {restaurant_id}")

        geo_location = self._geolocator.locate(request.address)

        restaurant.name = request.name
        restaurant.cuisine_type = request.cuisine_type
        restaurant.contact_information = request.contact_information
        restaurant.address = request.address
        restaurant.geo_location = geo_location
        restaurant.operating_hours = request.operating_hours
        restaurant.photos = build_photos(request.photo_ids, self._clock())

        saved = self._store.save(restaurant)
        logger.info("Updated restaurant %s", restaurant_id)
        return saved

    def delete_restaurant(self, restaurant_id: str) -> None:
        self._store.delete_by_id(restaurant_id)
        logger.info("Deleted restaurant %s", restaurant_id)

    def search_restaurants(
        self,
        query: str | None,
        min_rating: float | None,
        latitude: float | None,
        longitude: float | None,
        radius: float | None,
        page_request: PageRequest,
    ) -> Page[Restaurant]:
        plan = resolve_search(query, min_rating, latitude, longitude, radius)
        return execute_search(self._store, plan, page_request)


def get_restaurant_service() -> RestaurantService:
    return RestaurantService(get_store(), get_geolocator())
