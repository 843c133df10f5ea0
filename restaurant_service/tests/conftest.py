from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from restaurant_service.restaurants.data_store import InMemoryDocumentStore, reset_store
from restaurant_service.restaurants.models import (
    Address,
    GeoLocation,
    Restaurant,
    RestaurantCreateUpdateRequest,
)

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

ADDRESS = {
    "street_number": "12A",
    "street_name": "High St",
    "city": "London",
    "state": "London",
    "postal_code": "E1 6AN",
    "country": "UK",
}


class FakeClock:
    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture(autouse=True)
def _clean_shared_store():
    reset_store()
    yield
    reset_store()


@pytest.fixture
def make_request():
    def _make(**overrides) -> RestaurantCreateUpdateRequest:
        data = {
            "name": "Sushi Palace",
            "cuisine_type": "Japanese",
            "contact_information": "+44 20 7946 0000",
            "address": dict(ADDRESS),
            "operating_hours": {
                "monday": {"open_time": "11:00", "close_time": "22:00"},
            },
            "photo_ids": ["p1"],
        }
        data.update(overrides)
        return RestaurantCreateUpdateRequest(**data)

    return _make


@pytest.fixture
def make_restaurant():
    def _make(
        name: str,
        cuisine_type: str,
        average_rating: float = 0.0,
        latitude: float = 51.5072,
        longitude: float = -0.1276,
    ) -> Restaurant:
        return Restaurant(
            name=name,
            cuisine_type=cuisine_type,
            contact_information="contact@example.com",
            address=Address(**ADDRESS),
            geo_location=GeoLocation(latitude=latitude, longitude=longitude),
            average_rating=average_rating,
        )

    return _make
