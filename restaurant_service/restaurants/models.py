from __future__ import annotations

from datetime import datetime, time
from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints

from ..reviews.config import MAX_RATING, MIN_RATING

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

STREET_NUMBER_PATTERN = r"^[0-9]{1,5}[A-Za-z]?$"


class Address(BaseModel):
    street_number: Annotated[
        str, StringConstraints(strip_whitespace=True, pattern=STREET_NUMBER_PATTERN)
    ]
    street_name: NonBlankStr
    unit: str | None = None
    city: NonBlankStr
    state: NonBlankStr
    postal_code: NonBlankStr
    country: NonBlankStr


class GeoLocation(BaseModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class TimeRange(BaseModel):
    open_time: time
    close_time: time


class OperatingHours(BaseModel):
    monday: TimeRange | None = None
    tuesday: TimeRange | None = None
    wednesday: TimeRange | None = None
    thursday: TimeRange | None = None
    friday: TimeRange | None = None
    saturday: TimeRange | None = None
    sunday: TimeRange | None = None


class Photo(BaseModel):
    url: str = Field(..., min_length=1)
    upload_date: datetime


class Author(BaseModel):
    """The user a review is written by. Ownership compares ``id`` only."""

    id: str = Field(..., min_length=1)
    username: str | None = None
    given_name: str | None = None
    family_name: str | None = None


class Review(BaseModel):
    id: str
    content: str
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    photos: list[Photo] = Field(default_factory=list)
    date_posted: datetime
    last_edited: datetime
    written_by: Author


class Restaurant(BaseModel):
    """Aggregate root. Owns its reviews; persisted and replaced as one document."""

    id: str | None = None
    name: str
    cuisine_type: str
    contact_information: str
    address: Address
    geo_location: GeoLocation
    operating_hours: OperatingHours = Field(default_factory=OperatingHours)
    average_rating: float = 0.0
    photos: list[Photo] = Field(default_factory=list)
    reviews: list[Review] = Field(default_factory=list)

    def find_review(self, review_id: str) -> Review | None:
        return next((r for r in self.reviews if r.id == review_id), None)


class RestaurantCreateUpdateRequest(BaseModel):
    name: NonBlankStr
    cuisine_type: NonBlankStr
    contact_information: NonBlankStr
    address: Address
    operating_hours: OperatingHours = Field(default_factory=OperatingHours)
    photo_ids: list[NonBlankStr] = Field(
        ..., min_length=1, description="Ids of previously uploaded photos"
    )


class RestaurantOut(Restaurant):
    total_reviews: int = 0

    @classmethod
    def from_restaurant(cls, restaurant: Restaurant) -> RestaurantOut:
        return cls(**restaurant.model_dump(), total_reviews=len(restaurant.reviews))


class RestaurantSummaryOut(BaseModel):
    id: str
    name: str
    cuisine_type: str
    address: Address
    geo_location: GeoLocation
    average_rating: float
    total_reviews: int
    photos: list[Photo]

    @classmethod
    def from_restaurant(cls, restaurant: Restaurant) -> RestaurantSummaryOut:
        return cls(
            id=restaurant.id,
            name=restaurant.name,
            cuisine_type=restaurant.cuisine_type,
            address=restaurant.address,
            geo_location=restaurant.geo_location,
            average_rating=restaurant.average_rating,
            total_reviews=len(restaurant.reviews),
            photos=restaurant.photos,
        )
