from __future__ import annotations

from enum import Enum


class RestaurantServiceError(Exception):
    """Base class for every error raised by the restaurant/review core."""


class RestaurantNotFoundError(RestaurantServiceError):
    pass


class ReviewNotAllowedReason(str, Enum):
    duplicate_author = "DUPLICATE_AUTHOR"
    review_not_found = "REVIEW_NOT_FOUND"
    not_owner = "NOT_OWNER"
    edit_window_expired = "EDIT_WINDOW_EXPIRED"


class ReviewNotAllowedError(RestaurantServiceError):
    """A review policy rejected the request. Terminal for that request."""

    def __init__(self, reason: ReviewNotAllowedReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message


class InvalidSearchError(RestaurantServiceError):
    """Search arguments that cannot form a valid query."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


class StorageError(RestaurantServiceError):
    """The document store could not save or load data."""


class GeoLocationError(RestaurantServiceError):
    """The geolocator could not resolve an address."""


class ReviewConsistencyError(RestaurantServiceError):
    """A review that was just persisted could not be read back."""
