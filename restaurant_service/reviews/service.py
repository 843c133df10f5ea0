from __future__ import annotations

import logging
import math
import uuid
from datetime import datetime
from typing import Any, Callable

from ..errors import (
    RestaurantNotFoundError,
    ReviewConsistencyError,
    ReviewNotAllowedError,
    ReviewNotAllowedReason,
)
from ..pagination import Page, PageRequest, SortDirection, SortOrder, paginate
from ..restaurants.data_store import DocumentStore, get_store
from ..restaurants.models import Author, Restaurant, Review
from ..restaurants.service import build_photos, utcnow
from .config import DEFAULT_REVIEW_POLICY, ReviewPolicyConfig
from .models import ReviewCreateUpdateRequest

logger = logging.getLogger(__name__)

DEFAULT_REVIEW_SORT = SortOrder(field="date_posted", direction=SortDirection.desc)

_SORT_KEYS: dict[str, Callable[[Review], Any]] = {
    "date_posted": lambda r: r.date_posted,
    "datePosted": lambda r: r.date_posted,
    "rating": lambda r: r.rating,
}


def average_rating(reviews: list[Review]) -> float:
    """Mean review rating, 0 for no reviews."""
    if not reviews:
        return 0.0
    return math.fsum(r.rating for r in reviews) / len(reviews)


class ReviewService:
    """
    Mutations of the review collection embedded in a restaurant aggregate.

    Every mutation loads the whole restaurant, changes it in memory,
    recomputes the average rating and saves the whole document back.
    """

    def __init__(
        self,
        store: DocumentStore,
        clock: Callable[[], datetime] = utcnow,
        policy: ReviewPolicyConfig = DEFAULT_REVIEW_POLICY,
    ) -> None:
        self._store = store
        self._clock = clock
        self._policy = policy

    def _get_restaurant_or_raise(self, restaurant_id: str) -> Restaurant:
        restaurant = self._store.find_by_id(restaurant_id)
        if restaurant is None:
            raise RestaurantNotFoundError(
                f"Restaurant with id not found: {restaurant_id}"
            )
        return restaurant

    def _save_with_rating(self, restaurant: Restaurant) -> Restaurant:
        restaurant.average_rating = average_rating(restaurant.reviews)
        return self._store.save(restaurant)

    def create_review(
        self, author: Author, restaurant_id: str, request: ReviewCreateUpdateRequest
    ) -> Review:
        restaurant = self._get_restaurant_or_raise(restaurant_id)

        if any(r.written_by.id == author.id for r in restaurant.reviews):
            logger.warning(
                "Rejected second review by %s on restaurant %s", author.id, restaurant_id
            )
            raise ReviewNotAllowedError(
                ReviewNotAllowedReason.duplicate_author,
                "User already has a review for this restaurant",
            )

        now = self._clock()
        review = Review(
            id=str(uuid.uuid4()),
            content=request.content,
            rating=request.rating,
            photos=build_photos(request.photo_ids, now),
            date_posted=now,
            last_edited=now,
            written_by=author,
        )
        restaurant.reviews.append(review)

        saved = self._save_with_rating(restaurant)
        created = saved.find_review(review.id)
        if created is None:
            raise ReviewConsistencyError(
                f"Review {review.id} missing after saving restaurant {restaurant_id}"
            )
        logger.info("Created review %s on restaurant %s", review.id, restaurant_id)
        return created

    def list_reviews(self, restaurant_id: str, page_request: PageRequest) -> Page[Review]:
        restaurant = self._get_restaurant_or_raise(restaurant_id)

        sort = page_request.sort or DEFAULT_REVIEW_SORT
        key = _SORT_KEYS.get(sort.field, _SORT_KEYS["date_posted"])
        return paginate(restaurant.reviews, page_request, key=key, reverse=sort.descending)

    def get_review(self, restaurant_id: str, review_id: str) -> Review | None:
        restaurant = self._get_restaurant_or_raise(restaurant_id)
        return restaurant.find_review(review_id)

    def update_review(
        self,
        author: Author,
        restaurant_id: str,
        review_id: str,
        request: ReviewCreateUpdateRequest,
    ) -> Review:
        restaurant = self._get_restaurant_or_raise(restaurant_id)

        existing = restaurant.find_review(review_id)
        if existing is None:
            raise ReviewNotAllowedError(
                ReviewNotAllowedReason.review_not_found, "Review does not exist"
            )

        if existing.written_by.id != author.id:
            logger.warning("Rejected edit of review %s by non-owner %s", review_id, author.id)
            raise ReviewNotAllowedError(
                ReviewNotAllowedReason.not_owner, "Cannot update another user's review"
            )

        now = self._clock()
        if now > existing.date_posted + self._policy.edit_window:
            logger.warning("Rejected edit of review %s after edit window", review_id)
            raise ReviewNotAllowedError(
                ReviewNotAllowedReason.edit_window_expired,
                "Review can no longer be edited",
            )

        updated = existing.model_copy(
            update={
                "content": request.content,
                "rating": request.rating,
                "photos": build_photos(request.photo_ids, now),
                "last_edited": now,
            }
        )
        # The edited review moves to the end of the collection
        restaurant.reviews = [r for r in restaurant.reviews if r.id != review_id]
        restaurant.reviews.append(updated)

        saved = self._save_with_rating(restaurant)
        stored = saved.find_review(review_id)
        if stored is None:
            raise ReviewConsistencyError(
                f"Review {review_id} missing after saving restaurant {restaurant_id}"
            )
        logger.info("Updated review %s on restaurant %s", review_id, restaurant_id)
        return stored

    def delete_review(self, restaurant_id: str, review_id: str) -> None:
        restaurant = self._get_restaurant_or_raise(restaurant_id)
        restaurant.reviews = [r for r in restaurant.reviews if r.id != review_id]
        self._save_with_rating(restaurant)
        logger.info("Deleted review %s on restaurant %s", review_id, restaurant_id)


def get_review_service() -> ReviewService:
    return ReviewService(get_store())
