from __future__ import annotations

import logging
import os

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from .auth.dependencies import current_author, require_user
from .auth.models import LoginRequest
from .auth.users import authenticate
from .errors import (
    GeoLocationError,
    InvalidSearchError,
    RestaurantNotFoundError,
    ReviewConsistencyError,
    ReviewNotAllowedError,
    StorageError,
)
from .pagination import MAX_PAGE_SIZE, Page, PageRequest, SortOrder
from .restaurants.config import DEFAULT_RESTAURANT_CONFIG
from .restaurants.models import (
    Author,
    RestaurantCreateUpdateRequest,
    RestaurantOut,
    RestaurantSummaryOut,
    Review,
)
from .restaurants.service import RestaurantService, get_restaurant_service
from .reviews.models import ReviewCreateUpdateRequest
from .reviews.service import ReviewService, get_review_service

logger = logging.getLogger(__name__)

_DEFAULT_PAGE_SIZE = DEFAULT_RESTAURANT_CONFIG.default_page_size

app = FastAPI(title="Restaurant Review API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "restaurant-reviews-secret-change-in-production"),
)


# ── Error handlers ───────────────────────────────────────────────────────


@app.exception_handler(RestaurantNotFoundError)
async def restaurant_not_found_handler(request: Request, exc: RestaurantNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ReviewNotAllowedError)
async def review_not_allowed_handler(request: Request, exc: ReviewNotAllowedError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"detail": exc.message, "reason": exc.reason.value},
    )


@app.exception_handler(InvalidSearchError)
async def invalid_search_handler(request: Request, exc: InvalidSearchError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": exc.errors})


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("Storage error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Unable to save or retrieve data"})


@app.exception_handler(GeoLocationError)
async def geolocation_error_handler(request: Request, exc: GeoLocationError) -> JSONResponse:
    logger.error("Geolocation failed on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=502, content={"detail": "Unable to geolocate address"})


@app.exception_handler(ReviewConsistencyError)
async def consistency_error_handler(request: Request, exc: ReviewConsistencyError) -> JSONResponse:
    logger.error("Review consistency failure", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred"})


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Restaurant endpoints ─────────────────────────────────────────────────


@app.post("/api/restaurants", response_model=RestaurantOut)
def create_restaurant(
    body: RestaurantCreateUpdateRequest,
    user: dict = Depends(require_user),
    service: RestaurantService = Depends(get_restaurant_service),
) -> RestaurantOut:
    return RestaurantOut.from_restaurant(service.create_restaurant(body))


@app.get("/api/restaurants", response_model=Page[RestaurantSummaryOut])
def search_restaurants(
    q: str | None = None,
    min_rating: float | None = Query(default=None, ge=0.0, le=5.0),
    latitude: float | None = Query(default=None, ge=-90.0, le=90.0),
    longitude: float | None = Query(default=None, ge=-180.0, le=180.0),
    radius: float | None = Query(default=None, ge=0.0, description="Radius in km"),
    page: int = Query(default=1, ge=1),
    size: int = Query(default=_DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    service: RestaurantService = Depends(get_restaurant_service),
) -> Page[RestaurantSummaryOut]:
    results = service.search_restaurants(
        q, min_rating, latitude, longitude, radius, PageRequest.from_one_based(page, size)
    )
    return results.map(RestaurantSummaryOut.from_restaurant)


@app.get("/api/restaurants/{restaurant_id}", response_model=RestaurantOut)
def get_restaurant(
    restaurant_id: str,
    service: RestaurantService = Depends(get_restaurant_service),
) -> RestaurantOut:
    restaurant = service.get_restaurant(restaurant_id)
    if restaurant is None:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return RestaurantOut.from_restaurant(restaurant)


@app.put("/api/restaurants/{restaurant_id}", response_model=RestaurantOut)
def update_restaurant(
    restaurant_id: str,
    body: RestaurantCreateUpdateRequest,
    user: dict = Depends(require_user),
    service: RestaurantService = Depends(get_restaurant_service),
) -> RestaurantOut:
    return RestaurantOut.from_restaurant(service.update_restaurant(restaurant_id, body))


@app.delete("/api/restaurants/{restaurant_id}", status_code=204)
def delete_restaurant(
    restaurant_id: str,
    user: dict = Depends(require_user),
    service: RestaurantService = Depends(get_restaurant_service),
) -> Response:
    service.delete_restaurant(restaurant_id)
    return Response(status_code=204)


# ── Review endpoints ─────────────────────────────────────────────────────


@app.post("/api/restaurants/{restaurant_id}/reviews", response_model=Review)
def create_review(
    restaurant_id: str,
    body: ReviewCreateUpdateRequest,
    author: Author = Depends(current_author),
    service: ReviewService = Depends(get_review_service),
) -> Review:
    return service.create_review(author, restaurant_id, body)


@app.get("/api/restaurants/{restaurant_id}/reviews", response_model=Page[Review])
def list_reviews(
    restaurant_id: str,
    page: int = Query(default=1, ge=1),
    size: int = Query(default=_DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    sort: str | None = Query(default=None, description='e.g. "date_posted,desc" or "rating,asc"'),
    service: ReviewService = Depends(get_review_service),
) -> Page[Review]:
    try:
        sort_order = SortOrder.parse(sort)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid sort: {sort}")
    return service.list_reviews(restaurant_id, PageRequest.from_one_based(page, size, sort_order))


@app.get("/api/restaurants/{restaurant_id}/reviews/{review_id}", response_model=Review)
def get_review(
    restaurant_id: str,
    review_id: str,
    service: ReviewService = Depends(get_review_service),
) -> Review:
    review = service.get_review(restaurant_id, review_id)
    if review is None:
        raise HTTPException(status_code=404, detail="Review not found")
    return review


@app.put("/api/restaurants/{restaurant_id}/reviews/{review_id}", response_model=Review)
def update_review(
    restaurant_id: str,
    review_id: str,
    body: ReviewCreateUpdateRequest,
    author: Author = Depends(current_author),
    service: ReviewService = Depends(get_review_service),
) -> Review:
    return service.update_review(author, restaurant_id, review_id, body)


@app.delete("/api/restaurants/{restaurant_id}/reviews/{review_id}", status_code=204)
def delete_review(
    restaurant_id: str,
    review_id: str,
    user: dict = Depends(require_user),
    service: ReviewService = Depends(get_review_service),
) -> Response:
    service.delete_review(restaurant_id, review_id)
    return Response(status_code=204)
