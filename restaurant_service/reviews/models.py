from __future__ import annotations

from pydantic import BaseModel, Field

from ..restaurants.models import NonBlankStr
from .config import MAX_RATING, MIN_RATING


class ReviewCreateUpdateRequest(BaseModel):
    content: NonBlankStr
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    photo_ids: list[NonBlankStr] = Field(default_factory=list)
