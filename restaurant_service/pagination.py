"""
Paging primitives shared by the document store and the review engine.

Pages are 0-based internally. The HTTP layer converts 1-based page numbers
with ``PageRequest.from_one_based``.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Any, Callable, Generic, Sequence, TypeVar

from pydantic import BaseModel, Field, computed_field

T = TypeVar("T")
U = TypeVar("U")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class SortDirection(str, Enum):
    asc = "asc"
    desc = "desc"


class SortOrder(BaseModel):
    field: str = Field(..., min_length=1)
    direction: SortDirection = SortDirection.asc

    @classmethod
    def parse(cls, raw: str | None) -> SortOrder | None:
        """Parse ``"field"`` or ``"field,direction"``; ``None`` for empty input."""
        if raw is None or not raw.strip():
            return None
        field, _, direction = raw.partition(",")
        direction = direction.strip().lower() or SortDirection.asc.value
        return cls(field=field.strip(), direction=SortDirection(direction))

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.desc


class PageRequest(BaseModel):
    page: int = Field(default=0, ge=0)
    size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    sort: SortOrder | None = None

    @property
    def offset(self) -> int:
        return self.page * self.size

    @classmethod
    def from_one_based(
        cls, page: int, size: int, sort: SortOrder | None = None
    ) -> PageRequest:
        return cls(page=max(page - 1, 0), size=size, sort=sort)


class Page(BaseModel, Generic[T]):
    content: list[T] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    page: int = 0
    size: int = DEFAULT_PAGE_SIZE

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.size) if self.size else 0

    def map(self, fn: Callable[[T], U]) -> Page[U]:
        return Page[Any](
            content=[fn(item) for item in self.content],
            total=self.total,
            page=self.page,
            size=self.size,
        )


def sort_then_slice(
    items: Sequence[T],
    offset: int,
    limit: int,
    key: Callable[[T], Any] | None = None,
    reverse: bool = False,
) -> tuple[list[T], int]:
    """Sort a copy of ``items`` and cut ``[offset, offset + limit)`` out of it.

    Returns the slice together with the total item count. Sorting is stable,
    so equal keys keep their original relative order. An offset past the end
    yields an empty slice, not an error.
    """
    total = len(items)
    if key is not None:
        ordered = sorted(items, key=key, reverse=reverse)
    else:
        ordered = list(reversed(items)) if reverse else list(items)
    if offset >= total:
        return [], total
    return ordered[offset:offset + limit], total


def paginate(
    items: Sequence[T],
    page_request: PageRequest,
    key: Callable[[T], Any] | None = None,
    reverse: bool = False,
) -> Page[T]:
    content, total = sort_then_slice(
        items, page_request.offset, page_request.size, key=key, reverse=reverse
    )
    return Page[Any](
        content=content, total=total, page=page_request.page, size=page_request.size
    )
