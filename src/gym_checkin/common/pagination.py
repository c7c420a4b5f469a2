"""Shared pagination used by every repository, volatile and MySQL alike."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar

from ..core.exceptions import ValidationError

T = TypeVar("T")


@dataclass(frozen=True)
class Pagination:
    page: int = 1
    page_size: int = 10

    def __post_init__(self) -> None:
        if int(self.page) < 1:
            raise ValidationError("page must be >= 1")
        if int(self.page_size) < 1:
            raise ValidationError("pageSize must be >= 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class PaginatedResult(Generic[T]):
    data: List[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 0
    total_pages: int = 1

    @classmethod
    def from_page(cls, data: Sequence[T], *, total: int, pagination: Pagination) -> "PaginatedResult[T]":
        """Build metadata for a slice that was already cut (e.g. by LIMIT/OFFSET)."""
        return cls(
            data=list(data),
            total=int(total),
            page=pagination.page,
            page_size=pagination.page_size,
            total_pages=math.ceil(int(total) / pagination.page_size),
        )

    @classmethod
    def unpaged(cls, data: Sequence[T]) -> "PaginatedResult[T]":
        items = list(data)
        return cls(data=items, total=len(items), page=1, page_size=len(items), total_pages=1)

    def to_dict(self, serialize: Callable[[T], Any] = lambda item: item) -> dict:
        return {
            "data": [serialize(item) for item in self.data],
            "total": self.total,
            "page": self.page,
            "pageSize": self.page_size,
            "totalPages": self.total_pages,
        }


def paginate(items: Sequence[T], pagination: Optional[Pagination] = None) -> PaginatedResult[T]:
    """Slice an already filtered and sorted sequence.

    A page past the end yields an empty ``data`` list, never an error.
    """

    if pagination is None:
        return PaginatedResult.unpaged(items)

    start = pagination.offset
    return PaginatedResult.from_page(
        items[start:start + pagination.page_size],
        total=len(items),
        pagination=pagination,
    )
