"""
Notes API - Response Envelope Schemas
=====================================

What:  The JSON envelope wrapped around every API response, and the generic
       paginated payload used by the paged listing.
How:   Field names are snake_case in Python and camelCase on the wire
       (alias generator); FastAPI serializes responses by alias.

Envelope:
    { success, data, message, errors, timestamp, traceId }

Paginated data:
    { items, totalCount, page, pageSize, search, sortBy, sortDescending,
      totalPages, hasNextPage, hasPreviousPage, nextPage, previousPage,
      firstItemIndex, lastItemIndex }
"""

import math
from datetime import datetime, timezone
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base for every wire model: camelCase aliases, snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[T]):
    """Standard API response wrapper."""

    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None
    errors: Optional[List[str]] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    trace_id: Optional[str] = None

    @classmethod
    def ok(
        cls,
        data: Optional[T] = None,
        message: Optional[str] = None,
        trace_id: Optional[str] = None,
    ) -> "ApiResponse[T]":
        return cls(success=True, data=data, message=message, trace_id=trace_id)

    @classmethod
    def fail(
        cls,
        message: str,
        errors: Optional[List[str]] = None,
        trace_id: Optional[str] = None,
    ) -> "ApiResponse[T]":
        return cls(success=False, message=message, errors=errors, trace_id=trace_id)


class PaginatedResponse(CamelModel, Generic[T]):
    """
    One page of a filtered, sorted listing.

    `total_count` is the number of matches before pagination. The page
    indicators are derived on serialization. An empty match set reports no
    neighbours and zero item indexes, whatever page was asked for.
    """

    items: List[T] = Field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = 10
    search: Optional[str] = None
    sort_by: Optional[str] = None
    sort_descending: bool = True

    @computed_field(alias="totalPages")
    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @computed_field(alias="hasNextPage")
    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @computed_field(alias="hasPreviousPage")
    @property
    def has_previous_page(self) -> bool:
        return self.total_count > 0 and self.page > 1

    @computed_field(alias="nextPage")
    @property
    def next_page(self) -> Optional[int]:
        return self.page + 1 if self.has_next_page else None

    @computed_field(alias="previousPage")
    @property
    def previous_page(self) -> Optional[int]:
        return self.page - 1 if self.has_previous_page else None

    @computed_field(alias="firstItemIndex")
    @property
    def first_item_index(self) -> int:
        if self.total_count == 0:
            return 0
        return (self.page - 1) * self.page_size + 1

    @computed_field(alias="lastItemIndex")
    @property
    def last_item_index(self) -> int:
        return min(self.page * self.page_size, self.total_count)
