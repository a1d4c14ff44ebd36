"""Generic paginated response wrapper."""
from __future__ import annotations

from math import ceil
from typing import Generic, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

ItemT = TypeVar("ItemT")


class ApiModel(BaseModel):
    """Base model emitting camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PaginatedResponse(ApiModel, Generic[ItemT]):
    """A page of ``items`` plus the counters clients need to navigate."""

    items: list[ItemT]
    total_count: int
    page_size: int
    current_page: int
    total_pages: int

    @classmethod
    def build(
        cls,
        items: Sequence[ItemT],
        total_count: int,
        page_size: int,
        current_page: int,
    ) -> "PaginatedResponse[ItemT]":
        total_pages = ceil(total_count / page_size) if page_size > 0 else 0
        return cls(
            items=list(items),
            total_count=total_count,
            page_size=page_size,
            current_page=current_page,
            total_pages=total_pages,
        )
