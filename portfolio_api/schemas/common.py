"""
Common schema types used across the API.
"""

from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from portfolio_api.services.pagination import Page

T = TypeVar("T")


class CamelModel(BaseModel):
    """Serialises camelCase; accepts camelCase or snake_case on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(CamelModel):
    """Standard error response."""

    detail: str
    code: Optional[str] = None
    errors: Optional[List[Any]] = None


class SuccessResponse(CamelModel):
    """Standard success response."""

    message: str


class PageMeta(CamelModel):
    current_page: int
    total_pages: int
    total: int
    limit: int


class PaginatedResponse(CamelModel, Generic[T]):
    """Paginated list response."""

    data: List[T]
    meta: PageMeta

    @classmethod
    def from_page(cls, page: Page, items: List[T]) -> "PaginatedResponse[T]":
        return cls(
            data=items,
            meta=PageMeta(
                current_page=page.page,
                total_pages=page.total_pages,
                total=page.total,
                limit=page.limit,
            ),
        )


class HealthResponse(CamelModel):
    """Health check response."""

    status: str = "ok"
    version: str
    database: str = "connected"
