"""
Offset pagination helpers shared by listings and search.
"""

import math
from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

from portfolio_api.config import get_settings
from portfolio_api.errors import BadRequest

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def of(cls, page: int = 1, limit: Optional[int] = None) -> "PageRequest":
        """
        Validate page/limit.

        Raises:
            BadRequest: page < 1 or limit outside [1, max_page_size]
        """
        settings = get_settings()
        if limit is None:
            limit = settings.default_page_size
        if page < 1:
            raise BadRequest("page must be >= 1.")
        if not 1 <= limit <= settings.max_page_size:
            raise BadRequest(f"limit must be between 1 and {settings.max_page_size}.")
        return cls(page=page, limit=limit)


@dataclass
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0
