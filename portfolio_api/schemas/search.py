"""
Search and tag schemas.
"""

from typing import Generic, List, TypeVar

from portfolio_api.schemas.common import CamelModel
from portfolio_api.schemas.content import ForumResponse, ProjectResponse
from portfolio_api.services.search_service import SearchResults

T = TypeVar("T")


class ProjectHit(ProjectResponse):
    score: float


class ForumHit(ForumResponse):
    score: float


class SearchBucket(CamelModel, Generic[T]):
    """One content kind's ranked page."""

    data: List[T]
    total: int
    total_pages: int


class SearchBuckets(CamelModel):
    projects: SearchBucket[ProjectHit]
    forums: SearchBucket[ForumHit]


class SearchMeta(CamelModel):
    requested_page: int
    requested_limit: int
    total_approximate_results: int


class SearchResponse(CamelModel):
    query: str
    results: SearchBuckets
    meta: SearchMeta

    @classmethod
    def from_results(cls, results: SearchResults) -> "SearchResponse":
        projects, forums = results.projects, results.forums
        return cls(
            query=results.query,
            results=SearchBuckets(
                projects=SearchBucket[ProjectHit](
                    data=[ProjectHit.from_entity(hit.item, score=hit.score) for hit in projects.items],
                    total=projects.total,
                    total_pages=projects.total_pages,
                ),
                forums=SearchBucket[ForumHit](
                    data=[ForumHit.from_entity(hit.item, score=hit.score) for hit in forums.items],
                    total=forums.total,
                    total_pages=forums.total_pages,
                ),
            ),
            meta=SearchMeta(
                requested_page=projects.page,
                requested_limit=projects.limit,
                total_approximate_results=results.total,
            ),
        )
