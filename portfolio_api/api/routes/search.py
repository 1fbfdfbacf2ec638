"""
Tag listing and search endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Query

from portfolio_api.api.deps import Search
from portfolio_api.schemas.search import SearchResponse

router = APIRouter()


@router.get("/tags", response_model=List[str])
async def list_tags(search: Search):
    """Distinct project tags, sorted."""
    return await search.list_tags()


@router.get("/search", response_model=SearchResponse)
async def search_content(
    search: Search,
    query: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    """
    Rank projects and forums against the query.

    Each kind is ranked and paginated separately; the combined total in
    ``meta`` is approximate.
    """
    results = await search.search(query or "", page=page, limit=limit)
    return SearchResponse.from_results(results)
