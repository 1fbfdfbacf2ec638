"""
Tag enumeration and relevance search over projects and forums.

Relevance is a weighted count of query terms found in each field, computed
in SQL so the same query works on SQLite and PostgreSQL. Each content kind
is ranked and paginated on its own; results are never merged across kinds.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import String, case, exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.errors import BadRequest
from portfolio_api.kernel.models import Forum, Project, ProjectTag
from portfolio_api.services.pagination import Page, PageRequest

T = TypeVar("T")

TITLE_WEIGHT = 3
TAGS_WEIGHT = 2
DESCRIPTION_WEIGHT = 1


@dataclass(frozen=True)
class SearchHit(Generic[T]):
    item: T
    score: float


@dataclass
class SearchResults:
    query: str
    projects: Page[SearchHit[Project]] = field(default_factory=Page)
    forums: Page[SearchHit[Forum]] = field(default_factory=Page)

    @property
    def total(self) -> int:
        """Rough combined total; the kinds are ranked separately."""
        return self.projects.total + self.forums.total


def split_terms(query: str) -> List[str]:
    """Lower-cased, de-duplicated whitespace-separated terms."""
    seen: List[str] = []
    for term in query.lower().split():
        if term not in seen:
            seen.append(term)
    return seen


def _tag_matches(term: str):
    """True when any tag of the outer Project row contains ``term``."""
    # Tags are stored lower-cased already
    return exists().where(
        ProjectTag.project_id == Project.id,
        ProjectTag.tag.contains(term, autoescape=True),
    )


def _matchers(model: Type[Any]) -> Sequence[Tuple[Callable[[str], Any], int]]:
    title = func.lower(model.title, type_=String)
    description = func.lower(model.description, type_=String)
    matchers = [
        (lambda term: title.contains(term, autoescape=True), TITLE_WEIGHT),
        (lambda term: description.contains(term, autoescape=True), DESCRIPTION_WEIGHT),
    ]
    if model is Project:
        matchers.append((_tag_matches, TAGS_WEIGHT))
    return matchers


def relevance(model: Type[Any], terms: Sequence[str]):
    """SQL expression scoring one row of ``model`` against ``terms``."""
    score = None
    for matches, weight in _matchers(model):
        for term in terms:
            part = case((matches(term), weight), else_=0)
            score = part if score is None else score + part
    return score


class SearchService:
    """Read-only queries across content kinds."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_tags(self) -> List[str]:
        """Distinct tags over all projects, sorted ascending."""
        query = select(ProjectTag.tag).distinct().order_by(ProjectTag.tag)
        return list((await self.session.execute(query)).scalars().all())

    async def search(self, query: str, page: int = 1, limit: Optional[int] = None) -> SearchResults:
        """
        Rank projects and forums against ``query``.

        Raises:
            BadRequest: empty query, or bad page/limit
        """
        terms = split_terms(query or "")
        if not terms:
            raise BadRequest("Search query parameter is required.")
        request = PageRequest.of(page, limit)

        return SearchResults(
            query=query.strip(),
            projects=await self._rank(Project, terms, request),
            forums=await self._rank(Forum, terms, request),
        )

    async def _rank(self, model: Type[T], terms: Sequence[str], request: PageRequest) -> Page[SearchHit[T]]:
        score = relevance(model, terms)

        total = (
            await self.session.execute(
                select(func.count()).select_from(model).where(score > 0)
            )
        ).scalar_one()

        query = (
            select(model, score.label("score"))
            .where(score > 0)
            .order_by(score.desc(), model.created_at.desc(), model.id.desc())
            .offset(request.offset)
            .limit(request.limit)
        )
        rows = await self.session.execute(query)
        hits = [SearchHit(item=item, score=float(item_score)) for item, item_score in rows]
        return Page(items=hits, total=total, page=request.page, limit=request.limit)
