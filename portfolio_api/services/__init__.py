"""
Domain services. Each takes its session explicitly in the constructor.
"""

from portfolio_api.services.comment_service import CommentService
from portfolio_api.services.content_service import ContentService, ForumService, ProjectService
from portfolio_api.services.likes import LikeState, LikeToggle, ToggleResult
from portfolio_api.services.pagination import Page, PageRequest
from portfolio_api.services.search_service import SearchHit, SearchResults, SearchService

__all__ = [
    "CommentService",
    "ContentService",
    "ForumService",
    "ProjectService",
    "LikeState",
    "LikeToggle",
    "ToggleResult",
    "Page",
    "PageRequest",
    "SearchHit",
    "SearchResults",
    "SearchService",
]
