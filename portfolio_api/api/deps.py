"""
FastAPI dependencies for authentication, database sessions and services.
"""

from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.database import get_db
from portfolio_api.kernel.identity.identity_service import IdentityService
from portfolio_api.kernel.models import User
from portfolio_api.services import CommentService, ForumService, ProjectService, SearchService

# Security scheme; missing credentials are reported by get_current_user
security = HTTPBearer(auto_error=False)


DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: DbSession,
) -> User:
    """Resolve the bearer token into a user, or raise Unauthenticated (401)."""
    token = credentials.credentials if credentials else None
    return await IdentityService(db).resolve_subject(token)


CurrentUser = Annotated[User, Depends(get_current_user)]


def get_identity_service(db: DbSession) -> IdentityService:
    return IdentityService(db)


def get_project_service(db: DbSession) -> ProjectService:
    return ProjectService(db)


def get_forum_service(db: DbSession) -> ForumService:
    return ForumService(db)


def get_comment_service(db: DbSession) -> CommentService:
    return CommentService(db)


def get_search_service(db: DbSession) -> SearchService:
    return SearchService(db)


Identity = Annotated[IdentityService, Depends(get_identity_service)]
Projects = Annotated[ProjectService, Depends(get_project_service)]
Forums = Annotated[ForumService, Depends(get_forum_service)]
Comments = Annotated[CommentService, Depends(get_comment_service)]
Search = Annotated[SearchService, Depends(get_search_service)]


def get_request_id(request: Request) -> Optional[str]:
    """Get request correlation ID (set by RequestIdMiddleware)."""
    return getattr(request.state, "request_id", None)
