"""
Project and forum schemas.

Request models only check JSON types; length, tag and URL rules live in the
services so every caller gets the same checks.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from portfolio_api.kernel.models import Forum, Project
from portfolio_api.schemas.auth import UserSummary
from portfolio_api.schemas.common import CamelModel
from portfolio_api.services.likes import LikeState, ToggleResult


class ProjectCreate(CamelModel):
    """Project creation request."""

    title: str
    description: str
    tags: List[str] = []
    repo_url: Optional[str] = None
    live_url: Optional[str] = None


class ProjectUpdate(CamelModel):
    """Project update request; only the fields sent are changed."""

    title: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    repo_url: Optional[str] = None
    live_url: Optional[str] = None


class ForumCreate(CamelModel):
    """Forum creation request."""

    title: str
    description: str


class ForumUpdate(CamelModel):
    """Forum update request; only the fields sent are changed."""

    title: Optional[str] = None
    description: Optional[str] = None


class _ContentResponse(CamelModel):
    id: uuid.UUID
    title: str
    description: str
    owner: UserSummary
    likes: List[uuid.UUID]
    likes_count: int
    created_at: datetime
    updated_at: datetime


class ProjectResponse(_ContentResponse):
    """Project response."""

    tags: List[str]
    repo_url: Optional[str] = None
    live_url: Optional[str] = None

    @classmethod
    def from_entity(cls, project: Project, **extra) -> "ProjectResponse":
        return cls(
            id=project.id,
            title=project.title,
            description=project.description,
            tags=list(project.tags or []),
            repo_url=project.repo_url,
            live_url=project.live_url,
            owner=UserSummary.model_validate(project.owner),
            likes=[user.id for user in project.liked_by],
            likes_count=len(project.liked_by),
            created_at=project.created_at,
            updated_at=project.updated_at,
            **extra,
        )


class ForumResponse(_ContentResponse):
    """Forum response."""

    @classmethod
    def from_entity(cls, forum: Forum, **extra) -> "ForumResponse":
        return cls(
            id=forum.id,
            title=forum.title,
            description=forum.description,
            owner=UserSummary.model_validate(forum.owner),
            likes=[user.id for user in forum.liked_by],
            likes_count=len(forum.liked_by),
            created_at=forum.created_at,
            updated_at=forum.updated_at,
            **extra,
        )


class LikeResponse(CamelModel):
    """Outcome of a like toggle."""

    message: str
    state: LikeState
    liked: bool
    likes_count: int

    @classmethod
    def from_result(cls, label: str, result: ToggleResult) -> "LikeResponse":
        return cls(
            message=f"{label} {result.state.value}",
            state=result.state,
            liked=result.liked,
            likes_count=result.likes_count,
        )
