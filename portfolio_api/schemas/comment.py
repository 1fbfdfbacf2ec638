"""
Comment schemas.
"""

import uuid
from datetime import datetime
from typing import Optional

from portfolio_api.kernel.models import Comment, ParentKind
from portfolio_api.schemas.auth import UserSummary
from portfolio_api.schemas.common import CamelModel


class CommentCreate(CamelModel):
    """Exactly one of project_id / forum_id must be given."""

    content: str
    project_id: Optional[str] = None
    forum_id: Optional[str] = None


class CommentUpdate(CamelModel):
    content: str


class CommentResponse(CamelModel):
    id: uuid.UUID
    content: str
    author: UserSummary
    parent_kind: ParentKind
    project_id: Optional[uuid.UUID] = None
    forum_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, comment: Comment) -> "CommentResponse":
        return cls(
            id=comment.id,
            content=comment.content,
            author=UserSummary.model_validate(comment.author),
            parent_kind=comment.parent.kind,
            project_id=comment.project_id,
            forum_id=comment.forum_id,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )
