"""
Kernel Data Models

SQLAlchemy models for users, the two content kinds and comments.
"""

from portfolio_api.kernel.models.base import Base, TimestampMixin, generate_uuid, parse_id
from portfolio_api.kernel.models.user import User
from portfolio_api.kernel.models.project import Project, ProjectTag, project_likes
from portfolio_api.kernel.models.forum import Forum, forum_likes
from portfolio_api.kernel.models.comment import Comment, ParentKind, ParentRef

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "generate_uuid",
    "parse_id",
    # User
    "User",
    # Content
    "Project",
    "ProjectTag",
    "project_likes",
    "Forum",
    "forum_likes",
    # Comments
    "Comment",
    "ParentKind",
    "ParentRef",
]
