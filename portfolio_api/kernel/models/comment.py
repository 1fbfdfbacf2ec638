"""
Comment model.

A comment hangs off exactly one parent, either a Project or a Forum. In
Python the parent is the ``ParentRef`` variant; the two nullable foreign
keys underneath are only ever written through it, and a CHECK constraint
guards the exactly-one rule in the store.
"""

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from sqlalchemy import CheckConstraint, ForeignKey, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio_api.errors import BadRequest
from portfolio_api.kernel.models.base import Base, TimestampMixin, generate_uuid, parse_id

if TYPE_CHECKING:
    from portfolio_api.kernel.models.user import User


class ParentKind(str, Enum):
    """Kinds of resource a comment can be attached to."""
    PROJECT = "project"
    FORUM = "forum"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class ParentRef:
    """The single parent of a comment."""

    kind: ParentKind
    id: uuid.UUID

    @classmethod
    def from_ids(cls, project_id: Any = None, forum_id: Any = None) -> "ParentRef":
        """
        Build a reference from the two optional client ids.

        Raises:
            BadRequest: if both or neither are given, or the given id is malformed.
        """
        if project_id and forum_id:
            raise BadRequest("Provide either projectId or forumId, not both.")
        if not project_id and not forum_id:
            raise BadRequest("Either projectId or forumId is required.")
        if project_id:
            return cls(ParentKind.PROJECT, parse_id(project_id, ParentKind.PROJECT.label))
        return cls(ParentKind.FORUM, parse_id(forum_id, ParentKind.FORUM.label))


class Comment(Base, TimestampMixin):
    """A comment on a project or forum, owned by its author."""

    __tablename__ = "comments"
    __table_args__ = (
        CheckConstraint(
            "(project_id IS NULL) <> (forum_id IS NULL)",
            name="ck_comments_exactly_one_parent",
        ),
    )

    label: ClassVar[str] = "Comment"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    project_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    forum_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(),
        ForeignKey("forums.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    author: Mapped["User"] = relationship(
        "User",
        lazy="selectin",
    )

    @property
    def parent(self) -> ParentRef:
        if self.project_id is not None:
            return ParentRef(ParentKind.PROJECT, self.project_id)
        return ParentRef(ParentKind.FORUM, self.forum_id)

    @parent.setter
    def parent(self, ref: ParentRef) -> None:
        self.project_id = ref.id if ref.kind is ParentKind.PROJECT else None
        self.forum_id = ref.id if ref.kind is ParentKind.FORUM else None

    def __repr__(self) -> str:
        return f"<Comment {self.id} by {self.author_id}>"
