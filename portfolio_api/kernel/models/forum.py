"""
Forum (discussion topic) model and its like-set.
"""

import uuid
from typing import TYPE_CHECKING, ClassVar, List

from sqlalchemy import Column, DateTime, ForeignKey, String, Table, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio_api.kernel.models.base import TITLE_MAX_LENGTH, Base, TimestampMixin, generate_uuid, utcnow

if TYPE_CHECKING:
    from portfolio_api.kernel.models.user import User


forum_likes = Table(
    "forum_likes",
    Base.metadata,
    Column("forum_id", Uuid(), ForeignKey("forums.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Uuid(), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("created_at", DateTime(timezone=True), default=utcnow, nullable=False),
)


class Forum(Base, TimestampMixin):
    """A discussion topic owned by its creator."""

    __tablename__ = "forums"

    label: ClassVar[str] = "Forum"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    owner: Mapped["User"] = relationship("User", lazy="selectin")
    liked_by: Mapped[List["User"]] = relationship(
        "User",
        secondary=forum_likes,
        lazy="selectin",
        viewonly=True,
    )

    def __repr__(self) -> str:
        return f"<Forum {self.title[:50]}>"
