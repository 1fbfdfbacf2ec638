"""
Portfolio project model, its tags and its like-set.
"""

import uuid
from typing import TYPE_CHECKING, ClassVar, Iterable, List, Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio_api.kernel.models.base import (
    TAG_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    URL_MAX_LENGTH,
    Base,
    TimestampMixin,
    generate_uuid,
    utcnow,
)

if TYPE_CHECKING:
    from portfolio_api.kernel.models.user import User


# One row per (project, user) like; the composite key makes it a set
project_likes = Table(
    "project_likes",
    Base.metadata,
    Column("project_id", Uuid(), ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Uuid(), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("created_at", DateTime(timezone=True), default=utcnow, nullable=False),
)


class ProjectTag(Base):
    """One tag of a project. ``position`` keeps the order the tags were given in."""

    __tablename__ = "project_tags"

    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("projects.id", ondelete="CASCADE"),
        primary_key=True,
    )
    position: Mapped[int] = mapped_column(Integer, primary_key=True)
    tag: Mapped[str] = mapped_column(
        String(TAG_MAX_LENGTH),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<ProjectTag {self.tag}>"


class Project(Base, TimestampMixin):
    """A showcased piece of work owned by its creator."""

    __tablename__ = "projects"

    label: ClassVar[str] = "Project"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    repo_url: Mapped[Optional[str]] = mapped_column(
        String(URL_MAX_LENGTH),
        nullable=True,
    )
    live_url: Mapped[Optional[str]] = mapped_column(
        String(URL_MAX_LENGTH),
        nullable=True,
    )

    # Ownership
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    # Relationships
    owner: Mapped["User"] = relationship(
        "User",
        lazy="selectin",
    )
    tag_rows: Mapped[List[ProjectTag]] = relationship(
        ProjectTag,
        order_by=ProjectTag.position,
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    # Written only through the like toggle, never through the ORM
    liked_by: Mapped[List["User"]] = relationship(
        "User",
        secondary=project_likes,
        lazy="selectin",
        viewonly=True,
    )

    @property
    def tags(self) -> List[str]:
        return [row.tag for row in self.tag_rows]

    @tags.setter
    def tags(self, values: Optional[Iterable[str]]) -> None:
        self.tag_rows = [
            ProjectTag(position=position, tag=tag)
            for position, tag in enumerate(values or [])
        ]

    def __repr__(self) -> str:
        return f"<Project {self.title[:50]}>"
