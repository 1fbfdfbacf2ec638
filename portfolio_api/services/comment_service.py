"""
Comment service.
"""

import uuid
from typing import Any, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.errors import BadRequest, NotFound
from portfolio_api.kernel.models import Comment, Forum, ParentKind, ParentRef, Project, parse_id
from portfolio_api.kernel.permissions import OwnershipPolicy
from portfolio_api.logging_config import get_logger

logger = get_logger(__name__)

PARENT_MODELS = {
    ParentKind.PROJECT: Project,
    ParentKind.FORUM: Forum,
}


def _clean_content(content: Optional[str]) -> str:
    content = (content or "").strip()
    if not content:
        raise BadRequest("Comment content is required.")
    return content


class CommentService:
    """Comments on projects and forums; only the author may edit or delete."""

    def __init__(self, session: AsyncSession, policy: Optional[OwnershipPolicy] = None):
        self.session = session
        self.policy = policy or OwnershipPolicy()

    async def create(
        self,
        subject_id: uuid.UUID,
        content: Optional[str],
        project_id: Any = None,
        forum_id: Any = None,
    ) -> Comment:
        """
        Add a comment to exactly one parent.

        Raises:
            BadRequest: both/neither parent given, malformed id, empty content
            NotFound: the parent does not exist
        """
        content = _clean_content(content)
        parent = ParentRef.from_ids(project_id, forum_id)
        await self._ensure_parent(parent)

        comment = Comment(content=content, author_id=subject_id)
        comment.parent = parent
        self.session.add(comment)
        # The parent can vanish between the check and the insert
        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            raise NotFound(f"{parent.kind.label} not found.")

        logger.info(
            "Comment added",
            extra={
                "comment_id": str(comment.id),
                "parent_kind": parent.kind.value,
                "parent_id": str(parent.id),
            },
        )
        return await self._load(comment.id)

    async def list(self, project_id: Any = None, forum_id: Any = None) -> List[Comment]:
        """
        Comments of one parent, oldest first.

        Raises:
            BadRequest: both/neither filter given, or a malformed id
        """
        parent = ParentRef.from_ids(project_id, forum_id)
        parent_col = Comment.project_id if parent.kind is ParentKind.PROJECT else Comment.forum_id
        query = (
            select(Comment)
            .where(parent_col == parent.id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )
        return list((await self.session.execute(query)).scalars().all())

    async def get(self, comment_id: Any) -> Comment:
        return await self._load(parse_id(comment_id, Comment.label))

    async def update(self, subject_id: uuid.UUID, comment_id: Any, content: Optional[str]) -> Comment:
        """
        Author-only content edit.

        Raises:
            BadRequest / NotFound / Forbidden: see OwnershipPolicy.authorize
            BadRequest: empty content
        """
        comment = await self.policy.authorize(self.session, Comment, comment_id, subject_id)
        content = _clean_content(content)

        result = await self.session.execute(
            update(Comment)
            .where(Comment.id == comment.id, self.policy.owner_column(Comment) == subject_id)
            .values(content=content)
            .execution_options(synchronize_session=False)
        )
        if not result.rowcount:
            raise NotFound("Comment not found.")

        logger.info("Comment edited", extra={"comment_id": str(comment.id)})
        return await self._load(comment.id)

    async def delete(self, subject_id: uuid.UUID, comment_id: Any) -> None:
        """Author-only hard delete."""
        comment = await self.policy.authorize(self.session, Comment, comment_id, subject_id)
        result = await self.session.execute(
            delete(Comment)
            .where(Comment.id == comment.id, self.policy.owner_column(Comment) == subject_id)
            .execution_options(synchronize_session=False)
        )
        if not result.rowcount:
            raise NotFound("Comment not found.")
        self.session.expunge(comment)
        logger.info("Comment deleted", extra={"comment_id": str(comment.id)})

    async def _ensure_parent(self, parent: ParentRef) -> None:
        model = PARENT_MODELS[parent.kind]
        query = select(model.id).where(model.id == parent.id)
        if (await self.session.execute(query)).first() is None:
            raise NotFound(f"{parent.kind.label} not found.")

    async def _load(self, comment_id: uuid.UUID) -> Comment:
        query = (
            select(Comment)
            .where(Comment.id == comment_id)
            .execution_options(populate_existing=True)
        )
        comment = (await self.session.execute(query)).scalar_one_or_none()
        if comment is None:
            raise NotFound("Comment not found.")
        return comment
