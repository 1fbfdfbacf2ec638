"""
Project and Forum services.

Both kinds share one lifecycle: create stamped with the caller as owner,
newest-first listing, owner-only update over an allow-list of fields,
owner-only hard delete (taking comments and likes with it), like toggle.
Subclasses only declare the model, tables and field rules.
"""

import uuid
from typing import Any, ClassVar, Dict, Generic, Mapping, Optional, Tuple, Type, TypeVar

from sqlalchemy import Table, delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.errors import BadRequest, NotFound
from portfolio_api.kernel.models import (
    Comment,
    Forum,
    Project,
    ProjectTag,
    forum_likes,
    parse_id,
    project_likes,
)
from portfolio_api.kernel.models.base import utcnow
from portfolio_api.kernel.permissions import OwnershipPolicy
from portfolio_api.logging_config import get_logger
from portfolio_api.services.likes import LikeToggle, ToggleResult
from portfolio_api.services.pagination import Page, PageRequest
from portfolio_api.services.validation import (
    Rule,
    check_description,
    check_title,
    check_url,
    normalize_tags,
    validate_fields,
)

logger = get_logger(__name__)

E = TypeVar("E", Project, Forum)


class ContentService(Generic[E]):
    """Ownership-scoped CRUD plus likes for one content kind."""

    model: ClassVar[Type[Any]]
    likes_table: ClassVar[Table]
    likes_column: ClassVar[str]
    comment_column: ClassVar[str]
    rules: ClassVar[Dict[str, Rule]]
    required: ClassVar[Tuple[str, ...]] = ("title", "description")
    # Fields kept in child tables rather than on the entity row
    child_fields: ClassVar[Tuple[str, ...]] = ()

    def __init__(self, session: AsyncSession, policy: Optional[OwnershipPolicy] = None):
        self.session = session
        self.policy = policy or OwnershipPolicy()
        self.likes = LikeToggle(session, self.likes_table, self.likes_column, self.model.label)

    @property
    def label(self) -> str:
        return self.model.label

    @property
    def updatable_fields(self) -> Tuple[str, ...]:
        return tuple(self.rules)

    async def create(self, subject_id: uuid.UUID, fields: Mapping[str, Any]) -> E:
        """
        Create an entity owned by ``subject_id``.

        Only allow-listed fields are read from ``fields``; owner and likes
        can never be supplied by the caller.

        Raises:
            ValidationError: listing every violated field
        """
        values = validate_fields(fields, self.rules, required=self.required)
        entity = self.model(**values, owner_id=subject_id)
        self.session.add(entity)
        await self.session.flush()

        logger.info(
            "%s created",
            self.label,
            extra={"entity_id": str(entity.id), "user_id": str(subject_id)},
        )
        return await self._load(entity.id)

    async def list(self, page: int = 1, limit: Optional[int] = None) -> Page[E]:
        """Newest first, offset paginated."""
        request = PageRequest.of(page, limit)
        total = (
            await self.session.execute(select(func.count()).select_from(self.model))
        ).scalar_one()
        query = (
            select(self.model)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
            .offset(request.offset)
            .limit(request.limit)
        )
        items = list((await self.session.execute(query)).scalars().all())
        return Page(items=items, total=total, page=request.page, limit=request.limit)

    async def get(self, entity_id: Any) -> E:
        """
        Raises:
            BadRequest: malformed id (no lookup is made)
            NotFound: no such entity
        """
        return await self._load(parse_id(entity_id, self.label))

    async def update(self, subject_id: uuid.UUID, entity_id: Any, fields: Mapping[str, Any]) -> E:
        """
        Owner-only partial update over the allow-list.

        Raises:
            BadRequest / NotFound / Forbidden: see OwnershipPolicy.authorize
            BadRequest: no allow-listed field supplied
            ValidationError: a supplied field breaks the creation rules
        """
        entity = await self.policy.authorize(self.session, self.model, entity_id, subject_id)

        changes = {name: value for name, value in fields.items() if name in self.rules}
        if not changes:
            allowed = ", ".join(self.updatable_fields)
            raise BadRequest(f"At least one of these fields is required: {allowed}.")
        changes = validate_fields(changes, self.rules)
        children = {name: changes.pop(name) for name in self.child_fields if name in changes}

        owner_col = self.policy.owner_column(self.model)
        result = await self.session.execute(
            update(self.model)
            .where(self.model.id == entity.id, owner_col == subject_id)
            .values(**changes, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if not result.rowcount:
            raise NotFound(f"{self.label} not found.")
        await self._replace_children(entity, children)

        logger.info(
            "%s updated",
            self.label,
            extra={"entity_id": str(entity.id), "fields": sorted([*changes, *children])},
        )
        return await self._load(entity.id)

    async def delete(self, subject_id: uuid.UUID, entity_id: Any) -> None:
        """
        Owner-only hard delete. Comments and likes on the entity go with it.

        A second delete of the same id raises NotFound.
        """
        entity = await self.policy.authorize(self.session, self.model, entity_id, subject_id)

        await self._delete_children(entity.id)

        owner_col = self.policy.owner_column(self.model)
        result = await self.session.execute(
            delete(self.model)
            .where(self.model.id == entity.id, owner_col == subject_id)
            .execution_options(synchronize_session=False)
        )
        if not result.rowcount:
            raise NotFound(f"{self.label} not found.")
        self.session.expunge(entity)

        logger.info(
            "%s deleted",
            self.label,
            extra={"entity_id": str(entity.id), "user_id": str(subject_id)},
        )

    async def toggle_like(self, subject_id: uuid.UUID, entity_id: Any) -> ToggleResult:
        """
        Like if not liked, unlike if liked.

        Raises:
            BadRequest: malformed id
            NotFound: no such entity
        """
        entity_id = parse_id(entity_id, self.label)
        if not await self.exists(entity_id):
            raise NotFound(f"{self.label} not found.")
        result = await self.likes.toggle(entity_id, subject_id)
        logger.info(
            "%s %s",
            self.label,
            result.state.value,
            extra={"entity_id": str(entity_id), "user_id": str(subject_id)},
        )
        return result

    async def _replace_children(self, entity: E, children: Dict[str, Any]) -> None:
        """Write child-table fields of an update. Kinds without any have nothing to do."""

    async def _delete_children(self, entity_id: uuid.UUID) -> None:
        """Remove comments and likes ahead of deleting the entity itself."""
        parent_col = getattr(Comment, self.comment_column)
        await self.session.execute(
            delete(Comment).where(parent_col == entity_id).execution_options(synchronize_session=False)
        )
        await self.likes.clear(entity_id)

    async def exists(self, entity_id: uuid.UUID) -> bool:
        query = select(self.model.id).where(self.model.id == entity_id)
        return (await self.session.execute(query)).first() is not None

    async def _load(self, entity_id: uuid.UUID) -> E:
        query = (
            select(self.model)
            .where(self.model.id == entity_id)
            .execution_options(populate_existing=True)
        )
        entity = (await self.session.execute(query)).scalar_one_or_none()
        if entity is None:
            raise NotFound(f"{self.label} not found.")
        return entity


class ProjectService(ContentService[Project]):
    model = Project
    likes_table = project_likes
    likes_column = "project_id"
    comment_column = "project_id"
    rules = {
        "title": check_title,
        "description": check_description,
        "tags": normalize_tags,
        "repo_url": check_url,
        "live_url": check_url,
    }
    child_fields = ("tags",)

    async def _replace_children(self, entity: Project, children: Dict[str, Any]) -> None:
        if "tags" not in children:
            return
        await self.session.execute(
            delete(ProjectTag)
            .where(ProjectTag.project_id == entity.id)
            .execution_options(synchronize_session=False)
        )
        # Old rows share primary keys with the new ones; the reload must not reuse them
        for row in list(entity.tag_rows):
            self.session.expunge(row)
        rows = [
            {"project_id": entity.id, "position": position, "tag": tag}
            for position, tag in enumerate(children["tags"])
        ]
        if rows:
            await self.session.execute(insert(ProjectTag.__table__).values(rows))

    async def _delete_children(self, entity_id: uuid.UUID) -> None:
        await super()._delete_children(entity_id)
        await self.session.execute(
            delete(ProjectTag)
            .where(ProjectTag.project_id == entity_id)
            .execution_options(synchronize_session=False)
        )


class ForumService(ContentService[Forum]):
    model = Forum
    likes_table = forum_likes
    likes_column = "forum_id"
    comment_column = "forum_id"
    rules = {
        "title": check_title,
        "description": check_description,
    }
