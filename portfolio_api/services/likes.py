"""
Like toggle.

A like is a row in the entity's like table. Flipping membership is one
atomic DELETE, falling back to one atomic INSERT ... ON CONFLICT DO NOTHING,
so concurrent togglers never overwrite each other's membership. The count is
read back from the table afterwards and always matches what is stored.
"""

import uuid
from dataclasses import dataclass
from enum import Enum

from sqlalchemy import Table, and_, delete, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.errors import NotFound


# Only these dialects can insert-if-absent, which the toggle relies on
_INSERT_IF_ABSENT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class LikeState(str, Enum):
    LIKED = "liked"
    UNLIKED = "unliked"


@dataclass(frozen=True)
class ToggleResult:
    state: LikeState
    likes_count: int

    @property
    def liked(self) -> bool:
        return self.state is LikeState.LIKED


class LikeToggle:
    """Set-membership flip over one like table."""

    def __init__(self, session: AsyncSession, table: Table, entity_column: str, label: str):
        self.session = session
        self.table = table
        self.entity_col = table.c[entity_column]
        self.user_col = table.c["user_id"]
        self.label = label

    def _membership(self, entity_id: uuid.UUID, user_id: uuid.UUID):
        return and_(self.entity_col == entity_id, self.user_col == user_id)

    def _insert_if_absent(self, entity_id: uuid.UUID, user_id: uuid.UUID):
        values = {self.entity_col.name: entity_id, "user_id": user_id}
        dialect = self.session.get_bind().dialect.name
        try:
            insert = _INSERT_IF_ABSENT[dialect]
        except KeyError:
            raise RuntimeError(f"Like toggling is not supported on the {dialect} dialect")
        return insert(self.table).values(**values).on_conflict_do_nothing()

    async def toggle(self, entity_id: uuid.UUID, user_id: uuid.UUID) -> ToggleResult:
        """
        Flip ``user_id``'s membership in the like-set of ``entity_id``.

        The caller checks that the entity exists first; an entity deleted in
        the meantime surfaces as a foreign key failure and is reported as
        NotFound.
        """
        removed = await self.session.execute(
            delete(self.table).where(self._membership(entity_id, user_id))
        )
        if removed.rowcount:
            state = LikeState.UNLIKED
        else:
            try:
                await self.session.execute(self._insert_if_absent(entity_id, user_id))
            except IntegrityError:
                await self.session.rollback()
                raise NotFound(f"{self.label} not found.")
            # A racing toggle by the same user may have inserted first;
            # either way the user is now a member.
            state = LikeState.LIKED

        return ToggleResult(state=state, likes_count=await self.count(entity_id))

    async def count(self, entity_id: uuid.UUID) -> int:
        query = select(func.count()).select_from(self.table).where(self.entity_col == entity_id)
        return (await self.session.execute(query)).scalar_one()

    async def is_member(self, entity_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        query = select(self.user_col).where(self._membership(entity_id, user_id))
        return (await self.session.execute(query)).first() is not None

    async def clear(self, entity_id: uuid.UUID) -> None:
        """Drop every like of an entity (used when the entity is deleted)."""
        await self.session.execute(delete(self.table).where(self.entity_col == entity_id))
