"""
Ownership policy: the single rule for "may this subject mutate this resource".

There are no roles. A Project or Forum is mutable only by its owner and a
Comment only by its author. Each entity kind registers which attribute
holds its owner; the same attribute name works on instances (the check) and
on the mapped class (the conditional UPDATE/DELETE).
"""

import uuid
from typing import Any, Dict, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.errors import Forbidden, NotFound
from portfolio_api.kernel.models import Comment, Forum, Project, parse_id

M = TypeVar("M")

OWNER_FIELDS: Dict[type, str] = {
    Project: "owner_id",
    Forum: "owner_id",
    Comment: "author_id",
}

_RELATION = {
    "owner_id": "owner",
    "author_id": "author",
}


class OwnershipPolicy:
    """
    Existence-then-ownership guard for mutations.

    Order of checks (callers rely on it):
        1. malformed id  -> BadRequest (no lookup)
        2. missing row   -> NotFound
        3. not the owner -> Forbidden (nothing is changed)
    """

    def __init__(self, owner_fields: Optional[Dict[type, str]] = None):
        self.owner_fields = dict(owner_fields or OWNER_FIELDS)

    def owner_field(self, model: type) -> str:
        try:
            return self.owner_fields[model]
        except KeyError:
            raise TypeError(f"No owner field registered for {model.__name__}")

    def owner_column(self, model: type) -> Any:
        """The mapped column holding the owner, for conditional statements."""
        return getattr(model, self.owner_field(model))

    def owner_of(self, resource: Any) -> uuid.UUID:
        return getattr(resource, self.owner_field(type(resource)))

    def is_owner(self, resource: Any, subject_id: uuid.UUID) -> bool:
        return self.owner_of(resource) == subject_id

    def ensure_owner(self, resource: Any, subject_id: uuid.UUID) -> None:
        if not self.is_owner(resource, subject_id):
            label = type(resource).label
            relation = _RELATION.get(self.owner_field(type(resource)), "owner")
            raise Forbidden(f"Forbidden: You are not the {relation} of this {label.lower()}.")

    async def authorize(
        self,
        session: AsyncSession,
        model: Type[M],
        resource_id: Any,
        subject_id: uuid.UUID,
    ) -> M:
        """
        Load a resource for mutation by ``subject_id``.

        Raises:
            BadRequest: malformed id
            NotFound: no such resource
            Forbidden: resource exists but belongs to someone else
        """
        resource_id = parse_id(resource_id, model.label)
        query = (
            select(model)
            .where(model.id == resource_id)
            .execution_options(populate_existing=True)
        )
        resource = (await session.execute(query)).scalar_one_or_none()
        if resource is None:
            raise NotFound(f"{model.label} not found.")
        self.ensure_owner(resource, subject_id)
        return resource
