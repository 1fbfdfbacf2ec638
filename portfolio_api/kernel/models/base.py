"""
Base model with common fields and utilities.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from portfolio_api.errors import BadRequest

# Column widths; the field rules reject longer input before it reaches the store
TITLE_MAX_LENGTH = 200
URL_MAX_LENGTH = 2048
TAG_MAX_LENGTH = 50


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    # Generic Uuid type for cross-database compatibility
    type_annotation_map = {
        uuid.UUID: Uuid(),
    }


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps."""

    # Python-side defaults keep microsecond precision on SQLite, which
    # listings rely on for ordering.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )


def generate_uuid() -> uuid.UUID:
    """Generate a new UUID."""
    return uuid.uuid4()


def parse_id(value: Any, label: str = "Resource") -> uuid.UUID:
    """
    Parse a client-supplied identifier.

    Raises:
        BadRequest: if the value is not a structurally valid id; no lookup
            should be attempted in that case.
    """
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value).strip())
    except (TypeError, ValueError):
        raise BadRequest(f"Invalid {label} ID format.")
