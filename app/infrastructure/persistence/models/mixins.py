"""SQLAlchemy mixins for common model patterns (DRY).

Provides: UuidMixin, TimestampMixin, LeadershipMixin and the combined
BaseModel used by every table of the schema.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func


def generate_uuid() -> str:
    return str(uuid.uuid4())


class UuidMixin:
    """Mixin for models keyed by a UUID string."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String(36), primary_key=True, default=generate_uuid)


class TimestampMixin:
    """Mixin for created_at and updated_at (server defaults, timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            nullable=False,
            index=True,
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class LeadershipMixin:
    """Mixin for locations that may have an assigned leader (cell, village, isibo)."""

    @declared_attr
    def has_leader(cls) -> Mapped[bool]:
        return mapped_column(Boolean, default=False, nullable=False)

    @declared_attr
    def leader_id(cls) -> Mapped[str | None]:
        return mapped_column(
            String(36),
            ForeignKey("user.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        )


class BaseModel(UuidMixin, TimestampMixin):
    """Combined mixin: UUID id + created_at/updated_at."""

    __abstract__ = True
