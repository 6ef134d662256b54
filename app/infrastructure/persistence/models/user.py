"""User and profile ORM models.

The profile places a user in the hierarchy. Depending on the role it may
point at a cell, a village, an isibo and/or a house; leaders point at the
node they lead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.domain.enums import UserRole
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import BaseModel

if TYPE_CHECKING:
    from app.infrastructure.persistence.models.location import Cell, House, Isibo, Village


class User(BaseModel, Base):
    __tablename__ = "user"

    names: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)
    role: Mapped[str] = mapped_column(
        String(32), nullable=False, default=UserRole.CITIZEN.value, index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    profile: Mapped[Profile | None] = relationship(back_populates="user", uselist=False)


class Profile(BaseModel, Base):
    __tablename__ = "profile"

    user_id: Mapped[str] = mapped_column(
        ForeignKey("user.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    cell_id: Mapped[str | None] = mapped_column(
        ForeignKey("cell.id", ondelete="SET NULL"), nullable=True, index=True
    )
    village_id: Mapped[str | None] = mapped_column(
        ForeignKey("village.id", ondelete="SET NULL"), nullable=True, index=True
    )
    isibo_id: Mapped[str | None] = mapped_column(
        ForeignKey("isibo.id", ondelete="SET NULL"), nullable=True, index=True
    )
    house_id: Mapped[str | None] = mapped_column(
        ForeignKey("house.id", ondelete="SET NULL"), nullable=True, index=True
    )

    user: Mapped[User] = relationship(back_populates="profile")
    cell: Mapped[Cell | None] = relationship()
    village: Mapped[Village | None] = relationship()
    isibo: Mapped[Isibo | None] = relationship()
    house: Mapped[House | None] = relationship(back_populates="members")
