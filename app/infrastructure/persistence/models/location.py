"""Location hierarchy ORM models.

Province > District > Sector > Cell > Village > Isibo > House. Every
level below Province holds a non-null FK to its parent. Names are stored
upper-cased.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column, relationship, validates

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import BaseModel, LeadershipMixin

if TYPE_CHECKING:
    from app.infrastructure.persistence.models.activity import Activity, Task
    from app.infrastructure.persistence.models.user import Profile, User


class NamedLocationMixin:
    """Mixin for the name column shared by all named levels."""

    @declared_attr
    def name(cls) -> Mapped[str]:
        return mapped_column(String(255), nullable=False, index=True)

    @validates("name")
    def _upper_name(self, key: str, value: str) -> str:
        return value.strip().upper() if value else value


class Province(NamedLocationMixin, BaseModel, Base):
    __tablename__ = "province"

    districts: Mapped[list[District]] = relationship(back_populates="province")


class District(NamedLocationMixin, BaseModel, Base):
    __tablename__ = "district"

    province_id: Mapped[str] = mapped_column(
        ForeignKey("province.id", ondelete="CASCADE"), nullable=False, index=True
    )

    province: Mapped[Province] = relationship(back_populates="districts")
    sectors: Mapped[list[Sector]] = relationship(back_populates="district")


class Sector(NamedLocationMixin, BaseModel, Base):
    __tablename__ = "sector"

    district_id: Mapped[str] = mapped_column(
        ForeignKey("district.id", ondelete="CASCADE"), nullable=False, index=True
    )

    district: Mapped[District] = relationship(back_populates="sectors")
    cells: Mapped[list[Cell]] = relationship(back_populates="sector")


class Cell(NamedLocationMixin, LeadershipMixin, BaseModel, Base):
    __tablename__ = "cell"

    sector_id: Mapped[str] = mapped_column(
        ForeignKey("sector.id", ondelete="CASCADE"), nullable=False, index=True
    )

    sector: Mapped[Sector] = relationship(back_populates="cells")
    villages: Mapped[list[Village]] = relationship(back_populates="cell")
    leader: Mapped[User | None] = relationship()


class Village(NamedLocationMixin, LeadershipMixin, BaseModel, Base):
    __tablename__ = "village"

    cell_id: Mapped[str] = mapped_column(
        ForeignKey("cell.id", ondelete="CASCADE"), nullable=False, index=True
    )

    cell: Mapped[Cell] = relationship(back_populates="villages")
    isibos: Mapped[list[Isibo]] = relationship(back_populates="village")
    activities: Mapped[list[Activity]] = relationship(back_populates="village")
    leader: Mapped[User | None] = relationship()


class Isibo(NamedLocationMixin, LeadershipMixin, BaseModel, Base):
    __tablename__ = "isibo"

    village_id: Mapped[str] = mapped_column(
        ForeignKey("village.id", ondelete="CASCADE"), nullable=False, index=True
    )

    village: Mapped[Village] = relationship(back_populates="isibos")
    houses: Mapped[list[House]] = relationship(back_populates="isibo")
    tasks: Mapped[list[Task]] = relationship(back_populates="isibo")
    leader: Mapped[User | None] = relationship()


class House(BaseModel, Base):
    """A household; its members are the profiles pointing at it."""

    __tablename__ = "house"

    code: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    isibo_id: Mapped[str] = mapped_column(
        ForeignKey("isibo.id", ondelete="CASCADE"), nullable=False, index=True
    )
    representative_id: Mapped[str | None] = mapped_column(
        ForeignKey("user.id", ondelete="SET NULL"), nullable=True, index=True
    )

    isibo: Mapped[Isibo] = relationship(back_populates="houses")
    members: Mapped[list[Profile]] = relationship(back_populates="house")
    representative: Mapped[User | None] = relationship()

    @property
    def name(self) -> str:
        return self.code
