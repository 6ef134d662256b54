"""Activity and task ORM models.

An activity is organised in a village; its tasks are carried out by
isibos. Cost, participation and financial-impact figures live on the task.
"""

from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.domain.enums import TaskStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import BaseModel

if TYPE_CHECKING:
    from app.infrastructure.persistence.models.location import Isibo, Village
    from app.infrastructure.persistence.models.report import Report
    from app.infrastructure.persistence.models.user import User

Money = Numeric(14, 2, asdecimal=False)


class Activity(BaseModel, Base):
    __tablename__ = "activity"

    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default=TaskStatus.ACTIVE.value, index=True
    )
    village_id: Mapped[str] = mapped_column(
        ForeignKey("village.id", ondelete="CASCADE"), nullable=False, index=True
    )
    organizer_id: Mapped[str | None] = mapped_column(
        ForeignKey("user.id", ondelete="SET NULL"), nullable=True, index=True
    )

    village: Mapped[Village] = relationship(back_populates="activities")
    organizer: Mapped[User | None] = relationship()
    tasks: Mapped[list[Task]] = relationship(back_populates="activity")
    reports: Mapped[list[Report]] = relationship(back_populates="activity")


class Task(BaseModel, Base):
    __tablename__ = "task"

    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default=TaskStatus.PENDING.value, index=True
    )
    activity_id: Mapped[str] = mapped_column(
        ForeignKey("activity.id", ondelete="CASCADE"), nullable=False, index=True
    )
    isibo_id: Mapped[str] = mapped_column(
        ForeignKey("isibo.id", ondelete="CASCADE"), nullable=False, index=True
    )
    estimated_cost: Mapped[float] = mapped_column(Money, nullable=False, default=0)
    actual_cost: Mapped[float] = mapped_column(Money, nullable=False, default=0)
    expected_participants: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    actual_participants: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    expected_financial_impact: Mapped[float] = mapped_column(Money, nullable=False, default=0)
    actual_financial_impact: Mapped[float] = mapped_column(Money, nullable=False, default=0)
    completed_at: Mapped[dt.datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )

    activity: Mapped[Activity] = relationship(back_populates="tasks")
    isibo: Mapped[Isibo] = relationship(back_populates="tasks")
    reports: Mapped[list[Report]] = relationship(back_populates="task")
