"""Report ORM models: task reports, their evidence and attendance."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import BaseModel

if TYPE_CHECKING:
    from app.infrastructure.persistence.models.activity import Activity, Task
    from app.infrastructure.persistence.models.user import User


class Report(BaseModel, Base):
    __tablename__ = "report"

    activity_id: Mapped[str] = mapped_column(
        ForeignKey("activity.id", ondelete="CASCADE"), nullable=False, index=True
    )
    task_id: Mapped[str] = mapped_column(
        ForeignKey("task.id", ondelete="CASCADE"), nullable=False, index=True
    )
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    suggestions: Mapped[str | None] = mapped_column(Text, nullable=True)
    challenges_faced: Mapped[str | None] = mapped_column(Text, nullable=True)
    materials_used: Mapped[str | None] = mapped_column(Text, nullable=True)

    activity: Mapped[Activity] = relationship(back_populates="reports")
    task: Mapped[Task] = relationship(back_populates="reports")
    evidence: Mapped[list[ReportEvidence]] = relationship(back_populates="report")
    attendance: Mapped[list[ReportAttendance]] = relationship(back_populates="report")


class ReportEvidence(BaseModel, Base):
    """One uploaded evidence file (URL) attached to a report."""

    __tablename__ = "report_evidence"

    report_id: Mapped[str] = mapped_column(
        ForeignKey("report.id", ondelete="CASCADE"), nullable=False, index=True
    )
    url: Mapped[str] = mapped_column(String(1024), nullable=False)

    report: Mapped[Report] = relationship(back_populates="evidence")


class ReportAttendance(BaseModel, Base):
    """A citizen recorded as present for a report."""

    __tablename__ = "report_attendance"

    report_id: Mapped[str] = mapped_column(
        ForeignKey("report.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )

    report: Mapped[Report] = relationship(back_populates="attendance")
    user: Mapped[User] = relationship()

    __table_args__ = (
        UniqueConstraint("report_id", "user_id", name="uq_report_attendance_report_user"),
    )
