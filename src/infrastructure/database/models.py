"""SQLAlchemy ORM models."""

from datetime import date, datetime
from uuid import uuid4

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _new_id() -> str:
    return str(uuid4())


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class MemberModel(Base):
    """Rotation member."""

    __tablename__ = "members"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    handle: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    last_chief_date: Mapped[date | None] = mapped_column(Date)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_volunteer: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    chief_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )


class WeeklyAssignmentModel(Base):
    """One row per rotation week."""

    __tablename__ = "weekly_assignments"
    __table_args__ = (UniqueConstraint("week_start", name="uq_weekly_assignments_week_start"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    week_start: Mapped[date] = mapped_column(Date, nullable=False)
    chief_id: Mapped[str] = mapped_column(ForeignKey("members.id"), nullable=False)
    backup_id: Mapped[str] = mapped_column(ForeignKey("members.id"), nullable=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="Planned")
    public_message_handle: Mapped[str | None] = mapped_column(String(64))
    internal_message_handle: Mapped[str | None] = mapped_column(String(64))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
