"""SQLAlchemy ORM models for planquota."""
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QuotaAssignment(Base):
    """One entry of a user's plan history; at most one per user is activated."""

    __tablename__ = "user_quota_assignments"
    __table_args__ = (
        Index("ix_user_quota_assignments_user_created", "user_id", "created_at", "id"),
        Index(
            "uq_user_quota_assignments_active",
            "user_id",
            unique=True,
            sqlite_where=text("activated = 1"),
            postgresql_where=text("activated"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    plan_type: Mapped[str] = mapped_column(String(64), nullable=False)
    activated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    reason: Mapped[str | None] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


__all__ = ["QuotaAssignment", "utcnow"]
