"""ORM model for moderated support-desk articles ("tasks")."""

from datetime import UTC, datetime

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from supportdesk.models.base import Base

TASK_TYPE_QA = "Q&A"
TASK_TYPE_ISSUE = "Issue"
VALID_TASK_TYPES: tuple[str, ...] = (TASK_TYPE_QA, TASK_TYPE_ISSUE)

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
VALID_STATUSES: tuple[str, ...] = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Task(Base):
    """
    A moderated content record (FAQ, guide, incident write-up) in one category.

    status moves pending -> approved | rejected via admin actions only.
    deleted_at marks a soft-deleted row; such rows are never returned.
    """

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    type = Column(String(32), nullable=False)
    category = Column(String(64), nullable=False, index=True)
    status = Column(
        String(16),
        nullable=False,
        default=STATUS_PENDING,
        server_default=STATUS_PENDING,
        index=True,
    )
    rating = Column(Float, nullable=False, default=0.0, server_default="0")
    keywords = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=list)
    rejection_reason = Column(Text, nullable=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=func.now(),
    )
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    user = relationship("User", back_populates="tasks")
