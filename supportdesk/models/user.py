"""ORM model for application users (auth and RBAC)."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from supportdesk.models.base import Base

ROLE_USER = "user"
ROLE_ADMIN = "admin"
VALID_ROLES = frozenset({ROLE_USER, ROLE_ADMIN})


def _utcnow() -> datetime:
    return datetime.now(UTC)


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    role: 'admin' or 'user'
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=ROLE_USER, server_default=ROLE_USER)
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

    # Informational back-reference; tasks outlive their author (user_id is nulled).
    tasks = relationship("Task", back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
