"""SQLAlchemy ORM models."""

from supportdesk.models.base import Base
from supportdesk.models.task import Task
from supportdesk.models.user import User

__all__ = ["Base", "Task", "User"]
