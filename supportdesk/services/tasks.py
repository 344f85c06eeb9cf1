"""
Task workflow: visibility rules, moderation state machine and category-scoped CRUD.

A task is identified by (id, category). Non-admin requesters only ever see
approved tasks; pending and rejected ones behave as if they did not exist.
Moderation transitions (approve/reject) are admin-only at the route layer and
simply overwrite the status, so the last write wins.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from supportdesk.models.task import (
    STATUS_APPROVED,
    STATUS_PENDING,
    STATUS_REJECTED,
    VALID_TASK_TYPES,
    Task,
)
from supportdesk.models.user import ROLE_ADMIN
from supportdesk.schemas.task import TaskRequest
from supportdesk.services.categories import CategoryRegistry

logger = logging.getLogger(__name__)

# Called as observer(event, task_id) after a successful write.
TaskObserver = Callable[[str, int], None]

EVENT_CREATED = "created"
EVENT_UPDATED = "updated"
EVENT_DELETED = "deleted"


class TaskWorkflowError(Exception):
    """Base class for task workflow failures."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class TaskNotFoundError(TaskWorkflowError):
    def __init__(self, message: str = "Task not found") -> None:
        super().__init__(message)


class InvalidTaskTypeError(TaskWorkflowError):
    def __init__(self, task_type: str) -> None:
        self.task_type = task_type
        super().__init__(
            f"Invalid task type {task_type!r}; must be one of {list(VALID_TASK_TYPES)}"
        )


class InvalidCategoryError(TaskWorkflowError):
    def __init__(self, category: str | None) -> None:
        self.category = category
        super().__init__(f"Unknown category {category!r}")


class TaskStorageError(TaskWorkflowError):
    """Opaque storage failure; message is safe to show, cause is not."""


def validate_task_type(task_type: str) -> None:
    if task_type not in VALID_TASK_TYPES:
        raise InvalidTaskTypeError(task_type)


def is_admin(role: str | None) -> bool:
    return role == ROLE_ADMIN


class TaskWorkflow:
    """Business rules over the tasks table for one DB session."""

    def __init__(
        self,
        session: Session,
        categories: CategoryRegistry,
        observer: TaskObserver | None = None,
    ) -> None:
        self.session = session
        self.categories = categories
        self.observer = observer

    def _active(self) -> Query:
        return self.session.query(Task).filter(Task.deleted_at.is_(None))

    def _scoped(self, task_id: int, category: str, with_owner: bool = False) -> Task:
        try:
            query = self._active().filter(Task.id == task_id, Task.category == category)
            if with_owner:
                query = query.options(joinedload(Task.user))
            task = query.first()
        except SQLAlchemyError as e:
            raise TaskStorageError("Error fetching task", cause=e) from e
        if task is None:
            raise TaskNotFoundError()
        return task

    def _commit(self, action: str) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Task %s failed", action)
            raise TaskStorageError(f"Error {action} task", cause=e) from e

    def _notify(self, event: str, task_id: int) -> None:
        if self.observer is None:
            return
        try:
            self.observer(event, task_id)
        except Exception:
            logger.exception("Task observer failed for event=%s task_id=%s", event, task_id)

    def _require_category(self, category: str | None) -> str:
        if not self.categories.contains(category):
            raise InvalidCategoryError(category)
        return category

    def list_tasks(self, category: str, requester_role: str | None) -> list[Task]:
        """Tasks in category; non-admins only see approved ones."""
        try:
            query = self._active().filter(Task.category == category)
            if not is_admin(requester_role):
                query = query.filter(Task.status == STATUS_APPROVED)
            return query.options(joinedload(Task.user)).order_by(Task.id).all()
        except SQLAlchemyError as e:
            raise TaskStorageError("Error fetching tasks", cause=e) from e

    def get_task(self, task_id: int, category: str, requester_role: str | None) -> Task:
        """Single task scoped by id and category, under the same visibility rule as list."""
        task = self._scoped(task_id, category, with_owner=True)
        if not is_admin(requester_role) and task.status != STATUS_APPROVED:
            raise TaskNotFoundError()
        return task

    def create(
        self,
        payload: TaskRequest,
        requester_id: int,
        requester_role: str | None,
        category: str,
    ) -> Task:
        """
        Create a task in the route's category, owned by the requester.

        Admin posts are approved immediately; everyone else's start pending.
        """
        self._require_category(category)
        validate_task_type(payload.type)
        task = Task(
            title=payload.title,
            description=payload.description,
            content=payload.content,
            type=payload.type,
            category=category,
            keywords=list(payload.keywords),
            status=STATUS_APPROVED if is_admin(requester_role) else STATUS_PENDING,
            rating=0.0,
            user_id=requester_id,
        )
        self.session.add(task)
        self._commit("creating")
        logger.info(
            "Task created id=%s category=%s status=%s user_id=%s",
            task.id,
            category,
            task.status,
            requester_id,
        )
        self._notify(EVENT_CREATED, task.id)
        return self._scoped(task.id, category, with_owner=True)

    def update(self, task_id: int, category: str, payload: TaskRequest) -> Task:
        """Replace every editable field of the task with the payload's values."""
        task = self._scoped(task_id, category)
        validate_task_type(payload.type)
        new_category = self._require_category(payload.category or category)

        task.title = payload.title
        task.description = payload.description
        task.content = payload.content
        task.type = payload.type
        task.category = new_category
        task.keywords = list(payload.keywords)
        self._commit("updating")
        self._notify(EVENT_UPDATED, task.id)
        return self._scoped(task.id, new_category, with_owner=True)

    def delete(self, task_id: int, category: str) -> None:
        """Soft delete: the row stays, but no query returns it again."""
        task = self._scoped(task_id, category)
        task.deleted_at = datetime.now(UTC)
        self._commit("deleting")
        logger.info("Task deleted id=%s category=%s", task_id, category)
        self._notify(EVENT_DELETED, task_id)

    def _set_status(self, task_id: int, category: str, status: str, reason: str | None) -> Task:
        task = self._scoped(task_id, category)
        previous = task.status
        task.status = status
        task.rejection_reason = reason if status == STATUS_REJECTED else None
        self._commit("approving" if status == STATUS_APPROVED else "rejecting")
        logger.info(
            "Task moderated id=%s category=%s %s -> %s", task_id, category, previous, status
        )
        self._notify(EVENT_UPDATED, task_id)
        return self._scoped(task_id, category, with_owner=True)

    def approve(self, task_id: int, category: str) -> Task:
        return self._set_status(task_id, category, STATUS_APPROVED, None)

    def reject(self, task_id: int, category: str, reason: str | None = None) -> Task:
        reason = reason.strip() if reason else None
        return self._set_status(task_id, category, STATUS_REJECTED, reason or None)

    def list_pending(self) -> list[Task]:
        """Every pending task across all categories, oldest first."""
        try:
            return (
                self._active()
                .filter(Task.status == STATUS_PENDING)
                .options(joinedload(Task.user))
                .order_by(Task.created_at, Task.id)
                .all()
            )
        except SQLAlchemyError as e:
            raise TaskStorageError("Error fetching pending tasks", cause=e) from e
