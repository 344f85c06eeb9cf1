"""Dashboard routes: category-scoped task CRUD and the moderation workflow."""

import logging
from functools import partial
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException, Path, Request, status
from sqlalchemy.orm import Session

from supportdesk.api.v1.auth import get_current_user, require_admin
from supportdesk.core.database import get_db
from supportdesk.schemas.auth import CurrentUser
from supportdesk.schemas.task import MessageResponse, RejectRequest, TaskRequest, TaskResponse
from supportdesk.services.categories import CategoryRegistry
from supportdesk.services.tasks import (
    InvalidCategoryError,
    InvalidTaskTypeError,
    TaskNotFoundError,
    TaskStorageError,
    TaskWorkflow,
    TaskWorkflowError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_categories(request: Request) -> CategoryRegistry:
    return request.app.state.categories


def get_workflow(
    request: Request,
    background_tasks: BackgroundTasks,
    db: Annotated[Session, Depends(get_db)],
    categories: Annotated[CategoryRegistry, Depends(get_categories)],
) -> TaskWorkflow:
    """Build the workflow for this request; the seed writer (if any) runs after the response."""
    seed_writer = getattr(request.app.state, "seed_writer", None)
    observer = None
    if seed_writer is not None:
        observer = partial(background_tasks.add_task, seed_writer.on_task_changed)
    return TaskWorkflow(db, categories, observer=observer)


def known_category(
    category: str,
    categories: Annotated[CategoryRegistry, Depends(get_categories)],
) -> str:
    """Path dependency: unknown categories do not exist (404)."""
    if not categories.contains(category):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


def _to_http(e: TaskWorkflowError) -> HTTPException:
    if isinstance(e, TaskNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    if isinstance(e, InvalidTaskTypeError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid task type")
    if isinstance(e, InvalidCategoryError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid category")
    if isinstance(e, TaskStorageError):
        logger.error("Task storage error: %s (%s)", e.message, e.cause)
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)
    logger.error("Unhandled task workflow error: %s", e)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error")


Workflow = Annotated[TaskWorkflow, Depends(get_workflow)]
KnownCategory = Annotated[str, Depends(known_category)]
# Ids outside the INTEGER column range are rejected as invalid input.
TaskId = Annotated[int, Path(ge=1, le=2**31 - 1)]


# Must be registered before /{category} so it is not taken for a category key.
@router.get("/pending-tasks", response_model=list[TaskResponse])
def list_pending_tasks(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    workflow: Workflow,
) -> list[TaskResponse]:
    """All pending tasks across every category (admin only), with their authors."""
    try:
        tasks = workflow.list_pending()
    except TaskWorkflowError as e:
        raise _to_http(e) from e
    return [TaskResponse.model_validate(t) for t in tasks]


@router.get("/{category}", response_model=list[TaskResponse])
def list_tasks(
    category: KnownCategory,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    workflow: Workflow,
) -> list[TaskResponse]:
    """Tasks in a category. Non-admins only see approved tasks."""
    try:
        tasks = workflow.list_tasks(category, current_user.role)
    except TaskWorkflowError as e:
        raise _to_http(e) from e
    return [TaskResponse.model_validate(t) for t in tasks]


@router.post("/{category}", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    category: str,
    body: TaskRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    workflow: Workflow,
) -> TaskResponse:
    """
    Create a task in the category. Any authenticated user may post: admin posts
    are approved immediately, everyone else's wait for moderation (pending).
    """
    try:
        task = workflow.create(body, current_user.id, current_user.role, category)
    except TaskWorkflowError as e:
        raise _to_http(e) from e
    return TaskResponse.model_validate(task)


@router.get("/{category}/{task_id}", response_model=TaskResponse)
def get_task(
    category: KnownCategory,
    task_id: TaskId,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    workflow: Workflow,
) -> TaskResponse:
    try:
        task = workflow.get_task(task_id, category, current_user.role)
    except TaskWorkflowError as e:
        raise _to_http(e) from e
    return TaskResponse.model_validate(task)


@router.put("/{category}/{task_id}", response_model=TaskResponse)
def update_task(
    category: KnownCategory,
    task_id: TaskId,
    body: TaskRequest,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    workflow: Workflow,
) -> TaskResponse:
    """Replace a task's editable fields (admin only). Omitted optional fields are cleared."""
    try:
        task = workflow.update(task_id, category, body)
    except TaskWorkflowError as e:
        raise _to_http(e) from e
    return TaskResponse.model_validate(task)


@router.delete("/{category}/{task_id}", response_model=MessageResponse)
def delete_task(
    category: KnownCategory,
    task_id: TaskId,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    workflow: Workflow,
) -> MessageResponse:
    try:
        workflow.delete(task_id, category)
    except TaskWorkflowError as e:
        raise _to_http(e) from e
    return MessageResponse(message="Task deleted successfully")


@router.put("/{category}/{task_id}/approve", response_model=TaskResponse)
def approve_task(
    category: KnownCategory,
    task_id: TaskId,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    workflow: Workflow,
) -> TaskResponse:
    try:
        task = workflow.approve(task_id, category)
    except TaskWorkflowError as e:
        raise _to_http(e) from e
    return TaskResponse.model_validate(task)


@router.put("/{category}/{task_id}/reject", response_model=TaskResponse)
def reject_task(
    category: KnownCategory,
    task_id: TaskId,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    workflow: Workflow,
    body: Annotated[RejectRequest | None, Body()] = None,
) -> TaskResponse:
    """Reject a task (admin only). The optional reason is stored on the task."""
    try:
        task = workflow.reject(task_id, category, body.reason if body else None)
    except TaskWorkflowError as e:
        raise _to_http(e) from e
    return TaskResponse.model_validate(task)
