"""Pydantic request/response schemas."""

from supportdesk.schemas.auth import (
    CurrentUser,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserOut,
)
from supportdesk.schemas.category import CategoryCreate, CategoryOut
from supportdesk.schemas.health import HealthResponse
from supportdesk.schemas.task import (
    MessageResponse,
    RejectRequest,
    TaskOwner,
    TaskRequest,
    TaskResponse,
)

__all__ = [
    "CategoryCreate",
    "CategoryOut",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "RegisterRequest",
    "RegisterResponse",
    "RejectRequest",
    "TaskOwner",
    "TaskRequest",
    "TaskResponse",
    "UserOut",
]
