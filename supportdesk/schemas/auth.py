"""Request/response schemas for auth and user endpoints."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from supportdesk.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr = Field(..., description="Account email")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class RegisterRequest(BaseModel):
    """Self-service registration; new accounts always get role 'user'."""

    email: EmailStr = Field(..., description="Account email (must be unique)")
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="Password (at least 6 characters)",
    )


class UserOut(BaseModel):
    """Public view of a user (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    role: str


class LoginResponse(BaseModel):
    """JWT returned after successful login, plus the identity it carries."""

    token: str = Field(..., description="JWT; send as Authorization: Bearer <token>")
    user: UserOut


class RegisterResponse(BaseModel):
    user: UserOut


class CurrentUser(BaseModel):
    """Authenticated user (id, email, role) for dependency injection."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    role: str
