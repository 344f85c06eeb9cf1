"""Login/registration routes and the auth dependencies (get_current_user, require_admin)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from supportdesk.core.database import get_db
from supportdesk.core.security import TokenError, create_access_token, decode_access_token
from supportdesk.models.user import ROLE_ADMIN, ROLE_USER
from supportdesk.schemas.auth import (
    CurrentUser,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserOut,
)
from supportdesk.services.users import (
    CredentialStore,
    CredentialStoreError,
    InvalidCredentialsError,
    UserExistsError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)

router = APIRouter()
# auto_error=False so a missing or non-Bearer header becomes our 401, not FastAPI's default.
security = HTTPBearer(auto_error=False)

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers=BEARER_CHALLENGE,
    )


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> LoginResponse:
    """
    Authenticate with email and password; returns a JWT valid for 24 hours.
    Include the token in the Authorization header as: Bearer <token>
    """
    store = CredentialStore(db)
    try:
        user = store.authenticate(body.email, body.password)
    except InvalidCredentialsError:
        logger.info("Login failed for email=%s", body.email)
        raise _unauthorized("Invalid email or password")
    except CredentialStoreError as e:
        logger.error("Login: credential store error for email=%s: %s", body.email, e.cause)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not process login",
        ) from e

    token = create_access_token(user.id, user.role, request.app.state.settings)
    logger.info("Login successful for user id=%s role=%s", user.id, user.role)
    return LoginResponse(token=token, user=UserOut.model_validate(user))


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> RegisterResponse:
    """Create a regular ('user' role) account. 400 if the email is already registered."""
    store = CredentialStore(db)
    try:
        user = store.create(body.email, body.password, ROLE_USER)
    except UserExistsError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )
    except CredentialStoreError as e:
        logger.error("Register: failed to create user: %s", e.cause)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create user",
        ) from e
    return RegisterResponse(user=UserOut.model_validate(user))


def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer JWT whose user still exists.

    The role comes from the freshly loaded user row, not from the token, so a
    role change or account removal takes effect on the next request. Sets
    request.state.user_id and request.state.role for downstream dependencies.
    """
    if credentials is None:
        raise _unauthorized("Authorization header is missing or not a Bearer token")

    try:
        claims = decode_access_token(credentials.credentials, request.app.state.settings)
    except TokenError as e:
        logger.info("Token rejected: %s (%s)", e.message, e.cause)
        raise _unauthorized(e.message)

    try:
        user = CredentialStore(db).get_by_id(claims.user_id)
    except UserNotFoundError:
        logger.warning("Token for user_id=%s refers to a missing user", claims.user_id)
        raise _unauthorized("Invalid token: user associated with this token not found")
    except CredentialStoreError as e:
        logger.error("Failed to load user_id=%s during auth: %s", claims.user_id, e.cause)
        raise _unauthorized("Invalid token: error validating user")

    request.state.user_id = user.id
    request.state.role = user.role
    return CurrentUser.model_validate(user)


def require_admin(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require role 'admin' on the authenticated request. Raises 403 otherwise."""
    role = getattr(request.state, "role", None)
    if role is None:
        logger.error("require_admin: role missing from request state; denying access")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied: user role not determined",
        )
    if role != ROLE_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied: admin privileges required",
        )
    return current_user
