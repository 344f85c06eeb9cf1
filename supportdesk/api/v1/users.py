"""Current identity and admin user listing."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from supportdesk.api.v1.auth import get_current_user, require_admin
from supportdesk.core.database import get_db
from supportdesk.schemas.auth import CurrentUser, UserOut
from supportdesk.services.users import CredentialStore, CredentialStoreError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/user", response_model=UserOut)
def get_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> UserOut:
    """Return the identity behind the Bearer token."""
    return UserOut(id=current_user.id, email=current_user.email, role=current_user.role)


@router.get("/users", response_model=list[UserOut])
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserOut]:
    """List all users (admin only). Password hashes are never included."""
    try:
        users = CredentialStore(db).list_users()
    except CredentialStoreError as e:
        logger.error("Failed to list users: %s", e.cause)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch users",
        ) from e
    return [UserOut.model_validate(u) for u in users]
