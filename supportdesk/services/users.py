"""Credential store: user lookup, creation and password verification."""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from supportdesk.core.security import hash_password, verify_password
from supportdesk.models.user import ROLE_USER, VALID_ROLES, User

logger = logging.getLogger(__name__)


class CredentialStoreError(Exception):
    """Raised when the users table cannot be read or written."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class UserNotFoundError(CredentialStoreError):
    def __init__(self, message: str = "User not found") -> None:
        super().__init__(message)


class UserExistsError(CredentialStoreError):
    def __init__(self, message: str = "Email already registered") -> None:
        super().__init__(message)


class InvalidCredentialsError(CredentialStoreError):
    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class CredentialStore:
    """Owns the users table. One instance per DB session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, user_id: int) -> User:
        try:
            user = self.session.get(User, user_id)
        except SQLAlchemyError as e:
            raise CredentialStoreError("Failed to load user", cause=e) from e
        if user is None:
            raise UserNotFoundError()
        return user

    def get_by_email(self, email: str) -> User:
        try:
            user = (
                self.session.query(User)
                .filter(User.email == normalize_email(email))
                .first()
            )
        except SQLAlchemyError as e:
            raise CredentialStoreError("Failed to load user", cause=e) from e
        if user is None:
            raise UserNotFoundError()
        return user

    def list_users(self) -> list[User]:
        try:
            return self.session.query(User).order_by(User.id).all()
        except SQLAlchemyError as e:
            raise CredentialStoreError("Failed to list users", cause=e) from e

    def create(self, email: str, password: str, role: str | None = None) -> User:
        """Create a user; role defaults to 'user'. Raises UserExistsError if the email is taken."""
        role = role or ROLE_USER
        if role not in VALID_ROLES:
            raise ValueError(f"role must be one of {sorted(VALID_ROLES)}")
        if not password:
            raise ValueError("password cannot be empty")
        email = normalize_email(email)
        try:
            exists = self.session.query(User.id).filter(User.email == email).first()
        except SQLAlchemyError as e:
            raise CredentialStoreError("Failed to check existing user", cause=e) from e
        if exists is not None:
            raise UserExistsError()

        user = User(email=email, password_hash=hash_password(password), role=role)
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same email.
            self.session.rollback()
            raise UserExistsError() from e
        except SQLAlchemyError as e:
            self.session.rollback()
            raise CredentialStoreError("Failed to create user", cause=e) from e
        self.session.refresh(user)
        logger.info("Created user id=%s email=%s role=%s", user.id, user.email, user.role)
        return user

    def authenticate(self, email: str, password: str) -> User:
        """Return the user if the password matches; InvalidCredentialsError otherwise."""
        try:
            user = self.get_by_email(email)
        except UserNotFoundError as e:
            raise InvalidCredentialsError() from e
        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()
        return user
