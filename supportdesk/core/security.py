"""Password hashing and JWT creation/verification for authentication."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from supportdesk.core.config import get_settings

if TYPE_CHECKING:
    from supportdesk.core.config import Settings

logger = logging.getLogger(__name__)

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128

ACCESS_TOKEN_EXPIRE_HOURS = 24

# Claim keys holding the user id, in lookup order. "id" is what older clients were issued.
USER_ID_CLAIM_KEYS: tuple[str, ...] = ("user_id", "id")


class TokenError(Exception):
    """Token could not be validated. Base class; also used for generic failures."""

    message = "Invalid token"

    def __init__(self, message: str | None = None, cause: Exception | None = None) -> None:
        self.message = message or type(self).message
        self.cause = cause
        super().__init__(self.message)


class MalformedTokenError(TokenError):
    message = "Malformed token"


class ExpiredTokenError(TokenError):
    message = "Token is expired or not yet valid"


class InvalidSignatureError(TokenError):
    message = "Invalid token signature"


class InvalidTokenClaimsError(TokenError):
    message = "Invalid token: user identity claim missing"


@dataclass(frozen=True)
class TokenClaims:
    """Identity extracted from a validated token. role is a hint only."""

    user_id: int
    role: str | None


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    if not plain_password:
        return False
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(
    user_id: int, role: str, settings: "Settings | None" = None
) -> str:
    """Create a JWT carrying user_id (and legacy id), role, iat and exp."""
    settings = settings or get_settings()
    now = datetime.now(UTC)
    expire = now + timedelta(hours=ACCESS_TOKEN_EXPIRE_HOURS)
    payload: dict[str, Any] = {
        "user_id": user_id,
        "id": user_id,
        "role": role,
        "exp": expire,
        "iat": now,
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def _extract_user_id(payload: dict[str, Any]) -> int:
    for key in USER_ID_CLAIM_KEYS:
        value = payload.get(key)
        if value is None or isinstance(value, bool):
            continue
        if isinstance(value, int) and value > 0:
            return value
        if isinstance(value, float) and value.is_integer() and value > 0:
            return int(value)
    raise InvalidTokenClaimsError()


def decode_access_token(token: str, settings: "Settings | None" = None) -> TokenClaims:
    """
    Decode and validate a JWT; return its identity claims.

    Only the configured HMAC algorithm is accepted, so tokens whose header names
    another algorithm (including "none") fail. Raises a TokenError subclass
    describing what was wrong.
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise ExpiredTokenError(cause=e) from e
    except jwt.ImmatureSignatureError as e:
        raise ExpiredTokenError(cause=e) from e
    except jwt.InvalidSignatureError as e:
        raise InvalidSignatureError(cause=e) from e
    except jwt.DecodeError as e:
        raise MalformedTokenError(cause=e) from e
    except jwt.MissingRequiredClaimError as e:
        raise InvalidTokenClaimsError("Invalid token: required claim missing", cause=e) from e
    except jwt.PyJWTError as e:
        raise TokenError(cause=e) from e

    user_id = _extract_user_id(payload)
    role = payload.get("role")
    return TokenClaims(user_id=user_id, role=role if isinstance(role, str) else None)
