"""Authentication helpers for hashing, JWT creation and refresh cookies.

Shared utilities used by the auth and verification services.

Pipeline:
- hash_secret / verify_secret: bcrypt one-way hash (passwords and
  verification secrets)
- create_token / issue_tokens / decode_token: HS256 JWT signing
- set_refresh_cookie / clear_refresh_cookie: httpOnly refresh cookie
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Literal

import bcrypt
import jwt
from fastapi import Response

from pomodoro_api.core.config import settings

logger = logging.getLogger(__name__)

_ALGORITHM = "HS256"

# bcrypt only considers the first 72 bytes of its input
_BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class TokenPair:
    """Access and refresh JWTs issued together.

    Attributes:
        access_token: Short-lived token for API calls.
        refresh_token: Long-lived token exchanged for a new pair.
    """

    access_token: str
    refresh_token: str


def _secret_bytes(value: str) -> bytes:
    return value.encode()[:_BCRYPT_MAX_BYTES]


def hash_secret(value: str, *, rounds: int | None = None) -> str:
    """Hash a password or verification secret with bcrypt.

    Args:
        value: Plain-text value.
        rounds: bcrypt cost factor. Defaults to settings.bcrypt_rounds.

    Returns:
        bcrypt hash as a string.
    """
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(_secret_bytes(value), salt).decode()


def verify_secret(value: str, hashed: str | bytes) -> bool:
    """Constant-time check of a plain value against a bcrypt hash.

    A malformed stored hash counts as a mismatch.
    """
    hashed_bytes = hashed.encode() if isinstance(hashed, str) else hashed
    try:
        return bcrypt.checkpw(_secret_bytes(value), hashed_bytes)
    except ValueError:
        logger.warning("Stored bcrypt hash is malformed")
        return False


def create_token(
    *,
    user_id: str,
    secret: str,
    expires_delta: timedelta,
) -> str:
    """Create a signed JWT carrying the user id.

    The payload holds ``id`` plus the registered ``exp`` and ``iat``
    claims. No roles or scopes are embedded.

    Args:
        user_id: User UUID string.
        secret: HMAC signing secret.
        expires_delta: Time until expiration.

    Returns:
        Encoded JWT string.
    """
    now = datetime.now(UTC)
    payload = {
        "id": user_id,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(payload, secret, algorithm=_ALGORITHM)


def issue_tokens(user_id: uuid.UUID | str) -> TokenPair:
    """Sign an access token and a refresh token for the user.

    Lifetimes come from settings: 1 hour and 7 days by default.
    """
    secret = settings.jwt_secret.get_secret_value()
    return TokenPair(
        access_token=create_token(
            user_id=str(user_id),
            secret=secret,
            expires_delta=timedelta(minutes=settings.access_token_ttl_minutes),
        ),
        refresh_token=create_token(
            user_id=str(user_id),
            secret=secret,
            expires_delta=timedelta(days=settings.refresh_token_ttl_days),
        ),
    )


def decode_token(token: str) -> uuid.UUID:
    """Verify a JWT and return the user id it carries.

    Raises:
        jwt.InvalidTokenError: Bad signature, expired, or malformed.
        KeyError: Payload has no ``id`` claim.
        ValueError: ``id`` is not a UUID.
    """
    payload = jwt.decode(
        token,
        settings.jwt_secret.get_secret_value(),
        algorithms=[_ALGORITHM],
        options={"require": ["exp", "iat"]},
    )
    return uuid.UUID(payload["id"])


def _cookie_policy() -> tuple[bool, Literal["lax", "none"]]:
    """Secure flag and SameSite value for the current mode.

    Production: secure, lax. Otherwise: not secure, none.
    """
    if settings.is_production:
        return True, "lax"
    return False, "none"


def set_refresh_cookie(response: Response, refresh_token: str) -> None:
    """Set the httpOnly refresh token cookie on the response.

    Security: httpOnly prevents XSS cookie theft. Domain comes from
    APP_HOST; secure/samesite depend on ENV_MODE.

    Args:
        response: FastAPI response object.
        refresh_token: Refresh JWT string.
    """
    secure, samesite = _cookie_policy()
    expires = datetime.now(UTC) + timedelta(days=settings.refresh_cookie_ttl_days)
    response.set_cookie(
        key=settings.refresh_cookie_name,
        value=refresh_token,
        httponly=True,
        secure=secure,
        samesite=samesite,
        domain=settings.app_host or None,
        expires=expires,
    )


def clear_refresh_cookie(response: Response) -> None:
    """Overwrite the refresh cookie with an empty, already-expired value."""
    secure, samesite = _cookie_policy()
    response.set_cookie(
        key=settings.refresh_cookie_name,
        value="",
        httponly=True,
        secure=secure,
        samesite=samesite,
        domain=settings.app_host or None,
        expires=datetime(1970, 1, 1, tzinfo=UTC),
    )
