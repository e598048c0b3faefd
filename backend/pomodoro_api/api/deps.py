"""Shared dependencies for API endpoints.

Authentication guard plus one service factory per request-scoped service.
"""

import uuid
from typing import Annotated

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from pomodoro_api.core.auth import decode_token
from pomodoro_api.core.database import get_db
from pomodoro_api.core.errors import UnauthorizedError
from pomodoro_api.models.user import User
from pomodoro_api.repositories.user_repository import UserRepository
from pomodoro_api.services.auth_service import AuthService
from pomodoro_api.services.pomodoro_service import PomodoroService
from pomodoro_api.services.user_service import UserService
from pomodoro_api.services.verification_service import VerificationService

# auto_error=False so a missing header goes through our own 401 envelope
_bearer_scheme = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_current_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)
    ],
    db: DbSession,
) -> User:
    """Resolve the user behind the bearer access token.

    Validation steps:
    1. Read the token from ``Authorization: Bearer ...``
    2. Decode + verify signature (HS256) and expiry
    3. Extract ``id`` as UUID
    4. Load the user (deleted accounts are rejected)

    Raises:
        UnauthorizedError: For any auth failure. The message never says why.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()

    try:
        user_id = decode_token(credentials.credentials)
    except (jwt.InvalidTokenError, KeyError, ValueError) as exc:
        raise UnauthorizedError() from exc

    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise UnauthorizedError()
    return user


def get_current_user_id(
    user: Annotated[User, Depends(get_current_user)],
) -> uuid.UUID:
    """Id of the authenticated user. Most endpoints only need this."""
    return user.id


def get_user_service(db: DbSession) -> UserService:
    return UserService(db)


def get_auth_service(db: DbSession) -> AuthService:
    return AuthService(db)


def get_verification_service(db: DbSession) -> VerificationService:
    return VerificationService(db)


def get_pomodoro_service(db: DbSession) -> PomodoroService:
    return PomodoroService(db)


# Reusable type aliases for dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentUserId = Annotated[uuid.UUID, Depends(get_current_user_id)]
Users = Annotated[UserService, Depends(get_user_service)]
Auth = Annotated[AuthService, Depends(get_auth_service)]
Verifications = Annotated[VerificationService, Depends(get_verification_service)]
Timer = Annotated[PomodoroService, Depends(get_pomodoro_service)]
