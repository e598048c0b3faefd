"""User service: credential store access with password hashing.

The auth service delegates account creation here so hashing stays next to
the store that persists the hash.
"""

import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from pomodoro_api.core.auth import hash_secret
from pomodoro_api.core.errors import NotFoundError
from pomodoro_api.models.user import User
from pomodoro_api.repositories.user_repository import UserRepository
from pomodoro_api.schemas.auth import UserUpdate

logger = structlog.get_logger()

_NULLABLE_FIELDS = frozenset({"name"})


class UserService:
    """Looks up, creates and updates users.

    Args:
        db: Async database session. The caller owns the transaction.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get_by_id(self, user_id: uuid.UUID) -> User:
        """Fetch a user that must exist.

        Raises:
            NotFoundError: If no user has this id.
        """
        user = await UserRepository.get_by_id(self._db, user_id)
        if user is None:
            raise NotFoundError("User")
        return user

    async def get_by_email(self, email: str) -> User | None:
        return await UserRepository.get_by_email(self._db, email)

    async def create(
        self,
        *,
        email: str,
        password: str,
        name: str | None = None,
    ) -> User:
        """Hash the password and persist a new user.

        Raises:
            sqlalchemy.exc.IntegrityError: If the email is already taken.
        """
        user = await UserRepository.create(
            self._db,
            email=email,
            password_hash=hash_secret(password),
            name=name,
        )
        logger.info("User created", user_id=str(user.id))
        return user

    async def update_profile(self, user_id: uuid.UUID, changes: UserUpdate) -> User:
        """Apply a partial profile update.

        A new password is re-hashed before storage. Fields left unset in
        ``changes`` are not touched; an explicit null clears ``name`` and is
        ignored for the non-nullable fields.

        Raises:
            NotFoundError: If no user has this id.
        """
        fields = {
            field: value
            for field, value in changes.model_dump(exclude_unset=True).items()
            if value is not None or field in _NULLABLE_FIELDS
        }
        password = fields.pop("password", None)
        if password is not None:
            fields["password_hash"] = hash_secret(password)

        if not fields:
            return await self.get_by_id(user_id)

        user = await UserRepository.update(self._db, user_id, **fields)
        if user is None:
            raise NotFoundError("User")
        return user
