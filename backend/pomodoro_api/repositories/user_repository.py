"""Data access for the users table (the credential store)."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pomodoro_api.models.user import User

# Columns a profile update may touch. id and email are identity; the
# timestamps are managed by the mixin.
_UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {
        "name",
        "password_hash",
        "work_interval",
        "break_interval",
        "intervals_count",
    }
)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository:
    """Stateless access to users.

    Every method takes the caller's AsyncSession; nothing here commits.
    """

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: uuid.UUID) -> User | None:
        """Load a user by primary key, or None."""
        return await db.get(User, user_id)

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """Load a user by email.

        Args:
            db: Async database session.
            email: Address in any case, surrounding whitespace ignored.

        Returns:
            Matching User, or None.
        """
        stmt = select(User).where(User.email == _normalize_email(email))
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        email: str,
        password_hash: str,
        name: str | None = None,
    ) -> User:
        """Insert a user with the default timer settings.

        Args:
            db: Async database session.
            email: Address, stored lower-cased.
            password_hash: bcrypt hash, never the plain password.
            name: Optional display name.

        Returns:
            The flushed User with id and timestamps set.

        Raises:
            sqlalchemy.exc.IntegrityError: The email is taken.
        """
        user = User(
            email=_normalize_email(email),
            name=name,
            password_hash=password_hash,
        )
        db.add(user)
        await db.flush()
        await db.refresh(user)
        return user

    @staticmethod
    async def update(
        db: AsyncSession,
        user_id: uuid.UUID,
        **kwargs: str | int | None,
    ) -> User | None:
        """Set the given columns on a user.

        Returns:
            The refreshed User, or None when the id is unknown.

        Raises:
            ValueError: A column outside _UPDATABLE_FIELDS was passed.
        """
        unknown = set(kwargs) - _UPDATABLE_FIELDS
        if unknown:
            msg = f"Unknown fields: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        user = await db.get(User, user_id)
        if user is None:
            return None

        for field, value in kwargs.items():
            setattr(user, field, value)

        await db.flush()
        await db.refresh(user)
        return user
