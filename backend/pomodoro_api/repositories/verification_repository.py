"""Repository for UserVerification CRUD operations.

Verification secrets are stored as bcrypt hashes. Records that never got
accepted are swept once they predate the current calendar day.
"""

import uuid
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from pomodoro_api.models.verification import UserVerification, VerificationStatus


class VerificationRepository:
    """Stateless repository for UserVerification table operations.

    All methods are static; the caller owns the transaction.
    """

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        user_id: uuid.UUID,
        secret_hash: str,
    ) -> UserVerification:
        """Store a new pending verification record.

        Args:
            db: Async database session.
            user_id: Owning user.
            secret_hash: bcrypt hash of the plain secret.

        Returns:
            Created UserVerification with timestamps populated.

        Raises:
            sqlalchemy.exc.IntegrityError: If the user does not exist.
        """
        record = UserVerification(
            user_id=user_id,
            secret=secret_hash,
            status=VerificationStatus.PENDING,
        )
        db.add(record)
        await db.flush()
        await db.refresh(record)
        return record

    @staticmethod
    async def get_latest_for_user(
        db: AsyncSession,
        user_id: uuid.UUID,
    ) -> UserVerification | None:
        """Fetch the most recently updated record for a user.

        Args:
            db: Async database session.
            user_id: Owning user.

        Returns:
            UserVerification if any exists, None otherwise.
        """
        stmt = (
            select(UserVerification)
            .where(UserVerification.user_id == user_id)
            .order_by(
                UserVerification.updated_at.desc(),
                UserVerification.created_at.desc(),
            )
            .limit(1)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def set_status(
        db: AsyncSession,
        record: UserVerification,
        status: VerificationStatus,
    ) -> UserVerification:
        """Change a record's status.

        Args:
            db: Async database session.
            record: Loaded verification record.
            status: New status.

        Returns:
            The refreshed record.
        """
        record.status = status
        await db.flush()
        await db.refresh(record)
        return record

    @staticmethod
    async def delete_stale(db: AsyncSession, *, before: datetime) -> int:
        """Delete non-accepted records created before a cutoff.

        Args:
            db: Async database session.
            before: Records with created_at strictly earlier are removed.

        Returns:
            Number of deleted rows.
        """
        # "fetch" drops deleted rows from the identity map without comparing
        # in-memory timestamps against the cutoff
        stmt = (
            delete(UserVerification)
            .where(
                UserVerification.status != VerificationStatus.ACCEPTED,
                UserVerification.created_at < before,
            )
            .execution_options(synchronize_session="fetch")
        )
        result = await db.execute(stmt)
        row_count: int = result.rowcount  # type: ignore[attr-defined]
        return row_count
