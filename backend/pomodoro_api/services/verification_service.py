"""Verification service: email ownership via a mailed secret.

Flow:
1. request_verification: random secret -> bcrypt hash stored in a pending
   record -> plain secret mailed (logged) to the user.
2. verify: compare the submitted secret with the stored hash; on match the
   record becomes accepted. Accepted is terminal.

Staleness is calendar based: a record that is still pending and was created
before 00:00 UTC today is deleted. The sweep runs once at startup and again
before every lookup, so a secret requested yesterday can never be accepted.

KNOWN GAP: verify() reads the status and updates it in separate statements
without a row lock. Two concurrent correct submissions can both return
True. The end state (accepted) is the same either way.
"""

import secrets
import uuid
from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pomodoro_api.core.auth import hash_secret, verify_secret
from pomodoro_api.core.dates import start_of_today
from pomodoro_api.core.errors import InvalidStateError, NotFoundError
from pomodoro_api.models.verification import UserVerification, VerificationStatus
from pomodoro_api.repositories.verification_repository import VerificationRepository
from pomodoro_api.services.mail_service import MailService
from pomodoro_api.services.user_service import UserService

logger = structlog.get_logger()

# Bytes of randomness in a verification secret (~32 URL-safe chars)
_SECRET_BYTES = 24


class VerificationService:
    """Issues and checks email verification secrets.

    Args:
        db: Async database session.
        mail: Mail collaborator that delivers the plain secret. Built from
            ``db`` when omitted.
        users: User service used to check that the user exists.
    """

    def __init__(
        self,
        db: AsyncSession,
        *,
        mail: MailService | None = None,
        users: UserService | None = None,
    ) -> None:
        self._db = db
        self._users = users or UserService(db)
        self._mail = mail or MailService(db, users=self._users)

    async def clear_stale(self, now: datetime | None = None) -> int:
        """Delete pending records created before the start of today (UTC).

        Accepted records are kept regardless of age.

        Args:
            now: Reference time. Defaults to the current time.

        Returns:
            Number of deleted records.
        """
        deleted = await VerificationRepository.delete_stale(
            self._db, before=start_of_today(now)
        )
        if deleted > 0:
            logger.info("Deleted stale verifications", count=deleted)
        return deleted

    async def get_by_user_id(self, user_id: uuid.UUID) -> UserVerification | None:
        """Sweep stale records, then return the user's latest one."""
        await self.clear_stale()
        return await VerificationRepository.get_latest_for_user(self._db, user_id)

    async def request_verification(self, user_id: uuid.UUID) -> UserVerification:
        """Create a pending record and mail its secret to the user.

        Raises:
            NotFoundError: The user does not exist.
            InvalidStateError: The user's latest record is already accepted.
        """
        await self._users.get_by_id(user_id)

        latest = await self.get_by_user_id(user_id)
        if latest is not None and latest.status == VerificationStatus.ACCEPTED:
            raise InvalidStateError("User already verified")

        secret = secrets.token_urlsafe(_SECRET_BYTES)
        record = await VerificationRepository.create(
            self._db,
            user_id=user_id,
            secret_hash=hash_secret(secret),
        )
        await self._mail.send_mail(user_id, "verification", secret=secret)
        logger.info("Verification requested", user_id=str(user_id))
        return record

    async def verify(self, user_id: uuid.UUID, secret: str) -> bool:
        """Check a submitted secret and accept the record on match.

        Returns:
            True if the secret matched (record is now accepted), False
            otherwise. A mismatch leaves the record untouched.

        Raises:
            NotFoundError: The user has no live verification record.
            InvalidStateError: The record was already accepted.
        """
        record = await self.get_by_user_id(user_id)
        if record is None:
            raise NotFoundError("Verification")

        if record.status == VerificationStatus.ACCEPTED:
            raise InvalidStateError("User already verified")

        is_valid = verify_secret(secret, record.secret)
        if is_valid:
            await VerificationRepository.set_status(
                self._db, record, VerificationStatus.ACCEPTED
            )
            logger.info("Verification accepted", user_id=str(user_id))

        return is_valid

    async def is_verified(self, user_id: uuid.UUID) -> bool:
        """Whether the user's latest record is accepted."""
        record = await self.get_by_user_id(user_id)
        return record is not None and record.status == VerificationStatus.ACCEPTED


async def clear_stale_verifications(
    session_factory: async_sessionmaker[AsyncSession],
) -> int:
    """Startup routine: sweep stale verifications in a dedicated session.

    Args:
        session_factory: Factory for the session that owns the sweep.

    Returns:
        Number of deleted records.
    """
    async with session_factory() as db:
        try:
            deleted = await VerificationService(db).clear_stale()
            await db.commit()
        except Exception:
            await db.rollback()
            raise
    return deleted
