"""Tests for VerificationService.

Covers the pending -> accepted lifecycle, secret hashing, and the
calendar-day stale sweep.
"""

import uuid
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from pomodoro_api.core.auth import hash_secret, verify_secret
from pomodoro_api.core.dates import start_of_today
from pomodoro_api.core.errors import InvalidStateError, NotFoundError
from pomodoro_api.models.user import User
from pomodoro_api.models.verification import UserVerification, VerificationStatus
from pomodoro_api.services.verification_service import (
    VerificationService,
    clear_stale_verifications,
)

_MISSING_UUID = uuid.UUID("99999999-9999-9999-9999-999999999999")
_SECRET = "mailed-secret"  # nosec B105


def _service(db: AsyncSession) -> tuple[VerificationService, AsyncMock]:
    mail = AsyncMock()
    return VerificationService(db, mail=mail), mail


def _mailed_secret(mail: AsyncMock) -> str:
    mail.send_mail.assert_awaited_once()
    return mail.send_mail.await_args.kwargs["secret"]


async def _add_record(
    db: AsyncSession,
    user: User,
    *,
    status: VerificationStatus = VerificationStatus.PENDING,
    created_at: datetime | None = None,
) -> UserVerification:
    created_at = created_at or datetime.now(UTC)
    record = UserVerification(
        user_id=user.id,
        secret=hash_secret(_SECRET),
        status=status,
        created_at=created_at,
        updated_at=created_at,
    )
    db.add(record)
    await db.flush()
    return record


async def _all_records(db: AsyncSession) -> list[UserVerification]:
    result = await db.execute(select(UserVerification))
    return list(result.scalars().all())


def _yesterday() -> datetime:
    return start_of_today() - timedelta(hours=1)


# =============================================================================
# request_verification
# =============================================================================


class TestRequestVerification:
    """Tests for VerificationService.request_verification()."""

    async def test_creates_pending_record(
        self, db_session: AsyncSession, test_user: User
    ):
        service, _mail = _service(db_session)
        record = await service.request_verification(test_user.id)

        assert record.user_id == test_user.id
        assert record.status == VerificationStatus.PENDING

    async def test_mails_plain_secret_and_stores_hash(
        self, db_session: AsyncSession, test_user: User
    ):
        service, mail = _service(db_session)
        record = await service.request_verification(test_user.id)

        secret = _mailed_secret(mail)
        assert mail.send_mail.await_args.args == (test_user.id, "verification")
        assert record.secret != secret
        assert verify_secret(secret, record.secret) is True

    async def test_each_request_gets_a_fresh_secret(
        self, db_session: AsyncSession, test_user: User
    ):
        service, mail = _service(db_session)
        await service.request_verification(test_user.id)
        await service.request_verification(test_user.id)

        secrets_sent = [c.kwargs["secret"] for c in mail.send_mail.await_args_list]
        assert len(set(secrets_sent)) == 2

    async def test_missing_user_is_not_found(self, db_session: AsyncSession):
        service, mail = _service(db_session)
        with pytest.raises(NotFoundError):
            await service.request_verification(_MISSING_UUID)
        mail.send_mail.assert_not_awaited()

    async def test_verified_user_cannot_request_again(
        self, db_session: AsyncSession, test_user: User
    ):
        service, mail = _service(db_session)
        await service.request_verification(test_user.id)
        assert await service.verify(test_user.id, _mailed_secret(mail)) is True

        with pytest.raises(InvalidStateError) as exc_info:
            await service.request_verification(test_user.id)

        assert exc_info.value.message == "User already verified"
        assert mail.send_mail.await_count == 1
        records = await _all_records(db_session)
        assert [r.status for r in records] == [VerificationStatus.ACCEPTED]
        assert await service.is_verified(test_user.id) is True

    async def test_stale_pending_record_does_not_block_new_request(
        self, db_session: AsyncSession, test_user: User
    ):
        await _add_record(db_session, test_user, created_at=_yesterday())
        service, _ = _service(db_session)

        record = await service.request_verification(test_user.id)

        assert record.status == VerificationStatus.PENDING


# =============================================================================
# verify
# =============================================================================


class TestVerify:
    """Tests for VerificationService.verify()."""

    async def test_correct_secret_accepts(
        self, db_session: AsyncSession, test_user: User
    ):
        service, mail = _service(db_session)
        await service.request_verification(test_user.id)

        assert await service.verify(test_user.id, _mailed_secret(mail)) is True

        record = await service.get_by_user_id(test_user.id)
        assert record is not None
        assert record.status == VerificationStatus.ACCEPTED

    async def test_wrong_secret_returns_false_and_stays_pending(
        self, db_session: AsyncSession, test_user: User
    ):
        service, _mail = _service(db_session)
        await service.request_verification(test_user.id)

        assert await service.verify(test_user.id, "wrong-secret") is False

        record = await service.get_by_user_id(test_user.id)
        assert record is not None
        assert record.status == VerificationStatus.PENDING

    async def test_wrong_then_correct_secret_accepts(
        self, db_session: AsyncSession, test_user: User
    ):
        service, mail = _service(db_session)
        await service.request_verification(test_user.id)

        assert await service.verify(test_user.id, "wrong-secret") is False
        assert await service.verify(test_user.id, _mailed_secret(mail)) is True

    async def test_already_accepted_is_invalid_state(
        self, db_session: AsyncSession, test_user: User
    ):
        service, mail = _service(db_session)
        await service.request_verification(test_user.id)
        secret = _mailed_secret(mail)
        await service.verify(test_user.id, secret)

        with pytest.raises(InvalidStateError) as exc_info:
            await service.verify(test_user.id, secret)
        assert exc_info.value.message == "User already verified"

    async def test_wrong_secret_after_acceptance_is_invalid_state(
        self, db_session: AsyncSession, test_user: User
    ):
        service, mail = _service(db_session)
        await service.request_verification(test_user.id)
        await service.verify(test_user.id, _mailed_secret(mail))

        with pytest.raises(InvalidStateError):
            await service.verify(test_user.id, "wrong-secret")

        record = await service.get_by_user_id(test_user.id)
        assert record is not None
        assert record.status == VerificationStatus.ACCEPTED

    async def test_no_record_is_not_found(
        self, db_session: AsyncSession, test_user: User
    ):
        service, _mail = _service(db_session)
        with pytest.raises(NotFoundError):
            await service.verify(test_user.id, _SECRET)

    async def test_secret_requested_yesterday_cannot_be_accepted(
        self, db_session: AsyncSession, test_user: User
    ):
        await _add_record(db_session, test_user, created_at=_yesterday())
        service, _mail = _service(db_session)

        with pytest.raises(NotFoundError):
            await service.verify(test_user.id, _SECRET)

    async def test_only_latest_record_is_checked(
        self, db_session: AsyncSession, test_user: User
    ):
        service, mail = _service(db_session)
        await service.request_verification(test_user.id)
        first_secret = _mailed_secret(mail)
        mail.send_mail.reset_mock()
        await service.request_verification(test_user.id)

        assert await service.verify(test_user.id, first_secret) is False
        assert await service.verify(test_user.id, _mailed_secret(mail)) is True


# =============================================================================
# Lookups
# =============================================================================


class TestLookups:
    """Tests for get_by_user_id() and is_verified()."""

    async def test_get_by_user_id_returns_none_without_records(
        self, db_session: AsyncSession, test_user: User
    ):
        service, _mail = _service(db_session)
        assert await service.get_by_user_id(test_user.id) is None

    async def test_get_by_user_id_is_scoped_to_user(
        self, db_session: AsyncSession, test_user: User, other_user: User
    ):
        await _add_record(db_session, other_user)
        service, _mail = _service(db_session)
        assert await service.get_by_user_id(test_user.id) is None

    async def test_is_verified(self, db_session: AsyncSession, test_user: User):
        service, mail = _service(db_session)
        assert await service.is_verified(test_user.id) is False

        await service.request_verification(test_user.id)
        assert await service.is_verified(test_user.id) is False

        await service.verify(test_user.id, _mailed_secret(mail))
        assert await service.is_verified(test_user.id) is True


# =============================================================================
# clear_stale
# =============================================================================


class TestClearStale:
    """Tests for the calendar-day stale sweep."""

    async def test_deletes_only_pending_records_from_before_today(
        self, db_session: AsyncSession, test_user: User, other_user: User
    ):
        stale = await _add_record(db_session, test_user, created_at=_yesterday())
        accepted_old = await _add_record(
            db_session,
            other_user,
            status=VerificationStatus.ACCEPTED,
            created_at=_yesterday() - timedelta(days=30),
        )
        fresh = await _add_record(db_session, test_user)
        stale_id, kept_ids = stale.id, {accepted_old.id, fresh.id}

        service, _mail = _service(db_session)
        assert await service.clear_stale() == 1

        remaining = {r.id for r in await _all_records(db_session)}
        assert remaining == kept_ids
        assert stale_id not in remaining

    async def test_record_created_just_after_midnight_survives(
        self, db_session: AsyncSession, test_user: User
    ):
        await _add_record(
            db_session,
            test_user,
            created_at=start_of_today() + timedelta(seconds=1),
        )
        service, _mail = _service(db_session)
        assert await service.clear_stale() == 0

    async def test_cutoff_follows_given_now(
        self, db_session: AsyncSession, test_user: User
    ):
        """A record from today is stale once the reference day moves on."""
        await _add_record(db_session, test_user)
        service, _mail = _service(db_session)

        assert await service.clear_stale(now=datetime.now(UTC) + timedelta(days=1)) == 1
        assert await _all_records(db_session) == []

    async def test_nothing_to_delete_returns_zero(self, db_session: AsyncSession):
        service, _mail = _service(db_session)
        assert await service.clear_stale() == 0


class TestClearStaleVerifications:
    """Tests for the startup sweep routine."""

    async def test_sweeps_and_commits_in_own_session(
        self, db_engine: AsyncEngine, db_session: AsyncSession, test_user: User
    ):
        await _add_record(db_session, test_user, created_at=_yesterday())
        await db_session.commit()

        factory = async_sessionmaker(
            db_engine, class_=AsyncSession, expire_on_commit=False
        )
        assert await clear_stale_verifications(factory) == 1

        async with factory() as check:
            result = await check.execute(select(UserVerification))
            assert result.scalars().all() == []
