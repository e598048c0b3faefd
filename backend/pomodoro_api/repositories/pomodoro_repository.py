"""Repository for Pomodoro session and round operations.

Every read is scoped by user_id so callers cannot reach another user's
timer data.
"""

import uuid
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pomodoro_api.models.pomodoro import PomodoroRound, PomodoroSession

# Fields that may be updated via PomodoroRepository.update_round().
_ROUND_UPDATABLE_FIELDS: frozenset[str] = frozenset({"total_seconds", "is_completed"})


class PomodoroRepository:
    """Stateless repository for pomodoro_sessions / pomodoro_rounds.

    Sessions are always returned with rounds eagerly loaded (async
    sessions cannot lazy-load).
    """

    @staticmethod
    async def get_session(
        db: AsyncSession,
        session_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> PomodoroSession | None:
        """Fetch a session owned by the user.

        Args:
            db: Async database session.
            session_id: Session primary key.
            user_id: Owner to scope by.

        Returns:
            PomodoroSession if found and owned, None otherwise.
        """
        stmt = (
            select(PomodoroSession)
            .where(
                PomodoroSession.id == session_id,
                PomodoroSession.user_id == user_id,
            )
            .options(selectinload(PomodoroSession.rounds))
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_created_since(
        db: AsyncSession,
        user_id: uuid.UUID,
        since: datetime,
    ) -> PomodoroSession | None:
        """Fetch the user's newest session created at or after a cutoff.

        Args:
            db: Async database session.
            user_id: Owner to scope by.
            since: Inclusive lower bound for created_at.

        Returns:
            Newest matching PomodoroSession, or None.
        """
        stmt = (
            select(PomodoroSession)
            .where(
                PomodoroSession.user_id == user_id,
                PomodoroSession.created_at >= since,
            )
            .options(selectinload(PomodoroSession.rounds))
            .order_by(PomodoroSession.created_at.desc())
            .limit(1)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create_session(
        db: AsyncSession,
        *,
        user_id: uuid.UUID,
        rounds_count: int,
    ) -> PomodoroSession:
        """Create a session with empty rounds.

        Args:
            db: Async database session.
            user_id: Owner.
            rounds_count: Number of rounds to create.

        Returns:
            Created session with rounds loaded.
        """
        session = PomodoroSession(
            user_id=user_id,
            rounds=[PomodoroRound(position=i) for i in range(rounds_count)],
        )
        db.add(session)
        await db.flush()
        created = await PomodoroRepository.get_session(db, session.id, user_id)
        if created is None:  # pragma: no cover - flushed in the same session
            msg = "Created session vanished before reload"
            raise RuntimeError(msg)
        return created

    @staticmethod
    async def set_session_completed(
        db: AsyncSession,
        session: PomodoroSession,
        *,
        is_completed: bool,
    ) -> PomodoroSession:
        """Mark a session completed or not."""
        session.is_completed = is_completed
        await db.flush()
        refreshed = await PomodoroRepository.get_session(
            db, session.id, session.user_id
        )
        return refreshed or session

    @staticmethod
    async def get_round(
        db: AsyncSession,
        round_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> PomodoroRound | None:
        """Fetch a round whose session is owned by the user.

        Args:
            db: Async database session.
            round_id: Round primary key.
            user_id: Owner of the parent session.

        Returns:
            PomodoroRound if found and owned, None otherwise.
        """
        stmt = (
            select(PomodoroRound)
            .join(PomodoroSession, PomodoroRound.session_id == PomodoroSession.id)
            .where(
                PomodoroRound.id == round_id,
                PomodoroSession.user_id == user_id,
            )
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def update_round(
        db: AsyncSession,
        pomodoro_round: PomodoroRound,
        **kwargs: int | bool,
    ) -> PomodoroRound:
        """Update round fields.

        Raises:
            ValueError: If an unknown field name is passed.
        """
        unknown = set(kwargs) - _ROUND_UPDATABLE_FIELDS
        if unknown:
            msg = f"Unknown fields: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        for field, value in kwargs.items():
            setattr(pomodoro_round, field, value)

        await db.flush()
        await db.refresh(pomodoro_round)
        return pomodoro_round

    @staticmethod
    async def delete_session(db: AsyncSession, session: PomodoroSession) -> None:
        """Delete a session; its rounds go with it."""
        await db.delete(session)
        await db.flush()
