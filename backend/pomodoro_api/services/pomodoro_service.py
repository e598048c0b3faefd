"""Pomodoro service: per-day timer sessions and their rounds.

A user has at most one session per UTC calendar day from the API's point
of view: create() hands back today's session when one already exists.
"""

import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from pomodoro_api.core.dates import start_of_today
from pomodoro_api.core.errors import NotFoundError
from pomodoro_api.models.pomodoro import PomodoroRound, PomodoroSession
from pomodoro_api.repositories.pomodoro_repository import PomodoroRepository
from pomodoro_api.schemas.pomodoro import RoundUpdate
from pomodoro_api.services.user_service import UserService

logger = structlog.get_logger()


class PomodoroService:
    """Timer session CRUD scoped to one user at a time.

    Args:
        db: Async database session.
        users: User service for reading the user's timer settings.
    """

    def __init__(self, db: AsyncSession, users: UserService | None = None) -> None:
        self._db = db
        self._users = users or UserService(db)

    async def get_today_session(self, user_id: uuid.UUID) -> PomodoroSession | None:
        """Today's session with rounds in order, or None."""
        return await PomodoroRepository.get_created_since(
            self._db, user_id, start_of_today()
        )

    async def create(self, user_id: uuid.UUID) -> PomodoroSession:
        """Return today's session, creating it with empty rounds if needed.

        The number of rounds comes from the user's intervals_count.

        Raises:
            NotFoundError: The user does not exist.
        """
        existing = await self.get_today_session(user_id)
        if existing is not None:
            return existing

        user = await self._users.get_by_id(user_id)
        session = await PomodoroRepository.create_session(
            self._db, user_id=user_id, rounds_count=user.intervals_count
        )
        logger.info(
            "Timer session created",
            user_id=str(user_id),
            session_id=str(session.id),
            rounds=user.intervals_count,
        )
        return session

    async def update(
        self,
        session_id: uuid.UUID,
        user_id: uuid.UUID,
        *,
        is_completed: bool,
    ) -> PomodoroSession:
        """Mark a session completed or not.

        Raises:
            NotFoundError: Session missing or owned by someone else.
        """
        session = await self._get_owned_session(session_id, user_id)
        return await PomodoroRepository.set_session_completed(
            self._db, session, is_completed=is_completed
        )

    async def update_round(
        self,
        round_id: uuid.UUID,
        user_id: uuid.UUID,
        changes: RoundUpdate,
    ) -> PomodoroRound:
        """Apply a partial update to a round.

        Raises:
            NotFoundError: Round missing or its session is someone else's.
        """
        pomodoro_round = await PomodoroRepository.get_round(self._db, round_id, user_id)
        if pomodoro_round is None:
            raise NotFoundError("Round", str(round_id))

        fields = changes.model_dump(exclude_unset=True, exclude_none=True)
        if not fields:
            return pomodoro_round
        return await PomodoroRepository.update_round(self._db, pomodoro_round, **fields)

    async def delete_session(self, session_id: uuid.UUID, user_id: uuid.UUID) -> None:
        """Delete a session and its rounds.

        Raises:
            NotFoundError: Session missing or owned by someone else.
        """
        session = await self._get_owned_session(session_id, user_id)
        await PomodoroRepository.delete_session(self._db, session)
        logger.info(
            "Timer session deleted", user_id=str(user_id), session_id=str(session_id)
        )

    async def _get_owned_session(
        self, session_id: uuid.UUID, user_id: uuid.UUID
    ) -> PomodoroSession:
        session = await PomodoroRepository.get_session(self._db, session_id, user_id)
        if session is None:
            raise NotFoundError("Session", str(session_id))
        return session
