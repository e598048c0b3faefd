"""Pomodoro timer models - sessions and their rounds."""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Integer, false, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pomodoro_api.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from pomodoro_api.models.user import User


class PomodoroSession(UUIDPrimaryKeyMixin, Base, TimestampMixin):
    """A day's timer session.

    Attributes:
        id: UUID primary key.
        user_id: Owning user.
        is_completed: Whether every round was finished.
        rounds: Rounds in creation order.
    """

    __tablename__ = "pomodoro_sessions"

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    is_completed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    user: Mapped["User"] = relationship("User", back_populates="pomodoro_sessions")
    rounds: Mapped[list["PomodoroRound"]] = relationship(
        "PomodoroRound",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="PomodoroRound.position",
    )


class PomodoroRound(UUIDPrimaryKeyMixin, Base, TimestampMixin):
    """One work interval inside a session.

    Attributes:
        id: UUID primary key.
        session_id: Parent session.
        position: Zero-based order inside the session.
        total_seconds: Seconds worked so far.
        is_completed: Whether the round was finished.
    """

    __tablename__ = "pomodoro_rounds"

    session_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("pomodoro_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )
    total_seconds: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )
    is_completed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    session: Mapped["PomodoroSession"] = relationship(
        "PomodoroSession", back_populates="rounds"
    )
