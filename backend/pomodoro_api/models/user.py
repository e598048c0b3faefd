"""User model - authentication foundation and timer settings."""

from typing import TYPE_CHECKING

from sqlalchemy import Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pomodoro_api.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from pomodoro_api.models.pomodoro import PomodoroSession
    from pomodoro_api.models.verification import UserVerification

_CASCADE_ALL_DELETE_ORPHAN = "all, delete-orphan"

DEFAULT_WORK_INTERVAL = 50
DEFAULT_BREAK_INTERVAL = 10
DEFAULT_INTERVALS_COUNT = 7


class User(UUIDPrimaryKeyMixin, Base, TimestampMixin):
    """User account.

    Attributes:
        id: UUID primary key.
        email: Unique email address, stored lower-case.
        name: Display name.
        password_hash: bcrypt hash of the password.
        work_interval: Work period length in minutes.
        break_interval: Break length in minutes.
        intervals_count: Rounds per timer session.
        created_at: Account creation timestamp (from TimestampMixin).
        updated_at: Last modification timestamp (from TimestampMixin).
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    work_interval: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=DEFAULT_WORK_INTERVAL,
        server_default=text(str(DEFAULT_WORK_INTERVAL)),
    )
    break_interval: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=DEFAULT_BREAK_INTERVAL,
        server_default=text(str(DEFAULT_BREAK_INTERVAL)),
    )
    intervals_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=DEFAULT_INTERVALS_COUNT,
        server_default=text(str(DEFAULT_INTERVALS_COUNT)),
    )

    # Relationships
    verifications: Mapped[list["UserVerification"]] = relationship(
        "UserVerification",
        back_populates="user",
        cascade=_CASCADE_ALL_DELETE_ORPHAN,
    )
    pomodoro_sessions: Mapped[list["PomodoroSession"]] = relationship(
        "PomodoroSession",
        back_populates="user",
        cascade=_CASCADE_ALL_DELETE_ORPHAN,
    )
