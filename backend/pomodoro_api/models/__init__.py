"""ORM models.

Importing this package registers every table on Base.metadata.
"""

from pomodoro_api.models.base import Base
from pomodoro_api.models.pomodoro import PomodoroRound, PomodoroSession
from pomodoro_api.models.user import User
from pomodoro_api.models.verification import UserVerification, VerificationStatus

__all__ = [
    "Base",
    "PomodoroRound",
    "PomodoroSession",
    "User",
    "UserVerification",
    "VerificationStatus",
]
