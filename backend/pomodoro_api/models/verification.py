"""User verification model - email ownership workflow state.

One row per verification request. The plain secret is mailed to the user;
only its bcrypt hash is stored. Status moves pending -> accepted and never
back.
"""

import enum
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pomodoro_api.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from pomodoro_api.models.user import User


class VerificationStatus(str, enum.Enum):
    """Lifecycle state of a verification record."""

    PENDING = "pending"
    ACCEPTED = "accepted"


class UserVerification(UUIDPrimaryKeyMixin, Base, TimestampMixin):
    """Email verification request.

    Uniqueness per user is not enforced; lookups take the most recently
    updated row.

    Attributes:
        id: UUID primary key.
        user_id: Owning user.
        secret: bcrypt hash of the mailed secret.
        status: ``pending`` until the correct secret is presented.
        created_at: Request timestamp, drives the stale sweep.
        updated_at: Last status change.
    """

    __tablename__ = "user_verifications"

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    secret: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    status: Mapped[VerificationStatus] = mapped_column(
        Enum(
            VerificationStatus,
            name="verification_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=VerificationStatus.PENDING,
        server_default=VerificationStatus.PENDING.value,
    )

    user: Mapped["User"] = relationship("User", back_populates="verifications")
