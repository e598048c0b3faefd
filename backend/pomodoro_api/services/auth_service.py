"""Auth service: login, registration and token refresh.

Tokens are stateless: validity is signature plus expiry, nothing is stored
server-side and nothing is revoked. Failures are user-input driven and are
raised as typed API errors without retry.
"""

import uuid

import jwt
import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pomodoro_api.core.auth import TokenPair, decode_token, issue_tokens, verify_secret
from pomodoro_api.core.errors import BadRequestError, NotFoundError, UnauthorizedError
from pomodoro_api.models.user import User
from pomodoro_api.schemas.auth import AuthResult, UserRead
from pomodoro_api.services.user_service import UserService

logger = structlog.get_logger()

_USER_EXISTS_MSG = "User already exists"


class AuthService:
    """Authenticates users and issues token pairs.

    Args:
        db: Async database session.
        users: User service used as the credential store. Built from ``db``
            when omitted.
    """

    def __init__(self, db: AsyncSession, users: UserService | None = None) -> None:
        self._db = db
        self._users = users or UserService(db)

    async def login(self, *, email: str, password: str) -> AuthResult:
        """Check credentials and issue tokens.

        Raises:
            NotFoundError: No user with this email.
            UnauthorizedError: Password does not match.
        """
        user = await self._validate_user(email=email, password=password)
        return self._build_result(user)

    async def register(self, *, email: str, password: str) -> AuthResult:
        """Create an account and issue tokens.

        Raises:
            BadRequestError: The email is already registered.
        """
        if await self._users.get_by_email(email) is not None:
            raise BadRequestError(_USER_EXISTS_MSG)

        try:
            user = await self._users.create(email=email, password=password)
        except IntegrityError as exc:
            # Lost a race with a concurrent registration of the same email
            await self._db.rollback()
            raise BadRequestError(_USER_EXISTS_MSG) from exc

        logger.info("User registered", user_id=str(user.id))
        return self._build_result(user)

    async def refresh(self, refresh_token: str | None) -> AuthResult:
        """Exchange a refresh token for a new pair.

        Raises:
            UnauthorizedError: Token missing, invalid, expired, or its user
                no longer exists.
        """
        if not refresh_token:
            raise UnauthorizedError("Refresh token not passed")

        try:
            user_id = decode_token(refresh_token)
        except (jwt.InvalidTokenError, KeyError, ValueError) as exc:
            raise UnauthorizedError("Invalid refresh token") from exc

        try:
            user = await self._users.get_by_id(user_id)
        except NotFoundError as exc:
            raise UnauthorizedError("Invalid refresh token") from exc

        return self._build_result(user)

    @staticmethod
    def issue_tokens(user_id: uuid.UUID) -> TokenPair:
        """Sign an access (1h) and refresh (7d) token carrying only the id."""
        return issue_tokens(user_id)

    async def _validate_user(self, *, email: str, password: str) -> User:
        user = await self._users.get_by_email(email)
        if user is None:
            raise NotFoundError("User")

        if not verify_secret(password, user.password_hash):
            raise UnauthorizedError("Invalid password")

        return user

    def _build_result(self, user: User) -> AuthResult:
        tokens = self.issue_tokens(user.id)
        return AuthResult(
            user=UserRead.model_validate(user),
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
        )
