"""Authentication endpoints.

register / login: email + password, return the sanitized user and a token
pair, and set the httpOnly refresh cookie.
login/access-token: exchange the refresh cookie for a new pair.
logout: clear the refresh cookie.
"""

from typing import Annotated

from fastapi import APIRouter, Cookie, Response

from pomodoro_api.api.deps import Auth
from pomodoro_api.core.auth import clear_refresh_cookie, set_refresh_cookie
from pomodoro_api.core.config import settings
from pomodoro_api.core.responses import DataResponse
from pomodoro_api.schemas.auth import AuthRequest, AuthResult

router = APIRouter()


# ===================================================================
# POST /auth/register
# ===================================================================


@router.post("/register", status_code=201)
async def register(
    body: AuthRequest,
    response: Response,
    auth: Auth,
) -> DataResponse[AuthResult]:
    """Create an account and sign in.

    400 BAD_REQUEST when the email is already registered.
    """
    result = await auth.register(email=body.email, password=body.password)
    set_refresh_cookie(response, result.refresh_token)
    return DataResponse(data=result)


# ===================================================================
# POST /auth/login
# ===================================================================


@router.post("/login")
async def login(
    body: AuthRequest,
    response: Response,
    auth: Auth,
) -> DataResponse[AuthResult]:
    """Sign in with email + password.

    404 NOT_FOUND for an unknown email, 401 UNAUTHORIZED for a wrong
    password.
    """
    result = await auth.login(email=body.email, password=body.password)
    set_refresh_cookie(response, result.refresh_token)
    return DataResponse(data=result)


# ===================================================================
# POST /auth/login/access-token
# ===================================================================


@router.post("/login/access-token")
async def refresh_access_token(
    response: Response,
    auth: Auth,
    refresh_token: Annotated[
        str | None, Cookie(alias=settings.refresh_cookie_name)
    ] = None,
) -> DataResponse[AuthResult]:
    """Issue a new token pair from the refresh cookie.

    401 UNAUTHORIZED when the cookie is missing, invalid or expired.
    """
    result = await auth.refresh(refresh_token)
    set_refresh_cookie(response, result.refresh_token)
    return DataResponse(data=result)


# ===================================================================
# POST /auth/logout
# ===================================================================


@router.post("/logout")
async def logout(response: Response) -> DataResponse[bool]:
    """Drop the refresh cookie. Issued tokens stay valid until they expire."""
    clear_refresh_cookie(response)
    return DataResponse(data=True)
