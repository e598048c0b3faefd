"""API v1 router aggregator.

All v1 endpoint routers are included here.
"""

from fastapi import APIRouter

from pomodoro_api.api.v1 import auth, timer, users, verification

router = APIRouter()

# =============================================================================
# Authentication
# =============================================================================

_AUTH_PREFIX = "/auth"

router.include_router(auth.router, prefix=_AUTH_PREFIX, tags=["auth"])
router.include_router(
    verification.router, prefix=f"{_AUTH_PREFIX}/verification", tags=["auth"]
)

# =============================================================================
# User
# =============================================================================

router.include_router(users.router, prefix="/user", tags=["user"])
router.include_router(timer.router, prefix="/user/timer", tags=["timer"])
