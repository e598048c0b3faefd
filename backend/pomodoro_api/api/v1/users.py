"""Profile endpoints for the signed-in user."""

from fastapi import APIRouter

from pomodoro_api.api.deps import CurrentUser, CurrentUserId, Users
from pomodoro_api.core.responses import DataResponse
from pomodoro_api.schemas.auth import UserRead, UserUpdate

router = APIRouter()


@router.get("/profile")
async def get_profile(user: CurrentUser) -> DataResponse[UserRead]:
    """Return the current user without the password hash."""
    return DataResponse(data=UserRead.model_validate(user))


@router.put("/profile")
async def update_profile(
    body: UserUpdate,
    user_id: CurrentUserId,
    users: Users,
) -> DataResponse[UserRead]:
    """Update name, password or timer settings."""
    user = await users.update_profile(user_id, body)
    return DataResponse(data=UserRead.model_validate(user))
