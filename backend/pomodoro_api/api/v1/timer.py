"""Timer endpoints: today's Pomodoro session and its rounds.

All routes are scoped to the authenticated user. Sessions or rounds that
belong to someone else answer 404, same as missing ones.
"""

import uuid

from fastapi import APIRouter

from pomodoro_api.api.deps import CurrentUserId, Timer
from pomodoro_api.core.responses import DataResponse
from pomodoro_api.schemas.pomodoro import (
    RoundRead,
    RoundUpdate,
    SessionRead,
    SessionUpdate,
)

router = APIRouter()


@router.get("/today")
async def get_today_session(
    user_id: CurrentUserId,
    timer: Timer,
) -> DataResponse[SessionRead | None]:
    """Today's session, or null when none was started."""
    session = await timer.get_today_session(user_id)
    data = SessionRead.model_validate(session) if session is not None else None
    return DataResponse(data=data)


@router.post("")
async def create_session(
    user_id: CurrentUserId,
    timer: Timer,
) -> DataResponse[SessionRead]:
    """Start today's session, or return it if it already exists."""
    session = await timer.create(user_id)
    return DataResponse(data=SessionRead.model_validate(session))


# Declared before /{session_id} so "round" is never parsed as a session id
@router.put("/round/{round_id}")
async def update_round(
    round_id: uuid.UUID,
    body: RoundUpdate,
    user_id: CurrentUserId,
    timer: Timer,
) -> DataResponse[RoundRead]:
    """Record progress on a round."""
    pomodoro_round = await timer.update_round(round_id, user_id, body)
    return DataResponse(data=RoundRead.model_validate(pomodoro_round))


@router.put("/{session_id}")
async def update_session(
    session_id: uuid.UUID,
    body: SessionUpdate,
    user_id: CurrentUserId,
    timer: Timer,
) -> DataResponse[SessionRead]:
    """Mark a session completed or reopen it."""
    session = await timer.update(session_id, user_id, is_completed=body.is_completed)
    return DataResponse(data=SessionRead.model_validate(session))


@router.delete("/{session_id}")
async def delete_session(
    session_id: uuid.UUID,
    user_id: CurrentUserId,
    timer: Timer,
) -> DataResponse[bool]:
    """Delete a session and its rounds."""
    await timer.delete_session(session_id, user_id)
    return DataResponse(data=True)
