"""Email verification endpoints for the signed-in user."""

from fastapi import APIRouter

from pomodoro_api.api.deps import CurrentUserId, Verifications
from pomodoro_api.core.responses import DataResponse
from pomodoro_api.schemas.verification import VerificationResult, VerifyRequest

router = APIRouter()


@router.post("", status_code=202)
async def request_verification(
    user_id: CurrentUserId,
    verifications: Verifications,
) -> DataResponse[dict]:
    """Create a verification secret and mail it to the user's address.

    422 when the user is already verified.
    """
    record = await verifications.request_verification(user_id)
    return DataResponse(data={"status": record.status.value})


@router.post("/verify")
async def verify(
    body: VerifyRequest,
    user_id: CurrentUserId,
    verifications: Verifications,
) -> DataResponse[VerificationResult]:
    """Submit the mailed secret.

    Returns ``verified: false`` for a wrong secret. 422 when the user is
    already verified, 404 when there is no pending request.
    """
    verified = await verifications.verify(user_id, body.secret)
    return DataResponse(data=VerificationResult(verified=verified))


@router.get("")
async def verification_status(
    user_id: CurrentUserId,
    verifications: Verifications,
) -> DataResponse[VerificationResult]:
    """Whether the user's latest verification was accepted."""
    verified = await verifications.is_verified(user_id)
    return DataResponse(data=VerificationResult(verified=verified))
