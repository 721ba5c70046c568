from fastapi import APIRouter, Depends, Query

from streamhub.api.v1.dependency import CurrentUser
from streamhub.api.v1.schemas.base import ApiOut
from streamhub.api.v1.schemas.moderation import ModeratorIn, TimeoutUserIn
from streamhub.domain.live.moderation.moderation_domain import ModerationService
from streamhub.domain.live.moderation.moderation_models import (
    ModerationLogListResponse,
    ModerationLogResponse,
    ModeratorListResponse,
)

router = APIRouter(prefix="/moderation")

# Singleton instance
_moderation_service = ModerationService()


def get_moderation_service() -> ModerationService:
    """Get the singleton ModerationService instance."""
    return _moderation_service


@router.post("/add_moderator")
async def add_moderator(
    payload: ModeratorIn,
    user: CurrentUser,
    service: ModerationService = Depends(get_moderation_service),
) -> ApiOut[ModeratorListResponse]:
    """Grant moderation rights. Channel owner or admin only."""
    result = await service.add_moderator(payload.channel_id, payload.user_id, actor=user)
    return ApiOut[ModeratorListResponse](results=result)


@router.post("/remove_moderator")
async def remove_moderator(
    payload: ModeratorIn,
    user: CurrentUser,
    service: ModerationService = Depends(get_moderation_service),
) -> ApiOut[ModeratorListResponse]:
    """Revoke moderation rights. Channel owner or admin only."""
    result = await service.remove_moderator(payload.channel_id, payload.user_id, actor=user)
    return ApiOut[ModeratorListResponse](results=result)


@router.post("/timeout_user")
async def timeout_user(
    payload: TimeoutUserIn,
    user: CurrentUser,
    service: ModerationService = Depends(get_moderation_service),
) -> ApiOut[ModerationLogResponse]:
    """Time a user out of the channel's chat, as the authenticated moderator."""
    result = await service.timeout_user(
        channel_id=payload.channel_id,
        moderator_id=user.user_id,
        user_id=payload.user_id,
    )
    return ApiOut[ModerationLogResponse](results=result)


@router.get("/list_logs")
async def list_logs(
    channel_id: str = Query(..., description="Channel identifier"),
    limit: int = Query(50, ge=1, le=500, description="Number of entries"),
    service: ModerationService = Depends(get_moderation_service),
) -> ApiOut[ModerationLogListResponse]:
    result = await service.list_moderation_logs(channel_id, limit=limit)
    return ApiOut[ModerationLogListResponse](results=result)
