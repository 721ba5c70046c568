from fastapi import APIRouter, Depends, Query

from streamhub.api.v1.dependency import CurrentUser
from streamhub.api.v1.schemas.base import ApiOut
from streamhub.api.v1.schemas.follower import FollowIn, IsFollowingOut, UnfollowIn, UnfollowOut
from streamhub.domain.live.follow.follow_domain import FollowService
from streamhub.domain.live.follow.follow_models import (
    FollowedChannelsResponse,
    FollowerListResponse,
    FollowerResponse,
)

router = APIRouter(prefix="/follower")

# Singleton instance
_follow_service = FollowService()


def get_follow_service() -> FollowService:
    """Get the singleton FollowService instance."""
    return _follow_service


@router.post("/follow")
async def follow(
    payload: FollowIn,
    user: CurrentUser,
    service: FollowService = Depends(get_follow_service),
) -> ApiOut[FollowerResponse]:
    """Follow a streamer as the authenticated user."""
    result = await service.follow(
        streamer_id=payload.streamer_id,
        user_id=user.user_id,
        has_live_notifications=payload.live_notifications,
    )
    return ApiOut[FollowerResponse](results=result)


@router.post("/unfollow")
async def unfollow(
    payload: UnfollowIn,
    user: CurrentUser,
    service: FollowService = Depends(get_follow_service),
) -> ApiOut[UnfollowOut]:
    removed = await service.unfollow(streamer_id=payload.streamer_id, user_id=user.user_id)
    return ApiOut[UnfollowOut](results=UnfollowOut(removed=removed))


@router.get("/is_following")
async def is_following(
    user: CurrentUser,
    streamer_id: str = Query(..., description="User id of the streamer"),
    service: FollowService = Depends(get_follow_service),
) -> ApiOut[IsFollowingOut]:
    following = await service.is_following(streamer_id=streamer_id, user_id=user.user_id)
    return ApiOut[IsFollowingOut](results=IsFollowingOut(following=following))


@router.get("/list_followers")
async def list_followers(
    streamer_username: str | None = Query(None, description="Followed streamer"),
    user_username: str | None = Query(None, description="Following user"),
    service: FollowService = Depends(get_follow_service),
) -> ApiOut[FollowerListResponse]:
    result = await service.list_followers(
        streamer_username=streamer_username,
        user_username=user_username,
    )
    return ApiOut[FollowerListResponse](results=result)


@router.get("/list_followed_channels")
async def list_followed_channels(
    user: CurrentUser,
    service: FollowService = Depends(get_follow_service),
) -> ApiOut[FollowedChannelsResponse]:
    """Channels of the streamers the authenticated user follows."""
    result = await service.list_followed_channels(user_id=user.user_id, viewer=user)
    return ApiOut[FollowedChannelsResponse](results=result)
