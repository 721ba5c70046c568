from fastapi import APIRouter, Depends, Query

from streamhub.api.v1.dependency import CurrentUser, OptionalUser
from streamhub.api.v1.schemas.base import ApiOut
from streamhub.api.v1.schemas.channel import ChannelOut, CreateChannelIn, ListChannelsOut
from streamhub.domain.live.channel.channel_domain import ChannelService
from streamhub.domain.live.channel.channel_models import ChannelCreateParams, ChannelResponse
from streamhub.schemas.channel_status import ChannelStatus

router = APIRouter(prefix="/channel")

# Singleton instance
_channel_service = ChannelService()


def get_channel_service() -> ChannelService:
    """Get the singleton ChannelService instance."""
    return _channel_service


def to_channel_out(channel: ChannelResponse) -> ChannelOut:
    return ChannelOut(**channel.model_dump())


@router.post("/create_channel")
async def create_channel(
    channel: CreateChannelIn,
    user: CurrentUser,
    service: ChannelService = Depends(get_channel_service),
) -> ApiOut[ChannelOut]:
    """Create the channel of the authenticated user."""
    params = ChannelCreateParams(user_id=user.user_id, **channel.model_dump())
    result = await service.create_channel(params, viewer=user)
    return ApiOut[ChannelOut](results=to_channel_out(result))


@router.get("/get_channel")
async def get_channel(
    user: OptionalUser,
    channel_id: str | None = Query(None, description="Channel identifier"),
    username: str | None = Query(None, description="Username of the streamer"),
    stream_key: str | None = Query(None, description="Stream key (privileged callers)"),
    service: ChannelService = Depends(get_channel_service),
) -> ApiOut[ChannelOut]:
    """Find one channel by id, streamer username or stream key."""
    result = await service.find_channel(
        channel_id=channel_id,
        username=username,
        stream_key=stream_key,
        viewer=user,
    )
    return ApiOut[ChannelOut](results=to_channel_out(result))


@router.get("/list_channels")
async def list_channels(
    user: OptionalUser,
    status: ChannelStatus | None = Query(None, description="live or offline"),
    category_id: str | None = Query(None, description="Category filter"),
    service: ChannelService = Depends(get_channel_service),
) -> ApiOut[ListChannelsOut]:
    """List accessible channels."""
    result = await service.list_channels(status=status, category_id=category_id, viewer=user)
    return ApiOut[ListChannelsOut](
        results=ListChannelsOut(channels=[to_channel_out(ch) for ch in result.channels])
    )
