from fastapi import APIRouter, Depends, Query

from streamhub.api.v1.dependency import CurrentUser
from streamhub.api.v1.schemas.base import ApiOut
from streamhub.api.v1.schemas.stream import LogStreamMetadataIn, StreamChannelIn
from streamhub.domain.live.stream.stream_domain import StreamService
from streamhub.domain.live.stream.stream_models import StreamListResponse, StreamResponse

router = APIRouter(prefix="/stream")

# Singleton instance
_stream_service = StreamService()


def get_stream_service() -> StreamService:
    """Get the singleton StreamService instance."""
    return _stream_service


@router.post("/start_stream")
async def start_stream(
    payload: StreamChannelIn,
    user: CurrentUser,
    service: StreamService = Depends(get_stream_service),
) -> ApiOut[StreamResponse]:
    """Take a channel live. Channel owner or admin only."""
    await service.ensure_can_manage_stream(payload.channel_id, user)
    result = await service.start_stream(payload.channel_id)
    return ApiOut[StreamResponse](results=result)


@router.post("/end_stream")
async def end_stream(
    payload: StreamChannelIn,
    user: CurrentUser,
    service: StreamService = Depends(get_stream_service),
) -> ApiOut[StreamResponse]:
    """End the channel's active stream. Channel owner or admin only."""
    await service.ensure_can_manage_stream(payload.channel_id, user)
    result = await service.end_stream(payload.channel_id)
    return ApiOut[StreamResponse](results=result)


@router.post("/log_stream_metadata")
async def log_stream_metadata(
    payload: LogStreamMetadataIn,
    user: CurrentUser,
    service: StreamService = Depends(get_stream_service),
) -> ApiOut[StreamResponse]:
    """Record ingest telemetry on the channel's active stream."""
    await service.ensure_can_manage_stream(payload.channel_id, user)
    result = await service.log_stream_metadata(payload.channel_id, payload.metadata)
    return ApiOut[StreamResponse](results=result)


@router.get("/get_stream")
async def get_stream(
    stream_id: str = Query(..., description="Stream identifier"),
    service: StreamService = Depends(get_stream_service),
) -> ApiOut[StreamResponse]:
    result = await service.get_stream(stream_id)
    return ApiOut[StreamResponse](results=result)


@router.get("/list_streams")
async def list_streams(
    channel_id: str = Query(..., description="Channel identifier"),
    limit: int = Query(20, ge=1, le=100, description="Number of streams"),
    service: StreamService = Depends(get_stream_service),
) -> ApiOut[StreamListResponse]:
    """Stream history of a channel, newest first."""
    result = await service.list_streams(channel_id, limit=limit)
    return ApiOut[StreamListResponse](results=result)
