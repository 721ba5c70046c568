"""Stream domain service."""

from streamhub.schemas import User

from ._lifecycle import StreamLifecycleOperations
from ._metadata import StreamMetadataOperations
from .stream_models import StreamListResponse, StreamMetadataParams, StreamResponse


class StreamService:
    """Stream lifecycle and ingest metadata."""

    def __init__(self):
        self._lifecycle = StreamLifecycleOperations()
        self._metadata = StreamMetadataOperations()

    # ==================== LIFECYCLE ====================

    async def start_stream(self, channel_id: str) -> StreamResponse:
        """Start a stream on the channel.

        Raises AppError if the channel is already live.
        """
        return await self._lifecycle.start_stream(channel_id=channel_id)

    async def end_stream(self, channel_id: str) -> StreamResponse:
        """End the channel's active stream.

        Raises AppError if the channel has no active stream.
        """
        return await self._lifecycle.end_stream(channel_id=channel_id)

    async def ensure_can_manage_stream(self, channel_id: str, user: User | None) -> None:
        """Raise AppError (403) unless the user owns the channel or is an admin."""
        await self._lifecycle.ensure_can_manage_stream(channel_id=channel_id, user=user)

    async def get_stream(self, stream_id: str) -> StreamResponse:
        return await self._lifecycle.get_stream(stream_id=stream_id)

    async def list_streams(self, channel_id: str, limit: int = 20) -> StreamListResponse:
        return await self._lifecycle.list_streams(channel_id=channel_id, limit=limit)

    # ==================== METADATA ====================

    async def log_stream_metadata(
        self,
        channel_id: str,
        params: StreamMetadataParams,
    ) -> StreamResponse:
        """Append an ingest telemetry snapshot to the active stream."""
        return await self._metadata.log_stream_metadata(channel_id=channel_id, params=params)
