"""Ingest metadata operations."""

from typing import Any

from beanie.operators import Max, Push, Set
from loguru import logger

from streamhub.schemas import Stream, StreamMetadata
from streamhub.utils.app_errors import AppError, AppErrorCode, HttpStatusCode
from streamhub.utils.clock import utc_now
from streamhub.utils.idgen import new_metadata_id

from .._base import BaseService
from ._lifecycle import stream_to_response
from .stream_models import StreamMetadataParams, StreamResponse


class StreamMetadataOperations(BaseService):
    """Appends ingest telemetry to the active stream of a channel."""

    async def log_stream_metadata(
        self,
        channel_id: str,
        params: StreamMetadataParams,
    ) -> StreamResponse:
        """
        Append one telemetry snapshot to the channel's active stream.

        The push only matches a stream that has not ended, so a snapshot can
        never land on a stream closed concurrently.

        Raises:
            AppError: E_STREAM_NOT_ACTIVE if the channel has no active stream.
        """
        channel = await self._get_channel(channel_id)
        stream_id = channel.stream_id
        if stream_id is None:
            raise self._not_active(channel_id)

        now = utc_now()
        snapshot = StreamMetadata(
            metadata_id=new_metadata_id(),
            created_at=now,
            **params.model_dump(),
        )

        set_fields: dict[Any, Any] = {Stream.updated_at: now}
        update_ops: list[Any] = [Push({Stream.metadata: snapshot.model_dump()})]
        if snapshot.ingest_viewers is not None:
            set_fields[Stream.count_viewers] = snapshot.ingest_viewers
            update_ops.append(Max({Stream.peak_viewers: snapshot.ingest_viewers}))
        update_ops.append(Set(set_fields))

        result = await Stream.find(
            Stream.stream_id == stream_id,
            Stream.ended_at == None,  # noqa: E711
        ).update(*update_ops)

        if not (result and result.modified_count > 0):
            logger.warning(f"Dropped metadata for {channel_id}: stream {stream_id} has ended")
            raise self._not_active(channel_id)

        stream = await Stream.find_one(Stream.stream_id == stream_id)
        if stream is None:
            raise AppError(
                errcode=AppErrorCode.E_STREAM_NOT_FOUND,
                errmesg=f"Stream not found: {stream_id}",
                status_code=HttpStatusCode.NOT_FOUND,
            )

        logger.debug(f"Logged metadata {snapshot.metadata_id} on stream {stream_id}")
        return stream_to_response(stream)

    @staticmethod
    def _not_active(channel_id: str) -> AppError:
        return AppError(
            errcode=AppErrorCode.E_STREAM_NOT_ACTIVE,
            errmesg=f"Channel {channel_id} has no active stream",
            status_code=HttpStatusCode.CONFLICT,
        )
