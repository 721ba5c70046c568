"""Stream lifecycle operations: going live and going offline."""

from datetime import datetime

from beanie.operators import Inc, Set
from loguru import logger
from pymongo import DESCENDING

from streamhub.schemas import Channel, ChannelStatus, Stream, User
from streamhub.storage.unit_of_work import UnitOfWork
from streamhub.utils.app_errors import AppError, AppErrorCode, HttpStatusCode
from streamhub.utils.clock import utc_now
from streamhub.utils.idgen import new_stream_id

from .._base import BaseService
from ..channel.channel_policies import can_manage_stream
from .stream_models import StreamListResponse, StreamResponse


def stream_to_response(stream: Stream) -> StreamResponse:
    return StreamResponse(**stream.model_dump(exclude={"id"}, mode="json"))


class StreamLifecycleOperations(BaseService):
    """Start/end transitions. The channel document serializes them per channel."""

    async def start_stream(self, channel_id: str) -> StreamResponse:
        """
        Open a new stream on an offline channel and mark the channel live.

        Raises:
            AppError: E_STREAM_ALREADY_ACTIVE if the channel already has a stream,
                E_CHANNEL_NOT_FOUND if the channel does not exist.
        """
        channel = await self._get_channel(channel_id)
        if channel.stream_id is not None:
            raise self._live_state_error(channel, expected_stream_id=None)

        stream_id = new_stream_id()
        now = utc_now()

        async with UnitOfWork(f"start_stream[{channel_id}]") as uow:
            channel = await self._swap_live_stream(channel, None, stream_id, now)
            uow.on_rollback(
                "release channel",
                lambda: self._restore_live_stream(channel_id, stream_id, None),
            )

            stream = Stream(
                stream_id=stream_id,
                channel_id=channel_id,
                category_id=channel.category_id,
                title=channel.title,
                started_at=now,
                ended_at=None,
                created_at=now,
                updated_at=now,
            )
            await stream.insert()

        logger.info(f"Channel {channel_id} is live with stream {stream_id}")
        await self.publisher.publish_channel(channel)
        return stream_to_response(stream)

    async def end_stream(self, channel_id: str) -> StreamResponse:
        """
        Close the active stream of a channel and mark the channel offline.

        Raises:
            AppError: E_STREAM_NOT_ACTIVE if the channel has no active stream.
        """
        channel = await self._get_channel(channel_id)
        stream_id = channel.stream_id
        if stream_id is None:
            raise AppError(
                errcode=AppErrorCode.E_STREAM_NOT_ACTIVE,
                errmesg=f"Channel {channel_id} has no active stream",
                status_code=HttpStatusCode.CONFLICT,
            )

        stream = await self._get_stream(stream_id)
        # Clock skew must never produce ended_at < started_at.
        now = max(utc_now(), stream.started_at)

        async with UnitOfWork(f"end_stream[{channel_id}]") as uow:
            channel = await self._swap_live_stream(channel, stream_id, None, now)
            uow.on_rollback(
                "reattach stream",
                lambda: self._restore_live_stream(channel_id, None, stream_id),
            )

            result = await Stream.find(
                Stream.stream_id == stream_id,
                Stream.ended_at == None,  # noqa: E711
            ).update(Set({Stream.ended_at: now, Stream.updated_at: now}))

        if result and result.modified_count > 0:
            stream.ended_at = now
            stream.updated_at = now
        else:
            # Channel pointed at a stream that was already closed; it is consistent now.
            logger.warning(f"Stream {stream_id} was already ended, detached it from {channel_id}")
            stream = await self._get_stream(stream_id)

        logger.info(f"Channel {channel_id} is offline, stream {stream_id} ended")
        await self.publisher.publish_channel(channel)
        return stream_to_response(stream)

    async def ensure_can_manage_stream(self, channel_id: str, user: User | None) -> None:
        """Raise unless ``user`` may drive the channel's stream (owner or admin)."""
        channel = await self._get_channel(channel_id)
        if not can_manage_stream(channel, user):
            logger.warning(
                f"{user.user_id if user else 'anonymous'} may not manage stream of {channel_id}"
            )
            raise AppError(
                errcode=AppErrorCode.E_PERMISSION_DENIED,
                errmesg="Unauthorized to manage this channel's stream",
                status_code=HttpStatusCode.FORBIDDEN,
            )

    async def get_stream(self, stream_id: str) -> StreamResponse:
        return stream_to_response(await self._get_stream(stream_id))

    async def list_streams(
        self,
        channel_id: str,
        limit: int = 20,
    ) -> StreamListResponse:
        """Stream history of a channel, newest first."""
        if limit < 1 or limit > 100:
            logger.warning(f"Invalid limit: {limit}")
            limit = 20

        await self._get_channel(channel_id)
        streams = (
            await Stream.find(Stream.channel_id == channel_id)
            .sort([("started_at", DESCENDING)])
            .limit(limit)
            .to_list()
        )
        return StreamListResponse(streams=[stream_to_response(s) for s in streams])

    async def _get_stream(self, stream_id: str) -> Stream:
        stream = await Stream.find_one(Stream.stream_id == stream_id)
        if not stream:
            raise AppError(
                errcode=AppErrorCode.E_STREAM_NOT_FOUND,
                errmesg=f"Stream not found: {stream_id}",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return stream

    async def _swap_live_stream(
        self,
        channel: Channel,
        expected_stream_id: str | None,
        new_stream_id: str | None,
        now: datetime,
    ) -> Channel:
        """Compare-and-set the channel's stream pointer, retrying on version races only.

        Returns the updated channel. A pointer that no longer matches
        ``expected_stream_id`` is a failed precondition, never retried.
        """
        updates = {
            Channel.stream_id: new_stream_id,
            Channel.status: ChannelStatus.LIVE if new_stream_id else ChannelStatus.OFFLINE,
            Channel.updated_at: now,
        }
        max_attempts = self.app_config.CHANNEL_MAX_RETRY_ON_CONFLICTS + 1

        for attempt in range(1, max_attempts + 1):
            if channel.stream_id != expected_stream_id:
                raise self._live_state_error(channel, expected_stream_id)

            if await channel.compare_and_set(updates, Channel.stream_id == expected_stream_id):
                return channel

            logger.debug(
                f"Channel {channel.channel_id} changed concurrently "
                f"(attempt {attempt}/{max_attempts}), reloading"
            )
            channel = await self._get_channel(channel.channel_id)

        if channel.stream_id != expected_stream_id:
            raise self._live_state_error(channel, expected_stream_id)

        logger.warning(f"Gave up updating channel {channel.channel_id} after {max_attempts} tries")
        raise AppError(
            errcode=AppErrorCode.E_CHANNEL_VERSION_CONFLICT,
            errmesg=f"Channel {channel.channel_id} is being modified concurrently",
            status_code=HttpStatusCode.CONFLICT,
        )

    async def _restore_live_stream(
        self,
        channel_id: str,
        current_stream_id: str | None,
        previous_stream_id: str | None,
    ) -> None:
        """Put the channel's stream pointer back, if nobody moved it since."""
        await Channel.find(
            Channel.channel_id == channel_id,
            Channel.stream_id == current_stream_id,
        ).update(
            Set(
                {
                    Channel.stream_id: previous_stream_id,
                    Channel.status: (
                        ChannelStatus.LIVE if previous_stream_id else ChannelStatus.OFFLINE
                    ),
                    Channel.updated_at: utc_now(),
                }
            ),
            Inc({Channel.version: 1}),
        )

    @staticmethod
    def _live_state_error(channel: Channel, expected_stream_id: str | None) -> AppError:
        if expected_stream_id is None:
            return AppError(
                errcode=AppErrorCode.E_STREAM_ALREADY_ACTIVE,
                errmesg=f"Channel {channel.channel_id} already has an active stream",
                status_code=HttpStatusCode.CONFLICT,
            )
        if channel.stream_id is None:
            return AppError(
                errcode=AppErrorCode.E_STREAM_NOT_ACTIVE,
                errmesg=f"Channel {channel.channel_id} has no active stream",
                status_code=HttpStatusCode.CONFLICT,
            )
        return AppError(
            errcode=AppErrorCode.E_CHANNEL_VERSION_CONFLICT,
            errmesg=f"Channel {channel.channel_id} switched to stream {channel.stream_id}",
            status_code=HttpStatusCode.CONFLICT,
        )
