"""Channel operations."""

import secrets

from beanie.operators import In
from loguru import logger
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from streamhub.schemas import Channel, ChannelStatus, User
from streamhub.utils.app_errors import AppError, AppErrorCode, HttpStatusCode
from streamhub.utils.clock import utc_now
from streamhub.utils.idgen import new_channel_id

from .._base import BaseService
from .channel_models import (
    ChannelCreateParams,
    ChannelListResponse,
    ChannelResponse,
    FieldError,
)
from .channel_policies import can_view_stream_key
from .chat_rules import render_chat_rules

STREAM_KEY_DENIED = "Unauthorized to access streamKey field."


class ChannelOperations(BaseService):
    """Channel-related operations."""

    def to_response(self, channel: Channel, viewer: User | None) -> ChannelResponse:
        """Serialize a channel for ``viewer``, withholding the stream key if needed."""
        data = channel.model_dump(exclude={"id", "version"}, mode="json")
        errors: list[FieldError] = []
        if not can_view_stream_key(viewer):
            data["stream_key"] = None
            errors.append(FieldError(field="stream_key", errmesg=STREAM_KEY_DENIED))
        return ChannelResponse(**data, errors=errors)

    async def create_channel(
        self,
        params: ChannelCreateParams,
        viewer: User | None = None,
    ) -> ChannelResponse:
        """
        Create the channel of a streamer, with a fresh random stream key.

        Raises AppError if the user is unknown or already owns a channel.
        """
        await self._get_user(params.user_id)

        if await Channel.find_one(Channel.user_id == params.user_id):
            raise AppError(
                errcode=AppErrorCode.E_CHANNEL_EXISTS,
                errmesg=f"User {params.user_id} already has a channel",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        now = utc_now()
        channel = Channel(
            channel_id=new_channel_id(),
            user_id=params.user_id,
            status=ChannelStatus.OFFLINE,
            title=params.title,
            category_id=params.category_id,
            language=params.language,
            thumbnail=params.thumbnail,
            chat_rules_md=params.chat_rules_md,
            chat_rules_html=render_chat_rules(params.chat_rules_md),
            stream_key=secrets.token_urlsafe(self.app_config.STREAM_KEY_BYTES),
            created_at=now,
            updated_at=now,
        )

        try:
            await channel.insert()
        except DuplicateKeyError:
            raise AppError(
                errcode=AppErrorCode.E_CHANNEL_EXISTS,
                errmesg=f"User {params.user_id} already has a channel",
                status_code=HttpStatusCode.BAD_REQUEST,
            ) from None

        logger.info(f"Created channel {channel.channel_id} for user {params.user_id}")
        return self.to_response(channel, viewer)

    async def get_channel(
        self,
        channel_id: str,
        viewer: User | None = None,
    ) -> ChannelResponse:
        """
        Get a single channel by ID.

        Raises AppError if channel not found.
        """
        channel = await self._get_channel(channel_id)
        return self.to_response(channel, viewer)

    async def find_channel(
        self,
        channel_id: str | None = None,
        username: str | None = None,
        stream_key: str | None = None,
        viewer: User | None = None,
    ) -> ChannelResponse:
        """
        Find a channel by exactly one of id, streamer username or stream key.

        Looking up by stream key is reserved to callers that may read keys.
        """
        given = [x for x in (channel_id, username, stream_key) if x]
        if len(given) != 1:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg="Provide exactly one of channel_id, username or stream_key",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        if channel_id:
            return await self.get_channel(channel_id, viewer)

        if username:
            user = await self._get_user_by_username(username)
            channel = await Channel.find_one(Channel.user_id == user.user_id)
        else:
            if not can_view_stream_key(viewer):
                raise AppError(
                    errcode=AppErrorCode.E_PERMISSION_DENIED,
                    errmesg=STREAM_KEY_DENIED,
                    status_code=HttpStatusCode.FORBIDDEN,
                )
            channel = await Channel.find_one(Channel.stream_key == stream_key)

        if not channel:
            raise AppError(
                errcode=AppErrorCode.E_CHANNEL_NOT_FOUND,
                errmesg="Channel not found",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return self.to_response(channel, viewer)

    async def list_channels(
        self,
        status: ChannelStatus | None = None,
        category_id: str | None = None,
        viewer: User | None = None,
    ) -> ChannelListResponse:
        """Return channels, optionally filtered by status and category, oldest first."""
        conditions = [Channel.inaccessible == False]  # noqa: E712
        if status:
            conditions.append(Channel.status == status)
        if category_id:
            conditions.append(Channel.category_id == category_id)

        channels = await Channel.find(*conditions).sort([("created_at", ASCENDING)]).to_list()
        return ChannelListResponse(channels=[self.to_response(ch, viewer) for ch in channels])

    async def list_channels_by_user_ids(
        self,
        user_ids: list[str],
        viewer: User | None = None,
    ) -> list[ChannelResponse]:
        """Channels owned by any of ``user_ids``."""
        if not user_ids:
            return []

        channels = await Channel.find(In(Channel.user_id, user_ids)).to_list()
        return [self.to_response(ch, viewer) for ch in channels]
