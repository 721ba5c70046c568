"""Channel domain service."""

from streamhub.schemas import ChannelStatus, User

from ._channels import ChannelOperations
from .channel_models import ChannelCreateParams, ChannelListResponse, ChannelResponse


class ChannelService:
    """Channel queries and creation."""

    def __init__(self):
        self._channels = ChannelOperations()

    async def create_channel(
        self,
        params: ChannelCreateParams,
        viewer: User | None = None,
    ) -> ChannelResponse:
        """Create the channel of a streamer.

        Raises AppError if the user is unknown or already has a channel.
        """
        return await self._channels.create_channel(params=params, viewer=viewer)

    async def get_channel(
        self,
        channel_id: str,
        viewer: User | None = None,
    ) -> ChannelResponse:
        """Get a single channel by ID.

        Raises AppError if channel not found.
        """
        return await self._channels.get_channel(channel_id=channel_id, viewer=viewer)

    async def find_channel(
        self,
        channel_id: str | None = None,
        username: str | None = None,
        stream_key: str | None = None,
        viewer: User | None = None,
    ) -> ChannelResponse:
        """Find a channel by id, streamer username or stream key."""
        return await self._channels.find_channel(
            channel_id=channel_id,
            username=username,
            stream_key=stream_key,
            viewer=viewer,
        )

    async def list_channels(
        self,
        status: ChannelStatus | None = None,
        category_id: str | None = None,
        viewer: User | None = None,
    ) -> ChannelListResponse:
        """Return accessible channels with optional filters."""
        return await self._channels.list_channels(
            status=status,
            category_id=category_id,
            viewer=viewer,
        )
