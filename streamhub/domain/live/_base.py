"""Base service for live domain operations."""

from streamhub.app_config import get_app_environ_config
from streamhub.domain.events import EventPublisher, event_publisher
from streamhub.schemas import Channel, User
from streamhub.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


class BaseService:
    """Base service with shared lookups and the event publisher."""

    def __init__(self, publisher: EventPublisher | None = None):
        self.publisher = publisher or event_publisher
        self.app_config = get_app_environ_config()

    async def _get_channel(self, channel_id: str) -> Channel:
        """
        Retrieve a channel by channel_id.

        Raises:
            AppError: E_CHANNEL_NOT_FOUND if it does not exist
        """
        channel = await Channel.find_one(Channel.channel_id == channel_id)
        if not channel:
            raise AppError(
                errcode=AppErrorCode.E_CHANNEL_NOT_FOUND,
                errmesg=f"Channel not found: {channel_id}",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return channel

    async def _get_user(self, user_id: str) -> User:
        user = await User.find_one(User.user_id == user_id)
        if not user:
            raise AppError(
                errcode=AppErrorCode.E_USER_NOT_FOUND,
                errmesg=f"User not found: {user_id}",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return user

    async def _get_user_by_username(self, username: str) -> User:
        user = await User.find_one(User.username == username)
        if not user:
            raise AppError(
                errcode=AppErrorCode.E_USER_NOT_FOUND,
                errmesg=f"User not found: {username}",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return user
