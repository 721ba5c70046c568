"""Follow domain service."""

from streamhub.schemas import User

from ._followers import FollowerOperations
from .follow_models import FollowedChannelsResponse, FollowerListResponse, FollowerResponse


class FollowService:
    """Follower registry."""

    def __init__(self):
        self._followers = FollowerOperations()

    async def follow(
        self,
        streamer_id: str,
        user_id: str,
        has_live_notifications: bool = False,
    ) -> FollowerResponse:
        """Follow a streamer.

        Raises AppError if the user already follows the streamer.
        """
        return await self._followers.follow(
            streamer_id=streamer_id,
            user_id=user_id,
            has_live_notifications=has_live_notifications,
        )

    async def unfollow(self, streamer_id: str, user_id: str) -> bool:
        return await self._followers.unfollow(streamer_id=streamer_id, user_id=user_id)

    async def is_following(self, streamer_id: str, user_id: str) -> bool:
        return await self._followers.is_following(streamer_id=streamer_id, user_id=user_id)

    async def list_followed_channels(
        self,
        user_id: str,
        viewer: User | None = None,
    ) -> FollowedChannelsResponse:
        return await self._followers.list_followed_channels(user_id=user_id, viewer=viewer)

    async def list_followers(
        self,
        streamer_username: str | None = None,
        user_username: str | None = None,
    ) -> FollowerListResponse:
        return await self._followers.list_followers(
            streamer_username=streamer_username,
            user_username=user_username,
        )
