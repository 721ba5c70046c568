"""Follower registry operations."""

from typing import Any

from loguru import logger
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from streamhub.schemas import Follower, User
from streamhub.utils.app_errors import AppError, AppErrorCode, HttpStatusCode
from streamhub.utils.clock import utc_now
from streamhub.utils.idgen import new_follower_id

from .._base import BaseService
from ..channel._channels import ChannelOperations
from .follow_models import FollowedChannelsResponse, FollowerListResponse, FollowerResponse


def follower_to_response(follower: Follower) -> FollowerResponse:
    return FollowerResponse(**follower.model_dump(exclude={"id", "updated_at"}, mode="json"))


class FollowerOperations(BaseService):
    """Who follows which streamer."""

    def __init__(self):
        super().__init__()
        self._channels = ChannelOperations()

    async def follow(
        self,
        streamer_id: str,
        user_id: str,
        has_live_notifications: bool = False,
    ) -> FollowerResponse:
        """
        Make ``user_id`` follow ``streamer_id``.

        Raises:
            AppError: E_ALREADY_FOLLOWING if the pair already exists,
                E_USER_NOT_FOUND if the streamer does not exist.
        """
        await self._get_user(streamer_id)

        if await self.is_following(streamer_id, user_id):
            raise self._already_following(streamer_id, user_id)

        now = utc_now()
        follower = Follower(
            follower_id=new_follower_id(),
            streamer_id=streamer_id,
            user_id=user_id,
            has_live_notifications=has_live_notifications,
            created_at=now,
            updated_at=now,
        )
        try:
            await follower.insert()
        except DuplicateKeyError:
            # Lost a race against an identical follow.
            raise self._already_following(streamer_id, user_id) from None

        logger.info(f"{user_id} follows {streamer_id}")
        return follower_to_response(follower)

    async def unfollow(self, streamer_id: str, user_id: str) -> bool:
        """Remove the follow, if any. Returns whether a record was removed."""
        result = await Follower.find(
            Follower.streamer_id == streamer_id,
            Follower.user_id == user_id,
        ).delete()
        removed = bool(result and result.deleted_count)
        if removed:
            logger.info(f"{user_id} unfollowed {streamer_id}")
        else:
            logger.debug(f"{user_id} did not follow {streamer_id}, nothing to remove")
        return removed

    async def is_following(self, streamer_id: str, user_id: str) -> bool:
        follower = await Follower.find_one(
            Follower.streamer_id == streamer_id,
            Follower.user_id == user_id,
        )
        return follower is not None

    async def list_followed_channels(
        self,
        user_id: str,
        viewer: User | None = None,
    ) -> FollowedChannelsResponse:
        """Channels of every streamer ``user_id`` follows."""
        follows = await Follower.find(Follower.user_id == user_id).to_list()
        channels = await self._channels.list_channels_by_user_ids(
            [f.streamer_id for f in follows],
            viewer=viewer,
        )
        return FollowedChannelsResponse(channels=channels)

    async def list_followers(
        self,
        streamer_username: str | None = None,
        user_username: str | None = None,
    ) -> FollowerListResponse:
        """Follow records, filtered by streamer and/or following user."""
        conditions: list[Any] = []
        if streamer_username:
            streamer = await self._get_user_by_username(streamer_username)
            conditions.append(Follower.streamer_id == streamer.user_id)
        if user_username:
            user = await self._get_user_by_username(user_username)
            conditions.append(Follower.user_id == user.user_id)

        followers = (
            await Follower.find(*conditions)
            .sort([("created_at", ASCENDING), ("_id", ASCENDING)])
            .to_list()
        )
        return FollowerListResponse(followers=[follower_to_response(f) for f in followers])

    @staticmethod
    def _already_following(streamer_id: str, user_id: str) -> AppError:
        return AppError(
            errcode=AppErrorCode.E_ALREADY_FOLLOWING,
            errmesg=f"{user_id} already follows {streamer_id}",
            status_code=HttpStatusCode.BAD_REQUEST,
        )
