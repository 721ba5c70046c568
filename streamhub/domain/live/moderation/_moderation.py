"""Moderation operations."""

from beanie.operators import AddToSet, Inc, Pull, Set
from loguru import logger
from pymongo import DESCENDING

from streamhub.domain.events import EventPublisher
from streamhub.schemas import Channel, ModerationAction, ModerationLog, User
from streamhub.storage.unit_of_work import UnitOfWork
from streamhub.utils.app_errors import AppError, AppErrorCode, HttpStatusCode
from streamhub.utils.clock import utc_now
from streamhub.utils.idgen import new_moderation_log_id

from .._base import BaseService
from ..chat._messages import ChatMessageOperations
from .moderation_models import (
    ModerationLogListResponse,
    ModerationLogResponse,
    ModeratorListResponse,
)
from .moderation_policies import can_manage_moderators, can_moderate

USER_TIMED_OUT_EVENT = "user_timed_out"
MODERATION_DENIED = "User does not have permission to moderate."


def log_to_response(log: ModerationLog) -> ModerationLogResponse:
    return ModerationLogResponse(**log.model_dump(exclude={"id"}, mode="json"))


class ModerationOperations(BaseService):
    """Moderator roster and moderation actions."""

    def __init__(self, publisher: EventPublisher | None = None):
        super().__init__(publisher)
        self._messages = ChatMessageOperations(publisher=self.publisher)

    async def add_moderator(
        self,
        channel_id: str,
        user_id: str,
        actor: User | None = None,
    ) -> ModeratorListResponse:
        """
        Grant moderation rights on a channel. Granting twice is a no-op.

        ``actor`` is checked when given; internal callers pass None.
        """
        channel = await self._get_channel(channel_id)
        self._check_manager(channel, actor)
        await self._get_user(user_id)

        if user_id in channel.moderator_ids:
            logger.debug(f"{user_id} already moderates {channel_id}")
            return ModeratorListResponse(channel_id=channel_id, moderator_ids=channel.moderator_ids)

        await Channel.find(Channel.channel_id == channel_id).update(
            AddToSet({Channel.moderator_ids: user_id}),
            Set({Channel.updated_at: utc_now()}),
            Inc({Channel.version: 1}),
        )
        logger.info(f"Added moderator {user_id} to {channel_id}")
        return await self._moderator_list(channel_id)

    async def remove_moderator(
        self,
        channel_id: str,
        user_id: str,
        actor: User | None = None,
    ) -> ModeratorListResponse:
        """Revoke moderation rights. Revoking a non-moderator is a no-op."""
        channel = await self._get_channel(channel_id)
        self._check_manager(channel, actor)

        if user_id not in channel.moderator_ids:
            logger.debug(f"{user_id} does not moderate {channel_id}")
            return ModeratorListResponse(channel_id=channel_id, moderator_ids=channel.moderator_ids)

        await Channel.find(Channel.channel_id == channel_id).update(
            Pull({Channel.moderator_ids: user_id}),
            Set({Channel.updated_at: utc_now()}),
            Inc({Channel.version: 1}),
        )
        logger.info(f"Removed moderator {user_id} from {channel_id}")
        return await self._moderator_list(channel_id)

    async def timeout_user(
        self,
        channel_id: str,
        moderator_id: str,
        user_id: str,
    ) -> ModerationLogResponse:
        """
        Time a user out: log the action and remove their messages in the channel.

        Both writes succeed together or not at all.

        Raises:
            AppError: E_PERMISSION_DENIED if ``moderator_id`` holds no moderation
                rights on the channel. Nothing is written in that case.
        """
        channel = await self._get_channel(channel_id)
        if not can_moderate(channel, moderator_id):
            logger.warning(f"Rejected timeout of {user_id} in {channel_id} by {moderator_id}")
            raise AppError(
                errcode=AppErrorCode.E_PERMISSION_DENIED,
                errmesg=MODERATION_DENIED,
                status_code=HttpStatusCode.FORBIDDEN,
            )

        now = utc_now()
        log = ModerationLog(
            log_id=new_moderation_log_id(),
            channel_id=channel_id,
            moderator_id=moderator_id,
            user_id=user_id,
            action=ModerationAction.TIMEOUT,
            created_at=now,
        )

        async with UnitOfWork(f"timeout_user[{channel_id}]") as uow:
            await log.insert()
            uow.on_rollback("delete moderation log", log.delete)

            uow.on_rollback(
                "restore messages",
                lambda: self._messages.restore_user_messages(log.log_id),
            )
            deleted = await self._messages.delete_user_messages(
                channel_id, user_id, log.log_id, now
            )

        logger.info(
            f"{moderator_id} timed out {user_id} in {channel_id}, "
            f"{deleted} message(s) removed ({log.log_id})"
        )

        response = log_to_response(log)
        await self.publisher.publish_chat_event(
            channel_id,
            USER_TIMED_OUT_EVENT,
            {"log": response.model_dump(mode="json"), "deleted_messages": deleted},
        )
        return response

    async def list_moderation_logs(
        self,
        channel_id: str,
        limit: int = 50,
    ) -> ModerationLogListResponse:
        """Moderation history of a channel, newest first."""
        await self._get_channel(channel_id)
        logs = (
            await ModerationLog.find(ModerationLog.channel_id == channel_id)
            .sort([("created_at", DESCENDING), ("_id", DESCENDING)])
            .limit(limit)
            .to_list()
        )
        return ModerationLogListResponse(logs=[log_to_response(log) for log in logs])

    async def _moderator_list(self, channel_id: str) -> ModeratorListResponse:
        channel = await self._get_channel(channel_id)
        return ModeratorListResponse(channel_id=channel_id, moderator_ids=channel.moderator_ids)

    @staticmethod
    def _check_manager(channel: Channel, actor: User | None) -> None:
        if actor is not None and not can_manage_moderators(channel, actor):
            logger.warning(f"{actor.user_id} may not manage moderators of {channel.channel_id}")
            raise AppError(
                errcode=AppErrorCode.E_PERMISSION_DENIED,
                errmesg="Only the channel owner can manage moderators",
                status_code=HttpStatusCode.FORBIDDEN,
            )
