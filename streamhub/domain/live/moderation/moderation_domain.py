"""Moderation domain service."""

from streamhub.schemas import User

from ._moderation import ModerationOperations
from .moderation_models import (
    ModerationLogListResponse,
    ModerationLogResponse,
    ModeratorListResponse,
)


class ModerationService:
    """Moderation authority of channels."""

    def __init__(self):
        self._moderation = ModerationOperations()

    async def add_moderator(
        self,
        channel_id: str,
        user_id: str,
        actor: User | None = None,
    ) -> ModeratorListResponse:
        return await self._moderation.add_moderator(
            channel_id=channel_id,
            user_id=user_id,
            actor=actor,
        )

    async def remove_moderator(
        self,
        channel_id: str,
        user_id: str,
        actor: User | None = None,
    ) -> ModeratorListResponse:
        return await self._moderation.remove_moderator(
            channel_id=channel_id,
            user_id=user_id,
            actor=actor,
        )

    async def timeout_user(
        self,
        channel_id: str,
        moderator_id: str,
        user_id: str,
    ) -> ModerationLogResponse:
        """Time a user out of a channel's chat.

        Raises AppError (403) when the moderator lacks rights.
        """
        return await self._moderation.timeout_user(
            channel_id=channel_id,
            moderator_id=moderator_id,
            user_id=user_id,
        )

    async def list_moderation_logs(
        self,
        channel_id: str,
        limit: int = 50,
    ) -> ModerationLogListResponse:
        return await self._moderation.list_moderation_logs(channel_id=channel_id, limit=limit)
