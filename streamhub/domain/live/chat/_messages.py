"""Chat message operations."""

from datetime import datetime

from beanie.operators import Set
from loguru import logger
from pymongo import ASCENDING

from streamhub.schemas import ChatMessage
from streamhub.utils.app_errors import AppError, AppErrorCode, HttpStatusCode
from streamhub.utils.clock import utc_now
from streamhub.utils.idgen import new_message_id

from .._base import BaseService
from .chat_models import ChatMessageCreateParams, ChatMessageListResponse, ChatMessageResponse

CHAT_MESSAGE_EVENT = "chat_message"


def message_to_response(message: ChatMessage) -> ChatMessageResponse:
    return ChatMessageResponse(
        **message.model_dump(
            include={"message_id", "channel_id", "user_id", "message", "created_at"},
            mode="json",
        )
    )


class ChatMessageOperations(BaseService):
    """Chat message log of a channel."""

    async def create_chat_message(
        self,
        channel_id: str,
        user_id: str,
        params: ChatMessageCreateParams,
    ) -> ChatMessageResponse:
        """
        Append a message to the channel's chat and notify chat subscribers.

        Raises:
            AppError: E_INVALID_REQUEST for an empty or too long message,
                E_CHANNEL_NOT_FOUND for an unknown channel.
        """
        text = params.message
        if not text or not text.strip():
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg="Message can't be blank",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        max_length = self.app_config.CHAT_MESSAGE_MAX_LENGTH
        if len(text) > max_length:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg=f"Message should be at most {max_length} character(s)",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        await self._get_channel(channel_id)

        now = utc_now()
        message = ChatMessage(
            message_id=new_message_id(),
            channel_id=channel_id,
            user_id=user_id,
            message=text,
            created_at=now,
            updated_at=now,
        )
        await message.insert()
        logger.debug(f"Chat message {message.message_id} from {user_id} in {channel_id}")

        response = message_to_response(message)
        await self.publisher.publish_chat_event(
            channel_id,
            CHAT_MESSAGE_EVENT,
            {"message": response.model_dump(mode="json")},
        )
        return response

    async def list_chat_messages(
        self,
        channel_id: str,
        limit: int | None = None,
    ) -> ChatMessageListResponse:
        """Visible messages of a channel in the order they were sent."""
        await self._get_channel(channel_id)

        query = ChatMessage.find(
            ChatMessage.channel_id == channel_id,
            ChatMessage.deleted_at == None,  # noqa: E711
        ).sort([("created_at", ASCENDING), ("_id", ASCENDING)])
        if limit:
            query = query.limit(limit)

        messages = await query.to_list()
        return ChatMessageListResponse(messages=[message_to_response(m) for m in messages])

    async def delete_user_messages(
        self,
        channel_id: str,
        user_id: str,
        log_id: str,
        now: datetime,
    ) -> int:
        """Tombstone every visible message of ``user_id`` in the channel.

        Returns the number of messages removed.
        """
        result = await ChatMessage.find(
            ChatMessage.channel_id == channel_id,
            ChatMessage.user_id == user_id,
            ChatMessage.deleted_at == None,  # noqa: E711
        ).update(
            Set(
                {
                    ChatMessage.deleted_at: now,
                    ChatMessage.deleted_by_log_id: log_id,
                    ChatMessage.updated_at: now,
                }
            )
        )
        deleted = result.modified_count if result else 0
        logger.debug(f"Deleted {deleted} message(s) of {user_id} in {channel_id} ({log_id})")
        return deleted

    async def restore_user_messages(self, log_id: str) -> int:
        """Undo :meth:`delete_user_messages` for one moderation log entry."""
        result = await ChatMessage.find(ChatMessage.deleted_by_log_id == log_id).update(
            Set(
                {
                    ChatMessage.deleted_at: None,
                    ChatMessage.deleted_by_log_id: None,
                    ChatMessage.updated_at: utc_now(),
                }
            )
        )
        return result.modified_count if result else 0
