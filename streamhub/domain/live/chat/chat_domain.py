"""Chat domain service."""

from ._messages import ChatMessageOperations
from .chat_models import ChatMessageCreateParams, ChatMessageListResponse, ChatMessageResponse


class ChatService:
    """Chat message log."""

    def __init__(self):
        self._messages = ChatMessageOperations()

    async def create_chat_message(
        self,
        channel_id: str,
        user_id: str,
        params: ChatMessageCreateParams,
    ) -> ChatMessageResponse:
        """Send a chat message.

        Raises AppError for blank or oversized messages.
        """
        return await self._messages.create_chat_message(
            channel_id=channel_id,
            user_id=user_id,
            params=params,
        )

    async def list_chat_messages(
        self,
        channel_id: str,
        limit: int | None = None,
    ) -> ChatMessageListResponse:
        return await self._messages.list_chat_messages(channel_id=channel_id, limit=limit)
