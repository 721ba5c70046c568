from fastapi import APIRouter, Depends, Query

from streamhub.api.v1.dependency import CurrentUser
from streamhub.api.v1.schemas.base import ApiOut
from streamhub.api.v1.schemas.chat import CreateChatMessageIn
from streamhub.domain.live.chat.chat_domain import ChatService
from streamhub.domain.live.chat.chat_models import (
    ChatMessageCreateParams,
    ChatMessageListResponse,
    ChatMessageResponse,
)

router = APIRouter(prefix="/chat")

# Singleton instance
_chat_service = ChatService()


def get_chat_service() -> ChatService:
    """Get the singleton ChatService instance."""
    return _chat_service


@router.post("/create_message")
async def create_message(
    payload: CreateChatMessageIn,
    user: CurrentUser,
    service: ChatService = Depends(get_chat_service),
) -> ApiOut[ChatMessageResponse]:
    """Send a chat message as the authenticated user."""
    result = await service.create_chat_message(
        channel_id=payload.channel_id,
        user_id=user.user_id,
        params=ChatMessageCreateParams(message=payload.message),
    )
    return ApiOut[ChatMessageResponse](results=result)


@router.get("/list_messages")
async def list_messages(
    channel_id: str = Query(..., description="Channel identifier"),
    limit: int | None = Query(None, ge=1, le=1000, description="Maximum number of messages"),
    service: ChatService = Depends(get_chat_service),
) -> ApiOut[ChatMessageListResponse]:
    """Visible chat messages of a channel, oldest first."""
    result = await service.list_chat_messages(channel_id=channel_id, limit=limit)
    return ApiOut[ChatMessageListResponse](results=result)
