"""Chat domain models."""

from datetime import datetime

from pydantic import BaseModel


class ChatMessageCreateParams(BaseModel):
    message: str


class ChatMessageResponse(BaseModel):
    """Chat message response model."""

    message_id: str
    channel_id: str
    user_id: str
    message: str
    created_at: datetime


class ChatMessageListResponse(BaseModel):
    messages: list[ChatMessageResponse]
