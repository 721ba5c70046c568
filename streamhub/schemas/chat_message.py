"""ChatMessage ODM schema."""

from datetime import datetime
from typing import Any

from beanie import Document, Indexed
from pydantic import field_validator

from .schema_utils import parse_mongo_datetime


class ChatMessage(Document):
    """A chat message sent to a channel by a user.

    Never edited. Moderation tombstones it with ``deleted_at`` and the id of the
    moderation log entry that removed it.
    """

    message_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    channel_id: str
    user_id: str
    message: str

    deleted_at: datetime | None = None
    deleted_by_log_id: str | None = None

    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at", "deleted_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "chat_message"
        indexes = [
            [("channel_id", 1), ("created_at", 1)],
            [("channel_id", 1), ("user_id", 1)],
        ]
