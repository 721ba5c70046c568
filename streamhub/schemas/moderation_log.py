"""ModerationLog ODM schema."""

from datetime import datetime
from typing import Any

from beanie import Document, Indexed
from pydantic import field_validator

from .channel_status import ModerationAction
from .schema_utils import parse_mongo_datetime


class ModerationLog(Document):
    """Record of one moderation action. Written once, never updated."""

    log_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    channel_id: Indexed(str)  # type: ignore[valid-type]
    moderator_id: str
    user_id: str
    action: ModerationAction

    created_at: datetime

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "moderation_log"
