"""Moderation domain models."""

from datetime import datetime

from pydantic import BaseModel

from streamhub.schemas.channel_status import ModerationAction


class ModerationLogResponse(BaseModel):
    log_id: str
    channel_id: str
    moderator_id: str
    user_id: str
    action: ModerationAction
    created_at: datetime


class ModerationLogListResponse(BaseModel):
    logs: list[ModerationLogResponse]


class ModeratorListResponse(BaseModel):
    channel_id: str
    moderator_ids: list[str]

