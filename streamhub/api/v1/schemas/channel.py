from datetime import datetime

from pydantic import BaseModel, Field

from streamhub.domain.live.channel.channel_models import FieldError
from streamhub.schemas.channel_status import ChannelStatus


class CreateChannelIn(BaseModel):
    title: str | None = Field(default=None, description="Title of the channel")
    category_id: str | None = Field(default=None, description="Category of the channel")
    language: str | None = Field(default=None, description="Language code, e.g. en")
    thumbnail: str | None = Field(default=None, description="URL of the thumbnail image")
    chat_rules_md: str | None = Field(default=None, description="Chat rules in Markdown")


class ChannelOut(BaseModel):
    channel_id: str
    user_id: str
    status: ChannelStatus
    stream_id: str | None = Field(default=None, description="Active stream, if live")
    title: str | None = None
    category_id: str | None = None
    language: str | None = None
    thumbnail: str | None = None
    chat_rules_md: str | None = None
    chat_rules_html: str | None = None
    stream_key: str | None = Field(
        default=None, description="Only returned to privileged callers, see errors"
    )
    moderator_ids: list[str] = Field(default_factory=list)
    created_at: datetime
    errors: list[FieldError] = Field(
        default_factory=list, description="Fields withheld from this caller"
    )


class ListChannelsOut(BaseModel):
    channels: list[ChannelOut]
