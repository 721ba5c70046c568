"""Channel domain models."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from streamhub.schemas.channel_status import ChannelStatus


class FieldError(BaseModel):
    """A field withheld from a response, with the reason."""

    field: str
    errmesg: str


class ChannelResponse(BaseModel):
    """Channel response model.

    ``stream_key`` is only populated for callers allowed to see it; otherwise
    it is None and ``errors`` explains why.
    """

    channel_id: str
    user_id: str
    status: ChannelStatus
    stream_id: str | None = None
    title: str | None = None
    category_id: str | None = None
    language: str | None = None
    thumbnail: str | None = None
    chat_rules_md: str | None = None
    chat_rules_html: str | None = None
    inaccessible: bool = False
    stream_key: str | None = None
    moderator_ids: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    errors: list[FieldError] = Field(default_factory=list)


class ChannelListResponse(BaseModel):
    channels: list[ChannelResponse]


class ChannelCreateParams(BaseModel):
    """Parameters for creating a channel."""

    user_id: str
    title: str | None = None
    category_id: str | None = None
    language: str | None = None
    thumbnail: str | None = None
    chat_rules_md: str | None = None

    @field_validator("title", "language")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip() or None
