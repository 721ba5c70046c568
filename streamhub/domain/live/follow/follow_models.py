"""Follow domain models."""

from datetime import datetime

from pydantic import BaseModel

from ..channel.channel_models import ChannelResponse


class FollowParams(BaseModel):
    streamer_id: str
    has_live_notifications: bool = False


class FollowerResponse(BaseModel):
    follower_id: str
    streamer_id: str
    user_id: str
    has_live_notifications: bool
    created_at: datetime


class FollowerListResponse(BaseModel):
    followers: list[FollowerResponse]


class FollowedChannelsResponse(BaseModel):
    channels: list[ChannelResponse]
