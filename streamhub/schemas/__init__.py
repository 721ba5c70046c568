"""Beanie ODM schemas for MongoDB collections."""

from .category import Category
from .channel import Channel
from .channel_status import ChannelStatus, ModerationAction
from .chat_message import ChatMessage
from .follower import Follower
from .init import DOCUMENT_MODELS, init_beanie_odm
from .moderation_log import ModerationLog
from .stream import Stream, StreamMetadata
from .subscription import Subscription
from .user import User

__all__ = [
    "DOCUMENT_MODELS",
    "Category",
    "Channel",
    "ChannelStatus",
    "ChatMessage",
    "Follower",
    "ModerationAction",
    "ModerationLog",
    "Stream",
    "StreamMetadata",
    "Subscription",
    "User",
    "init_beanie_odm",
]
