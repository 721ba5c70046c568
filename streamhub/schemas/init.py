"""Beanie initialization for ODM."""

from typing import Any

from beanie import init_beanie

from streamhub.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .category import Category
from .channel import Channel
from .chat_message import ChatMessage
from .follower import Follower
from .moderation_log import ModerationLog
from .stream import Stream
from .subscription import Subscription
from .user import User

DOCUMENT_MODELS = [
    User,
    Channel,
    Stream,
    ChatMessage,
    ModerationLog,
    Follower,
    Category,
    Subscription,
]


async def init_beanie_odm(
    mongo_client_or_db: Any,
    database_name: str | None = None,
) -> None:
    """
    Initialize Beanie ODM with all document models.

    Args:
        mongo_client_or_db: Motor client or database instance
        database_name: Database name (required when passing a client)
    """
    if database_name:
        database = mongo_client_or_db[database_name]
    elif hasattr(mongo_client_or_db, "list_collection_names"):
        database = mongo_client_or_db
    else:
        raise AppError(
            errcode=AppErrorCode.E_INVALID_REQUEST,
            errmesg="database_name required when passing a Mongo client",
            status_code=HttpStatusCode.BAD_REQUEST,
        )

    await init_beanie(
        database=database,
        document_models=DOCUMENT_MODELS,  # type: ignore[arg-type]
    )


__all__ = ["DOCUMENT_MODELS", "init_beanie_odm"]
