"""Follower ODM schema."""

from datetime import datetime
from typing import Any

from beanie import Document, Indexed
from pydantic import field_validator
from pymongo import IndexModel

from .schema_utils import parse_mongo_datetime


class Follower(Document):
    """A user following a streamer for live notifications."""

    follower_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    streamer_id: str
    user_id: Indexed(str)  # type: ignore[valid-type]
    has_live_notifications: bool = False

    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "follower"
        indexes = [
            IndexModel(
                [("streamer_id", 1), ("user_id", 1)],
                unique=True,
                name="streamer_user_unique",
            ),
        ]
