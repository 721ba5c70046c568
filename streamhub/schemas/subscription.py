"""Subscription ODM schema."""

from datetime import datetime
from typing import Any

from beanie import Document, Indexed
from pydantic import field_validator

from .schema_utils import parse_mongo_datetime


class Subscription(Document):
    """A paid subscription of a user to a streamer. Billing lives elsewhere."""

    subscription_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    streamer_id: Indexed(str)  # type: ignore[valid-type]
    user_id: Indexed(str)  # type: ignore[valid-type]

    is_active: bool = True
    started_at: datetime
    ended_at: datetime | None = None
    price: int | None = None
    product_name: str | None = None

    created_at: datetime
    updated_at: datetime

    @field_validator("started_at", "ended_at", "created_at", "updated_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "subscription"
