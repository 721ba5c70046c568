"""User ODM schema."""

from datetime import datetime
from typing import Any

from beanie import Document, Indexed
from pydantic import field_validator

from .schema_utils import parse_mongo_datetime


class User(Document):
    """Platform account. Owns at most one channel."""

    user_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    username: Indexed(str, unique=True)  # type: ignore[valid-type]
    displayname: str | None = None
    is_admin: bool = False

    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "user"
