"""Category ODM schema."""

from datetime import datetime
from typing import Any

from beanie import Document, Indexed
from pydantic import field_validator

from .schema_utils import parse_mongo_datetime


class Category(Document):
    """Container for live streaming content.

    ``slug`` and ``tag_name`` are derived from ``name`` (and the parent's name)
    on every write. ``parent_id`` is None for top-level categories.
    """

    category_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    name: str
    slug: Indexed(str)  # type: ignore[valid-type]
    tag_name: str
    parent_id: str | None = None

    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "category"
