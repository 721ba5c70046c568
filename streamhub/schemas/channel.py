"""Channel ODM schema."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from beanie import Document, Indexed
from beanie.odm.fields import ExpressionField
from beanie.odm.operators.update.general import Set
from loguru import logger
from pydantic import Field, field_validator

from streamhub.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .channel_status import ChannelStatus
from .schema_utils import parse_mongo_datetime


class Channel(Document):
    """Channel document model.

    The document is the per-channel serialization point: every live-state
    transition is a compare-and-set on ``version``.
    Invariant: ``status == LIVE`` iff ``stream_id is not None``.
    """

    channel_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    user_id: Indexed(str, unique=True)  # type: ignore[valid-type]

    # Live state
    status: ChannelStatus = ChannelStatus.OFFLINE
    stream_id: str | None = None

    # Channel descriptor fields
    title: str | None = None
    category_id: str | None = None
    language: str | None = None
    thumbnail: str | None = None
    chat_rules_md: str | None = None
    chat_rules_html: str | None = None
    inaccessible: bool = False

    # Access-controlled
    stream_key: Indexed(str, unique=True)  # type: ignore[valid-type]

    moderator_ids: list[str] = Field(default_factory=list)

    created_at: datetime
    updated_at: datetime

    # Version control for optimistic locking
    version: int = Field(default=1)

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    @property
    def is_live(self) -> bool:
        return self.stream_id is not None

    async def compare_and_set(
        self,
        updates: Mapping[ExpressionField, Any],
        *conditions: Any,
    ) -> bool:
        """Apply ``updates`` only if the stored version and ``conditions`` still match.

        On success the version is bumped and the updates are mirrored onto this
        instance. Returns False when another writer got there first; the caller
        decides whether that is a conflict or a failed precondition.
        """
        if Channel.version in updates:
            raise AppError(
                AppErrorCode.E_INVALID_REQUEST,
                "updates must not include Channel.version",
                HttpStatusCode.BAD_REQUEST,
            )

        if self.version is None:
            self.version = 1

        current_version = self.version
        new_version = current_version + 1
        update_fields = dict(updates)
        update_fields[Channel.version] = new_version  # type: ignore[index]

        if current_version == 1:
            version_condition: Any = {"$or": [{"version": 1}, {"version": None}]}
        else:
            version_condition = Channel.version == current_version

        result = await Channel.find(
            Channel.id == self.id,
            version_condition,
            *conditions,
        ).update(Set(update_fields))  # type: ignore[arg-type]

        if not (result and result.modified_count > 0):
            return False

        self.version = new_version
        for field, value in updates.items():
            setattr(self, str(field), value)

        logger.debug(
            f"Channel {self.channel_id} updated (version {current_version} -> {new_version})"
        )
        return True

    class Settings:
        name = "channel"
