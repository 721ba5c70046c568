"""Stream ODM schema."""

from datetime import datetime
from typing import Any

from beanie import Document, Indexed
from pydantic import BaseModel, Field, field_validator

from .schema_utils import parse_mongo_datetime


class StreamMetadata(BaseModel):
    """One ingest telemetry snapshot. Append-only, embedded in its stream."""

    metadata_id: str

    ingest_server: str | None = None
    ingest_viewers: int | None = None
    stream_time_seconds: int | None = None

    source_bitrate: int | None = None
    source_ping: int | None = None

    recv_packets: int | None = None
    lost_packets: int | None = None
    nack_packets: int | None = None

    vendor_name: str | None = None
    vendor_version: str | None = None

    video_codec: str | None = None
    video_height: int | None = None
    video_width: int | None = None
    audio_codec: str | None = None

    created_at: datetime

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)


class Stream(Document):
    """A single broadcast session of a channel, current or historical.

    Active iff ``ended_at`` is None. ``started_at`` is written once at insert.
    """

    stream_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    channel_id: Indexed(str)  # type: ignore[valid-type]

    # Snapshot of the channel at start time
    category_id: str | None = None
    title: str | None = None

    started_at: datetime
    ended_at: datetime | None = None

    metadata: list[StreamMetadata] = Field(default_factory=list)

    # Aggregate counters
    count_viewers: int = 0
    count_chatters: int = 0
    peak_viewers: int = 0
    peak_chatters: int = 0
    avg_viewers: int | None = None
    avg_chatters: int | None = None
    new_subscribers: int = 0
    resub_subscribers: int = 0

    created_at: datetime
    updated_at: datetime

    @field_validator("started_at", "ended_at", "created_at", "updated_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    @property
    def is_active(self) -> bool:
        return self.ended_at is None

    class Settings:
        name = "stream"
        indexes = [
            [("channel_id", 1), ("started_at", -1)],
        ]
