"""Stream domain models."""

from datetime import datetime

from pydantic import BaseModel, Field


class StreamMetadataParams(BaseModel):
    """One ingest telemetry snapshot as reported by the ingest server.

    Every field is optional and stored as given.
    """

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


class StreamMetadataResponse(StreamMetadataParams):
    metadata_id: str
    created_at: datetime


class StreamResponse(BaseModel):
    """Stream response model."""

    stream_id: str
    channel_id: str
    category_id: str | None = None
    title: str | None = None
    started_at: datetime
    ended_at: datetime | None = None
    metadata: list[StreamMetadataResponse] = Field(default_factory=list)
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


class StreamListResponse(BaseModel):
    streams: list[StreamResponse]
