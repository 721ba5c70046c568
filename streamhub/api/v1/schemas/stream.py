from pydantic import BaseModel, Field

from streamhub.domain.live.stream.stream_models import StreamMetadataParams


class StreamChannelIn(BaseModel):
    channel_id: str = Field(description="Channel whose stream to start or end")


class LogStreamMetadataIn(BaseModel):
    channel_id: str = Field(description="Channel whose active stream receives the snapshot")
    metadata: StreamMetadataParams = Field(description="Ingest telemetry snapshot")
