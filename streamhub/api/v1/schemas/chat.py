from pydantic import BaseModel, Field


class CreateChatMessageIn(BaseModel):
    channel_id: str = Field(description="Channel to send the message to")
    message: str = Field(description="Message text")
