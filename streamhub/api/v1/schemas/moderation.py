from pydantic import BaseModel, Field


class ModeratorIn(BaseModel):
    channel_id: str
    user_id: str = Field(description="User to grant or revoke moderation rights")


class TimeoutUserIn(BaseModel):
    channel_id: str
    user_id: str = Field(description="User to time out")
