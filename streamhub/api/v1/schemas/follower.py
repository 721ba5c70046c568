from pydantic import BaseModel, Field


class FollowIn(BaseModel):
    streamer_id: str = Field(description="User id of the streamer to follow")
    live_notifications: bool = Field(default=False, description="Notify when the streamer goes live")


class UnfollowIn(BaseModel):
    streamer_id: str


class UnfollowOut(BaseModel):
    removed: bool


class IsFollowingOut(BaseModel):
    following: bool
