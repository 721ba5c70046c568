"""Subscription domain models."""

from datetime import datetime

from pydantic import BaseModel


class SubscriptionResponse(BaseModel):
    subscription_id: str
    streamer_id: str
    user_id: str
    is_active: bool
    started_at: datetime
    ended_at: datetime | None = None
    price: int | None = None
    product_name: str | None = None


class SubscriptionListResponse(BaseModel):
    subscriptions: list[SubscriptionResponse]
