"""Subscription domain service (read side; billing writes these records)."""

from typing import Any

from pymongo import DESCENDING

from streamhub.schemas import Subscription

from .._base import BaseService
from .subscription_models import SubscriptionListResponse, SubscriptionResponse


class SubscriptionService(BaseService):
    async def list_subscriptions(
        self,
        streamer_username: str | None = None,
        user_username: str | None = None,
        active_only: bool = False,
    ) -> SubscriptionListResponse:
        """Subscriptions filtered by streamer and/or subscriber, newest first."""
        conditions: list[Any] = []
        if streamer_username:
            streamer = await self._get_user_by_username(streamer_username)
            conditions.append(Subscription.streamer_id == streamer.user_id)
        if user_username:
            user = await self._get_user_by_username(user_username)
            conditions.append(Subscription.user_id == user.user_id)
        if active_only:
            conditions.append(Subscription.is_active == True)  # noqa: E712

        subscriptions = (
            await Subscription.find(*conditions).sort([("started_at", DESCENDING)]).to_list()
        )
        return SubscriptionListResponse(
            subscriptions=[
                SubscriptionResponse(**s.model_dump(exclude={"id"}, mode="json"))
                for s in subscriptions
            ]
        )
