"""Tests for subscription queries."""

from datetime import timedelta

import pytest

from streamhub.domain.live.subscription.subscription_domain import SubscriptionService
from streamhub.schemas import Subscription, User
from streamhub.utils.app_errors import AppError, AppErrorCode
from streamhub.utils.clock import utc_now
from streamhub.utils.idgen import new_subscription_id


async def subscribe(streamer: User, user: User, days_ago: int = 0, is_active: bool = True):
    started = utc_now() - timedelta(days=days_ago)
    subscription = Subscription(
        subscription_id=new_subscription_id(),
        streamer_id=streamer.user_id,
        user_id=user.user_id,
        is_active=is_active,
        started_at=started,
        ended_at=None if is_active else started + timedelta(days=30),
        price=499,
        product_name="Tier 1",
        created_at=started,
        updated_at=started,
    )
    await subscription.insert()
    return subscription


@pytest.mark.usefixtures("clear_collections")
class TestListSubscriptions:
    """Tests for list_subscriptions."""

    @pytest.fixture
    def service(self) -> SubscriptionService:
        """Create subscription service instance."""
        return SubscriptionService()

    async def test_list_by_streamer_newest_first(
        self, service: SubscriptionService, streamer: User, viewer: User, admin: User
    ):
        """A streamer's subscribers come back most recent first."""
        older = await subscribe(streamer, viewer, days_ago=10)
        newer = await subscribe(streamer, admin, days_ago=1)

        result = await service.list_subscriptions(streamer_username="streamer")

        assert [s.subscription_id for s in result.subscriptions] == [
            newer.subscription_id,
            older.subscription_id,
        ]
        assert result.subscriptions[0].product_name == "Tier 1"

    async def test_list_by_user(
        self, service: SubscriptionService, streamer: User, viewer: User, admin: User
    ):
        """Filtering by subscriber ignores other users' subscriptions."""
        mine = await subscribe(streamer, viewer)
        await subscribe(streamer, admin)

        result = await service.list_subscriptions(user_username="viewer")

        assert [s.subscription_id for s in result.subscriptions] == [mine.subscription_id]

    async def test_active_only(self, service: SubscriptionService, streamer: User, viewer: User):
        """Lapsed subscriptions can be filtered out."""
        active = await subscribe(streamer, viewer)
        await subscribe(streamer, viewer, days_ago=60, is_active=False)

        everything = await service.list_subscriptions(streamer_username="streamer")
        current = await service.list_subscriptions(streamer_username="streamer", active_only=True)

        assert len(everything.subscriptions) == 2
        assert [s.subscription_id for s in current.subscriptions] == [active.subscription_id]

    async def test_unknown_username(self, service: SubscriptionService, streamer: User):
        with pytest.raises(AppError) as exc_info:
            await service.list_subscriptions(streamer_username="nobody")

        assert exc_info.value.errcode == AppErrorCode.E_USER_NOT_FOUND.value
