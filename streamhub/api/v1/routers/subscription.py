from fastapi import APIRouter, Depends, Query

from streamhub.api.v1.schemas.base import ApiOut
from streamhub.domain.live.subscription.subscription_domain import SubscriptionService
from streamhub.domain.live.subscription.subscription_models import SubscriptionListResponse

router = APIRouter(prefix="/subscription")

# Singleton instance
_subscription_service = SubscriptionService()


def get_subscription_service() -> SubscriptionService:
    """Get the singleton SubscriptionService instance."""
    return _subscription_service


@router.get("/list_subscriptions")
async def list_subscriptions(
    streamer_username: str | None = Query(None, description="Subscribed-to streamer"),
    user_username: str | None = Query(None, description="Subscriber"),
    active_only: bool = Query(False, description="Only active subscriptions"),
    service: SubscriptionService = Depends(get_subscription_service),
) -> ApiOut[SubscriptionListResponse]:
    result = await service.list_subscriptions(
        streamer_username=streamer_username,
        user_username=user_username,
        active_only=active_only,
    )
    return ApiOut[SubscriptionListResponse](results=result)
