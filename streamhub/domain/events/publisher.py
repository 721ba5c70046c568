"""Domain-side publishing of channel and chat notifications."""

from typing import Any

from loguru import logger
from redis.exceptions import RedisError

from streamhub.schemas import Channel

from .bus import EventBus, get_event_bus
from .topics import TopicKind, get_subscribe_topic

# Never leaves the API through the fan-out.
_PRIVATE_CHANNEL_FIELDS = {"id", "stream_key", "moderator_ids", "version"}


def channel_event_payload(channel: Channel) -> dict[str, Any]:
    return channel.model_dump(exclude=_PRIVATE_CHANNEL_FIELDS, mode="json")


class EventPublisher:
    """Publishes every event to the global topic and to the channel's topic.

    Publishing happens after the write is durable; a bus failure is logged
    and does not fail the mutation.
    """

    def __init__(self, bus: EventBus | None = None):
        self._bus = bus

    @property
    def bus(self) -> EventBus:
        return self._bus or get_event_bus()

    async def publish_channel(self, channel: Channel) -> None:
        payload = {"type": "channel", "channel": channel_event_payload(channel)}
        await self._publish_both(TopicKind.CHANNEL, channel.channel_id, payload)

    async def publish_chat_event(
        self,
        channel_id: str,
        event: str,
        data: dict[str, Any],
    ) -> None:
        payload = {"type": event, **data}
        await self._publish_both(TopicKind.CHAT, channel_id, payload)

    async def _publish_both(
        self,
        kind: TopicKind,
        channel_id: str,
        payload: dict[str, Any],
    ) -> None:
        for topic in (get_subscribe_topic(kind), get_subscribe_topic(kind, channel_id)):
            try:
                await self.bus.publish(topic, payload)
            except (RedisError, ConnectionError, OSError) as e:
                logger.warning(f"Failed to publish {payload.get('type')} on {topic}: {e}")


event_publisher = EventPublisher()


__all__ = ["EventPublisher", "channel_event_payload", "event_publisher"]
