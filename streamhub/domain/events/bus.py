"""Publish/subscribe backends for live notifications.

Delivery is best effort: a subscriber only sees events published while it is
subscribed, in publish order. Events are plain dicts::

    {"topic": "streams:chat:ch_...", "data": {...}}
"""

import asyncio
from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import orjson
from loguru import logger
from redis.asyncio import Redis

from streamhub.app_config import get_app_environ_config
from streamhub.storage.redis import get_redis_client

Event = dict[str, Any]


class EventBus(ABC):
    """Topic based fan-out."""

    @abstractmethod
    async def publish(self, topic: str, payload: dict[str, Any]) -> int:
        """Deliver ``payload`` to the current subscribers of ``topic``.

        Returns the number of subscribers reached.
        """

    @abstractmethod
    def subscribe(self, *topics: str) -> Any:
        """Async context manager yielding an async iterator of events."""

    async def close(self) -> None:  # noqa: B027
        pass


class _QueueSubscriber:
    def __init__(self, topics: tuple[str, ...], maxsize: int):
        self.topics = topics
        self.queue: asyncio.Queue[Event] = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0

    def __aiter__(self) -> "_QueueSubscriber":
        return self

    async def __anext__(self) -> Event:
        return await self.queue.get()


class InMemoryEventBus(EventBus):
    """Single process bus: one bounded asyncio queue per subscriber.

    A subscriber whose queue is full loses the event; publishers never block.
    """

    def __init__(self, queue_size: int = 256):
        self._queue_size = queue_size
        self._subscribers: dict[str, set[_QueueSubscriber]] = defaultdict(set)

    async def publish(self, topic: str, payload: dict[str, Any]) -> int:
        event: Event = {"topic": topic, "data": payload}
        delivered = 0
        for subscriber in list(self._subscribers.get(topic, ())):
            try:
                subscriber.queue.put_nowait(event)
                delivered += 1
            except asyncio.QueueFull:
                subscriber.dropped += 1
                logger.warning(
                    f"Subscriber queue full on {topic}, dropped event "
                    f"({subscriber.dropped} dropped so far)"
                )
        return delivered

    @asynccontextmanager
    async def subscribe(self, *topics: str) -> AsyncIterator[_QueueSubscriber]:
        subscriber = _QueueSubscriber(topics, self._queue_size)
        for topic in topics:
            self._subscribers[topic].add(subscriber)
        logger.debug(f"Subscribed to {', '.join(topics)}")
        try:
            yield subscriber
        finally:
            for topic in topics:
                subscribers = self._subscribers.get(topic)
                if subscribers is None:
                    continue
                subscribers.discard(subscriber)
                if not subscribers:
                    del self._subscribers[topic]
            logger.debug(f"Unsubscribed from {', '.join(topics)}")

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, ()))


class RedisEventBus(EventBus):
    """Redis pub/sub bus, for fan-out across API nodes."""

    def __init__(self, redis: Redis):
        self._redis = redis

    async def publish(self, topic: str, payload: dict[str, Any]) -> int:
        return await self._redis.publish(topic, orjson.dumps(payload))

    @asynccontextmanager
    async def subscribe(self, *topics: str) -> AsyncIterator[AsyncIterator[Event]]:
        pubsub = self._redis.pubsub()
        await pubsub.subscribe(*topics)
        logger.debug(f"Redis pubsub subscribed to {', '.join(topics)}")
        try:
            yield self._iter_messages(pubsub)
        finally:
            await pubsub.unsubscribe(*topics)
            await pubsub.aclose()
            logger.debug(f"Redis pubsub unsubscribed from {', '.join(topics)}")

    @staticmethod
    async def _iter_messages(pubsub: Any) -> AsyncIterator[Event]:
        async for message in pubsub.listen():
            if message.get("type") != "message":
                continue

            channel = message.get("channel")
            if isinstance(channel, bytes):
                channel = channel.decode()

            try:
                data = orjson.loads(message.get("data"))
            except (orjson.JSONDecodeError, TypeError):
                logger.warning(f"Non-JSON message on {channel}, skipping")
                continue

            yield {"topic": channel, "data": data}


_event_bus: EventBus | None = None


def init_event_bus(backend: str | None = None) -> EventBus:
    """Create the process-wide bus from configuration."""
    global _event_bus

    app_config = get_app_environ_config()
    backend = (backend or app_config.EVENT_BUS_BACKEND).lower()

    if backend == "redis":
        _event_bus = RedisEventBus(get_redis_client(app_config.REDIS_LABEL))
    elif backend == "memory":
        _event_bus = InMemoryEventBus(queue_size=app_config.EVENT_QUEUE_SIZE)
    else:
        raise ValueError(f"Unknown EVENT_BUS_BACKEND: {backend}")

    logger.info(f"Event bus initialized: {type(_event_bus).__name__}")
    return _event_bus


def get_event_bus() -> EventBus:
    if _event_bus is None:
        return init_event_bus()
    return _event_bus


def set_event_bus(bus: EventBus | None) -> None:
    global _event_bus
    _event_bus = bus


async def close_event_bus() -> None:
    global _event_bus
    if _event_bus is not None:
        await _event_bus.close()
        _event_bus = None
