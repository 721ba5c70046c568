"""
Event fan-out for live updates.

Includes:
- topics: Topic naming shared by publishers and subscribers.
- bus: In-process and Redis pub/sub backends.
- publisher: Channel and chat notifications published by the domain services.
"""

from .bus import (
    EventBus,
    InMemoryEventBus,
    RedisEventBus,
    close_event_bus,
    get_event_bus,
    init_event_bus,
    set_event_bus,
)
from .publisher import EventPublisher, event_publisher
from .topics import TopicKind, get_subscribe_topic

__all__ = [
    "EventBus",
    "EventPublisher",
    "InMemoryEventBus",
    "RedisEventBus",
    "TopicKind",
    "close_event_bus",
    "event_publisher",
    "get_event_bus",
    "get_subscribe_topic",
    "init_event_bus",
    "set_event_bus",
]
