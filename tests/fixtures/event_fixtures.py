"""Event bus fixtures for testing."""

from collections.abc import Iterator

import pytest

from streamhub.domain.events import InMemoryEventBus, set_event_bus


@pytest.fixture(autouse=True)
def event_bus() -> Iterator[InMemoryEventBus]:
    """Fresh in-process bus for every test, installed as the process-wide bus."""
    bus = InMemoryEventBus(queue_size=64)
    set_event_bus(bus)
    yield bus
    set_event_bus(None)
