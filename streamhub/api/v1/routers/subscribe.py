"""WebSocket subscriptions to channel and chat events.

On connect the server sends ``{"type": "subscribed", "topic": ...}``, then one
``{"topic": ..., "data": ...}`` frame per event until the client disconnects.
"""

from collections.abc import AsyncIterator
from typing import Any

import anyio
from fastapi import APIRouter, Depends, Query, WebSocket
from loguru import logger
from starlette.websockets import WebSocketDisconnect

from streamhub.domain.events import EventBus, TopicKind, get_event_bus, get_subscribe_topic

router = APIRouter(prefix="/subscribe")


@router.websocket("/channel")
async def subscribe_channel(
    websocket: WebSocket,
    id: str | None = Query(None, description="Channel to follow; all channels if omitted"),
    bus: EventBus = Depends(get_event_bus),
):
    await stream_topic(websocket, bus, get_subscribe_topic(TopicKind.CHANNEL, id))


@router.websocket("/chat")
async def subscribe_chat(
    websocket: WebSocket,
    channel_id: str | None = Query(None, description="Channel whose chat to follow"),
    bus: EventBus = Depends(get_event_bus),
):
    await stream_topic(websocket, bus, get_subscribe_topic(TopicKind.CHAT, channel_id))


async def stream_topic(websocket: WebSocket, bus: EventBus, topic: str) -> None:
    await websocket.accept()

    async with bus.subscribe(topic) as events:
        await websocket.send_json({"type": "subscribed", "topic": topic})

        try:
            async with anyio.create_task_group() as tg:

                async def run_until_first_done(func, *args) -> None:
                    await func(*args)
                    tg.cancel_scope.cancel()

                tg.start_soon(run_until_first_done, _forward_events, websocket, events)
                tg.start_soon(run_until_first_done, _wait_disconnect, websocket)
        except* WebSocketDisconnect:
            logger.debug(f"Subscriber to {topic} went away while sending")

    logger.debug(f"Subscription to {topic} closed")


async def _forward_events(websocket: WebSocket, events: AsyncIterator[dict[str, Any]]) -> None:
    async for event in events:
        await websocket.send_json(event)


async def _wait_disconnect(websocket: WebSocket) -> None:
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return
