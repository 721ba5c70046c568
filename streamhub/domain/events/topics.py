"""Subscription topic names.

``streams:<kind>`` carries every event of a kind; ``streams:<kind>:<channel_id>``
carries only one channel's events. Publishers write to both.
"""

from enum import Enum

from streamhub.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

TOPIC_PREFIX = "streams"


class TopicKind(str, Enum):
    CHANNEL = "channel"
    CHAT = "chat"

    def __str__(self) -> str:
        return self.value


def get_subscribe_topic(kind: TopicKind | str, channel_id: str | None = None) -> str:
    """Return the topic for ``kind``, scoped to ``channel_id`` when given.

    >>> get_subscribe_topic(TopicKind.CHAT, "ch_1")
    'streams:chat:ch_1'
    """
    try:
        kind = TopicKind(kind)
    except ValueError:
        raise AppError(
            errcode=AppErrorCode.E_INVALID_REQUEST,
            errmesg=f"Unknown topic kind: {kind}",
            status_code=HttpStatusCode.BAD_REQUEST,
        ) from None

    if channel_id:
        return f"{TOPIC_PREFIX}:{kind.value}:{channel_id}"
    return f"{TOPIC_PREFIX}:{kind.value}"


__all__ = ["TOPIC_PREFIX", "TopicKind", "get_subscribe_topic"]
