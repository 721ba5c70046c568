"""Common enums used across schemas."""

from enum import Enum


class ChannelStatus(str, Enum):
    """Channel broadcast status.

    LIVE while the channel points at an active stream, OFFLINE otherwise.
    """

    LIVE = "live"
    OFFLINE = "offline"

    def __str__(self) -> str:
        return self.value


class ModerationAction(str, Enum):
    TIMEOUT = "timeout"

    def __str__(self) -> str:
        return self.value


__all__ = ["ChannelStatus", "ModerationAction"]
