"""Who may see or drive what on a channel."""

from streamhub.schemas import Channel, User


def can_view_stream_key(user: User | None) -> bool:
    """Stream keys are readable by admins only."""
    return bool(user and user.is_admin)


def can_manage_stream(channel: Channel, user: User | None) -> bool:
    """Owner or admin (the ingest system) may start, end and feed a stream."""
    if user is None:
        return False
    return user.is_admin or channel.user_id == user.user_id

