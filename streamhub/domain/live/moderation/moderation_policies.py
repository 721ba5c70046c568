"""Moderation rights."""

from streamhub.schemas import Channel, User


def can_moderate(channel: Channel, user_id: str | None) -> bool:
    """Owner or listed moderator."""
    if not user_id:
        return False
    return channel.user_id == user_id or user_id in channel.moderator_ids


def can_manage_moderators(channel: Channel, user: User | None) -> bool:
    """Only the owner or an admin grants and revokes moderation rights."""
    if user is None:
        return False
    return user.is_admin or channel.user_id == user.user_id
