"""
Live streaming domain logic.

Includes:
- channel: Channel queries, creation and stream-key access.
- stream: Stream lifecycle and ingest metadata.
- chat: Chat message log.
- moderation: Moderation rights and timeouts.
- follow: Follower registry.
- category: Category hierarchy.
- subscription: Paid subscription records (read side).
"""
