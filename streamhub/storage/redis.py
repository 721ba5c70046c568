"""
Redis client manager that creates and tracks asyncio clients by label.
"""

import threading

from loguru import logger
from redis.asyncio import Redis

from streamhub.config import config

from .mongo import hide_password


class RedisManager:
    """
    Redis client manager.

    Connection strings come from REDIS_URL_<LABEL> entries in the configuration;
    the `default` label falls back to REDIS_URL. Thread-safe singleton.
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if hasattr(self, "_initialized"):
            return

        self._clients: dict[str, Redis] = {}
        self._initialized = True

    def get_client(self, label: str | None = None) -> Redis:
        """
        Get Redis client by label.

        Raises:
            ValueError: If no connection string is configured for the label
        """
        label = label or "default"

        with self._lock:
            if label not in self._clients:
                connection_string = config.get_redis_url(label)
                if not connection_string:
                    raise ValueError(f"No Redis connection string found for label '{label}'")

                logger.info(
                    "Open Redis client for label '{}': {}",
                    label,
                    hide_password(connection_string),
                )
                self._clients[label] = Redis.from_url(connection_string)

            return self._clients[label]

    async def close_all(self) -> None:
        with self._lock:
            clients = list(self._clients.items())
            self._clients.clear()

        for label, client in clients:
            try:
                await client.aclose()
                logger.info("Closed Redis client for label '{}'", label)
            except Exception as e:
                logger.warning("Failed to close Redis client for label '{}': {}", label, e)


def get_redis_manager() -> RedisManager:
    return RedisManager()


def get_redis_client(label: str | None = None) -> Redis:
    return get_redis_manager().get_client(label)
