"""
Simple MongoDB client manager that creates and tracks clients by label.
"""

import threading

from loguru import logger
from motor.motor_asyncio import AsyncIOMotorClient

from streamhub.config import config


def hide_password(connection_string: str) -> str:
    """Mask the password part of a connection string for logging."""
    if "://" not in connection_string or "@" not in connection_string:
        return connection_string

    scheme, rest = connection_string.split("://", 1)
    auth, _, host = rest.rpartition("@")
    username, sep, password = auth.partition(":")
    if not (sep and username and password):
        return connection_string
    return f"{scheme}://{username}:***@{host}"


class MongoManager:
    """
    MongoDB client manager.

    Connection strings come from MONGO_URL_<LABEL> entries in the configuration;
    the `default` label falls back to MONGO_URL. Clients are created lazily and
    reused. Thread-safe singleton.
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

        self._clients: dict[str, AsyncIOMotorClient] = {}
        self._max_pool_size = config.get_mongo_max_pool_size()
        self._initialized = True

    def get_client(self, label: str | None = None) -> AsyncIOMotorClient:
        """
        Get MongoDB client by label.

        Raises:
            ValueError: If no connection string is configured for the label
        """
        label = label or "default"

        with self._lock:
            if label not in self._clients:
                connection_string = config.get_mongo_url(label)
                if not connection_string:
                    raise ValueError(f"No MongoDB connection string found for label '{label}'")

                logger.info(
                    "Open MongoDB client for label '{}': {}",
                    label,
                    hide_password(connection_string),
                )
                self._clients[label] = AsyncIOMotorClient(
                    connection_string,
                    maxPoolSize=self._max_pool_size,
                    tz_aware=True,
                )

            return self._clients[label]

    def close_all(self) -> None:
        with self._lock:
            for label, client in self._clients.items():
                logger.info("Closing MongoDB client for label '{}'", label)
                client.close()
            self._clients.clear()


def get_mongo_manager() -> MongoManager:
    return MongoManager()


def get_mongo_client(label: str | None = None) -> AsyncIOMotorClient:
    return get_mongo_manager().get_client(label)
