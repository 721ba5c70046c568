"""
Centralized configuration management.

Values are read from, in increasing priority:
1) `env.example` (committed, safe placeholders)
2) `env.local` (optional, MUST NOT be committed)
3) System environment variables
"""

import os
from pathlib import Path

from dotenv import dotenv_values
from loguru import logger


class EnvironConfig:
    """
    Singleton configuration class that loads environment variables from env files
    and system environment, read through ``get`` with default values.
    """

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(EnvironConfig, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self._config: dict[str, str | None] = {}
            self._load_config()
            EnvironConfig._initialized = True

    def _load_config(self):
        root = Path(__file__).parent.parent

        example_path = root / "env.example"
        if example_path.exists():
            self._config.update(dotenv_values(example_path))
            logger.info("Loaded environment variables from {}", example_path)

        local_path = root / "env.local"
        if local_path.exists():
            self._config.update(dotenv_values(local_path))
            logger.info("Loaded and overrode environment variables from {}", local_path)

        self._config.update(os.environ)

    def get(self, key, default=None):
        return self._config.get(key, default)

    def get_redis_url(self, label: str = "default") -> str:
        """
        Get Redis connection URL for a specific label.

        `default` resolves REDIS_URL_DEFAULT, then REDIS_URL, then localhost.
        Other labels resolve REDIS_URL_<LABEL>.
        """
        if label == "default":
            return (
                self.get("REDIS_URL_DEFAULT")
                or self.get("REDIS_URL")
                or "redis://localhost:6379"
            )
        return self.get(f"REDIS_URL_{label.upper()}") or ""

    def get_mongo_url(self, label: str = "default") -> str:
        """
        Get MongoDB connection URL for a specific label.

        `default` resolves MONGO_URL_DEFAULT, then MONGO_URL, then localhost.
        Other labels resolve MONGO_URL_<LABEL>.
        """
        if label == "default":
            return (
                self.get("MONGO_URL_DEFAULT")
                or self.get("MONGO_URL")
                or "mongodb://localhost:27017/streamhub"
            )
        return self.get(f"MONGO_URL_{label.upper()}") or ""

    def get_mongo_max_pool_size(self) -> int:
        """Maximum MongoDB pool size (1-100, default: 5)."""
        try:
            size = int(self.get("MONGO_MAX_POOL_SIZE", "5"))
        except (ValueError, TypeError):
            logger.warning(
                "Invalid MONGO_MAX_POOL_SIZE value '{}', defaulting to 5",
                self.get("MONGO_MAX_POOL_SIZE"),
            )
            return 5

        if not 1 <= size <= 100:
            logger.warning("MONGO_MAX_POOL_SIZE value {} is out of range (1-100), defaulting to 5", size)
            return 5
        return size


config = EnvironConfig()
