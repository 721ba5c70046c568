from pydantic import BaseModel

from streamhub.config import config


class AppEnvironConfig(BaseModel):
    DEBUG: bool = (config.get("DEBUG") or "false").strip().lower() == "true"

    # HTTP server
    API_HOST: str = (config.get("API_HOST") or "0.0.0.0").strip()
    API_PORT: int = int((config.get("API_PORT") or "").strip() or 8000)
    API_WORKERS: int = int((config.get("API_WORKERS") or "").strip() or 1)
    API_CORS_ORIGINS: list[str] = [
        x.strip() for x in (config.get("API_CORS_ORIGINS") or "*").split(",") if x.strip()
    ]

    # Storage
    MONGO_LABEL: str = (config.get("MONGO_LABEL") or "default").strip()
    MONGO_DATABASE: str = (config.get("MONGO_DATABASE") or "streamhub").strip()
    REDIS_LABEL: str = (config.get("REDIS_LABEL") or "default").strip()

    # Event fan-out: "memory" for a single node, "redis" to broadcast across nodes
    EVENT_BUS_BACKEND: str = (config.get("EVENT_BUS_BACKEND") or "memory").strip().lower()
    # Per-subscriber buffer; events beyond it are dropped for that subscriber
    EVENT_QUEUE_SIZE: int = int((config.get("EVENT_QUEUE_SIZE") or "").strip() or 256)

    # Chat
    CHAT_MESSAGE_MAX_LENGTH: int = int((config.get("CHAT_MESSAGE_MAX_LENGTH") or "").strip() or 255)

    # Channels
    STREAM_KEY_BYTES: int = int((config.get("STREAM_KEY_BYTES") or "").strip() or 32)
    CHANNEL_MAX_RETRY_ON_CONFLICTS: int = int(
        (config.get("CHANNEL_MAX_RETRY_ON_CONFLICTS") or "").strip() or 3
    )

    # Observability
    LOGFIRE_ENABLE: bool = (config.get("LOGFIRE_ENABLE") or "false").strip().lower() == "true"
    LOGFIRE_TOKEN: str | None = (config.get("LOGFIRE_TOKEN") or "").strip() or None


_app_environ_config = AppEnvironConfig()


def get_app_environ_config() -> AppEnvironConfig:
    return _app_environ_config
