from ulid import ULID


def new_ulid(prefix: str | None = None) -> str:
    value = str(ULID()).lower()
    return f"{prefix}{value}" if prefix else value


def new_user_id() -> str:
    return new_ulid("us_")


def new_channel_id() -> str:
    return new_ulid("ch_")


def new_stream_id() -> str:
    return new_ulid("st_")


def new_metadata_id() -> str:
    return new_ulid("md_")


def new_message_id() -> str:
    return new_ulid("cm_")


def new_moderation_log_id() -> str:
    return new_ulid("ml_")


def new_follower_id() -> str:
    return new_ulid("fo_")


def new_category_id() -> str:
    return new_ulid("ca_")


def new_subscription_id() -> str:
    return new_ulid("su_")
