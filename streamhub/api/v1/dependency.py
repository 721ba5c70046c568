from typing import Annotated

from fastapi import Depends, Header
from loguru import logger

from streamhub.schemas import User
from streamhub.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


async def get_optional_user(
    x_user_id: Annotated[str | None, Header()] = None,
) -> User | None:
    """Resolve the caller from the ``X-User-Id`` header set by the auth gateway."""
    if not x_user_id:
        return None

    user = await User.find_one(User.user_id == x_user_id)
    if not user:
        raise AppError(
            errcode=AppErrorCode.E_BAD_TOKEN,
            errmesg="Unknown user",
            status_code=HttpStatusCode.UNAUTHORIZED,
        )

    logger.debug("Authenticated user_id: {}", user.user_id)
    return user


async def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    if user is None:
        raise AppError(
            errcode=AppErrorCode.E_BAD_TOKEN,
            errmesg="Missing X-User-Id header",
            status_code=HttpStatusCode.UNAUTHORIZED,
        )
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[User | None, Depends(get_optional_user)]


async def get_admin_user(user: CurrentUser) -> User:
    if not user.is_admin:
        raise AppError(
            errcode=AppErrorCode.E_PERMISSION_DENIED,
            errmesg="Admin only",
            status_code=HttpStatusCode.FORBIDDEN,
        )
    return user


AdminUser = Annotated[User, Depends(get_admin_user)]
