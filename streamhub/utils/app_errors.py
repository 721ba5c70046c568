"""Application error type raised by domain and API code.

Every failure a caller can act on is an ``AppError``. The status code tells
the kinds apart:

- 400: validation (malformed input, duplicate follow, bad category name)
- 401/403: authorization (bad identity, missing moderation rights)
- 404: not found
- 409: precondition (stream already live, no active stream, version conflict)
- 500: unexpected
"""

import inspect
from enum import Enum, IntEnum
from uuid import uuid4


class HttpStatusCode(IntEnum):
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    UNPROCESSABLE_ENTITY = 422
    INTERNAL_SERVER_ERROR = 500


class AppErrorCode(str, Enum):
    # Validation
    E_INVALID_REQUEST = "E_INVALID_REQUEST"
    E_INVALID_PARAMS = "E_INVALID_PARAMS"
    E_INVALID_CATEGORY = "E_INVALID_CATEGORY"
    E_ALREADY_FOLLOWING = "E_ALREADY_FOLLOWING"
    E_CHANNEL_EXISTS = "E_CHANNEL_EXISTS"

    # Not found
    E_CHANNEL_NOT_FOUND = "E_CHANNEL_NOT_FOUND"
    E_STREAM_NOT_FOUND = "E_STREAM_NOT_FOUND"
    E_CATEGORY_NOT_FOUND = "E_CATEGORY_NOT_FOUND"
    E_USER_NOT_FOUND = "E_USER_NOT_FOUND"

    # Precondition
    E_STREAM_ALREADY_ACTIVE = "E_STREAM_ALREADY_ACTIVE"
    E_STREAM_NOT_ACTIVE = "E_STREAM_NOT_ACTIVE"
    E_CHANNEL_VERSION_CONFLICT = "E_CHANNEL_VERSION_CONFLICT"

    # Authorization
    E_BAD_TOKEN = "E_BAD_TOKEN"
    E_PERMISSION_DENIED = "E_PERMISSION_DENIED"

    E_INTERNAL_ERROR = "E_INTERNAL_ERROR"

    def __str__(self) -> str:
        return self.value


class AppError(Exception):
    """Error carrying an API error code, message and HTTP status.

    ``erresid`` identifies this occurrence in logs and in the response body;
    ``caller_info`` records where it was raised.
    """

    def __init__(
        self,
        errcode: AppErrorCode | str,
        errmesg: str,
        status_code: HttpStatusCode | int = HttpStatusCode.BAD_REQUEST,
    ):
        super().__init__(errmesg)
        self.errcode = errcode.value if isinstance(errcode, Enum) else errcode
        self.errmesg = errmesg
        self.status_code = int(status_code)
        self.erresid = uuid4().hex[:10]

        frame = inspect.currentframe()
        caller = frame.f_back if frame else None
        if caller is not None:
            module = inspect.getmodule(caller)
            module_name = module.__name__ if module else caller.f_code.co_filename
            self.caller_info = f"{module_name}:{caller.f_code.co_name}:{caller.f_lineno}"
        else:
            self.caller_info = "unknown"

    @property
    def is_validation(self) -> bool:
        return self.status_code == HttpStatusCode.BAD_REQUEST

    @property
    def is_not_found(self) -> bool:
        return self.status_code == HttpStatusCode.NOT_FOUND

    @property
    def is_precondition(self) -> bool:
        return self.status_code == HttpStatusCode.CONFLICT

    @property
    def is_authorization(self) -> bool:
        return self.status_code in (HttpStatusCode.UNAUTHORIZED, HttpStatusCode.FORBIDDEN)

    def __repr__(self) -> str:
        return f"AppError({self.errcode!r}, {self.errmesg!r}, {self.status_code})"
