"""Unit tests for chat and moderation router endpoints."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from streamhub.api.v1.routers import chat as chat_router
from streamhub.api.v1.routers import moderation as moderation_router
from streamhub.domain.live.chat.chat_domain import ChatService
from streamhub.domain.live.chat.chat_models import (
    ChatMessageCreateParams,
    ChatMessageListResponse,
    ChatMessageResponse,
)
from streamhub.domain.live.moderation.moderation_domain import ModerationService
from streamhub.domain.live.moderation.moderation_models import (
    ModerationLogListResponse,
    ModerationLogResponse,
    ModeratorListResponse,
)
from streamhub.schemas import ModerationAction, User
from streamhub.utils.app_errors import AppError, AppErrorCode, HttpStatusCode
from tests.fixtures.api_fixtures import build_test_app


def message_response(message: str = "Hello!", **fields) -> ChatMessageResponse:
    values = {
        "message_id": "cm_1",
        "channel_id": "ch_test",
        "user_id": "us_test_user",
        "message": message,
        "created_at": datetime.now(timezone.utc),
    }
    values.update(fields)
    return ChatMessageResponse(**values)


def log_response(**fields) -> ModerationLogResponse:
    values = {
        "log_id": "ml_1",
        "channel_id": "ch_test",
        "moderator_id": "us_test_user",
        "user_id": "us_spammer",
        "action": ModerationAction.TIMEOUT,
        "created_at": datetime.now(timezone.utc),
    }
    values.update(fields)
    return ModerationLogResponse(**values)


@pytest.fixture
def mock_chat_service() -> AsyncMock:
    """Create a mock ChatService."""
    return AsyncMock(spec=ChatService)


@pytest.fixture
def mock_moderation_service() -> AsyncMock:
    """Create a mock ModerationService."""
    return AsyncMock(spec=ModerationService)


@pytest.fixture
def chat_client(mock_user: User, mock_chat_service: AsyncMock) -> TestClient:
    app = build_test_app(
        chat_router.router, mock_user, {chat_router.get_chat_service: mock_chat_service}
    )
    return TestClient(app)


@pytest.fixture
def moderation_client(mock_user: User, mock_moderation_service: AsyncMock) -> TestClient:
    app = build_test_app(
        moderation_router.router,
        mock_user,
        {moderation_router.get_moderation_service: mock_moderation_service},
    )
    return TestClient(app)


class TestChatRoutes:
    """Tests for /chat endpoints."""

    def test_create_message_success(
        self, chat_client: TestClient, mock_chat_service: AsyncMock, mock_user: User
    ):
        """Should send the message as the authenticated user."""
        # Arrange
        mock_chat_service.create_chat_message.return_value = message_response()

        # Act
        response = chat_client.post(
            "/chat/create_message", json={"channel_id": "ch_test", "message": "Hello!"}
        )

        # Assert
        assert response.status_code == 200
        assert response.json()["results"]["message"] == "Hello!"
        mock_chat_service.create_chat_message.assert_awaited_once_with(
            channel_id="ch_test",
            user_id=mock_user.user_id,
            params=ChatMessageCreateParams(message="Hello!"),
        )

    def test_create_blank_message(self, chat_client: TestClient, mock_chat_service: AsyncMock):
        """Should return 400 with the service's message."""
        mock_chat_service.create_chat_message.side_effect = AppError(
            errcode=AppErrorCode.E_INVALID_REQUEST,
            errmesg="Message can't be blank",
            status_code=HttpStatusCode.BAD_REQUEST,
        )

        response = chat_client.post(
            "/chat/create_message", json={"channel_id": "ch_test", "message": "  "}
        )

        assert response.status_code == 400
        data = response.json()
        assert data["errcode"] == "E_INVALID_REQUEST"
        assert data["errmesg"] == "Message can't be blank"
        assert data["erresid"]

    def test_list_messages(self, chat_client: TestClient, mock_chat_service: AsyncMock):
        mock_chat_service.list_chat_messages.return_value = ChatMessageListResponse(
            messages=[message_response("first"), message_response("second", message_id="cm_2")]
        )

        response = chat_client.get("/chat/list_messages", params={"channel_id": "ch_test"})

        assert response.status_code == 200
        assert [m["message"] for m in response.json()["results"]["messages"]] == [
            "first",
            "second",
        ]
        mock_chat_service.list_chat_messages.assert_awaited_once_with(
            channel_id="ch_test", limit=None
        )


class TestModerationRoutes:
    """Tests for /moderation endpoints."""

    def test_timeout_user_as_current_user(
        self,
        moderation_client: TestClient,
        mock_moderation_service: AsyncMock,
        mock_user: User,
    ):
        """The authenticated user is the moderator."""
        mock_moderation_service.timeout_user.return_value = log_response()

        response = moderation_client.post(
            "/moderation/timeout_user", json={"channel_id": "ch_test", "user_id": "us_spammer"}
        )

        assert response.status_code == 200
        assert response.json()["results"]["action"] == "timeout"
        mock_moderation_service.timeout_user.assert_awaited_once_with(
            channel_id="ch_test",
            moderator_id=mock_user.user_id,
            user_id="us_spammer",
        )

    def test_timeout_user_forbidden(
        self, moderation_client: TestClient, mock_moderation_service: AsyncMock
    ):
        mock_moderation_service.timeout_user.side_effect = AppError(
            errcode=AppErrorCode.E_PERMISSION_DENIED,
            errmesg="User does not have permission to moderate.",
            status_code=HttpStatusCode.FORBIDDEN,
        )

        response = moderation_client.post(
            "/moderation/timeout_user", json={"channel_id": "ch_test", "user_id": "us_spammer"}
        )

        assert response.status_code == 403
        assert response.json()["errmesg"] == "User does not have permission to moderate."

    def test_add_moderator(
        self,
        moderation_client: TestClient,
        mock_moderation_service: AsyncMock,
        mock_user: User,
    ):
        mock_moderation_service.add_moderator.return_value = ModeratorListResponse(
            channel_id="ch_test", moderator_ids=["us_mod"]
        )

        response = moderation_client.post(
            "/moderation/add_moderator", json={"channel_id": "ch_test", "user_id": "us_mod"}
        )

        assert response.status_code == 200
        assert response.json()["results"]["moderator_ids"] == ["us_mod"]
        mock_moderation_service.add_moderator.assert_awaited_once_with(
            "ch_test", "us_mod", actor=mock_user
        )

    def test_remove_moderator(
        self, moderation_client: TestClient, mock_moderation_service: AsyncMock
    ):
        mock_moderation_service.remove_moderator.return_value = ModeratorListResponse(
            channel_id="ch_test", moderator_ids=[]
        )

        response = moderation_client.post(
            "/moderation/remove_moderator", json={"channel_id": "ch_test", "user_id": "us_mod"}
        )

        assert response.status_code == 200
        assert response.json()["results"]["moderator_ids"] == []

    def test_list_logs(self, moderation_client: TestClient, mock_moderation_service: AsyncMock):
        mock_moderation_service.list_moderation_logs.return_value = ModerationLogListResponse(
            logs=[log_response()]
        )

        response = moderation_client.get(
            "/moderation/list_logs", params={"channel_id": "ch_test", "limit": 10}
        )

        assert response.status_code == 200
        assert response.json()["results"]["logs"][0]["log_id"] == "ml_1"
        mock_moderation_service.list_moderation_logs.assert_awaited_once_with("ch_test", limit=10)
