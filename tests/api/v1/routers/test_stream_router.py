"""Unit tests for stream router endpoints."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from streamhub.api.v1.routers.stream import get_stream_service, router
from streamhub.domain.live.stream.stream_domain import StreamService
from streamhub.domain.live.stream.stream_models import (
    StreamListResponse,
    StreamMetadataParams,
    StreamMetadataResponse,
    StreamResponse,
)
from streamhub.schemas import User
from streamhub.utils.app_errors import AppError, AppErrorCode, HttpStatusCode
from tests.fixtures.api_fixtures import build_test_app


def stream_response(**fields) -> StreamResponse:
    now = datetime.now(timezone.utc)
    values = {
        "stream_id": "st_test",
        "channel_id": "ch_test",
        "title": "Live Coding",
        "started_at": now,
        "created_at": now,
        "updated_at": now,
    }
    values.update(fields)
    return StreamResponse(**values)


@pytest.fixture
def mock_stream_service() -> AsyncMock:
    """Create a mock StreamService."""
    return AsyncMock(spec=StreamService)


@pytest.fixture
def test_app(mock_user: User, mock_stream_service: AsyncMock) -> FastAPI:
    """Create FastAPI test app with dependency overrides."""
    return build_test_app(router, mock_user, {get_stream_service: mock_stream_service})


@pytest.fixture
def client(test_app: FastAPI) -> TestClient:
    """Create test client."""
    return TestClient(test_app)


class TestStartStream:
    """Tests for POST /stream/start_stream endpoint."""

    def test_start_stream_success(
        self,
        client: TestClient,
        mock_stream_service: AsyncMock,
        mock_user: User,
    ):
        """Should check management rights, then start the stream."""
        # Arrange
        mock_stream_service.start_stream.return_value = stream_response()

        # Act
        response = client.post("/stream/start_stream", json={"channel_id": "ch_test"})

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["results"]["stream_id"] == "st_test"
        assert data["results"]["ended_at"] is None
        mock_stream_service.ensure_can_manage_stream.assert_awaited_once_with("ch_test", mock_user)
        mock_stream_service.start_stream.assert_awaited_once_with("ch_test")

    def test_start_stream_forbidden(self, client: TestClient, mock_stream_service: AsyncMock):
        """Should return 403 and leave the channel alone for other users."""
        mock_stream_service.ensure_can_manage_stream.side_effect = AppError(
            errcode=AppErrorCode.E_PERMISSION_DENIED,
            errmesg="Unauthorized to manage this channel's stream",
            status_code=HttpStatusCode.FORBIDDEN,
        )

        response = client.post("/stream/start_stream", json={"channel_id": "ch_test"})

        assert response.status_code == 403
        assert response.json()["errcode"] == "E_PERMISSION_DENIED"
        mock_stream_service.start_stream.assert_not_called()

    def test_start_stream_already_active(
        self, client: TestClient, mock_stream_service: AsyncMock
    ):
        """Should return 409 when the channel is already live."""
        mock_stream_service.start_stream.side_effect = AppError(
            errcode=AppErrorCode.E_STREAM_ALREADY_ACTIVE,
            errmesg="Channel ch_test already has an active stream",
            status_code=HttpStatusCode.CONFLICT,
        )

        response = client.post("/stream/start_stream", json={"channel_id": "ch_test"})

        assert response.status_code == 409
        assert response.json()["errcode"] == "E_STREAM_ALREADY_ACTIVE"

    def test_start_stream_missing_channel_id(
        self, client: TestClient, mock_stream_service: AsyncMock
    ):
        response = client.post("/stream/start_stream", json={})

        assert response.status_code == 422
        mock_stream_service.start_stream.assert_not_called()


class TestEndStream:
    """Tests for POST /stream/end_stream endpoint."""

    def test_end_stream_success(self, client: TestClient, mock_stream_service: AsyncMock):
        now = datetime.now(timezone.utc)
        mock_stream_service.end_stream.return_value = stream_response(ended_at=now)

        response = client.post("/stream/end_stream", json={"channel_id": "ch_test"})

        assert response.status_code == 200
        assert response.json()["results"]["ended_at"] is not None
        mock_stream_service.end_stream.assert_awaited_once_with("ch_test")

    def test_end_stream_not_active(self, client: TestClient, mock_stream_service: AsyncMock):
        mock_stream_service.end_stream.side_effect = AppError(
            errcode=AppErrorCode.E_STREAM_NOT_ACTIVE,
            errmesg="Channel ch_test has no active stream",
            status_code=HttpStatusCode.CONFLICT,
        )

        response = client.post("/stream/end_stream", json={"channel_id": "ch_test"})

        assert response.status_code == 409
        assert response.json()["errcode"] == "E_STREAM_NOT_ACTIVE"


class TestLogStreamMetadata:
    """Tests for POST /stream/log_stream_metadata endpoint."""

    def test_log_metadata_success(self, client: TestClient, mock_stream_service: AsyncMock):
        """Should pass the snapshot through to the service."""
        # Arrange
        now = datetime.now(timezone.utc)
        mock_stream_service.log_stream_metadata.return_value = stream_response(
            metadata=[
                StreamMetadataResponse(
                    metadata_id="md_1", vendor_name="OBS", ingest_viewers=32, created_at=now
                )
            ],
            count_viewers=32,
            peak_viewers=32,
        )
        payload = {
            "channel_id": "ch_test",
            "metadata": {"vendor_name": "OBS", "ingest_viewers": 32, "video_codec": "mp4"},
        }

        # Act
        response = client.post("/stream/log_stream_metadata", json=payload)

        # Assert
        assert response.status_code == 200
        results = response.json()["results"]
        assert results["metadata"][0]["vendor_name"] == "OBS"
        assert results["peak_viewers"] == 32

        channel_id, params = mock_stream_service.log_stream_metadata.call_args.args
        assert channel_id == "ch_test"
        assert params == StreamMetadataParams(
            vendor_name="OBS", ingest_viewers=32, video_codec="mp4"
        )

    def test_log_metadata_rejects_bad_types(
        self, client: TestClient, mock_stream_service: AsyncMock
    ):
        payload = {"channel_id": "ch_test", "metadata": {"ingest_viewers": "many"}}

        response = client.post("/stream/log_stream_metadata", json=payload)

        assert response.status_code == 422
        mock_stream_service.log_stream_metadata.assert_not_called()


class TestStreamQueries:
    """Tests for GET /stream/get_stream and /stream/list_streams."""

    def test_get_stream(self, client: TestClient, mock_stream_service: AsyncMock):
        mock_stream_service.get_stream.return_value = stream_response()

        response = client.get("/stream/get_stream", params={"stream_id": "st_test"})

        assert response.status_code == 200
        assert response.json()["results"]["channel_id"] == "ch_test"

    def test_get_stream_not_found(self, client: TestClient, mock_stream_service: AsyncMock):
        mock_stream_service.get_stream.side_effect = AppError(
            errcode=AppErrorCode.E_STREAM_NOT_FOUND,
            errmesg="Stream not found: st_missing",
            status_code=HttpStatusCode.NOT_FOUND,
        )

        response = client.get("/stream/get_stream", params={"stream_id": "st_missing"})

        assert response.status_code == 404

    def test_list_streams(self, client: TestClient, mock_stream_service: AsyncMock):
        mock_stream_service.list_streams.return_value = StreamListResponse(
            streams=[stream_response(stream_id="st_2"), stream_response(stream_id="st_1")]
        )

        response = client.get("/stream/list_streams", params={"channel_id": "ch_test", "limit": 5})

        assert response.status_code == 200
        assert [s["stream_id"] for s in response.json()["results"]["streams"]] == ["st_2", "st_1"]
        mock_stream_service.list_streams.assert_awaited_once_with("ch_test", limit=5)

    def test_list_streams_limit_bounds(self, client: TestClient, mock_stream_service: AsyncMock):
        response = client.get(
            "/stream/list_streams", params={"channel_id": "ch_test", "limit": 1000}
        )

        assert response.status_code == 422
