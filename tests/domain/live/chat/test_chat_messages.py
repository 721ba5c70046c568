"""Tests for chat messages."""

import pytest

from streamhub.app_config import get_app_environ_config
from streamhub.domain.events import InMemoryEventBus, TopicKind, get_subscribe_topic
from streamhub.domain.live.chat._messages import ChatMessageOperations
from streamhub.domain.live.chat.chat_domain import ChatService
from streamhub.domain.live.chat.chat_models import ChatMessageCreateParams
from streamhub.schemas import Channel, ChatMessage, User
from streamhub.utils.app_errors import AppError, AppErrorCode
from streamhub.utils.clock import utc_now


@pytest.mark.usefixtures("clear_collections")
class TestCreateChatMessage:
    """Tests for create_chat_message."""

    @pytest.fixture
    def service(self) -> ChatService:
        """Create chat service instance."""
        return ChatService()

    async def test_create_message_success(
        self, service: ChatService, channel: Channel, viewer: User
    ):
        """A message is stored with its author and channel."""
        # Act
        result = await service.create_chat_message(
            channel.channel_id, viewer.user_id, ChatMessageCreateParams(message="Hello!")
        )

        # Assert
        assert result.message_id.startswith("cm_")
        assert result.channel_id == channel.channel_id
        assert result.user_id == viewer.user_id
        assert result.message == "Hello!"

        saved = await ChatMessage.find_one(ChatMessage.message_id == result.message_id)
        assert saved is not None
        assert saved.deleted_at is None

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_blank_message_rejected(
        self, service: ChatService, channel: Channel, viewer: User, text: str
    ):
        """Empty and whitespace-only messages are validation failures."""
        with pytest.raises(AppError) as exc_info:
            await service.create_chat_message(
                channel.channel_id, viewer.user_id, ChatMessageCreateParams(message=text)
            )

        assert exc_info.value.errcode == AppErrorCode.E_INVALID_REQUEST.value
        assert exc_info.value.errmesg == "Message can't be blank"
        assert await ChatMessage.find_all().count() == 0

    async def test_message_at_max_length_accepted(
        self, service: ChatService, channel: Channel, viewer: User
    ):
        """A message exactly at the length limit is accepted."""
        max_length = get_app_environ_config().CHAT_MESSAGE_MAX_LENGTH

        result = await service.create_chat_message(
            channel.channel_id, viewer.user_id, ChatMessageCreateParams(message="a" * max_length)
        )

        assert len(result.message) == max_length

    async def test_message_too_long_rejected(
        self, service: ChatService, channel: Channel, viewer: User
    ):
        """A message over the length limit is a validation failure."""
        max_length = get_app_environ_config().CHAT_MESSAGE_MAX_LENGTH

        with pytest.raises(AppError) as exc_info:
            await service.create_chat_message(
                channel.channel_id,
                viewer.user_id,
                ChatMessageCreateParams(message="a" * (max_length + 1)),
            )

        assert exc_info.value.errcode == AppErrorCode.E_INVALID_REQUEST.value
        assert exc_info.value.is_validation

    async def test_message_to_unknown_channel(self, service: ChatService, viewer: User):
        """Unknown channel is a not-found failure."""
        with pytest.raises(AppError) as exc_info:
            await service.create_chat_message(
                "ch_missing", viewer.user_id, ChatMessageCreateParams(message="Hello!")
            )

        assert exc_info.value.errcode == AppErrorCode.E_CHANNEL_NOT_FOUND.value

    async def test_message_is_published(
        self,
        service: ChatService,
        channel: Channel,
        viewer: User,
        event_bus: InMemoryEventBus,
    ):
        """Subscribers of the channel's chat topic receive the new message."""
        # Arrange
        topic = get_subscribe_topic(TopicKind.CHAT, channel.channel_id)

        async with event_bus.subscribe(topic) as events:
            # Act
            result = await service.create_chat_message(
                channel.channel_id, viewer.user_id, ChatMessageCreateParams(message="Hello!")
            )
            event = events.queue.get_nowait()

        # Assert
        assert event["topic"] == topic
        assert event["data"]["type"] == "chat_message"
        assert event["data"]["message"]["message_id"] == result.message_id
        assert event["data"]["message"]["message"] == "Hello!"

    async def test_message_published_on_global_chat_topic(
        self,
        service: ChatService,
        channel: Channel,
        viewer: User,
        event_bus: InMemoryEventBus,
    ):
        """The global chat topic receives messages of every channel."""
        topic = get_subscribe_topic(TopicKind.CHAT)

        async with event_bus.subscribe(topic) as events:
            await service.create_chat_message(
                channel.channel_id, viewer.user_id, ChatMessageCreateParams(message="Hi")
            )
            event = events.queue.get_nowait()

        assert event["data"]["message"]["channel_id"] == channel.channel_id


@pytest.mark.usefixtures("clear_collections")
class TestListChatMessages:
    """Tests for list_chat_messages and message tombstones."""

    @pytest.fixture
    def service(self) -> ChatService:
        """Create chat service instance."""
        return ChatService()

    async def test_list_messages_in_send_order(
        self, service: ChatService, channel: Channel, viewer: User
    ):
        """Messages come back in the order they were sent."""
        for text in ("first", "second", "third"):
            await service.create_chat_message(
                channel.channel_id, viewer.user_id, ChatMessageCreateParams(message=text)
            )

        result = await service.list_chat_messages(channel.channel_id)

        assert [m.message for m in result.messages] == ["first", "second", "third"]

    async def test_list_messages_limit(self, service: ChatService, channel: Channel, viewer: User):
        """A limit keeps the oldest messages."""
        for text in ("first", "second", "third"):
            await service.create_chat_message(
                channel.channel_id, viewer.user_id, ChatMessageCreateParams(message=text)
            )

        result = await service.list_chat_messages(channel.channel_id, limit=2)

        assert [m.message for m in result.messages] == ["first", "second"]

    async def test_list_messages_scoped_to_channel(
        self, service: ChatService, channel: Channel, viewer: User, admin: User
    ):
        """Messages of another channel are not listed."""
        from tests.fixtures.live_fixtures import create_channel

        other = await create_channel(admin, title="Other")
        await service.create_chat_message(
            channel.channel_id, viewer.user_id, ChatMessageCreateParams(message="here")
        )
        await service.create_chat_message(
            other.channel_id, viewer.user_id, ChatMessageCreateParams(message="there")
        )

        result = await service.list_chat_messages(channel.channel_id)

        assert [m.message for m in result.messages] == ["here"]

    async def test_deleted_messages_hidden_and_restorable(
        self, service: ChatService, channel: Channel, viewer: User, streamer: User
    ):
        """Tombstoned messages disappear from the list until restored."""
        # Arrange
        ops = ChatMessageOperations()
        await service.create_chat_message(
            channel.channel_id, viewer.user_id, ChatMessageCreateParams(message="spam")
        )
        await service.create_chat_message(
            channel.channel_id, streamer.user_id, ChatMessageCreateParams(message="welcome")
        )

        # Act
        deleted = await ops.delete_user_messages(
            channel.channel_id, viewer.user_id, "ml_test", utc_now()
        )
        after_delete = await service.list_chat_messages(channel.channel_id)
        restored = await ops.restore_user_messages("ml_test")
        after_restore = await service.list_chat_messages(channel.channel_id)

        # Assert
        assert deleted == 1
        assert [m.message for m in after_delete.messages] == ["welcome"]
        assert restored == 1
        assert [m.message for m in after_restore.messages] == ["spam", "welcome"]

    async def test_list_messages_unknown_channel(self, beanie_db, service: ChatService):
        """Unknown channel is a not-found failure."""
        with pytest.raises(AppError) as exc_info:
            await service.list_chat_messages("ch_missing")

        assert exc_info.value.errcode == AppErrorCode.E_CHANNEL_NOT_FOUND.value
