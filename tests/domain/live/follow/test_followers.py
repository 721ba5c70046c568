"""Tests for the follower registry."""

import pytest

from streamhub.domain.live.follow._followers import FollowerOperations
from streamhub.domain.live.follow.follow_domain import FollowService
from streamhub.schemas import Channel, Follower, User
from streamhub.utils.app_errors import AppError, AppErrorCode
from tests.fixtures.live_fixtures import create_channel, create_user


@pytest.mark.usefixtures("clear_collections")
class TestFollow:
    """Tests for follow and unfollow."""

    @pytest.fixture
    def service(self) -> FollowService:
        """Create follow service instance."""
        return FollowService()

    async def test_follow_success(self, service: FollowService, streamer: User, viewer: User):
        """Following stores one record for the pair."""
        # Act
        result = await service.follow(streamer.user_id, viewer.user_id)

        # Assert
        assert result.follower_id.startswith("fo_")
        assert result.streamer_id == streamer.user_id
        assert result.user_id == viewer.user_id
        assert result.has_live_notifications is False
        assert await service.is_following(streamer.user_id, viewer.user_id)

    async def test_follow_with_live_notifications(
        self, service: FollowService, streamer: User, viewer: User
    ):
        """The notification preference is stored."""
        result = await service.follow(streamer.user_id, viewer.user_id, has_live_notifications=True)

        assert result.has_live_notifications is True

    async def test_follow_twice_rejected(
        self, service: FollowService, streamer: User, viewer: User
    ):
        """A second follow of the same streamer is a validation failure."""
        await service.follow(streamer.user_id, viewer.user_id)

        with pytest.raises(AppError) as exc_info:
            await service.follow(streamer.user_id, viewer.user_id)

        assert exc_info.value.errcode == AppErrorCode.E_ALREADY_FOLLOWING.value
        assert exc_info.value.is_validation
        assert await Follower.find_all().count() == 1

    async def test_follow_race_maps_duplicate_key(
        self,
        streamer: User,
        viewer: User,
        monkeypatch: pytest.MonkeyPatch,
    ):
        """A follow that loses the insert race reports already-following."""
        # Arrange: the pre-check misses a concurrent identical follow
        ops = FollowerOperations()
        await ops.follow(streamer.user_id, viewer.user_id)

        async def not_following(*args, **kwargs):
            return False

        monkeypatch.setattr(ops, "is_following", not_following)

        # Act
        with pytest.raises(AppError) as exc_info:
            await ops.follow(streamer.user_id, viewer.user_id)

        # Assert
        assert exc_info.value.errcode == AppErrorCode.E_ALREADY_FOLLOWING.value
        assert await Follower.find_all().count() == 1

    async def test_follow_unknown_streamer(self, service: FollowService, viewer: User):
        """Only existing streamers can be followed."""
        with pytest.raises(AppError) as exc_info:
            await service.follow("us_missing", viewer.user_id)

        assert exc_info.value.errcode == AppErrorCode.E_USER_NOT_FOUND.value

    async def test_unfollow(self, service: FollowService, streamer: User, viewer: User):
        """Unfollowing removes the record."""
        await service.follow(streamer.user_id, viewer.user_id)

        removed = await service.unfollow(streamer.user_id, viewer.user_id)

        assert removed is True
        assert not await service.is_following(streamer.user_id, viewer.user_id)

    async def test_unfollow_when_not_following(
        self, service: FollowService, streamer: User, viewer: User
    ):
        """Unfollowing without a follow is a no-op."""
        removed = await service.unfollow(streamer.user_id, viewer.user_id)

        assert removed is False

    async def test_follow_again_after_unfollow(
        self, service: FollowService, streamer: User, viewer: User
    ):
        """The pair can be re-created once removed."""
        await service.follow(streamer.user_id, viewer.user_id)
        await service.unfollow(streamer.user_id, viewer.user_id)

        result = await service.follow(streamer.user_id, viewer.user_id)

        assert result.streamer_id == streamer.user_id


@pytest.mark.usefixtures("clear_collections")
class TestFollowerQueries:
    """Tests for list_followers and list_followed_channels."""

    @pytest.fixture
    def service(self) -> FollowService:
        """Create follow service instance."""
        return FollowService()

    async def test_list_followers_of_streamer(
        self, service: FollowService, streamer: User, viewer: User, admin: User
    ):
        """Filtering by streamer returns everyone following them."""
        other = await create_user("other")
        await service.follow(streamer.user_id, viewer.user_id)
        await service.follow(streamer.user_id, admin.user_id)
        await service.follow(other.user_id, viewer.user_id)

        result = await service.list_followers(streamer_username="streamer")

        assert {f.user_id for f in result.followers} == {viewer.user_id, admin.user_id}

    async def test_list_followers_of_user(
        self, service: FollowService, streamer: User, viewer: User
    ):
        """Filtering by user returns the streamers they follow."""
        other = await create_user("other")
        await service.follow(streamer.user_id, viewer.user_id)
        await service.follow(other.user_id, viewer.user_id)

        result = await service.list_followers(user_username="viewer")

        assert [f.streamer_id for f in result.followers] == [streamer.user_id, other.user_id]

    async def test_list_followers_by_both(
        self, service: FollowService, streamer: User, viewer: User, admin: User
    ):
        """Both filters narrow to the single pair."""
        await service.follow(streamer.user_id, viewer.user_id)
        await service.follow(streamer.user_id, admin.user_id)

        result = await service.list_followers(streamer_username="streamer", user_username="viewer")

        assert len(result.followers) == 1
        assert result.followers[0].user_id == viewer.user_id

    async def test_list_followers_unknown_username(self, service: FollowService, streamer: User):
        """Unknown usernames are not-found failures."""
        with pytest.raises(AppError) as exc_info:
            await service.list_followers(streamer_username="nobody")

        assert exc_info.value.errcode == AppErrorCode.E_USER_NOT_FOUND.value

    async def test_list_followed_channels(
        self, service: FollowService, channel: Channel, streamer: User, viewer: User
    ):
        """Followed streamers resolve to their channels."""
        other = await create_user("other")
        await create_channel(other, title="Not followed")
        await service.follow(streamer.user_id, viewer.user_id)

        result = await service.list_followed_channels(viewer.user_id, viewer=viewer)

        assert [c.channel_id for c in result.channels] == [channel.channel_id]
        assert result.channels[0].stream_key is None

    async def test_list_followed_channels_empty(self, service: FollowService, viewer: User):
        """A user who follows nobody gets no channels."""
        result = await service.list_followed_channels(viewer.user_id)

        assert result.channels == []
