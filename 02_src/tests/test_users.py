"""Tests for UserService."""

import pytest

from memes.errors import AuthorizationFailure, ValidationFailure
from memes.models import ConversationRef


class TestProfiles:
    """Tests for profile reads and updates."""

    @pytest.mark.asyncio
    async def test_profile(self, app, owner, member):
        user = await app.users.profile(owner.token, member.auth_user_id)

        assert user.name_first == "Grace"
        assert user.handle_str == "gracehopper"
        assert user.email == "grace.hopper@example.com"

    @pytest.mark.asyncio
    async def test_profile_unknown_user(self, app, owner):
        with pytest.raises(ValidationFailure):
            await app.users.profile(owner.token, 99)

    @pytest.mark.asyncio
    async def test_profile_invalid_token(self, app, owner):
        with pytest.raises(AuthorizationFailure):
            await app.users.profile("nope", owner.auth_user_id)

    @pytest.mark.asyncio
    async def test_all(self, app, owner, member):
        users = await app.users.all(member.token)

        assert [u.u_id for u in users] == [owner.auth_user_id, member.auth_user_id]

    @pytest.mark.asyncio
    async def test_set_name(self, app, owner):
        await app.users.set_name(owner.token, "Augusta", "King")

        user = app.store.user(owner.auth_user_id)
        assert (user.name_first, user.name_last) == ("Augusta", "King")
        # Handles are not regenerated
        assert user.handle_str == "adalovelace"

        with pytest.raises(ValidationFailure):
            await app.users.set_name(owner.token, "", "King")

    @pytest.mark.asyncio
    async def test_set_email(self, app, owner, member):
        await app.users.set_email(owner.token, "ada@example.com")
        assert app.store.user(owner.auth_user_id).email == "ada@example.com"

        # Re-setting your own address is allowed
        await app.users.set_email(owner.token, "ada@example.com")

        with pytest.raises(ValidationFailure):
            await app.users.set_email(owner.token, "grace.hopper@example.com")
        with pytest.raises(ValidationFailure):
            await app.users.set_email(owner.token, "not-an-email")

    @pytest.mark.asyncio
    async def test_set_handle(self, app, owner, member):
        await app.users.set_handle(owner.token, "countess")
        assert app.store.user(owner.auth_user_id).handle_str == "countess"

        with pytest.raises(ValidationFailure):
            await app.users.set_handle(owner.token, "gracehopper")
        for bad in ("ab", "x" * 21, "with space", "dash-ed"):
            with pytest.raises(ValidationFailure):
                await app.users.set_handle(owner.token, bad)


class TestUploadPhoto:
    """Tests for upload_photo with a stubbed processor."""

    @pytest.mark.asyncio
    async def test_updates_profile_url(self, app, photos, owner):
        await app.users.upload_photo(owner.token, "http://img.example.com/a.jpg", 0, 0, 10, 10)

        photos.process.assert_awaited_once_with(
            "http://img.example.com/a.jpg", 0, 0, 10, 10
        )
        assert app.store.user(owner.auth_user_id).profile_img_url.endswith(
            "/avatar/cropped.jpg"
        )

    @pytest.mark.asyncio
    async def test_empty_box(self, app, photos, owner):
        with pytest.raises(ValidationFailure):
            await app.users.upload_photo(owner.token, "http://img.example.com/a.jpg", 5, 0, 5, 10)
        photos.process.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_token_skips_fetch(self, app, photos):
        with pytest.raises(AuthorizationFailure):
            await app.users.upload_photo("nope", "http://img.example.com/a.jpg", 0, 0, 10, 10)
        photos.process.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_processor_failure_leaves_profile(self, app, photos, owner):
        photos.process.side_effect = ValidationFailure("img_url could not be fetched")

        with pytest.raises(ValidationFailure):
            await app.users.upload_photo(owner.token, "http://img.example.com/a.jpg", 0, 0, 10, 10)
        assert app.store.user(owner.auth_user_id).profile_img_url.endswith(
            "/default/default.jpg"
        )


class TestStats:
    """Tests for user and workspace statistics."""

    @pytest.mark.asyncio
    async def test_empty_workspace(self, app, owner):
        stats = await app.users.stats(owner.token)
        workspace = await app.users.workspace_stats(owner.token)

        assert stats.involvement_rate == 0.0
        assert workspace.utilization_rate == 0.0
        assert workspace.channels_exist == 0

    @pytest.mark.asyncio
    async def test_counts(self, app, owner, member, channel_id):
        await app.messages.send(owner.token, ConversationRef.channel(channel_id), "hi")

        owner_stats = await app.users.stats(owner.token)
        member_stats = await app.users.stats(member.token)
        workspace = await app.users.workspace_stats(member.token)

        assert owner_stats.channels_joined == 1
        assert owner_stats.messages_sent == 1
        assert owner_stats.involvement_rate == 1.0
        assert member_stats.involvement_rate == 0.0
        assert workspace.channels_exist == 1
        assert workspace.messages_exist == 1
        assert workspace.utilization_rate == 0.5

    @pytest.mark.asyncio
    async def test_removed_message_leaves_utilization(
        self, app, owner, member, joined_channel_id
    ):
        ref = ConversationRef.channel(joined_channel_id)
        message_id = await app.messages.send(member.token, ref, "hi")
        await app.messages.remove(member.token, message_id)

        workspace = await app.users.workspace_stats(owner.token)

        assert workspace.messages_exist == 0
        assert workspace.utilization_rate == 1.0
