"""Tests for notification feeds."""

import pytest

from memes.errors import AuthorizationFailure
from memes.models import ConversationRef


async def feed_texts(app, token):
    return [n.notification_message for n in await app.notifications.get(token)]


class TestTagNotifications:
    """Tests for @handle tags."""

    @pytest.mark.asyncio
    async def test_tagged_member_is_notified(self, app, owner, member, joined_channel_id):
        await app.messages.send(
            owner.token, ConversationRef.channel(joined_channel_id), "hello @gracehopper"
        )

        feed = await app.notifications.get(member.token)
        assert len(feed) == 1
        assert feed[0].channel_id == joined_channel_id
        assert feed[0].dm_id == -1
        assert feed[0].notification_message == (
            "adalovelace tagged you in general: hello @gracehopper"
        )

    @pytest.mark.asyncio
    async def test_exact_handle_wins_over_case_variant_outside(
        self, app, owner, member, outsider, joined_channel_id
    ):
        await app.users.set_handle(outsider.token, "Carl1")
        await app.users.set_handle(member.token, "carl1")

        await app.messages.send(
            owner.token, ConversationRef.channel(joined_channel_id), "hi @carl1"
        )

        assert await feed_texts(app, member.token) == [
            "adalovelace tagged you in general: hi @carl1"
        ]
        assert await app.notifications.get(outsider.token) == []

    @pytest.mark.asyncio
    async def test_case_insensitive_match_among_members(
        self, app, owner, member, outsider, joined_channel_id
    ):
        await app.users.set_handle(outsider.token, "carl1")
        await app.users.set_handle(member.token, "Carl1")

        await app.messages.send(
            owner.token, ConversationRef.channel(joined_channel_id), "hi @CARL1"
        )

        assert len(await app.notifications.get(member.token)) == 1
        assert await app.notifications.get(outsider.token) == []

    @pytest.mark.asyncio
    async def test_non_member_is_not_notified(self, app, owner, member, channel_id):
        await app.messages.send(
            owner.token, ConversationRef.channel(channel_id), "hello @gracehopper"
        )

        assert await app.notifications.get(member.token) == []

    @pytest.mark.asyncio
    async def test_preview_is_first_twenty_characters(self, app, owner, member, joined_channel_id):
        body = "@gracehopper " + "x" * 50
        await app.messages.send(owner.token, ConversationRef.channel(joined_channel_id), body)

        assert await feed_texts(app, member.token) == [
            f"adalovelace tagged you in general: {body[:20]}"
        ]

    @pytest.mark.asyncio
    async def test_repeated_tag_notifies_once(self, app, owner, member, joined_channel_id):
        await app.messages.send(
            owner.token,
            ConversationRef.channel(joined_channel_id),
            "@gracehopper @GraceHopper @gracehopper",
        )

        assert len(await app.notifications.get(member.token)) == 1

    @pytest.mark.asyncio
    async def test_self_tag_is_ignored(self, app, owner, channel_id):
        await app.messages.send(owner.token, ConversationRef.channel(channel_id), "me @adalovelace")

        assert await app.notifications.get(owner.token) == []

    @pytest.mark.asyncio
    async def test_edit_rescans_new_body_only(self, app, owner, member, outsider, joined_channel_id):
        await app.channels.join(outsider.token, joined_channel_id)
        ref = ConversationRef.channel(joined_channel_id)
        message_id = await app.messages.send(owner.token, ref, "hi @gracehopper")

        await app.messages.edit(owner.token, message_id, "hi @alanturing")

        assert len(await app.notifications.get(member.token)) == 1
        assert await feed_texts(app, outsider.token) == [
            "adalovelace tagged you in general: hi @alanturing"
        ]

    @pytest.mark.asyncio
    async def test_tag_in_dm_uses_dm_name(self, app, owner, member):
        dm_id = await app.dms.create(owner.token, [member.auth_user_id])
        await app.messages.send(member.token, ConversationRef.dm(dm_id), "@adalovelace hi")

        feed = await app.notifications.get(owner.token)
        assert feed[0].dm_id == dm_id
        assert feed[0].channel_id == -1
        assert feed[0].notification_message == (
            "gracehopper tagged you in adalovelace, gracehopper: @adalovelace hi"
        )


class TestOtherNotifications:
    """Tests for react, invite and DM notifications."""

    @pytest.mark.asyncio
    async def test_react_notifies_author(self, app, owner, member, joined_channel_id):
        message_id = await app.messages.send(
            owner.token, ConversationRef.channel(joined_channel_id), "hi"
        )

        await app.messages.react(member.token, message_id, 1)

        assert await feed_texts(app, owner.token) == [
            "gracehopper reacted to your message in channel general"
        ]

    @pytest.mark.asyncio
    async def test_react_in_dm_names_the_dm(self, app, owner, member):
        dm_id = await app.dms.create(owner.token, [member.auth_user_id])
        message_id = await app.messages.send(owner.token, ConversationRef.dm(dm_id), "hi")

        await app.messages.react(member.token, message_id, 1)

        assert await feed_texts(app, owner.token) == [
            "gracehopper reacted to your message in adalovelace, gracehopper"
        ]

    @pytest.mark.asyncio
    async def test_self_react_does_not_notify(self, app, owner, channel_id):
        message_id = await app.messages.send(owner.token, ConversationRef.channel(channel_id), "hi")

        await app.messages.react(owner.token, message_id, 1)

        assert await app.notifications.get(owner.token) == []

    @pytest.mark.asyncio
    async def test_invite_notifies_invitee(self, app, owner, member, channel_id):
        await app.channels.invite(owner.token, channel_id, member.auth_user_id)

        assert await feed_texts(app, member.token) == ["adalovelace added you to general"]

    @pytest.mark.asyncio
    async def test_dm_create_notifies_each_invitee(self, app, owner, member, outsider):
        await app.dms.create(owner.token, [member.auth_user_id, outsider.auth_user_id])

        expected = ["adalovelace added you to adalovelace, alanturing, gracehopper"]
        assert await feed_texts(app, member.token) == expected
        assert await feed_texts(app, outsider.token) == expected
        assert await app.notifications.get(owner.token) == []


class TestFeed:
    """Tests for feed ordering and capping."""

    @pytest.mark.asyncio
    async def test_newest_first_capped_at_twenty(self, app, owner, member, joined_channel_id):
        ref = ConversationRef.channel(joined_channel_id)
        for i in range(25):
            await app.messages.send(owner.token, ref, f"@gracehopper {i}")

        feed = await app.notifications.get(member.token)

        assert len(feed) == 20
        assert feed[0].notification_message.endswith("@gracehopper 24")
        # Storage keeps everything; only reads are capped
        user = app.store.user(member.auth_user_id)
        assert len(user.notifications) == 25

    @pytest.mark.asyncio
    async def test_invalid_token(self, app):
        with pytest.raises(AuthorizationFailure):
            await app.notifications.get("nope")
