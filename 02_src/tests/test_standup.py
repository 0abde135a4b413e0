"""Tests for StandupAggregator."""

import asyncio

import pytest

from memes.errors import AuthorizationFailure, ValidationFailure
from memes.models import ConversationRef


class TestStandupStart:
    """Tests for starting standups."""

    @pytest.mark.asyncio
    async def test_start_and_active(self, app, owner, channel_id):
        time_finish = await app.standups.start(owner.token, channel_id, 60)

        status = await app.standups.active(owner.token, channel_id)
        assert status.is_active is True
        assert status.time_finish == time_finish

    @pytest.mark.asyncio
    async def test_inactive_status(self, app, owner, channel_id):
        status = await app.standups.active(owner.token, channel_id)

        assert status.is_active is False
        assert status.time_finish is None

    @pytest.mark.asyncio
    async def test_negative_length(self, app, owner, channel_id):
        with pytest.raises(ValidationFailure):
            await app.standups.start(owner.token, channel_id, -1)

    @pytest.mark.asyncio
    async def test_already_active(self, app, owner, channel_id):
        await app.standups.start(owner.token, channel_id, 60)

        with pytest.raises(ValidationFailure):
            await app.standups.start(owner.token, channel_id, 60)

    @pytest.mark.asyncio
    async def test_non_member(self, app, member, channel_id):
        with pytest.raises(AuthorizationFailure):
            await app.standups.start(member.token, channel_id, 60)


class TestStandupSend:
    """Tests for buffering and packaging."""

    @pytest.mark.asyncio
    async def test_send_without_active_standup(self, app, owner, channel_id):
        with pytest.raises(ValidationFailure):
            await app.standups.send(owner.token, channel_id, "line")

    @pytest.mark.asyncio
    async def test_line_too_long(self, app, owner, channel_id):
        await app.standups.start(owner.token, channel_id, 60)

        with pytest.raises(ValidationFailure):
            await app.standups.send(owner.token, channel_id, "x" * 1001)

    @pytest.mark.asyncio
    async def test_lines_packaged_into_one_message(self, app, owner, member, joined_channel_id):
        ref = ConversationRef.channel(joined_channel_id)
        await app.standups.start(member.token, joined_channel_id, 1)
        await app.standups.send(owner.token, joined_channel_id, "shipped it @gracehopper")
        await app.standups.send(member.token, joined_channel_id, "reviewing")

        await asyncio.sleep(1.6)

        page = await app.messages.list_messages(owner.token, ref, 0)
        assert len(page.messages) == 1
        packaged = page.messages[0]
        assert packaged.u_id == member.auth_user_id
        assert packaged.message == (
            "adalovelace: shipped it @gracehopper\ngracehopper: reviewing"
        )
        # Buffered lines never notify
        assert await app.notifications.get(member.token) == []

        status = await app.standups.active(owner.token, joined_channel_id)
        assert status.is_active is False

    @pytest.mark.asyncio
    async def test_empty_standup_posts_nothing(self, app, owner, channel_id):
        await app.standups.start(owner.token, channel_id, 0)
        await asyncio.sleep(0.3)

        page = await app.messages.list_messages(owner.token, ConversationRef.channel(channel_id), 0)
        assert page.messages == []
        assert (await app.standups.active(owner.token, channel_id)).is_active is False


class TestStandupLeave:
    """Tests for leaving during a standup."""

    @pytest.mark.asyncio
    async def test_initiator_cannot_leave(self, app, owner, member, joined_channel_id):
        await app.standups.start(member.token, joined_channel_id, 60)

        with pytest.raises(ValidationFailure):
            await app.channels.leave(member.token, joined_channel_id)
        assert member.auth_user_id in app.store.channel(joined_channel_id).member_ids

    @pytest.mark.asyncio
    async def test_other_members_can_leave(self, app, owner, member, joined_channel_id):
        await app.standups.start(owner.token, joined_channel_id, 60)

        await app.channels.leave(member.token, joined_channel_id)


class TestStandupDeadline:
    """The window lasts the full requested length regardless of sub-second start."""

    @pytest.mark.asyncio
    async def test_one_second_standup_started_late_in_a_second(
        self, late_clock_app, late_clock
    ):
        app = late_clock_app
        session = await app.auth.register("ada@example.com", "password123", "Ada", "Lovelace")
        channel_id = await app.channels.create(session.token, "general", True)

        late_clock.rewind()
        time_finish = await app.standups.start(session.token, channel_id, 1)
        await asyncio.sleep(0.3)

        status = await app.standups.active(session.token, channel_id)
        assert status.is_active is True
        # Reported finish is rounded up to the next whole second
        assert time_finish == 1_000_002

        await asyncio.sleep(1.0)
        assert (await app.standups.active(session.token, channel_id)).is_active is False
