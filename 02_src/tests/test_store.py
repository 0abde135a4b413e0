"""Tests for WorkspaceStore."""

from memes.models import Channel, ConversationRef, Dm, Message, Permission, User


def make_user(u_id: int, handle: str, permission=Permission.MEMBER) -> User:
    return User(
        u_id=u_id,
        email=f"{handle}@example.com",
        password_hash="x",
        name_first=handle,
        name_last="user",
        handle_str=handle,
        permission=permission,
    )


def make_message(store, ref: ConversationRef, body: str, time_sent: int = 0) -> Message:
    message = Message(
        message_id=store.allocate_id("message"),
        u_id=1,
        channel_id=ref.channel_id,
        dm_id=ref.dm_id,
        message=body,
        time_sent=time_sent,
    )
    store.add_message(message)
    return message


class TestIds:
    """Tests for id allocation."""

    def test_ids_start_at_one_per_kind(self, store):
        assert store.allocate_id("user") == 1
        assert store.allocate_id("channel") == 1
        assert store.allocate_id("user") == 2

    def test_removed_message_id_is_not_reused(self, store):
        ref = ConversationRef.channel(1)
        first = make_message(store, ref, "a")
        store.remove_message(first.message_id)

        second = make_message(store, ref, "b")
        assert second.message_id != first.message_id

    def test_reset_restarts_ids(self, store):
        store.allocate_id("dm")
        store.reset()
        assert store.allocate_id("dm") == 1


class TestLookups:
    """Tests for store lookups."""

    def test_user_by_handle_is_exact(self, store):
        store.add_user(make_user(1, "Mixed"))

        assert store.user_by_handle("mixed") is None
        assert store.user_by_handle("Mixed").u_id == 1

    def test_user_by_token(self, store):
        user = make_user(1, "ada")
        user.tokens.append("hash-1")
        store.add_user(user)

        assert store.user_by_token("hash-1") is user
        assert store.user_by_token("hash-2") is None

    def test_global_owner_ids(self, store):
        store.add_user(make_user(1, "a", Permission.OWNER))
        store.add_user(make_user(2, "b"))
        store.add_user(make_user(3, "c", Permission.REMOVED))

        assert store.global_owner_ids() == [1]
        assert [u.u_id for u in store.active_users()] == [1, 2]

    def test_conversations_of_lists_channels_then_dms(self, store):
        store.add_channel(Channel(1, "one", True, [1], [1]))
        store.add_channel(Channel(2, "two", True, [2], [2]))
        store.add_dm(Dm(1, creator_id=2, name="a, b", member_ids=[2, 1]))

        conversations = list(store.conversations_of(1))

        assert [c.ref for c in conversations] == [
            ConversationRef.channel(1),
            ConversationRef.dm(1),
        ]

    def test_remove_dm_drops_its_messages(self, store):
        store.add_dm(Dm(1, creator_id=1, name="a", member_ids=[1]))
        store.add_channel(Channel(1, "one", True, [1], [1]))
        make_message(store, ConversationRef.dm(1), "in dm")
        kept = make_message(store, ConversationRef.channel(1), "in channel")

        store.remove_dm(1)

        assert store.dm(1) is None
        assert list(store.messages) == [kept.message_id]


class TestSnapshot:
    """Tests for to_dict / load."""

    def test_load_restores_entities(self, store):
        from memes.storage import WorkspaceStore

        store.add_user(make_user(store.allocate_id("user"), "ada", Permission.OWNER))
        channel = Channel(store.allocate_id("channel"), "general", False, [1], [1])
        channel.standup.is_active = True
        channel.standup.initiator_id = 1
        channel.standup.time_finish = 123
        channel.standup.buffer.append("ada: hi")
        store.add_channel(channel)
        message = make_message(store, channel.ref, "hello", time_sent=5)
        message.is_pinned = True

        restored = WorkspaceStore()
        restored.load(store.to_dict())

        assert restored.user(1).permission == Permission.OWNER
        assert restored.channel(1).is_public is False
        assert restored.channel(1).standup.buffer == ["ada: hi"]
        assert restored.message(message.message_id).is_pinned is True
        assert restored.message(message.message_id).conversation == channel.ref

    def test_load_keeps_counters_past_deleted_ids(self, store):
        from memes.storage import WorkspaceStore

        ref = ConversationRef.channel(1)
        make_message(store, ref, "a")
        doomed = make_message(store, ref, "b")
        store.remove_message(doomed.message_id)

        restored = WorkspaceStore()
        restored.load(store.to_dict())

        assert restored.allocate_id("message") == doomed.message_id + 1
