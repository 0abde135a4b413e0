"""In-memory workspace store: the single source of truth for all entities."""

from dataclasses import asdict
from typing import Iterable

from ..models import (
    Channel,
    ConversationRef,
    Dm,
    Message,
    Notification,
    Permission,
    React,
    Standup,
    User,
)

ID_KINDS = ("user", "channel", "dm", "message")


class WorkspaceStore:
    """Users, channels, DMs and messages held in insertion order.

    The store only looks things up and replaces them; every rule about who
    may do what lives in the layers above it. Ids come from monotonic
    counters so a deleted entity's id is never handed out again.
    """

    def __init__(self) -> None:
        self.users: dict[int, User] = {}
        self.channels: dict[int, Channel] = {}
        self.dms: dict[int, Dm] = {}
        self.messages: dict[int, Message] = {}
        self._next_ids: dict[str, int] = {}
        self.reset()

    def reset(self) -> None:
        """Drop everything, in place, so existing references stay valid."""
        self.users.clear()
        self.channels.clear()
        self.dms.clear()
        self.messages.clear()
        self._next_ids = {kind: 1 for kind in ID_KINDS}

    def allocate_id(self, kind: str) -> int:
        """Reserve the next id of ``kind``."""
        new_id = self._next_ids[kind]
        self._next_ids[kind] = new_id + 1
        return new_id

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def user(self, u_id: int) -> User | None:
        return self.users.get(u_id)

    def user_by_email(self, email: str) -> User | None:
        return next((u for u in self.users.values() if u.email == email), None)

    def user_by_handle(self, handle: str) -> User | None:
        return next((u for u in self.users.values() if u.handle_str == handle), None)

    def user_by_token(self, token_hash: str) -> User | None:
        return next((u for u in self.users.values() if token_hash in u.tokens), None)

    def user_by_reset_code(self, reset_code: str) -> User | None:
        return next(
            (u for u in self.users.values() if u.reset_code == reset_code), None
        )

    def active_users(self) -> list[User]:
        return [u for u in self.users.values() if not u.is_removed]

    def global_owner_ids(self) -> list[int]:
        return [u.u_id for u in self.users.values() if u.is_global_owner]

    def add_user(self, user: User) -> None:
        self.users[user.u_id] = user

    # ------------------------------------------------------------------
    # Conversations
    # ------------------------------------------------------------------
    def channel(self, channel_id: int) -> Channel | None:
        return self.channels.get(channel_id)

    def dm(self, dm_id: int) -> Dm | None:
        return self.dms.get(dm_id)

    def add_channel(self, channel: Channel) -> None:
        self.channels[channel.channel_id] = channel

    def add_dm(self, dm: Dm) -> None:
        self.dms[dm.dm_id] = dm

    def remove_dm(self, dm_id: int) -> None:
        """Delete a DM together with every message posted in it."""
        self.dms.pop(dm_id, None)
        for message_id in [m.message_id for m in self.messages.values() if m.dm_id == dm_id]:
            del self.messages[message_id]

    def conversation(self, ref: ConversationRef) -> Channel | Dm | None:
        if ref.is_channel:
            return self.channels.get(ref.channel_id)
        return self.dms.get(ref.dm_id)

    def member_ids(self, ref: ConversationRef) -> list[int]:
        conversation = self.conversation(ref)
        return list(conversation.member_ids) if conversation else []

    def conversation_name(self, ref: ConversationRef) -> str:
        conversation = self.conversation(ref)
        return conversation.name if conversation else ""

    def conversations_of(self, u_id: int) -> Iterable[Channel | Dm]:
        """Channels then DMs that ``u_id`` is currently a member of."""
        for channel in self.channels.values():
            if u_id in channel.member_ids:
                yield channel
        for dm in self.dms.values():
            if u_id in dm.member_ids:
                yield dm

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------
    def message(self, message_id: int) -> Message | None:
        return self.messages.get(message_id)

    def add_message(self, message: Message) -> None:
        self.messages[message.message_id] = message

    def remove_message(self, message_id: int) -> None:
        self.messages.pop(message_id, None)

    def conversation_messages(self, ref: ConversationRef) -> list[Message]:
        """Messages of one conversation in the order they were stored."""
        return [m for m in self.messages.values() if m.conversation == ref]

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        """Serialise the whole store to a JSON-compatible document."""
        return {
            "next_ids": dict(self._next_ids),
            "users": [asdict(u) for u in self.users.values()],
            "channels": [asdict(c) for c in self.channels.values()],
            "dms": [asdict(d) for d in self.dms.values()],
            "messages": [asdict(m) for m in self.messages.values()],
        }

    def load(self, data: dict) -> None:
        """Replace the store contents with a document from ``to_dict``."""
        self.reset()

        for udata in data.get("users", []):
            self.add_user(
                User(
                    u_id=udata["u_id"],
                    email=udata["email"],
                    password_hash=udata["password_hash"],
                    name_first=udata["name_first"],
                    name_last=udata["name_last"],
                    handle_str=udata["handle_str"],
                    permission=Permission(udata["permission"]),
                    tokens=list(udata.get("tokens", [])),
                    reset_code=udata.get("reset_code"),
                    notifications=[
                        Notification(**n) for n in udata.get("notifications", [])
                    ],
                    profile_img_url=udata.get("profile_img_url"),
                    time_created=udata.get("time_created", 0),
                )
            )

        for cdata in data.get("channels", []):
            self.add_channel(
                Channel(
                    channel_id=cdata["channel_id"],
                    name=cdata["name"],
                    is_public=cdata["is_public"],
                    owner_ids=list(cdata["owner_ids"]),
                    member_ids=list(cdata["member_ids"]),
                    standup=Standup(**cdata.get("standup", {})),
                    time_created=cdata.get("time_created", 0),
                )
            )

        for ddata in data.get("dms", []):
            self.add_dm(
                Dm(
                    dm_id=ddata["dm_id"],
                    creator_id=ddata["creator_id"],
                    name=ddata["name"],
                    member_ids=list(ddata["member_ids"]),
                    time_created=ddata.get("time_created", 0),
                )
            )

        for mdata in data.get("messages", []):
            self.add_message(
                Message(
                    message_id=mdata["message_id"],
                    u_id=mdata["u_id"],
                    channel_id=mdata["channel_id"],
                    dm_id=mdata["dm_id"],
                    message=mdata["message"],
                    time_sent=mdata["time_sent"],
                    reacts=[React(**r) for r in mdata.get("reacts", [])],
                    is_pinned=mdata.get("is_pinned", False),
                )
            )

        next_ids = data.get("next_ids", {})
        for kind, collection in (
            ("user", self.users),
            ("channel", self.channels),
            ("dm", self.dms),
            ("message", self.messages),
        ):
            self._next_ids[kind] = max(
                next_ids.get(kind, 1), max(collection, default=0) + 1
            )
