"""Per-user notification feeds fed from workspace events."""

from typing import Protocol

from ..config import NOTIFICATION_LIMIT, NOTIFICATION_PREVIEW_LENGTH
from ..event_bus import IEventBus
from ..logging_config import context, get_logger
from ..messaging.tags import unique_tags
from ..models import ConversationRef, Notification, Topic, User, WorkspaceEvent
from ..storage import WorkspaceStore

logger = get_logger(__name__)


class INotificationSink(Protocol):
    """Turns events into feed entries and serves the recent ones."""

    async def start(self) -> None:
        ...

    def get_recent(self, user: User) -> list[Notification]:
        ...


class NotificationSink:
    """Subscribes to the EventBus and prepends entries to user feeds.

    Feeds are never trimmed on write; ``get_recent`` returns the newest
    NOTIFICATION_LIMIT entries.
    """

    def __init__(self, store: WorkspaceStore, event_bus: IEventBus):
        self._store = store
        self._event_bus = event_bus

    async def start(self) -> None:
        self._event_bus.subscribe(Topic.MESSAGE_POSTED, self._on_message_posted)
        self._event_bus.subscribe(Topic.MESSAGE_REACTED, self._on_message_reacted)
        self._event_bus.subscribe(Topic.CHANNEL_INVITED, self._on_channel_invited)
        self._event_bus.subscribe(Topic.DM_CREATED, self._on_dm_created)
        logger.info("NotificationSink subscribed")

    def get_recent(self, user: User) -> list[Notification]:
        return user.notifications[:NOTIFICATION_LIMIT]

    async def _on_message_posted(self, event: WorkspaceEvent) -> None:
        body = event.payload["body"]
        members = [
            u for u in map(self._store.user, self._store.member_ids(event.conversation)) if u
        ]
        name = self._store.conversation_name(event.conversation)
        text = f"{self._handle(event.actor_id)} tagged you in {name}: {body[:NOTIFICATION_PREVIEW_LENGTH]}"

        for handle in unique_tags(body):
            tagged = self._tagged_member(handle, members)
            if tagged is None or tagged.u_id == event.actor_id:
                continue
            self._push(tagged, event.conversation, text)

    async def _on_message_reacted(self, event: WorkspaceEvent) -> None:
        author = self._store.user(event.payload["author_id"])
        if author is None or author.u_id == event.actor_id:
            return
        name = self._store.conversation_name(event.conversation)
        if event.conversation.is_channel:
            name = f"channel {name}"
        self._push(
            author,
            event.conversation,
            f"{self._handle(event.actor_id)} reacted to your message in {name}",
        )

    async def _on_channel_invited(self, event: WorkspaceEvent) -> None:
        invitee = self._store.user(event.payload["u_id"])
        if invitee is None:
            return
        name = self._store.conversation_name(event.conversation)
        self._push(
            invitee,
            event.conversation,
            f"{self._handle(event.actor_id)} added you to {name}",
        )

    async def _on_dm_created(self, event: WorkspaceEvent) -> None:
        name = self._store.conversation_name(event.conversation)
        text = f"{self._handle(event.actor_id)} added you to {name}"
        for u_id in event.payload["u_ids"]:
            invitee = self._store.user(u_id)
            if invitee is not None:
                self._push(invitee, event.conversation, text)

    @staticmethod
    def _tagged_member(handle: str, members: list[User]) -> User | None:
        """Exact handle match among ``members``, else a case-insensitive one."""
        for member in members:
            if member.handle_str == handle:
                return member
        lowered = handle.lower()
        for member in members:
            if member.handle_str is not None and member.handle_str.lower() == lowered:
                return member
        return None

    def _handle(self, u_id: int) -> str:
        user = self._store.user(u_id)
        return user.handle_str if user and user.handle_str else ""

    def _push(self, user: User, ref: ConversationRef, text: str) -> None:
        user.notifications.insert(
            0,
            Notification(
                channel_id=ref.channel_id,
                dm_id=ref.dm_id,
                notification_message=text,
            ),
        )
        logger.debug("Notification added", extra=context(u_id=user.u_id))
