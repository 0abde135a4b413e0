"""Messaging engine: message lifecycle in channels and DMs."""

import time
from datetime import datetime, timezone
from typing import AsyncContextManager, Callable, Protocol

from ..config import MESSAGE_MAX_LENGTH, PAGE_SIZE, VALID_REACT_IDS
from ..errors import ValidationFailure
from ..event_bus import IEventBus
from ..identity import IdentityResolver
from ..logging_config import context, get_logger
from ..models import (
    Channel,
    ConversationRef,
    Dm,
    Message,
    MessagePage,
    React,
    Topic,
    WorkspaceEvent,
)
from ..permissions import PermissionEvaluator
from ..scheduler import SEND_LATER, IScheduler
from ..storage import WorkspaceStore

logger = get_logger(__name__)

Transaction = Callable[..., AsyncContextManager[None]]

SHARE_SEPARATOR = "=" * 51


class IMessagingEngine(Protocol):
    """Create, change and read messages of a conversation."""

    async def send(self, token: str, ref: ConversationRef, body: str) -> int:
        ...

    async def edit(self, token: str, message_id: int, body: str) -> None:
        ...

    async def remove(self, token: str, message_id: int) -> None:
        ...

    async def list_messages(
        self, token: str, ref: ConversationRef, start: int
    ) -> MessagePage:
        ...


class MessagingEngine:
    """Message operations shared by channels and DMs.

    Public coroutines each run one transaction. ``post`` and the other
    underscore helpers expect the caller to already hold it.
    """

    def __init__(
        self,
        store: WorkspaceStore,
        resolver: IdentityResolver,
        permissions: PermissionEvaluator,
        event_bus: IEventBus,
        scheduler: IScheduler,
        transaction: Transaction,
        clock: Callable[[], float] = time.time,
    ):
        self._store = store
        self._resolver = resolver
        self._permissions = permissions
        self._event_bus = event_bus
        self._scheduler = scheduler
        self._transaction = transaction
        self._clock = clock

    # ------------------------------------------------------------------
    # Send / edit / remove
    # ------------------------------------------------------------------
    async def send(self, token: str, ref: ConversationRef, body: str) -> int:
        """Post ``body`` now; returns the new message id."""
        async with self._transaction():
            self._check_length(body)
            self._conversation_or_fail(ref)
            user = self._resolver.require_session(token)
            self._permissions.require_member(ref, user)

            message = await self.post(user.u_id, ref, body)
            return message.message_id

    async def edit(self, token: str, message_id: int, body: str) -> None:
        """Replace the body; an empty body removes the message."""
        async with self._transaction():
            if len(body) > MESSAGE_MAX_LENGTH:
                raise ValidationFailure("message is too long")
            message = self._message_or_fail(message_id)
            user = self._resolver.require_session(token)
            self._permissions.check_modify_message(message, user)

            if not body:
                self._store.remove_message(message_id)
                logger.info(
                    "Message removed by empty edit",
                    extra=context(message_id=message_id, u_id=user.u_id),
                )
                return

            message.message = body
            await self._publish(
                Topic.MESSAGE_POSTED,
                user.u_id,
                message.conversation,
                message_id=message_id,
                body=body,
            )

    async def remove(self, token: str, message_id: int) -> None:
        async with self._transaction():
            message = self._message_or_fail(message_id)
            user = self._resolver.require_session(token)
            self._permissions.check_modify_message(message, user)
            self._store.remove_message(message_id)

    # ------------------------------------------------------------------
    # Reacts and pins
    # ------------------------------------------------------------------
    async def react(self, token: str, message_id: int, react_id: int) -> None:
        async with self._transaction():
            message = self._message_or_fail(message_id)
            self._check_react_id(react_id)
            user = self._resolver.require_session(token)
            self._permissions.require_member(message.conversation, user)

            react = message.react(react_id)
            if react is not None and user.u_id in react.u_ids:
                raise ValidationFailure("user has already reacted")
            if react is None:
                react = React(react_id=react_id)
                message.reacts.append(react)
            react.u_ids.append(user.u_id)

            await self._publish(
                Topic.MESSAGE_REACTED,
                user.u_id,
                message.conversation,
                message_id=message_id,
                author_id=message.u_id,
            )

    async def unreact(self, token: str, message_id: int, react_id: int) -> None:
        async with self._transaction():
            message = self._message_or_fail(message_id)
            self._check_react_id(react_id)
            user = self._resolver.require_session(token)
            self._permissions.require_member(message.conversation, user)

            react = message.react(react_id)
            if react is None or user.u_id not in react.u_ids:
                raise ValidationFailure("user has not reacted")
            react.u_ids.remove(user.u_id)
            if not react.u_ids:
                message.reacts.remove(react)

    async def pin(self, token: str, message_id: int) -> None:
        await self._set_pinned(token, message_id, True)

    async def unpin(self, token: str, message_id: int) -> None:
        await self._set_pinned(token, message_id, False)

    async def _set_pinned(self, token: str, message_id: int, pinned: bool) -> None:
        async with self._transaction():
            message = self._message_or_fail(message_id)
            user = self._resolver.require_session(token)
            if message.is_pinned == pinned:
                state = "pinned" if pinned else "not pinned"
                raise ValidationFailure(f"message is already {state}")
            self._permissions.check_pin(message, user)
            message.is_pinned = pinned

    # ------------------------------------------------------------------
    # Share
    # ------------------------------------------------------------------
    async def share(
        self,
        token: str,
        og_message_id: int,
        message: str,
        channel_id: int,
        dm_id: int,
    ) -> int:
        """Copy a message into another conversation; returns the new id.

        The copy is plain text, so later edits of the original never
        reach it.
        """
        async with self._transaction():
            if channel_id == -1 and dm_id == -1:
                raise ValidationFailure("no channel or dm given")
            if channel_id != -1 and dm_id != -1:
                raise ValidationFailure("cannot share to a channel and a dm at once")
            target = ConversationRef(channel_id=channel_id, dm_id=dm_id)
            self._conversation_or_fail(target)
            if len(message) > MESSAGE_MAX_LENGTH:
                raise ValidationFailure("message is too long")
            og_message = self._message_or_fail(og_message_id)

            user = self._resolver.require_session(token)
            self._permissions.require_member(og_message.conversation, user)
            self._permissions.require_member(target, user)

            framed = f"{SHARE_SEPARATOR}\n{og_message.message}\n{SHARE_SEPARATOR}"
            body = f"{message}\n{framed}" if message else framed
            shared = await self.post(user.u_id, target, body)
            return shared.message_id

    # ------------------------------------------------------------------
    # Send later
    # ------------------------------------------------------------------
    async def send_later(
        self, token: str, ref: ConversationRef, body: str, time_sent: int
    ) -> int:
        """Reserve an id now and deliver the message at ``time_sent``.

        The message stays invisible until delivery. It is dropped if the
        conversation is gone or the sender left it by then.
        """
        async with self._transaction():
            self._check_length(body)
            if time_sent < self._clock():
                raise ValidationFailure("time_sent is in the past")
            self._conversation_or_fail(ref)
            user = self._resolver.require_session(token)
            self._permissions.require_member(ref, user)

            message_id = self._store.allocate_id("message")
            u_id = user.u_id

            async def deliver() -> None:
                await self._deliver(message_id, u_id, ref, body, time_sent)

            self._scheduler.schedule(time_sent, ref, u_id, deliver, kind=SEND_LATER)
            logger.info(
                "Message scheduled",
                extra=context(message_id=message_id, u_id=u_id, time_sent=time_sent),
            )
            return message_id

    async def _deliver(
        self,
        message_id: int,
        u_id: int,
        ref: ConversationRef,
        body: str,
        time_sent: int,
    ) -> None:
        async with self._transaction():
            conversation = self._store.conversation(ref)
            if conversation is None or u_id not in conversation.member_ids:
                logger.info(
                    "Scheduled message dropped",
                    extra=context(message_id=message_id, u_id=u_id),
                )
                return
            await self.post(u_id, ref, body, time_sent=time_sent, message_id=message_id)
            logger.info("Scheduled message delivered", extra=context(message_id=message_id))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    async def list_messages(
        self, token: str, ref: ConversationRef, start: int
    ) -> MessagePage:
        """Up to PAGE_SIZE messages from ``start``, newest first."""
        async with self._transaction(persist=False):
            self._conversation_or_fail(ref)
            # Reverse insertion order first so equal timestamps list newest first
            messages = sorted(
                reversed(self._store.conversation_messages(ref)),
                key=lambda m: m.time_sent,
                reverse=True,
            )
            if start < 0 or start > len(messages):
                raise ValidationFailure("start is out of range")
            user = self._resolver.require_session(token)
            self._permissions.require_member(ref, user)

            end = start + PAGE_SIZE
            return MessagePage(
                messages=messages[start:end],
                start=start,
                end=end if end < len(messages) else -1,
                viewer_id=user.u_id,
            )

    # ------------------------------------------------------------------
    # Internals (caller holds the transaction)
    # ------------------------------------------------------------------
    async def post(
        self,
        u_id: int,
        ref: ConversationRef,
        body: str,
        time_sent: int | None = None,
        message_id: int | None = None,
        notify: bool = True,
    ) -> Message:
        """Append a message to the store and, if ``notify``, scan it for tags."""
        message = Message(
            message_id=message_id if message_id is not None else self._store.allocate_id("message"),
            u_id=u_id,
            channel_id=ref.channel_id,
            dm_id=ref.dm_id,
            message=body,
            time_sent=time_sent if time_sent is not None else self._now(),
        )
        self._store.add_message(message)

        if notify:
            await self._publish(
                Topic.MESSAGE_POSTED,
                u_id,
                ref,
                message_id=message.message_id,
                body=body,
            )
        return message

    async def _publish(
        self, topic: Topic, actor_id: int, ref: ConversationRef, **payload
    ) -> None:
        await self._event_bus.publish(
            WorkspaceEvent(
                topic=topic,
                actor_id=actor_id,
                conversation=ref,
                timestamp=datetime.now(timezone.utc),
                payload=payload,
            )
        )

    def _now(self) -> int:
        return int(self._clock())

    def _check_length(self, body: str) -> None:
        if not 1 <= len(body) <= MESSAGE_MAX_LENGTH:
            raise ValidationFailure("message length must be between 1 and 1000")

    def _check_react_id(self, react_id: int) -> None:
        if react_id not in VALID_REACT_IDS:
            raise ValidationFailure("react_id is invalid")

    def _conversation_or_fail(self, ref: ConversationRef) -> Channel | Dm:
        conversation = self._store.conversation(ref)
        if conversation is None:
            kind = "channel_id" if ref.is_channel else "dm_id"
            raise ValidationFailure(f"{kind} is invalid")
        return conversation

    def _message_or_fail(self, message_id: int) -> Message:
        message = self._store.message(message_id)
        if message is None:
            raise ValidationFailure("message_id is invalid")
        return message
