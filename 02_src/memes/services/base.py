"""Shared plumbing for workspace services."""

import time
from datetime import datetime, timezone
from typing import Callable

from ..errors import ValidationFailure
from ..event_bus import IEventBus
from ..identity import IdentityResolver
from ..messaging import Transaction
from ..models import Channel, ConversationRef, Dm, Topic, User, WorkspaceEvent
from ..storage import WorkspaceStore


class WorkspaceService:
    """Holds the collaborators every service needs and the common lookups.

    Each public coroutine of a subclass runs exactly one transaction and
    never calls another public coroutine while holding it.
    """

    def __init__(
        self,
        store: WorkspaceStore,
        resolver: IdentityResolver,
        transaction: Transaction,
        clock: Callable[[], float] = time.time,
    ):
        self._store = store
        self._resolver = resolver
        self._transaction = transaction
        self._clock = clock

    def _now(self) -> int:
        return int(self._clock())

    def _channel_or_fail(self, channel_id: int) -> Channel:
        channel = self._store.channel(channel_id)
        if channel is None:
            raise ValidationFailure("channel_id is invalid")
        return channel

    def _dm_or_fail(self, dm_id: int) -> Dm:
        dm = self._store.dm(dm_id)
        if dm is None:
            raise ValidationFailure("dm_id is invalid")
        return dm

    def _user_or_fail(self, u_id: int, allow_removed: bool = False) -> User:
        user = self._store.user(u_id)
        if user is None or (user.is_removed and not allow_removed):
            raise ValidationFailure("u_id is invalid")
        return user

    def _users(self, u_ids: list[int]) -> list[User]:
        return [self._store.users[u_id] for u_id in u_ids if u_id in self._store.users]


async def publish(
    event_bus: IEventBus, topic: Topic, actor_id: int, ref: ConversationRef, **payload
) -> None:
    """Publish a WorkspaceEvent stamped with the current UTC time."""
    await event_bus.publish(
        WorkspaceEvent(
            topic=topic,
            actor_id=actor_id,
            conversation=ref,
            timestamp=datetime.now(timezone.utc),
            payload=payload,
        )
    )
