"""Direct-message groups."""

import time
from typing import Callable

from ..errors import ValidationFailure
from ..event_bus import IEventBus
from ..identity import IdentityResolver
from ..logging_config import context, get_logger
from ..messaging import MessagingEngine, Transaction
from ..models import ConversationRef, Dm, DmDetails, MessagePage, Topic
from ..permissions import PermissionEvaluator
from ..scheduler import IScheduler
from ..storage import WorkspaceStore
from .base import WorkspaceService, publish

logger = get_logger(__name__)


class DmService(WorkspaceService):
    """DM membership is fixed at creation and only shrinks afterwards."""

    def __init__(
        self,
        store: WorkspaceStore,
        resolver: IdentityResolver,
        permissions: PermissionEvaluator,
        engine: MessagingEngine,
        event_bus: IEventBus,
        scheduler: IScheduler,
        transaction: Transaction,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(store, resolver, transaction, clock)
        self._permissions = permissions
        self._engine = engine
        self._event_bus = event_bus
        self._scheduler = scheduler

    async def create(self, token: str, u_ids: list[int]) -> int:
        """Open a DM between the caller and ``u_ids``.

        The name is the sorted, comma-joined handles of all members and is
        never recomputed.
        """
        async with self._transaction():
            invitees = [self._user_or_fail(u_id) for u_id in u_ids]
            if len(set(u_ids)) != len(u_ids):
                raise ValidationFailure("u_ids contains duplicates")
            user = self._resolver.require_session(token)
            if user.u_id in u_ids:
                raise ValidationFailure("u_ids contains duplicates")

            members = [user, *invitees]
            dm = Dm(
                dm_id=self._store.allocate_id("dm"),
                creator_id=user.u_id,
                name=", ".join(sorted(m.handle_str for m in members)),
                member_ids=[m.u_id for m in members],
                time_created=self._now(),
            )
            self._store.add_dm(dm)
            await publish(
                self._event_bus,
                Topic.DM_CREATED,
                user.u_id,
                dm.ref,
                u_ids=[m.u_id for m in invitees],
            )

            logger.info(
                "DM created", extra=context(dm_id=dm.dm_id, members=dm.member_ids)
            )
            return dm.dm_id

    async def list_mine(self, token: str) -> list[Dm]:
        async with self._transaction(persist=False):
            user = self._resolver.require_session(token)
            return [d for d in self._store.dms.values() if user.u_id in d.member_ids]

    async def remove(self, token: str, dm_id: int) -> None:
        """Delete the DM with its messages and pending deliveries. Creator only."""
        async with self._transaction():
            dm = self._dm_or_fail(dm_id)
            user = self._resolver.require_session(token)
            self._permissions.check_remove_dm(dm.ref, user)

            self._scheduler.cancel_for_conversation(dm.ref)
            self._store.remove_dm(dm_id)
            logger.info("DM removed", extra=context(dm_id=dm_id, u_id=user.u_id))

    async def details(self, token: str, dm_id: int) -> DmDetails:
        async with self._transaction(persist=False):
            dm = self._dm_or_fail(dm_id)
            user = self._resolver.require_session(token)
            self._permissions.require_member(dm.ref, user)
            return DmDetails(name=dm.name, members=self._users(dm.member_ids))

    async def leave(self, token: str, dm_id: int) -> None:
        """Leave a DM. The creator keeps the right to remove it only while a member."""
        async with self._transaction():
            dm = self._dm_or_fail(dm_id)
            user = self._resolver.require_session(token)
            self._permissions.require_member(dm.ref, user)

            dm.member_ids.remove(user.u_id)
            self._scheduler.cancel_for_member(dm.ref, user.u_id)

    async def messages(self, token: str, dm_id: int, start: int) -> MessagePage:
        return await self._engine.list_messages(token, ConversationRef.dm(dm_id), start)
