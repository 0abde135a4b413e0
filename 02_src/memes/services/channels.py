"""Channel lifecycle and membership."""

import time
from typing import Callable

from ..config import CHANNEL_NAME_MAX_LENGTH
from ..errors import ValidationFailure
from ..event_bus import IEventBus
from ..identity import IdentityResolver
from ..logging_config import context, get_logger
from ..messaging import MessagingEngine, Transaction
from ..models import Channel, ChannelDetails, ConversationRef, MessagePage, Topic
from ..permissions import PermissionEvaluator
from ..scheduler import IScheduler
from ..storage import WorkspaceStore
from .base import WorkspaceService, publish

logger = get_logger(__name__)


class ChannelService(WorkspaceService):
    """Channels keep at least one owner while they have members."""

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

    async def create(self, token: str, name: str, is_public: bool) -> int:
        async with self._transaction():
            if not 1 <= len(name) <= CHANNEL_NAME_MAX_LENGTH:
                raise ValidationFailure("name must be between 1 and 20 characters")
            user = self._resolver.require_session(token)

            channel = Channel(
                channel_id=self._store.allocate_id("channel"),
                name=name,
                is_public=is_public,
                owner_ids=[user.u_id],
                member_ids=[user.u_id],
                time_created=self._now(),
            )
            self._store.add_channel(channel)
            logger.info(
                "Channel created",
                extra=context(channel_id=channel.channel_id, u_id=user.u_id),
            )
            return channel.channel_id

    async def list_mine(self, token: str) -> list[Channel]:
        async with self._transaction(persist=False):
            user = self._resolver.require_session(token)
            return [
                c for c in self._store.channels.values() if user.u_id in c.member_ids
            ]

    async def list_all(self, token: str) -> list[Channel]:
        """Every channel, private ones included."""
        async with self._transaction(persist=False):
            self._resolver.require_session(token)
            return list(self._store.channels.values())

    async def details(self, token: str, channel_id: int) -> ChannelDetails:
        async with self._transaction(persist=False):
            channel = self._channel_or_fail(channel_id)
            user = self._resolver.require_session(token)
            self._permissions.require_member(channel.ref, user)

            return ChannelDetails(
                name=channel.name,
                is_public=channel.is_public,
                owner_members=self._users(channel.owner_ids),
                all_members=self._users(channel.member_ids),
            )

    async def join(self, token: str, channel_id: int) -> None:
        async with self._transaction():
            channel = self._channel_or_fail(channel_id)
            user = self._resolver.require_session(token)
            self._permissions.check_join(channel, user)
            channel.member_ids.append(user.u_id)

    async def invite(self, token: str, channel_id: int, u_id: int) -> None:
        async with self._transaction():
            channel = self._channel_or_fail(channel_id)
            invitee = self._user_or_fail(u_id)
            if invitee.u_id in channel.member_ids:
                raise ValidationFailure("u_id is already a member of the channel")
            user = self._resolver.require_session(token)
            self._permissions.require_member(channel.ref, user)

            channel.member_ids.append(invitee.u_id)
            await publish(
                self._event_bus,
                Topic.CHANNEL_INVITED,
                user.u_id,
                channel.ref,
                u_id=invitee.u_id,
            )

    async def leave(self, token: str, channel_id: int) -> None:
        """Leave a channel, dropping ownership and pending send-later messages."""
        async with self._transaction():
            channel = self._channel_or_fail(channel_id)
            user = self._resolver.require_session(token)
            self._permissions.require_member(channel.ref, user)
            standup = channel.standup
            if standup.is_active and standup.initiator_id == user.u_id:
                raise ValidationFailure("user started the active standup")

            channel.drop_member(user.u_id)
            self._scheduler.cancel_for_member(channel.ref, user.u_id)

    async def add_owner(self, token: str, channel_id: int, u_id: int) -> None:
        async with self._transaction():
            channel = self._channel_or_fail(channel_id)
            target = self._user_or_fail(u_id)
            if target.u_id not in channel.member_ids:
                raise ValidationFailure("u_id is not a member of the channel")
            if target.u_id in channel.owner_ids:
                raise ValidationFailure("u_id is already an owner of the channel")
            user = self._resolver.require_session(token)
            self._permissions.check_manage_owners(channel, user)

            channel.owner_ids.append(target.u_id)

    async def remove_owner(self, token: str, channel_id: int, u_id: int) -> None:
        async with self._transaction():
            channel = self._channel_or_fail(channel_id)
            target = self._user_or_fail(u_id)
            if target.u_id not in channel.owner_ids:
                raise ValidationFailure("u_id is not an owner of the channel")
            if len(channel.owner_ids) == 1:
                raise ValidationFailure("u_id is the only owner of the channel")
            user = self._resolver.require_session(token)
            self._permissions.check_manage_owners(channel, user)

            channel.owner_ids.remove(target.u_id)

    async def messages(self, token: str, channel_id: int, start: int) -> MessagePage:
        return await self._engine.list_messages(
            token, ConversationRef.channel(channel_id), start
        )
