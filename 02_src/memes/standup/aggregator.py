"""Standup windows: buffer lines, then post them as one message."""

import math
import time
from typing import Callable

from ..config import MESSAGE_MAX_LENGTH
from ..errors import ValidationFailure
from ..identity import IdentityResolver
from ..logging_config import context, get_logger
from ..messaging import MessagingEngine, Transaction
from ..models import Channel, StandupStatus
from ..permissions import PermissionEvaluator
from ..scheduler import STANDUP, IScheduler
from ..storage import WorkspaceStore

logger = get_logger(__name__)


class StandupAggregator:
    """Runs at most one standup per channel.

    A standup is inactive, then active until ``time_finish``, then inactive
    again. Lines sent meanwhile are buffered without tag scanning and posted
    as a single message authored by the initiator.
    """

    def __init__(
        self,
        store: WorkspaceStore,
        resolver: IdentityResolver,
        permissions: PermissionEvaluator,
        engine: MessagingEngine,
        scheduler: IScheduler,
        transaction: Transaction,
        clock: Callable[[], float] = time.time,
    ):
        self._store = store
        self._resolver = resolver
        self._permissions = permissions
        self._engine = engine
        self._scheduler = scheduler
        self._transaction = transaction
        self._clock = clock

    async def start(self, token: str, channel_id: int, length: int) -> int:
        """Open a standup for ``length`` seconds; returns its finish time."""
        async with self._transaction():
            if length < 0:
                raise ValidationFailure("length cannot be negative")
            channel = self._channel_or_fail(channel_id)
            if channel.standup.is_active:
                raise ValidationFailure("a standup is already active")
            user = self._resolver.require_session(token)
            self._permissions.require_member(channel.ref, user)

            standup = channel.standup
            standup.reset()
            standup.is_active = True
            standup.initiator_id = user.u_id
            standup.deadline = self._clock() + length
            standup.time_finish = math.ceil(standup.deadline)
            self._schedule_finish(channel)

            logger.info(
                "Standup started",
                extra=context(channel_id=channel_id, u_id=user.u_id, length=length),
            )
            return standup.time_finish

    async def active(self, token: str, channel_id: int) -> StandupStatus:
        async with self._transaction(persist=False):
            channel = self._channel_or_fail(channel_id)
            user = self._resolver.require_session(token)
            self._permissions.require_member(channel.ref, user)

            standup = channel.standup
            return StandupStatus(
                is_active=standup.is_active,
                time_finish=standup.time_finish if standup.is_active else None,
            )

    async def send(self, token: str, channel_id: int, line: str) -> None:
        async with self._transaction():
            channel = self._channel_or_fail(channel_id)
            if len(line) > MESSAGE_MAX_LENGTH:
                raise ValidationFailure("message is too long")
            if not channel.standup.is_active:
                raise ValidationFailure("no standup is active")
            user = self._resolver.require_session(token)
            self._permissions.require_member(channel.ref, user)

            channel.standup.buffer.append(f"{user.handle_str}: {line}")

    def resume(self) -> int:
        """Reschedule standups left active in a loaded snapshot."""
        resumed = 0
        for channel in self._store.channels.values():
            if channel.standup.is_active:
                self._schedule_finish(channel)
                resumed += 1
        if resumed:
            logger.info("Resumed %d standup(s)", resumed)
        return resumed

    def _schedule_finish(self, channel: Channel) -> None:
        channel_id = channel.channel_id
        standup = channel.standup
        # Snapshots written before deadlines were kept only carry time_finish
        deliver_at = standup.deadline if standup.deadline is not None else standup.time_finish

        async def finish() -> None:
            await self._finish(channel_id)

        self._scheduler.schedule(
            deliver_at,
            channel.ref,
            standup.initiator_id,
            finish,
            kind=STANDUP,
        )

    async def _finish(self, channel_id: int) -> None:
        async with self._transaction():
            channel = self._store.channel(channel_id)
            if channel is None or not channel.standup.is_active:
                return

            standup = channel.standup
            if standup.buffer:
                await self._engine.post(
                    standup.initiator_id,
                    channel.ref,
                    "\n".join(standup.buffer),
                    notify=False,
                )
            logger.info(
                "Standup finished",
                extra=context(channel_id=channel_id, lines=len(standup.buffer)),
            )
            standup.reset()

    def _channel_or_fail(self, channel_id: int) -> Channel:
        channel = self._store.channel(channel_id)
        if channel is None:
            raise ValidationFailure("channel_id is invalid")
        return channel
