"""Cancellable deferred work for send-later delivery and standup completion."""

import asyncio
import itertools
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Protocol

from ..logging_config import context, get_logger
from ..models import ConversationRef

logger = get_logger(__name__)

JobCallback = Callable[[], Awaitable[None]]

SEND_LATER = "send_later"
STANDUP = "standup"


@dataclass
class ScheduledJob:
    """One pending callback bound to a conversation and the user who queued it."""

    job_id: int
    kind: str
    conversation: ConversationRef
    owner_id: int
    deliver_at: float
    task: asyncio.Task | None = None


class IScheduler(Protocol):
    """Runs callbacks at a wall-clock instant unless cancelled first."""

    def schedule(
        self,
        deliver_at: float,
        conversation: ConversationRef,
        owner_id: int,
        callback: JobCallback,
        kind: str = SEND_LATER,
    ) -> ScheduledJob:
        ...

    def cancel_for_conversation(self, conversation: ConversationRef) -> int:
        ...

    def cancel_all(self) -> int:
        ...


class Scheduler:
    """One asyncio task per job, sleeping until its deadline.

    Jobs are cancelled explicitly when their conversation disappears or
    their owner leaves it. A job is deregistered right before its callback
    runs, so a cancel never interrupts a delivery already in progress.
    Callbacks still re-check their own preconditions.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._jobs: dict[int, ScheduledJob] = {}
        self._ids = itertools.count(1)

    def schedule(
        self,
        deliver_at: float,
        conversation: ConversationRef,
        owner_id: int,
        callback: JobCallback,
        kind: str = SEND_LATER,
    ) -> ScheduledJob:
        job = ScheduledJob(
            job_id=next(self._ids),
            kind=kind,
            conversation=conversation,
            owner_id=owner_id,
            deliver_at=deliver_at,
        )
        self._jobs[job.job_id] = job
        job.task = asyncio.create_task(self._run(job, callback))

        logger.debug(
            "Job scheduled",
            extra=context(job_id=job.job_id, kind=kind, deliver_at=deliver_at),
        )
        return job

    def cancel(self, job_id: int) -> bool:
        job = self._jobs.pop(job_id, None)
        if job is None:
            return False
        if job.task is not None:
            job.task.cancel()
        logger.info(
            "Job cancelled", extra=context(job_id=job_id, kind=job.kind)
        )
        return True

    def cancel_for_conversation(self, conversation: ConversationRef) -> int:
        """Cancel every job targeting ``conversation``."""
        return self._cancel_matching(lambda job: job.conversation == conversation)

    def cancel_for_member(
        self, conversation: ConversationRef, u_id: int, kind: str = SEND_LATER
    ) -> int:
        """Cancel jobs ``u_id`` queued into ``conversation``."""
        return self._cancel_matching(
            lambda job: job.conversation == conversation
            and job.owner_id == u_id
            and job.kind == kind
        )

    def cancel_for_user(self, u_id: int, kind: str = SEND_LATER) -> int:
        return self._cancel_matching(
            lambda job: job.owner_id == u_id and job.kind == kind
        )

    def cancel_all(self) -> int:
        return self._cancel_matching(lambda job: True)

    def pending(self, conversation: ConversationRef | None = None) -> list[ScheduledJob]:
        return [
            job
            for job in self._jobs.values()
            if conversation is None or job.conversation == conversation
        ]

    async def stop(self) -> None:
        """Cancel all jobs and wait for their tasks to unwind."""
        tasks = [job.task for job in self._jobs.values() if job.task is not None]
        self.cancel_all()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def _cancel_matching(self, predicate: Callable[[ScheduledJob], bool]) -> int:
        matching = [job_id for job_id, job in self._jobs.items() if predicate(job)]
        for job_id in matching:
            self.cancel(job_id)
        return len(matching)

    async def _run(self, job: ScheduledJob, callback: JobCallback) -> None:
        try:
            delay = job.deliver_at - self._clock()
            await asyncio.sleep(max(0.0, delay))
        except asyncio.CancelledError:
            return

        if self._jobs.pop(job.job_id, None) is None:
            return

        try:
            await callback()
        except Exception as e:
            logger.error(
                "Scheduled job %s failed: %s", job.job_id, e, exc_info=True
            )
