"""Deferred work scheduling."""

from .scheduler import SEND_LATER, STANDUP, IScheduler, JobCallback, ScheduledJob, Scheduler

__all__ = [
    "SEND_LATER",
    "STANDUP",
    "IScheduler",
    "JobCallback",
    "ScheduledJob",
    "Scheduler",
]
