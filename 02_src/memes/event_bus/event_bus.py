"""EventBus implementation for in-process workspace events."""

import asyncio
from typing import Awaitable, Callable, Protocol

from ..logging_config import get_logger
from ..models import Topic, WorkspaceEvent

logger = get_logger(__name__)


TopicHandler = Callable[[WorkspaceEvent], Awaitable[None]]


class IEventBus(Protocol):
    """In-memory pub/sub for WorkspaceEvents."""

    def subscribe(self, topic: Topic, handler: TopicHandler) -> None:
        """Subscribe a handler to a topic."""
        ...

    async def publish(self, event: WorkspaceEvent) -> None:
        """Publish an event: awaits every subscriber of its topic."""
        ...


class EventBus:
    """In-memory pub/sub event bus.

    Publishing awaits all handlers before returning, so side effects such as
    notifications land inside the caller's critical section. A failing
    handler is logged and never fails the publisher.
    """

    def __init__(self):
        self._subscribers: dict[Topic, list[TopicHandler]] = {
            topic: [] for topic in Topic
        }

    def subscribe(self, topic: Topic, handler: TopicHandler) -> None:
        """Subscribe a handler to a topic."""
        self._subscribers[topic].append(handler)

    def unsubscribe_all(self) -> None:
        """Forget every subscriber."""
        for handlers in self._subscribers.values():
            handlers.clear()

    async def publish(self, event: WorkspaceEvent) -> None:
        """Publish an event: awaits every subscriber of its topic."""
        handlers = self._subscribers.get(event.topic, [])
        if not handlers:
            return

        results = await asyncio.gather(
            *[handler(event) for handler in handlers],
            return_exceptions=True,
        )

        for i, result in enumerate(results):
            if isinstance(result, Exception):
                logger.error(
                    "Error in %s handler %s: %s", event.topic.value, i, result
                )
