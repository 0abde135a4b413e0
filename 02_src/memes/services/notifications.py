"""Notification feed reads."""

from ..identity import IdentityResolver
from ..messaging import Transaction
from ..models import Notification
from ..notifications import NotificationSink
from ..storage import WorkspaceStore
from .base import WorkspaceService


class NotificationService(WorkspaceService):
    def __init__(
        self,
        store: WorkspaceStore,
        resolver: IdentityResolver,
        sink: NotificationSink,
        transaction: Transaction,
    ):
        super().__init__(store, resolver, transaction)
        self._sink = sink

    async def get(self, token: str) -> list[Notification]:
        async with self._transaction(persist=False):
            user = self._resolver.require_session(token)
            return self._sink.get_recent(user)
