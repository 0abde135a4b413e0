"""Application bootstrap and lifecycle management."""

import asyncio
import os
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Protocol

from .config import resolve_db_path
from .event_bus import EventBus
from .identity import Credentials, IdentityResolver, IMailer, mailer_from_env
from .logging_config import context, get_logger
from .messaging import MessagingEngine
from .notifications import NotificationSink
from .permissions import PermissionEvaluator
from .photos import IPhotoProcessor, PhotoProcessor
from .scheduler import Scheduler
from .services import (
    AdminService,
    AuthService,
    ChannelService,
    DmService,
    NotificationService,
    SearchService,
    UserService,
)
from .standup import StandupAggregator
from .storage import IStorage, Storage, WorkspaceStore

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def reset(self) -> None:
        """Wipe all workspace data."""
        ...


class Application:
    """Main application bootstrap.

    Owns the single workspace store and the lock that serialises every
    request against it. Each committed transaction writes a full snapshot.
    """

    def __init__(
        self,
        db_path: str | None = None,
        clock: Callable[[], float] = time.time,
        mailer: IMailer | None = None,
        photos: IPhotoProcessor | None = None,
        secret: str | None = None,
    ):
        env_db_path = os.getenv("DATABASE_URL") if db_path is None else db_path
        self._db_path = resolve_db_path(env_db_path)
        self._clock = clock
        self._mailer = mailer
        self._photos = photos
        self._secret = secret

        self._lock = asyncio.Lock()
        self._store = WorkspaceStore()

        # Components (will be initialized in start())
        self._storage: IStorage | None = None
        self._event_bus: EventBus | None = None
        self._scheduler: Scheduler | None = None
        self._resolver: IdentityResolver | None = None
        self._sink: NotificationSink | None = None
        self._engine: MessagingEngine | None = None
        self._standups: StandupAggregator | None = None
        self._auth: AuthService | None = None
        self._channels: ChannelService | None = None
        self._dms: DmService | None = None
        self._users: UserService | None = None
        self._admin: AdminService | None = None
        self._search: SearchService | None = None
        self._notifications: NotificationService | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Storage, then the snapshot it holds
        self._storage = Storage(self._db_path)
        await self._storage.init()
        snapshot = await self._storage.load_snapshot()
        if snapshot:
            self._store.load(snapshot)
            logger.info(
                "Snapshot loaded",
                extra=context(users=len(self._store.users)),
            )

        # 2. EventBus and notification feeds
        self._event_bus = EventBus()
        self._sink = NotificationSink(self._store, self._event_bus)
        await self._sink.start()

        # 3. Identity and permissions
        credentials = Credentials(self._secret)
        self._resolver = IdentityResolver(self._store, credentials)
        permissions = PermissionEvaluator(self._resolver)

        # 4. Scheduler, messaging, standups
        self._scheduler = Scheduler(self._clock)
        self._engine = MessagingEngine(
            self._store,
            self._resolver,
            permissions,
            self._event_bus,
            self._scheduler,
            self.transaction,
            self._clock,
        )
        self._standups = StandupAggregator(
            self._store,
            self._resolver,
            permissions,
            self._engine,
            self._scheduler,
            self.transaction,
            self._clock,
        )
        self._standups.resume()

        # 5. Collaborators with side effects outside the store
        if self._mailer is None:
            self._mailer = mailer_from_env()
        if self._photos is None:
            self._photos = PhotoProcessor()
        self._photos.ensure_default()

        # 6. Services
        self._auth = AuthService(
            self._store,
            self._resolver,
            credentials,
            self._mailer,
            self.transaction,
            self._clock,
        )
        self._channels = ChannelService(
            self._store,
            self._resolver,
            permissions,
            self._engine,
            self._event_bus,
            self._scheduler,
            self.transaction,
            self._clock,
        )
        self._dms = DmService(
            self._store,
            self._resolver,
            permissions,
            self._engine,
            self._event_bus,
            self._scheduler,
            self.transaction,
            self._clock,
        )
        self._users = UserService(
            self._store, self._resolver, self._photos, self.transaction, self._clock
        )
        self._admin = AdminService(
            self._store, self._resolver, permissions, self._scheduler, self.transaction
        )
        self._search = SearchService(self._store, self._resolver, self.transaction)
        self._notifications = NotificationService(
            self._store, self._resolver, self._sink, self.transaction
        )
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._scheduler:
            await self._scheduler.stop()
        if self._event_bus:
            self._event_bus.unsubscribe_all()
        if self._storage:
            await self._storage.close()
            logger.info("Storage closed")

    async def reset(self) -> None:
        """Drop every user, conversation and pending job, and the snapshot."""
        async with self._lock:
            if self._scheduler:
                self._scheduler.cancel_all()
            self._store.reset()
            if self._storage:
                await self._storage.clear()
        logger.info("Reset complete")

    @asynccontextmanager
    async def transaction(self, persist: bool = True) -> AsyncIterator[None]:
        """Serialise access to the store; snapshot it after a clean exit.

        Not re-entrant. A failing body leaves nothing persisted, and every
        operation validates before it mutates.
        """
        async with self._lock:
            yield
            if persist and self._storage:
                await self._storage.save_snapshot(self._store.to_dict())

    @property
    def store(self) -> WorkspaceStore:
        return self._store

    @property
    def storage(self) -> IStorage:
        """Get storage instance."""
        if not self._storage:
            raise RuntimeError("Application not started")
        return self._storage

    @property
    def scheduler(self) -> Scheduler:
        if not self._scheduler:
            raise RuntimeError("Application not started")
        return self._scheduler

    @property
    def messages(self) -> MessagingEngine:
        if not self._engine:
            raise RuntimeError("Application not started")
        return self._engine

    @property
    def standups(self) -> StandupAggregator:
        if not self._standups:
            raise RuntimeError("Application not started")
        return self._standups

    @property
    def auth(self) -> AuthService:
        if not self._auth:
            raise RuntimeError("Application not started")
        return self._auth

    @property
    def channels(self) -> ChannelService:
        if not self._channels:
            raise RuntimeError("Application not started")
        return self._channels

    @property
    def dms(self) -> DmService:
        if not self._dms:
            raise RuntimeError("Application not started")
        return self._dms

    @property
    def users(self) -> UserService:
        if not self._users:
            raise RuntimeError("Application not started")
        return self._users

    @property
    def admin(self) -> AdminService:
        if not self._admin:
            raise RuntimeError("Application not started")
        return self._admin

    @property
    def search(self) -> SearchService:
        if not self._search:
            raise RuntimeError("Application not started")
        return self._search

    @property
    def notifications(self) -> NotificationService:
        if not self._notifications:
            raise RuntimeError("Application not started")
        return self._notifications
