"""User profiles, photos and statistics."""

import time
from typing import Callable

from ..config import public_url
from ..errors import ValidationFailure
from ..identity import IdentityResolver, is_valid_handle
from ..logging_config import context, get_logger
from ..messaging import Transaction
from ..models import User, UserStats, WorkspaceStats
from ..photos import IPhotoProcessor
from ..storage import WorkspaceStore
from .auth import check_email, check_name
from .base import WorkspaceService

logger = get_logger(__name__)


class UserService(WorkspaceService):
    def __init__(
        self,
        store: WorkspaceStore,
        resolver: IdentityResolver,
        photos: IPhotoProcessor,
        transaction: Transaction,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(store, resolver, transaction, clock)
        self._photos = photos

    async def profile(self, token: str, u_id: int) -> User:
        """Profile of any user; removed users are still returned, scrubbed."""
        async with self._transaction(persist=False):
            target = self._user_or_fail(u_id, allow_removed=True)
            self._resolver.require_session(token)
            return target

    async def all(self, token: str) -> list[User]:
        async with self._transaction(persist=False):
            self._resolver.require_session(token)
            return self._store.active_users()

    async def set_name(self, token: str, name_first: str, name_last: str) -> None:
        async with self._transaction():
            check_name(name_first, "name_first")
            check_name(name_last, "name_last")
            user = self._resolver.require_session(token)
            user.name_first = name_first
            user.name_last = name_last

    async def set_email(self, token: str, email: str) -> None:
        async with self._transaction():
            check_email(email)
            user = self._resolver.require_session(token)
            owner = self._store.user_by_email(email)
            if owner is not None and owner.u_id != user.u_id:
                raise ValidationFailure("email is already in use")
            user.email = email

    async def set_handle(self, token: str, handle_str: str) -> None:
        async with self._transaction():
            if not is_valid_handle(handle_str):
                raise ValidationFailure(
                    "handle must be 3 to 20 alphanumeric characters"
                )
            user = self._resolver.require_session(token)
            owner = self._store.user_by_handle(handle_str)
            if owner is not None and owner.u_id != user.u_id:
                raise ValidationFailure("handle is already in use")
            user.handle_str = handle_str

    async def upload_photo(
        self,
        token: str,
        img_url: str,
        x_start: int,
        y_start: int,
        x_end: int,
        y_end: int,
    ) -> None:
        """Crop a remote JPEG into the caller's profile photo.

        The fetch runs outside the transaction; the session is checked on
        both sides of it.
        """
        if x_end <= x_start or y_end <= y_start:
            raise ValidationFailure("crop box is empty")
        async with self._transaction(persist=False):
            self._resolver.require_session(token)

        filename = await self._photos.process(img_url, x_start, y_start, x_end, y_end)

        async with self._transaction():
            user = self._resolver.require_session(token)
            user.profile_img_url = f"{public_url()}/avatar/{filename}"
            logger.info("Profile photo updated", extra=context(u_id=user.u_id))

    async def stats(self, token: str) -> UserStats:
        async with self._transaction(persist=False):
            user = self._resolver.require_session(token)

            channels_joined = sum(
                1 for c in self._store.channels.values() if user.u_id in c.member_ids
            )
            dms_joined = sum(
                1 for d in self._store.dms.values() if user.u_id in d.member_ids
            )
            messages_sent = sum(
                1 for m in self._store.messages.values() if m.u_id == user.u_id
            )
            total = (
                len(self._store.channels)
                + len(self._store.dms)
                + len(self._store.messages)
            )
            involvement = (
                (channels_joined + dms_joined + messages_sent) / total if total else 0.0
            )

            return UserStats(
                channels_joined=channels_joined,
                dms_joined=dms_joined,
                messages_sent=messages_sent,
                involvement_rate=min(max(involvement, 0.0), 1.0),
                time_stamp=self._now(),
            )

    async def workspace_stats(self, token: str) -> WorkspaceStats:
        async with self._transaction(persist=False):
            self._resolver.require_session(token)

            active = self._store.active_users()
            involved = sum(
                1 for u in active if next(self._store.conversations_of(u.u_id), None)
            )
            return WorkspaceStats(
                channels_exist=len(self._store.channels),
                dms_exist=len(self._store.dms),
                messages_exist=len(self._store.messages),
                utilization_rate=involved / len(active) if active else 0.0,
                time_stamp=self._now(),
            )
