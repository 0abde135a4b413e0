"""Global-owner moderation."""

from ..errors import ValidationFailure
from ..identity import IdentityResolver
from ..logging_config import context, get_logger
from ..messaging import Transaction
from ..models import Permission
from ..permissions import PermissionEvaluator
from ..scheduler import IScheduler
from ..storage import WorkspaceStore
from .base import WorkspaceService

logger = get_logger(__name__)

REMOVED_MESSAGE = "Removed user"
VALID_PERMISSION_IDS = (Permission.OWNER, Permission.MEMBER)


class AdminService(WorkspaceService):
    """Removal and permission changes; the last global owner is protected."""

    def __init__(
        self,
        store: WorkspaceStore,
        resolver: IdentityResolver,
        permissions: PermissionEvaluator,
        scheduler: IScheduler,
        transaction: Transaction,
    ):
        super().__init__(store, resolver, transaction)
        self._permissions = permissions
        self._scheduler = scheduler

    async def remove_user(self, token: str, u_id: int) -> None:
        """Scrub a user while keeping their id for historical messages.

        Their email and handle become free for new registrations.
        """
        async with self._transaction():
            target = self._user_or_fail(u_id)
            self._check_not_last_owner(target.u_id)
            actor = self._resolver.require_session(token)
            self._permissions.require_global_owner(actor)

            for channel in self._store.channels.values():
                channel.drop_member(target.u_id)
            for dm in self._store.dms.values():
                if target.u_id in dm.member_ids:
                    dm.member_ids.remove(target.u_id)
            for message in self._store.messages.values():
                if message.u_id == target.u_id:
                    message.message = REMOVED_MESSAGE
            self._scheduler.cancel_for_user(target.u_id)

            target.name_first = "Removed"
            target.name_last = "user"
            target.email = None
            target.handle_str = None
            target.password_hash = None
            target.reset_code = None
            target.tokens.clear()
            target.permission = Permission.REMOVED

            logger.info(
                "User removed", extra=context(u_id=target.u_id, by=actor.u_id)
            )

    async def change_permission(self, token: str, u_id: int, permission_id: int) -> None:
        async with self._transaction():
            if permission_id not in VALID_PERMISSION_IDS:
                raise ValidationFailure("permission_id is invalid")
            target = self._user_or_fail(u_id)
            if target.permission == permission_id:
                raise ValidationFailure("user already has this permission")
            if permission_id == Permission.MEMBER:
                self._check_not_last_owner(target.u_id)
            actor = self._resolver.require_session(token)
            self._permissions.require_global_owner(actor)

            target.permission = Permission(permission_id)
            logger.info(
                "Permission changed",
                extra=context(u_id=target.u_id, permission=permission_id, by=actor.u_id),
            )

    def _check_not_last_owner(self, u_id: int) -> None:
        if self._store.global_owner_ids() == [u_id]:
            raise ValidationFailure("u_id is the only global owner")
