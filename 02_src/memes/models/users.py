"""User-related data models."""

from dataclasses import dataclass, field
from enum import IntEnum


class Permission(IntEnum):
    """Workspace-wide role of a user."""

    OWNER = 1
    MEMBER = 2
    REMOVED = -1


@dataclass(frozen=True)
class Notification:
    """One entry of a user's notification feed."""

    channel_id: int  # -1 when raised from a DM
    dm_id: int  # -1 when raised from a channel
    notification_message: str


@dataclass
class User:
    """A registered account. Never deleted, only scrubbed on admin removal."""

    u_id: int
    email: str | None
    password_hash: str | None
    name_first: str
    name_last: str
    handle_str: str | None
    permission: Permission = Permission.MEMBER
    tokens: list[str] = field(default_factory=list)  # hashed session tokens
    reset_code: str | None = None
    # Most recent first; trimmed only when read
    notifications: list[Notification] = field(default_factory=list)
    profile_img_url: str | None = None
    time_created: int = 0

    @property
    def is_global_owner(self) -> bool:
        return self.permission == Permission.OWNER

    @property
    def is_removed(self) -> bool:
        return self.permission == Permission.REMOVED
