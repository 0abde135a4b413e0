"""Session and membership resolution."""

from enum import Enum
from typing import Protocol

from ..errors import AuthorizationFailure
from ..models import Channel, ConversationRef, User
from ..storage import WorkspaceStore
from .credentials import Credentials


class MembershipRole(str, Enum):
    """Role of a user inside one conversation."""

    NONE = "none"
    MEMBER = "member"
    OWNER = "owner"  # channel owner, or DM creator


class IIdentityResolver(Protocol):
    """Maps tokens to users and (conversation, user) pairs to roles."""

    def resolve_session(self, token: str | None) -> User | None:
        ...

    def require_session(self, token: str | None) -> User:
        ...

    def membership(self, ref: ConversationRef, u_id: int) -> MembershipRole:
        ...


class IdentityResolver:
    """Resolves identities against the workspace store.

    Global ownership is not membership: a global owner who never joined a
    channel resolves to ``MembershipRole.NONE`` for it.
    """

    def __init__(self, store: WorkspaceStore, credentials: Credentials):
        self._store = store
        self._credentials = credentials

    def resolve_session(self, token: str | None) -> User | None:
        if not token:
            return None
        return self._store.user_by_token(self._credentials.hash_token(token))

    def require_session(self, token: str | None) -> User:
        user = self.resolve_session(token)
        if user is None:
            raise AuthorizationFailure("token is invalid")
        return user

    def membership(self, ref: ConversationRef, u_id: int) -> MembershipRole:
        conversation = self._store.conversation(ref)
        if conversation is None or u_id not in conversation.member_ids:
            return MembershipRole.NONE

        if isinstance(conversation, Channel):
            is_owner = u_id in conversation.owner_ids
        else:
            is_owner = u_id == conversation.creator_id

        return MembershipRole.OWNER if is_owner else MembershipRole.MEMBER

    def is_member(self, ref: ConversationRef, u_id: int) -> bool:
        return self.membership(ref, u_id) != MembershipRole.NONE
