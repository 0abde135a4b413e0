"""Role matrix for channel, DM and message actions.

Every ``check_*`` method returns quietly when the action is allowed and
raises ``AuthorizationFailure`` (or ``ValidationFailure`` for state
conflicts such as joining twice) otherwise. Callers resolve the referenced
entities first, so unknown ids have already been reported before any rule
here runs.
"""

from typing import Protocol

from ..errors import AuthorizationFailure, ValidationFailure
from ..identity import IdentityResolver, MembershipRole
from ..models import Channel, ConversationRef, Message, User


class IPermissionEvaluator(Protocol):
    """Decides whether an actor may perform an action on a resource."""

    def require_member(self, ref: ConversationRef, user: User) -> MembershipRole:
        ...

    def check_modify_message(self, message: Message, user: User) -> None:
        ...


class PermissionEvaluator:
    """Evaluates actions against membership and global role.

    Global ownership only stands in for channel ownership. In DMs the
    creator is the sole elevated role.
    """

    def __init__(self, resolver: IdentityResolver):
        self._resolver = resolver

    def require_member(self, ref: ConversationRef, user: User) -> MembershipRole:
        role = self._resolver.membership(ref, user.u_id)
        if role == MembershipRole.NONE:
            kind = "channel" if ref.is_channel else "dm"
            raise AuthorizationFailure(f"user is not a member of this {kind}")
        return role

    def check_join(self, channel: Channel, user: User) -> None:
        if user.u_id in channel.member_ids:
            raise ValidationFailure("user is already a member of this channel")
        if not channel.is_public and not user.is_global_owner:
            raise AuthorizationFailure("channel is private")

    def check_manage_owners(self, channel: Channel, user: User) -> None:
        """Channel owners, or global owners who are also channel members."""
        role = self._resolver.membership(channel.ref, user.u_id)
        if role == MembershipRole.OWNER:
            return
        if role == MembershipRole.MEMBER and user.is_global_owner:
            return
        raise AuthorizationFailure("user does not have owner permissions")

    def check_modify_message(self, message: Message, user: User) -> None:
        """Edit and remove: the author, or an elevated member."""
        ref = message.conversation
        role = self.require_member(ref, user)
        if message.u_id == user.u_id or role == MembershipRole.OWNER:
            return
        if ref.is_channel and user.is_global_owner:
            return
        raise AuthorizationFailure("user may not modify this message")

    def check_pin(self, message: Message, user: User) -> None:
        """Pin and unpin: channel or global owners in channels, the creator in DMs."""
        ref = message.conversation
        role = self.require_member(ref, user)
        if role == MembershipRole.OWNER:
            return
        if ref.is_channel and user.is_global_owner:
            return
        raise AuthorizationFailure("user may not pin in this conversation")

    def check_remove_dm(self, dm_ref: ConversationRef, user: User) -> None:
        role = self.require_member(dm_ref, user)
        if role != MembershipRole.OWNER:
            raise AuthorizationFailure("only the dm creator may remove it")

    def require_global_owner(self, user: User) -> None:
        if not user.is_global_owner:
            raise AuthorizationFailure("user is not a global owner")
