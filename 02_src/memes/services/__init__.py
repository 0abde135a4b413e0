"""Workspace operations exposed to the HTTP layer."""

from .admin import AdminService
from .auth import AuthService, AuthSession
from .channels import ChannelService
from .dms import DmService
from .notifications import NotificationService
from .search import SearchService
from .users import UserService

__all__ = [
    "AdminService",
    "AuthService",
    "AuthSession",
    "ChannelService",
    "DmService",
    "NotificationService",
    "SearchService",
    "UserService",
]
