"""API route factories."""

from .admin import create_admin_router
from .auth import create_auth_router
from .channels import create_channels_router
from .dms import create_dms_router
from .messages import create_messages_router
from .users import create_users_router
from .workspace import create_workspace_router

__all__ = [
    "create_admin_router",
    "create_auth_router",
    "create_channels_router",
    "create_dms_router",
    "create_messages_router",
    "create_users_router",
    "create_workspace_router",
]
