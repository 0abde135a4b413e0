"""Admin API routes."""

from fastapi import APIRouter, Depends, Query

from ...app import Application
from ..deps import session_token
from ..schemas import PermissionChangeRequest


def create_admin_router(app: Application) -> APIRouter:
    """Create admin router."""
    router = APIRouter(prefix="/admin", tags=["admin"])

    @router.delete("/user/remove/v1")
    async def remove_user(
        u_id: int = Query(alias="uId"), token: str = Depends(session_token)
    ) -> dict:
        await app.admin.remove_user(token, u_id)
        return {}

    @router.post("/userpermission/change/v1")
    async def change_permission(
        request: PermissionChangeRequest, token: str = Depends(session_token)
    ) -> dict:
        await app.admin.change_permission(token, request.u_id, request.permission_id)
        return {}

    return router
