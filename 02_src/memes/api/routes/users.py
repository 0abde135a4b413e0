"""User API routes."""

from fastapi import APIRouter, Depends, Query

from ...app import Application
from ..deps import session_token
from ..schemas import (
    SetEmailRequest,
    SetHandleRequest,
    SetNameRequest,
    UploadPhotoRequest,
    UserResponse,
    UsersResponse,
    UserStatsResponse,
    WorkspaceStatsResponse,
    user_profile,
    user_stats_out,
    workspace_stats_out,
)


def create_users_router(app: Application) -> APIRouter:
    """Create router for ``/user/*`` and ``/users/*``."""
    router = APIRouter(tags=["users"])

    @router.get("/user/profile/v3", response_model=UserResponse)
    async def profile(
        u_id: int = Query(alias="uId"), token: str = Depends(session_token)
    ) -> UserResponse:
        return UserResponse(user=user_profile(await app.users.profile(token, u_id)))

    @router.get("/users/all/v2", response_model=UsersResponse)
    async def all_users(token: str = Depends(session_token)) -> UsersResponse:
        users = await app.users.all(token)
        return UsersResponse(users=[user_profile(u) for u in users])

    @router.put("/user/profile/setname/v2")
    async def set_name(
        request: SetNameRequest, token: str = Depends(session_token)
    ) -> dict:
        await app.users.set_name(token, request.name_first, request.name_last)
        return {}

    @router.put("/user/profile/setemail/v2")
    async def set_email(
        request: SetEmailRequest, token: str = Depends(session_token)
    ) -> dict:
        await app.users.set_email(token, request.email)
        return {}

    @router.put("/user/profile/sethandle/v2")
    async def set_handle(
        request: SetHandleRequest, token: str = Depends(session_token)
    ) -> dict:
        await app.users.set_handle(token, request.handle_str)
        return {}

    @router.post("/user/profile/uploadphoto/v1")
    async def upload_photo(
        request: UploadPhotoRequest, token: str = Depends(session_token)
    ) -> dict:
        await app.users.upload_photo(
            token,
            request.img_url,
            request.x_start,
            request.y_start,
            request.x_end,
            request.y_end,
        )
        return {}

    @router.get("/user/stats/v1", response_model=UserStatsResponse)
    async def user_stats(token: str = Depends(session_token)) -> UserStatsResponse:
        stats = await app.users.stats(token)
        return UserStatsResponse(user_stats=user_stats_out(stats))

    @router.get("/users/stats/v1", response_model=WorkspaceStatsResponse)
    async def workspace_stats(
        token: str = Depends(session_token),
    ) -> WorkspaceStatsResponse:
        stats = await app.users.workspace_stats(token)
        return WorkspaceStatsResponse(workspace_stats=workspace_stats_out(stats))

    return router
