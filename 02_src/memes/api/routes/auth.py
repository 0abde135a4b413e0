"""Session API routes."""

from fastapi import APIRouter, Depends

from ...app import Application
from ..deps import session_token
from ..schemas import (
    AuthResponse,
    LoginRequest,
    PasswordResetBody,
    PasswordResetRequestBody,
    RegisterRequest,
)


def create_auth_router(app: Application) -> APIRouter:
    """Create auth router."""
    router = APIRouter(prefix="/auth", tags=["auth"])

    @router.post("/login/v3", response_model=AuthResponse)
    async def login(request: LoginRequest) -> AuthResponse:
        session = await app.auth.login(request.email, request.password)
        return AuthResponse(token=session.token, auth_user_id=session.auth_user_id)

    @router.post("/register/v3", response_model=AuthResponse)
    async def register(request: RegisterRequest) -> AuthResponse:
        session = await app.auth.register(
            request.email, request.password, request.name_first, request.name_last
        )
        return AuthResponse(token=session.token, auth_user_id=session.auth_user_id)

    @router.post("/logout/v2")
    async def logout(token: str = Depends(session_token)) -> dict:
        await app.auth.logout(token)
        return {}

    @router.post("/passwordreset/request/v1")
    async def password_reset_request(request: PasswordResetRequestBody) -> dict:
        await app.auth.password_reset_request(request.email)
        return {}

    @router.post("/passwordreset/reset/v1")
    async def password_reset(request: PasswordResetBody) -> dict:
        await app.auth.password_reset(request.reset_code, request.new_password)
        return {}

    return router
