"""FastAPI application setup."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from ..app import Application
from ..config import AVATAR_DIR, DEFAULT_IMAGE_DIR
from ..errors import ValidationFailure, WorkspaceError
from ..logging_config import get_logger
from .routes import (
    create_admin_router,
    create_auth_router,
    create_channels_router,
    create_dms_router,
    create_messages_router,
    create_users_router,
    create_workspace_router,
)

logger = get_logger(__name__)


async def workspace_error_handler(request: Request, exc: WorkspaceError) -> JSONResponse:
    return JSONResponse(exc.to_response(), status_code=exc.status_code)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies and missing parameters are plain validation failures."""
    logger.debug("Request rejected: %s", exc.errors())
    failure = ValidationFailure("request is malformed")
    return JSONResponse(failure.to_response(), status_code=failure.status_code)


def create_fastapi_app(application: Application | None = None) -> FastAPI:
    """Create and configure FastAPI application."""
    application = application or Application()

    @asynccontextmanager
    async def lifespan(fastapi_app: FastAPI):
        await application.start()
        yield
        await application.stop()

    fastapi_app = FastAPI(
        title="Memes API",
        description="Workspace messaging server",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.state.application = application

    # Enable CORS
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    fastapi_app.add_exception_handler(WorkspaceError, workspace_error_handler)
    fastapi_app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Include routers
    fastapi_app.include_router(create_auth_router(application))
    fastapi_app.include_router(create_channels_router(application))
    fastapi_app.include_router(create_dms_router(application))
    fastapi_app.include_router(create_messages_router(application))
    fastapi_app.include_router(create_users_router(application))
    fastapi_app.include_router(create_admin_router(application))
    fastapi_app.include_router(create_workspace_router(application))

    AVATAR_DIR.mkdir(parents=True, exist_ok=True)
    DEFAULT_IMAGE_DIR.mkdir(parents=True, exist_ok=True)
    fastapi_app.mount("/avatar", StaticFiles(directory=AVATAR_DIR), name="avatar")
    fastapi_app.mount("/default", StaticFiles(directory=DEFAULT_IMAGE_DIR), name="default")

    return fastapi_app
