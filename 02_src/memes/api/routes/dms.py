"""DM API routes."""

from fastapi import APIRouter, Depends, Query

from ...app import Application
from ..deps import session_token
from ..schemas import (
    DmCreateRequest,
    DmDetailsResponse,
    DmIdRequest,
    DmIdResponse,
    DmsResponse,
    MessagesResponse,
    dm_details,
    dm_summary,
    message_out,
)


def create_dms_router(app: Application) -> APIRouter:
    """Create dm router."""
    router = APIRouter(prefix="/dm", tags=["dms"])

    @router.post("/create/v2", response_model=DmIdResponse)
    async def create(
        request: DmCreateRequest, token: str = Depends(session_token)
    ) -> DmIdResponse:
        return DmIdResponse(dm_id=await app.dms.create(token, request.u_ids))

    @router.get("/list/v2", response_model=DmsResponse)
    async def list_mine(token: str = Depends(session_token)) -> DmsResponse:
        dms = await app.dms.list_mine(token)
        return DmsResponse(dms=[dm_summary(d) for d in dms])

    @router.delete("/remove/v2")
    async def remove(
        dm_id: int = Query(alias="dmId"), token: str = Depends(session_token)
    ) -> dict:
        await app.dms.remove(token, dm_id)
        return {}

    @router.get("/details/v2", response_model=DmDetailsResponse)
    async def details(
        dm_id: int = Query(alias="dmId"), token: str = Depends(session_token)
    ) -> DmDetailsResponse:
        return dm_details(await app.dms.details(token, dm_id))

    @router.post("/leave/v2")
    async def leave(request: DmIdRequest, token: str = Depends(session_token)) -> dict:
        await app.dms.leave(token, request.dm_id)
        return {}

    @router.get("/messages/v2", response_model=MessagesResponse)
    async def messages(
        dm_id: int = Query(alias="dmId"),
        start: int = Query(),
        token: str = Depends(session_token),
    ) -> MessagesResponse:
        page = await app.dms.messages(token, dm_id, start)
        return MessagesResponse(
            messages=[message_out(m, page.viewer_id) for m in page.messages],
            start=page.start,
            end=page.end,
        )

    return router
