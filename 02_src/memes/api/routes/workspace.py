"""Notification, standup, search and maintenance routes."""

from fastapi import APIRouter, Depends, Query

from ...app import Application
from ..deps import session_token
from ..schemas import (
    NotificationsResponse,
    SearchResponse,
    StandupActiveResponse,
    StandupSendRequest,
    StandupStartRequest,
    StandupStartResponse,
    message_out,
    notification_out,
)


def create_workspace_router(app: Application) -> APIRouter:
    """Create router for the remaining workspace endpoints."""
    router = APIRouter(tags=["workspace"])

    @router.get("/notifications/get/v1", response_model=NotificationsResponse)
    async def notifications(
        token: str = Depends(session_token),
    ) -> NotificationsResponse:
        feed = await app.notifications.get(token)
        return NotificationsResponse(notifications=[notification_out(n) for n in feed])

    @router.post("/standup/start/v1", response_model=StandupStartResponse)
    async def standup_start(
        request: StandupStartRequest, token: str = Depends(session_token)
    ) -> StandupStartResponse:
        time_finish = await app.standups.start(token, request.channel_id, request.length)
        return StandupStartResponse(time_finish=time_finish)

    @router.get("/standup/active/v1", response_model=StandupActiveResponse)
    async def standup_active(
        channel_id: int = Query(alias="channelId"),
        token: str = Depends(session_token),
    ) -> StandupActiveResponse:
        status = await app.standups.active(token, channel_id)
        return StandupActiveResponse(
            is_active=status.is_active, time_finish=status.time_finish
        )

    @router.post("/standup/send/v1")
    async def standup_send(
        request: StandupSendRequest, token: str = Depends(session_token)
    ) -> dict:
        await app.standups.send(token, request.channel_id, request.message)
        return {}

    @router.get("/search/v1", response_model=SearchResponse)
    async def search(
        query_str: str = Query(alias="queryStr"),
        token: str = Depends(session_token),
    ) -> SearchResponse:
        results = await app.search.search(token, query_str)
        return SearchResponse(
            messages=[message_out(m, results.viewer_id) for m in results.messages]
        )

    @router.delete("/clear/v1")
    async def clear() -> dict:
        """Reset the whole workspace."""
        await app.reset()
        return {}

    return router
