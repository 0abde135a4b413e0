"""Channel API routes."""

from fastapi import APIRouter, Depends, Query

from ...app import Application
from ..deps import session_token
from ..schemas import (
    ChannelCreateRequest,
    ChannelDetailsResponse,
    ChannelIdRequest,
    ChannelIdResponse,
    ChannelsResponse,
    ChannelUserRequest,
    MessagesResponse,
    channel_details,
    channel_summary,
    message_out,
)


def create_channels_router(app: Application) -> APIRouter:
    """Create router for ``/channels/*`` and ``/channel/*``."""
    router = APIRouter(tags=["channels"])

    @router.post("/channels/create/v3", response_model=ChannelIdResponse)
    async def create(
        request: ChannelCreateRequest, token: str = Depends(session_token)
    ) -> ChannelIdResponse:
        channel_id = await app.channels.create(token, request.name, request.is_public)
        return ChannelIdResponse(channel_id=channel_id)

    @router.get("/channels/list/v3", response_model=ChannelsResponse)
    async def list_mine(token: str = Depends(session_token)) -> ChannelsResponse:
        channels = await app.channels.list_mine(token)
        return ChannelsResponse(channels=[channel_summary(c) for c in channels])

    @router.get("/channels/listall/v3", response_model=ChannelsResponse)
    async def list_all(token: str = Depends(session_token)) -> ChannelsResponse:
        channels = await app.channels.list_all(token)
        return ChannelsResponse(channels=[channel_summary(c) for c in channels])

    @router.get("/channel/details/v3", response_model=ChannelDetailsResponse)
    async def details(
        channel_id: int = Query(alias="channelId"),
        token: str = Depends(session_token),
    ) -> ChannelDetailsResponse:
        return channel_details(await app.channels.details(token, channel_id))

    @router.post("/channel/join/v3")
    async def join(
        request: ChannelIdRequest, token: str = Depends(session_token)
    ) -> dict:
        await app.channels.join(token, request.channel_id)
        return {}

    @router.post("/channel/invite/v3")
    async def invite(
        request: ChannelUserRequest, token: str = Depends(session_token)
    ) -> dict:
        await app.channels.invite(token, request.channel_id, request.u_id)
        return {}

    @router.get("/channel/messages/v3", response_model=MessagesResponse)
    async def messages(
        channel_id: int = Query(alias="channelId"),
        start: int = Query(),
        token: str = Depends(session_token),
    ) -> MessagesResponse:
        page = await app.channels.messages(token, channel_id, start)
        return MessagesResponse(
            messages=[message_out(m, page.viewer_id) for m in page.messages],
            start=page.start,
            end=page.end,
        )

    @router.post("/channel/leave/v2")
    async def leave(
        request: ChannelIdRequest, token: str = Depends(session_token)
    ) -> dict:
        await app.channels.leave(token, request.channel_id)
        return {}

    @router.post("/channel/addowner/v2")
    async def add_owner(
        request: ChannelUserRequest, token: str = Depends(session_token)
    ) -> dict:
        await app.channels.add_owner(token, request.channel_id, request.u_id)
        return {}

    @router.post("/channel/removeowner/v2")
    async def remove_owner(
        request: ChannelUserRequest, token: str = Depends(session_token)
    ) -> dict:
        await app.channels.remove_owner(token, request.channel_id, request.u_id)
        return {}

    return router
