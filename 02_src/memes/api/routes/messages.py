"""Message API routes."""

from fastapi import APIRouter, Depends, Query

from ...app import Application
from ...models import ConversationRef
from ..deps import session_token
from ..schemas import (
    MessageEditRequest,
    MessageIdRequest,
    MessageIdResponse,
    MessageSendDmRequest,
    MessageSendRequest,
    ReactRequest,
    SendLaterDmRequest,
    SendLaterRequest,
    ShareRequest,
    SharedMessageIdResponse,
)


def create_messages_router(app: Application) -> APIRouter:
    """Create message router."""
    router = APIRouter(prefix="/message", tags=["messages"])

    @router.post("/send/v2", response_model=MessageIdResponse)
    async def send(
        request: MessageSendRequest, token: str = Depends(session_token)
    ) -> MessageIdResponse:
        message_id = await app.messages.send(
            token, ConversationRef.channel(request.channel_id), request.message
        )
        return MessageIdResponse(message_id=message_id)

    @router.post("/senddm/v2", response_model=MessageIdResponse)
    async def send_dm(
        request: MessageSendDmRequest, token: str = Depends(session_token)
    ) -> MessageIdResponse:
        message_id = await app.messages.send(
            token, ConversationRef.dm(request.dm_id), request.message
        )
        return MessageIdResponse(message_id=message_id)

    @router.put("/edit/v2")
    async def edit(
        request: MessageEditRequest, token: str = Depends(session_token)
    ) -> dict:
        await app.messages.edit(token, request.message_id, request.message)
        return {}

    @router.delete("/remove/v2")
    async def remove(
        message_id: int = Query(alias="messageId"),
        token: str = Depends(session_token),
    ) -> dict:
        await app.messages.remove(token, message_id)
        return {}

    @router.post("/react/v1")
    async def react(request: ReactRequest, token: str = Depends(session_token)) -> dict:
        await app.messages.react(token, request.message_id, request.react_id)
        return {}

    @router.post("/unreact/v1")
    async def unreact(
        request: ReactRequest, token: str = Depends(session_token)
    ) -> dict:
        await app.messages.unreact(token, request.message_id, request.react_id)
        return {}

    @router.post("/pin/v1")
    async def pin(
        request: MessageIdRequest, token: str = Depends(session_token)
    ) -> dict:
        await app.messages.pin(token, request.message_id)
        return {}

    @router.post("/unpin/v1")
    async def unpin(
        request: MessageIdRequest, token: str = Depends(session_token)
    ) -> dict:
        await app.messages.unpin(token, request.message_id)
        return {}

    @router.post("/share/v1", response_model=SharedMessageIdResponse)
    async def share(
        request: ShareRequest, token: str = Depends(session_token)
    ) -> SharedMessageIdResponse:
        shared_id = await app.messages.share(
            token,
            request.og_message_id,
            request.message,
            request.channel_id,
            request.dm_id,
        )
        return SharedMessageIdResponse(shared_message_id=shared_id)

    @router.post("/sendlater/v1", response_model=MessageIdResponse)
    async def send_later(
        request: SendLaterRequest, token: str = Depends(session_token)
    ) -> MessageIdResponse:
        message_id = await app.messages.send_later(
            token,
            ConversationRef.channel(request.channel_id),
            request.message,
            request.time_sent,
        )
        return MessageIdResponse(message_id=message_id)

    @router.post("/sendlaterdm/v1", response_model=MessageIdResponse)
    async def send_later_dm(
        request: SendLaterDmRequest, token: str = Depends(session_token)
    ) -> MessageIdResponse:
        message_id = await app.messages.send_later(
            token,
            ConversationRef.dm(request.dm_id),
            request.message,
            request.time_sent,
        )
        return MessageIdResponse(message_id=message_id)

    return router
