"""Chat endpoints and the live change stream."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, WebSocket, status

from household_hub.api.dependencies import current_member
from household_hub.api.models import MessageCreate, MessageEdit  # noqa: TC001
from household_hub.api.serializers import serialize_event, serialize_message
from household_hub.domain.members import Member  # noqa: TC001

if TYPE_CHECKING:
    from household_hub.containers import AppContainer
    from household_hub.domain.chat import ChatEvent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.get("/messages")
async def list_messages(
    request: Request, _member: Member = Depends(current_member)
) -> dict[str, object]:
    """Return the full message history."""
    container: AppContainer = request.app.state.container
    messages = container.chat_service.history()
    return {"messages": [serialize_message(message) for message in messages]}


@router.post("/messages", status_code=status.HTTP_201_CREATED)
async def post_message(
    body: MessageCreate, request: Request, member: Member = Depends(current_member)
) -> dict[str, object]:
    """Post a message as the caller."""
    container: AppContainer = request.app.state.container
    message = container.chat_service.post(
        member, text=body.text, image_ref=body.image_ref
    )
    return serialize_message(message)


@router.patch("/messages/{message_id}")
async def edit_message(
    message_id: UUID,
    body: MessageEdit,
    request: Request,
    member: Member = Depends(current_member),
) -> dict[str, object]:
    """Edit one of the caller's messages."""
    container: AppContainer = request.app.state.container
    message = container.chat_service.edit(message_id, member, body.text)
    return serialize_message(message)


@router.delete("/messages/{message_id}")
async def delete_message(
    message_id: UUID, request: Request, member: Member = Depends(current_member)
) -> dict[str, object]:
    """Delete one of the caller's messages."""
    container: AppContainer = request.app.state.container
    message = container.chat_service.delete(message_id, member)
    return {"deleted": serialize_message(message)}


@router.websocket("/stream")
async def chat_stream(websocket: WebSocket) -> None:
    """Push chat events to a connected client.

    The stream only carries changes committed after the connection opens;
    clients re-fetch /chat/messages after every (re)connect.
    """
    container: AppContainer = websocket.app.state.container
    external_id = (websocket.headers.get("x-external-id") or "").strip()
    member = container.identity_service.resolve(external_id) if external_id else None
    if member is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    loop = asyncio.get_running_loop()
    queue: asyncio.Queue[ChatEvent] = asyncio.Queue()

    def enqueue(event: ChatEvent) -> None:
        loop.call_soon_threadsafe(queue.put_nowait, event)

    unsubscribe = container.chat_service.subscribe(enqueue)
    try:
        await websocket.accept()
        await _forward_events(websocket, queue)
    finally:
        unsubscribe()
        logger.info("Chat stream closed for %s", member.role.value)


async def _forward_events(
    websocket: WebSocket, queue: asyncio.Queue[ChatEvent]
) -> None:
    disconnected = asyncio.ensure_future(_wait_for_disconnect(websocket))
    try:
        while True:
            next_event = asyncio.ensure_future(queue.get())
            done, _ = await asyncio.wait(
                {disconnected, next_event}, return_when=asyncio.FIRST_COMPLETED
            )
            if disconnected in done:
                next_event.cancel()
                return
            await websocket.send_json(serialize_event(next_event.result()))
    finally:
        disconnected.cancel()


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return
