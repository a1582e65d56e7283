import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..notifications import Subscriber, manager

logger = logging.getLogger(__name__)

router = APIRouter()


async def _pump(websocket: WebSocket, subscriber: Subscriber) -> None:
    """Forward queued events to the socket until it fails or is cancelled."""
    try:
        while True:
            message = await subscriber.next_message()
            if message is None:
                await websocket.close(code=1013)
                return
            await websocket.send_text(message)
    except (WebSocketDisconnect, RuntimeError, OSError) as exc:
        logger.info("Stopped sending to live-update subscriber: %r", exc)
        subscriber.close()


@router.websocket("/ws")
@router.websocket("/")
async def live_updates(websocket: WebSocket):
    """Push task change events; client messages are ignored."""
    subscriber = Subscriber(asyncio.get_running_loop())
    # Registered before accept so no event is missed once the client sees the handshake.
    manager.register(subscriber)
    try:
        await websocket.accept()
        sender = asyncio.create_task(_pump(websocket, subscriber))
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
        finally:
            sender.cancel()
            await asyncio.gather(sender, return_exceptions=True)
    finally:
        subscriber.close()
        manager.deregister(subscriber)
