import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

router = APIRouter()
logger = logging.getLogger(__name__)


@router.websocket("/dashboard/{restaurant_id}/changes")
async def order_changes(websocket: WebSocket, restaurant_id: str):
    """Pushes {"table": "orders", ...} whenever an order of the restaurant changes."""
    changes = websocket.app.state.changes
    # Subscribed before accept, so nothing published after the handshake is missed
    queue = changes.subscribe(restaurant_id)
    receiver = None
    try:
        await websocket.accept()
        receiver = asyncio.create_task(_drain(websocket))
        while True:
            getter = asyncio.create_task(queue.get())
            done, _ = await asyncio.wait({getter, receiver}, return_when=asyncio.FIRST_COMPLETED)
            if receiver in done:
                getter.cancel()
                break
            await websocket.send_json(getter.result())
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error(f"Change stream for restaurant {restaurant_id} failed: {e}", exc_info=True)
    finally:
        if receiver is not None:
            receiver.cancel()
        changes.unsubscribe(restaurant_id, queue)


async def _drain(websocket: WebSocket):
    """Returns once the client goes away."""
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        return
