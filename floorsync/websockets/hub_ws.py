import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from .. import state
from ..broadcast import reply, reply_error
from ..errors import InvalidPayload
from ..handlers import handle_text
from ..protocol import Out
from ..reconcile import reconcile_disconnect

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def ws_hub(ws: WebSocket):
    """
    Floor hub websocket:
    - registers the session and tells it its id
    - handles one frame at a time under the hub lock
    - reconciles tables when the session goes away
    """
    await ws.accept()

    async with state.hub_lock:
        session = state.connections.open(ws)
        await reply(session, Out.CONNECTED, {"session_id": session.id})

    try:
        while True:
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))

            raw = message.get("text")
            async with state.hub_lock:
                if raw is None:
                    await reply_error(session, InvalidPayload("Binary frames are not supported"))
                else:
                    await handle_text(session, raw)
    except WebSocketDisconnect as exc:
        logger.info("Session %s closed (code %s)", session.id, exc.code)
    except Exception:
        logger.exception("Session %s failed", session.id)
    finally:
        async with state.hub_lock:
            await reconcile_disconnect(session.id)
