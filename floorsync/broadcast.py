import logging
from typing import Any, Iterable

from . import state
from .connections import Session
from .errors import HubError
from .helpers import make_frame
from .protocol import Out

logger = logging.getLogger(__name__)


async def send(session: Session, event: str, data: Any = None) -> bool:
    if session.ws is None:
        return False
    try:
        await session.ws.send_json(make_frame(event, data))
    except Exception:
        # The session's own loop notices the broken socket and reconciles it
        logger.warning("Send of %s to session %s failed", event, session.id, exc_info=True)
        return False
    return True


async def fanout(sessions: Iterable[Session], event: str, data: Any = None) -> None:
    for session in list(sessions):
        await send(session, event, data)


async def emit_all(event: str, data: Any = None) -> None:
    await fanout(state.connections.sessions(), event, data)


async def emit_others(sender: Session, event: str, data: Any = None) -> None:
    await fanout((s for s in state.connections.sessions() if s.id != sender.id), event, data)


async def emit_room(room: str, event: str, data: Any = None) -> None:
    await fanout(state.connections.members(room), event, data)


async def reply(session: Session, event: str, data: Any = None) -> None:
    await send(session, event, data)


async def reply_error(session: Session, error: HubError) -> None:
    logger.warning("Session %s: %s (%s)", session.id, error.message, error.kind)
    await send(session, Out.OPERATION_ERROR, error.payload())


def tables_snapshot() -> list:
    return [t.model_dump(mode="json") for t in state.tables.snapshot_all()]


async def publish_tables() -> None:
    """Push the full table snapshot to everyone under both compatibility names."""
    snapshot = tables_snapshot()
    await emit_all(Out.TABLE_STATES, snapshot)
    await emit_all(Out.TABLE_STATES_UPDATED, snapshot)


def server_status() -> dict:
    return {
        "connected_users": len(state.connections),
        "active_tables": state.tables.occupied_count(),
        "active_orders": len(state.orders),
    }
