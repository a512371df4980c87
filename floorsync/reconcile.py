import logging

from . import state
from .broadcast import publish_tables

logger = logging.getLogger(__name__)


async def reconcile_disconnect(session_id: str) -> bool:
    """
    Clean up after a lost session.

    Detaches each of the session's devices from every table holding it (freeing
    tables left empty and retiring their orders), drops the session record and
    pushes the new table snapshot to the remaining sessions. Returns False when
    the session was already reconciled.
    """
    session = state.connections.get(session_id)
    if session is None:
        return False

    if session.role:
        state.connections.leave(session_id, session.role)

    freed = []
    for device in session.device_ids():
        for table in state.tables.tables_with_device(device):
            state.tables.detach_device(table.number, device)
            if not table.occupied:
                freed.append(table.number)

    state.connections.remove(session_id)
    logger.info("Session %s reconciled, freed tables %s", session_id, freed)

    await publish_tables()
    return True
