import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Set
from uuid import uuid4

from fastapi import WebSocket

from .helpers import utcnow

logger = logging.getLogger(__name__)


@dataclass
class Session:
    id: str
    ws: Optional[WebSocket] = None
    profile: Optional[Dict[str, Any]] = None
    role: Optional[str] = None
    rooms: Set[str] = field(default_factory=set)
    devices: List[str] = field(default_factory=list)
    connected_at: datetime = field(default_factory=utcnow)

    def device_ids(self) -> List[str]:
        """Every device identifier this session answers for, session id first."""
        return [self.id] + [d for d in self.devices if d != self.id]


class ConnectionRegistry:
    def __init__(self):
        self._sessions: Dict[str, Session] = {}
        self._rooms: Dict[str, Set[str]] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def open(self, ws: Optional[WebSocket] = None) -> Session:
        session = Session(id=uuid4().hex, ws=ws)
        self._sessions[session.id] = session
        logger.info("Session %s connected (%d live)", session.id, len(self._sessions))
        return session

    def get(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    def sessions(self) -> List[Session]:
        return list(self._sessions.values())

    def remove(self, session_id: str) -> Optional[Session]:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return None
        for room in list(session.rooms):
            self.leave(session_id, room, session=session)
        logger.info("Session %s dropped (%d live)", session_id, len(self._sessions))
        return session

    def identify(self, session_id: str, profile: Dict[str, Any]) -> Session:
        session = self._sessions[session_id]
        session.profile = profile
        return session

    def set_role(self, session_id: str, role: str) -> Session:
        # The previous role room is not left: a session that switches roles
        # keeps receiving the old room's traffic.
        session = self._sessions[session_id]
        session.role = role
        self.join(session_id, role)
        return session

    def join(self, session_id: str, room: str) -> None:
        session = self._sessions[session_id]
        session.rooms.add(room)
        self._rooms.setdefault(room, set()).add(session_id)

    def leave(self, session_id: str, room: str, session: Optional[Session] = None) -> None:
        session = session or self._sessions.get(session_id)
        if session is not None:
            session.rooms.discard(room)
        members = self._rooms.get(room)
        if members is None:
            return
        members.discard(session_id)
        if not members:
            del self._rooms[room]

    def members(self, room: str) -> List[Session]:
        ids = self._rooms.get(room) or set()
        return [s for s in self.sessions() if s.id in ids]

    def track_device(self, session_id: str, device: str) -> None:
        # A device belongs to the session that attached it last
        session = self._sessions.get(session_id)
        if session is None:
            return
        for other in self._sessions.values():
            if other is not session and device in other.devices:
                other.devices.remove(device)
        if device not in session.devices:
            session.devices.append(device)

    def untrack_device(self, device: str) -> None:
        for session in self._sessions.values():
            if device in session.devices:
                session.devices.remove(device)
