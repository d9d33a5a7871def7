# chatmi_bridge/server/sessions.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional


@dataclass(eq=False)
class StreamSession:
    """One open SSE channel."""

    session_id: str
    opened_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class SessionRegistry:
    """
    In-process store of open SSE sessions, keyed by session id.

    Owned by the BridgeServer and handed to the stream transport. It is not
    shared between processes, so a client must talk to the same instance.
    """

    def __init__(self):
        self._sessions: Dict[str, StreamSession] = {}
        self._logger = logging.getLogger("chatmi_bridge.sessions")

    def open(self, session_id: str) -> StreamSession:
        session = StreamSession(session_id=session_id)
        if session_id in self._sessions:
            self._logger.warning(f"Session {session_id} reconnected, replacing previous stream")
        self._sessions[session_id] = session
        return session

    def discard(self, session: StreamSession) -> bool:
        # a newer stream may own the id by now; only remove our own entry
        if self._sessions.get(session.session_id) is session:
            del self._sessions[session.session_id]
            return True
        return False

    def get(self, session_id: str) -> Optional[StreamSession]:
        return self._sessions.get(session_id)

    def session_ids(self) -> List[str]:
        return list(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
