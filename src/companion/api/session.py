"""
In-memory session manager for the companion API.

Stores one CompanionAgent per session_id. Nothing is persisted; a session
lives until it is deleted or pruned as idle.
"""

from __future__ import annotations

import logging
import uuid
from typing import Dict, List, Optional

from ..core.agent import CompanionAgent
from ..core.config import CompanionConfig

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Manages active companion sessions in memory.

    Each session has its own CompanionAgent, and with it its own context,
    state machine and topic clusters.
    """

    def __init__(self, config: Optional[CompanionConfig] = None):
        self.config = config or CompanionConfig.from_env()
        self._sessions: Dict[str, CompanionAgent] = {}

    def create_session(self, tone: Optional[str] = None) -> str:
        """Create a new session and return its ID."""
        session_id = str(uuid.uuid4())[:8]
        self._sessions[session_id] = CompanionAgent(config=self.config, tone=tone)
        logger.info(f"Session {session_id} created")
        return session_id

    def get_agent(self, session_id: str) -> Optional[CompanionAgent]:
        return self._sessions.get(session_id)

    def session_exists(self, session_id: str) -> bool:
        return session_id in self._sessions

    def delete_session(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is not None:
            logger.info(f"Session {session_id} deleted")

    def list_sessions(self) -> List[str]:
        return list(self._sessions.keys())

    def prune_idle(self, timeout_minutes: Optional[float] = None) -> List[str]:
        """Drop sessions idle for longer than the timeout; return their IDs."""
        timeout = self.config.session_idle_timeout_minutes if timeout_minutes is None else timeout_minutes
        stale = [
            sid for sid, agent in self._sessions.items()
            if agent.context.is_idle(timeout)
        ]
        for sid in stale:
            del self._sessions[sid]
        if stale:
            logger.info(f"Pruned {len(stale)} idle session(s)")
        return stale
