"""
REST API routes for the companion.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException
from starlette.responses import PlainTextResponse

from ..core.agent import CompanionAgent
from .schemas import (
    MessageRequest,
    MessageResponse,
    StartSessionRequest,
    StartSessionResponse,
    StatusResponse,
    ToneRequest,
    ToneResponse,
)
from .session import SessionManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

# Global session manager, created on first use
session_manager: Optional[SessionManager] = None


def get_session_manager() -> SessionManager:
    global session_manager
    if session_manager is None:
        session_manager = SessionManager()
    return session_manager


def _get_agent(session_id: str) -> CompanionAgent:
    agent = get_session_manager().get_agent(session_id)
    if agent is None:
        raise HTTPException(404, f"Session {session_id} not found")
    return agent


@router.get("/status")
async def status():
    """Service status: number of live sessions."""
    sm = get_session_manager()
    sm.prune_idle()
    return {"active_sessions": len(sm.list_sessions())}


@router.post("/session/start", response_model=StartSessionResponse)
async def start_session(request: StartSessionRequest = StartSessionRequest()):
    """Start a new companion session."""
    sm = get_session_manager()
    session_id = sm.create_session(tone=request.tone)
    result = sm.get_agent(session_id).start_session()
    return StartSessionResponse(
        session_id=session_id,
        message=result["message"],
        state=result["state"],
    )


@router.post("/session/{session_id}/message", response_model=MessageResponse)
async def message(session_id: str, request: MessageRequest):
    """Run one turn and return the reply."""
    agent = _get_agent(session_id)
    result = agent.step(request.user_message)
    return MessageResponse(**result.to_dict())


@router.post("/session/{session_id}/reset")
async def reset(session_id: str):
    """Clear the session's context, topics and state."""
    agent = _get_agent(session_id)
    agent.reset()
    return {"session_id": session_id, "state": agent.state_machine.state.value, "turn_count": 0}


@router.post("/session/{session_id}/tone", response_model=ToneResponse)
async def set_tone(session_id: str, request: ToneRequest):
    """Pin the reply tone, or return to automatic tone with null."""
    agent = _get_agent(session_id)
    tone = agent.set_tone(request.tone)
    return ToneResponse(tone=tone.value if tone else None)


@router.get("/session/{session_id}/status", response_model=StatusResponse)
async def session_status(session_id: str):
    """Current state, detected mood, turn count and active topics."""
    agent = _get_agent(session_id)
    return StatusResponse(session_id=session_id, **agent.status())


@router.get("/session/{session_id}/transcript", response_class=PlainTextResponse)
async def transcript(session_id: str):
    """Human-readable transcript of the session."""
    return PlainTextResponse(_get_agent(session_id).transcript())


@router.delete("/session/{session_id}")
async def delete_session(session_id: str):
    """End a session and discard all of its state."""
    _get_agent(session_id)
    get_session_manager().delete_session(session_id)
    return {"session_id": session_id, "deleted": True}
