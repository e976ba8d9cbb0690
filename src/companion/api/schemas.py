"""
Pydantic request/response models for the companion API.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# =============================================================================
# REQUEST MODELS
# =============================================================================

class StartSessionRequest(BaseModel):
    """Request to start a new companion session."""
    tone: Optional[str] = Field(None, description="Tone style, e.g. soft, empathetic, direct")


class MessageRequest(BaseModel):
    """One user utterance."""
    user_message: str = Field(..., description="User's text message")


class ToneRequest(BaseModel):
    """Pin a tone style, or clear it with null."""
    tone: Optional[str] = Field(None, description="Tone style name; null for automatic")


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class StartSessionResponse(BaseModel):
    session_id: str
    message: str
    state: str


class MoodData(BaseModel):
    surface_emotion: str
    underlying_need: str
    confidence: float
    intensity: float
    subtext: List[str] = []
    recommended_tone: str


class MessageResponse(BaseModel):
    """Reply text plus the signals a status display may show."""
    reply: str
    emotion: str
    intensity: float
    intent: str
    state: str
    topic: str
    active_topics: List[str] = []
    turn_count: int
    escalated: bool = False
    route: str
    mood: Optional[MoodData] = None


class ToneResponse(BaseModel):
    tone: Optional[str] = None


class StatusResponse(BaseModel):
    session_id: str
    state: str
    tone: Optional[str] = None
    detected_mood: Optional[str] = None
    turn_count: int
    active_topics: List[Dict[str, Any]] = []
    context: Dict[str, Any] = {}
