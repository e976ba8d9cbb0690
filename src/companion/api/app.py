"""
FastAPI application for the companion dialogue service.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from ..core.config import log_level_from_env
from .routes import router, get_session_manager
from .websocket import websocket_endpoint

# Configure logging for companion modules
logging.basicConfig(level=logging.INFO, format="%(name)s - %(levelname)s - %(message)s")
logging.getLogger("companion").setLevel(log_level_from_env())

app = FastAPI(
    title="Companion Dialogue",
    description="Rule-based supportive companion: emotion, context, topics, state, mood and comfort",
    version="0.1.0",
)

# CORS for development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/")
async def root():
    return {"message": "Companion Dialogue API", "docs": "/docs"}


@app.websocket("/ws/{session_id}")
async def ws_endpoint(websocket: WebSocket, session_id: str):
    """WebSocket endpoint for real-time chat."""
    sm = get_session_manager()
    await websocket_endpoint(websocket, session_id, sm)
