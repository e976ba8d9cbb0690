"""
WebSocket handler for real-time companion chat.
"""

from __future__ import annotations

import logging

from fastapi import WebSocket, WebSocketDisconnect

from .session import SessionManager

logger = logging.getLogger(__name__)


async def websocket_endpoint(
    websocket: WebSocket,
    session_id: str,
    session_manager: SessionManager,
):
    """
    WebSocket handler for a companion session.

    Protocol:
        Client -> Server:
            {"type": "user_message", "content": "..."}
            {"type": "set_tone", "value": "soft"}
            {"type": "reset"}

        Server -> Client:
            {"type": "assistant_message", "content": "...", "state": "..."}
            {"type": "status", "data": {...}}
            {"type": "tone_updated", "value": "..."}
            {"type": "reset", "state": "greeting"}
            {"type": "error", "message": "..."}

    Frames are handled one at a time, so turns within a session never
    overlap.
    """
    await websocket.accept()

    agent = session_manager.get_agent(session_id)
    if agent is None:
        await websocket.send_json({"type": "error", "message": f"Session {session_id} not found"})
        await websocket.close()
        return

    try:
        while True:
            data = await websocket.receive_json()
            msg_type = data.get("type", "")

            if msg_type == "user_message":
                result = agent.step(data.get("content", ""))
                payload = result.to_dict()
                await websocket.send_json({
                    "type": "assistant_message",
                    "content": payload.pop("reply"),
                    "state": payload["state"],
                })
                await websocket.send_json({"type": "status", "data": payload})

            elif msg_type == "set_tone":
                tone = agent.set_tone(data.get("value"))
                await websocket.send_json({
                    "type": "tone_updated",
                    "value": tone.value if tone else None,
                })

            elif msg_type == "reset":
                agent.reset()
                await websocket.send_json({
                    "type": "reset",
                    "state": agent.state_machine.state.value,
                })

            else:
                await websocket.send_json({
                    "type": "error",
                    "message": f"Unknown message type {msg_type!r}",
                })

    except WebSocketDisconnect:
        logger.info(f"Session {session_id} websocket disconnected")
