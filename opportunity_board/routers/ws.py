"""WebSocket endpoint carrying board intents from the UI."""

from __future__ import annotations

import json
import logging

import pydantic
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from opportunity_board.errors import BoardError
from opportunity_board.models.intents import intent_adapter
from opportunity_board.services.board_service import BoardContext

logger = logging.getLogger(__name__)
router = APIRouter()


async def _send(ws: WebSocket, data: dict) -> None:
    await ws.send_text(json.dumps(data))


async def _send_error(ws: WebSocket, message: str) -> None:
    await _send(ws, {"type": "error", "message": message})


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    board: BoardContext = websocket.app.state.board

    # Active search for this connection only
    query = ""

    await websocket.accept()
    logger.info("Board client connected")
    await _send(websocket, {"type": "board", "data": board.view(query).model_dump(mode="json", by_alias=True)})

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except json.JSONDecodeError:
                await _send_error(websocket, "Message is not valid JSON")
                continue

            if not isinstance(message, dict):
                await _send_error(websocket, "Message must be a JSON object")
                continue

            msg_type = message.get("type", "")
            if msg_type == "ping":
                await _send(websocket, {"type": "pong"})
                continue

            try:
                intent = intent_adapter.validate_python(message)
            except pydantic.ValidationError as e:
                logger.warning("Rejected board message %r: %s", msg_type, e)
                await _send_error(websocket, f"Invalid or unknown message type: {msg_type}")
                continue

            try:
                view = board.dispatch(intent, query)
            except BoardError as e:
                await _send_error(websocket, str(e))
                continue

            query = view.query
            await _send(websocket, {"type": "board", "data": view.model_dump(mode="json", by_alias=True)})

    except WebSocketDisconnect:
        logger.info("Board client disconnected")
