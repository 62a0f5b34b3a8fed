from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from typing import Optional
from uuid import uuid4
from shift_tracker.services.shift_service import ShiftService
from shift_tracker.utils.ws_manager import manager

router = APIRouter()

@router.websocket("/ws/shifts")
async def shift_feed(websocket: WebSocket, userId: Optional[str] = None):
    """
    Pushes {"type": "snapshot", "data": {date: record}} on connect and after
    every change, {"type": "error", "error": message} when the feed fails.
    """
    connection_id = uuid4().hex
    if not await manager.connect(connection_id, websocket, ShiftService(), user_id=userId):
        return
    try:
        # Nothing is expected from the client; this only waits for it to leave.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        await manager.disconnect(connection_id)
