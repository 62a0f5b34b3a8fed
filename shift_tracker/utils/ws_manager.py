from fastapi import WebSocket
from typing import Callable, Dict, Optional
import logging
import os
from datetime import datetime

from shift_tracker.services.shift_service import ShiftService

logger = logging.getLogger(__name__)

class ConnectionManager:
    """Live shift feeds, one subscription per open WebSocket."""

    def __init__(self, max_connections: Optional[int] = None):
        self.active_connections: Dict[str, WebSocket] = {}
        self.connection_timestamps: Dict[str, datetime] = {}
        self.unsubscribers: Dict[str, Callable[[], None]] = {}
        if max_connections is None:
            max_connections = int(os.getenv("WS_MAX_CONNECTIONS", "200"))
        self.max_connections = max_connections

    async def connect(self, connection_id: str, websocket: WebSocket, service: ShiftService, user_id: Optional[str] = None):
        if len(self.active_connections) >= self.max_connections:
            logger.warning(f"Connection limit reached ({self.max_connections}), rejecting {connection_id}")
            await websocket.close(code=1013, reason="Server overloaded")
            return False

        await websocket.accept()

        async def send_snapshot(records):
            await websocket.send_json({"type": "snapshot", "data": records})

        async def send_error(error):
            await websocket.send_json({"type": "error", "error": str(error)})

        self.active_connections[connection_id] = websocket
        self.connection_timestamps[connection_id] = datetime.utcnow()
        self.unsubscribers[connection_id] = service.subscribe_to_shifts(
            send_snapshot, send_error, user_id=user_id
        )

        logger.info(f"Feed {connection_id} connected. Total connections: {len(self.active_connections)}")
        return True

    async def disconnect(self, connection_id: str):
        unsubscribe = self.unsubscribers.pop(connection_id, None)
        if unsubscribe is not None:
            unsubscribe()
        self.connection_timestamps.pop(connection_id, None)
        if self.active_connections.pop(connection_id, None) is not None:
            logger.info(f"Feed {connection_id} disconnected. Total connections: {len(self.active_connections)}")

    async def close_all(self):
        for connection_id, ws in list(self.active_connections.items()):
            try:
                await ws.close()
            except Exception as e:
                logger.warning(f"Error closing websocket for {connection_id}: {e}")
            finally:
                await self.disconnect(connection_id)

    def get_connection_stats(self) -> dict:
        return {
            "active_connections": len(self.active_connections),
            "max_connections": self.max_connections,
        }

manager = ConnectionManager()
