# storefront/services/websockets/manager.py
from typing import Any, Dict, Optional
from fastapi import WebSocket
import logging

from storefront.services.debounce import Debouncer

logger = logging.getLogger(__name__)

class ConnectionManager:
    """Open live search connections and the debouncer serving each one"""

    def __init__(self):
        self.active_connections: Dict[WebSocket, Optional[Debouncer]] = {}

    async def connect(self, websocket: WebSocket, debouncer: Optional[Debouncer] = None):
        await websocket.accept()
        self.active_connections[websocket] = debouncer
        logger.info(f"WebSocket connected. Total connections: {len(self.active_connections)}")

    def disconnect(self, websocket: WebSocket):
        debouncer = self.active_connections.pop(websocket, None)
        if debouncer is not None:
            # A search still waiting out its quiet period has nobody to answer
            debouncer.cancel()
        logger.info(f"WebSocket disconnected. Total connections: {len(self.active_connections)}")

    async def send_json(self, message: Dict[str, Any], websocket: WebSocket) -> bool:
        if websocket not in self.active_connections:
            logger.debug("Dropping live search result for a closed connection")
            return False
        try:
            await websocket.send_json(message)
        except Exception as e:
            logger.error(f"Error sending to WebSocket: {e}")
            self.disconnect(websocket)
            return False
        return True

    def __len__(self) -> int:
        return len(self.active_connections)

# Global connection manager instance
manager = ConnectionManager()
