"""
WebSocket Connection Manager

Pushes job card change notifications to connected screens.
Supports:
- Broadcasting table change events (INSERT / UPDATE / DELETE)
- Per-connection event subscriptions with wildcards ("job_cards.*")
- Connection heartbeat tracking
"""

from fastapi import WebSocket
from typing import Dict, Set, Optional
from datetime import datetime
from fnmatch import fnmatch
import logging
import asyncio
import uuid

logger = logging.getLogger(__name__)

CHANGE_EVENTS = ("INSERT", "UPDATE", "DELETE")


class ConnectionManager:
    """
    Manages WebSocket connections and message broadcasting.

    Every connection gets a client id. A connection with no subscriptions
    receives every event.
    """

    def __init__(self):
        self._connections: Dict[str, WebSocket] = {}
        # client_id -> event patterns
        self._subscriptions: Dict[str, Set[str]] = {}
        # Heartbeat tracking: client_id -> last ping timestamp
        self._heartbeats: Dict[str, datetime] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, client_id: Optional[str] = None) -> str:
        """Accept a WebSocket connection and register it. Returns the client id."""
        await websocket.accept()
        client_id = client_id or str(uuid.uuid4())

        async with self._lock:
            self._connections[client_id] = websocket
            self._subscriptions[client_id] = set()
            self._heartbeats[client_id] = datetime.utcnow()

        logger.info(
            f"WebSocket connected: client_id={client_id}, "
            f"total_connections={self.total_connections}"
        )
        return client_id

    def disconnect(self, client_id: str) -> None:
        self._connections.pop(client_id, None)
        self._subscriptions.pop(client_id, None)
        self._heartbeats.pop(client_id, None)

        logger.info(
            f"WebSocket disconnected: client_id={client_id}, "
            f"total_connections={self.total_connections}"
        )

    def update_heartbeat(self, client_id: str) -> None:
        """Update the heartbeat timestamp for a connection."""
        self._heartbeats[client_id] = datetime.utcnow()

    def subscribe(self, client_id: str, events: list) -> Set[str]:
        patterns = self._subscriptions.setdefault(client_id, set())
        patterns.update(str(e) for e in events)
        return set(patterns)

    def unsubscribe(self, client_id: str, events: list) -> Set[str]:
        patterns = self._subscriptions.setdefault(client_id, set())
        patterns.difference_update(str(e) for e in events)
        return set(patterns)

    def wants(self, client_id: str, event_type: str) -> bool:
        patterns = self._subscriptions.get(client_id)
        if not patterns:
            return True
        return any(fnmatch(event_type, pattern) for pattern in patterns)

    @property
    def total_connections(self) -> int:
        """Get total number of active connections."""
        return len(self._connections)

    async def send_to_client(self, client_id: str, message: dict) -> bool:
        websocket = self._connections.get(client_id)
        if websocket is None:
            return False
        try:
            await websocket.send_json(message)
            return True
        except Exception as e:
            logger.warning(f"Failed to send to client {client_id}: {e}")
            self.disconnect(client_id)
            return False

    async def broadcast(self, message: dict) -> int:
        """
        Broadcast a message to every subscribed connection.

        Returns:
            Number of connections the message was sent to
        """
        event_type = message.get("type", "")
        sent_count = 0

        for client_id in list(self._connections.keys()):
            if not self.wants(client_id, event_type):
                continue
            if await self.send_to_client(client_id, message):
                sent_count += 1

        logger.debug(f"Broadcast {event_type} sent to {sent_count} connections")
        return sent_count

    async def broadcast_change(
        self,
        table: str,
        event: str,
        new: Optional[dict] = None,
        old: Optional[dict] = None,
    ) -> int:
        """
        Broadcast a row change.

        Args:
            table: Table name, e.g. 'job_cards'
            event: INSERT, UPDATE or DELETE
            new: Row after the change (None for DELETE)
            old: Row before the change, or at least its id (None for INSERT)
        """
        if event not in CHANGE_EVENTS:
            raise ValueError(f"Unknown change event: {event}")

        message = {
            "type": f"{table}.{event}",
            "table": table,
            "event": event,
            "new": new,
            "old": old,
            "timestamp": datetime.utcnow().isoformat(),
        }
        return await self.broadcast(message)

    async def check_stale_connections(self, timeout_seconds: int = 120) -> int:
        """
        Close connections that have not pinged within ``timeout_seconds``.

        Returns:
            Number of stale connections cleaned up
        """
        now = datetime.utcnow()

        async with self._lock:
            stale = [
                client_id
                for client_id, last_heartbeat in self._heartbeats.items()
                if (now - last_heartbeat).total_seconds() > timeout_seconds
            ]

        for client_id in stale:
            websocket = self._connections.get(client_id)
            if websocket is not None:
                try:
                    await websocket.close(code=4002, reason="Connection timeout")
                except Exception as e:
                    logger.debug(f"Close failed for stale client {client_id}: {e}")
            self.disconnect(client_id)

        if stale:
            logger.info(f"Cleaned up {len(stale)} stale WebSocket connections")

        return len(stale)

    def get_connection_stats(self) -> dict:
        """Get statistics about current connections."""
        return {
            "total_connections": self.total_connections,
            "subscribed_connections": sum(1 for s in self._subscriptions.values() if s),
        }


# Global manager instance
manager = ConnectionManager()
