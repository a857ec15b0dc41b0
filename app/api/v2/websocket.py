"""
WebSocket Endpoint

Live job card updates for the dashboard and portal screens.
Supports:
- Ping/pong heartbeat
- Subscription to specific event types
- Change notifications after every job card write
"""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from datetime import datetime
import logging
import json

from app.services.websocket_manager import manager

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for real-time updates.

    Connection URL: ws://host/api/v2/ws

    Message Protocol:
    - Client -> Server:
        - {"type": "ping"} - Heartbeat ping
        - {"type": "subscribe", "events": ["job_cards.*"]} - Subscribe to events
        - {"type": "unsubscribe", "events": ["job_cards.DELETE"]} - Unsubscribe from events

    - Server -> Client:
        - {"type": "connected", "client_id": "..."} - Connection confirmation
        - {"type": "pong", "timestamp": "..."} - Heartbeat response
        - {"type": "job_cards.UPDATE", "table": "job_cards", "event": "UPDATE",
           "new": {...}, "old": {...}, "timestamp": "..."} - Change notification
        - {"type": "error", "message": "..."} - Error message

    A connection without subscriptions receives every event. Subscribers
    merge events into their own lists by ``id``: replace when present,
    otherwise prepend; drop the row on DELETE. ``new`` and ``old`` are full
    rows, so archive and completion flags can be read straight off them.
    """
    client_id = await manager.connect(websocket)

    try:
        # Send connection confirmation
        await websocket.send_json(
            {
                "type": "connected",
                "client_id": client_id,
                "timestamp": datetime.utcnow().isoformat(),
            }
        )

        # Message handling loop
        while True:
            try:
                data = await websocket.receive_json()
            except json.JSONDecodeError:
                await websocket.send_json(
                    {
                        "type": "error",
                        "message": "Invalid JSON format",
                    }
                )
                continue

            message_type = data.get("type") if isinstance(data, dict) else None

            if message_type == "ping":
                manager.update_heartbeat(client_id)
                await websocket.send_json(
                    {
                        "type": "pong",
                        "timestamp": datetime.utcnow().isoformat(),
                    }
                )

            elif message_type in ("subscribe", "unsubscribe"):
                events = data.get("events", [])
                if not isinstance(events, list):
                    await websocket.send_json(
                        {
                            "type": "error",
                            "message": "events must be a list",
                        }
                    )
                    continue
                if message_type == "subscribe":
                    current = manager.subscribe(client_id, events)
                else:
                    current = manager.unsubscribe(client_id, events)
                await websocket.send_json(
                    {
                        "type": f"{message_type}d",
                        "events": sorted(current),
                    }
                )

            else:
                await websocket.send_json(
                    {
                        "type": "error",
                        "message": f"Unknown message type: {message_type}",
                    }
                )

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected: client_id={client_id}")
    except Exception as e:
        logger.error(f"WebSocket error for client {client_id}: {e}")
    finally:
        manager.disconnect(client_id)


@router.get("/ws/stats")
async def get_websocket_stats():
    """Connection counts, for monitoring."""
    return manager.get_connection_stats()
