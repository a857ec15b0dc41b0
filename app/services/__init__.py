# Services module
from app.services.websocket_manager import manager, ConnectionManager

__all__ = [
    "manager",
    "ConnectionManager",
]
