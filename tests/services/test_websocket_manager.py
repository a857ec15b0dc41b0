"""
Tests for the WebSocket connection manager.
"""

from datetime import datetime, timedelta

import pytest

from app.services.websocket_manager import ConnectionManager


class FakeWebSocket:
    """Records what the manager sends."""

    def __init__(self, fail: bool = False):
        self.accepted = False
        self.closed_with = None
        self.sent = []
        self.fail = fail

    async def accept(self):
        self.accepted = True

    async def send_json(self, message):
        if self.fail:
            raise RuntimeError("socket gone")
        self.sent.append(message)

    async def close(self, code=1000, reason=None):
        self.closed_with = code


class TestConnectionManager:

    @pytest.mark.asyncio
    async def test_connect_and_disconnect(self):
        manager = ConnectionManager()
        websocket = FakeWebSocket()

        client_id = await manager.connect(websocket)
        assert websocket.accepted
        assert manager.total_connections == 1

        manager.disconnect(client_id)
        assert manager.total_connections == 0

    @pytest.mark.asyncio
    async def test_broadcast_change_message(self):
        manager = ConnectionManager()
        websocket = FakeWebSocket()
        await manager.connect(websocket, client_id="screen-1")

        sent = await manager.broadcast_change("job_cards", "UPDATE", new={"id": "a"}, old={"id": "a"})
        assert sent == 1
        message = websocket.sent[0]
        assert message["type"] == "job_cards.UPDATE"
        assert message["table"] == "job_cards"
        assert message["event"] == "UPDATE"
        assert message["new"] == {"id": "a"}
        assert message["old"] == {"id": "a"}
        assert "timestamp" in message

    @pytest.mark.asyncio
    async def test_unknown_event_rejected(self):
        manager = ConnectionManager()
        with pytest.raises(ValueError):
            await manager.broadcast_change("job_cards", "UPSERT")

    @pytest.mark.asyncio
    async def test_subscriptions_filter_events(self):
        manager = ConnectionManager()
        everything = FakeWebSocket()
        deletes_only = FakeWebSocket()
        await manager.connect(everything, client_id="all")
        await manager.connect(deletes_only, client_id="deletes")
        manager.subscribe("deletes", ["job_cards.DELETE"])

        await manager.broadcast_change("job_cards", "INSERT", new={"id": "a"})
        await manager.broadcast_change("job_cards", "DELETE", old={"id": "a"})

        assert [m["event"] for m in everything.sent] == ["INSERT", "DELETE"]
        assert [m["event"] for m in deletes_only.sent] == ["DELETE"]

    @pytest.mark.asyncio
    async def test_wildcard_subscription(self):
        manager = ConnectionManager()
        await manager.connect(FakeWebSocket(), client_id="screen")
        manager.subscribe("screen", ["job_cards.*"])

        assert manager.wants("screen", "job_cards.UPDATE")
        assert not manager.wants("screen", "customers.UPDATE")

        assert manager.unsubscribe("screen", ["job_cards.*"]) == set()
        assert manager.wants("screen", "customers.UPDATE")

    @pytest.mark.asyncio
    async def test_failed_send_drops_connection(self):
        manager = ConnectionManager()
        await manager.connect(FakeWebSocket(fail=True), client_id="broken")

        sent = await manager.broadcast_change("job_cards", "INSERT", new={"id": "a"})
        assert sent == 0
        assert manager.total_connections == 0

    @pytest.mark.asyncio
    async def test_stale_connections_are_closed(self):
        manager = ConnectionManager()
        stale = FakeWebSocket()
        fresh = FakeWebSocket()
        await manager.connect(stale, client_id="stale")
        await manager.connect(fresh, client_id="fresh")
        manager._heartbeats["stale"] = datetime.utcnow() - timedelta(minutes=5)

        cleaned = await manager.check_stale_connections(timeout_seconds=120)
        assert cleaned == 1
        assert stale.closed_with == 4002
        assert manager.get_connection_stats() == {"total_connections": 1, "subscribed_connections": 0}
