"""
Unit tests for the broadcast dispatcher.

Tests cover:
- Topic fan-out only reaches subscribers of that app
- Closed or failing connections are skipped
- User-targeted delivery
- Enqueue-time snapshots of payload and recipients, ordering
- Worker keeps running after a failed delivery
"""

import asyncio

import pytest

from collabhub.realtime.dispatcher import BroadcastDispatcher
from collabhub.realtime.registry import ConnectionRegistry
from collabhub.realtime.schemas import RealtimeEvent
from tests.conftest import FakeWebSocket


@pytest.fixture
def registry():
    return ConnectionRegistry()


@pytest.fixture
def dispatcher(registry):
    return BroadcastDispatcher(registry)


def connect(registry, app_id=None, username=None, **kwargs):
    websocket = FakeWebSocket(**kwargs)
    cid = registry.register(websocket)
    if username:
        registry.authenticate(cid, username)
    if app_id:
        registry.subscribe(cid, app_id)
    return websocket


class TestTopicBroadcast:
    @pytest.mark.asyncio
    async def test_reaches_only_topic_subscribers(self, registry, dispatcher):
        first = connect(registry, "app-1")
        second = connect(registry, "app-1")
        other = connect(registry, "app-2")
        idle = connect(registry)

        dispatcher.broadcast_to_topic("app-1", RealtimeEvent(type="app_deleted", data={"app_id": "app-1"}))
        await dispatcher.flush()

        assert first.types() == ["app_deleted"]
        assert second.types() == ["app_deleted"]
        assert other.sent == []
        assert idle.sent == []

    @pytest.mark.asyncio
    async def test_closed_connection_skipped(self, registry, dispatcher):
        closed = connect(registry, "app-1")
        closed.close()
        live = connect(registry, "app-1")

        dispatcher.broadcast_to_topic("app-1", RealtimeEvent(type="new_comment"))
        await dispatcher.flush()

        assert closed.sent == []
        assert live.types() == ["new_comment"]

    @pytest.mark.asyncio
    async def test_failing_connection_does_not_stop_others(self, registry, dispatcher):
        connect(registry, "app-1", fail=True)
        live = connect(registry, "app-1")

        dispatcher.broadcast_to_topic("app-1", RealtimeEvent(type="new_comment"))
        await dispatcher.flush()

        assert live.types() == ["new_comment"]

    @pytest.mark.asyncio
    async def test_payload_snapshot_taken_at_enqueue(self, registry, dispatcher):
        websocket = connect(registry, "app-1")
        data = {"comment": {"text": "before"}}

        dispatcher.broadcast_to_topic("app-1", RealtimeEvent(type="new_comment", data=data))
        data["comment"]["text"] = "after"
        await dispatcher.flush()

        assert websocket.sent[0]["data"]["comment"]["text"] == "before"

    @pytest.mark.asyncio
    async def test_order_preserved(self, registry, dispatcher):
        websocket = connect(registry, "app-1")
        for kind in ("new_comment", "comment_updated", "comment_deleted"):
            dispatcher.broadcast_to_topic("app-1", RealtimeEvent(type=kind))
        await dispatcher.flush()

        assert websocket.types() == ["new_comment", "comment_updated", "comment_deleted"]

    @pytest.mark.asyncio
    async def test_late_subscriber_misses_earlier_event(self, registry, dispatcher):
        dispatcher.broadcast_to_topic("app-1", RealtimeEvent(type="new_comment"))
        late = connect(registry, "app-1")
        await dispatcher.flush()

        assert late.sent == []

    @pytest.mark.asyncio
    async def test_recipients_fixed_at_enqueue(self, registry, dispatcher):
        websocket = FakeWebSocket()
        cid = registry.register(websocket)
        registry.subscribe(cid, "app-1")

        dispatcher.broadcast_to_topic("app-1", RealtimeEvent(type="new_comment"))
        registry.subscribe(cid, "app-2")
        await dispatcher.flush()

        assert websocket.types() == ["new_comment"]

    @pytest.mark.asyncio
    async def test_unregistered_connection_skipped(self, registry, dispatcher):
        websocket = FakeWebSocket()
        cid = registry.register(websocket)
        registry.subscribe(cid, "app-1")

        dispatcher.broadcast_to_topic("app-1", RealtimeEvent(type="new_comment"))
        registry.unregister(cid)
        await dispatcher.flush()

        assert websocket.sent == []


class TestSendToUser:
    @pytest.mark.asyncio
    async def test_latest_connection_only(self, registry, dispatcher):
        older = connect(registry, username="ann")
        newer = connect(registry, username="ann")

        dispatcher.send_to_user("ann", RealtimeEvent(type="notice"))
        await dispatcher.flush()

        assert older.sent == []
        assert newer.types() == ["notice"]

    @pytest.mark.asyncio
    async def test_offline_user_dropped(self, registry, dispatcher):
        dispatcher.send_to_user("nobody", RealtimeEvent(type="notice"))
        await dispatcher.flush()
        assert dispatcher.pending == 0


class TestWorker:
    @pytest.mark.asyncio
    async def test_background_worker_delivers(self, registry, dispatcher):
        websocket = connect(registry, "app-1")
        await dispatcher.start()
        try:
            dispatcher.broadcast_to_topic("app-1", RealtimeEvent(type="new_comment"))
            for _ in range(100):
                if websocket.sent:
                    break
                await asyncio.sleep(0.01)
        finally:
            await dispatcher.stop()

        assert websocket.types() == ["new_comment"]

    @pytest.mark.asyncio
    async def test_worker_survives_delivery_error(self, registry, dispatcher, monkeypatch):
        websocket = connect(registry, "app-1")
        deliver = dispatcher._deliver
        calls = []

        async def flaky_deliver(delivery):
            calls.append(delivery)
            if len(calls) == 1:
                raise RuntimeError("boom")
            await deliver(delivery)

        monkeypatch.setattr(dispatcher, "_deliver", flaky_deliver)
        await dispatcher.start()
        try:
            dispatcher.broadcast_to_topic("app-1", RealtimeEvent(type="new_comment"))
            dispatcher.broadcast_to_topic("app-1", RealtimeEvent(type="comment_deleted"))
            for _ in range(100):
                if websocket.sent:
                    break
                await asyncio.sleep(0.01)
        finally:
            await dispatcher.stop()

        assert websocket.types() == ["comment_deleted"]

    @pytest.mark.asyncio
    async def test_stop_without_start(self, dispatcher):
        await dispatcher.stop()
