"""
Unit tests for the connection registry.
"""

import pytest

from collabhub.realtime.registry import ConnectionRegistry
from tests.conftest import FakeWebSocket


@pytest.fixture
def registry():
    return ConnectionRegistry()


class TestSubscriptions:
    def test_no_topic_before_subscribe(self, registry):
        cid = registry.register(FakeWebSocket())
        assert registry.get(cid).app_id is None

    def test_subscribe_replaces_previous_topic(self, registry):
        """A connection follows exactly one app at a time."""
        cid = registry.register(FakeWebSocket())
        registry.subscribe(cid, "app-1")
        registry.subscribe(cid, "app-2")

        assert registry.get(cid).app_id == "app-2"
        assert registry.subscribers("app-1") == []
        assert [c.connection_id for c in registry.subscribers("app-2")] == [cid]

    def test_resubscribe_same_topic(self, registry):
        cid = registry.register(FakeWebSocket())
        registry.subscribe(cid, "app-1")
        registry.subscribe(cid, "app-1")
        assert len(registry.subscribers("app-1")) == 1

    def test_many_subscribers(self, registry):
        ids = [registry.register(FakeWebSocket()) for _ in range(3)]
        for cid in ids:
            registry.subscribe(cid, "app-1")
        assert {c.connection_id for c in registry.subscribers("app-1")} == set(ids)

    def test_unsubscribe(self, registry):
        cid = registry.register(FakeWebSocket())
        registry.subscribe(cid, "app-1")
        registry.unsubscribe(cid)

        assert registry.get(cid).app_id is None
        assert registry.subscribers("app-1") == []

    def test_prune_subscribers(self, registry):
        bob = registry.register(FakeWebSocket())
        registry.authenticate(bob, "bob")
        ann = registry.register(FakeWebSocket())
        registry.authenticate(ann, "ann")
        for cid in (bob, ann):
            registry.subscribe(cid, "app-1")

        removed = registry.prune_subscribers("app-1", lambda c: c.username != "bob")

        assert [c.connection_id for c in removed] == [bob]
        assert [c.connection_id for c in registry.subscribers("app-1")] == [ann]
        assert registry.get(bob).app_id is None


class TestAuthentication:
    def test_last_registration_wins(self, registry):
        first = registry.register(FakeWebSocket())
        second = registry.register(FakeWebSocket())
        registry.authenticate(first, "ann")
        registry.authenticate(second, "ann")

        assert registry.connection_for_user("ann").connection_id == second

    def test_older_connection_close_keeps_newer_binding(self, registry):
        first = registry.register(FakeWebSocket())
        second = registry.register(FakeWebSocket())
        registry.authenticate(first, "ann")
        registry.authenticate(second, "ann")

        registry.unregister(first)
        assert registry.connection_for_user("ann").connection_id == second

    def test_reauthenticate_as_other_user(self, registry):
        cid = registry.register(FakeWebSocket())
        registry.authenticate(cid, "ann")
        registry.authenticate(cid, "bob")

        assert registry.connection_for_user("ann") is None
        assert registry.connection_for_user("bob").connection_id == cid

    def test_unknown_connection(self, registry):
        with pytest.raises(KeyError):
            registry.authenticate("missing", "ann")


class TestUnregister:
    def test_removes_all_state(self, registry):
        cid = registry.register(FakeWebSocket())
        registry.authenticate(cid, "ann")
        registry.subscribe(cid, "app-1")

        registry.unregister(cid)

        assert registry.get(cid) is None
        assert registry.connection_for_user("ann") is None
        assert registry.subscribers("app-1") == []
        assert len(registry) == 0

    def test_idempotent(self, registry):
        cid = registry.register(FakeWebSocket())
        registry.unregister(cid)
        registry.unregister(cid)
        assert len(registry) == 0
