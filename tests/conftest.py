"""
Pytest fixtures for collabhub tests.
"""

import json
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketState

from collabhub.core.config import Settings
from collabhub.core.hub import Hub
from collabhub.domains.apps.entities import Role, Visibility
from collabhub.domains.identity.schemas import UserCreate
from collabhub.domains.identity.services import IdentityService
from collabhub.main import create_app
from collabhub.notifications.resolver import NotificationRecord


class CollectingNotificationSink:
    """Notification sink that keeps every delivered record."""

    def __init__(self):
        self.records: List[NotificationRecord] = []

    def deliver(self, records: List[NotificationRecord]) -> None:
        self.records.extend(records)


class FakeWebSocket:
    """Stand-in for a starlette WebSocket that records sent messages."""

    def __init__(self, fail: bool = False):
        self.client_state = WebSocketState.CONNECTED
        self.application_state = WebSocketState.CONNECTED
        self.fail = fail
        self.sent: List[Dict[str, Any]] = []

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise RuntimeError("Cannot call send once a close message has been sent")
        self.sent.append(json.loads(data))

    def close(self) -> None:
        self.client_state = WebSocketState.DISCONNECTED

    def types(self) -> List[str]:
        return [message["type"] for message in self.sent]


@pytest.fixture
def settings() -> Settings:
    """Settings with cheap bcrypt rounds."""
    return Settings(bcrypt_rounds=4, session_ttl_minutes=60, log_level="WARNING")


@pytest.fixture
def sink() -> CollectingNotificationSink:
    return CollectingNotificationSink()


@pytest.fixture
def hub(settings, sink) -> Hub:
    return Hub(settings=settings, notifier=sink)


@pytest.fixture
def store(hub):
    return hub.store


@pytest.fixture
def make_user(hub):
    """Factory that signs a user up through the identity service."""

    def _make_user(username: str, password: str = "secret", notify_on_events: bool = True):
        return IdentityService(hub).signup(UserCreate(
            username=username,
            email=f"{username}@example.com",
            password=password,
            notify_on_events=notify_on_events,
        ))

    return _make_user


@pytest.fixture
def team(hub, make_user):
    """ann owns a public app; bob writes, dave administers, carol is a plain user."""
    for name in ("ann", "bob", "carol", "dave"):
        make_user(name)
    app = hub.store.create_app(name="demo", owner="ann", visibility=Visibility.PUBLIC)
    hub.store.add_collaborator(app.id, "bob", role=Role.WRITE, added_by="ann")
    hub.store.add_collaborator(app.id, "dave", role=Role.ADMIN, added_by="ann")
    return app


@pytest.fixture
def client(settings, sink):
    app = create_app(settings=settings, notifier=sink)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def signup_and_login(client):
    """Create a user over HTTP and return auth headers for it."""

    def _signup_and_login(username: str, password: str = "secret", notify_on_events: bool = True):
        response = client.post("/api/auth/signup", json={
            "username": username,
            "email": f"{username}@example.com",
            "password": password,
            "notify_on_events": notify_on_events,
        })
        assert response.status_code == 201, response.text
        response = client.post("/api/auth/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _signup_and_login
