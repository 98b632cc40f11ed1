"""
Shared test fixtures for the KekeLink backend.

This module provides reusable fixtures for:
- An in-memory MongoDB (mongomock) bound to the default mongoengine alias
- A freshly built FastAPI app with its own WebSocket hub
- TestClient instances for HTTP and WebSocket tests
- Fake WebSocket objects for driving the ConnectionManager directly
"""

import mongomock
import pytest
from fastapi.testclient import TestClient
from mongoengine import connect, disconnect
from starlette.websockets import WebSocketState

import main
from sockets.hub_socket import ConnectionManager


class FakeWebSocket:
    """Records everything the hub sends; can be told to fail or go away."""

    def __init__(self, fail_sends: bool = False):
        self.sent = []
        self.fail_sends = fail_sends
        self.close_code = None
        self.client_state = WebSocketState.CONNECTING
        self.application_state = WebSocketState.CONNECTING

    async def accept(self):
        self.client_state = WebSocketState.CONNECTED
        self.application_state = WebSocketState.CONNECTED

    async def send_json(self, message):
        if self.fail_sends:
            raise RuntimeError("socket is broken")
        self.sent.append(message)

    async def close(self, code=1000, reason=None):
        self.close_code = code
        self.application_state = WebSocketState.DISCONNECTED

    def drop(self):
        """Simulate the client going away without a close handshake."""
        self.client_state = WebSocketState.DISCONNECTED

    def of_type(self, message_type):
        return [m for m in self.sent if m.get("type") == message_type]

    def clear(self):
        self.sent.clear()


@pytest.fixture
def mongo():
    """In-memory database for model and route tests."""
    connect(
        "kekelink_test",
        host="mongodb://localhost",
        mongo_client_class=mongomock.MongoClient,
        alias="default",
    )
    yield
    disconnect(alias="default")


@pytest.fixture
def manager():
    return ConnectionManager(send_timeout=1.0)


@pytest.fixture
def app(monkeypatch):
    """App with the real MongoDB connection hooks disabled."""
    monkeypatch.setattr(main, "connect_db", lambda: None)
    monkeypatch.setattr(main, "disconnect_db", lambda: None)
    return main.create_app()


@pytest.fixture
def client(app, mongo):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def hub_client(app):
    """
    Client for WebSocket tests.

    Entered as a context manager so every websocket session shares one
    event loop, like real connections to a single server process.
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_socket():
    """Factory for FakeWebSocket instances."""
    return FakeWebSocket
