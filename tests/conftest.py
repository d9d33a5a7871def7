"""
Shared fixtures: a bridge wired to a fake Chatmi webhook.
"""
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from chatmi_bridge.client.chatmi_client import ChatmiClient
from chatmi_bridge.config.settings import BridgeSettings
from chatmi_bridge.server.app import BridgeServer

CHATMI_URL = "https://chatmi.test/connector/bot_api_webhook"


@pytest.fixture
def anyio_backend():
    return "asyncio"


class ChatmiStub:
    """Records what the bridge posts and answers with a canned webhook reply."""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.body = {"has_answer": True, "messages": [{"kind": "text", "text": "{}"}]}
        self.network_error = False

    def answer(self, *texts: str):
        self.body = {
            "has_answer": True,
            "messages": [{"kind": "text", "text": t} for t in texts],
        }

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.network_error:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_payload(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def chatmi_stub():
    return ChatmiStub()


@pytest.fixture
def chatmi_client(chatmi_stub):
    return ChatmiClient(endpoint=CHATMI_URL, transport=httpx.MockTransport(chatmi_stub))


@pytest.fixture
def settings():
    # short stream lifetime so SSE tests finish quickly
    return BridgeSettings(
        chatmi_endpoint=CHATMI_URL,
        log_level="DEBUG",
        ping_interval=0.05,
        max_duration=0.2,
    )


@pytest.fixture
def server(settings, chatmi_client):
    return BridgeServer(name="test-bridge", settings=settings, chatmi=chatmi_client)


@pytest.fixture
def client(server):
    with TestClient(server.app) as test_client:
        yield test_client
