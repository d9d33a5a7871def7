"""
Tests for settings, the session registry and server wiring.
"""
import pytest

from chatmi_bridge.config import default
from chatmi_bridge.config.settings import BridgeSettings
from chatmi_bridge.errors import INTERNAL_ERROR, INVALID_REQUEST
from chatmi_bridge.schemas import RPCRequest, RPCResponse
from chatmi_bridge.server.app import BridgeServer
from chatmi_bridge.server.sessions import SessionRegistry


class TestSettings:

    def test_defaults_from_empty_env(self):
        settings = BridgeSettings.from_env({})

        assert settings.chatmi_endpoint == default.CHATMI_ENDPOINT
        assert settings.ping_interval == 15
        assert settings.max_duration == 50
        assert settings.port == 8000

    def test_values_from_env(self):
        settings = BridgeSettings.from_env({
            "CHATMI_ENDPOINT": "https://example.test/hook",
            "BRIDGE_PORT": "9100",
            "LOG_LEVEL": "debug",
            "SSE_MAX_DURATION": "25",
            "SSE_PING_INTERVAL": "5",
        })

        assert settings.chatmi_endpoint == "https://example.test/hook"
        assert settings.port == 9100
        assert settings.log_level == "DEBUG"
        assert settings.max_duration == 25.0
        assert settings.ping_interval == 5.0

    def test_bad_number(self):
        with pytest.raises(ValueError, match="BRIDGE_PORT"):
            BridgeSettings.from_env({"BRIDGE_PORT": "eighty"})

    def test_non_positive_duration(self):
        with pytest.raises(ValueError):
            BridgeSettings(max_duration=0)

    def test_unknown_key_in_dict(self):
        with pytest.raises(TypeError):
            BridgeSettings.from_dict({"colour": "blue"})


class TestServer:

    def test_accepts_dict_settings(self):
        server = BridgeServer(settings={"chatmi_endpoint": "https://example.test/hook", "port": 9001})

        assert server.settings.port == 9001
        assert server.chatmi.endpoint == "https://example.test/hook"
        assert server.name == "chatmi-bridge"

    def test_rejects_other_settings(self):
        with pytest.raises(TypeError):
            BridgeServer(settings=["not", "settings"])

    def test_app_is_built_once(self, server):
        assert server.app is server.app

    def test_routes(self, server):
        paths = {route.path for route in server.app.routes}
        assert {"/api/message", "/api/sse", "/health"} <= paths

    def test_cli_log_level_reuses_webhook_client(self, monkeypatch):
        """Overriding the log level must not leave a second httpx client open."""
        from chatmi_bridge import main as entry

        started = []
        monkeypatch.setattr(
            BridgeServer, "run", lambda self, host=None, port=None: started.append((self, host, port))
        )

        entry.main(["--log-level", "DEBUG", "--port", "9002"])

        server, host, port = started[0]
        assert server is not entry.bridge
        assert server.settings.log_level == "DEBUG"
        assert server.chatmi is entry.bridge.chatmi
        assert (host, port) == (None, 9002)


class TestSessionRegistry:

    def test_open_and_discard(self):
        registry = SessionRegistry()
        session = registry.open("a")

        assert "a" in registry
        assert registry.get("a") is session
        assert registry.session_ids() == ["a"]
        assert registry.discard(session) is True
        assert len(registry) == 0
        assert registry.discard(session) is False

    def test_stale_discard_is_ignored(self):
        registry = SessionRegistry()
        old = registry.open("a")
        new = registry.open("a")

        assert registry.discard(old) is False
        assert registry.get("a") is new


class TestSchemas:

    def test_input_string_is_compact(self):
        req = RPCRequest(jsonrpc="2.0", method="tools/call", params={"text": "héllo"}, id=1)

        assert req.to_input_string() == '{"method":"tools/call","params":{"text":"héllo"},"id":1}'

    def test_failure_envelope(self):
        assert RPCResponse.failure(None, INVALID_REQUEST()) == {
            "jsonrpc": "2.0",
            "id": None,
            "error": {"code": -32600, "message": "Invalid Request"},
        }

    def test_internal_error_message_fallback(self):
        assert INTERNAL_ERROR("").message == "Internal error"
        assert INTERNAL_ERROR("boom").code == -32603
