# chatmi_bridge/server/app.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import anyio
import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from chatmi_bridge.client.chatmi_client import ChatmiClient
from chatmi_bridge.config.settings import BridgeSettings
from chatmi_bridge.server.sessions import SessionRegistry
from chatmi_bridge.transport.cors import ALL_METHODS
from chatmi_bridge.transport.http import MessageTransport
from chatmi_bridge.transport.sse import StreamTransport


# ──────────────────────────────────────────────────────────────
# Logging
# ──────────────────────────────────────────────────────────────
def _configure_bridge_logging(level: str | int = "INFO"):
    logger = logging.getLogger("chatmi_bridge")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)


# ──────────────────────────────────────────────────────────────
# Main Server Class
# ──────────────────────────────────────────────────────────────
class BridgeServer:
    """
    Wires the Chatmi client, the session registry and both transports into
    one FastAPI application, and runs it under uvicorn.
    """

    def __init__(
        self,
        name: str | None = None,
        settings: BridgeSettings | dict | None = None,
        chatmi: ChatmiClient | None = None,
    ):
        # normalize settings: accept dataclass or dict or None
        if settings is None:
            self._settings: BridgeSettings = BridgeSettings.from_env()
        elif isinstance(settings, BridgeSettings):
            self._settings = settings
        elif isinstance(settings, dict):
            self._settings = BridgeSettings.from_dict(settings)
        else:
            raise TypeError("settings must be BridgeSettings | dict | None")

        self._name = name or "chatmi-bridge"
        self._logger = logging.getLogger("chatmi_bridge.server")
        self._app: FastAPI | None = None

        self.sessions = SessionRegistry()
        self.chatmi = chatmi or ChatmiClient(
            endpoint=self._settings.chatmi_endpoint,
            chat_id=self._settings.chatmi_chat_id,
            timeout=self._settings.chatmi_timeout,
        )

        _configure_bridge_logging(self._settings.log_level)
        self._logger.info(f"Initialized {self._name} -> {self._settings.chatmi_endpoint}")

    # ───── Properties ─────
    @property
    def name(self) -> str:
        return self._name

    @property
    def settings(self) -> BridgeSettings:
        return self._settings

    @property
    def app(self) -> FastAPI:
        self._setup_fastapi_app()
        return self._app

    # ───── Run ─────
    def run(self, *, host: str | None = None, port: int | None = None) -> None:
        """Serve the bridge over HTTP until interrupted."""
        host = host or self._settings.host
        port = port or self._settings.port
        print(f"Chatmi bridge starting at http://{host}:{port} | HTTP + SSE")
        anyio.run(self._run_http_async, host, port)

    async def _run_http_async(self, host: str, port: int):
        self._setup_fastapi_app()
        config = uvicorn.Config(
            self._app,
            host=host,
            port=port,
            log_level=self._settings.log_level.lower() if isinstance(self._settings.log_level, str) else "info",
        )
        server = uvicorn.Server(config)
        self._logger.info(f"Starting HTTP server at http://{host}:{port}{self._settings.message_path}")
        await server.serve()

    # ───── FastAPI App Setup ─────
    def _setup_fastapi_app(self):
        if self._app is not None:
            return

        message = MessageTransport(self.chatmi)
        stream = StreamTransport(
            self.sessions,
            ping_interval=self._settings.ping_interval,
            max_duration=self._settings.max_duration,
        )

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            yield
            await self.chatmi.aclose()
            self._logger.info("Chatmi client closed")

        app = FastAPI(title=self._name, lifespan=lifespan)

        # Both endpoints take every method and answer 405 themselves
        app.api_route(self._settings.message_path, methods=ALL_METHODS)(message.handle)
        app.api_route(self._settings.sse_path, methods=ALL_METHODS)(stream.handle)

        async def health_endpoint():
            return JSONResponse(content={"status": "healthy", "active_sessions": len(self.sessions)})

        app.get("/health")(health_endpoint)

        self._app = app
