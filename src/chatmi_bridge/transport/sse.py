# chatmi_bridge/transport/sse.py
import logging
from typing import AsyncIterator

import anyio
from fastapi import Request, Response
from fastapi.responses import StreamingResponse

from chatmi_bridge.config import default
from chatmi_bridge.schemas import ConnectionEvent, dumps_compact
from chatmi_bridge.server.sessions import SessionRegistry
from chatmi_bridge.transport.cors import cors_headers, method_not_allowed, preflight_response

ALLOWED_METHODS = ("GET", "OPTIONS")
PING_FRAME = ":ping\n\n"

STREAM_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def format_sse_data(data: str) -> str:
    return f"data: {data}\n\n"


class StreamTransport:
    """
    GET endpoint: keeps an event stream open for one client session.

    The stream carries a single connection event, then a comment ping every
    `ping_interval` seconds so proxies don't drop the idle connection. It is
    closed after `max_duration` seconds or as soon as the client goes away,
    and the session is removed from the registry either way.
    """

    def __init__(
        self,
        sessions: SessionRegistry,
        ping_interval: float = default.SSE_PING_INTERVAL,
        max_duration: float = default.SSE_MAX_DURATION,
    ):
        self.sessions = sessions
        self.ping_interval = ping_interval
        self.max_duration = max_duration
        self.logger = logging.getLogger("chatmi_bridge.sse")

    async def handle(self, request: Request) -> Response:
        if request.method == "OPTIONS":
            return preflight_response(ALLOWED_METHODS)
        if request.method != "GET":
            return method_not_allowed(
                ALLOWED_METHODS, "Method not allowed. Use GET for SSE connection."
            )

        session_id = request.query_params.get("session") or default.DEFAULT_SESSION_ID
        self.logger.info(f"[SSE Connected] Session: {session_id}")

        return StreamingResponse(
            self.event_stream(request, session_id),
            media_type="text/event-stream",
            headers={**cors_headers(ALLOWED_METHODS), **STREAM_HEADERS},
        )

    async def event_stream(self, request: Request, session_id: str) -> AsyncIterator[str]:
        session = self.sessions.open(session_id)
        deadline = anyio.current_time() + self.max_duration
        reason = "disconnect"
        try:
            yield format_sse_data(dumps_compact(ConnectionEvent(sessionId=session_id).model_dump()))

            while True:
                remaining = deadline - anyio.current_time()
                if remaining <= 0:
                    reason = "timeout"
                    break
                await anyio.sleep(min(self.ping_interval, remaining))
                if await request.is_disconnected():
                    break
                if anyio.current_time() >= deadline:
                    reason = "timeout"
                    break
                yield PING_FRAME
        finally:
            self.sessions.discard(session)
            if reason == "timeout":
                self.logger.info(f"[SSE Timeout] Session: {session_id}")
            else:
                self.logger.info(f"[SSE Disconnected] Session: {session_id}")
