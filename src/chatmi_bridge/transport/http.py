# chatmi_bridge/transport/http.py
import json
import logging
from typing import Any

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from chatmi_bridge.client.chatmi_client import ChatmiClient
from chatmi_bridge.errors import INTERNAL_ERROR, INVALID_REQUEST, PARSE_ERROR
from chatmi_bridge.schemas import RPCRequest, RPCResponse, dumps_compact
from chatmi_bridge.transport.cors import cors_headers, method_not_allowed, preflight_response

ALLOWED_METHODS = ("POST", "OPTIONS")


def _extract_id(payload: Any):
    """Best-effort request id for error replies; null when it can't be echoed."""
    if not isinstance(payload, dict):
        return None
    rid = payload.get("id")
    if isinstance(rid, bool) or not isinstance(rid, (int, float, str)):
        return None
    return rid


def parse_output(output: str, logger: logging.Logger | None = None) -> Any:
    """Chatmi's reply is usually JSON; when it isn't, hand back the raw text."""
    try:
        return json.loads(output)
    except (json.JSONDecodeError, TypeError) as e:
        if logger:
            logger.error(f"[Parse Error] {e}")
        return output


class MessageTransport:
    """POST endpoint: JSON-RPC request in, one Chatmi round trip, JSON-RPC response out."""

    def __init__(self, chatmi: ChatmiClient):
        self.chatmi = chatmi
        self.logger = logging.getLogger("chatmi_bridge.message")

    async def handle(self, request: Request) -> Response:
        if request.method == "OPTIONS":
            return preflight_response(ALLOWED_METHODS)
        if request.method != "POST":
            return method_not_allowed(
                ALLOWED_METHODS, "Method not allowed. Use POST to send messages."
            )

        raw = await request.body()
        try:
            payload = json.loads(raw) if raw else None
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            self.logger.error(f"[Validation Error] Body is not JSON: {e}")
            return self._error_response(PARSE_ERROR(), None, 400)

        try:
            self.logger.info(f"[MCP Request] {dumps_compact(payload)}")

            try:
                rpc_request = RPCRequest.model_validate(payload)
            except ValidationError as e:
                self.logger.error(f"[Validation Error] Invalid MCP request format: {e.error_count()} error(s)")
                return self._error_response(INVALID_REQUEST(), _extract_id(payload), 400)

            input_string = rpc_request.to_input_string()
            self.logger.info(f"[Chatmi Input] {input_string}")

            output_string = await self.chatmi.send_message(input_string)
            self.logger.info(f"[Chatmi Output] {output_string}")

            result = parse_output(output_string, self.logger)
            response = RPCResponse.success(rpc_request.id, result)
            self.logger.info(f"[MCP Response] {dumps_compact(response)}")
            return JSONResponse(response, headers=cors_headers(ALLOWED_METHODS))

        except Exception as e:
            self.logger.exception(f"[Error] {e!r}")
            return self._error_response(INTERNAL_ERROR(str(e)), _extract_id(payload), 500)

    def _error_response(self, error, id, status=400):
        return JSONResponse(
            status_code=status,
            content=RPCResponse.failure(id, error),
            headers=cors_headers(ALLOWED_METHODS),
        )
