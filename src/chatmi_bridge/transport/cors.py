# chatmi_bridge/transport/cors.py
from typing import Iterable

from fastapi import Response
from fastapi.responses import JSONResponse

# Every method the endpoints are mounted for, so that wrong methods reach our
# handlers and get our own 405 body instead of the framework's.
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def cors_headers(methods: Iterable[str]) -> dict:
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": ", ".join(methods),
        "Access-Control-Allow-Headers": "Content-Type",
    }


def preflight_response(methods: Iterable[str]) -> Response:
    return Response(status_code=200, headers=cors_headers(methods))


def method_not_allowed(methods: Iterable[str], message: str) -> JSONResponse:
    # plain error object, not a JSON-RPC envelope
    return JSONResponse(
        status_code=405,
        content={"error": message},
        headers=cors_headers(methods),
    )
