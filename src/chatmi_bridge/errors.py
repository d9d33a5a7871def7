# chatmi_bridge/errors.py
from typing import Any
from dataclasses import dataclass

@dataclass
class JSONRPCError(Exception):
    code: int
    message: str
    data: Any = None

    def to_dict(self):
        base = {"code": self.code, "message": self.message}
        if self.data is not None:
            base["data"] = self.data
        return base

# JSON-RPC 2.0 error codes used by the bridge
PARSE_ERROR = lambda d=None: JSONRPCError(-32700, "Parse error", d)
INVALID_REQUEST = lambda d=None: JSONRPCError(-32600, "Invalid Request", d)
INTERNAL_ERROR = lambda msg="Internal error", d=None: JSONRPCError(-32603, msg or "Internal error", d)


# ──────────────────────────────────────────────────────────────
# Upstream (Chatmi) failures
# ──────────────────────────────────────────────────────────────
class BridgeError(Exception):
    """Base class for failures talking to the Chatmi webhook."""


class UpstreamHTTPError(BridgeError):
    """Chatmi answered with a non-success HTTP status."""

    def __init__(self, status_code: int, reason: str = ""):
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"Chatmi API error: {status_code} {reason}".rstrip())


class NoAnswerError(BridgeError):
    """Chatmi answered, but produced no message."""

    def __init__(self, message: str = "No response from Chatmi"):
        super().__init__(message)
