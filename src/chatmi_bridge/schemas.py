# chatmi_bridge/schemas.py
import json
from datetime import datetime, timezone
from typing import Any, Literal, Optional, Union, List
from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr


def dumps_compact(value: Any) -> str:
    """JSON without whitespace, the way the webhook and SSE clients expect it."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


# strict so that 1.5 stays 1.5, 2.0 stays 2.0 and booleans are rejected
RPCId = Union[StrictInt, StrictFloat, StrictStr]


def _is_falsy(value: Any) -> bool:
    # null, false, 0 and "" count as "no params"; empty containers do not
    return value is None or (isinstance(value, (bool, int, float, str)) and not value)


# ──────────────────────────────────────────────────────────────
# JSON-RPC side
# ──────────────────────────────────────────────────────────────
class RPCRequest(BaseModel):
    jsonrpc: Literal["2.0"]
    method: StrictStr = Field(..., min_length=1)
    params: Optional[Any] = None
    id: Optional[RPCId] = None

    def to_input_string(self) -> str:
        """Serialize the call into the opaque text handed to Chatmi."""
        inner = {
            "method": self.method,
            "params": {} if _is_falsy(self.params) else self.params,
            "id": self.id,
        }
        return dumps_compact(inner)


class RPCErrorObject(BaseModel):
    code: int
    message: str
    data: Optional[Any] = None


class RPCResponse(BaseModel):
    jsonrpc: str = Field(default="2.0")
    result: Optional[Any] = None
    error: Optional[RPCErrorObject] = None
    id: Optional[RPCId] = None

    @classmethod
    def success(cls, id, result) -> dict:
        # result stays in the payload even when it is JSON null
        return cls(result=result, id=id).model_dump(exclude={"error"})

    @classmethod
    def failure(cls, id, error) -> dict:
        resp = cls(error=error.to_dict(), id=id)
        return {
            "jsonrpc": resp.jsonrpc,
            "id": resp.id,
            "error": resp.error.model_dump(exclude_none=True),
        }


# ──────────────────────────────────────────────────────────────
# Chatmi webhook side
# ──────────────────────────────────────────────────────────────
class ChatmiChat(BaseModel):
    id: str


class ChatmiRequest(BaseModel):
    event: Literal["new_message"] = "new_message"
    chat: ChatmiChat
    text: str


class ChatmiMessage(BaseModel):
    kind: str = "text"
    text: str


class ChatmiResponse(BaseModel):
    has_answer: bool = False
    messages: List[ChatmiMessage] = Field(default_factory=list)


# ──────────────────────────────────────────────────────────────
# SSE side
# ──────────────────────────────────────────────────────────────
def utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ConnectionEvent(BaseModel):
    type: Literal["connection"] = "connection"
    sessionId: str
    timestamp: str = Field(default_factory=utc_timestamp)
