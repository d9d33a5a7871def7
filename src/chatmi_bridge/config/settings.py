# chatmi_bridge/config/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Mapping

from dotenv import load_dotenv

from chatmi_bridge.config import default

load_dotenv()


def _env_float(env: Mapping[str, str], key: str, fallback: float) -> float:
    raw = env.get(key)
    if raw is None or raw == "":
        return fallback
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}")


def _env_int(env: Mapping[str, str], key: str, fallback: int) -> int:
    raw = env.get(key)
    if raw is None or raw == "":
        return fallback
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class BridgeSettings:
    chatmi_endpoint: str = default.CHATMI_ENDPOINT
    chatmi_chat_id: str = default.CHATMI_CHAT_ID
    chatmi_timeout: float | None = default.CHATMI_TIMEOUT
    host: str = default.HOST
    port: int = default.PORT
    log_level: str | int = default.LOG_LEVEL
    message_path: str = default.MESSAGE_PATH
    sse_path: str = default.SSE_PATH
    ping_interval: float = default.SSE_PING_INTERVAL
    max_duration: float = default.SSE_MAX_DURATION

    def __post_init__(self):
        if self.ping_interval <= 0:
            raise ValueError("ping_interval must be positive")
        if self.max_duration <= 0:
            raise ValueError("max_duration must be positive")

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "BridgeSettings":
        """Build settings from environment variables (and a .env file, if any)."""
        env = os.environ if env is None else env
        return cls(
            chatmi_endpoint=env.get("CHATMI_ENDPOINT") or default.CHATMI_ENDPOINT,
            chatmi_timeout=_env_float(env, "CHATMI_TIMEOUT", default.CHATMI_TIMEOUT),
            host=env.get("BRIDGE_HOST") or default.HOST,
            port=_env_int(env, "BRIDGE_PORT", default.PORT),
            log_level=(env.get("LOG_LEVEL") or default.LOG_LEVEL).upper(),
            ping_interval=_env_float(env, "SSE_PING_INTERVAL", default.SSE_PING_INTERVAL),
            max_duration=_env_float(env, "SSE_MAX_DURATION", default.SSE_MAX_DURATION),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BridgeSettings":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise TypeError(f"Unknown settings: {', '.join(sorted(unknown))}")
        return cls(**data)
