# chatmi_bridge/config/default.py
# Fallback values used when the environment does not provide them.

CHATMI_ENDPOINT = (
    "https://admin.chatme.ai/connector/webim/webim_message/"
    "a7e28b914256ab13395ec974e7bb9548/bot_api_webhook"
)
CHATMI_CHAT_ID = "mcp-session"
CHATMI_TIMEOUT = 10.0

HOST = "127.0.0.1"
PORT = 8000
LOG_LEVEL = "INFO"

MESSAGE_PATH = "/api/message"
SSE_PATH = "/api/sse"

DEFAULT_SESSION_ID = "default"
SSE_PING_INTERVAL = 15.0
# hosting platform kills functions at 60s
SSE_MAX_DURATION = 50.0
