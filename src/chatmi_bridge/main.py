import argparse
from dataclasses import replace

from chatmi_bridge.config.settings import BridgeSettings
from chatmi_bridge.server.app import BridgeServer

# Settings come from CHATMI_ENDPOINT, BRIDGE_HOST, BRIDGE_PORT, LOG_LEVEL,
# SSE_PING_INTERVAL and SSE_MAX_DURATION (a .env file works too).
bridge = BridgeServer(name="chatmi-bridge")

# `uvicorn chatmi_bridge.main:app`
app = bridge.app


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="JSON-RPC to Chatmi webhook bridge")
    parser.add_argument("--host", help="Interface to bind (default: BRIDGE_HOST or 127.0.0.1)")
    parser.add_argument("--port", type=int, help="Port to bind (default: BRIDGE_PORT or 8000)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: LOG_LEVEL or INFO)",
    )
    args = parser.parse_args(argv)

    server = bridge
    if args.log_level:
        settings: BridgeSettings = replace(bridge.settings, log_level=args.log_level)
        # reuse the already-open webhook client
        server = BridgeServer(name=bridge.name, settings=settings, chatmi=bridge.chatmi)

    server.run(host=args.host, port=args.port)


if __name__ == "__main__":
    main()
