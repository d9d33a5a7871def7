# sse_listener.py
import asyncio
import os
import sys

import httpx

BRIDGE_URL = os.getenv("BRIDGE_URL", "http://127.0.0.1:8000")


async def listen(session_id: str):
    """Print every frame the bridge sends until it closes the stream (~50s)."""
    async with httpx.AsyncClient(timeout=None) as client:
        async with client.stream("GET", f"{BRIDGE_URL}/api/sse", params={"session": session_id}) as resp:
            print(f"HTTP {resp.status_code} {resp.headers.get('content-type')}")
            async for line in resp.aiter_lines():
                if line:
                    print(line)
    print("stream closed")


if __name__ == "__main__":
    asyncio.run(listen(sys.argv[1] if len(sys.argv) > 1 else "demo"))
