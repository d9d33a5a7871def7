# message_client.py
import asyncio
import os

import httpx

# Where the bridge is running (see `chatmi-bridge --help`)
BRIDGE_URL = os.getenv("BRIDGE_URL", "http://127.0.0.1:8000")


async def send_rpc(client: httpx.AsyncClient, method: str, params=None, id=1):
    payload = {"jsonrpc": "2.0", "method": method, "params": params, "id": id}
    resp = await client.post(f"{BRIDGE_URL}/api/message", json=payload)
    return resp.status_code, resp.json()


async def main():
    async with httpx.AsyncClient(timeout=30.0) as client:
        # Normal call: forwarded to Chatmi, answer comes back as `result`
        print("tools/list")
        print(await send_rpc(client, "tools/list"))

        print("tools/call echo")
        print(await send_rpc(client, "tools/call", {"name": "echo", "arguments": {"text": "hi"}}, id="abc"))

        # Broken request: jsonrpc version missing -> 400 / -32600
        resp = await client.post(f"{BRIDGE_URL}/api/message", json={"method": "ping", "id": 7})
        print("invalid:", resp.status_code, resp.json())


if __name__ == "__main__":
    asyncio.run(main())
