"""Example client driving a running mcpws server."""

import asyncio
import json

import websockets


REQUESTS = [
    {"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}},
    {"jsonrpc": "2.0", "id": 2, "method": "tools/list"},
    {"jsonrpc": "2.0", "id": 3, "method": "tools/call", "params": {"name": "echo", "arguments": {"message": "hello"}}},
    {"jsonrpc": "2.0", "id": 4, "method": "tools/call", "params": {"name": "timestamp"}},
]


async def main() -> None:
    async with websockets.connect("ws://localhost:8080/mcp") as websocket:
        for request in REQUESTS:
            await websocket.send(json.dumps(request))
            print(await websocket.recv())


if __name__ == "__main__":
    asyncio.run(main())
