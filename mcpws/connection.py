"""Per-connection message loop and the registry of open connections."""

from __future__ import annotations

import asyncio
import logging
import uuid

from fastapi import WebSocket, WebSocketDisconnect, status

from .dispatcher import Dispatcher
from .exceptions import MalformedMessage
from .messages import Envelope
from .types import Metrics

logger = logging.getLogger("mcpws.connection")


class ConnectionRegistry:
    """Tracks open WebSocket connections for health reporting."""

    def __init__(self) -> None:
        self._connections: dict[str, WebSocket] = {}
        self._lock = asyncio.Lock()

    async def add(self, websocket: WebSocket) -> str:
        connection_id = uuid.uuid4().hex
        async with self._lock:
            self._connections[connection_id] = websocket
        return connection_id

    async def remove(self, connection_id: str) -> None:
        async with self._lock:
            self._connections.pop(connection_id, None)

    async def count(self) -> int:
        async with self._lock:
            return len(self._connections)


class ConnectionHandler:
    def __init__(self, dispatcher: Dispatcher, registry: ConnectionRegistry, metrics: Metrics) -> None:
        self.dispatcher = dispatcher
        self.registry = registry
        self.metrics = metrics

    async def handle(self, websocket: WebSocket) -> None:
        await websocket.accept()
        connection_id = await self.registry.add(websocket)
        self.metrics.connections += 1
        log_fields = {"connection": connection_id}
        logger.info("Client connected", extra={"fields": log_fields})
        try:
            await self._serve(websocket, connection_id)
        except WebSocketDisconnect:
            return
        except Exception:
            self.metrics.transport_errors += 1
            logger.exception("Connection failed", extra={"fields": log_fields})
            raise
        finally:
            await self.registry.remove(connection_id)
            logger.info("Client disconnected", extra={"fields": log_fields})

    async def _serve(self, websocket: WebSocket, connection_id: str) -> None:
        while True:
            raw = await self._receive(websocket)
            try:
                request = Envelope.from_wire(raw)
            except MalformedMessage as exc:
                logger.error(
                    "Failed to read message",
                    extra={"fields": {"connection": connection_id, "reason": exc.message}},
                )
                await websocket.close(code=status.WS_1007_INVALID_FRAME_PAYLOAD_DATA)
                return
            self.metrics.messages += 1
            logger.info(
                "Received message",
                extra={"fields": {"connection": connection_id, "method": request.method, "id": request.id}},
            )
            response = self.dispatcher.dispatch(request)
            if response is None:
                continue
            if response.error is not None:
                self.metrics.errors += 1
            await websocket.send_text(response.to_wire())
            self.metrics.responses += 1

    @staticmethod
    async def _receive(websocket: WebSocket) -> str | bytes:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            raise WebSocketDisconnect(code=message.get("code", status.WS_1000_NORMAL_CLOSURE), reason=message.get("reason"))
        text = message.get("text")
        if text is not None:
            return text
        return message.get("bytes") or b""
