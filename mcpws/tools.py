"""Built-in tool catalog and tool implementations."""

from __future__ import annotations

from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Callable, Mapping

from .exceptions import InternalError, MethodNotFound
from .messages import CallToolResult, Tool

Clock = Callable[[], datetime]
ToolHandler = Callable[[Mapping[str, Any]], CallToolResult]


CATALOG: tuple[Tool, ...] = (
    Tool(
        name="echo",
        description="Echo back the input message",
        input_schema={
            "type": "object",
            "properties": {
                "message": {
                    "type": "string",
                    "description": "The message to echo back",
                },
            },
            "required": ["message"],
        },
    ),
    Tool(
        name="timestamp",
        description="Get the current timestamp",
        input_schema={"type": "object", "properties": {}},
    ),
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Format ``moment`` as an RFC 3339 UTC timestamp, e.g. ``2024-01-15T10:30:00Z``."""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class ToolBox:
    """Executes the tools listed in :data:`CATALOG`."""

    def __init__(self, *, clock: Clock | None = None) -> None:
        self._clock = clock or utc_now
        self._handlers: Mapping[str, ToolHandler] = MappingProxyType(
            {
                "echo": self.echo,
                "timestamp": self.timestamp,
            }
        )

    @property
    def catalog(self) -> tuple[Tool, ...]:
        return CATALOG

    def echo(self, arguments: Mapping[str, Any]) -> CallToolResult:
        message = arguments.get("message")
        if not isinstance(message, str):
            message = ""
        return CallToolResult.text(f"Echo: {message}")

    def timestamp(self, arguments: Mapping[str, Any]) -> CallToolResult:
        return CallToolResult.text(format_timestamp(self._clock()))

    def call(self, name: str, arguments: Mapping[str, Any]) -> CallToolResult:
        handler = self._handlers.get(name)
        if handler is None:
            raise MethodNotFound(message=f"Tool not found: {name}")
        try:
            return handler(arguments)
        except Exception as exc:
            raise InternalError(message=f"Tool execution failed: {exc}") from exc
