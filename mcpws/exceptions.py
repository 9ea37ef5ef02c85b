"""Custom exceptions for mcpws."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar


METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


@dataclass
class MCPWSException(Exception):
    """Base class for mcpws exceptions."""

    message: str
    data: Any = None

    def __str__(self) -> str:  # pragma: no cover - dataclass str wrapper
        return self.message


class ProtocolError(MCPWSException):
    """Raised by request handlers; becomes a JSON-RPC error response."""

    code: ClassVar[int] = INTERNAL_ERROR


class MethodNotFound(ProtocolError):
    """Raised for an unknown method or tool name."""

    code: ClassVar[int] = METHOD_NOT_FOUND


class InvalidParams(ProtocolError):
    """Raised when request parameters are malformed or missing."""

    code: ClassVar[int] = INVALID_PARAMS


class InternalError(ProtocolError):
    """Raised when a tool fails while executing."""

    code: ClassVar[int] = INTERNAL_ERROR


class MalformedMessage(MCPWSException):
    """Raised when an inbound frame is not a valid JSON-RPC envelope."""


class BadConfig(MCPWSException):
    """Raised when a config file cannot be read, parsed or validated."""
