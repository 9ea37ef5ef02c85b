"""Routes JSON-RPC requests to the MCP method handlers."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Callable, Mapping

from pydantic import BaseModel, ValidationError

from .exceptions import InternalError, InvalidParams, MethodNotFound, ProtocolError
from .messages import (
    CallToolParams,
    CallToolResult,
    Envelope,
    ErrorDetail,
    InitializeResult,
    ListToolsResult,
)
from .tools import ToolBox

logger = logging.getLogger("mcpws.dispatcher")

MethodHandler = Callable[[Any], BaseModel]


class Dispatcher:
    """Maps method names to handlers and wraps their outcome in an envelope."""

    def __init__(self, toolbox: ToolBox | None = None) -> None:
        self.toolbox = toolbox or ToolBox()
        self.handlers: Mapping[str, MethodHandler] = MappingProxyType(
            {
                "initialize": self.initialize,
                "tools/list": self.list_tools,
                "tools/call": self.call_tool,
            }
        )

    def dispatch(self, request: Envelope) -> Envelope | None:
        """Handle one inbound envelope.

        Returns ``None`` when no reply is due: for notifications and for
        responses sent by the client.
        """

        if request.is_response:
            logger.debug("Ignoring client response", extra={"fields": {"id": request.id}})
            return None
        response = self.handle(request)
        if request.is_notification:
            return None
        return response

    def handle(self, request: Envelope) -> Envelope:
        """Run the handler for ``request`` and always build the reply envelope."""

        method = request.method or ""
        handler = self.handlers.get(method)
        try:
            if handler is None:
                raise MethodNotFound(message=f"Method not found: {method}")
            return Envelope.success(request, handler(request.params))
        except ProtocolError as exc:
            return Envelope.failure(request, self._error(exc))
        except Exception as exc:
            logger.exception("Handler failed", extra={"fields": {"method": method, "id": request.id}})
            return Envelope.failure(request, self._error(InternalError(message=f"Internal error: {exc}")))

    @staticmethod
    def _error(exc: ProtocolError) -> ErrorDetail:
        return ErrorDetail(code=exc.code, message=exc.message, data=exc.data)

    def initialize(self, params: Any) -> InitializeResult:
        return InitializeResult()

    def list_tools(self, params: Any) -> ListToolsResult:
        return ListToolsResult(tools=list(self.toolbox.catalog))

    def call_tool(self, params: Any) -> CallToolResult:
        if not isinstance(params, dict):
            raise InvalidParams(message="Invalid params")
        try:
            call = CallToolParams.model_validate(params)
        except ValidationError as exc:
            raise InvalidParams(message="Tool name is required") from exc
        return self.toolbox.call(call.name, call.arguments)
