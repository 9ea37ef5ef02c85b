"""mcpws: a minimal Model Context Protocol server over WebSocket."""

from .dispatcher import Dispatcher
from .messages import Envelope, ErrorDetail, Tool
from .server import create_app
from .tools import CATALOG, ToolBox
from .exceptions import MethodNotFound, InvalidParams, InternalError, MalformedMessage, BadConfig

__all__ = [
    "Dispatcher",
    "Envelope",
    "ErrorDetail",
    "Tool",
    "create_app",
    "CATALOG",
    "ToolBox",
    "MethodNotFound",
    "InvalidParams",
    "InternalError",
    "MalformedMessage",
    "BadConfig",
]
