"""JSON-RPC envelope and MCP payload models."""

from __future__ import annotations

import json
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
    model_validator,
)

from .exceptions import MalformedMessage

JSONRPC_VERSION = "2.0"
PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "mcpws"
SERVER_VERSION = "1.0.0"

RequestId = Union[StrictInt, Annotated[StrictFloat, Field(allow_inf_nan=False)], StrictStr]


class ErrorDetail(BaseModel):
    code: int
    message: str
    data: Any = None


class Envelope(BaseModel):
    """A JSON-RPC 2.0 request, notification or response.

    ``id`` and ``result`` are tracked through ``model_fields_set`` so that an
    explicit ``null`` stays distinguishable from a missing member: a missing
    id marks a notification, ``"result": null`` is still a result.
    """

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: Optional[RequestId] = None
    method: Optional[str] = None
    params: Any = None
    result: Any = None
    error: Optional[ErrorDetail] = None

    @model_validator(mode="after")
    def check_outcome(self) -> "Envelope":
        if self.has_result and self.error is not None:
            raise ValueError("response must not carry both result and error")
        return self

    @property
    def has_result(self) -> bool:
        return "result" in self.model_fields_set

    @property
    def is_notification(self) -> bool:
        return "id" not in self.model_fields_set

    @property
    def is_response(self) -> bool:
        return self.method is None and (self.has_result or self.error is not None)

    @classmethod
    def from_wire(cls, raw: str | bytes) -> "Envelope":
        """Parse one inbound frame."""

        try:
            return cls.model_validate_json(raw)
        except ValidationError as exc:
            raise MalformedMessage(message=f"Invalid message: {exc}") from exc

    def to_wire(self) -> str:
        payload = self.model_dump(mode="json", exclude_none=True)
        if "id" in self.model_fields_set:
            payload.setdefault("id", None)
        if self.has_result:
            payload.setdefault("result", None)
        return json.dumps(payload)

    @classmethod
    def success(cls, request: "Envelope", result: Any) -> "Envelope":
        if isinstance(result, BaseModel):
            result = result.model_dump(mode="json", by_alias=True)
        return cls(id=request.id, result=result)

    @classmethod
    def failure(cls, request: "Envelope", error: ErrorDetail) -> "Envelope":
        return cls(id=request.id, error=error)


class Tool(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    input_schema: dict[str, Any] = Field(alias="inputSchema")


class ServerInfo(BaseModel):
    name: str = SERVER_NAME
    version: str = SERVER_VERSION


class InitializeResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    protocol_version: str = Field(default=PROTOCOL_VERSION, alias="protocolVersion")
    capabilities: dict[str, Any] = Field(default_factory=lambda: {"tools": {}})
    server_info: ServerInfo = Field(default_factory=ServerInfo, alias="serverInfo")


class ListToolsResult(BaseModel):
    tools: list[Tool]


class CallToolParams(BaseModel):
    name: StrictStr
    arguments: dict[str, Any] = Field(default_factory=dict)

    @field_validator("arguments", mode="before")
    @classmethod
    def coerce_arguments(cls, value: Any) -> Any:
        # Anything other than an object is treated as "no arguments".
        if not isinstance(value, dict):
            return {}
        return value


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class CallToolResult(BaseModel):
    content: list[TextContent]

    @classmethod
    def text(cls, text: str) -> "CallToolResult":
        return cls(content=[TextContent(text=text)])
