"""Configuration loading and validation for mcpws."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import BadConfig


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)
    static_dir: str = "static"
    shutdown_grace_sec: float = Field(default=30.0, ge=0)


class LoggingSettings(BaseModel):
    level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = "INFO"
    output: Literal["stderr", "file"] = "stderr"
    file_path: str = "mcpws.log"
    rotate_bytes: int = Field(default=10_485_760, gt=0)

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, value: Any) -> Any:
        # Only the levels uvicorn also understands are accepted.
        if isinstance(value, str):
            return value.upper()
        return value


class Config(BaseModel):
    server: ServerSettings = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise BadConfig(message=str(exc)) from exc


def load_config(path: str | Path) -> Config:
    """Load server configuration from a YAML file."""

    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise BadConfig(message=f"Failed to read config: {exc}") from exc
    try:
        data = yaml.safe_load(raw) or {}
    except yaml.YAMLError as exc:
        raise BadConfig(message=f"Failed to parse config YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise BadConfig(message="Config root must be a mapping")
    return Config.from_dict(data)
