"""Shared data structures for mcpws."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class Metrics:
    """Simple counters exposed on the ``/metrics`` endpoint."""

    connections: int = 0
    messages: int = 0
    responses: int = 0
    errors: int = 0
    transport_errors: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "connections": self.connections,
            "messages": self.messages,
            "responses": self.responses,
            "errors": self.errors,
            "transport_errors": self.transport_errors,
        }
