"""Shared tool types: definitions, results, and tool-level faults."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from stacks_mcp.config import NetworkType, StacksConfig


class ToolError(Exception):
    """Base class for faults raised by tool handlers."""


class ValidationError(ToolError):
    """Raised when a required tool argument is missing or malformed."""


class UnknownToolError(ToolError):
    """Raised when an invocation names a tool nobody handles."""


@dataclass(frozen=True, slots=True)
class ToolDefinition:
    name: str
    description: str
    input_schema: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass(frozen=True, slots=True)
class ToolResult:
    """Outcome of a tool invocation; failures are data, never exceptions."""

    content: List[Dict[str, Any]] = field(default_factory=list)
    is_error: bool = False
    structured: Optional[Any] = None

    @classmethod
    def success(cls, payload: Any) -> "ToolResult":
        text = payload if isinstance(payload, str) else json.dumps(payload, indent=2)
        return cls(content=[{"type": "text", "text": text}], structured=payload)

    @classmethod
    def failure(cls, message: str) -> "ToolResult":
        return cls(content=[{"type": "text", "text": f"Error: {message}"}], is_error=True)

    @property
    def text(self) -> str:
        return "\n".join(block.get("text", "") for block in self.content if block.get("type") == "text")

    def to_dict(self) -> Dict[str, Any]:
        wrapped: Dict[str, Any] = {"content": list(self.content)}
        if self.is_error:
            wrapped["isError"] = True
        elif self.structured is not None and not isinstance(self.structured, str):
            wrapped["structuredContent"] = self.structured
        return wrapped


ToolHandler = Callable[[str, Dict[str, Any]], Awaitable[ToolResult]]


def network_schema(config: StacksConfig, description: str = "Network to query") -> Dict[str, Any]:
    return {
        "type": "string",
        "enum": [network.value for network in NetworkType],
        "description": description,
        "default": config.default_network.value,
    }
