"""
Tool registry and dispatcher for the MCP surface.

The registry advertises a static, ordered catalog of tool definitions and
routes each invocation to the handler group that owns the name. ``invoke`` is
the single boundary where faults become data: it always returns a
``ToolResult`` and never raises.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from stacks_mcp.config import StacksConfig
from stacks_mcp.metrics import MetricsRecorder
from stacks_mcp.stacks_api import StacksApiClient, StacksApiError
from stacks_mcp.tools import TOOL_GROUPS, ToolGroup
from stacks_mcp.tools.base import ToolDefinition, ToolError, ToolHandler, ToolResult

logger = logging.getLogger(__name__)


def _fault_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class ToolRegistry:
    """Name-to-handler mapping over the tool groups."""

    def __init__(
        self,
        client: StacksApiClient,
        config: StacksConfig,
        *,
        groups: Sequence[ToolGroup] = TOOL_GROUPS,
        metrics: Optional[MetricsRecorder] = None,
    ) -> None:
        self.client = client
        self.config = config
        self.metrics = metrics
        self._definitions: List[ToolDefinition] = []
        self._handlers: Dict[str, ToolHandler] = {}
        for group in groups:
            handler = functools.partial(group.handler, client=client, config=config)
            for definition in group.definitions(config):
                if definition.name in self._handlers:
                    raise ValueError(f"Duplicate tool name: {definition.name}")
                self._definitions.append(definition)
                self._handlers[definition.name] = handler

    def list_tools(self) -> List[ToolDefinition]:
        """Return the tool catalog in stable order."""
        return list(self._definitions)

    def tool_names(self) -> List[str]:
        return [definition.name for definition in self._definitions]

    def _record(self, tool_name: str, result: ToolResult) -> None:
        if result.is_error:
            logger.warning(
                "tool=%s outcome=error error=%s",
                tool_name,
                result.text,
                extra={"tool": tool_name, "error": result.text},
            )
        else:
            logger.info("tool=%s outcome=success", tool_name, extra={"tool": tool_name})
        if self.metrics is not None:
            self.metrics.record_tool(tool_name, success=not result.is_error)

    async def invoke(self, tool_name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResult:
        """Dispatch to a tool by name, converting every fault into a failure result."""
        handler = self._handlers.get(tool_name)
        if handler is None:
            result = ToolResult.failure(f"Unknown tool: {tool_name}")
        elif arguments is not None and not isinstance(arguments, dict):
            result = ToolResult.failure("Tool arguments must be an object")
        else:
            try:
                result = await handler(tool_name, arguments or {})
            except (ToolError, StacksApiError, httpx.HTTPError) as exc:
                result = ToolResult.failure(_fault_message(exc))
            except Exception as exc:
                logger.exception("Unexpected error while calling tool %s", tool_name)
                result = ToolResult.failure(_fault_message(exc))
        self._record(tool_name, result)
        return result
