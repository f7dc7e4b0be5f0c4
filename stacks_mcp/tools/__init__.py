"""LLM-facing tool implementations, grouped by domain."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, List

from stacks_mcp.config import StacksConfig

from .accounts import account_tools, generate_account, get_account_balance, handle_account_tool
from .base import ToolDefinition, ToolError, ToolResult, UnknownToolError, ValidationError
from .contracts import call_read_only_function, contract_tools, handle_contract_tool
from .internal import check_api_status, handle_internal_tool, internal_tools
from .network import get_block_info, get_network_status, handle_network_tool, network_tools
from .transactions import (
    get_transaction_info,
    handle_transaction_tool,
    search_transactions,
    transaction_tools,
)
from . import validators

GroupHandler = Callable[..., Awaitable[ToolResult]]


@dataclass(frozen=True, slots=True)
class ToolGroup:
    name: str
    definitions: Callable[[StacksConfig], List[ToolDefinition]]
    handler: GroupHandler


# Catalog order is the order tools are advertised in.
TOOL_GROUPS = (
    ToolGroup("accounts", account_tools, handle_account_tool),
    ToolGroup("transactions", transaction_tools, handle_transaction_tool),
    ToolGroup("network", network_tools, handle_network_tool),
    ToolGroup("contracts", contract_tools, handle_contract_tool),
    ToolGroup("internal", internal_tools, handle_internal_tool),
)

__all__ = [
    "TOOL_GROUPS",
    "ToolGroup",
    "ToolDefinition",
    "ToolResult",
    "ToolError",
    "ValidationError",
    "UnknownToolError",
    "generate_account",
    "get_account_balance",
    "get_transaction_info",
    "search_transactions",
    "get_block_info",
    "get_network_status",
    "call_read_only_function",
    "check_api_status",
    "validators",
]
