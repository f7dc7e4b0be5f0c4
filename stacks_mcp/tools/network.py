"""Block and network status tools."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Dict, List, Mapping, Optional
from urllib.parse import quote

import httpx

from stacks_mcp.config import NetworkType, StacksConfig
from stacks_mcp.stacks_api import StacksApiClient, StacksApiError
from stacks_mcp.tools.base import ToolDefinition, ToolResult, UnknownToolError, network_schema
from stacks_mcp.tools.validators import is_block_height, require_string, select_network

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "Not available"


@dataclass(frozen=True, slots=True)
class BlockLookupArgs:
    block_id: str
    network: NetworkType

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any], config: StacksConfig) -> "BlockLookupArgs":
        return cls(
            block_id=require_string(arguments, "blockId", "Block ID is required"),
            network=select_network(arguments, config),
        )

    @property
    def is_height(self) -> bool:
        return is_block_height(self.block_id)

    @property
    def path(self) -> str:
        if self.is_height:
            return f"/extended/v2/blocks/by-height/{self.block_id}"
        return f"/extended/v2/blocks/{quote(self.block_id, safe='')}"


def network_tools(config: StacksConfig) -> List[ToolDefinition]:
    return [
        ToolDefinition(
            name="get_block_info",
            description="Get information about a specific block",
            input_schema={
                "type": "object",
                "properties": {
                    "blockId": {
                        "type": "string",
                        "description": "Block hash or height to look up",
                    },
                    "network": network_schema(config),
                },
                "required": ["blockId"],
            },
        ),
        ToolDefinition(
            name="get_network_status",
            description="Get current network status and blockchain information",
            input_schema={
                "type": "object",
                "properties": {
                    "network": network_schema(config),
                },
            },
        ),
    ]


async def optional_subquery(call: Awaitable[Any], *, label: str) -> Optional[Any]:
    """
    Await a sub-call whose failure must not fail the enclosing tool.

    API and transport faults are logged and yield None; anything else propagates.
    """
    try:
        return await call
    except (StacksApiError, httpx.HTTPError) as exc:
        logger.debug("Optional subquery %s unavailable: %s", label, exc)
        return None


async def get_block_info(
    arguments: Mapping[str, Any],
    *,
    client: StacksApiClient,
    config: StacksConfig,
) -> Dict[str, Any]:
    """Look up a block by height (all digits) or by hash (anything else)."""
    args = BlockLookupArgs.from_arguments(arguments, config)
    block = await client.call(args.network, args.path)
    return {"network": args.network.value, "block": block}


async def get_network_status(
    arguments: Mapping[str, Any],
    *,
    client: StacksApiClient,
    config: StacksConfig,
) -> Dict[str, Any]:
    """
    Fetch core info, network info, and PoX parameters concurrently.

    PoX is not served on every network, so it alone falls back to "Not available".
    """
    network = select_network(arguments, config)
    core_info, network_info, pox_info = await asyncio.gather(
        client.call(network, "/v2/info"),
        client.call(network, "/extended/v2/network"),
        optional_subquery(client.call(network, "/v2/pox"), label="pox"),
    )
    return {
        "network": network.value,
        "status": {
            "coreInfo": core_info,
            "networkInfo": network_info,
            "poxInfo": pox_info if pox_info is not None else NOT_AVAILABLE,
        },
    }


async def handle_network_tool(
    tool_name: str,
    arguments: Dict[str, Any],
    *,
    client: StacksApiClient,
    config: StacksConfig,
) -> ToolResult:
    if tool_name == "get_block_info":
        return ToolResult.success(await get_block_info(arguments, client=client, config=config))
    if tool_name == "get_network_status":
        return ToolResult.success(await get_network_status(arguments, client=client, config=config))
    raise UnknownToolError(f"Unknown network tool: {tool_name}")
