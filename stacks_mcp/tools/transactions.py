"""Transaction lookup and search tools."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping
from urllib.parse import quote

from stacks_mcp.config import NetworkType, StacksConfig
from stacks_mcp.stacks_api import StacksApiClient
from stacks_mcp.tools.base import ToolDefinition, ToolResult, UnknownToolError, network_schema
from stacks_mcp.tools.validators import clamp_limit, require_string, select_network

DEFAULT_TX_SEARCH_LIMIT = 10
# Hiro caps address transaction pages at 50 entries.
MAX_TX_SEARCH_LIMIT = 50
MAX_TX_SEARCH_OFFSET = 1_000_000


@dataclass(frozen=True, slots=True)
class TransactionLookupArgs:
    tx_id: str
    network: NetworkType

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any], config: StacksConfig) -> "TransactionLookupArgs":
        return cls(
            tx_id=require_string(arguments, "txId", "Transaction ID is required"),
            network=select_network(arguments, config),
        )


@dataclass(frozen=True, slots=True)
class TransactionSearchArgs:
    address: str
    limit: int
    offset: int
    network: NetworkType

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any], config: StacksConfig) -> "TransactionSearchArgs":
        return cls(
            address=require_string(arguments, "address", "Address is required"),
            limit=clamp_limit(
                arguments.get("limit"),
                default=DEFAULT_TX_SEARCH_LIMIT,
                max_value=MAX_TX_SEARCH_LIMIT,
                minimum=1,
            ),
            offset=clamp_limit(arguments.get("offset"), default=0, max_value=MAX_TX_SEARCH_OFFSET),
            network=select_network(arguments, config),
        )


def transaction_tools(config: StacksConfig) -> List[ToolDefinition]:
    return [
        ToolDefinition(
            name="get_transaction_info",
            description="Get information about a transaction by ID",
            input_schema={
                "type": "object",
                "properties": {
                    "txId": {"type": "string", "description": "Transaction ID to look up"},
                    "network": network_schema(config),
                },
                "required": ["txId"],
            },
        ),
        ToolDefinition(
            name="search_transactions",
            description="Search for transactions by address",
            input_schema={
                "type": "object",
                "properties": {
                    "address": {
                        "type": "string",
                        "description": "Address to search transactions for",
                    },
                    "limit": {
                        "type": "number",
                        "description": f"Maximum number of transactions to return (1-{MAX_TX_SEARCH_LIMIT})",
                        "default": DEFAULT_TX_SEARCH_LIMIT,
                    },
                    "offset": {
                        "type": "number",
                        "description": "Number of transactions to skip for pagination",
                        "default": 0,
                    },
                    "network": network_schema(config),
                },
                "required": ["address"],
            },
        ),
    ]


async def get_transaction_info(
    arguments: Mapping[str, Any],
    *,
    client: StacksApiClient,
    config: StacksConfig,
) -> Dict[str, Any]:
    args = TransactionLookupArgs.from_arguments(arguments, config)
    transaction = await client.call(args.network, f"/extended/v1/tx/{quote(args.tx_id, safe='')}")
    return {"network": args.network.value, "transaction": transaction}


async def search_transactions(
    arguments: Mapping[str, Any],
    *,
    client: StacksApiClient,
    config: StacksConfig,
) -> Dict[str, Any]:
    """Return one page of an address's transaction history."""
    args = TransactionSearchArgs.from_arguments(arguments, config)
    params: Dict[str, Any] = {"limit": args.limit}
    if args.offset:
        params["offset"] = args.offset
    transactions = await client.call(
        args.network,
        f"/extended/v1/address/{quote(args.address, safe='')}/transactions",
        params=params,
    )
    return {
        "network": args.network.value,
        "address": args.address,
        "transactions": transactions,
    }


async def handle_transaction_tool(
    tool_name: str,
    arguments: Dict[str, Any],
    *,
    client: StacksApiClient,
    config: StacksConfig,
) -> ToolResult:
    if tool_name == "get_transaction_info":
        return ToolResult.success(await get_transaction_info(arguments, client=client, config=config))
    if tool_name == "search_transactions":
        return ToolResult.success(await search_transactions(arguments, client=client, config=config))
    raise UnknownToolError(f"Unknown transaction tool: {tool_name}")
