"""Account-related tools."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping
from urllib.parse import quote

from stacks_mcp.config import NetworkType, StacksConfig
from stacks_mcp.stacks_api import StacksApiClient
from stacks_mcp.tools.base import ToolDefinition, ToolResult, UnknownToolError, network_schema
from stacks_mcp.tools.validators import require_string, select_network

logger = logging.getLogger(__name__)

PRIVATE_KEY_BYTES = 32
KEY_WARNING = (
    "This is a simplified account generation. For production use, please use proper "
    "Stacks.js key generation functions."
)
KEY_NOTE = "Keep your private key secure! Never share it with anyone."
NEXT_STEPS = [
    "Use proper Stacks.js libraries to derive public key and address from this private key",
    "Fund the account on testnet using the testnet faucet",
    "Use get_account_balance to check the balance",
]


@dataclass(frozen=True, slots=True)
class GenerateAccountArgs:
    network: NetworkType

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any], config: StacksConfig) -> "GenerateAccountArgs":
        return cls(network=select_network(arguments, config))


@dataclass(frozen=True, slots=True)
class BalanceArgs:
    address: str
    network: NetworkType

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any], config: StacksConfig) -> "BalanceArgs":
        return cls(
            address=require_string(arguments, "address", "Address is required"),
            network=select_network(arguments, config),
        )


def account_tools(config: StacksConfig) -> List[ToolDefinition]:
    return [
        ToolDefinition(
            name="generate_account",
            description="Generate a new Stacks account with private key and basic info",
            input_schema={
                "type": "object",
                "properties": {
                    "network": network_schema(config, "Network type for address generation"),
                },
            },
        ),
        ToolDefinition(
            name="get_account_balance",
            description="Get STX balance and account information for a Stacks address",
            input_schema={
                "type": "object",
                "properties": {
                    "address": {
                        "type": "string",
                        "description": "Stacks address to check balance for",
                    },
                    "network": network_schema(config),
                },
                "required": ["address"],
            },
        ),
    ]


def generate_private_key() -> str:
    """Return 32 random bytes as lowercase hex. No address or public key is derived."""
    return secrets.token_hex(PRIVATE_KEY_BYTES)


def generate_account(arguments: Mapping[str, Any], *, config: StacksConfig) -> Dict[str, Any]:
    args = GenerateAccountArgs.from_arguments(arguments, config)
    logger.debug("Generating private key for network %s", args.network.value)
    return {
        "network": args.network.value,
        "privateKey": generate_private_key(),
        "warning": KEY_WARNING,
        "note": KEY_NOTE,
        "nextSteps": list(NEXT_STEPS),
    }


async def get_account_balance(
    arguments: Mapping[str, Any],
    *,
    client: StacksApiClient,
    config: StacksConfig,
) -> Dict[str, Any]:
    """
    Fetch STX and token balances for an address.

    Returns:
        Dict with the echoed address and network and the raw balance payload.
    """
    args = BalanceArgs.from_arguments(arguments, config)
    encoded = quote(args.address, safe="")
    balance = await client.call(args.network, f"/extended/v1/address/{encoded}/balances")
    return {
        "address": args.address,
        "network": args.network.value,
        "balance": balance,
    }


async def handle_account_tool(
    tool_name: str,
    arguments: Dict[str, Any],
    *,
    client: StacksApiClient,
    config: StacksConfig,
) -> ToolResult:
    if tool_name == "generate_account":
        return ToolResult.success(generate_account(arguments, config=config))
    if tool_name == "get_account_balance":
        return ToolResult.success(await get_account_balance(arguments, client=client, config=config))
    raise UnknownToolError(f"Unknown account tool: {tool_name}")
