"""Read-only smart contract tools."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Tuple
from urllib.parse import quote

from stacks_mcp.config import NetworkType, StacksConfig
from stacks_mcp.stacks_api import StacksApiClient
from stacks_mcp.tools.base import ToolDefinition, ToolResult, UnknownToolError, network_schema
from stacks_mcp.tools.validators import optional_string, require_string, select_network, string_list

DEFAULT_SENDER = "SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ7"


@dataclass(frozen=True, slots=True)
class ReadOnlyCallArgs:
    contract_address: str
    contract_name: str
    function_name: str
    function_args: Tuple[str, ...]
    sender: str
    network: NetworkType

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any], config: StacksConfig) -> "ReadOnlyCallArgs":
        return cls(
            contract_address=require_string(arguments, "contractAddress", "Contract address is required"),
            contract_name=require_string(arguments, "contractName", "Contract name is required"),
            function_name=require_string(arguments, "functionName", "Function name is required"),
            function_args=tuple(
                string_list(arguments.get("functionArgs"), "Function arguments must be an array of strings")
            ),
            sender=optional_string(arguments, "sender", DEFAULT_SENDER),
            network=select_network(arguments, config),
        )

    @property
    def contract_id(self) -> str:
        return f"{self.contract_address}.{self.contract_name}"


def contract_tools(config: StacksConfig) -> List[ToolDefinition]:
    return [
        ToolDefinition(
            name="call_read_only_function",
            description="Call a read-only function on a Stacks smart contract without creating a transaction",
            input_schema={
                "type": "object",
                "properties": {
                    "contractAddress": {
                        "type": "string",
                        "description": f"The Stacks address of the contract (e.g., '{DEFAULT_SENDER}')",
                    },
                    "contractName": {"type": "string", "description": "The name of the contract"},
                    "functionName": {
                        "type": "string",
                        "description": "The name of the read-only function to call",
                    },
                    "functionArgs": {
                        "type": "array",
                        "description": (
                            "Array of function arguments as hex-encoded Clarity values, "
                            "e.g. ['0x0100000000000000000000000000000001'] for u1"
                        ),
                        "items": {"type": "string"},
                        "default": [],
                    },
                    "sender": {
                        "type": "string",
                        "description": "Optional sender address for the function call context",
                        "default": DEFAULT_SENDER,
                    },
                    "network": network_schema(config),
                },
                "required": ["contractAddress", "contractName", "functionName"],
            },
        ),
    ]


async def call_read_only_function(
    arguments: Mapping[str, Any],
    *,
    client: StacksApiClient,
    config: StacksConfig,
) -> Dict[str, Any]:
    """
    Evaluate a read-only contract function via ``/v2/contracts/call-read``.

    Arguments are validated before any network call. The node's response
    (``okay`` plus a hex-encoded Clarity ``result``, or a ``cause``) is
    returned untouched.
    """
    args = ReadOnlyCallArgs.from_arguments(arguments, config)
    path = (
        f"/v2/contracts/call-read/{quote(args.contract_id, safe='.')}"
        f"/{quote(args.function_name, safe='')}"
    )
    result = await client.call(
        args.network,
        path,
        method="POST",
        body={"sender": args.sender, "arguments": list(args.function_args)},
    )
    return {
        "network": args.network.value,
        "contractId": args.contract_id,
        "functionName": args.function_name,
        "functionArgs": list(args.function_args),
        "sender": args.sender,
        "result": result,
        "success": True,
    }


async def handle_contract_tool(
    tool_name: str,
    arguments: Dict[str, Any],
    *,
    client: StacksApiClient,
    config: StacksConfig,
) -> ToolResult:
    if tool_name == "call_read_only_function":
        return ToolResult.success(await call_read_only_function(arguments, client=client, config=config))
    raise UnknownToolError(f"Unknown contract tool: {tool_name}")
