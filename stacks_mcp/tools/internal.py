"""Diagnostics for the server's own API configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

import httpx

from stacks_mcp.config import NetworkType, StacksConfig
from stacks_mcp.stacks_api import StacksApiClient, StacksApiError
from stacks_mcp.tools.base import ToolDefinition, ToolResult, UnknownToolError

logger = logging.getLogger(__name__)

API_KEY_SETUP_URL = "https://www.hiro.so/"
PROBE_PATH = "/v2/info"


@dataclass(frozen=True, slots=True)
class ApiStatusArgs:
    include_limits: bool

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any]) -> "ApiStatusArgs":
        # Only an explicit false suppresses the live probe.
        return cls(include_limits=arguments.get("include_limits") is not False)


def internal_tools(config: StacksConfig) -> List[ToolDefinition]:
    return [
        ToolDefinition(
            name="check_api_status",
            description="Check API key status and configuration",
            input_schema={
                "type": "object",
                "properties": {
                    "include_limits": {
                        "type": "boolean",
                        "description": (
                            f"Probe the {config.default_network.value} API and include rate limit "
                            "information if available"
                        ),
                        "default": True,
                    }
                },
            },
        ),
    ]


def _configuration_summary(client: StacksApiClient, config: StacksConfig) -> Dict[str, Any]:
    return {
        "apiKey": {
            "configured": bool(config.api_key),
            "status": "Active (enhanced rate limits)" if config.api_key else "Not configured (free tier)",
            "setupUrl": API_KEY_SETUP_URL,
        },
        "configuration": {
            "mainnetUrl": config.base_url_for(NetworkType.MAINNET),
            "testnetUrl": config.base_url_for(NetworkType.TESTNET),
            "mocknetUrl": config.base_url_for(NetworkType.MOCKNET),
            "timeout": f"{config.timeout_ms}ms",
            "debug": config.debug,
            "defaultNetwork": config.default_network.value,
        },
        "networks": [profile.network.value for profile in client.registry.profiles()],
    }


async def _probe_rate_limits(client: StacksApiClient, config: StacksConfig) -> Dict[str, Any]:
    try:
        probe = await client.probe(config.default_network, PROBE_PATH)
    except (StacksApiError, httpx.HTTPError) as exc:
        logger.warning("API status probe failed: %s", exc)
        return {
            "testResult": f"Connection failed: {str(exc) or type(exc).__name__}",
            "note": "Check your internet connection and API endpoints",
        }
    return {
        "testResult": "API accessible" if probe.ok else f"Error: {probe.status_code}",
        **probe.rate_limits.as_dict(),
    }


async def check_api_status(
    arguments: Mapping[str, Any],
    *,
    client: StacksApiClient,
    config: StacksConfig,
) -> Dict[str, Any]:
    """
    Report API key and endpoint configuration.

    Unless ``include_limits`` is false, one probe request is sent to the default
    network's info endpoint under the client's configured timeout; its failure
    is reported in ``rateLimits`` rather than raised.
    """
    args = ApiStatusArgs.from_arguments(arguments)
    status = _configuration_summary(client, config)
    if args.include_limits:
        status["rateLimits"] = await _probe_rate_limits(client, config)
    return status


async def handle_internal_tool(
    tool_name: str,
    arguments: Dict[str, Any],
    *,
    client: StacksApiClient,
    config: StacksConfig,
) -> ToolResult:
    if tool_name == "check_api_status":
        return ToolResult.success(await check_api_status(arguments, client=client, config=config))
    raise UnknownToolError(f"Unknown internal tool: {tool_name}")
