"""Read-only MCP resources describing the configured networks."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, List
from urllib.parse import urlparse

import httpx

from stacks_mcp.config import NetworkType
from stacks_mcp.stacks_api import StacksApiClient, StacksApiError

RESOURCE_SCHEME = "stacks"
MIME_TYPE = "application/json"

NETWORK_DESCRIPTIONS = {
    NetworkType.MAINNET: "Stacks Mainnet",
    NetworkType.TESTNET: "Stacks Testnet",
    NetworkType.MOCKNET: "Stacks Mocknet (Local Development)",
}


class UnknownResourceError(LookupError):
    """Raised when a resource URI does not name a known resource."""


class ResourceReadError(RuntimeError):
    """Raised when a resource exists but its data could not be fetched."""


def list_resources() -> List[Dict[str, str]]:
    return [
        {
            "uri": f"{RESOURCE_SCHEME}://networks",
            "mimeType": MIME_TYPE,
            "name": "Stacks Networks",
            "description": "Available Stacks network configurations",
        },
        {
            "uri": f"{RESOURCE_SCHEME}://network-info/testnet",
            "mimeType": MIME_TYPE,
            "name": "Testnet Info",
            "description": "Current Stacks testnet information",
        },
        {
            "uri": f"{RESOURCE_SCHEME}://network-info/mainnet",
            "mimeType": MIME_TYPE,
            "name": "Mainnet Info",
            "description": "Current Stacks mainnet information",
        },
    ]


def _resource_path(uri: str) -> str:
    # stacks://networks parses "networks" as the host, so join host and path.
    parsed = urlparse(uri)
    if parsed.scheme != RESOURCE_SCHEME:
        raise UnknownResourceError(f"Resource {uri} not found")
    return f"{parsed.netloc}{parsed.path}".strip("/")


def _contents(uri: str, payload: Any) -> Dict[str, Any]:
    return {"contents": [{"uri": uri, "mimeType": MIME_TYPE, "text": json.dumps(payload, indent=2)}]}


async def read_resource(uri: str, *, client: StacksApiClient) -> Dict[str, Any]:
    path = _resource_path(uri)

    if path == "networks":
        return _contents(
            uri,
            {
                "networks": [
                    {
                        "name": profile.network.value,
                        "description": NETWORK_DESCRIPTIONS[profile.network],
                        "url": profile.base_url,
                    }
                    for profile in client.registry.profiles()
                ]
            },
        )

    if path.startswith("network-info/"):
        network = NetworkType.parse(path.split("/", 1)[1])
        if network is None:
            raise UnknownResourceError(f"Resource {path} not found")
        try:
            core_info, network_info = await asyncio.gather(
                client.call(network, "/v2/info"),
                client.call(network, "/extended/v2/network"),
            )
        except (StacksApiError, httpx.HTTPError) as exc:
            raise ResourceReadError(f"Failed to fetch resource: {exc}") from exc
        return _contents(
            uri,
            {"network": network.value, "coreInfo": core_info, "networkInfo": network_info},
        )

    raise UnknownResourceError(f"Resource {path} not found")
