"""Minimal live sanity checks for the Stacks MCP tools."""

from __future__ import annotations

import asyncio
import os
import sys

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from stacks_mcp.config import resolve_config  # noqa: E402
from stacks_mcp.mcp import ToolRegistry  # noqa: E402
from stacks_mcp.stacks_api import StacksApiClient  # noqa: E402

# Default to the well-known placeholder sender; override via env.
SAMPLE_ADDRESS = os.getenv("STACKS_SAMPLE_ADDRESS", "SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ7")
SAMPLE_NETWORK = os.getenv("STACKS_SAMPLE_NETWORK", "mainnet")


async def main() -> None:
    config = resolve_config()
    client = StacksApiClient(config)
    tools = ToolRegistry(client, config)
    try:
        print("API status:", (await tools.invoke("check_api_status", {})).text)
        print("Network status:", (await tools.invoke("get_network_status", {"network": SAMPLE_NETWORK})).text[:500])
        print("Block 1:", (await tools.invoke("get_block_info", {"blockId": "1", "network": SAMPLE_NETWORK})).text[:500])
        balance = await tools.invoke("get_account_balance", {"address": SAMPLE_ADDRESS, "network": SAMPLE_NETWORK})
        print("Balance:", balance.text[:500])
        txs = await tools.invoke(
            "search_transactions", {"address": SAMPLE_ADDRESS, "limit": 3, "network": SAMPLE_NETWORK}
        )
        print("Transactions (limit 3):", txs.text[:500])
    finally:
        await client.aclose()


if __name__ == "__main__":
    asyncio.run(main())
