import re

import pytest

from stacks_mcp.config import NetworkType, StacksConfig
from stacks_mcp.tools import ValidationError, generate_account, get_account_balance
from stacks_mcp.tools.accounts import generate_private_key, handle_account_tool
from stacks_mcp.tools.base import UnknownToolError

HEX_KEY = re.compile(r"[0-9a-f]{64}")


class StubClient:
    def __init__(self, response=None):
        self.calls = []
        self.response = response if response is not None else {}

    async def call(self, network, path, *, method="GET", body=None, params=None):
        self.calls.append({"network": network, "path": path, "method": method, "body": body, "params": params})
        return self.response


def test_generated_keys_are_random_hex(config):
    first = generate_account({}, config=config)
    second = generate_account({}, config=config)
    assert HEX_KEY.fullmatch(first["privateKey"])
    assert HEX_KEY.fullmatch(second["privateKey"])
    assert first["privateKey"] != second["privateKey"]


def test_generate_account_shape(config):
    account = generate_account({"network": "mainnet"}, config=config)
    assert account["network"] == "mainnet"
    assert "warning" in account and "note" in account
    assert len(account["nextSteps"]) == 3
    assert "address" not in account


def test_generate_account_uses_configured_default():
    account = generate_account({}, config=StacksConfig(default_network=NetworkType.MOCKNET))
    assert account["network"] == "mocknet"


def test_generate_private_key_length():
    assert len(generate_private_key()) == 64


@pytest.mark.asyncio
async def test_get_account_balance(config):
    stub = StubClient({"stx": {"balance": "1000"}})
    result = await get_account_balance({"address": "SP3ABC", "network": "mainnet"}, client=stub, config=config)
    assert result == {"address": "SP3ABC", "network": "mainnet", "balance": {"stx": {"balance": "1000"}}}
    assert stub.calls[0]["network"] == NetworkType.MAINNET
    assert stub.calls[0]["path"] == "/extended/v1/address/SP3ABC/balances"


@pytest.mark.asyncio
async def test_get_account_balance_invalid_network_falls_back(config):
    stub = StubClient({})
    result = await get_account_balance({"address": "ST1", "network": "regtest"}, client=stub, config=config)
    assert result["network"] == "testnet"
    assert stub.calls[0]["network"] == NetworkType.TESTNET


@pytest.mark.asyncio
async def test_get_account_balance_requires_address(config):
    stub = StubClient()
    with pytest.raises(ValidationError, match="^Address is required$"):
        await get_account_balance({}, client=stub, config=config)
    assert stub.calls == []


@pytest.mark.asyncio
async def test_handler_rejects_foreign_tool(config):
    with pytest.raises(UnknownToolError):
        await handle_account_tool("get_block_info", {}, client=StubClient(), config=config)


@pytest.mark.asyncio
async def test_handler_wraps_payload(config):
    result = await handle_account_tool(
        "get_account_balance", {"address": "ST1"}, client=StubClient({"stx": {}}), config=config
    )
    assert not result.is_error
    assert result.structured["balance"] == {"stx": {}}
    assert '"address": "ST1"' in result.text
