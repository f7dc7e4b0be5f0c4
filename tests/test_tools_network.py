import httpx
import pytest

from stacks_mcp.config import NetworkType
from stacks_mcp.stacks_api import ApiTimeoutError, RemoteStatusError
from stacks_mcp.tools import ValidationError, get_block_info, get_network_status
from stacks_mcp.tools.network import NOT_AVAILABLE, BlockLookupArgs, optional_subquery


class StubClient:
    def __init__(self, responses=None, failures=None):
        self.calls = []
        self.responses = responses or {}
        self.failures = failures or {}

    async def call(self, network, path, *, method="GET", body=None, params=None):
        self.calls.append({"network": network, "path": path})
        if path in self.failures:
            raise self.failures[path]
        return self.responses.get(path, {})


@pytest.mark.asyncio
async def test_block_lookup_by_height(config):
    stub = StubClient({"/extended/v2/blocks/by-height/12345": {"height": 12345}})
    result = await get_block_info({"blockId": "12345"}, client=stub, config=config)
    assert result == {"network": "testnet", "block": {"height": 12345}}
    assert stub.calls == [{"network": NetworkType.TESTNET, "path": "/extended/v2/blocks/by-height/12345"}]


@pytest.mark.asyncio
async def test_block_lookup_by_hash(config):
    stub = StubClient()
    await get_block_info({"blockId": "0xabc123", "network": "mainnet"}, client=stub, config=config)
    assert stub.calls == [{"network": NetworkType.MAINNET, "path": "/extended/v2/blocks/0xabc123"}]


@pytest.mark.asyncio
async def test_numeric_block_id_is_treated_as_height(config):
    stub = StubClient()
    await get_block_info({"blockId": 7}, client=stub, config=config)
    assert stub.calls[0]["path"] == "/extended/v2/blocks/by-height/7"


@pytest.mark.asyncio
async def test_block_lookup_requires_id(config):
    with pytest.raises(ValidationError, match="^Block ID is required$"):
        await get_block_info({}, client=StubClient(), config=config)


def test_block_args_path(config):
    args = BlockLookupArgs.from_arguments({"blockId": "abc/def"}, config)
    assert not args.is_height
    assert args.path == "/extended/v2/blocks/abc%2Fdef"


@pytest.mark.asyncio
async def test_network_status_combines_three_calls(config):
    stub = StubClient(
        {
            "/v2/info": {"burn_block_height": 100},
            "/extended/v2/network": {"network_id": 1},
            "/v2/pox": {"reward_cycle_id": 9},
        }
    )
    result = await get_network_status({"network": "mainnet"}, client=stub, config=config)
    assert result == {
        "network": "mainnet",
        "status": {
            "coreInfo": {"burn_block_height": 100},
            "networkInfo": {"network_id": 1},
            "poxInfo": {"reward_cycle_id": 9},
        },
    }
    assert sorted(call["path"] for call in stub.calls) == ["/extended/v2/network", "/v2/info", "/v2/pox"]


@pytest.mark.asyncio
async def test_pox_failure_reports_not_available(config):
    stub = StubClient(
        {"/v2/info": {"ok": 1}, "/extended/v2/network": {"ok": 2}},
        failures={"/v2/pox": RemoteStatusError("API call failed: 500 Internal Server Error", status_code=500)},
    )
    result = await get_network_status({}, client=stub, config=config)
    assert result["status"]["poxInfo"] == NOT_AVAILABLE
    assert result["status"]["coreInfo"] == {"ok": 1}


@pytest.mark.asyncio
async def test_core_info_failure_fails_the_tool(config):
    stub = StubClient(failures={"/v2/info": ApiTimeoutError(30000, "https://api.testnet.hiro.so/v2/info")})
    with pytest.raises(ApiTimeoutError):
        await get_network_status({}, client=stub, config=config)


@pytest.mark.asyncio
async def test_optional_subquery_swallows_only_api_faults():
    async def transport_failure():
        raise httpx.ConnectError("refused")

    async def bug():
        raise KeyError("oops")

    assert await optional_subquery(transport_failure(), label="pox") is None
    with pytest.raises(KeyError):
        await optional_subquery(bug(), label="pox")
