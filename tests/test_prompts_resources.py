import json

import httpx
import pytest

from stacks_mcp.config import StacksConfig, resolve_config
from stacks_mcp.prompts import UnknownPromptError, get_prompt, list_prompts
from stacks_mcp.resources import ResourceReadError, UnknownResourceError, list_resources, read_resource
from stacks_mcp.stacks_api import StacksApiClient


def _client(handler, config=None):
    transport = httpx.MockTransport(handler)
    return StacksApiClient(config or StacksConfig(), async_client=httpx.AsyncClient(transport=transport))


def test_prompt_catalog():
    names = [prompt["name"] for prompt in list_prompts()]
    assert names == ["stacks_overview", "getting_started_guide"]


def test_get_prompt_returns_single_user_message():
    prompt = get_prompt("stacks_overview")
    assert len(prompt["messages"]) == 1
    message = prompt["messages"][0]
    assert message["role"] == "user"
    assert message["content"]["type"] == "text"
    assert "call_read_only_function" in message["content"]["text"]


def test_unknown_prompt():
    with pytest.raises(UnknownPromptError, match="Unknown prompt: nope"):
        get_prompt("nope")


def test_resource_catalog():
    uris = [resource["uri"] for resource in list_resources()]
    assert uris == ["stacks://networks", "stacks://network-info/testnet", "stacks://network-info/mainnet"]


@pytest.mark.asyncio
async def test_networks_resource_reflects_config():
    config = resolve_config({"HIRO_MOCKNET_API_URL": "http://devnet:3999"})
    client = _client(lambda request: httpx.Response(200, json={}), config)
    result = await read_resource("stacks://networks", client=client)
    content = result["contents"][0]
    assert content["uri"] == "stacks://networks"
    assert content["mimeType"] == "application/json"
    networks = json.loads(content["text"])["networks"]
    assert [n["name"] for n in networks] == ["mainnet", "testnet", "mocknet"]
    assert networks[2]["url"] == "http://devnet:3999"


@pytest.mark.asyncio
async def test_network_info_resource_fetches_both_endpoints():
    paths = []

    def handler(request):
        paths.append(request.url.path)
        return httpx.Response(200, json={"path": request.url.path})

    result = await read_resource("stacks://network-info/mainnet", client=_client(handler))
    payload = json.loads(result["contents"][0]["text"])
    assert payload["network"] == "mainnet"
    assert payload["coreInfo"] == {"path": "/v2/info"}
    assert payload["networkInfo"] == {"path": "/extended/v2/network"}
    assert sorted(paths) == ["/extended/v2/network", "/v2/info"]


@pytest.mark.asyncio
async def test_network_info_failure_is_a_read_error():
    client = _client(lambda request: httpx.Response(500, json={"error": "boom"}))
    with pytest.raises(ResourceReadError, match="Failed to fetch resource: API call failed: 500"):
        await read_resource("stacks://network-info/testnet", client=client)


@pytest.mark.asyncio
@pytest.mark.parametrize("uri", ["stacks://unknown", "stacks://network-info/regtest", "http://networks"])
async def test_unknown_resources(uri):
    client = _client(lambda request: httpx.Response(200, json={}))
    with pytest.raises(UnknownResourceError, match="not found"):
        await read_resource(uri, client=client)
